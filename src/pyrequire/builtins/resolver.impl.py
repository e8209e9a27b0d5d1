"""pyrequire.builtins.resolver -- File-system Resolver implementation."""

from __future__ import annotations

import importlib.machinery
import importlib.util
import logging
import marshal
import os
import sys
import types

import pyrequire
from pyrequire.errors import LoadError
from pyrequire.resolver import LibraryBody, LoadUnit, Resolver

LOGGER = logging.getLogger(__name__)

_SOURCE_SUFFIX = ".py"
_BYTECODE_SUFFIX = ".pyc"
_PYC_HEADER_SIZE = 16


def _coerce_path(path: object) -> str:
    if isinstance(path, (str, os.PathLike)):
        name = os.fspath(path)
        if isinstance(name, str):
            return name
    raise TypeError(f"can't convert {type(path).__name__} into str")


def _completions(name: str, complete: bool) -> list[str]:
    basename = name.replace("\\", "/").rpartition("/")[2]
    if complete and "." not in basename:
        return [_SOURCE_SUFFIX, _BYTECODE_SUFFIX, *importlib.machinery.EXTENSION_SUFFIXES]
    return [""]


def _search_dirs(resolver: Resolver, name: str) -> list[str]:
    if os.path.isabs(name):
        return [""]
    if name.startswith("."):
        return ["."]
    return list(resolver.load_path)


def _is_native(filepath: str) -> bool:
    return any(filepath.endswith(suffix) for suffix in importlib.machinery.EXTENSION_SUFFIXES)


def _native_module_name(filepath: str) -> str:
    """``/x/my-ext.cpython-312-x86_64-linux-gnu.so`` becomes ``my_ext``."""
    stem = os.path.basename(filepath).split(".", 1)[0]
    return stem.replace("-", "_")


@pyrequire.impl(Resolver.resolve)
def resolve(
    self: Resolver,
    path: str | os.PathLike[str],
    for_require: bool,
    namespace: types.ModuleType | None = None,
) -> tuple[LoadUnit, str]:
    filepath = self.find_file(path, for_require)
    if for_require and filepath in self.features:
        return False, filepath
    return self.read_library(filepath, namespace), filepath


@pyrequire.impl(Resolver.find_file)
def find_file(self: Resolver, path: str | os.PathLike[str], complete: bool) -> str:
    name = _coerce_path(path)
    for directory in _search_dirs(self, name):
        for suffix in _completions(name, complete):
            candidate = os.path.realpath(os.path.join(directory, name + suffix))
            if os.path.isfile(candidate) and os.access(candidate, os.R_OK):
                LOGGER.debug("Resolved '%s' to %s", name, candidate)
                return candidate
    raise LoadError("cannot load such file", name)


@pyrequire.impl(Resolver.read_library)
def read_library(
    self: Resolver,
    filepath: str,
    namespace: types.ModuleType | None = None,
) -> LoadUnit:
    if filepath.endswith(_BYTECODE_SUFFIX):
        code = _read_bytecode(filepath)
    elif _is_native(filepath):
        return _load_native(filepath)
    else:
        code = _read_source(filepath)
    return LibraryBody(code=code, filename=filepath, namespace=namespace)


def _read_source(filepath: str) -> types.CodeType:
    try:
        with open(filepath, "rb") as handle:
            source = handle.read()
    except OSError as exc:
        raise LoadError("cannot load such file", filepath) from exc
    return compile(source, filepath, "exec", dont_inherit=True)


def _read_bytecode(filepath: str) -> types.CodeType:
    try:
        with open(filepath, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise LoadError("cannot load such file", filepath) from exc

    if data[:4] != importlib.util.MAGIC_NUMBER or len(data) < _PYC_HEADER_SIZE:
        raise LoadError("incompatible bytecode", filepath)
    try:
        code = marshal.loads(data[_PYC_HEADER_SIZE:])
    except (EOFError, ValueError, TypeError) as exc:
        raise LoadError("incompatible bytecode", filepath) from exc
    if not isinstance(code, types.CodeType):
        raise LoadError("incompatible bytecode", filepath)
    return code


def _load_native(filepath: str) -> bool:
    name = _native_module_name(filepath)
    existing = sys.modules.get(name)
    if existing is not None:
        if getattr(existing, "__file__", None) == filepath:
            return True
        raise LoadError("conflicting module name", filepath)

    loader = importlib.machinery.ExtensionFileLoader(name, filepath)
    spec = importlib.util.spec_from_file_location(name, filepath, loader=loader)
    if spec is None:
        raise LoadError("cannot load such file", filepath)
    try:
        module = importlib.util.module_from_spec(spec)
    except ImportError as exc:
        raise LoadError("cannot load such file", filepath) from exc

    sys.modules[name] = module
    try:
        loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    LOGGER.debug("Loaded native extension '%s' from %s", name, filepath)
    return True
