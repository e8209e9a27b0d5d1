"""pyrequire.builtins.loader -- require/load implementation."""

from __future__ import annotations

import builtins
import logging
import os
from typing import Any

import forwardpy

import pyrequire
from pyrequire.loader import Loader
from pyrequire.namespace import Namespace, new_namespace, normalize_wrap
from pyrequire.resolver import LibraryBody

LOGGER = logging.getLogger(__name__)

_MISSING = object()


class ScopeBuiltins(dict):
    """Builtins mapping that pins a loader's require/load over the live
    ``builtins`` module."""

    def __init__(self, pinned: dict[str, Any]) -> None:
        super().__init__()
        self._pinned = pinned
        self.refresh()

    def refresh(self) -> None:
        """Pick up names bound on ``builtins`` since the last evaluation."""
        self.update(builtins.__dict__)
        self.update(self._pinned)

    def __missing__(self, key: str) -> Any:
        # Lookups of __import__ and friends bypass __missing__, so refresh()
        # still has to copy everything in before each evaluation.
        try:
            return builtins.__dict__[key]
        except KeyError:
            raise KeyError(key) from None


class LoaderState(forwardpy.Extension[Loader]):
    """Per-loader private state: the in-flight stack and scope builtins."""

    _loading: list[str]
    _builtins: ScopeBuiltins | None

    def __extension_init__(self) -> None:
        self._loading = []
        self._builtins = None


def _scope_builtins(loader: Loader) -> ScopeBuiltins:
    """Builtins mapping that exposes this loader's require/load to bodies."""
    state = LoaderState.of(loader)
    if state._builtins is None:
        state._builtins = ScopeBuiltins({"require": loader.require, "load": loader.load})
    else:
        state._builtins.refresh()
    return state._builtins


def _library_name(filepath: str) -> str:
    return os.path.basename(filepath).split(".", 1)[0]


def _run(loader: Loader, lib: LibraryBody, scope: dict[str, Any]) -> None:
    """Evaluate *lib* in *scope* with this loader's builtins swapped in."""
    previous = scope.get("__builtins__", _MISSING)
    scope["__builtins__"] = _scope_builtins(loader)
    LOGGER.debug("Evaluating %s", lib.filename)
    try:
        lib(scope)
    finally:
        if previous is _MISSING:
            scope.pop("__builtins__", None)
        else:
            scope["__builtins__"] = previous


@pyrequire.impl(Loader.require)
def require(self: Loader, path: str | os.PathLike[str]) -> bool:
    lib, feature = self.resolver.resolve(path, True, None)
    if not callable(lib):
        if lib:
            self.features.append(feature)
        return lib

    in_flight = LoaderState.of(self)._loading
    if feature in in_flight:
        LOGGER.debug("Skipping cyclic require of %s", feature)
        return False

    in_flight.append(feature)
    try:
        scope = new_namespace(_library_name(feature), feature)
        _run(self, lib, scope.__dict__)
        self.features.append(feature)
        self.libraries[feature] = scope
        LOGGER.debug("Required %s", feature)
        return True
    finally:
        try:
            in_flight.pop()
        except IndexError:
            pass


@pyrequire.impl(Loader.load)
def load(self: Loader, path: str | os.PathLike[str], wrap: Any = False) -> bool:
    namespace = normalize_wrap(wrap)
    lib, _ = self.resolver.resolve(path, False, namespace)
    if not callable(lib):
        # native extensions run their init during resolution
        return True
    target = lib.namespace if lib.namespace is not None else self.main
    _run(self, lib, target.__dict__)
    return True


@pyrequire.impl(Loader.lookup)
def lookup(self: Loader, path: str | os.PathLike[str]) -> Namespace:
    feature = self.resolver.find_file(path, True)
    try:
        return self.libraries[feature]
    except KeyError as exc:
        raise KeyError(
            f"Library '{os.fspath(path)}' has not been required"
        ) from exc


@pyrequire.impl(Loader.loading.getter)
def loading(self: Loader) -> tuple[str, ...]:
    return tuple(LoaderState.of(self)._loading)
