"""Shared fixtures: builtin implementations, library directories, loaders."""

import sys
import textwrap
import types

import pytest

from pyrequire.main import create_loader, load_builtins

load_builtins()


@pytest.fixture
def lib_dir(tmp_path):
    path = tmp_path / "lib"
    path.mkdir()
    return path


@pytest.fixture
def write_lib(lib_dir):
    """Write a library file under lib_dir and return its resolved path."""

    def _write(name, source, directory=None):
        path = (directory or lib_dir) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path.resolve()

    return _write


@pytest.fixture
def loader(lib_dir):
    return create_loader(load_path=[lib_dir])


@pytest.fixture
def trace(monkeypatch):
    """A module library bodies can import to report what they saw."""
    module = types.ModuleType("_pyrequire_trace")
    module.events = []
    module.fail = False
    monkeypatch.setitem(sys.modules, "_pyrequire_trace", module)
    return module
