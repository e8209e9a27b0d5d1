"""pyrequire.main -- Assembling loaders and installing require/load."""

from __future__ import annotations

import builtins
import json
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pyrequire.features import LoadedFeatures
from pyrequire.loader import Loader
from pyrequire.namespace import new_namespace
from pyrequire.resolver import Resolver
from pyrequire.runtime.impl_loader import ImplLoader


_builtins_loaded = False

_active_loader: Loader | None = None
_saved_bindings: dict[str, Any] = {}

_CONFIG_FILE = "pyrequire.json"
_MISSING = object()


def load_builtins() -> None:
    """Load all builtin .impl.py files. Safe to call multiple times."""
    global _builtins_loaded
    if _builtins_loaded:
        return
    builtins_dir = Path(__file__).parent / "builtins"
    ImplLoader().load_all(builtins_dir, "pyrequire.builtins")
    _builtins_loaded = True


def load_config() -> dict[str, list[str]]:
    """Load configuration from pyrequire.json (fallback) then environment variables (override).

    pyrequire.json format:
        { "env": { "PYREQUIRE_PATH": "...", ... } }

    Returns:
        Dict with keys: load_path, preload.
    """
    file_env: dict[str, str] = {}
    config_path = Path(_CONFIG_FILE)
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
            env = data.get("env", {})
        except (json.JSONDecodeError, AttributeError):
            pass
        else:
            if isinstance(env, dict):
                file_env = {k: v for k, v in env.items() if isinstance(v, str)}

    def _get(var_name: str, default: str = "") -> str:
        """Env var > pyrequire.json > default."""
        return os.environ.get(var_name) or file_env.get(var_name) or default

    load_path = [entry for entry in _get("PYREQUIRE_PATH").split(os.pathsep) if entry]
    lib_root = _get("PYREQUIRE_LIB_ROOT")
    if lib_root:
        load_path.append(lib_root)

    preload = [name.strip() for name in _get("PYREQUIRE_PRELOAD").split(",") if name.strip()]

    return {"load_path": load_path, "preload": preload}


def create_loader(
    load_path: Iterable[str | os.PathLike[str]] | None = None,
    preload: Iterable[str] = (),
    features: LoadedFeatures | None = None,
) -> Loader:
    """Create a Loader with its Resolver and ledger wired up.

    Args:
        load_path: Directories to search. Defaults to the configured path.
        preload: Library names required, in order, before returning.
        features: Ledger to record into; a new one is created if omitted.

    Returns:
        A ready-to-use Loader.
    """
    load_builtins()

    if load_path is None:
        load_path = load_config()["load_path"]
    if features is None:
        features = LoadedFeatures()

    resolver = Resolver(
        load_path=[os.fspath(entry) for entry in load_path],
        features=features,
    )
    loader = Loader(
        resolver=resolver,
        features=features,
        main=new_namespace("__main__"),
        libraries={},
    )

    for name in preload:
        loader.require(name)

    return loader


def install(loader: Loader | None = None) -> Loader:
    """Expose ``require`` and ``load`` as builtins bound to *loader*.

    Without an explicit loader one is created from ``load_config()``,
    including its preload list. Installing again replaces the active loader.
    """
    global _active_loader
    if loader is None:
        config = load_config()
        loader = create_loader(config["load_path"], config["preload"])

    for name in ("require", "load"):
        if name not in _saved_bindings:
            _saved_bindings[name] = getattr(builtins, name, _MISSING)
    builtins.require = loader.require
    builtins.load = loader.load
    _active_loader = loader
    return loader


def uninstall() -> None:
    """Restore whatever ``require``/``load`` builtins existed before install()."""
    global _active_loader
    for name, previous in _saved_bindings.items():
        if previous is _MISSING:
            if hasattr(builtins, name):
                delattr(builtins, name)
        else:
            setattr(builtins, name, previous)
    _saved_bindings.clear()
    _active_loader = None


def active_loader() -> Loader | None:
    """Return the loader bound by install(), if any."""
    return _active_loader


def loaded_features() -> LoadedFeatures:
    """Return the ledger of the installed loader.

    Raises:
        RuntimeError: If no loader is installed.
    """
    if _active_loader is None:
        raise RuntimeError("pyrequire is not installed; call pyrequire.install() first")
    return _active_loader.features
