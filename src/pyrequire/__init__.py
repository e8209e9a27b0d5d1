"""pyrequire - Cycle-safe require/load primitives for Python scripts."""

__version__ = "0.0.1"

from pyrequire.base import Object
from pyrequire.errors import LoadError
from forwardpy import impl

from pyrequire.main import create_loader, install, loaded_features, uninstall

__all__ = [
    "Object",
    "LoadError",
    "impl",
    "create_loader",
    "install",
    "uninstall",
    "loaded_features",
]
