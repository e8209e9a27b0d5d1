"""pyrequire.loader -- The require/load service."""

from __future__ import annotations

import os
from typing import Any

import pyrequire
from pyrequire.features import LoadedFeatures
from pyrequire.namespace import Namespace
from pyrequire.resolver import Resolver


class Loader(pyrequire.Object):
    """At-most-once ``require`` and always-rerun ``load`` over a Resolver.

    Attributes:
        resolver: Resolves names to load units.
        features: Ledger of required canonical paths, shared with the resolver.
        main: Top-level namespace used by ``load`` without ``wrap``.
        libraries: Namespace of each successfully required library, keyed by
            canonical path.
    """

    resolver: Resolver
    features: LoadedFeatures
    main: Namespace
    libraries: dict[str, Namespace]

    def require(self, path: str | os.PathLike[str]) -> bool:
        """Evaluate a library once per canonical path.

        Returns:
            True if the library was evaluated now (or loaded natively),
            False if it is already loaded or is currently being required
            further up the stack.

        Raises:
            LoadError: If the name cannot be resolved.
        """
        ...

    def load(self, path: str | os.PathLike[str], wrap: Any = False) -> bool:
        """Evaluate a file unconditionally.

        Args:
            path: File name; no extension completion takes place.
            wrap: False/None evaluates into ``main``; a module evaluates into
                that module; any other truthy value evaluates into a fresh
                namespace.

        Returns:
            Always True.
        """
        ...

    def lookup(self, path: str | os.PathLike[str]) -> Namespace:
        """Return the namespace a required library was evaluated in.

        Raises:
            LoadError: If the name cannot be resolved.
            KeyError: If the library has not been required.
        """
        ...

    @property
    def loading(self) -> tuple[str, ...]:
        """Canonical paths currently being required, outermost first."""
        ...
