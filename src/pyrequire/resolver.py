"""pyrequire.resolver -- Turning library names into loadable units."""

from __future__ import annotations

import os
import types
from dataclasses import dataclass
from typing import Any, Union

import pyrequire
from pyrequire.features import LoadedFeatures


@dataclass
class LibraryBody:
    """Compiled code of one library, ready to be evaluated.

    Attributes:
        code: The module-level code object.
        filename: Canonical path the code was read from.
        namespace: Namespace requested by ``load(..., wrap=...)``, or None
            for the loader's default scope.
    """

    code: types.CodeType
    filename: str
    namespace: types.ModuleType | None = None

    def __call__(self, scope: dict[str, Any]) -> None:
        exec(self.code, scope)


# A body to evaluate, or a bool for results settled without evaluation:
# True for a native extension that was just loaded, False for a library
# that is already in the ledger.
LoadUnit = Union[LibraryBody, bool]


class Resolver(pyrequire.Object):
    """Finds library files on a load path and reads them into load units.

    Attributes:
        load_path: Directories searched in order.
        features: Ledger consulted so that an already-required library
            resolves to ``False`` without being read again.
    """

    load_path: list[str]
    features: LoadedFeatures

    def resolve(
        self,
        path: str | os.PathLike[str],
        for_require: bool,
        namespace: types.ModuleType | None = None,
    ) -> tuple[LoadUnit, str]:
        """Resolve a library name to a load unit and its canonical path.

        Args:
            path: Library name, relative to the load path, ``./``-relative,
                or absolute.
            for_require: Complete missing file extensions and short-circuit
                on libraries already in ``features``.
            namespace: Target namespace recorded on the returned body.

        Returns:
            ``(unit, canonical_path)``.

        Raises:
            LoadError: If no matching file exists or it cannot be read.
            TypeError: If *path* is not a string or path-like.
        """
        ...

    def find_file(self, path: str | os.PathLike[str], complete: bool) -> str:
        """Search the load path and return the realpath of the first match.

        Raises:
            LoadError: If no candidate is a readable regular file.
        """
        ...

    def read_library(
        self,
        filepath: str,
        namespace: types.ModuleType | None = None,
    ) -> LoadUnit:
        """Read a resolved file: compile source, unmarshal bytecode, or
        initialise a native extension."""
        ...
