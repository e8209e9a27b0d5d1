"""pyrequire.features -- The ledger of required libraries."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class LoadedFeatures:
    """Ordered, append-only record of canonical paths that were required.

    One instance is shared by a ``Resolver`` and its ``Loader`` for as long as
    the loader lives. Paths appear in first-successful-completion order and
    never twice.
    """

    def __init__(self, paths: Iterable[str] = ()) -> None:
        self._paths: list[str] = []
        self._seen: set[str] = set()
        for path in paths:
            self.append(path)

    def append(self, path: str) -> bool:
        """Record *path*. Returns False if it was already recorded."""
        if path in self._seen:
            return False
        self._seen.add(path)
        self._paths.append(path)
        return True

    def snapshot(self) -> list[str]:
        """Return a copy of the recorded paths."""
        return list(self._paths)

    def __contains__(self, path: object) -> bool:
        return path in self._seen

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._paths))

    def __len__(self) -> int:
        return len(self._paths)

    def __getitem__(self, index: int) -> str:
        return self._paths[index]

    def __repr__(self) -> str:
        return f"LoadedFeatures({self._paths!r})"
