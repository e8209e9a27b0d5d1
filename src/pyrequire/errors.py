"""pyrequire.errors -- Exceptions raised while resolving libraries."""

from __future__ import annotations

import os


class LoadError(ImportError):
    """Raised when a library name cannot be resolved or read.

    The message follows the ``"<reason> -- <path>"`` shape, and the
    offending name is kept on ``.path`` (the standard ``ImportError``
    attribute).
    """

    def __init__(self, reason: str, path: str | os.PathLike[str]) -> None:
        path = os.fspath(path)
        super().__init__(f"{reason} -- {path}", path=path)
        self.reason = reason

    def __reduce__(self):
        return type(self), (self.reason, self.path)
