"""pyrequire.namespace -- Evaluation scopes and ``wrap`` normalisation."""

from __future__ import annotations

import enum
import itertools
import types
from dataclasses import dataclass
from typing import Any

_anonymous = itertools.count(1)


class Namespace(types.ModuleType):
    """A module-like scope that library bodies are evaluated into."""

    def __repr__(self) -> str:
        filename = self.__dict__.get("__file__")
        if filename:
            return f"<namespace {self.__name__!r} from {filename!r}>"
        return f"<namespace {self.__name__!r}>"


def new_namespace(name: str | None = None, filename: str | None = None) -> Namespace:
    """Allocate an empty namespace.

    Unnamed namespaces get a unique ``<namespace N>`` name.
    """
    if name is None:
        name = f"<namespace {next(_anonymous)}>"
    namespace = Namespace(name)
    if filename is not None:
        namespace.__file__ = filename
    return namespace


class WrapKind(enum.Enum):
    NONE = "none"
    EXISTING = "existing"
    FRESH = "fresh"


@dataclass(frozen=True)
class Wrap:
    """The three ways ``load`` can treat its ``wrap`` argument."""

    kind: WrapKind
    namespace: types.ModuleType | None = None

    @classmethod
    def from_value(cls, wrap: Any) -> Wrap:
        """Classify a caller-supplied ``wrap`` value.

        Falsy values mean no isolation. A module object (classes never are)
        is used as given. Anything else truthy requests a fresh namespace.
        """
        if not wrap:
            return cls(WrapKind.NONE)
        if isinstance(wrap, types.ModuleType):
            return cls(WrapKind.EXISTING, wrap)
        return cls(WrapKind.FRESH)

    def resolve(self) -> types.ModuleType | None:
        """Return the namespace to evaluate into, allocating one for FRESH."""
        if self.kind is WrapKind.FRESH:
            return new_namespace()
        return self.namespace


def normalize_wrap(wrap: Any) -> types.ModuleType | None:
    """Shortcut for ``Wrap.from_value(wrap).resolve()``."""
    return Wrap.from_value(wrap).resolve()
