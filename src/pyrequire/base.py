"""pyrequire base module - Object base class for declarations."""

from __future__ import annotations

from forwardpy import Object as _ForwardpyObject


class Object(_ForwardpyObject):
    """pyrequire unified base class.

    Declarations (``Loader``, ``Resolver``) inherit from this and keep only
    attributes and stub methods; implementations are registered from the
    ``builtins/*.impl.py`` files with ``@pyrequire.impl``.
    """

    pass
