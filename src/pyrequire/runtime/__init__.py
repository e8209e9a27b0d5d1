"""pyrequire.runtime - Infrastructure layer (ImplLoader)."""

from pyrequire.runtime.impl_loader import ImplLoader

__all__ = ["ImplLoader"]
