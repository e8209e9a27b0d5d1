"""pyrequire.runtime.impl_loader -- Discover and load .impl.py files."""

from __future__ import annotations

import logging
import sys
import types
from pathlib import Path

from forwardpy import unregister_module_impls

LOGGER = logging.getLogger(__name__)

IMPL_SUFFIX = ".impl.py"


class ImplLoader:
    """Discovers and loads ``.impl.py`` implementation files.

    Implementation files contain ``@pyrequire.impl`` registrations for the
    stub methods declared on ``Loader`` and ``Resolver``. Loading a file
    whose module is already registered replaces that module's
    implementations instead of failing on a duplicate registration.
    """

    def discover(self, package_path: str | Path) -> list[Path]:
        """Return the sorted ``.impl.py`` files under *package_path*."""
        root = Path(package_path)
        if not root.is_dir():
            return []
        return sorted(root.rglob("*" + IMPL_SUFFIX))

    def load_file(
        self,
        impl_path: str | Path,
        package_root: str | Path,
        base_package: str,
    ) -> types.ModuleType:
        """Execute a single ``.impl.py`` file as a module.

        Args:
            impl_path: Path to the ``.impl.py`` file.
            package_root: Directory the dotted module name is computed from.
            base_package: Dotted prefix, e.g. ``"pyrequire.builtins"``.

        Returns:
            The loaded module object.
        """
        impl_path = Path(impl_path)
        module_name = self.module_name(impl_path, Path(package_root), base_package)
        source = impl_path.read_text(encoding="utf-8")

        if module_name in sys.modules:
            removed = unregister_module_impls(module_name)
            LOGGER.debug("Replacing %d implementations from '%s'", removed, module_name)

        return self._exec_module(module_name, source, str(impl_path))

    def load_all(
        self,
        package_path: str | Path,
        base_package: str,
    ) -> list[types.ModuleType]:
        """Discover and load every ``.impl.py`` file under *package_path*."""
        package_path = Path(package_path)
        return [
            self.load_file(impl_path, package_path, base_package)
            for impl_path in self.discover(package_path)
        ]

    def module_name(
        self,
        impl_path: Path,
        package_root: Path,
        base_package: str,
    ) -> str:
        """Convert a file path to a dotted module name.

        ``package_root/sub/foo.impl.py`` with ``base_package="pkg"``
        becomes ``"pkg.sub.foo"``.
        """
        rel = impl_path.relative_to(package_root)
        parts = list(rel.parent.parts)
        parts.append(rel.name[: -len(IMPL_SUFFIX)])
        if base_package:
            return base_package + "." + ".".join(parts)
        return ".".join(parts)

    def _exec_module(
        self,
        module_name: str,
        source: str,
        filename: str,
    ) -> types.ModuleType:
        module = types.ModuleType(module_name)
        module.__file__ = filename
        module.__package__ = module_name.rpartition(".")[0] or module_name
        sys.modules[module_name] = module

        code = compile(source, filename, "exec")
        try:
            exec(code, module.__dict__)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise
        LOGGER.debug("Loaded implementations from %s", filename)
        return module
