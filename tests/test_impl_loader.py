"""Tests for ImplLoader discovery and loading of .impl.py files."""

import sys
import textwrap

import pytest

import pyrequire
from pyrequire.runtime.impl_loader import ImplLoader


@pytest.fixture
def cleanup_modules():
    names = []
    yield names
    for name in names:
        sys.modules.pop(name, None)


class TestDiscover:

    def test_finds_only_impl_files(self, tmp_path):
        (tmp_path / "foo.impl.py").write_text("pass\n")
        (tmp_path / "bar.impl.py").write_text("pass\n")
        (tmp_path / "normal.py").write_text("pass\n")

        names = [p.name for p in ImplLoader().discover(tmp_path)]
        assert names == ["bar.impl.py", "foo.impl.py"]

    def test_recursive(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "deep.impl.py").write_text("pass\n")

        names = [p.name for p in ImplLoader().discover(tmp_path)]
        assert names == ["deep.impl.py"]

    def test_nonexistent_dir(self, tmp_path):
        assert ImplLoader().discover(tmp_path / "nonexistent") == []


class TestModuleName:

    def test_simple_name(self, tmp_path):
        name = ImplLoader().module_name(tmp_path / "foo.impl.py", tmp_path, "pkg")
        assert name == "pkg.foo"

    def test_nested_name(self, tmp_path):
        name = ImplLoader().module_name(tmp_path / "sub" / "bar.impl.py", tmp_path, "pkg")
        assert name == "pkg.sub.bar"

    def test_empty_base_package(self, tmp_path):
        name = ImplLoader().module_name(tmp_path / "mod.impl.py", tmp_path, "")
        assert name == "mod"


class TestLoadFile:

    def test_executes_source(self, tmp_path, cleanup_modules):
        impl_file = tmp_path / "calc.impl.py"
        impl_file.write_text("result = 2 + 3\n")
        cleanup_modules.append("test_impl.calc")

        mod = ImplLoader().load_file(impl_file, tmp_path, "test_impl")
        assert mod.__name__ == "test_impl.calc"
        assert mod.result == 5
        assert sys.modules["test_impl.calc"] is mod

    def test_failed_module_not_registered(self, tmp_path):
        impl_file = tmp_path / "bad.impl.py"
        impl_file.write_text("raise RuntimeError('nope')\n")

        with pytest.raises(RuntimeError):
            ImplLoader().load_file(impl_file, tmp_path, "test_impl")
        assert "test_impl.bad" not in sys.modules

    def test_registers_and_replaces_impls(self, tmp_path, cleanup_modules):
        decl = tmp_path / "greeter_decl.py"
        decl.write_text(
            textwrap.dedent(
                """
                import pyrequire

                class Greeter(pyrequire.Object):
                    def greet(self) -> str:
                        ...
                """
            )
        )
        sys.path.insert(0, str(tmp_path))
        cleanup_modules.extend(["greeter_decl", "test_impl.greeter"])
        try:
            impl_file = tmp_path / "greeter.impl.py"
            impl_source = textwrap.dedent(
                """
                import pyrequire
                from greeter_decl import Greeter

                @pyrequire.impl(Greeter.greet)
                def greet(self):
                    return {word!r}
                """
            )
            impl_file.write_text(impl_source.format(word="hello"))

            loader = ImplLoader()
            loader.load_file(impl_file, tmp_path, "test_impl")
            from greeter_decl import Greeter

            assert Greeter().greet() == "hello"

            impl_file.write_text(impl_source.format(word="again"))
            loader.load_file(impl_file, tmp_path, "test_impl")
            assert Greeter().greet() == "again"
        finally:
            sys.path.remove(str(tmp_path))


class TestBuiltins:

    def test_builtins_registered(self):
        assert "pyrequire.builtins.loader" in sys.modules
        assert "pyrequire.builtins.resolver" in sys.modules

    def test_builtins_discovered(self):
        import pathlib

        builtins_dir = pathlib.Path(pyrequire.__file__).parent / "builtins"
        names = [p.name for p in ImplLoader().discover(builtins_dir)]
        assert names == ["loader.impl.py", "resolver.impl.py"]
