"""Tests for namespaces and wrap normalisation."""

import types

from pyrequire.namespace import Namespace, Wrap, WrapKind, new_namespace, normalize_wrap


class TestNewNamespace:

    def test_is_module(self):
        namespace = new_namespace("lib")
        assert isinstance(namespace, types.ModuleType)
        assert isinstance(namespace, Namespace)
        assert namespace.__name__ == "lib"

    def test_anonymous_names_are_unique(self):
        assert new_namespace().__name__ != new_namespace().__name__

    def test_filename(self):
        namespace = new_namespace("lib", "/lib/lib.py")
        assert namespace.__file__ == "/lib/lib.py"
        assert "/lib/lib.py" in repr(namespace)


class TestWrap:

    def test_falsy_values(self):
        for value in (False, None, 0, ""):
            assert Wrap.from_value(value).kind is WrapKind.NONE
            assert normalize_wrap(value) is None

    def test_module_used_as_is(self):
        module = types.ModuleType("existing")
        wrap = Wrap.from_value(module)
        assert wrap.kind is WrapKind.EXISTING
        assert normalize_wrap(module) is module

    def test_true_requests_fresh(self):
        wrap = Wrap.from_value(True)
        assert wrap.kind is WrapKind.FRESH
        assert isinstance(wrap.resolve(), Namespace)

    def test_class_requests_fresh(self):
        class NotAModule:
            pass

        assert Wrap.from_value(NotAModule).kind is WrapKind.FRESH
        assert normalize_wrap(NotAModule) is not NotAModule

    def test_module_type_itself_is_a_class(self):
        assert Wrap.from_value(types.ModuleType).kind is WrapKind.FRESH

    def test_fresh_namespaces_differ(self):
        wrap = Wrap.from_value(1)
        assert wrap.resolve() is not wrap.resolve()
