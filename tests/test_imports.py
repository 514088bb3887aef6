"""Tests for the import table and package resolution."""

import pytest

from benchheuristics.analysis.imports import (
    BUILTIN_PACKAGE,
    ImportTable,
    PackageResolver,
    package_of,
    resolve,
)
from benchheuristics.parser.base import ImportDeclaration


@pytest.mark.parametrize("qualified, expected", [
    ("java.util.List", "java.util"),
    ("java.util.Map.Entry", "java.util"),
    ("org.junit.Assert.assertEquals", "org.junit"),
    ("io.reactivex.rxjava3.plugins.RxJavaPlugins", "io.reactivex.rxjava3.plugins"),
    ("lowercase.only.name", "lowercase.only"),
])
def test_package_of(qualified, expected):
    assert package_of(qualified) == expected


class TestImportTable:
    """Tests for ImportTable."""

    def setup_method(self):
        self.table = ImportTable.from_imports([
            ImportDeclaration("java.util.concurrent.atomic.AtomicLong"),
            ImportDeclaration("java.util.Map.Entry"),
            ImportDeclaration("com.acme.Thread"),
            ImportDeclaration("java.util", is_wildcard=True),
            ImportDeclaration("java.io", is_wildcard=True),
            ImportDeclaration("org.junit.Assert.assertEquals", is_static=True),
            ImportDeclaration("org.mockito.Mockito", is_wildcard=True, is_static=True),
        ])

    def test_single_type_imports(self):
        assert self.table.lookup_type("AtomicLong") == "java.util.concurrent.atomic"
        assert self.table.lookup_type("Entry") == "java.util"

    def test_implicit_java_lang(self):
        assert self.table.lookup_type("String") == BUILTIN_PACKAGE
        assert self.table.lookup_type("Integer") == BUILTIN_PACKAGE

    def test_explicit_import_overrides_java_lang(self):
        assert self.table.lookup_type("Thread") == "com.acme"

    def test_wildcards_keep_declaration_order(self):
        assert self.table.type_wildcards == ("java.util", "java.io")
        assert self.table.wildcard_package == "java.util"
        assert self.table.member_wildcard_package == "org.mockito"

    def test_static_imports(self):
        assert self.table.lookup_member("assertEquals") == "org.junit"
        assert self.table.lookup_member("assertTrue") is None
        assert self.table.lookup_type("assertEquals") is None

    def test_is_immutable(self):
        with pytest.raises(TypeError):
            self.table.types["Foo"] = "bar"


class TestResolve:
    """Tests for the resolution order of resolve()."""

    def test_exact_import_first(self):
        table = ImportTable.from_imports([
            ImportDeclaration("com.acme.util.Strings"),
            ImportDeclaration("com.other", is_wildcard=True),
        ])
        assert resolve("Strings", table, "com.acme.app", {"Strings"}) == "com.acme.util"

    def test_same_file_before_wildcard(self):
        table = ImportTable.from_imports([ImportDeclaration("com.other", is_wildcard=True)])
        assert resolve("Widget", table, "com.acme.app", {"Widget"}) == "com.acme.app"
        assert resolve("Gadget", table, "com.acme.app", {"Widget"}) == "com.other"
        assert resolve("String", table, "com.acme.app") == BUILTIN_PACKAGE

    def test_same_file_declaration(self):
        table = ImportTable.from_imports([])
        assert resolve("Helper", table, "com.acme.app", {"Helper"}) == "com.acme.app"

    def test_fallback(self):
        table = ImportTable.from_imports([])
        assert resolve("Unknown", table, "com.acme.app") == BUILTIN_PACKAGE
        assert resolve("Unknown", table, "com.acme.app", fallback="unresolved") == "unresolved"

    def test_qualified_names(self):
        table = ImportTable.from_imports([ImportDeclaration("java.util.Map")])
        assert resolve("java.util.concurrent.Callable", table, "a") == "java.util.concurrent"
        assert resolve("Map.Entry", table, "a") == "java.util"


class TestPackageResolver:
    """Tests for PackageResolver."""

    def setup_method(self):
        table = ImportTable.from_imports([
            ImportDeclaration("org.junit.Assert.assertEquals", is_static=True),
            ImportDeclaration("com.acme.base.BaseTest"),
        ])
        self.resolver = PackageResolver(
            table,
            "com.acme.app",
            declared_types={"Helper"},
            declared_methods={"helper"},
        )

    def test_resolve_type(self):
        assert self.resolver.resolve_type("Helper") == "com.acme.app"
        assert self.resolver.resolve_type("BaseTest") == "com.acme.base"
        assert self.resolver.resolve_type(None) == BUILTIN_PACKAGE

    def test_unqualified_call_static_import(self):
        assert self.resolver.resolve_unqualified_call("assertEquals") == "org.junit"

    def test_unqualified_call_same_file(self):
        assert self.resolver.resolve_unqualified_call("helper", "BaseTest") == "com.acme.app"

    def test_unqualified_call_inherited(self):
        assert self.resolver.resolve_unqualified_call("setUp", "BaseTest") == "com.acme.base"

    def test_unqualified_call_fallback(self):
        assert self.resolver.resolve_unqualified_call("hashCode") == BUILTIN_PACKAGE

    def test_static_wildcard(self):
        table = ImportTable.from_imports([
            ImportDeclaration("org.mockito.Mockito", is_wildcard=True, is_static=True),
        ])
        resolver = PackageResolver(table, "com.acme.app")
        assert resolver.resolve_unqualified_call("mock") == "org.mockito"

    def test_same_file_method_before_static_wildcard(self):
        table = ImportTable.from_imports([
            ImportDeclaration("org.junit.Assert", is_wildcard=True, is_static=True),
        ])
        resolver = PackageResolver(table, "com.acme.app", declared_methods={"helper"})
        assert resolver.resolve_unqualified_call("helper") == "com.acme.app"
        assert resolver.resolve_unqualified_call("assertTrue") == "org.junit"
