"""Import table and package resolution.

Attributes a referenced symbol to the package that declares it, using only
what is lexically visible in one file: its import declarations, its own
package and the implicit ``java.lang`` bindings. No classpath is consulted.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from benchheuristics.parser.base import ImportDeclaration

BUILTIN_PACKAGE = "java.lang"

# Simple names bound without an import in every Java file
JAVA_LANG_TYPES = frozenset({
    "AbstractMethodError", "Appendable", "ArithmeticException",
    "ArrayIndexOutOfBoundsException", "ArrayStoreException", "AssertionError",
    "AutoCloseable", "Boolean", "Byte", "CharSequence", "Character", "Class",
    "ClassCastException", "ClassLoader", "ClassNotFoundException", "CloneNotSupportedException",
    "Cloneable", "Comparable", "Deprecated", "Double", "Enum", "Error", "Exception",
    "ExceptionInInitializerError", "Float", "FunctionalInterface", "IllegalAccessException",
    "IllegalArgumentException", "IllegalMonitorStateException", "IllegalStateException",
    "IndexOutOfBoundsException", "InheritableThreadLocal", "InstantiationException",
    "Integer", "InternalError", "InterruptedException", "Iterable", "LinkageError", "Long",
    "Math", "NegativeArraySizeException", "NoSuchFieldException", "NoSuchMethodException",
    "NullPointerException", "Number", "NumberFormatException", "Object", "OutOfMemoryError",
    "Override", "Process", "ProcessBuilder", "Record", "ReflectiveOperationException",
    "Runnable", "Runtime", "RuntimeException", "SafeVarargs", "SecurityException", "Short",
    "StackOverflowError", "StackTraceElement", "StrictMath", "String", "StringBuffer",
    "StringBuilder", "StringIndexOutOfBoundsException", "SuppressWarnings", "System",
    "Thread", "ThreadGroup", "ThreadLocal", "Throwable", "TypeNotPresentException",
    "UnsupportedOperationException", "VirtualMachineError", "Void",
})


def package_of(qualified_name: str) -> str:
    """
    Return the package part of a qualified name.

    The package ends before the first capitalised segment, so member and
    nested-type names are dropped as well as the type itself:

        >>> package_of("java.util.Map.Entry")
        'java.util'
        >>> package_of("org.junit.Assert.assertEquals")
        'org.junit'
    """
    parts = qualified_name.split(".")
    package = []
    for part in parts:
        if part[:1].isupper():
            break
        package.append(part)
    else:
        # No type segment at all: treat the last segment as the symbol
        package = parts[:-1]
    return ".".join(package)


@dataclass(frozen=True)
class ImportTable:
    """Immutable mapping from simple names to owning packages for one file."""

    types: Mapping[str, str] = field(default_factory=dict)
    members: Mapping[str, str] = field(default_factory=dict)
    type_wildcards: tuple[str, ...] = ()
    member_wildcards: tuple[str, ...] = ()

    @classmethod
    def from_imports(cls, imports: Iterable[ImportDeclaration]) -> "ImportTable":
        """Build the table from a file's import declarations plus java.lang bindings."""
        types = {name: BUILTIN_PACKAGE for name in JAVA_LANG_TYPES}
        members: dict[str, str] = {}
        type_wildcards: list[str] = []
        member_wildcards: list[str] = []

        for imp in imports:
            if not imp.qualified_name:
                continue
            if imp.is_wildcard:
                target = member_wildcards if imp.is_static else type_wildcards
                # "a.b.*" names package a.b, "a.b.Outer.*" the package of Outer
                last = imp.qualified_name.rsplit(".", 1)[-1]
                if last[:1].isupper():
                    package = package_of(imp.qualified_name)
                else:
                    package = imp.qualified_name
                if package not in target:
                    target.append(package)
            elif imp.is_static:
                members[imp.simple_name] = package_of(imp.qualified_name)
            else:
                types[imp.simple_name] = package_of(imp.qualified_name)

        return cls(
            types=MappingProxyType(types),
            members=MappingProxyType(members),
            type_wildcards=tuple(type_wildcards),
            member_wildcards=tuple(member_wildcards),
        )

    def lookup_type(self, simple_name: str) -> Optional[str]:
        """Package bound to a type name by a single-type import or java.lang."""
        return self.types.get(simple_name)

    def lookup_member(self, simple_name: str) -> Optional[str]:
        """Package bound to a static member name by a single static import."""
        return self.members.get(simple_name)

    @property
    def wildcard_package(self) -> Optional[str]:
        """First on-demand type import in declaration order."""
        return self.type_wildcards[0] if self.type_wildcards else None

    @property
    def member_wildcard_package(self) -> Optional[str]:
        return self.member_wildcards[0] if self.member_wildcards else None


def resolve(
    symbol_name: str,
    import_table: ImportTable,
    current_package: str,
    declared_types: Iterable[str] = (),
    fallback: str = BUILTIN_PACKAGE,
) -> str:
    """
    Resolve a type name to the package that declares it.

    Resolution order:
        1. Exact import (explicit single-type import, or implicit java.lang)
        2. A type declared in this file -> current package
        3. First wildcard import
        4. The fallback package

    Qualified names are handled first: ``java.util.List`` is attributed to
    ``java.util`` directly, ``Map.Entry`` is resolved through ``Map``.

    Args:
        symbol_name: Simple or dotted type name as written in the source
        import_table: The file's import table
        current_package: Package declared by the file ("" for the default package)
        declared_types: Simple names of the types declared in the file
        fallback: Package for names nothing else binds

    Returns:
        The owning package name
    """
    if "." in symbol_name:
        head = symbol_name.split(".", 1)[0]
        if not head[:1].isupper():
            return package_of(symbol_name)
        symbol_name = head

    package = import_table.lookup_type(symbol_name)
    if package is not None:
        return package

    if symbol_name in declared_types:
        return current_package

    wildcard = import_table.wildcard_package
    if wildcard is not None:
        return wildcard

    return fallback


class PackageResolver:
    """
    Resolves symbols against one file's scope.

    Binds the import table, current package and declared names so that call
    sites only pass the symbol:

        resolver = PackageResolver(table, "com.example", {"Helper"})
        resolver.resolve_type("Helper")        # "com.example"
        resolver.resolve_type("AtomicLong")    # "java.util.concurrent.atomic" if imported
    """

    def __init__(
        self,
        import_table: ImportTable,
        current_package: str,
        declared_types: Iterable[str] = (),
        declared_methods: Iterable[str] = (),
        fallback: str = BUILTIN_PACKAGE,
    ):
        self.import_table = import_table
        self.current_package = current_package
        self.declared_types = frozenset(declared_types)
        self.declared_methods = frozenset(declared_methods)
        self.fallback = fallback

    def resolve_type(self, symbol_name: Optional[str]) -> str:
        """Owning package of a type name; None resolves to the fallback."""
        if not symbol_name:
            return self.fallback
        return resolve(
            symbol_name,
            self.import_table,
            self.current_package,
            self.declared_types,
            self.fallback,
        )

    def resolve_unqualified_call(self, method_name: str, superclass: Optional[str] = None) -> str:
        """
        Owning package of a call without a receiver, e.g. ``assertEquals(a, b)``.

        Single static imports win, then methods declared in this file, then
        static wildcard imports, then whatever the enclosing class extends,
        then the fallback.
        """
        package = self.import_table.lookup_member(method_name)
        if package is not None:
            return package

        if method_name in self.declared_methods:
            return self.current_package

        wildcard = self.import_table.member_wildcard_package
        if wildcard is not None:
            return wildcard

        if superclass:
            return self.resolve_type(superclass)

        return self.fallback
