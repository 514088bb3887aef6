"""MetricExtractor - structural metrics of one method body.

Walks the body of a located method once, in pre-order, and counts:

    - Loops (for, enhanced for, while, do) and loops nested inside loops
    - Conditionals (if / else if, ternaries, switch case labels)
    - Method invocations
    - Package accesses: every call target and every type reference,
      attributed to its owning package through the PackageResolver

Counting is purely syntactic and deterministic; the same method always
yields the same ParsedMethod.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from tree_sitter import Node

from benchheuristics.analysis.imports import BUILTIN_PACKAGE, ImportTable, PackageResolver, package_of
from benchheuristics.analysis.parsed_method import ParsedMethod
from benchheuristics.parser.base import MethodNode, SourceUnit, TypeDeclaration
from benchheuristics.parser.java_parser import declarator_names, node_text, type_name, type_parameter_names

logger = logging.getLogger(__name__)

LOOP_TYPES = frozenset({
    "for_statement",
    "enhanced_for_statement",
    "while_statement",
    "do_statement",
})

CONDITIONAL_TYPES = frozenset({"if_statement", "ternary_expression"})

COMMENT_TYPES = frozenset({"line_comment", "block_comment"})


# ---------------------------------------------------------------------------
# Accumulator
# ---------------------------------------------------------------------------

@dataclass
class _MetricAccumulator:
    """Mutable counters confined to one extract() call."""

    num_conditionals: int = 0
    num_loops: int = 0
    num_nested_loops: int = 0
    num_method_calls: int = 0
    num_type_references: int = 0
    package_accesses: Counter = field(default_factory=Counter)

    def finalize(self, method_name: str, lines_of_code: int) -> ParsedMethod:
        return ParsedMethod(
            method_name=method_name,
            package_accesses=dict(self.package_accesses),
            num_conditionals=self.num_conditionals,
            num_loops=self.num_loops,
            num_nested_loops=self.num_nested_loops,
            num_method_calls=self.num_method_calls,
            lines_of_code=lines_of_code,
        )


# ---------------------------------------------------------------------------
# Scope collection
# ---------------------------------------------------------------------------

@dataclass
class _MethodScope:
    """Names visible inside one method, collected flow-insensitively."""

    # variable name -> declared type name (None when unknown or not a reference type)
    variables: dict[str, Optional[str]] = field(default_factory=dict)
    fields: dict[str, Optional[str]] = field(default_factory=dict)
    local_types: set[str] = field(default_factory=set)
    local_methods: set[str] = field(default_factory=set)
    superclass: Optional[str] = None


def _declared_type(decl: Node) -> Optional[str]:
    """Type name of a declaration, inferring ``var x = new T()`` as T."""
    type_node = decl.child_by_field_name("type")
    if type_node is not None and node_text(type_node) == "var":
        for child in decl.children:
            if child.type != "variable_declarator":
                continue
            value = child.child_by_field_name("value")
            if value is not None and value.type == "object_creation_expression":
                return type_name(value.child_by_field_name("type"))
        return None
    return type_name(type_node)


def _collect_scope(method: MethodNode) -> _MethodScope:
    scope = _MethodScope()
    # <T> void f() binds T for the whole method
    scope.local_types.update(type_parameter_names(method.node))

    def declare(name: str, declared: Optional[str]) -> None:
        scope.variables.setdefault(name, declared)

    stack = [method.node]
    while stack:
        node = stack.pop()
        t = node.type

        if t in ("formal_parameter", "enhanced_for_statement", "resource"):
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                declare(node_text(name_node), type_name(node.child_by_field_name("type")))
        elif t == "spread_parameter":
            for name in declarator_names(node):
                declare(name, None)
        elif t == "catch_formal_parameter":
            name_node = node.child_by_field_name("name")
            catch_types = [c for c in node.named_children if c.type == "catch_type"]
            declared = None
            if catch_types and len(catch_types[0].named_children) == 1:
                declared = type_name(catch_types[0].named_children[0])
            if name_node is not None:
                declare(node_text(name_node), declared)
        elif t in ("local_variable_declaration", "field_declaration"):
            declared = _declared_type(node)
            for name in declarator_names(node):
                declare(name, declared)
        elif t == "lambda_expression":
            params = node.child_by_field_name("parameters")
            if params is not None and params.type == "identifier":
                declare(node_text(params), None)
            elif params is not None and params.type == "inferred_parameters":
                for ident in params.named_children:
                    declare(node_text(ident), None)
        elif t == "instanceof_expression":
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                declare(node_text(name_node), type_name(node.child_by_field_name("right")))
        elif t in ("class_declaration", "interface_declaration", "enum_declaration",
                   "record_declaration"):
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                scope.local_types.add(node_text(name_node))
            scope.local_types.update(type_parameter_names(node))
        elif t == "method_declaration" and node.id != method.node.id:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                scope.local_methods.add(node_text(name_node))

        stack.extend(node.named_children)

    owner: Optional[TypeDeclaration] = method.owner
    while owner is not None:
        for name, declared in owner.fields.items():
            scope.fields.setdefault(name, declared)
        if scope.superclass is None:
            scope.superclass = owner.superclass
        owner = owner.outer

    return scope


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------

class MetricExtractor:
    """
    Computes a ParsedMethod for methods of one SourceUnit.

    Usage:
        extractor = MetricExtractor(unit)
        parsed = extractor.extract(locate(unit, "dispose3"))
    """

    def __init__(self, unit: SourceUnit, fallback_package: str = BUILTIN_PACKAGE):
        self.unit = unit
        self.import_table = ImportTable.from_imports(unit.imports)
        self.fallback_package = fallback_package

    def extract(self, method: MethodNode) -> ParsedMethod:
        """Walk the method body once and return its metrics."""
        scope = _collect_scope(method)
        resolver = PackageResolver(
            self.import_table,
            self.unit.package_name,
            declared_types=self.unit.declared_type_names() | scope.local_types,
            declared_methods=self.unit.declared_method_names() | scope.local_methods,
            fallback=self.fallback_package,
        )
        acc = _MetricAccumulator()

        if method.body is not None:
            _Walker(resolver, scope, acc).walk(method.body)

        logger.debug(
            "%s: %d calls, %d type references, %d loops (%d nested), %d conditionals",
            method.name, acc.num_method_calls, acc.num_type_references,
            acc.num_loops, acc.num_nested_loops, acc.num_conditionals,
        )
        return acc.finalize(method.name, method.line_span)


class _Walker:
    """Single pre-order traversal with an explicit loop-depth counter."""

    def __init__(self, resolver: PackageResolver, scope: _MethodScope, acc: _MetricAccumulator):
        self.resolver = resolver
        self.scope = scope
        self.acc = acc

    def walk(self, root: Node) -> None:
        # (node, loop depth at entry); children pushed reversed to keep source order
        stack: list[tuple[Node, int]] = [(root, 0)]
        while stack:
            node, depth = stack.pop()
            children = self._visit(node, depth)
            stack.extend(reversed(children))

    def _visit(self, node: Node, depth: int) -> list[tuple[Node, int]]:
        """Count one node and return the children still to visit."""
        t = node.type
        acc = self.acc

        if t in COMMENT_TYPES:
            return []

        if t in LOOP_TYPES:
            acc.num_loops += 1
            if depth > 0:
                acc.num_nested_loops += 1
            body = node.child_by_field_name("body")
            return [(c, depth + 1 if body is not None and c.id == body.id else depth)
                    for c in node.named_children]

        if t in CONDITIONAL_TYPES:
            acc.num_conditionals += 1
        elif t == "switch_label":
            if node.children and node.children[0].type == "case":
                acc.num_conditionals += 1
        elif t == "method_invocation":
            acc.num_method_calls += 1
            self._tally(self._call_package(node))
        elif t == "type_identifier":
            name = type_name(node)
            if name is not None:
                self._tally_type(name)
        elif t == "scoped_type_identifier":
            self._tally_type(type_name(node))
            return []
        elif t == "field_access":
            qualifier = node.child_by_field_name("object")
            if self._is_type_qualifier(qualifier):
                self._tally_type(node_text(qualifier))
        elif t == "method_reference":
            qualifier = node.named_children[0] if node.named_children else None
            if self._is_type_qualifier(qualifier):
                self._tally_type(node_text(qualifier))
        elif t == "type_parameter":
            # the parameter's own name is a declaration, its bounds are references
            return [(c, depth) for c in node.named_children[1:]]

        return [(c, depth) for c in node.named_children]

    # -- tallying ----------------------------------------------------------

    def _tally(self, package: str) -> None:
        self.acc.package_accesses[package] += 1

    def _tally_type(self, name: Optional[str]) -> None:
        self.acc.num_type_references += 1
        self._tally(self.resolver.resolve_type(name))

    def _is_type_qualifier(self, node: Optional[Node]) -> bool:
        """True for ``Foo`` in ``Foo.BAR`` / ``Foo::bar`` when Foo is not a variable."""
        if node is None or node.type != "identifier":
            return False
        name = node_text(node)
        if name in self.scope.variables or name in self.scope.fields:
            return False
        if self.resolver.import_table.lookup_member(name) is not None:
            return False
        return name[:1].isupper()

    # -- call targets ------------------------------------------------------

    def _call_package(self, call: Node) -> str:
        receiver = call.child_by_field_name("object")
        if receiver is None:
            name_node = call.child_by_field_name("name")
            return self.resolver.resolve_unqualified_call(
                node_text(name_node), self.scope.superclass
            )
        return self._receiver_package(receiver)

    def _receiver_package(self, node: Node) -> str:
        """Package of the type a call is made on."""
        t = node.type
        resolver = self.resolver

        if t == "this":
            return resolver.current_package
        if t == "super":
            if self.scope.superclass:
                return resolver.resolve_type(self.scope.superclass)
            return resolver.fallback
        if t == "identifier":
            name = node_text(node)
            if name in self.scope.variables:
                return resolver.resolve_type(self.scope.variables[name])
            if name in self.scope.fields:
                return resolver.resolve_type(self.scope.fields[name])
            if name[:1].isupper():
                return resolver.resolve_type(name)
            return resolver.fallback
        if t in ("string_literal", "text_block", "class_literal"):
            return BUILTIN_PACKAGE
        if t in ("object_creation_expression", "cast_expression"):
            return resolver.resolve_type(type_name(node.child_by_field_name("type")))
        if t == "parenthesized_expression" and node.named_children:
            return self._receiver_package(node.named_children[0])
        if t == "field_access":
            qualifier = node.child_by_field_name("object")
            field_node = node.child_by_field_name("field")
            if qualifier is not None and qualifier.type == "this" and field_node is not None:
                return resolver.resolve_type(self.scope.fields.get(node_text(field_node)))
            if self._is_type_qualifier(qualifier):
                # static field of a type, e.g. TimeUnit.SECONDS.toMillis(1)
                return resolver.resolve_type(node_text(qualifier))
            text = node_text(node)
            if _is_qualified_type_name(text):
                return package_of(text)
        return resolver.fallback


def _is_qualified_type_name(text: str) -> bool:
    """``java.util.Collections`` style: lowercase package segments, then a type."""
    parts = text.split(".")
    return (
        len(parts) > 1
        and parts[0][:1].islower()
        and parts[-1][:1].isupper()
        and all(p.isidentifier() for p in parts)
    )
