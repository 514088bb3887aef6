"""Java parser using tree-sitter."""

import threading
from typing import Optional

import tree_sitter_java as tsjava
from tree_sitter import Language, Parser, Node

from benchheuristics.errors import SourceParseError
from .base import ImportDeclaration, MethodNode, SourceParser, SourceUnit, TypeDeclaration

JAVA_LANGUAGE = Language(tsjava.language())

TYPE_DECLARATION_KINDS = {
    "class_declaration": "class",
    "interface_declaration": "interface",
    "enum_declaration": "enum",
    "record_declaration": "record",
    "annotation_type_declaration": "annotation",
}

# Types with no package of their own
NON_REFERENCE_TYPES = {
    "integral_type",
    "floating_point_type",
    "boolean_type",
    "void_type",
    "array_type",
}


def node_text(node: Node) -> str:
    return node.text.decode("utf-8")


def type_name(node: Optional[Node]) -> Optional[str]:
    """
    Return the (possibly dotted) name of a type node.

    Generic arguments and annotations are dropped: ``Map.Entry<K, V>`` gives
    ``"Map.Entry"``. Primitive types, arrays and ``var`` give None.
    """
    if node is None:
        return None
    if node.type == "type_identifier":
        text = node_text(node)
        return None if text == "var" else text
    if node.type == "scoped_type_identifier":
        parts = []
        for child in node.named_children:
            if child.type in ("type_identifier", "scoped_type_identifier", "generic_type"):
                part = type_name(child)
                if part:
                    parts.append(part)
        return ".".join(parts) or None
    if node.type == "generic_type":
        return type_name(node.named_children[0]) if node.named_children else None
    if node.type == "annotated_type":
        return type_name(node.named_children[-1]) if node.named_children else None
    if node.type in NON_REFERENCE_TYPES:
        return None
    return None


def declarator_names(node: Node) -> list[str]:
    """Names declared by the variable_declarator children of a declaration."""
    names = []
    for child in node.children:
        if child.type == "variable_declarator":
            name_node = child.child_by_field_name("name")
            if name_node is not None:
                names.append(node_text(name_node))
    return names


def count_parameters(method_node: Node) -> int:
    """Count formal parameters of a method declaration."""
    params_node = method_node.child_by_field_name("parameters")
    if not params_node:
        return 0
    return sum(
        1 for c in params_node.children
        if c.type == "formal_parameter" or c.type == "spread_parameter"
    )


def type_parameter_names(node: Node) -> list[str]:
    """Names introduced by a ``<T, U extends X>`` clause of a declaration."""
    params = node.child_by_field_name("type_parameters")
    if params is None:
        return []
    names = []
    for param in params.named_children:
        if param.type != "type_parameter":
            continue
        for child in param.named_children:
            if child.type in ("type_identifier", "identifier"):
                names.append(node_text(child))
                break
    return names


class JavaParser(SourceParser):
    """Parse Java source files using tree-sitter."""

    def __init__(self):
        # tree_sitter.Parser is not safe to share between threads
        self._local = threading.local()

    @property
    def _parser(self) -> Parser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = self._local.parser = Parser(JAVA_LANGUAGE)
        return parser

    @property
    def language(self) -> str:
        return "java"

    @property
    def file_extensions(self) -> list[str]:
        return [".java"]

    def parse(self, text: str, path: Optional[str] = None) -> SourceUnit:
        """Parse Java source text into a SourceUnit."""
        tree = self._parser.parse(text.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            bad = self._first_error(root)
            line = bad.start_point[0] + 1 if bad is not None else 1
            raise SourceParseError(path, f"syntax error near line {line}")

        unit = SourceUnit(package_name="", path=path)
        for child in root.named_children:
            if child.type == "package_declaration":
                unit.package_name = self._package_name(child)
            elif child.type == "import_declaration":
                unit.imports.append(self._import_declaration(child))
            elif child.type in TYPE_DECLARATION_KINDS:
                unit.type_declarations.append(self._type_declaration(child))
        return unit

    def _first_error(self, node: Node) -> Optional[Node]:
        if node.type == "ERROR" or node.is_missing:
            return node
        for child in node.children:
            if child.has_error or child.is_missing:
                found = self._first_error(child)
                if found is not None:
                    return found
        return None

    def _package_name(self, node: Node) -> str:
        for child in node.named_children:
            if child.type in ("scoped_identifier", "identifier"):
                return node_text(child)
        return ""

    def _import_declaration(self, node: Node) -> ImportDeclaration:
        """Turn ``import static a.b.C.*;`` into an ImportDeclaration."""
        qualified_name = ""
        is_static = False
        is_wildcard = False
        for child in node.children:
            if child.type == "static":
                is_static = True
            elif child.type == "asterisk":
                is_wildcard = True
            elif child.type in ("scoped_identifier", "identifier"):
                qualified_name = node_text(child)
        return ImportDeclaration(
            qualified_name=qualified_name,
            is_wildcard=is_wildcard,
            is_static=is_static,
        )

    def _type_declaration(
        self, node: Node, outer: Optional[TypeDeclaration] = None
    ) -> TypeDeclaration:
        """Build a TypeDeclaration, recursing into member types."""
        name_node = node.child_by_field_name("name")
        decl = TypeDeclaration(
            name=node_text(name_node) if name_node else "",
            kind=TYPE_DECLARATION_KINDS[node.type],
            node=node,
            outer=outer,
            type_parameters=type_parameter_names(node),
        )

        superclass = node.child_by_field_name("superclass")
        if superclass is not None and superclass.named_children:
            decl.superclass = type_name(superclass.named_children[-1])

        # Record components behave like final fields
        if node.type == "record_declaration":
            params = node.child_by_field_name("parameters")
            if params is not None:
                for param in params.named_children:
                    if param.type == "formal_parameter":
                        pname = param.child_by_field_name("name")
                        if pname is not None:
                            decl.fields[node_text(pname)] = type_name(
                                param.child_by_field_name("type")
                            )

        body = node.child_by_field_name("body")
        if body is not None:
            for member in self._members(body):
                self._add_member(decl, member)
        return decl

    def _members(self, body: Node):
        for member in body.named_children:
            if member.type == "enum_body_declarations":
                yield from member.named_children
            else:
                yield member

    def _add_member(self, decl: TypeDeclaration, member: Node) -> None:
        if member.type in ("field_declaration", "constant_declaration"):
            declared = type_name(member.child_by_field_name("type"))
            for name in declarator_names(member):
                decl.fields[name] = declared
        elif member.type == "enum_constant":
            name_node = member.child_by_field_name("name")
            if name_node is not None:
                decl.fields[node_text(name_node)] = decl.name
        elif member.type == "method_declaration":
            name_node = member.child_by_field_name("name")
            if name_node is None:
                return
            decl.methods.append(MethodNode(
                name=node_text(name_node),
                parameter_count=count_parameters(member),
                start_line=member.start_point[0] + 1,
                end_line=member.end_point[0] + 1,
                node=member,
                owner=decl,
            ))
        elif member.type in TYPE_DECLARATION_KINDS:
            decl.nested_types.append(self._type_declaration(member, outer=decl))
