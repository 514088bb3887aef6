"""Base parser interface and source unit data models."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from tree_sitter import Node

from benchheuristics.errors import SourceParseError


@dataclass(frozen=True)
class ImportDeclaration:
    """One import declaration of a source file."""

    qualified_name: str
    is_wildcard: bool = False
    is_static: bool = False

    @property
    def simple_name(self) -> str:
        """Last segment of the import ("*" for wildcard imports)."""
        if self.is_wildcard:
            return "*"
        return self.qualified_name.rsplit(".", 1)[-1]


@dataclass
class MethodNode:
    """A method declaration located inside a type declaration."""

    name: str
    parameter_count: int
    start_line: int  # 1-indexed, inclusive
    end_line: int
    node: Node
    owner: Optional["TypeDeclaration"] = None

    @property
    def body(self) -> Optional[Node]:
        return self.node.child_by_field_name("body")

    @property
    def body_statements(self) -> list[Node]:
        """Top-level statements of the method body (empty for abstract methods)."""
        if self.body is None:
            return []
        return [c for c in self.body.named_children if c.type not in ("line_comment", "block_comment")]

    @property
    def line_span(self) -> int:
        return self.end_line - self.start_line + 1


@dataclass
class TypeDeclaration:
    """A class, interface, enum, record or annotation type."""

    name: str
    kind: str
    node: Node
    superclass: Optional[str] = None

    # field name -> declared type name (None when not a reference type)
    fields: dict[str, Optional[str]] = field(default_factory=dict)
    methods: list[MethodNode] = field(default_factory=list)
    nested_types: list["TypeDeclaration"] = field(default_factory=list)
    type_parameters: list[str] = field(default_factory=list)
    outer: Optional["TypeDeclaration"] = None

    def iter_types(self):
        """Yield this declaration and every nested declaration, outermost first."""
        yield self
        for nested in self.nested_types:
            yield from nested.iter_types()


@dataclass
class SourceUnit:
    """In-memory model of one parsed source file."""

    package_name: str
    imports: list[ImportDeclaration] = field(default_factory=list)
    type_declarations: list[TypeDeclaration] = field(default_factory=list)
    path: Optional[str] = None

    def iter_types(self):
        """Yield every type declaration of the file, nested ones included."""
        for decl in self.type_declarations:
            yield from decl.iter_types()

    def declared_type_names(self) -> set[str]:
        """Simple names of all types and type parameters declared in this file."""
        names = set()
        for decl in self.iter_types():
            names.add(decl.name)
            names.update(decl.type_parameters)
        return names

    def declared_method_names(self) -> set[str]:
        return {m.name for decl in self.iter_types() for m in decl.methods}


class SourceParser(ABC):
    """Abstract base class for language-specific source parsers."""

    @property
    @abstractmethod
    def language(self) -> str:
        """Return the language this parser handles (e.g., 'java')."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> list[str]:
        """Return file extensions this parser handles (e.g., ['.java'])."""
        pass

    @abstractmethod
    def parse(self, text: str, path: Optional[str] = None) -> SourceUnit:
        """
        Parse source text into a SourceUnit.

        Args:
            text: The full source of one file
            path: Where the text came from, used in error messages

        Returns:
            The parsed SourceUnit

        Raises:
            SourceParseError: If the text is not syntactically valid
        """
        pass

    def parse_file(self, file_path: Path) -> SourceUnit:
        """Read and parse a source file."""
        try:
            with open(file_path, "rb") as f:
                raw = f.read()
        except (IOError, OSError) as e:
            raise SourceParseError(str(file_path), f"cannot read file ({e})") from e

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SourceParseError(str(file_path), f"not valid UTF-8 ({e})") from e

        return self.parse(text, path=str(file_path))

    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the given file."""
        return file_path.suffix.lower() in self.file_extensions
