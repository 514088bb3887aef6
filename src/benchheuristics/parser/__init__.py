"""Parser Module: Reads source files into SourceUnit models.

Supported languages:
    - Java  (via tree-sitter)

A SourceUnit carries:
    - The package declaration
    - The import declarations, in source order
    - Type declarations (nested ones included) with their fields and methods

Usage:
    from benchheuristics.parser import JavaParser

    parser = JavaParser()
    unit = parser.parse_file(Path("MyClassTest.java"))
"""

from benchheuristics.parser.base import (
    ImportDeclaration,
    MethodNode,
    SourceParser,
    SourceUnit,
    TypeDeclaration,
)
from benchheuristics.parser.java_parser import JavaParser

__all__ = [
    "ImportDeclaration",
    "JavaParser",
    "MethodNode",
    "SourceParser",
    "SourceUnit",
    "TypeDeclaration",
]
