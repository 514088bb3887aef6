"""MethodLocator - finds a named method inside a SourceUnit."""

from typing import Optional

from benchheuristics.parser.base import MethodNode, SourceUnit


def iter_methods(unit: SourceUnit):
    """
    Yield every method of every type declaration in source order.

    Declarations are visited outermost first and member types after the
    methods of their enclosing type, so the order only depends on the file.
    """
    for decl in unit.iter_types():
        yield from decl.methods


def locate(
    unit: SourceUnit,
    method_name: str,
    parameter_count: Optional[int] = None,
) -> Optional[MethodNode]:
    """
    Find a method by exact name.

    Overloads and same-named methods in nested types are resolved by taking
    the earliest declaration in the file (lowest start line, then column).
    ``parameter_count`` narrows the candidates when given.

    Returns:
        The MethodNode, or None when no method matches
    """
    candidates = [
        m for m in iter_methods(unit)
        if m.name == method_name
        and (parameter_count is None or m.parameter_count == parameter_count)
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda m: (m.node.start_point[0], m.node.start_point[1]))
