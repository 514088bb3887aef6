"""ParsedMethod - the metrics extracted from one method body."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class ParsedMethod:
    """
    Immutable metrics record for a single method.

    Built once by the MetricExtractor and never mutated. ``package_accesses``
    is a read-only mapping: package name -> number of references into it.
    """

    method_name: str
    package_accesses: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    num_conditionals: int = 0
    num_loops: int = 0
    num_nested_loops: int = 0
    num_method_calls: int = 0
    lines_of_code: int = 1

    def __post_init__(self):
        if not isinstance(self.package_accesses, MappingProxyType):
            object.__setattr__(
                self, "package_accesses", MappingProxyType(dict(self.package_accesses))
            )

    @property
    def total_package_accesses(self) -> int:
        """Number of resolved symbol references (calls + type uses)."""
        return sum(self.package_accesses.values())

    def to_dict(self) -> dict:
        """Convert to the camelCase dictionary used by the JSON output."""
        return {
            "methodName": self.method_name,
            "packageAccesses": dict(sorted(self.package_accesses.items())),
            "numConditionals": self.num_conditionals,
            "numLoops": self.num_loops,
            "numNestedLoops": self.num_nested_loops,
            "numMethodCalls": self.num_method_calls,
            "linesOfCode": self.lines_of_code,
        }
