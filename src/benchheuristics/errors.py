"""Exceptions raised by the benchmark heuristics engine and batch driver."""

from typing import Optional


class BenchHeuristicsError(Exception):
    """Base class for all errors raised by this package."""


class SourceParseError(BenchHeuristicsError):
    """A source file could not be read or is not syntactically valid."""

    def __init__(self, path: Optional[str], reason: str):
        self.path = path
        self.reason = reason
        where = path or "<source>"
        super().__init__(f"Cannot parse {where}: {reason}")


class ConfigurationError(BenchHeuristicsError):
    """The caller asked for something that can never succeed, e.g. an inverted index range."""


class BenchmarkListError(BenchHeuristicsError):
    """The benchmark input list is malformed."""

    def __init__(self, path: str, details: str):
        self.path = path
        self.details = details
        super().__init__(f"Malformed benchmark list {path}: {details}")


class BenchmarkNameError(BenchHeuristicsError, ValueError):
    """A benchmark name cannot be mapped onto a source file and method."""
