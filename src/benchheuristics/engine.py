"""Engine entry point: (source file, method name) -> ParsedMethod.

Each call runs the whole pipeline from scratch:

    Idle -> Parsing -> Succeeded | NotFound | ParseError

Parsing covers reading the file, building the tree, locating the method
and walking it. NotFound and ParseError are reported, never raised, so a
batch driver can skip the item and carry on.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from benchheuristics.analysis.imports import BUILTIN_PACKAGE
from benchheuristics.analysis.locator import locate
from benchheuristics.analysis.metrics import MetricExtractor
from benchheuristics.analysis.parsed_method import ParsedMethod
from benchheuristics.errors import SourceParseError
from benchheuristics.parser.base import SourceParser, SourceUnit
from benchheuristics.parser.java_parser import JavaParser

logger = logging.getLogger(__name__)


class ParseState(str, Enum):
    """Terminal states of one parse invocation."""

    SUCCEEDED = "succeeded"
    NOT_FOUND = "not_found"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class ParseOutcome:
    """Result of one invocation: the terminal state plus the metrics or an error."""

    state: ParseState
    method_name: str
    path: Optional[str] = None
    parsed_method: Optional[ParsedMethod] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state is ParseState.SUCCEEDED


class MethodParser:
    """
    Extracts metrics for one named method of a source file.

    Holds no per-file state, so one instance can serve many files, also
    from several threads.

    Usage:
        parser = MethodParser()
        parsed = parser.parse_method("src/test/java/FooTest.java", "dispose3")
        if parsed is None:
            ...  # method missing or file unparseable
    """

    def __init__(
        self,
        source_parser: Optional[SourceParser] = None,
        fallback_package: str = BUILTIN_PACKAGE,
    ):
        self.source_parser = source_parser or JavaParser()
        self.fallback_package = fallback_package

    def parse_method(self, source_file_path, method_name: str) -> Optional[ParsedMethod]:
        """Return the method's metrics, or None when it is missing or the file is invalid."""
        return self.parse(source_file_path, method_name).parsed_method

    def parse(self, source_file_path, method_name: str) -> ParseOutcome:
        """Run the pipeline on a file and report its terminal state."""
        path = str(source_file_path)
        try:
            unit = self.source_parser.parse_file(Path(source_file_path))
        except SourceParseError as e:
            logger.warning("Parse error in %s: %s", path, e.reason)
            return ParseOutcome(ParseState.PARSE_ERROR, method_name, path, error=str(e))
        return self._analyse(unit, method_name, path)

    def parse_source(self, text: str, method_name: str) -> ParseOutcome:
        """Run the pipeline on in-memory source text."""
        try:
            unit = self.source_parser.parse(text)
        except SourceParseError as e:
            logger.warning("Parse error: %s", e.reason)
            return ParseOutcome(ParseState.PARSE_ERROR, method_name, error=str(e))
        return self._analyse(unit, method_name, None)

    def _analyse(self, unit: SourceUnit, method_name: str, path: Optional[str]) -> ParseOutcome:
        method = locate(unit, method_name)
        if method is None:
            logger.info("Method %s not found in %s", method_name, path or "<source>")
            return ParseOutcome(
                ParseState.NOT_FOUND,
                method_name,
                path,
                error=f"method {method_name!r} not found",
            )

        parsed = MetricExtractor(unit, self.fallback_package).extract(method)
        return ParseOutcome(ParseState.SUCCEEDED, method_name, path, parsed_method=parsed)
