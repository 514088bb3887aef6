"""benchheuristics - structural metrics of benchmarked test methods."""

from benchheuristics.analysis.parsed_method import ParsedMethod
from benchheuristics.engine import MethodParser, ParseOutcome, ParseState

__version__ = "0.1.0"

__all__ = ["MethodParser", "ParseOutcome", "ParseState", "ParsedMethod"]
