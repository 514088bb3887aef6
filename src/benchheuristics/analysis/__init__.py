"""Method analysis: locating methods, resolving packages and counting metrics."""

from benchheuristics.analysis.imports import ImportTable, PackageResolver, resolve
from benchheuristics.analysis.locator import locate
from benchheuristics.analysis.metrics import MetricExtractor
from benchheuristics.analysis.parsed_method import ParsedMethod

__all__ = [
    "ImportTable",
    "MetricExtractor",
    "PackageResolver",
    "ParsedMethod",
    "locate",
    "resolve",
]
