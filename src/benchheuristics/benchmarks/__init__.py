"""Batch driver: benchmark lists in, JSON metric records out."""

from benchheuristics.benchmarks.loader import BenchmarkEntry, load_benchmarks
from benchheuristics.benchmarks.naming import benchmark_method_name, benchmark_source_path
from benchheuristics.benchmarks.output import ResultRecord, ResultSink
from benchheuristics.benchmarks.runner import BenchmarkRunner, RunSummary

__all__ = [
    "BenchmarkEntry",
    "BenchmarkRunner",
    "ResultRecord",
    "ResultSink",
    "RunSummary",
    "benchmark_method_name",
    "benchmark_source_path",
    "load_benchmarks",
]
