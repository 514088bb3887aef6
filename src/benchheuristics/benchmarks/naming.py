"""Benchmark name -> (source file, method name) convention.

A benchmark name looks like::

    io.reactivex.rxjava3.internal.schedulers.InstantPeriodicTaskTest._Benchmark.benchmark_dispose3

Everything before the second-to-last dot is the test class, laid out as a
directory path below the test-source root; the text after the marker is
the test method.
"""

from pathlib import Path

from benchheuristics.errors import BenchmarkNameError

BENCHMARK_MARKER = "_Benchmark.benchmark_"
SOURCE_EXTENSION = ".java"


def benchmark_method_name(benchmark: str, marker: str = BENCHMARK_MARKER) -> str:
    """Return the method name that follows the marker."""
    parts = benchmark.split(marker)
    if len(parts) < 2 or not parts[1]:
        raise BenchmarkNameError(f"No method after {marker!r} in benchmark {benchmark!r}")
    return parts[1]


def benchmark_source_path(
    benchmark: str,
    base_test_path,
    extension: str = SOURCE_EXTENSION,
) -> Path:
    """Return the source file that declares the benchmarked test method."""
    last_dot = benchmark.rfind(".")
    second_last_dot = benchmark.rfind(".", 0, last_dot) if last_dot > 0 else -1
    if second_last_dot <= 0:
        raise BenchmarkNameError(f"Cannot derive a class path from benchmark {benchmark!r}")

    class_path = Path(*benchmark[:second_last_dot].split("."))
    resolved = Path(base_test_path) / class_path
    return resolved.with_name(resolved.name + extension)
