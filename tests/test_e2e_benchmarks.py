"""End-to-end tests for the benchmarks command."""

import argparse
import json
import signal
from pathlib import Path

from benchheuristics.main import cmd_benchmarks

FIXTURES = Path(__file__).parent / "fixtures"

DISPOSE = "io.example.scheduling.PeriodicTaskTest._Benchmark.benchmark_dispose"
EMPTY = "io.example.scheduling.PeriodicTaskTest._Benchmark.benchmark_empty"
MISSING_METHOD = "io.example.scheduling.PeriodicTaskTest._Benchmark.benchmark_doesNotExist"


class TestBenchmarksCommand:
    """Tests for cmd_benchmarks."""

    def _args(self, tmp_path, benchmark_list, **overrides) -> argparse.Namespace:
        path = tmp_path / "benchmarks.json"
        path.write_text(
            benchmark_list if isinstance(benchmark_list, str) else json.dumps(benchmark_list)
        )
        values = {
            "base_test_path": str(FIXTURES),
            "benchmarks": str(path),
            "extension": ".java",
            "marker": "_Benchmark.benchmark_",
            "fallback_package": "java.lang",
            "output": str(tmp_path / "results.json"),
            "first": None,
            "last": None,
        }
        values.update(overrides)
        return argparse.Namespace(**values)

    def test_writes_results(self, tmp_path):
        args = self._args(tmp_path, [[DISPOSE, 1.5], [MISSING_METHOD, 2.5], [EMPTY, 0.5]])

        assert cmd_benchmarks(args) == 0

        data = json.loads(Path(args.output).read_text())
        assert [item["methodName"] for item in data] == ["dispose", "empty"]
        assert data[0]["stabilityMetricValue"] == 1.5
        assert data[1]["linesOfCode"] == 3

    def test_index_range(self, tmp_path):
        args = self._args(tmp_path, [[DISPOSE, 1.5], [EMPTY, 0.5]], first=1, last=1)

        assert cmd_benchmarks(args) == 0
        data = json.loads(Path(args.output).read_text())
        assert [item["methodName"] for item in data] == ["empty"]

    def test_malformed_list(self, tmp_path):
        args = self._args(tmp_path, '[["name"]]')

        assert cmd_benchmarks(args) == 1
        assert not Path(args.output).exists()

    def test_missing_list(self, tmp_path):
        args = self._args(tmp_path, [], benchmarks=str(tmp_path / "missing.json"))

        assert cmd_benchmarks(args) == 1

    def test_inverted_range(self, tmp_path):
        args = self._args(tmp_path, [[DISPOSE, 1.5], [EMPTY, 0.5]], first=1, last=0)

        assert cmd_benchmarks(args) == 2
        assert not Path(args.output).exists()

    def test_restores_sigterm_handler(self, tmp_path):
        previous = signal.getsignal(signal.SIGTERM)
        args = self._args(tmp_path, [[EMPTY, 0.5]])

        assert cmd_benchmarks(args) == 0
        assert signal.getsignal(signal.SIGTERM) == previous
