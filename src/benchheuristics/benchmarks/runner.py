"""Batch driver: parse the test method behind every benchmark in a list."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from benchheuristics.benchmarks.loader import BenchmarkEntry, load_benchmarks
from benchheuristics.benchmarks.naming import (
    BENCHMARK_MARKER,
    SOURCE_EXTENSION,
    benchmark_method_name,
    benchmark_source_path,
)
from benchheuristics.benchmarks.output import ResultRecord, ResultSink
from benchheuristics.engine import MethodParser
from benchheuristics.errors import BenchmarkNameError, ConfigurationError

logger = logging.getLogger(__name__)


def success_rate_percentage(successful: int, attempted: int) -> float:
    """Success rate as a percentage rounded to two decimals (0.0 when nothing ran)."""
    if attempted == 0:
        return 0.0
    return round(successful / attempted * 100.0, 2)


@dataclass
class RunSummary:
    """Bookkeeping of one batch run."""

    first_index: int
    last_index: int
    attempted: int = 0
    successful: int = 0
    skipped: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.last_index - self.first_index + 1

    @property
    def success_rate(self) -> float:
        return success_rate_percentage(self.successful, self.attempted)


class BenchmarkRunner:
    """
    Parses the unit tests that a list of benchmarks run.

    Usage:
        runner = BenchmarkRunner.from_json("src/test/java", "benchmarks.json")
        rate = runner.parse_benchmarks(MethodParser(), "parsed.json")
    """

    def __init__(
        self,
        base_test_path,
        benchmarks: list[BenchmarkEntry],
        extension: str = SOURCE_EXTENSION,
        marker: str = BENCHMARK_MARKER,
    ):
        self.base_test_path = Path(base_test_path)
        self.benchmarks = benchmarks
        self.extension = extension
        self.marker = marker

    @classmethod
    def from_json(cls, base_test_path, benchmark_json_path, **kwargs) -> "BenchmarkRunner":
        return cls(base_test_path, load_benchmarks(benchmark_json_path), **kwargs)

    def index_range(self, first: Optional[int] = None, last: Optional[int] = None) -> tuple[int, int]:
        """
        Clamp the requested indexes into the list.

        A negative first index becomes 0 and a last index past the end becomes
        the last entry; a range that is still inverted is rejected.

        Raises:
            ConfigurationError: If ``last < first`` after clamping
        """
        first = 0 if first is None or first < 0 else first
        size = len(self.benchmarks)
        if last is None or last > size - 1:
            last = size - 1
        if last - first < 0:
            raise ConfigurationError(
                f"Illegal index range [{first}, {last}] for {size} benchmarks"
            )
        return first, last

    def parse_benchmarks(
        self,
        parser: MethodParser,
        output_path,
        first: Optional[int] = None,
        last: Optional[int] = None,
    ) -> float:
        """
        Parse benchmarks ``first..last`` (inclusive) and write the results.

        Returns:
            Success rate of the parsing as a percentage (0.0 - 100.0)
        """
        return self.run(parser, output_path, first, last).success_rate

    def run(
        self,
        parser: MethodParser,
        output_path,
        first: Optional[int] = None,
        last: Optional[int] = None,
    ) -> RunSummary:
        """Like parse_benchmarks, but return the full RunSummary."""
        first, last = self.index_range(first, last)
        summary = RunSummary(first_index=first, last_index=last)

        logger.info("Starting parsing of %d benchmarks", summary.total)

        # The sink writes its file on every exit path, interrupts included
        with ResultSink(output_path) as sink:
            for i in range(first, last + 1):
                summary.attempted += 1
                entry = self.benchmarks[i]
                logger.info("PARSING INDEX: %d/%d %s", summary.attempted, summary.total, entry.name)

                record = self._parse_entry(parser, entry)
                if record is None:
                    summary.skipped.append(entry.name)
                    logger.warning(
                        "Skipping benchmark %s. Successful parsings: %d/%d, success rate: %.2f%%",
                        entry.name, summary.successful, summary.attempted, summary.success_rate,
                    )
                    continue

                sink.add(record)
                summary.successful += 1
                logger.info(
                    "Successful parsings: %d/%d, success rate: %.2f%%",
                    summary.successful, summary.attempted, summary.success_rate,
                )

        logger.info(
            "Parsing complete. Success rate: %d/%d, %.2f%%",
            summary.successful, summary.attempted, summary.success_rate,
        )
        return summary

    def _parse_entry(self, parser: MethodParser, entry: BenchmarkEntry) -> Optional[ResultRecord]:
        try:
            method = benchmark_method_name(entry.name, self.marker)
            source_path = benchmark_source_path(entry.name, self.base_test_path, self.extension)
        except BenchmarkNameError as e:
            logger.warning("%s", e)
            return None

        logger.debug("%s -> %s", source_path, method)
        parsed = parser.parse_method(source_path, method)
        if parsed is None:
            return None
        return ResultRecord.from_parsed(parsed, stability_metric_value=entry.stability_metric_value)
