"""Result records and the output sink that writes them as JSON."""

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel

from benchheuristics.analysis.parsed_method import ParsedMethod

logger = logging.getLogger(__name__)


class ResultRecord(BaseModel):
    """ParsedMethod metrics plus the values the caller attaches to them."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    method_name: str
    package_accesses: dict[str, int]
    num_conditionals: int
    num_loops: int
    num_nested_loops: int
    num_method_calls: int
    lines_of_code: int
    stability_metric_value: Optional[float] = None
    code_coverage_metric_value: Optional[float] = None

    @classmethod
    def from_parsed(
        cls,
        parsed: ParsedMethod,
        stability_metric_value: Optional[float] = None,
        code_coverage_metric_value: Optional[float] = None,
    ) -> "ResultRecord":
        return cls(
            method_name=parsed.method_name,
            package_accesses=dict(sorted(parsed.package_accesses.items())),
            num_conditionals=parsed.num_conditionals,
            num_loops=parsed.num_loops,
            num_nested_loops=parsed.num_nested_loops,
            num_method_calls=parsed.num_method_calls,
            lines_of_code=parsed.lines_of_code,
            stability_metric_value=stability_metric_value,
            code_coverage_metric_value=code_coverage_metric_value,
        )


_RECORD_LIST = TypeAdapter(list[ResultRecord])


class ResultSink:
    """
    Collects result records and writes them to one JSON file.

    Use it as a context manager: the file is written on every way out of
    the ``with`` block, including exceptions and KeyboardInterrupt, so an
    interrupted run still keeps what it finished.

        with ResultSink("out.json") as sink:
            for record in records:
                sink.add(record)
    """

    def __init__(self, output_path):
        self.output_path = Path(output_path)
        self.records: list[ResultRecord] = []
        self._closed = False

    def __enter__(self) -> "ResultSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def __len__(self) -> int:
        return len(self.records)

    def add(self, record: ResultRecord) -> None:
        if self._closed:
            raise RuntimeError("ResultSink is already closed")
        self.records.append(record)

    def flush(self) -> None:
        """Write everything collected so far, replacing the previous file."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        payload = _RECORD_LIST.dump_json(
            self.records, indent=4, by_alias=True, exclude_none=True
        )
        self.output_path.write_bytes(payload)
        logger.info("Wrote %d results to %s", len(self.records), self.output_path)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.flush()
