"""Benchmark input list: a JSON array of ``[benchmark name, stability value]`` pairs."""

from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr, TypeAdapter, ValidationError

from benchheuristics.errors import BenchmarkListError


class BenchmarkEntry(BaseModel):
    """One benchmark and the externally computed stability metric attached to it."""

    model_config = ConfigDict(frozen=True)

    name: str
    stability_metric_value: float


_PAIR_LIST = TypeAdapter(list[tuple[StrictStr, Union[StrictFloat, StrictInt]]])


def parse_benchmarks_json(raw: bytes | str, source: str = "<input>") -> list[BenchmarkEntry]:
    """
    Validate raw JSON and turn it into BenchmarkEntry objects.

    Raises:
        BenchmarkListError: If the JSON is invalid or any entry is not a
            ``[string, number]`` pair
    """
    try:
        pairs = _PAIR_LIST.validate_json(raw)
    except ValidationError as e:
        problems = "; ".join(
            f"{'/'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise BenchmarkListError(source, problems) from e
    return [BenchmarkEntry(name=name, stability_metric_value=value) for name, value in pairs]


def load_benchmarks(json_path) -> list[BenchmarkEntry]:
    """Read and validate a benchmark list file."""
    path = Path(json_path).absolute()
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise BenchmarkListError(str(path), f"cannot read file ({e})") from e
    return parse_benchmarks_json(raw, source=str(path))
