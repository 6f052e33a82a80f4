"""Loading and validation of training-data files."""

from __future__ import annotations

import json
import math
import numbers
from pathlib import Path
from typing import Any, List, Mapping, Sequence

from ..core.errors import InvalidTrainingData
from ..core.types import DataPoint
from .registry import DatasetSpec, register_dataset

_EXPECTED_KEYS = ("expectedOutput", "expected_output")


def _read_payload(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise InvalidTrainingData(f"training data file not found: {path}") from exc
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load training data in YAML format") from exc
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise InvalidTrainingData(f"{path.name} is not valid YAML: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidTrainingData(f"{path.name} is not valid JSON: {exc}") from exc


def _numbers(values: Any, where: str) -> List[float]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise InvalidTrainingData(f"{where} must be a list of numbers")
    out: List[float] = []
    for pos, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidTrainingData(f"{where}[{pos}] is not a number: {value!r}")
        if not math.isfinite(float(value)):
            raise InvalidTrainingData(f"{where}[{pos}] is not finite: {value!r}")
        out.append(float(value))
    return out


def parse_records(raw: Any) -> List[DataPoint]:
    """Validate decoded records and convert them to :class:`DataPoint` objects.

    The batch is rejected as a whole: any record whose lengths differ from the
    first record's, or that holds a non-numeric value, raises
    :class:`InvalidTrainingData`.
    """

    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Sequence):
        raise InvalidTrainingData("training data must be a list of records")
    if not raw:
        raise InvalidTrainingData("training data is empty")

    points: List[DataPoint] = []
    for idx, record in enumerate(raw):
        if not isinstance(record, Mapping):
            raise InvalidTrainingData(f"record {idx} is not an object")
        if "input" not in record:
            raise InvalidTrainingData(f"record {idx} has no 'input'")
        key = next((k for k in _EXPECTED_KEYS if k in record), None)
        if key is None:
            raise InvalidTrainingData(f"record {idx} has no 'expectedOutput'")
        inputs = _numbers(record["input"], f"record {idx} input")
        expected = _numbers(record[key], f"record {idx} {key}")
        if points:
            first = points[0]
            if len(inputs) != first.input.shape[0]:
                raise InvalidTrainingData(
                    f"record {idx} has {len(inputs)} inputs, record 0 has {first.input.shape[0]}"
                )
            if len(expected) != first.expected_output.shape[0]:
                raise InvalidTrainingData(
                    f"record {idx} has {len(expected)} expected outputs, "
                    f"record 0 has {first.expected_output.shape[0]}"
                )
        points.append(DataPoint(input=inputs, expected_output=expected))
    return points


def load_training_data(path: str | Path) -> List[DataPoint]:
    """Read a JSON or YAML training-data file."""

    return parse_records(_read_payload(Path(path)))


def check_compatible(points: Sequence[DataPoint], layer_sizes: Sequence[int]) -> None:
    """Raise :class:`InvalidTrainingData` if ``points`` do not fit ``layer_sizes``."""

    if not points:
        raise InvalidTrainingData("training data is empty")
    n_in, n_out = int(layer_sizes[0]), int(layer_sizes[-1])
    for idx, point in enumerate(points):
        if point.input.shape[0] != n_in:
            raise InvalidTrainingData(
                f"record {idx} has {point.input.shape[0]} inputs but the network expects {n_in}"
            )
        if point.expected_output.shape[0] != n_out:
            raise InvalidTrainingData(
                f"record {idx} has {point.expected_output.shape[0]} expected outputs "
                f"but the network produces {n_out}"
            )


def dump_training_data(points: Sequence[DataPoint], path: str | Path) -> str:
    """Write ``points`` in the training-data file format."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([point.to_record() for point in points], indent=2))
    return str(path)


@register_dataset("file")
def load_file_dataset(*, path: str | Path, **_: object) -> DatasetSpec:
    """Expose a training-data file through the dataset registry."""

    path = Path(path)
    return DatasetSpec(
        name=path.stem,
        points=load_training_data(path),
        provenance={"type": "file", "path": str(path)},
    )


__all__ = [
    "check_compatible",
    "dump_training_data",
    "load_file_dataset",
    "load_training_data",
    "parse_records",
]
