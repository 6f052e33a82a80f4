"""Core typing contracts for the perceptron."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np

from .errors import InvalidTrainingData

Array = np.ndarray


def as_vector(values: Sequence[float] | Array) -> Array:
    """Return ``values`` as a fresh 1-D float64 array."""

    return np.array(values, dtype=np.float64)


@dataclass(frozen=True, eq=False)
class DataPoint:
    """One training example: an input vector and the output it should produce."""

    input: Array
    expected_output: Array

    def __post_init__(self) -> None:
        # Private read-only copies so the caller keeps ownership of its arrays.
        for name in ("input", "expected_output"):
            vector = as_vector(getattr(self, name))
            vector.setflags(write=False)
            object.__setattr__(self, name, vector)

    @classmethod
    def coerce(cls, value: Any) -> "DataPoint":
        """Build a :class:`DataPoint` from a point, a pair or a record mapping."""

        if isinstance(value, DataPoint):
            return value
        if isinstance(value, Mapping):
            if "input" not in value:
                raise InvalidTrainingData("data point has no 'input'")
            key = "expectedOutput" if "expectedOutput" in value else "expected_output"
            if key not in value:
                raise InvalidTrainingData("data point has no 'expectedOutput'")
            return cls(input=value["input"], expected_output=value[key])
        inputs, expected = value
        return cls(input=inputs, expected_output=expected)

    def to_record(self) -> dict[str, list[float]]:
        return {
            "input": self.input.tolist(),
            "expectedOutput": self.expected_output.tolist(),
        }


__all__ = ["Array", "DataPoint", "as_vector"]
