"""Exception taxonomy for the perceptron core and its collaborators."""

from __future__ import annotations


class PerceptronError(ValueError):
    """Base class for every error raised by this package."""


class InvalidConfig(PerceptronError):
    """A layer size, learn rate or other run setting is out of range."""


class ShapeMismatch(PerceptronError):
    """A vector length disagrees with the layer that consumes it."""

    def __init__(self, what: str, expected: int, actual: object) -> None:
        super().__init__(f"{what}: expected length {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidTrainingData(PerceptronError):
    """A training batch is malformed or does not fit the network."""


__all__ = ["PerceptronError", "InvalidConfig", "ShapeMismatch", "InvalidTrainingData"]
