"""Core numerical primitives: layers, networks and activations."""

from . import activations, errors, types
from .errors import InvalidConfig, InvalidTrainingData, PerceptronError, ShapeMismatch
from .layer import Layer
from .network import Network
from .types import DataPoint

__all__ = [
    "activations",
    "errors",
    "types",
    "DataPoint",
    "InvalidConfig",
    "InvalidTrainingData",
    "Layer",
    "Network",
    "PerceptronError",
    "ShapeMismatch",
]
