"""Multilayer perceptron with manual backpropagation."""

from .core import activations  # noqa: F401
from .core.errors import InvalidConfig, InvalidTrainingData, PerceptronError, ShapeMismatch
from .core.layer import Layer
from .core.network import Network
from .core.types import DataPoint
from .data import get_dataset, load_training_data
from .training import RunConfig, Trainer, load_preset, presets, run_pipeline

__version__ = "0.1.0"

__all__ = [
    "DataPoint",
    "InvalidConfig",
    "InvalidTrainingData",
    "Layer",
    "Network",
    "PerceptronError",
    "RunConfig",
    "ShapeMismatch",
    "Trainer",
    "activations",
    "get_dataset",
    "load_preset",
    "load_training_data",
    "presets",
    "run_pipeline",
]
