"""Training loop, configuration and run pipelines."""

from .config import RunConfig
from .pipelines import RunResult, load_preset, presets, run_pipeline
from .trainer import Trainer, TrainResult

__all__ = ["RunConfig", "RunResult", "TrainResult", "Trainer", "load_preset", "presets", "run_pipeline"]
