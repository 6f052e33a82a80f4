"""Epoch loop around :meth:`Network.learn` with metric callbacks."""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Sequence

import numpy as np

from ..core.errors import InvalidTrainingData
from ..core.network import Network
from ..core.types import DataPoint
from .metrics import compute_metrics, default_metrics


@dataclass(frozen=True)
class TrainResult:
    """Summary returned by :meth:`Trainer.run`."""

    epochs: int
    initial_loss: float
    final_loss: float
    history: List[Mapping[str, float]] = field(default_factory=list)
    stopped_early: bool = False


class Trainer:
    """Call ``network.learn`` once per epoch and report metrics to callbacks.

    Callbacks are objects with an ``on_epoch(epoch, metrics)`` method, or plain
    callables taking the same arguments.
    """

    def __init__(self, network: Network, callbacks: Sequence[object] | None = None) -> None:
        self.network = network
        self.callbacks = list(callbacks or [])

    def run(
        self,
        data_points: Iterable[object],
        epochs: int,
        *,
        log_every: int = 1,
        metric_names: Sequence[str] | str = (),
        target_loss: float | None = None,
        probe: Sequence[float] | None = None,
    ) -> TrainResult:
        if epochs <= 0:
            raise ValueError("epochs must be positive")
        points = [DataPoint.coerce(point) for point in data_points]
        if not points:
            raise InvalidTrainingData("training data is empty")
        if isinstance(metric_names, str):
            metric_names = [m.strip() for m in metric_names.split(",") if m.strip()]
        metric_names = list(metric_names) or default_metrics()
        log_every = max(1, int(log_every))

        initial = self.network.cost(points)
        history: List[Mapping[str, float]] = []
        warned = False
        stopped_early = False
        epoch = 0
        for epoch in range(1, epochs + 1):
            # learn() reports the loss seen before its own update.
            loss = self.network.learn(points)
            if not math.isfinite(loss) and not warned:
                warnings.warn(
                    f"training loss became non-finite at epoch {epoch}; "
                    "consider a smaller learn rate",
                    RuntimeWarning,
                    stacklevel=2,
                )
                warned = True
            is_last = epoch == epochs
            reached = target_loss is not None and loss <= target_loss
            if epoch % log_every == 0 or is_last or reached:
                metrics = self._evaluate(points, metric_names)
                metrics["loss"] = loss
                history.append(metrics)
                self._emit_epoch(epoch, metrics)
            if reached:
                stopped_early = not is_last
                break

        final = self.network.cost(points)
        if probe is not None:
            self.network.input(probe)
        else:
            self.network.reset_display_state()
        return TrainResult(
            epochs=epoch,
            initial_loss=initial,
            final_loss=final,
            history=history,
            stopped_early=stopped_early,
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _evaluate(self, points: Sequence[DataPoint], metric_names: Sequence[str]) -> dict:
        predictions = np.stack([self.network.input(point.input) for point in points])
        targets = np.stack([point.expected_output for point in points])
        return dict(compute_metrics(metric_names, predictions, targets))

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["TrainResult", "Trainer"]
