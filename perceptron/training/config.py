"""Validated run settings: network shape, hyperparameters and probe input."""

from __future__ import annotations

import numbers
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Sequence

from ..core import activations
from ..core.errors import InvalidConfig
from ..core.layer import check_count
from ..core.network import check_learn_rate

DEFAULT_LAYER_SIZES = (2, 2)
DEFAULT_LEARN_RATE = 0.001
DEFAULT_EPOCHS = 1000


def _probe(values: object, size: int) -> List[float]:
    if values is None:
        return [0.0] * size
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise InvalidConfig(f"inputs must be a list of numbers, got {values!r}")
    probe: List[float] = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidConfig(f"inputs must be numbers, got {value!r}")
        probe.append(float(value))
    if len(probe) != size:
        raise InvalidConfig(f"inputs has {len(probe)} values but the input layer has {size}")
    return probe


@dataclass(frozen=True)
class RunConfig:
    """Settings for one training run.

    ``inputs`` is the probe vector fed through the network once training ends,
    so that the final display state shows the response to a chosen input.
    """

    layer_sizes: List[int] = field(default_factory=lambda: list(DEFAULT_LAYER_SIZES))
    learn_rate: float = DEFAULT_LEARN_RATE
    epochs: int = DEFAULT_EPOCHS
    inputs: List[float] | None = None
    activation: str = "sigmoid"
    seed: int = 0
    log_every: int = 1
    target_loss: float | None = None

    def __post_init__(self) -> None:
        sizes = list(self.layer_sizes)
        if len(sizes) < 2:
            raise InvalidConfig(
                f"layer_sizes needs at least an input and an output layer, got {sizes}"
            )
        sizes = [check_count(size, f"layer_sizes[{idx}]") for idx, size in enumerate(sizes)]
        object.__setattr__(self, "layer_sizes", sizes)
        object.__setattr__(self, "learn_rate", check_learn_rate(self.learn_rate))
        object.__setattr__(self, "epochs", check_count(self.epochs, "epochs"))
        object.__setattr__(self, "log_every", check_count(self.log_every, "log_every"))
        object.__setattr__(self, "inputs", _probe(self.inputs, sizes[0]))
        activation = activations.resolve(self.activation)
        object.__setattr__(self, "activation", activation.name)
        if isinstance(self.seed, bool) or not isinstance(self.seed, numbers.Integral):
            raise InvalidConfig(f"seed must be an integer, got {self.seed!r}")
        if self.target_loss is not None:
            target = self.target_loss
            if isinstance(target, bool) or not isinstance(target, numbers.Real):
                raise InvalidConfig(f"target_loss must be a number, got {target!r}")
            object.__setattr__(self, "target_loss", float(target))

    @classmethod
    def from_mapping(
        cls, model: Mapping[str, Any], train: Mapping[str, Any] | None = None
    ) -> "RunConfig":
        """Build a config from the ``model`` and ``train`` sections of a run config."""

        train = dict(train or {})
        layer_sizes = model.get("layers", model.get("layer_sizes", DEFAULT_LAYER_SIZES))
        if isinstance(layer_sizes, (str, bytes)) or not isinstance(layer_sizes, Sequence):
            raise InvalidConfig(f"layers must be a list of integers, got {layer_sizes!r}")
        return cls(
            layer_sizes=list(layer_sizes),
            learn_rate=train.get("learn_rate", train.get("lr", DEFAULT_LEARN_RATE)),
            epochs=train.get("epochs", DEFAULT_EPOCHS),
            inputs=train.get("inputs"),
            activation=str(model.get("activation", "sigmoid")),
            seed=train.get("seed", 0),
            log_every=train.get("log_every", 1),
            target_loss=train.get("target_loss"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["DEFAULT_EPOCHS", "DEFAULT_LAYER_SIZES", "DEFAULT_LEARN_RATE", "RunConfig"]
