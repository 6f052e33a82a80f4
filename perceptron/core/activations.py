"""Activation functions paired with their derivatives."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable

import numpy as np

from .errors import InvalidConfig
from .types import Array

ActivationFn = Callable[[Array], Array]


@dataclass(frozen=True)
class Activation:
    """A pure elementwise activation and its derivative.

    Both callables receive the pre-activation values (the layer's weighted
    inputs) and must not depend on anything but their argument.
    """

    name: str
    fn: ActivationFn
    derivative: ActivationFn

    def __call__(self, z: Array) -> Array:
        return self.fn(z)


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid, computed via ``tanh`` to avoid overflow."""

    return 0.5 * (1.0 + np.tanh(0.5 * np.asarray(x, dtype=np.float64)))


def sigmoid_deriv(x: Array) -> Array:
    s = sigmoid(x)
    return s * (1.0 - s)


def tanh(x: Array) -> Array:
    return np.tanh(np.asarray(x, dtype=np.float64))


def tanh_deriv(x: Array) -> Array:
    return 1.0 - np.tanh(np.asarray(x, dtype=np.float64)) ** 2


def relu(x: Array) -> Array:
    """Return the ReLU activation."""

    return np.maximum(np.asarray(x, dtype=np.float64), 0.0)


def relu_deriv(x: Array) -> Array:
    return (np.asarray(x) > 0).astype(np.float64)


def identity(x: Array) -> Array:
    return np.array(x, dtype=np.float64)


def identity_deriv(x: Array) -> Array:
    return np.ones_like(np.asarray(x, dtype=np.float64))


class ActivationRegistry:
    """Closed set of activation kinds selectable by name."""

    def __init__(self) -> None:
        self._registry: Dict[str, Activation] = {}

    def register(self, name: str, fn: ActivationFn, derivative: ActivationFn) -> None:
        self._registry[name] = Activation(name, fn, derivative)

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def resolve(self, activation: str | Activation) -> Activation:
        if isinstance(activation, Activation):
            return activation
        key = str(activation).lower()
        if key not in self._registry:
            available = ", ".join(self.names())
            raise InvalidConfig(
                f"Unknown activation {activation!r}. Available activations: {available}"
            )
        return self._registry[key]


REGISTRY = ActivationRegistry()
REGISTRY.register("sigmoid", sigmoid, sigmoid_deriv)
REGISTRY.register("tanh", tanh, tanh_deriv)
REGISTRY.register("relu", relu, relu_deriv)
REGISTRY.register("identity", identity, identity_deriv)
# Alias kept for configs that name the logistic function explicitly
REGISTRY.register("logistic", sigmoid, sigmoid_deriv)


def resolve(activation: str | Activation) -> Activation:
    """Return the :class:`Activation` for a name or pass an instance through."""

    return REGISTRY.resolve(activation)


__all__ = [
    "Activation",
    "ActivationRegistry",
    "REGISTRY",
    "identity",
    "relu",
    "resolve",
    "sigmoid",
    "tanh",
]
