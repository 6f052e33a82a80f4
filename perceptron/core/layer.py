"""A single dense layer: affine transform, activation and gradient buffers."""

from __future__ import annotations

import numbers

import numpy as np

from .activations import Activation, resolve
from .errors import InvalidConfig, ShapeMismatch
from .types import Array, as_vector


def check_count(value: object, what: str) -> int:
    """Return ``value`` as an ``int`` if it is a positive integer."""

    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidConfig(f"{what} must be a positive integer, got {value!r}")
    if value <= 0:
        raise InvalidConfig(f"{what} must be a positive integer, got {value!r}")
    return int(value)


def check_vector(values, length: int, what: str) -> Array:
    """Return ``values`` as a float vector, raising if its length is not ``length``."""

    vector = as_vector(values)
    if vector.ndim != 1:
        raise ShapeMismatch(what, length, f"an array of shape {vector.shape}")
    if vector.shape[0] != length:
        raise ShapeMismatch(what, length, vector.shape[0])
    return vector


class Layer:
    """Dense layer mapping ``input_count`` neurons to ``output_count`` neurons.

    ``weights[j, i]`` connects input neuron ``j`` to output neuron ``i``. The
    ``inputs``, ``weighted_inputs`` and ``outputs`` arrays hold the most recent
    forward pass only; ``weight_gradients`` and ``bias_gradients`` accumulate
    cost gradients until :meth:`apply_gradients` consumes them.
    """

    def __init__(
        self,
        input_count: int,
        output_count: int,
        activation: str | Activation = "sigmoid",
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.input_count = check_count(input_count, "input_count")
        self.output_count = check_count(output_count, "output_count")
        self.activation = resolve(activation)
        self._rng = rng if rng is not None else np.random.default_rng()

        self.inputs = np.zeros(self.input_count)
        self.weighted_inputs = np.zeros(self.output_count)
        self.outputs = np.zeros(self.output_count)
        self.weights = np.zeros((self.input_count, self.output_count))
        self.biases = np.zeros(self.output_count)
        self.weight_gradients = np.zeros_like(self.weights)
        self.bias_gradients = np.zeros_like(self.biases)

        self.randomize()

    def __repr__(self) -> str:
        return (
            f"Layer(input_count={self.input_count}, output_count={self.output_count}, "
            f"activation={self.activation.name!r})"
        )

    def randomize(self) -> None:
        """Draw every weight and bias independently from U[-1, 1)."""

        # In-place so the arrays keep their identity and shape.
        self.weights[...] = self._rng.uniform(-1.0, 1.0, size=self.weights.shape)
        self.biases[...] = self._rng.uniform(-1.0, 1.0, size=self.biases.shape)

    def forward(self, inputs) -> Array:
        """Run the layer on ``inputs`` and return a copy of its outputs."""

        x = check_vector(inputs, self.input_count, "layer input")
        self.inputs[...] = x
        self.weighted_inputs[...] = self.biases + x @ self.weights
        self.outputs[...] = self.activation(self.weighted_inputs)
        return self.outputs.copy()

    def update_gradients(self, node_values) -> None:
        """Accumulate the cost gradients implied by ``node_values``.

        Uses the inputs cached by the last :meth:`forward` call.
        """

        delta = check_vector(node_values, self.output_count, "node values")
        self.weight_gradients += np.outer(self.inputs, delta)
        self.bias_gradients += delta

    def apply_gradients(self, learn_rate: float) -> None:
        """Take one gradient-descent step and zero the accumulators."""

        self.biases -= learn_rate * self.bias_gradients
        self.weights -= learn_rate * self.weight_gradients
        self.clear_gradients()

    def clear_gradients(self) -> None:
        self.weight_gradients.fill(0.0)
        self.bias_gradients.fill(0.0)


__all__ = ["Layer", "check_count", "check_vector"]
