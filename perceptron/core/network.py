"""Feed-forward network with backpropagation and batched gradient descent."""

from __future__ import annotations

import math
import numbers
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .activations import Activation, resolve
from .errors import InvalidConfig
from .layer import Layer, check_count, check_vector
from .types import Array, DataPoint


def check_learn_rate(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidConfig(f"learn_rate must be a number in (0, 1], got {value!r}")
    rate = float(value)
    if math.isnan(rate) or not 0.0 < rate <= 1.0:
        raise InvalidConfig(f"learn_rate must be in (0, 1], got {value!r}")
    return rate


class Network:
    """Ordered chain of :class:`Layer` objects trained with backpropagation.

    Parameters
    ----------
    layer_sizes:
        Neuron counts from the input layer to the output layer; at least two
        positive integers.
    learn_rate:
        Gradient-descent step size in ``(0, 1]``.
    activation:
        Activation shared by every layer, as a registered name or an
        :class:`~perceptron.core.activations.Activation`.
    rng, seed:
        Source of the initial weights. ``rng`` wins when both are given.

    Every call that changes observable state bumps :attr:`generation`, which
    renderers poll to decide when to redraw.
    """

    def __init__(
        self,
        layer_sizes: Sequence[int],
        learn_rate: float,
        activation: str | Activation = "sigmoid",
        *,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ) -> None:
        try:
            sizes = list(layer_sizes)
        except TypeError:
            raise InvalidConfig(f"layer_sizes must be a sequence, got {layer_sizes!r}") from None
        if len(sizes) < 2:
            raise InvalidConfig(
                f"layer_sizes needs at least an input and an output layer, got {sizes}"
            )
        sizes = [check_count(size, f"layer_sizes[{idx}]") for idx, size in enumerate(sizes)]

        self._learn_rate = check_learn_rate(learn_rate)
        self._activation = resolve(activation)
        rng = rng if rng is not None else np.random.default_rng(seed)
        self._layers: Tuple[Layer, ...] = tuple(
            Layer(n_in, n_out, self._activation, rng=rng)
            for n_in, n_out in zip(sizes[:-1], sizes[1:])
        )
        self._generation = 0

    def __repr__(self) -> str:
        return (
            f"Network(layer_sizes={self.layer_sizes}, learn_rate={self._learn_rate}, "
            f"activation={self._activation.name!r})"
        )

    # ------------------------------------------------------------------
    # Forward propagation

    def input(self, data) -> Array:
        """Forward-propagate ``data`` and return a copy of the network output."""

        vector = check_vector(data, self._layers[0].input_count, "network input")
        outputs = vector
        for layer in self._layers:
            outputs = layer.forward(outputs)
        self._generation += 1
        return outputs

    def reset_display_state(self) -> None:
        """Refresh every layer cache with the response to an all-zero input."""

        self.input(np.zeros(self._layers[0].input_count))

    def cost(self, data_points: Iterable[object]) -> float:
        """Return the total squared error over ``data_points``."""

        points = self._coerce_batch(data_points)
        total = 0.0
        for point in points:
            diff = self.input(point.input) - point.expected_output
            total += float(np.sum(diff * diff))
        return total

    # ------------------------------------------------------------------
    # Training

    def learn(self, data_points: Iterable[object]) -> float:
        """Run one training pass over ``data_points`` and apply one update.

        Gradients from every point are summed, then each layer takes a single
        gradient-descent step. Returns the total squared error seen during the
        forward passes, i.e. before the update.
        """

        points = self._coerce_batch(data_points)
        if not points:
            return 0.0

        for layer in self._layers:
            layer.clear_gradients()

        total = 0.0
        for point in points:
            total += self._update_all_gradients(point)

        for layer in self._layers:
            layer.apply_gradients(self._learn_rate)
        self._generation += 1
        return total

    def _coerce_batch(self, data_points: Iterable[object]) -> List[DataPoint]:
        n_in = self._layers[0].input_count
        n_out = self._layers[-1].output_count
        points = [DataPoint.coerce(point) for point in data_points]
        for idx, point in enumerate(points):
            check_vector(point.input, n_in, f"data point {idx} input")
            check_vector(point.expected_output, n_out, f"data point {idx} expected output")
        return points

    def _update_all_gradients(self, point: DataPoint) -> float:
        self.input(point.input)
        output_layer = self._layers[-1]

        node_values = self._output_layer_node_values(point.expected_output)
        output_layer.update_gradients(node_values)

        for idx in reversed(range(len(self._layers) - 1)):
            layer = self._layers[idx]
            node_values = self._hidden_layer_node_values(
                layer, self._layers[idx + 1], node_values
            )
            layer.update_gradients(node_values)

        diff = output_layer.outputs - point.expected_output
        return float(np.sum(diff * diff))

    def _output_layer_node_values(self, expected: Array) -> Array:
        layer = self._layers[-1]
        # d(squared error)/d(output), times d(output)/d(weighted input)
        cost_derivative = 2.0 * (layer.outputs - expected)
        return cost_derivative * self._activation.derivative(layer.weighted_inputs)

    def _hidden_layer_node_values(
        self, layer: Layer, next_layer: Layer, next_node_values: Array
    ) -> Array:
        # next_layer.weights[i, j] runs from this layer's neuron i to neuron j.
        propagated = next_layer.weights @ next_node_values
        return propagated * self._activation.derivative(layer.weighted_inputs)

    # ------------------------------------------------------------------
    # Read accessors

    @property
    def layers(self) -> Tuple[Layer, ...]:
        return self._layers

    @property
    def layer_sizes(self) -> List[int]:
        return [self._layers[0].input_count] + [layer.output_count for layer in self._layers]

    @property
    def learn_rate(self) -> float:
        return self._learn_rate

    @property
    def activation(self) -> Activation:
        return self._activation

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def weights(self) -> List[Array]:
        """Per-layer weight matrices, shaped ``(inputs, outputs)``."""

        return [layer.weights.copy() for layer in self._layers]

    @property
    def biases(self) -> List[Array]:
        return [layer.biases.copy() for layer in self._layers]

    @property
    def inputs(self) -> Array:
        """Input cached by the most recent forward pass."""

        return self._layers[0].inputs.copy()

    @property
    def outputs(self) -> Array:
        """Output cached by the most recent forward pass."""

        return self._layers[-1].outputs.copy()

    def parameter_count(self) -> int:
        return int(sum(layer.weights.size + layer.biases.size for layer in self._layers))


__all__ = ["Network", "check_learn_rate"]
