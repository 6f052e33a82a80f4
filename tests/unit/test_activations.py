import numpy as np
import pytest

from perceptron.core.activations import REGISTRY, Activation, relu, resolve, sigmoid
from perceptron.core.errors import InvalidConfig


def test_known_values():
    x = np.array([-1.0, 0.0, 2.5])
    np.testing.assert_allclose(relu(x), [0.0, 0.0, 2.5])
    assert sigmoid(0.0) == pytest.approx(0.5)
    np.testing.assert_allclose(sigmoid(np.array([-800.0, 800.0])), [0.0, 1.0])


@pytest.mark.parametrize("name", list(REGISTRY.names()))
def test_activations_are_pure(name):
    activation = resolve(name)
    x = np.linspace(-3.0, 3.0, 50)
    snapshot = x.copy()
    first = activation(x)
    second = activation(x)
    np.testing.assert_array_equal(first, second)
    np.testing.assert_array_equal(activation.derivative(x), activation.derivative(x))
    np.testing.assert_array_equal(x, snapshot)


@pytest.mark.parametrize("name", list(REGISTRY.names()))
def test_derivative_matches_finite_difference(name):
    activation = resolve(name)
    x = np.linspace(-3.0, 3.0, 50)
    eps = 1e-6
    numeric = (activation(x + eps) - activation(x - eps)) / (2 * eps)
    np.testing.assert_allclose(activation.derivative(x), numeric, atol=1e-5)


def test_resolve_passes_instances_through():
    custom = Activation("square", lambda z: z * z, lambda z: 2 * z)
    assert resolve(custom) is custom
    assert resolve("SIGMOID").name == "sigmoid"
    with pytest.raises(InvalidConfig):
        resolve("gelu")
