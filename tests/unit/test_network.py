import numpy as np
import pytest

from perceptron.core.activations import Activation, sigmoid, sigmoid_deriv
from perceptron.core.errors import InvalidConfig, InvalidTrainingData, ShapeMismatch
from perceptron.core.network import Network
from perceptron.core.types import DataPoint


def _snapshot(network):
    return [
        (
            layer.inputs.copy(),
            layer.weighted_inputs.copy(),
            layer.outputs.copy(),
            layer.weights.copy(),
            layer.biases.copy(),
            layer.weight_gradients.copy(),
            layer.bias_gradients.copy(),
        )
        for layer in network.layers
    ]


def _assert_same(before, after):
    for layer_before, layer_after in zip(before, after):
        for a, b in zip(layer_before, layer_after):
            np.testing.assert_array_equal(a, b)


def test_builds_chained_layers():
    net = Network([3, 5, 4, 2], 0.1, seed=0)
    assert len(net.layers) == 3
    assert net.layer_sizes == [3, 5, 4, 2]
    for layer, next_layer in zip(net.layers[:-1], net.layers[1:]):
        assert layer.output_count == next_layer.input_count
    for k, W in enumerate(net.weights):
        assert W.shape == (net.layer_sizes[k], net.layer_sizes[k + 1])
    assert [b.shape for b in net.biases] == [(5,), (4,), (2,)]


@pytest.mark.parametrize(
    "sizes, rate",
    [
        ([3], 0.1),
        ([], 0.1),
        ([2, 0, 1], 0.1),
        ([2, -3], 0.1),
        ([2, 1.5], 0.1),
        ([2, 1], 0.0),
        ([2, 1], 1.5),
        ([2, 1], -0.1),
        ([2, 1], float("nan")),
        ([2, 1], True),
    ],
)
def test_invalid_config_rejected(sizes, rate):
    with pytest.raises(InvalidConfig):
        Network(sizes, rate)


def test_learn_rate_of_one_is_allowed():
    assert Network([2, 1], 1.0, seed=0).learn_rate == 1.0


def test_unknown_activation_rejected():
    with pytest.raises(InvalidConfig):
        Network([2, 1], 0.1, "softsign")


def test_seed_makes_initialisation_reproducible():
    a = Network([2, 3, 1], 0.1, seed=42)
    b = Network([2, 3, 1], 0.1, rng=np.random.default_rng(42))
    for wa, wb in zip(a.weights, b.weights):
        np.testing.assert_array_equal(wa, wb)
    c = Network([2, 3, 1], 0.1, seed=43)
    assert not np.allclose(a.weights[0], c.weights[0])


def test_zero_parameters_output_half():
    net = Network([2, 2, 1], 0.1, "sigmoid", seed=0)
    for layer in net.layers:
        layer.weights.fill(0.0)
        layer.biases.fill(0.0)
    np.testing.assert_allclose(net.input([0, 0]), [0.5])
    np.testing.assert_allclose(net.outputs, [0.5])
    np.testing.assert_allclose(net.inputs, [0.0, 0.0])


def test_input_chains_layer_outputs():
    net = Network([2, 3, 2], 0.1, seed=1)
    x = np.array([0.2, -0.7])
    hidden = sigmoid(net.layers[0].biases + x @ net.layers[0].weights)
    expected = sigmoid(net.layers[1].biases + hidden @ net.layers[1].weights)
    np.testing.assert_allclose(net.input(x), expected)


def test_wrong_input_length_raises_without_mutation():
    net = Network([3, 2, 1], 0.1, seed=2)
    net.input([1.0, 2.0, 3.0])
    before = _snapshot(net)
    generation = net.generation
    with pytest.raises(ShapeMismatch):
        net.input([1.0, 2.0])
    _assert_same(before, _snapshot(net))
    assert net.generation == generation


def test_learn_with_bad_point_raises_before_any_update():
    net = Network([2, 2, 1], 0.5, seed=3)
    before = _snapshot(net)
    batch = [
        DataPoint([0, 1], [1]),
        DataPoint([0, 1, 1], [1]),
    ]
    with pytest.raises(ShapeMismatch):
        net.learn(batch)
    with pytest.raises(ShapeMismatch):
        net.learn([DataPoint([0, 1], [1, 0])])
    _assert_same(before, _snapshot(net))


@pytest.mark.parametrize("record", [{"input": [0, 1]}, {"expectedOutput": [1]}])
def test_record_missing_key_raises_before_any_update(record):
    net = Network([2, 1], 0.5, seed=3)
    before = _snapshot(net)
    with pytest.raises(InvalidTrainingData):
        net.learn([{"input": [1, 1], "expectedOutput": [0]}, record])
    with pytest.raises(InvalidTrainingData):
        net.cost([record])
    _assert_same(before, _snapshot(net))


def test_accessors_return_snapshots():
    net = Network([2, 2], 0.1, seed=4)
    net.input([1.0, 0.5])
    weights = net.weights
    weights[0][:] = 7.0
    outputs = net.outputs
    outputs[:] = 7.0
    assert not np.any(net.layers[0].weights == 7.0)
    assert not np.any(net.layers[0].outputs == 7.0)


def test_learn_matches_numerical_gradient_through_hidden_layers():
    net = Network([3, 4, 2], 0.5, "sigmoid", seed=7)
    point = DataPoint([0.4, -0.9, 1.3], [0.2, 0.8])
    eps = 1e-6

    numeric = []
    for layer in net.layers:
        for params in (layer.weights, layer.biases):
            grad = np.zeros_like(params)
            for idx in np.ndindex(params.shape):
                original = params[idx]
                params[idx] = original + eps
                plus = net.cost([point])
                params[idx] = original - eps
                minus = net.cost([point])
                params[idx] = original
                grad[idx] = (plus - minus) / (2 * eps)
            numeric.append(grad)

    before = [p.copy() for layer in net.layers for p in (layer.weights, layer.biases)]
    net.learn([point])
    after = [p for layer in net.layers for p in (layer.weights, layer.biases)]
    for old, new, grad in zip(before, after, numeric):
        np.testing.assert_allclose((old - new) / net.learn_rate, grad, atol=1e-6, rtol=1e-4)


def test_learn_sums_gradients_over_the_batch():
    a = Network([2, 3, 1], 0.1, seed=11)
    b = Network([2, 3, 1], 0.1, seed=11)
    points = [DataPoint([0, 1], [1]), DataPoint([1, 1], [0])]
    a.learn(points)
    step_a = [w for w in a.weights]

    # Accumulating both points by hand through the layers gives the same step.
    for point in points:
        b.input(point.input)
        out = b.layers[-1]
        delta = 2.0 * (out.outputs - point.expected_output) * sigmoid_deriv(out.weighted_inputs)
        out.update_gradients(delta)
        hidden = b.layers[0]
        hidden_delta = (out.weights @ delta) * sigmoid_deriv(hidden.weighted_inputs)
        hidden.update_gradients(hidden_delta)
    for layer in b.layers:
        layer.apply_gradients(b.learn_rate)
    for wa, wb in zip(step_a, b.weights):
        np.testing.assert_allclose(wa, wb)


def test_gradient_accumulators_are_empty_after_learn():
    net = Network([2, 3, 1], 0.2, seed=5)
    net.learn([DataPoint([0, 1], [1]), DataPoint([1, 0], [1])])
    for layer in net.layers:
        assert not np.any(layer.weight_gradients)
        assert not np.any(layer.bias_gradients)


def test_stale_accumulators_do_not_leak_into_next_batch():
    a = Network([2, 1], 0.2, seed=6)
    b = Network([2, 1], 0.2, seed=6)
    a.layers[0].weight_gradients += 100.0
    point = DataPoint([1, 0], [1])
    a.learn([point])
    b.learn([point])
    np.testing.assert_allclose(a.weights[0], b.weights[0])


def test_single_point_error_decreases_with_small_learn_rate():
    net = Network([3, 4, 2], 0.01, seed=3)
    point = DataPoint([0.5, -0.25, 1.0], [1.0, 0.0])
    before = net.cost([point])
    reported = net.learn([point])
    after = net.cost([point])
    assert reported == pytest.approx(before)
    assert after < before


def test_learn_does_not_mutate_caller_data():
    net = Network([2, 2, 1], 0.5, seed=8)
    inputs = np.array([0.5, 1.0])
    expected = [1.0]
    records = [{"input": inputs, "expectedOutput": expected}, ([1.0, 1.0], [0.0])]
    net.learn(records)
    np.testing.assert_array_equal(inputs, [0.5, 1.0])
    assert expected == [1.0]
    # The display state is the last forward pass, not a zeroed input.
    np.testing.assert_allclose(net.inputs, [1.0, 1.0])


def test_empty_batch_is_a_no_op():
    net = Network([2, 1], 0.5, seed=9)
    before = _snapshot(net)
    assert net.learn([]) == 0.0
    _assert_same(before, _snapshot(net))


def test_shapes_hold_through_training():
    sizes = [2, 3, 3, 1]
    net = Network(sizes, 0.3, seed=10)
    points = [DataPoint([0, 0], [0]), DataPoint([1, 1], [1])]
    for _ in range(20):
        net.learn(points)
        for k, W in enumerate(net.weights):
            assert W.shape == (sizes[k], sizes[k + 1])
            assert net.layers[k].weight_gradients.shape == W.shape
            assert net.layers[k].bias_gradients.shape == (sizes[k + 1],)


def test_generation_increases_on_every_state_change():
    net = Network([2, 1], 0.5, seed=12)
    seen = [net.generation]
    net.input([1, 0])
    seen.append(net.generation)
    net.learn([DataPoint([0, 1], [1])])
    seen.append(net.generation)
    net.reset_display_state()
    seen.append(net.generation)
    assert seen == sorted(set(seen))


def test_reset_display_state_feeds_zeros():
    net = Network([3, 2], 0.5, seed=13)
    data = np.array([1.0, 2.0, 3.0])
    net.input(data)
    net.reset_display_state()
    np.testing.assert_array_equal(net.inputs, np.zeros(3))
    np.testing.assert_allclose(net.outputs, sigmoid(net.layers[0].biases))
    np.testing.assert_array_equal(data, [1.0, 2.0, 3.0])


def test_custom_activation_instance():
    doubled = Activation("double", lambda z: 2.0 * z, lambda z: np.full_like(z, 2.0))
    net = Network([1, 1], 0.1, doubled, seed=14)
    layer = net.layers[0]
    expected = 2.0 * (layer.biases + 3.0 * layer.weights[0])
    np.testing.assert_allclose(net.input([3.0]), expected)
    assert net.activation.name == "double"
