import numpy as np

from polarity_network import RandomPolarityNetwork


def test_outputs_lie_strictly_inside_unit_interval() -> None:
    net = RandomPolarityNetwork(np.random.default_rng(3))
    batch = np.random.default_rng(4).uniform(-1.0, 1.0, (500, 4))
    out = net(batch)
    assert out.shape == (500,)
    assert np.all(out > 0.0)
    assert np.all(out < 1.0)


def test_weights_are_fixed_and_output_is_deterministic() -> None:
    net = RandomPolarityNetwork(np.random.default_rng(11))
    features = np.array([0.2, -0.4, 0.0, 0.9])
    first = net(features)
    assert isinstance(first, float)
    assert net(features) == first

    same_weights = RandomPolarityNetwork(np.random.default_rng(11))
    assert same_weights(features) == first


def test_hidden_layer_shape() -> None:
    net = RandomPolarityNetwork(np.random.default_rng(0))
    assert net.w_hidden.shape == (4, 6)
    assert net.b_hidden.shape == (6,)
    assert net.w_out.shape == (6,)
    limit = np.sqrt(6.0 / 10.0)
    assert np.all(np.abs(net.w_hidden) <= limit)


def test_spawn_features_are_normalized_with_zero_age() -> None:
    features = RandomPolarityNetwork.spawn_features(0.0, 600.0, 800.0, 600.0, 0.75)
    assert features.tolist() == [-1.0, 1.0, 0.0, 0.5]
