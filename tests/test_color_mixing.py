import numpy as np
import pytest

from color_mixing import darkening_factor, mix_colors, proximity_weight, smoothstep


def test_mix_at_zero_returns_first_color_exactly() -> None:
    c1 = np.array([232.0, 93.0, 4.0])
    c2 = np.array([10.0, 200.0, 255.0])
    out = mix_colors(c1, c2, 0.0)
    assert np.array_equal(out, c1)
    # A copy, not the same buffer.
    assert out is not c1


def test_mix_at_one_converges_to_second_color() -> None:
    c2 = [10.0, 200.0, 255.0]
    out = mix_colors([232.0, 93.0, 4.0], c2, 1.0)
    assert darkening_factor(1.0) == 1.0
    assert out == pytest.approx(c2, abs=1e-6)


def test_darkening_is_strongest_mid_blend() -> None:
    assert darkening_factor(0.0) == 1.0
    assert darkening_factor(0.5) == pytest.approx(1.0 - 0.25 * 0.15)
    white = [255.0, 255.0, 255.0]
    mid = mix_colors(white, white, 0.5)
    assert np.all(mid < 255.0)
    assert np.all(mid > 240.0)


def test_mix_clamps_out_of_range_channels() -> None:
    out = mix_colors([300.0, -20.0, 128.0], [255.0, 0.0, 128.0], 0.5)
    assert np.all(out >= 0.0)
    assert np.all(out <= 255.0)


def test_mix_interpolates_in_linear_light() -> None:
    # Linear-space blending of black and white lands well above the gamma-space midpoint.
    out = mix_colors([0.0, 0.0, 0.0], [255.0, 255.0, 255.0], 0.5)
    assert np.all(out > 127.5)


def test_smoothstep_and_proximity_weight() -> None:
    assert smoothstep(0.0, 1.0, -1.0) == 0.0
    assert smoothstep(0.0, 1.0, 2.0) == 1.0
    assert smoothstep(0.0, 1.0, 0.5) == pytest.approx(0.5)

    radius = 140.0
    assert proximity_weight(0.0, radius) == 1.0
    assert proximity_weight(radius, radius) == 0.0
    assert proximity_weight(radius * 2, radius) == 0.0
    assert proximity_weight(radius * 0.5, radius) == pytest.approx(0.5)
    assert proximity_weight(radius * 0.25, radius) > proximity_weight(radius * 0.75, radius)
