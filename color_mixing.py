# color_mixing.py

"""
Gamma-correct color blending and the smoothstep falloff.

The hot paths are compiled with Numba in nopython mode and work on plain
float64 arrays of three channels in the 0-255 range.
"""

import numpy as np
import numba

from constants import GAMMA, MIX_DARKENING


@numba.jit(nopython=True)
def _mix_rgb_jit(c1, c2, t, gamma, darkening):
    """
    Blends c1 toward c2 in linear light, darkening mid-blend like mixed pigment.
    Channels are clamped before converting back to gamma space.
    """
    out = np.empty(3)
    darken = 1.0 - t * (1.0 - t) * darkening
    for i in range(3):
        a = min(max(c1[i], 0.0), 255.0) / 255.0
        b = min(max(c2[i], 0.0), 255.0) / 255.0
        lin = (a ** gamma) * (1.0 - t) + (b ** gamma) * t
        lin = min(max(lin * darken, 0.0), 1.0)
        out[i] = min(max((lin ** (1.0 / gamma)) * 255.0, 0.0), 255.0)
    return out


@numba.jit(nopython=True)
def _smoothstep_jit(edge0, edge1, x):
    t = (x - edge0) / (edge1 - edge0)
    if t < 0.0:
        t = 0.0
    elif t > 1.0:
        t = 1.0
    return t * t * (3.0 - 2.0 * t)


def darkening_factor(t: float) -> float:
    """Multiplier applied to the linear blend; 1 at both ends, lowest at t=0.5."""
    return 1.0 - t * (1.0 - t) * MIX_DARKENING


def mix_colors(c1, c2, t: float) -> np.ndarray:
    """
    Mixes two RGB colors. t=0 returns c1 unchanged (no gamma round trip),
    t is clamped to [0, 1].
    """
    c1 = np.asarray(c1, dtype=np.float64)
    if t <= 0.0:
        return c1.copy()
    t = min(t, 1.0)
    return _mix_rgb_jit(c1, np.asarray(c2, dtype=np.float64), float(t), GAMMA, MIX_DARKENING)


def smoothstep(edge0: float, edge1: float, x: float) -> float:
    return _smoothstep_jit(float(edge0), float(edge1), float(x))


def proximity_weight(distance: float, radius: float) -> float:
    """1 at distance 0, 0 at and beyond the radius, smooth in between."""
    return 1.0 - smoothstep(0.0, radius, distance)
