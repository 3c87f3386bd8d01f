# polarity_network.py

"""
A tiny, untrained feed-forward scorer that assigns each spark its polarity.

Weights are drawn once from the engine's random generator and never updated,
so the network is just a smooth random function of a spark's spawn features.
"""

import logging
import numpy as np

from constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

INPUT_SIZE = 4
HIDDEN_SIZE = 6


def _glorot_limit(fan_in: int, fan_out: int) -> float:
    return np.sqrt(6.0 / (fan_in + fan_out))


class RandomPolarityNetwork:
    """
    4 -> 6 (tanh) -> 1 (sigmoid).

    Data Contract:
    - Inputs: features [x_norm, y_norm, age_norm, seed_norm], each in [-1, 1].
      A single vector of shape (4,) or a batch of shape (n, 4).
    - Outputs: polarity in (0, 1); a float for a single vector, shape (n,) for a batch.
    - Invariants: weights are fixed after construction.
    """
    def __init__(self, rng: np.random.Generator):
        hidden_limit = _glorot_limit(INPUT_SIZE, HIDDEN_SIZE)
        output_limit = _glorot_limit(HIDDEN_SIZE, 1)

        self.w_hidden = rng.uniform(-hidden_limit, hidden_limit, (INPUT_SIZE, HIDDEN_SIZE))
        self.b_hidden = rng.uniform(-1.0 / np.sqrt(INPUT_SIZE), 1.0 / np.sqrt(INPUT_SIZE), HIDDEN_SIZE)
        self.w_out = rng.uniform(-output_limit, output_limit, HIDDEN_SIZE)
        self.b_out = rng.uniform(-1.0 / np.sqrt(HIDDEN_SIZE), 1.0 / np.sqrt(HIDDEN_SIZE))

        logger.debug(f"Polarity network initialized ({INPUT_SIZE}->{HIDDEN_SIZE}->1).")

    def forward(self, features):
        x = np.asarray(features, dtype=float)
        hidden = np.tanh(x @ self.w_hidden + self.b_hidden)
        logits = hidden @ self.w_out + self.b_out
        out = 1.0 / (1.0 + np.exp(-logits))
        if out.ndim == 0:
            return float(out)
        return out

    __call__ = forward

    @staticmethod
    def spawn_features(x: float, y: float, width: float, height: float, seed: float) -> np.ndarray:
        """Normalizes a spark's spawn state into the network's input range. Age is always 0 at spawn."""
        return np.array([
            (x / width) * 2.0 - 1.0,
            (y / height) * 2.0 - 1.0,
            0.0,
            seed * 2.0 - 1.0,
        ])
