# spark.py

import numpy as np

from constants import FADE_IN_MS, FADE_OUT_FRACTION, DRIFT_FREQ_X, DRIFT_FREQ_Y

TWO_PI = 2.0 * np.pi


class Spark:
    """
    Represents a single spark in the field.

    Data Contract:
    - Inputs:
        - spark_id (int): Unique, assigned by the owning SparkSystem.
        - position, velocity (np.ndarray): Shape (2,), pixels and pixels/second.
        - base_radius (float): Fixed at spawn.
        - energy (float): In [energy_floor * 0.5, 1].
        - color (array-like): RGB, 0-255.
        - polarity (float): In [0, 1]. Decides who gives in a pairing.
        - seed (float): In [0, 1]. Phase offset for the drift oscillator.
        - birth (float): Timestamp in milliseconds.
        - lifetime (float): Milliseconds.
    - Invariants: birth and lifetime never change. Position stays inside the
      viewport. Energy stays within [energy_floor * 0.5, 1].
    """
    def __init__(self, spark_id: int, position: np.ndarray, velocity: np.ndarray, base_radius: float,
                 energy: float, color, polarity: float, seed: float, birth: float, lifetime: float):
        self.id = spark_id
        self.position = np.asarray(position, dtype=float)
        self.velocity = np.asarray(velocity, dtype=float)
        self.base_radius = base_radius
        self.energy = energy
        self.color = np.asarray(color, dtype=float)
        self.polarity = polarity
        self.seed = seed
        self.birth = birth
        self.lifetime = lifetime

        self.age = 0.0
        self.ring_alpha = 0.0
        self.fade = 0.0

    def __repr__(self):
        return f"Spark(id={self.id}, pos=({self.x:.1f}, {self.y:.1f}), energy={self.energy:.3f})"

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    @property
    def alpha(self) -> float:
        """Opacity for the renderer: fade envelope weighted by energy."""
        return self.fade * (0.35 + 0.65 * self.energy)

    @property
    def visual_radius(self) -> float:
        return self.base_radius * (0.6 + 0.4 * self.energy)

    def distance_to(self, other: "Spark") -> float:
        diff = other.position - self.position
        return float(np.sqrt(diff[0] * diff[0] + diff[1] * diff[1]))

    def compute_fade(self) -> float:
        """
        Fade-in over the first 500ms multiplied by a fade-out over the last
        quarter of the lifetime.
        """
        fade_in = min(1.0, max(0.0, self.age / FADE_IN_MS))
        fade_window = self.lifetime * FADE_OUT_FRACTION
        if fade_window > 0:
            fade_out = min(1.0, max(0.0, (self.lifetime - self.age) / fade_window))
        else:
            fade_out = 1.0 if self.age < self.lifetime else 0.0
        return fade_in * fade_out

    def advance(self, now: float, dt: float, width: float, height: float, config) -> bool:
        """
        Advances the spark by dt seconds at timestamp now (ms).
        Returns False once the spark has outlived its lifetime.
        """
        self.age = max(0.0, now - self.birth)

        # Drift: a slow oscillating push, phase-shifted per spark.
        phase = self.seed * TWO_PI
        self.velocity[0] += np.sin(now * DRIFT_FREQ_X + phase) * config.drift_strength * dt
        self.velocity[1] += np.cos(now * DRIFT_FREQ_Y + phase * 1.3) * config.drift_strength * dt

        # Damping is specified per 60fps frame.
        self.velocity *= config.damping ** (dt * 60.0)

        speed = float(np.sqrt(self.velocity[0] ** 2 + self.velocity[1] ** 2))
        if speed > config.max_speed:
            self.velocity *= config.max_speed / max(speed, 1e-9)

        self.position += self.velocity * dt
        self.wrap(width, height)

        energy_min = config.energy_floor * 0.5
        self.energy *= (1.0 - config.energy_decay_per_sec) ** dt
        self.energy = min(1.0, max(energy_min, self.energy))

        self.ring_alpha *= config.ring_decay ** (dt * 60.0)

        self.fade = self.compute_fade()
        return self.age < self.lifetime

    def wrap(self, width: float, height: float):
        """Toroidal wrap on each axis into [0, width) x [0, height)."""
        x = self.position[0] % width
        y = self.position[1] % height
        # -1e-17 % w rounds to w itself.
        if x >= width:
            x = 0.0
        if y >= height:
            y = 0.0
        self.position[0] = x
        self.position[1] = y
