# flow_particle.py

import numpy as np

from constants import FLOW_PARTICLE_SIZE


class FlowParticle:
    """
    A short-lived token that travels from a giver spark to its receiver,
    visualizing an energy transfer.

    Data Contract:
    - Inputs: giver, receiver (Spark), color (RGB array fixed at spawn).
    - Invariants: progress t lies in [0, 1) while alive. The endpoints are
      live sparks; the engine retires the particle as soon as either dies.
    """
    def __init__(self, giver, receiver, color):
        self.giver = giver
        self.receiver = receiver
        self.color = np.asarray(color, dtype=float)
        self.t = 0.0
        self.alpha = 1.0

    def update(self, dt: float, base_speed: float) -> bool:
        """
        Advances along the live giver->receiver segment. Progress speed is
        inversely proportional to the current trip length so tokens move at
        roughly base_speed pixels per second.
        """
        distance = max(self.giver.distance_to(self.receiver), 1.0)
        self.t += (base_speed / distance) * dt
        self.alpha = min(1.0, max(0.0, 1.0 - self.t))
        return self.t < 1.0

    @property
    def position(self) -> np.ndarray:
        t = min(self.t, 1.0)
        return self.giver.position + (self.receiver.position - self.giver.position) * t

    @property
    def size(self) -> float:
        return FLOW_PARTICLE_SIZE * (1.0 - 0.4 * min(self.t, 1.0))

    def references(self, spark_ids) -> bool:
        return self.giver.id in spark_ids or self.receiver.id in spark_ids
