import numpy as np
import pytest

from spark import Spark
from spark_config import SparkConfig


@pytest.fixture
def quiet_config():
    """No spontaneous spawning or drift, long lifetimes: only what a test sets up moves."""
    return SparkConfig(
        spawn_rate_per_sec=0.0,
        initial_fill=0.0,
        drift_strength=0.0,
        lifetime_min=60000.0,
        lifetime_max=60000.0,
    )


@pytest.fixture
def make_spark():
    counter = iter(range(10_000))

    def _make(x=100.0, y=100.0, *, spark_id=None, energy=0.8, polarity=0.5, color=(200, 100, 50),
              birth=0.0, lifetime=20000.0, seed=0.25, velocity=(0.0, 0.0)):
        return Spark(
            spark_id=next(counter) if spark_id is None else spark_id,
            position=np.array([x, y], dtype=float),
            velocity=np.array(velocity, dtype=float),
            base_radius=2.0,
            energy=energy,
            color=color,
            polarity=polarity,
            seed=seed,
            birth=birth,
            lifetime=lifetime,
        )

    return _make
