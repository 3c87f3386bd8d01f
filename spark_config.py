# spark_config.py

"""
Simulation configuration.

The engine takes an explicit, immutable SparkConfig rather than reading a
global settings object. Host capabilities (low power mode, density hints) are
injected separately so the simulation never probes its environment.

Data Contract:
- SparkConfig is frozen; derive variants with dataclasses.replace().
- Construction validates every value and raises ValueError on bad input.
- load_config(path) -> (SparkConfig, HostCapabilities, dict)
"""

import json
import dataclasses
from dataclasses import dataclass


@dataclass(frozen=True)
class SparkConfig:
    # Population
    spark_count_desktop: int = 160
    spark_count_mobile: int = 70
    population_min: int = 30
    population_max: int = 300
    reference_width: float = 1920.0  # Pixels
    reference_height: float = 1080.0  # Pixels
    initial_fill: float = 0.6  # Fraction of the target pre-spawned by seed()
    spawn_rate_per_sec: float = 6.0
    spawn_padding: float = 20.0  # Pixels

    # Interaction
    interaction_radius: float = 140.0  # Pixels
    transfer_rate_per_sec: float = 0.35
    color_rate_per_sec: float = 0.6
    connection_rate_per_sec: float = 6.0
    connection_fade_per_sec: float = 4.0
    activation_threshold: float = 0.05
    max_interactions_per_frame: int = 600

    # Energy
    energy_decay_per_sec: float = 0.02
    energy_floor: float = 0.25

    # Kinematics
    max_speed: float = 40.0  # Pixels per second
    drift_strength: float = 6.0  # Pixels per second squared
    damping: float = 0.985  # Per 60fps frame
    max_frame_dt: float = 0.1  # Seconds

    # Lifetime
    lifetime_min: float = 12000.0  # Milliseconds
    lifetime_max: float = 26000.0  # Milliseconds

    # Visuals
    base_radius_min: float = 1.2  # Pixels
    base_radius_max: float = 3.2  # Pixels
    glow_multiplier: float = 6.0
    line_alpha_max: float = 0.35
    ring_decay: float = 0.92  # Per 60fps frame
    max_dpr: float = 2.0

    # Flow particles
    max_flow_particles: int = 120
    flow_particle_speed: float = 120.0  # Pixels per second
    flow_spawn_rate: float = 0.015  # Chance per 60fps frame at full strength
    flow_visibility_threshold: float = 0.35

    def __post_init__(self):
        positive = ("interaction_radius", "reference_width", "reference_height",
                    "flow_particle_speed", "max_frame_dt", "max_dpr", "base_radius_min")
        for name in positive:
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

        ranges = (("population_min", "population_max"),
                  ("base_radius_min", "base_radius_max"),
                  ("lifetime_min", "lifetime_max"))
        for low, high in ranges:
            if getattr(self, low) > getattr(self, high):
                raise ValueError(f"{low} ({getattr(self, low)}) exceeds {high} ({getattr(self, high)})")

        unit_interval = ("energy_floor", "damping", "ring_decay", "energy_decay_per_sec",
                         "activation_threshold", "flow_visibility_threshold",
                         "line_alpha_max", "initial_fill")
        for name in unit_interval:
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {getattr(self, name)}")

        non_negative = ("spawn_rate_per_sec", "max_interactions_per_frame", "max_flow_particles",
                        "transfer_rate_per_sec", "color_rate_per_sec", "connection_rate_per_sec",
                        "connection_fade_per_sec", "max_speed", "drift_strength",
                        "flow_spawn_rate", "spawn_padding", "lifetime_min")
        for name in non_negative:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")

    @classmethod
    def from_dict(cls, values: dict) -> "SparkConfig":
        """Builds a config from the 'simulation' section, rejecting unknown keys."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown simulation parameter(s): {', '.join(unknown)}")
        return cls(**values)


@dataclass(frozen=True)
class HostCapabilities:
    """What the host tells the engine about itself. Probing the device is the host's job."""
    is_low_power_mode: bool = False
    population_density_hint: float = 1.0

    def __post_init__(self):
        if self.population_density_hint < 0:
            raise ValueError("population_density_hint must not be negative")


def load_config(config_path='config.json'):
    """
    Reads config.json and returns the simulation config, the host capabilities
    and the raw dictionary (for run_id, master_seed and logging settings).
    """
    with open(config_path, 'r') as f:
        config = json.load(f)

    sim_config = SparkConfig.from_dict(config.get('simulation', {}))

    host = config.get('host', {})
    capabilities = HostCapabilities(
        is_low_power_mode=bool(host.get('low_power_mode', False)),
        population_density_hint=float(host.get('population_density_hint', 1.0)),
    )
    return sim_config, capabilities, config
