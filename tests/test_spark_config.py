import dataclasses
import json
from pathlib import Path

import pytest

from spark_config import HostCapabilities, SparkConfig, load_config


def test_defaults_are_valid_and_frozen() -> None:
    config = SparkConfig()
    assert config.population_min == 30
    assert config.population_max == 300
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.interaction_radius = 10.0


def test_replace_revalidates() -> None:
    config = dataclasses.replace(SparkConfig(), max_interactions_per_frame=0)
    assert config.max_interactions_per_frame == 0
    with pytest.raises(ValueError):
        dataclasses.replace(config, lifetime_min=30000.0, lifetime_max=1000.0)


@pytest.mark.parametrize("overrides", [
    {"interaction_radius": 0.0},
    {"energy_floor": 1.5},
    {"population_min": 400},
    {"max_interactions_per_frame": -1},
    {"base_radius_min": 5.0, "base_radius_max": 1.0},
])
def test_invalid_values_are_rejected(overrides) -> None:
    with pytest.raises(ValueError):
        SparkConfig(**overrides)


def test_from_dict_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError, match="sparkCountDesktop"):
        SparkConfig.from_dict({"sparkCountDesktop": 100})
    assert SparkConfig.from_dict({"spark_count_desktop": 100}).spark_count_desktop == 100


def test_host_capabilities_reject_negative_density() -> None:
    with pytest.raises(ValueError):
        HostCapabilities(population_density_hint=-1.0)


def test_load_config_reads_all_sections(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "run_id": "test",
        "master_seed": 5,
        "logging": {"level": "DEBUG", "format": "%(message)s"},
        "host": {"low_power_mode": True, "population_density_hint": 0.5},
        "simulation": {"interaction_radius": 90.0, "spawn_rate_per_sec": 2.0},
    }))
    sim_config, capabilities, raw = load_config(str(path))
    assert sim_config.interaction_radius == 90.0
    assert sim_config.spawn_rate_per_sec == 2.0
    assert capabilities == HostCapabilities(is_low_power_mode=True, population_density_hint=0.5)
    assert raw["master_seed"] == 5


def test_shipped_config_loads() -> None:
    sim_config, capabilities, raw = load_config(str(Path(__file__).resolve().parents[1] / "config.json"))
    assert sim_config == SparkConfig.from_dict(raw["simulation"])
    assert not capabilities.is_low_power_mode
