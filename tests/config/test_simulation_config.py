import pytest

from core.config import ConfigError, SimulationConfig
from core.engine import Engine


def test_defaults_match_screensaver_setup():
    cfg = SimulationConfig.from_mapping(None)
    assert (cfg.rows, cfg.cols) == (19, 19)
    assert cfg.prey_count == 18
    assert cfg.hunter_speed == 2.8
    assert cfg.capture_radius_factor == 0.45
    assert (cfg.respawn_min, cfg.respawn_max) == (4.0, 10.0)
    assert cfg.spawn_attempts == 60
    assert cfg.max_delta == 0.05


def test_from_mapping_coerces_values():
    cfg = SimulationConfig.from_mapping({"rows": "21", "hunter_speed": 3})
    assert cfg.rows == 21
    assert cfg.hunter_speed == 3.0


def test_integral_floats_are_accepted_like_direct_dimensions():
    cfg = SimulationConfig.from_mapping({"rows": 21.0, "cols": 9})
    assert (cfg.rows, cfg.cols) == (21, 9)
    assert isinstance(cfg.rows, int)


@pytest.mark.parametrize(
    "overrides",
    [
        {"rows": 0},
        {"cols": -5},
        {"hunter_speed": 0},
        {"respawn_min": 8, "respawn_max": 4},
        {"spawn_attempts": 0},
        {"capture_radius_factor": -0.1},
        {"rows": "wide"},
        {"unknown_knob": 1},
        {"rows": 7.9},
        {"prey_count": "4.5"},
        {"spawn_attempts": True},
        {"hunter_speed": float("nan")},
        {"max_delta": "inf"},
    ],
)
def test_invalid_config_fails_fast(overrides):
    with pytest.raises(ConfigError):
        SimulationConfig.from_mapping(overrides)


def test_engine_validates_config_and_seed_override():
    with pytest.raises(ConfigError):
        Engine(SimulationConfig(rows=1))
    engine = Engine(SimulationConfig(seed=1), seed=2)
    assert engine.seed == 2
    assert engine.config.seed == 2
