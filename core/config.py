"""Simulation configuration and the configuration error type."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping


class ConfigError(ValueError):
    """Raised synchronously when a component is configured with invalid values."""


_INT_FIELDS = frozenset(
    {"seed", "rows", "cols", "prey_count", "particle_count", "spawn_attempts", "trail_length", "spark_burst"}
)


def _as_int(name: str, value: Any) -> int:
    # int() would silently truncate 7.9 and accept True.
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    return int(value)


@dataclass
class SimulationConfig:
    seed: int = 1337
    rows: int = 19
    cols: int = 19
    prey_count: int = 18
    particle_count: int = 80
    hunter_speed: float = 2.8  # cells per second
    prey_speed: float = 0.0  # stationary unless configured
    capture_radius_factor: float = 0.45  # fraction of one tile
    respawn_min: float = 4.0
    respawn_max: float = 10.0
    spawn_attempts: int = 60
    max_delta: float = 0.05
    tile_size: float = 24.0
    trail_length: int = 10
    loop_density: float = 0.12
    spark_burst: int = 3
    width: float = 800.0
    height: float = 800.0

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any] | None = None) -> "SimulationConfig":
        """Build a config from a plain dict (e.g. parsed JSON); unknown keys are rejected."""
        cfg = dict(cfg or {})
        defaults = cls()
        unknown = sorted(set(cfg) - set(asdict(defaults)))
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        values: Dict[str, Any] = {}
        try:
            for f in fields(cls):
                raw = cfg.get(f.name, getattr(defaults, f.name))
                values[f.name] = _as_int(f.name, raw) if f.name in _INT_FIELDS else float(raw)
        except ConfigError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid config value: {exc}") from exc
        config = cls(**values)
        config.validate()
        return config

    def validate(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name not in _INT_FIELDS and not math.isfinite(value):
                raise ConfigError(f"{f.name} must be finite, got {value}")
        if self.rows < 3 or self.cols < 3:
            raise ConfigError(f"Maze must be at least 3x3, got {self.rows}x{self.cols}")
        if self.prey_count < 0 or self.particle_count < 0:
            raise ConfigError("prey_count and particle_count must be non-negative")
        if self.hunter_speed <= 0.0:
            raise ConfigError(f"hunter_speed must be positive, got {self.hunter_speed}")
        if self.prey_speed < 0.0:
            raise ConfigError(f"prey_speed must be non-negative, got {self.prey_speed}")
        if self.capture_radius_factor <= 0.0:
            raise ConfigError(f"capture_radius_factor must be positive, got {self.capture_radius_factor}")
        if not 0.0 <= self.respawn_min <= self.respawn_max:
            raise ConfigError(f"Invalid respawn window [{self.respawn_min}, {self.respawn_max})")
        if self.spawn_attempts < 1:
            raise ConfigError(f"spawn_attempts must be >= 1, got {self.spawn_attempts}")
        if self.max_delta <= 0.0:
            raise ConfigError(f"max_delta must be positive, got {self.max_delta}")
        if self.tile_size <= 0.0 or self.width <= 0.0 or self.height <= 0.0:
            raise ConfigError("tile_size, width and height must be positive")
        if self.trail_length < 0 or self.spark_burst < 0:
            raise ConfigError("trail_length and spark_burst must be non-negative")
        if not 0.0 <= self.loop_density <= 1.0:
            raise ConfigError(f"loop_density must be in [0,1], got {self.loop_density}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["ConfigError", "SimulationConfig"]
