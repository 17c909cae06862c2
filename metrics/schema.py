"""Canonical metrics schema definitions."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Tuple

SCHEMA_VERSION = "1.0.0"


@dataclass
class FrameData:
    """Single per-frame record for logging, hashing and analysis."""

    schema_version: str = SCHEMA_VERSION
    frame: int = 0
    elapsed: float = 0.0
    delta: float = 0.0
    # Hunter
    hunter_cell: Tuple[int, int] = (0, 0)
    hunter_target: Tuple[int, int] = (0, 0)
    hunter_pos: Tuple[float, float] = (0.0, 0.0)
    hunter_direction: str = "east"
    hunter_progress: float = 0.0
    # Prey
    prey_active: int = 0
    prey_eaten: int = 0
    captures: int = 0
    captures_total: int = 0
    respawns: int = 0
    occupied_cells: int = 0
    # Effects
    sparks: int = 0

    def to_ordered_dict(self) -> Dict[str, Any]:
        """Return a plain dict in schema order for deterministic serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
