"""Deterministic RNG authority for the simulation.

All randomness should flow through this module to ensure reproducibility.
"""

from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence


def _derive_seed(base_seed: int, name: str) -> int:
    """Derive a deterministic child seed from a base seed and stream name."""
    payload = f"{base_seed}:{name}".encode("utf-8")
    digest = hashlib.sha256(payload).digest()
    # Constrain to Python's Random seed range while preserving entropy.
    return int.from_bytes(digest[:8], "big") & ((1 << 63) - 1)


@dataclass
class RNGStream:
    """Named random stream with a dedicated Random instance."""

    seed: int
    _random: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._random = random.Random(self.seed)

    def random(self) -> float:
        return self._random.random()

    def randint(self, a: int, b: int) -> int:
        return self._random.randint(a, b)

    def uniform(self, a: float, b: float) -> float:
        return self._random.uniform(a, b)

    def choice(self, seq: Sequence[Any]) -> Any:
        return self._random.choice(seq)

    def shuffle(self, seq: list[Any]) -> None:
        self._random.shuffle(seq)


class RNG:
    """Seeded RNG factory that spawns named, isolated streams."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._streams: Dict[str, RNGStream] = {}

    def stream(self, name: str) -> RNGStream:
        """Return a deterministic RNGStream for a given name (cached)."""
        if name not in self._streams:
            self._streams[name] = RNGStream(seed=_derive_seed(self.seed, name=name))
        return self._streams[name]


__all__ = ["RNG", "RNGStream"]
