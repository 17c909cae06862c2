"""Cosmetic spark bursts and drifting background particles (state only)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

from core.hunter import CaptureEvent
from core.rng import RNGStream


@dataclass
class Spark:
    x: float
    y: float
    tile_size: float
    radius: float
    life: float
    rotation: float
    spin: float
    flight_angle: float
    velocity: float

    @classmethod
    def burst(cls, event: CaptureEvent, tile_size: float, offset: float, stream: RNGStream) -> "Spark":
        return cls(
            x=event.x,
            y=event.y,
            tile_size=tile_size,
            radius=tile_size * 0.18,
            life=0.55 + stream.random() * 0.25,
            rotation=stream.random() * math.pi,
            spin=(stream.random() - 0.5) * 3,
            flight_angle=offset * math.pi * 2,
            velocity=tile_size * (0.35 + stream.random() * 0.3),
        )

    def update(self, delta: float) -> None:
        self.life -= delta
        self.radius += delta * self.tile_size * 1.25
        self.x += math.cos(self.flight_angle) * self.velocity * delta
        self.y += math.sin(self.flight_angle) * self.velocity * delta
        self.velocity *= 0.9
        self.rotation += self.spin * delta

    def is_alive(self) -> bool:
        return self.life > 0


def spawn_sparks(event: CaptureEvent, tile_size: float, burst: int, stream: RNGStream) -> List[Spark]:
    """Evenly fan ``burst`` sparks out from a capture position."""
    return [Spark.burst(event, tile_size, i / burst, stream) for i in range(burst)]


@dataclass
class Particle:
    x: float
    y: float
    speed: float
    size: float
    hue: float
    alpha: float


class ParticleField:
    """Slowly falling particles that wrap back to the top of the viewport."""

    def __init__(self, count: int, stream: RNGStream, width: float = 800.0, height: float = 800.0) -> None:
        self.count = count
        self.stream = stream
        self.width = width
        self.height = height
        self.particles = [self._create() for _ in range(count)]

    def set_bounds(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.particles = [self._create() for _ in range(self.count)]

    def _create(self) -> Particle:
        s = self.stream
        return Particle(
            x=s.random() * self.width,
            y=s.random() * self.height,
            speed=10 + s.random() * 20,
            size=s.random() * 1.4 + 0.4,
            hue=200 + s.random() * 60,
            alpha=0.05 + s.random() * 0.15,
        )

    def update(self, delta: float) -> None:
        for p in self.particles:
            p.y += p.speed * delta
            if p.y > self.height:
                p.x = self.stream.random() * self.width
                p.y = -10.0


__all__ = ["Particle", "ParticleField", "Spark", "spawn_sparks"]
