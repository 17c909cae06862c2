"""The pursuit agent: a grid mover that consumes prey within reach."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Protocol

from core.entities import GridMover, Vector, avoid_reverse, tile_center
from core.maze import Maze
from core.rng import RNGStream


@dataclass(frozen=True)
class CaptureEvent:
    """Position of a capture, delivered once to the renderer."""

    x: float
    y: float


@dataclass
class TrailSegment:
    x: float
    y: float
    life: float = 0.5


class Edible(Protocol):
    eaten: bool
    position: Vector

    def mark_eaten(self, time: float) -> None: ...


CaptureCallback = Callable[[CaptureEvent], None]


def within_capture_radius(hunter_pos: Vector, prey_pos: Vector, radius: float) -> bool:
    return math.hypot(prey_pos[0] - hunter_pos[0], prey_pos[1] - hunter_pos[1]) < radius


class Hunter(GridMover):
    """Roams with the avoid-reverse policy and captures prey by proximity."""

    def __init__(
        self,
        maze: Maze,
        stream: RNGStream,
        *,
        speed: float = 2.8,
        tile_size: float = 24.0,
        capture_radius_factor: float = 0.45,
        trail_length: int = 10,
    ) -> None:
        super().__init__(maze, stream, speed=speed, tile_size=tile_size, policy=avoid_reverse)
        self.capture_radius_factor = capture_radius_factor
        self.trail_length = trail_length
        self.trail: List[TrailSegment] = []
        self.mouth_timer = 0.0
        self.eye_pulse = stream.uniform(0.0, math.pi * 2)
        self.highlight = 0.0
        self.munch_burst = 0.0
        self.captures = 0
        # Bound for the duration of one update() call.
        self._prey: List[Edible] = []
        self._time = 0.0
        self._on_capture: Optional[CaptureCallback] = None
        self.choose_next_direction()

    @property
    def capture_radius(self) -> float:
        return self.tile_size * self.capture_radius_factor

    def set_tile_size(self, tile_size: float) -> None:
        super().set_tile_size(tile_size)
        self.trail = []

    def update(
        self,
        delta: float,
        prey: Iterable[Edible],
        time: float,
        on_capture: Optional[CaptureCallback] = None,
    ) -> int:
        """Advance, capturing at each committed cell and at the final position.

        Returns the number of prey captured during this call.
        """
        self.mouth_timer += delta * 5.5
        self.eye_pulse += delta * 3.2
        self.highlight = max(0.0, self.highlight - delta * 2.8)
        self.munch_burst = max(0.0, self.munch_burst - delta * 2.6)

        self._prey = list(prey)
        self._time = time
        self._on_capture = on_capture
        before = self.captures
        try:
            self.advance(delta)
            for segment in self.trail:
                segment.life = max(0.0, segment.life - delta * 0.9)
            self.trail = [s for s in self.trail if s.life > 0]
            self.consume(self._prey, time, on_capture)
        finally:
            self._prey = []
            self._on_capture = None
        return self.captures - before

    def on_commit(self) -> None:
        self.position = tile_center(self.current, self.tile_size)
        if self.trail_length > 0:
            self.trail.insert(0, TrailSegment(x=self.position[0], y=self.position[1]))
            del self.trail[self.trail_length:]
        self.consume(self._prey, self._time, self._on_capture)

    def consume(self, prey: Iterable[Edible], time: float, on_capture: Optional[CaptureCallback] = None) -> List[Edible]:
        """Mark every live prey within the capture radius as eaten."""
        radius = self.capture_radius
        eaten: List[Edible] = []
        for item in prey:
            if item.eaten or not within_capture_radius(self.position, item.position, radius):
                continue
            item.mark_eaten(time)
            self.highlight = 1.0
            self.munch_burst = 1.0
            self.captures += 1
            eaten.append(item)
            if on_capture is not None:
                on_capture(CaptureEvent(x=item.position[0], y=item.position[1]))
        return eaten


__all__ = ["CaptureCallback", "CaptureEvent", "Edible", "Hunter", "TrailSegment", "within_capture_radius"]
