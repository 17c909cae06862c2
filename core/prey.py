"""Prey entities with an eaten/respawn lifecycle."""

from __future__ import annotations

import math
from typing import Set

from core.entities import GridMover, uniform
from core.maze import Cell, Maze
from core.rng import RNGStream


class Prey(GridMover):
    """Maze-aware prey; stationary unless given a positive speed."""

    def __init__(
        self,
        maze: Maze,
        stream: RNGStream,
        occupied: Set[int] | None = None,
        *,
        speed: float = 0.0,
        tile_size: float = 24.0,
        respawn_min: float = 4.0,
        respawn_max: float = 10.0,
        spawn_attempts: int = 60,
    ) -> None:
        super().__init__(maze, stream, speed=speed, tile_size=tile_size, policy=uniform)
        self.respawn_min = respawn_min
        self.respawn_max = respawn_max
        self.spawn_attempts = spawn_attempts
        self.eaten = False
        self.respawn_at = 0.0
        self.float_phase = 0.0
        self.spawn(occupied if occupied is not None else set())

    @property
    def key(self) -> int:
        return self.maze.key(self.current)

    def pick_spawn_cell(self, occupied: Set[int]) -> Cell:
        """Prefer an unoccupied cell; give up after ``spawn_attempts`` samples."""
        cell = self.maze.random_open_cell(self.stream)
        attempts = 1
        while self.maze.key(cell) in occupied and attempts < self.spawn_attempts:
            cell = self.maze.random_open_cell(self.stream)
            attempts += 1
        return cell

    def spawn(self, occupied: Set[int]) -> None:
        self.place(self.pick_spawn_cell(occupied))
        self.eaten = False
        self.respawn_at = 0.0
        self.float_phase = self.stream.uniform(0.0, math.pi * 2)
        if self.speed > 0.0:
            self.choose_next_direction()
        occupied.add(self.key)

    def mark_eaten(self, time: float) -> None:
        self.eaten = True
        self.respawn_at = time + self.respawn_min + self.stream.random() * (self.respawn_max - self.respawn_min)

    def can_respawn(self, time: float) -> bool:
        return self.eaten and time >= self.respawn_at

    def update(self, delta: float, time: float, occupied: Set[int]) -> bool:
        """Advance the float phase and respawn when due. Returns True on respawn."""
        self.float_phase += delta
        if self.can_respawn(time):
            self.spawn(occupied)
            return True
        if not self.eaten and self.speed > 0.0:
            self.advance(delta)
        else:
            self.update_position()
        return False


__all__ = ["Prey"]
