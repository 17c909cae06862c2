"""Grid-constrained movement shared by the hunter and prey."""

from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

from core.maze import EAST, Cell, Direction, Maze
from core.rng import RNGStream

Vector = Tuple[float, float]
DirectionPolicy = Callable[[Sequence[Direction], Direction, RNGStream], Direction]


def direction_candidates(options: Sequence[Direction], previous: Direction) -> List[Direction]:
    """Drop the reverse of the previous direction unless it is the only way out."""
    if len(options) <= 1:
        return list(options)
    reverse = previous.reverse()
    return [d for d in options if d != reverse]


def avoid_reverse(options: Sequence[Direction], previous: Direction, stream: RNGStream) -> Direction:
    return stream.choice(direction_candidates(options, previous))


def uniform(options: Sequence[Direction], previous: Direction, stream: RNGStream) -> Direction:
    return stream.choice(list(options))


def tile_center(cell: Cell, tile_size: float) -> Vector:
    return ((cell.col + 0.5) * tile_size, (cell.row + 0.5) * tile_size)


class GridMover:
    """Owns a discrete grid position and its continuous interpolation.

    ``current``/``target``/``progress`` are authoritative; ``position`` is
    recomputed from them and never accumulated.
    """

    def __init__(
        self,
        maze: Maze,
        stream: RNGStream,
        *,
        speed: float,
        tile_size: float = 24.0,
        policy: DirectionPolicy = avoid_reverse,
        start: Cell | None = None,
    ) -> None:
        self.maze = maze
        self.stream = stream
        self.speed = speed
        self.tile_size = tile_size
        self.policy = policy
        cell = start if start is not None else maze.random_open_cell(stream)
        self.current: Cell = cell
        self.target: Cell = cell
        self.progress = 0.0
        self.direction: Direction = EAST
        self.position: Vector = tile_center(cell, tile_size)

    def place(self, cell: Cell) -> None:
        """Stand still on ``cell``."""
        self.current = cell
        self.target = cell
        self.progress = 0.0
        self.update_position()

    def set_tile_size(self, tile_size: float) -> None:
        self.tile_size = tile_size
        self.update_position()

    def advance(self, delta: float) -> None:
        """Move ``delta`` seconds along the grid, committing cells as progress crosses 1."""
        self.progress += delta * self.speed
        while self.progress >= 1.0:
            self.progress -= 1.0
            self.current = self.target
            self.on_commit()
            self.choose_next_direction()
        self.update_position()

    def on_commit(self) -> None:
        """Hook invoked right after ``current`` changes."""

    def choose_next_direction(self, *, _retry: bool = True) -> None:
        options = self.maze.neighbors(*self.current)
        if not options:
            if _retry:
                self.place(self.maze.random_open_cell(self.stream))
                self.choose_next_direction(_retry=False)
            else:
                # Stranded on an isolated cell: stay put.
                self.place(self.current)
            return
        self.direction = self.policy(options, self.direction, self.stream)
        self.target = self.direction.step(self.current)

    def update_position(self) -> None:
        cx, cy = tile_center(self.current, self.tile_size)
        tx, ty = tile_center(self.target, self.tile_size)
        self.position = (cx + (tx - cx) * self.progress, cy + (ty - cy) * self.progress)


__all__ = [
    "DirectionPolicy",
    "GridMover",
    "Vector",
    "avoid_reverse",
    "direction_candidates",
    "tile_center",
    "uniform",
]
