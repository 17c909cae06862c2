"""Procedural maze generation and grid queries."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Tuple

import numpy as np

from core.config import ConfigError
from core.rng import RNGStream

OPEN = 0
WALL = 1


class Cell(NamedTuple):
    row: int
    col: int


@dataclass(frozen=True)
class Direction:
    """Unit step on the grid with the facing angle used for rendering."""

    name: str
    dx: int
    dy: int
    angle: float  # radians

    def reverse(self) -> "Direction":
        return _REVERSE[self.name]

    def step(self, cell: Cell) -> Cell:
        return Cell(cell.row + self.dy, cell.col + self.dx)


EAST = Direction("east", 1, 0, 0.0)
WEST = Direction("west", -1, 0, math.pi)
SOUTH = Direction("south", 0, 1, math.pi / 2)
NORTH = Direction("north", 0, -1, -math.pi / 2)

DIRECTIONS: Tuple[Direction, ...] = (EAST, WEST, SOUTH, NORTH)
_REVERSE = {"east": WEST, "west": EAST, "south": NORTH, "north": SOUTH}

# (d_row, d_col) carve steps land on the odd lattice; the wall between sits at half the step.
_CARVE_STEPS: Tuple[Tuple[int, int], ...] = ((0, 2), (0, -2), (2, 0), (-2, 0))


class Maze:
    """Immutable open/wall grid with adjacency and random-cell queries."""

    def __init__(self, grid: np.ndarray) -> None:
        if grid.ndim != 2:
            raise ConfigError(f"Maze grid must be 2D, got shape {grid.shape}")
        self.grid = np.array(grid, dtype=np.uint8)
        self.grid.setflags(write=False)
        self.rows, self.cols = self.grid.shape
        self.open_cells: List[Cell] = [Cell(int(r), int(c)) for r, c in zip(*np.nonzero(self.grid == OPEN))]
        self.navigable_cells: List[Cell] = [cell for cell in self.open_cells if self.neighbors(*cell)]

    @classmethod
    def from_layout(cls, lines: Iterable[str]) -> "Maze":
        """Build a maze from rows of '#' (wall) and '.' (open) characters."""
        rows = [line.strip() for line in lines if line.strip()]
        if not rows or len({len(r) for r in rows}) != 1:
            raise ConfigError("Layout rows must be non-empty and of equal length")
        grid = np.array([[WALL if ch == "#" else OPEN for ch in row] for row in rows], dtype=np.uint8)
        return cls(grid)

    def is_open(self, row: int, col: int) -> bool:
        if row < 0 or row >= self.rows or col < 0 or col >= self.cols:
            return False
        return self.grid[row, col] == OPEN

    def neighbors(self, row: int, col: int) -> List[Direction]:
        """Directions leading to open, in-bounds cells."""
        return [d for d in DIRECTIONS if self.is_open(row + d.dy, col + d.dx)]

    def random_open_cell(self, stream: RNGStream) -> Cell:
        pool = self.navigable_cells or self.open_cells
        if not pool:
            raise RuntimeError("Maze has no open cells")
        return stream.choice(pool)

    def key(self, cell: Cell) -> int:
        """Integer occupancy key for a cell."""
        return cell.row * self.cols + cell.col

    def to_list(self) -> List[List[int]]:
        return self.grid.tolist()


def normalize_dimensions(rows: int, cols: int) -> Tuple[int, int]:
    """Validate and force both dimensions odd."""
    for value in (rows, cols):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise ConfigError(f"Maze dimensions must be integers, got {rows!r}x{cols!r}")
    if rows < 3 or cols < 3:
        raise ConfigError(f"Maze must be at least 3x3, got {rows}x{cols}")
    rows, cols = int(rows), int(cols)
    return (rows + 1 if rows % 2 == 0 else rows), (cols + 1 if cols % 2 == 0 else cols)


def _carve_spanning_tree(grid: np.ndarray, stream: RNGStream) -> None:
    rows, cols = grid.shape
    grid[1, 1] = OPEN
    stack = [(1, 1)]
    while stack:
        row, col = stack[-1]
        steps = list(_CARVE_STEPS)
        stream.shuffle(steps)
        candidates = [
            (dr, dc)
            for dr, dc in steps
            if 0 < row + dr < rows - 1 and 0 < col + dc < cols - 1 and grid[row + dr, col + dc] == WALL
        ]
        if not candidates:
            stack.pop()
            continue
        dr, dc = candidates[0]
        grid[row + dr // 2, col + dc // 2] = OPEN
        grid[row + dr, col + dc] = OPEN
        stack.append((row + dr, col + dc))


def _add_loops(grid: np.ndarray, attempts: int, stream: RNGStream) -> None:
    rows, cols = grid.shape
    for _ in range(attempts):
        r = stream.randint(1, rows - 2)
        c = stream.randint(1, cols - 2)
        if grid[r, c] != WALL:
            continue
        vertical = grid[r - 1, c] == OPEN and grid[r + 1, c] == OPEN
        horizontal = grid[r, c - 1] == OPEN and grid[r, c + 1] == OPEN
        if vertical or horizontal:
            grid[r, c] = OPEN


def _add_room(grid: np.ndarray) -> None:
    rows, cols = grid.shape
    # A zero radius on an even/even centre would open an isolated cell.
    radius = max(1, min(rows, cols) // 6)
    center_row, center_col = rows // 2, cols // 2
    for r in range(center_row - radius, center_row + radius + 1):
        for c in range(center_col - radius, center_col + radius + 1):
            if 0 < r < rows - 1 and 0 < c < cols - 1 and math.hypot(r - center_row, c - center_col) <= radius:
                grid[r, c] = OPEN


def generate_maze(rows: int, cols: int, stream: RNGStream, *, loop_density: float = 0.12) -> Maze:
    """Carve a connected maze with extra loops and an open central room."""
    rows, cols = normalize_dimensions(rows, cols)
    grid = np.full((rows, cols), WALL, dtype=np.uint8)
    _carve_spanning_tree(grid, stream)
    _add_loops(grid, math.floor(rows * cols * loop_density), stream)
    _add_room(grid)
    return Maze(grid)


__all__ = [
    "Cell",
    "DIRECTIONS",
    "Direction",
    "EAST",
    "Maze",
    "NORTH",
    "OPEN",
    "SOUTH",
    "WALL",
    "WEST",
    "generate_maze",
    "normalize_dimensions",
]
