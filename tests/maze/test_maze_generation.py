from collections import deque

import numpy as np
import pytest

from core.config import ConfigError
from core.maze import EAST, NORTH, OPEN, SOUTH, WALL, WEST, Cell, Maze, generate_maze, normalize_dimensions
from core.rng import RNGStream


def reachable_from(maze: Maze, start: Cell) -> set:
    seen = {start}
    queue = deque([start])
    while queue:
        cell = queue.popleft()
        for d in maze.neighbors(*cell):
            nxt = d.step(cell)
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return seen


@pytest.mark.parametrize("seed", range(8))
@pytest.mark.parametrize("size", [(5, 5), (5, 9), (7, 7), (9, 9), (19, 19), (21, 15)])
def test_generated_maze_is_fully_connected(seed, size):
    maze = generate_maze(*size, RNGStream(seed=seed))
    assert maze.open_cells
    assert reachable_from(maze, maze.open_cells[0]) == set(maze.open_cells)


@pytest.mark.parametrize("seed", range(8))
def test_border_is_always_blocked(seed):
    maze = generate_maze(19, 19, RNGStream(seed=seed))
    grid = maze.grid
    assert (grid[0, :] == WALL).all()
    assert (grid[-1, :] == WALL).all()
    assert (grid[:, 0] == WALL).all()
    assert (grid[:, -1] == WALL).all()


def test_dimensions_are_normalized_to_odd():
    assert normalize_dimensions(5, 5) == (5, 5)
    assert normalize_dimensions(6, 6) == (7, 7)
    maze = generate_maze(6, 8, RNGStream(seed=3))
    assert (maze.rows, maze.cols) == (7, 9)


@pytest.mark.parametrize("rows,cols", [(0, 5), (5, -1), (2, 9), (1, 1)])
def test_degenerate_dimensions_fail_fast(rows, cols):
    with pytest.raises(ConfigError):
        generate_maze(rows, cols, RNGStream(seed=1))


def test_non_integer_dimensions_fail_fast():
    with pytest.raises(ConfigError):
        generate_maze(5.5, 7, RNGStream(seed=1))


def test_same_seed_same_layout():
    a = generate_maze(19, 19, RNGStream(seed=42))
    b = generate_maze(19, 19, RNGStream(seed=42))
    assert np.array_equal(a.grid, b.grid)


def test_central_room_is_open():
    maze = generate_maze(19, 19, RNGStream(seed=11))
    center = 19 // 2
    radius = 19 // 6
    assert maze.grid[center - radius : center + radius + 1, center].tolist() == [OPEN] * (2 * radius + 1)
    assert maze.grid[center, center - radius : center + radius + 1].tolist() == [OPEN] * (2 * radius + 1)


def test_loops_add_cycles_beyond_spanning_tree():
    maze = generate_maze(19, 19, RNGStream(seed=5))
    edges = sum(len(maze.neighbors(*cell)) for cell in maze.open_cells) // 2
    # A spanning tree has exactly n - 1 edges.
    assert edges > len(maze.open_cells) - 1


def test_grid_is_read_only():
    maze = generate_maze(9, 9, RNGStream(seed=2))
    with pytest.raises(ValueError):
        maze.grid[1, 1] = WALL


def test_is_open_is_bounds_checked():
    maze = Maze.from_layout(["###", "#.#", "###"])
    assert maze.is_open(1, 1)
    assert not maze.is_open(0, 0)
    assert not maze.is_open(-1, 1)
    assert not maze.is_open(1, 3)


def test_neighbors_lists_open_directions_in_fixed_order():
    maze = Maze.from_layout(
        [
            "#####",
            "##.##",
            "#...#",
            "##.##",
            "#####",
        ]
    )
    assert maze.neighbors(2, 2) == [EAST, WEST, SOUTH, NORTH]
    assert maze.neighbors(2, 1) == [EAST]
    assert maze.neighbors(1, 2) == [SOUTH]


@pytest.mark.parametrize("seed", range(5))
def test_random_open_cell_is_open_and_navigable(seed):
    stream = RNGStream(seed=seed)
    maze = generate_maze(19, 19, stream)
    for _ in range(200):
        cell = maze.random_open_cell(stream)
        assert maze.is_open(*cell)
        assert maze.neighbors(*cell)


def test_random_open_cell_skips_stranded_cells():
    maze = Maze.from_layout(
        [
            "#######",
            "#.#..##",
            "#######",
        ]
    )
    stream = RNGStream(seed=0)
    picks = {maze.random_open_cell(stream) for _ in range(100)}
    assert picks == {Cell(1, 3), Cell(1, 4)}


def test_random_open_cell_falls_back_to_any_open_cell():
    maze = Maze.from_layout(["###", "#.#", "###"])
    assert maze.navigable_cells == []
    assert maze.random_open_cell(RNGStream(seed=0)) == Cell(1, 1)


def test_cell_key_is_integer_pairing():
    maze = generate_maze(7, 9, RNGStream(seed=0))
    assert maze.key(Cell(2, 3)) == 2 * 9 + 3
    keys = {maze.key(c) for c in maze.open_cells}
    assert len(keys) == len(maze.open_cells)
