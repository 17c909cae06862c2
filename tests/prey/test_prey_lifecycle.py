import pytest

from core.entities import tile_center
from core.maze import Cell, Maze, generate_maze
from core.prey import Prey
from core.rng import RNGStream

STRIP = Maze.from_layout(
    [
        "#####",
        "#...#",
        "#####",
    ]
)


def test_spawn_lands_on_open_cell_and_registers_occupancy():
    maze = generate_maze(19, 19, RNGStream(seed=1))
    occupied = set()
    prey = Prey(maze, RNGStream(seed=1), occupied)
    assert maze.is_open(*prey.current)
    assert occupied == {prey.key}
    assert prey.position == tile_center(prey.current, prey.tile_size)
    assert not prey.eaten


@pytest.mark.parametrize("seed", range(20))
def test_respawn_window_is_four_to_ten_seconds(seed):
    prey = Prey(STRIP, RNGStream(seed=seed))
    prey.mark_eaten(12.5)
    assert prey.eaten
    assert 16.5 <= prey.respawn_at < 22.5


def test_not_eligible_before_respawn_time():
    prey = Prey(STRIP, RNGStream(seed=3))
    prey.mark_eaten(2.0)
    assert not prey.can_respawn(5.999)
    assert not prey.update(0.016, prey.respawn_at - 0.001, set())
    assert prey.eaten


def test_respawns_once_due_and_clears_state():
    prey = Prey(STRIP, RNGStream(seed=3))
    prey.mark_eaten(2.0)
    occupied = set()
    assert prey.update(0.016, prey.respawn_at, occupied)
    assert not prey.eaten
    assert prey.respawn_at == 0.0
    assert occupied == {prey.key}


def test_spawn_prefers_unoccupied_cell():
    occupied = {STRIP.key(Cell(1, 1)), STRIP.key(Cell(1, 2))}
    for seed in range(10):
        prey = Prey(STRIP, RNGStream(seed=seed), set(occupied))
        assert prey.current == Cell(1, 3)


def test_saturated_occupancy_falls_back_to_any_open_cell():
    occupied = {STRIP.key(c) for c in STRIP.open_cells}
    prey = Prey(STRIP, RNGStream(seed=0), set(occupied), spawn_attempts=5)
    assert prey.current in STRIP.open_cells


def test_float_phase_advances_with_time():
    prey = Prey(STRIP, RNGStream(seed=0))
    start = prey.float_phase
    prey.update(0.25, 0.0, set())
    assert prey.float_phase == pytest.approx(start + 0.25)


def test_stationary_prey_does_not_move():
    prey = Prey(STRIP, RNGStream(seed=0))
    cell = prey.current
    for _ in range(100):
        prey.update(0.05, 0.0, set())
    assert prey.current == cell
    assert prey.target == cell


def test_roaming_prey_walk_the_maze():
    maze = generate_maze(11, 11, RNGStream(seed=8))
    prey = Prey(maze, RNGStream(seed=8), speed=2.0)
    visited = {prey.current}
    for _ in range(200):
        prey.update(0.05, 0.0, set())
        assert maze.is_open(*prey.current)
        visited.add(prey.current)
    assert len(visited) > 1


def test_eaten_roaming_prey_stay_put():
    prey = Prey(STRIP, RNGStream(seed=8), speed=2.0)
    prey.mark_eaten(0.0)
    cell, progress = prey.current, prey.progress
    prey.update(0.05, 1.0, set())
    assert (prey.current, prey.progress) == (cell, progress)
