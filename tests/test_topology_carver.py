import numpy as np
import pytest

from game_rng import GameRNG
from maze import carver
from maze.carver import carve, clamp_start, open_boundary
from maze.paths import MazeConnectivityError, count_open_connections, is_perfect, reachable, solve
from maze.walls import ALL_WALLS, DOWN, LEFT, RIGHT, UP


@pytest.mark.parametrize("size", [3, 4, 5, 8, 13, 21])
@pytest.mark.parametrize("seed", [0, 1, 77])
def test_carve_is_perfect(size, seed):
    walls = carve(size, GameRNG(seed=seed))
    assert walls.shape == (size, size)
    assert walls.dtype == np.uint8
    assert count_open_connections(walls) == size * size - 1
    assert len(reachable(walls, (0, 0))) == size * size
    assert is_perfect(walls)


def test_carve_size_two():
    assert is_perfect(carve(2, GameRNG(seed=4)))


def test_carve_rejects_tiny_grid():
    with pytest.raises(ValueError):
        carve(1, GameRNG(seed=1))


def test_carve_is_deterministic_per_seed():
    a = carve(9, GameRNG(seed=11))
    b = carve(9, GameRNG(seed=11))
    c = carve(9, GameRNG(seed=12))
    assert np.array_equal(a, b)
    assert not np.array_equal(a, c)


def test_outer_border_stays_closed():
    walls = carve(7, GameRNG(seed=2))
    assert all(walls[0, x] & UP for x in range(7))
    assert all(walls[6, x] & DOWN for x in range(7))
    assert all(walls[y, 0] & LEFT for y in range(7))
    assert all(walls[y, 6] & RIGHT for y in range(7))


def test_clamp_start():
    assert clamp_start(5, (1, 1)) == (1, 1)
    assert clamp_start(5, (9, 0)) == (3, 1)
    assert clamp_start(2, (1, 1)) == (0, 0)


def test_single_path_between_entrance_and_exit():
    walls = carve(11, GameRNG(seed=5))
    path = solve(walls, (1, 0), (1, 10))
    assert path[0] == (1, 0)
    assert path[-1] == (1, 10)
    for (ax, ay), (bx, by) in zip(path, path[1:]):
        assert abs(ax - bx) + abs(ay - by) == 1


def test_open_boundary():
    walls = carve(5, GameRNG(seed=3))
    open_boundary(walls, (1, 0), (1, 4))
    assert not walls[0, 1] & UP
    assert not walls[4, 1] & DOWN
    assert walls[0, 2] & UP


def test_resume_grafts_onto_visited_neighbour():
    walls = np.full((3, 3), ALL_WALLS, dtype=np.uint8)
    visited = np.zeros((3, 3), dtype=bool)
    visited[0, 0] = True
    assert carver._resume_from_unvisited(walls, visited) == (1, 0)
    assert visited[0, 1]
    assert not walls[0, 1] & LEFT
    assert not walls[0, 0] & RIGHT


def test_resume_returns_none_when_done():
    walls = np.full((2, 2), ALL_WALLS, dtype=np.uint8)
    visited = np.ones((2, 2), dtype=bool)
    assert carver._resume_from_unvisited(walls, visited) is None


def test_fallback_graft_keeps_maze_connected(monkeypatch):
    real = carver._unvisited_neighbours

    def no_left(visited, x, y):
        return [(bit, cell) for bit, cell in real(visited, x, y) if bit != LEFT]

    monkeypatch.setattr(carver, "_unvisited_neighbours", no_left)
    walls = carve(6, GameRNG(seed=8))
    assert is_perfect(walls)


def test_disconnected_fallback_is_reported(monkeypatch):
    real = carver._unvisited_neighbours

    def forward_only(visited, x, y):
        return [(bit, cell) for bit, cell in real(visited, x, y) if bit in (RIGHT, DOWN)]

    monkeypatch.setattr(carver, "_unvisited_neighbours", forward_only)
    with pytest.raises(MazeConnectivityError):
        carve(5, GameRNG(seed=8))
