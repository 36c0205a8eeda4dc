import json

import numpy as np
import pytest

from game_rng import GameRNG
from maze.carver import carve
from maze.paths import (
    MazeConnectivityError,
    assert_perfect,
    count_open_connections,
    is_perfect,
    neighbours_open,
    render_ascii,
    solve,
)
from maze.walls import ALL_WALLS, DOWN, LEFT, RIGHT, UP
from simulation.chain_manager import ChainManager
from utils.config import ChainConfig


def _corridor():
    # (0,0) - (1,0) open, everything else closed.
    walls = np.full((2, 2), ALL_WALLS, dtype=np.uint8)
    walls[0, 0] &= ~RIGHT & 0xFF
    walls[0, 1] &= ~LEFT & 0xFF
    return walls


def test_closed_grid_is_not_perfect():
    walls = _corridor()
    assert count_open_connections(walls) == 1
    assert list(neighbours_open(walls, 0, 0)) == [(1, 0)]
    assert not is_perfect(walls)
    with pytest.raises(MazeConnectivityError):
        assert_perfect(walls)


def test_one_sided_opening_is_not_a_passage():
    walls = np.full((2, 2), ALL_WALLS, dtype=np.uint8)
    walls[0, 0] &= ~DOWN & 0xFF
    assert list(neighbours_open(walls, 0, 0)) == []


def test_solve_unreachable_returns_empty():
    assert solve(_corridor(), (0, 0), (1, 1)) == []
    assert solve(_corridor(), (0, 0), (1, 0)) == [(0, 0), (1, 0)]


def test_render_ascii_marks_cells():
    walls = carve(5, GameRNG(seed=6))
    walls[0, 1] &= ~UP & 0xFF
    path = solve(walls, (1, 0), (1, 4))
    text = render_ascii(walls, (1, 0), (1, 4), {(4, 2): object()}, path)
    lines = text.splitlines()
    assert len(lines) == 11
    assert all(len(line) == len(lines[0]) for line in lines)
    assert lines[0].startswith("+---+   +")
    assert "E" in lines[1]
    assert "X" in lines[9]
    assert "*" in lines[5]


def test_segment_snapshot_is_json_friendly():
    manager = ChainManager(ChainConfig(), seed=4)
    segment = manager.generate(3)
    data = json.loads(json.dumps(segment.to_dict()))
    assert data["index"] == 3
    assert data["size"] == 11
    assert len(data["walls"]) == 11
    assert data["entrance"] == [1, 0]
    assert len(data["collectibles"]) == len(segment.collectibles)


def test_count_open_connections_on_open_and_one_sided_grids():
    assert count_open_connections(np.zeros((3, 4), dtype=np.uint8)) == 3 * 3 + 2 * 4
    one_sided = np.full((3, 3), ALL_WALLS, dtype=np.uint8)
    one_sided[:, :] &= ~RIGHT & 0xFF
    assert count_open_connections(one_sided) == 0
    one_sided[1, 2] &= ~LEFT & 0xFF
    assert count_open_connections(one_sided) == 1
