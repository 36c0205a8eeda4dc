# maze/carver.py
"""Randomized depth-first carving of a perfect maze.

The carver keeps an explicit stack instead of recursing, so side lengths in
the hundreds are safe.  The result is a ``numpy.uint8`` wall-mask grid
(``walls[y, x]``, bits from :mod:`maze.walls`) whose passages form a
spanning tree: ``size * size`` cells joined by ``size * size - 1`` open
wall pairs.
"""
from typing import List, Optional, Tuple

import numpy as np
import structlog

from game_rng import GameRNG
from maze.paths import assert_perfect
from maze.walls import ALL_WALLS, DOWN, OPPOSITE, STEPS, UP

log = structlog.get_logger()

Coord = Tuple[int, int]


def clamp_start(size: int, alignment_point: Coord = (1, 1)) -> Coord:
    """Carving start cell: the alignment point pulled inside ``[1, size-2]``."""
    hi = max(0, size - 2)
    lo = min(1, hi)
    ax, ay = alignment_point
    return max(lo, min(ax, hi)), max(lo, min(ay, hi))


def _unvisited_neighbours(visited: np.ndarray, x: int, y: int) -> List[Tuple[int, Coord]]:
    height, width = visited.shape
    found = []
    for bit, (dx, dy) in STEPS.items():
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height and not visited[ny, nx]:
            found.append((bit, (nx, ny)))
    return found


def _knock_down(walls: np.ndarray, cell: Coord, bit: int) -> None:
    x, y = cell
    dx, dy = STEPS[bit]
    walls[y, x] &= ~bit & 0xFF
    walls[y + dy, x + dx] &= ~OPPOSITE[bit] & 0xFF


def _resume_from_unvisited(walls: np.ndarray, visited: np.ndarray) -> Optional[Coord]:
    """Pick the first unvisited cell (row-major) as a new carving root.

    The new root is grafted onto the existing tree by opening its wall to a
    visited orthogonal neighbour, when it has one.  Returns ``None`` when
    every cell has been visited.
    """
    unvisited = np.argwhere(~visited)
    if unvisited.size == 0:
        return None
    y, x = (int(v) for v in unvisited[0])
    visited[y, x] = True
    height, width = visited.shape
    for bit, (dx, dy) in STEPS.items():
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height and visited[ny, nx]:
            _knock_down(walls, (x, y), bit)
            log.warning("Grafted orphan cell onto carved tree", cell=(x, y), via=(nx, ny))
            break
    else:
        log.warning("Resumed carving from isolated cell", cell=(x, y))
    return x, y


def carve(size: int, rng: GameRNG, alignment_point: Coord = (1, 1), verify: bool = True) -> np.ndarray:
    """Carve a ``size`` x ``size`` perfect maze and return its wall masks."""
    if size < 2:
        raise ValueError(f"maze size must be at least 2, got {size}")
    if not isinstance(rng, GameRNG):
        raise TypeError("carve requires a GameRNG instance")

    walls = np.full((size, size), ALL_WALLS, dtype=np.uint8)
    visited = np.zeros((size, size), dtype=bool)

    current = clamp_start(size, alignment_point)
    visited[current[1], current[0]] = True
    remaining = size * size - 1
    stack: List[Coord] = []
    backtracks = 0
    grafts = 0

    while remaining > 0:
        candidates = _unvisited_neighbours(visited, *current)
        if candidates:
            bit, chosen = candidates[rng.get_int(0, len(candidates) - 1)]
            _knock_down(walls, current, bit)
            visited[chosen[1], chosen[0]] = True
            remaining -= 1
            stack.append(current)
            current = chosen
        elif stack:
            current = stack.pop()
            backtracks += 1
        else:
            resumed = _resume_from_unvisited(walls, visited)
            if resumed is None:
                break
            remaining -= 1
            grafts += 1
            current = resumed

    log.debug(
        "Carved maze",
        size=size,
        start=clamp_start(size, alignment_point),
        backtracks=backtracks,
        grafts=grafts,
    )
    if verify:
        assert_perfect(walls, size)
    return walls


def open_boundary(walls: np.ndarray, entrance: Coord, exit: Coord) -> None:
    """Force the entrance's top wall and the exit's bottom wall open."""
    ex, ey = entrance
    xx, xy = exit
    walls[ey, ex] &= ~UP & 0xFF
    walls[xy, xx] &= ~DOWN & 0xFF


__all__ = ["carve", "clamp_start", "open_boundary"]
