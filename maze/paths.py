# maze/paths.py
"""Graph queries over a carved wall-mask grid.

The grid is a ``numpy.uint8`` array indexed ``walls[y, x]``; a cleared bit
means the corresponding side of the cell is open.  These helpers treat two
cells as connected only when *both* sides of their shared wall are open.
"""
from collections import deque
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Set, Tuple

import numpy as np
import structlog

from maze.walls import DOWN, LEFT, OPPOSITE, RIGHT, STEPS, UP

log = structlog.get_logger()

Coord = Tuple[int, int]


class MazeConnectivityError(RuntimeError):
    """A carved grid is not a spanning tree."""


def neighbours_open(walls: np.ndarray, x: int, y: int) -> Iterator[Coord]:
    """Yield orthogonal neighbours reachable from ``(x, y)`` through open walls."""
    height, width = walls.shape
    for bit, (dx, dy) in STEPS.items():
        nx, ny = x + dx, y + dy
        if not (0 <= nx < width and 0 <= ny < height):
            continue
        if walls[y, x] & bit or walls[ny, nx] & OPPOSITE[bit]:
            continue
        yield nx, ny


def count_open_connections(walls: np.ndarray) -> int:
    """Number of open interior wall pairs (edges of the passage graph)."""
    horizontal = ((walls[:, :-1] & RIGHT) == 0) & ((walls[:, 1:] & LEFT) == 0)
    vertical = ((walls[:-1, :] & DOWN) == 0) & ((walls[1:, :] & UP) == 0)
    return int(np.count_nonzero(horizontal) + np.count_nonzero(vertical))


def reachable(walls: np.ndarray, start: Coord) -> Set[Coord]:
    """Cells reachable from ``start``."""
    seen = {start}
    queue = deque([start])
    while queue:
        cx, cy = queue.popleft()
        for nxt in neighbours_open(walls, cx, cy):
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return seen


def is_perfect(walls: np.ndarray) -> bool:
    """True when the passages form a spanning tree over every cell."""
    height, width = walls.shape
    cells = width * height
    if count_open_connections(walls) != cells - 1:
        return False
    return len(reachable(walls, (0, 0))) == cells


def assert_perfect(walls: np.ndarray, size: Optional[int] = None) -> None:
    """Raise :class:`MazeConnectivityError` unless ``walls`` is a perfect maze."""
    height, width = walls.shape
    cells = width * height
    edges = count_open_connections(walls)
    seen = len(reachable(walls, (0, 0)))
    if edges != cells - 1 or seen != cells:
        log.error(
            "Carved maze is not a spanning tree",
            size=size if size is not None else width,
            open_connections=edges,
            expected=cells - 1,
            reachable=seen,
            cells=cells,
        )
        raise MazeConnectivityError(
            f"maze of {width}x{height} has {edges} open connections and "
            f"{seen}/{cells} reachable cells"
        )


def solve(walls: np.ndarray, start: Coord, goal: Coord) -> List[Coord]:
    """Shortest (and, in a perfect maze, only) path from ``start`` to ``goal``.

    Returns an empty list when ``goal`` cannot be reached.
    """
    came_from: Dict[Coord, Optional[Coord]] = {start: None}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == goal:
            break
        for nxt in neighbours_open(walls, *current):
            if nxt not in came_from:
                came_from[nxt] = current
                queue.append(nxt)
    if goal not in came_from:
        return []
    path: List[Coord] = []
    node: Optional[Coord] = goal
    while node is not None:
        path.append(node)
        node = came_from[node]
    path.reverse()
    return path


def render_ascii(
    walls: np.ndarray,
    entrance: Optional[Coord] = None,
    exit: Optional[Coord] = None,
    collectibles: Optional[Mapping[Coord, object]] = None,
    path: Optional[Iterable[Coord]] = None,
) -> str:
    """Draw the maze with ``+``/``-``/``|`` walls.

    Cell markers: ``E`` entrance, ``X`` exit, ``*`` collectible, ``.`` path.
    """
    height, width = walls.shape
    items = collectibles or {}
    on_path = set(path or ())
    lines: List[str] = []
    for y in range(height):
        top = "+"
        mid = ""
        for x in range(width):
            top += "   +" if not walls[y, x] & UP else "---+"
            mid += " " if not walls[y, x] & LEFT else "|"
            marker = " "
            if (x, y) == entrance:
                marker = "E"
            elif (x, y) == exit:
                marker = "X"
            elif (x, y) in items:
                marker = "*"
            elif (x, y) in on_path:
                marker = "."
            mid += f" {marker} "
        mid += " " if not walls[y, width - 1] & RIGHT else "|"
        lines.append(top)
        lines.append(mid)
    bottom = "+"
    for x in range(width):
        bottom += "   +" if not walls[height - 1, x] & DOWN else "---+"
    lines.append(bottom)
    return "\n".join(lines)


__all__ = [
    "MazeConnectivityError",
    "neighbours_open",
    "count_open_connections",
    "reachable",
    "is_perfect",
    "assert_perfect",
    "solve",
    "render_ascii",
]
