# maze/walls.py
"""Wall bits of a maze cell.  A set bit means the side is closed."""
from typing import Dict, Final, Tuple

UP: Final[int] = 1
RIGHT: Final[int] = 2
DOWN: Final[int] = 4
LEFT: Final[int] = 8
ALL_WALLS: Final[int] = UP | RIGHT | DOWN | LEFT

OPPOSITE: Final[Dict[int, int]] = {UP: DOWN, RIGHT: LEFT, DOWN: UP, LEFT: RIGHT}

# Neighbour order used when listing candidates: Up, Right, Down, Left.
STEPS: Final[Dict[int, Tuple[int, int]]] = {
    UP: (0, -1),
    RIGHT: (1, 0),
    DOWN: (0, 1),
    LEFT: (-1, 0),
}
