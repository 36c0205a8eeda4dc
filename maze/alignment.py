# maze/alignment.py
"""Entrance/exit placement that keeps consecutive segments lined up.

Each segment's entrance sits on its top row and its exit directly below on
the bottom row.  The entrance column of segment ``i`` follows the exit
column of segment ``i - 1``, pulled inside the interior of the (larger)
grid.  Positions can be asked for segments that were never generated.
"""
from functools import lru_cache
from typing import Tuple

import structlog

from maze.sizing import SizeSequencer

log = structlog.get_logger()

Coord = Tuple[int, int]


def _interior(x: int, size: int) -> int:
    return max(1, min(x, size - 2))


class ChainAligner:
    def __init__(self, sequencer: SizeSequencer, alignment_x: int = 1):
        self.sequencer = sequencer
        self.alignment_x = alignment_x
        self._entrance_x = lru_cache(maxsize=None)(self._compute_entrance_x)

    def _compute_entrance_x(self, index: int) -> int:
        size = self.sequencer.size(index)
        if index == 0:
            return _interior(self.alignment_x, size)
        # Iterative walk avoids deep recursion for far-off indices.
        x = _interior(self.alignment_x, self.sequencer.size(0))
        for i in range(1, index + 1):
            x = _interior(x, self.sequencer.size(i))
        return x

    def entrance_x(self, index: int) -> int:
        if index < 0:
            raise ValueError(f"segment index must be non-negative, got {index}")
        return self._entrance_x(index)

    def entrance(self, index: int) -> Coord:
        return self.entrance_x(index), 0

    def exit(self, index: int) -> Coord:
        return self.entrance_x(index), self.sequencer.size(index) - 1

    def entrance_for(self, size: int, index: int) -> Coord:
        """Entrance of segment ``index`` when its grid is ``size`` wide."""
        if index < 0:
            raise ValueError(f"segment index must be non-negative, got {index}")
        anchor = self.alignment_x if index == 0 else self.entrance_x(index - 1)
        x = _interior(anchor, size)
        if size != self.sequencer.size(index):
            log.debug("Entrance asked with non-chain size", index=index, size=size, x=x)
        return x, 0

    def exit_for(self, size: int, index: int) -> Coord:
        x, _ = self.entrance_for(size, index)
        return x, size - 1


__all__ = ["ChainAligner"]
