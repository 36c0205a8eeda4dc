# maze/sizing.py
from functools import lru_cache

import structlog

log = structlog.get_logger()

BASE_MAZE_SIZE = 5
MAZE_SIZE_INCREMENT = 2


class SizeSequencer:
    """Deterministic side length of each segment in the chain.

    ``size(i) = base + i * increment``.  Any non-negative index is valid,
    including indices past the chain limit, so callers can reason about
    segments that were never built.
    """

    def __init__(self, base: int = BASE_MAZE_SIZE, increment: int = MAZE_SIZE_INCREMENT):
        if base < 2:
            raise ValueError("base size must be at least 2")
        if increment < 0:
            raise ValueError("size increment must be non-negative")
        self.base = base
        self.increment = increment
        self._size = lru_cache(maxsize=None)(self._compute)

    def _compute(self, index: int) -> int:
        return self.base + index * self.increment

    def size(self, index: int) -> int:
        if index < 0:
            log.warning("Negative segment index for size lookup", index=index)
            raise ValueError(f"segment index must be non-negative, got {index}")
        return self._size(index)

    __call__ = size

    def sizes(self, count: int) -> list[int]:
        """Sizes of the first ``count`` segments."""
        return [self.size(i) for i in range(count)]
