# maze/collectibles.py
"""Weighted-random cat collectibles scattered through a segment.

Deeper segments shift the odds: black cats (time penalty) and tabbies
(coin-flip effect) become more common while white and siamese cats grow
rarer, never dropping below a weight of 5.
"""
from enum import Enum
from typing import Dict, List, Tuple

import numpy as np
import structlog

from game_rng import GameRNG

log = structlog.get_logger()

Coord = Tuple[int, int]

MAX_BASE_ITEM_COUNT = 5
RARE_WEIGHT_FLOOR = 5


class ItemType(Enum):
    ORANGE = ("orange", 100, 5.0)
    BLACK = ("black", 100, -10.0)
    TABBY = ("tabby", 50, 7.0)
    WHITE = ("white", 25, 15.0)
    SIAMESE = ("siamese", 10, 20.0)

    def __init__(self, label: str, base_weight: int, magnitude: float):
        self.label = label
        self.base_weight = base_weight
        self.magnitude = magnitude

    @property
    def reveals_path(self) -> bool:
        return self is ItemType.SIAMESE

    def effect_value(self, rng: GameRNG) -> float:
        """Seconds added to (or, when negative, taken from) the timer."""
        if self is ItemType.TABBY:
            return self.magnitude if rng.coin_flip() else -self.magnitude
        return self.magnitude


ITEM_TYPES: Tuple[ItemType, ...] = tuple(ItemType)


def adjusted_weights(index: int) -> List[int]:
    """Rarity weights for segment ``index``, in :data:`ITEM_TYPES` order."""
    i = max(0, index)
    weights = []
    for item in ITEM_TYPES:
        w = item.base_weight
        if item is ItemType.BLACK:
            w += 15 * i
        elif item is ItemType.TABBY:
            w += 5 * i
        elif item in (ItemType.WHITE, ItemType.SIAMESE):
            w = max(RARE_WEIGHT_FLOOR, w - 2 * i)
        weights.append(w)
    return weights


def item_count(index: int, available: int, rng: GameRNG, cap: int = MAX_BASE_ITEM_COUNT) -> int:
    base = min(max(0, index), cap)
    return min(base + rng.get_int(0, 1), available)


def candidate_cells(size: int, entrance: Coord, exit: Coord) -> List[Coord]:
    """Cells more than one king-move away from both entrance and exit."""
    ys, xs = np.mgrid[0:size, 0:size]
    blocked = np.zeros((size, size), dtype=bool)
    for ax, ay in (entrance, exit):
        blocked |= (np.abs(xs - ax) <= 1) & (np.abs(ys - ay) <= 1)
    # Row-major so a seeded shuffle sees the same starting order every time.
    return [(int(x), int(y)) for y, x in np.argwhere(~blocked)]


def place_collectibles(
    size: int,
    entrance: Coord,
    exit: Coord,
    index: int,
    rng: GameRNG,
    cap: int = MAX_BASE_ITEM_COUNT,
) -> Dict[Coord, ItemType]:
    candidates = candidate_cells(size, entrance, exit)
    rng.shuffle(candidates)
    count = item_count(index, len(candidates), rng, cap)
    weights = adjusted_weights(index)
    placed: Dict[Coord, ItemType] = {}
    for cell in candidates[:count]:
        placed[cell] = rng.weighted_choice(ITEM_TYPES, weights, cache_key=("items", index))
    log.debug(
        "Placed collectibles",
        index=index,
        size=size,
        count=count,
        candidates=len(candidates),
    )
    return placed


__all__ = [
    "ItemType",
    "ITEM_TYPES",
    "adjusted_weights",
    "item_count",
    "candidate_cells",
    "place_collectibles",
]
