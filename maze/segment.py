# maze/segment.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

import numpy as np
import structlog

from game_rng import GameRNG
from maze.alignment import ChainAligner
from maze.carver import carve, open_boundary
from maze.collectibles import ItemType, place_collectibles
from maze.sizing import SizeSequencer
from utils.config import ChainConfig

log = structlog.get_logger()

Coord = Tuple[int, int]


@dataclass(frozen=True, eq=False)
class Segment:
    """One generated maze of the chain.

    ``walls`` is a read-only ``uint8`` array indexed ``walls[y, x]``.  The
    only thing that changes after generation is ``collectibles``, which
    shrinks as the player picks items up.
    """

    index: int
    size: int
    walls: np.ndarray
    entrance: Coord
    exit: Coord
    world_offset: float
    cell_size: float = 2.0
    collectibles: Dict[Coord, ItemType] = field(default_factory=dict)

    def has_wall(self, x: int, y: int, bit: int) -> bool:
        return bool(self.walls[y, x] & bit)

    def local_offset(self, cell: Coord) -> Tuple[float, float]:
        """World-space (x, z) of ``cell``'s origin relative to the segment origin."""
        x, y = cell
        return x * self.cell_size, y * self.cell_size

    def world_position(self, cell: Coord, height: float = 0.0, depth: float = 0.0) -> Tuple[float, float, float]:
        lx, lz = self.local_offset(cell)
        return self.world_offset + lx, height, lz + depth

    def take_collectible(self, cell: Coord) -> ItemType | None:
        """Remove and return the item at ``cell``; ``None`` if there is none."""
        return self.collectibles.pop(tuple(cell), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "size": self.size,
            "walls": self.walls.tolist(),
            "entrance": list(self.entrance),
            "exit": list(self.exit),
            "world_offset": self.world_offset,
            "cell_size": self.cell_size,
            "collectibles": [
                {"x": x, "y": y, "type": item.label}
                for (x, y), item in sorted(self.collectibles.items())
            ],
        }


def build_segment(
    index: int,
    config: ChainConfig,
    sequencer: SizeSequencer,
    aligner: ChainAligner,
    rng: GameRNG,
    world_offset: float = 0.0,
) -> Segment:
    """Size, carve, align and populate segment ``index``."""
    size = sequencer.size(index)
    entrance = aligner.entrance(index)
    exit = aligner.exit(index)
    walls = carve(size, rng, config.alignment_point)
    open_boundary(walls, entrance, exit)
    collectibles = place_collectibles(
        size, entrance, exit, index, rng, cap=config.max_item_base_count
    )
    walls.setflags(write=False)
    log.debug(
        "Built segment",
        index=index,
        size=size,
        entrance=entrance,
        exit=exit,
        items=len(collectibles),
    )
    return Segment(
        index=index,
        size=size,
        walls=walls,
        entrance=entrance,
        exit=exit,
        world_offset=world_offset,
        cell_size=config.cell_size,
        collectibles=collectibles,
    )


__all__ = ["Segment", "build_segment"]
