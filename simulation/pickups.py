"""Dispatch of collectible pickups to host callbacks."""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

import structlog

from game_rng import GameRNG
from maze.collectibles import ItemType
from simulation.chain_manager import ChainManager

log = structlog.get_logger()

PickupHandler = Callable[[ItemType, float], None]


class PickupDispatcher:
    """Consume the collectible under the player and fan out its effect.

    Collision detection is the host's job; it calls
    :meth:`player_overlapped` with the segment and cell the player touched.
    """

    def __init__(self, manager: ChainManager, rng: GameRNG | None = None) -> None:
        self.manager = manager
        self.rng = rng or GameRNG(manager.seed)
        self.handlers: List[PickupHandler] = []

    def register_handler(self, handler: PickupHandler) -> None:
        self.handlers.append(handler)
        log.debug("Registered pickup handler", handler=handler)

    def player_overlapped(
        self, index: int, cell: Tuple[int, int]
    ) -> Optional[Tuple[ItemType, float]]:
        item = self.manager.consume_collectible(index, cell)
        if item is None:
            return None
        value = item.effect_value(self.rng)
        log.info("Collectible picked up", index=index, cell=tuple(cell), item=item.label, value=value)
        for handler in list(self.handlers):
            try:
                handler(item, value)
            except Exception as err:
                log.error("Pickup handler failed", item=item.label, error=str(err))
        return item, value


__all__ = ["PickupDispatcher", "PickupHandler"]
