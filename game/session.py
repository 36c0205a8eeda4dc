# game/session.py
from __future__ import annotations

from collections import Counter
from typing import Optional

import structlog

from maze.collectibles import ItemType
from utils.config import ChainConfig

log = structlog.get_logger()


class ChainSession:
    """State of one play-through: the countdown timer and what was collected.

    A fresh session is created (or :meth:`restart` is called) for every run;
    nothing carries over between runs implicitly.
    """

    def __init__(self, config: Optional[ChainConfig] = None) -> None:
        self.config = config or ChainConfig()
        self.restart()

    def restart(self) -> None:
        self.remaining_time: float = float(self.config.start_time)
        self.game_over: bool = False
        self.collected: Counter = Counter()
        self.segments_completed: int = 0
        self.path_reveal_requested: bool = False
        self.elapsed: float = 0.0

    def advance_time(self, delta: float) -> bool:
        """Tick the timer down by ``delta`` seconds.  Returns ``game_over``."""
        if self.game_over or delta <= 0:
            return self.game_over
        self.elapsed += delta
        self.remaining_time = max(0.0, self.remaining_time - delta)
        if self.remaining_time == 0.0:
            self.game_over = True
            log.info(
                "Time ran out",
                elapsed=round(self.elapsed, 2),
                segments_completed=self.segments_completed,
            )
        return self.game_over

    def add_time(self, seconds: float) -> float:
        if self.game_over:
            log.debug("Ignoring time change after game over", seconds=seconds)
            return self.remaining_time
        self.remaining_time = max(0.0, self.remaining_time + seconds)
        return self.remaining_time

    def crossing_bonus(self, index: int) -> float:
        """Seconds granted for arriving in segment ``index``."""
        return self.config.crossing_bonus_base + self.config.crossing_bonus_per_segment * index

    def apply_effect(self, item: ItemType, value: float) -> None:
        """Pickup handler: tally the item and apply its time effect."""
        if self.game_over:
            return
        self.collected[item] += 1
        self.add_time(value)
        if item.reveals_path:
            self.path_reveal_requested = True
        log.debug("Applied collectible", item=item.label, value=value, remaining=self.remaining_time)

    def record_crossing(self, index: int, bonus: float | None = None) -> float:
        """Note arrival in segment ``index`` and grant the crossing bonus."""
        if bonus is None:
            bonus = self.crossing_bonus(index)
        self.segments_completed += 1
        self.path_reveal_requested = False
        remaining = self.add_time(bonus)
        log.info("Crossing recorded", index=index, bonus=bonus, remaining=remaining)
        return bonus

    def summary(self) -> dict:
        return {
            "remaining_time": round(self.remaining_time, 2),
            "segments_completed": self.segments_completed,
            "game_over": self.game_over,
            "collected": {item.label: n for item, n in self.collected.items()},
        }
