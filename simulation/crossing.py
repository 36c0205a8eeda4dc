"""Moving the player from one segment's exit into the next segment.

The host reports "player reached the exit zone of segment k" (possibly
several times for one physical crossing).  :class:`CrossingCoordinator`
turns the first valid report into exactly one teleport and one
"entered segment" notification, and holds off further reports until the
transition is finished on the next tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional, Tuple

import structlog

from game.session import ChainSession
from maze.paths import MazeConnectivityError
from simulation.chain_manager import ChainError, ChainManager

log = structlog.get_logger()

Position3 = Tuple[float, float, float]
TeleportHandler = Callable[[Position3], None]
EnteredCallback = Callable[[int], None]


class CrossingStatus(Enum):
    COMPLETED = auto()
    IGNORED_TERMINAL = auto()
    IGNORED_DUPLICATE = auto()
    IGNORED_STALE = auto()
    ABORTED = auto()


@dataclass(frozen=True)
class CrossingResult:
    status: CrossingStatus
    from_index: int
    to_index: Optional[int] = None
    position: Optional[Position3] = None
    bonus: float = 0.0
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is CrossingStatus.COMPLETED


class CrossingCoordinator:
    def __init__(
        self,
        manager: ChainManager,
        session: ChainSession | None = None,
        teleport_handler: TeleportHandler | None = None,
    ) -> None:
        self.manager = manager
        self.session = session
        self.teleport_handler = teleport_handler
        self.current_index: int = manager.player_index if manager.player_index is not None else 0
        self.transition_in_progress = False
        self._entered_callbacks: List[EnteredCallback] = []

    def on_player_entered_segment(self, callback: EnteredCallback) -> None:
        self._entered_callbacks.append(callback)

    def teleport_target(self, index: int) -> Position3:
        """World position of the entrance of segment ``index``."""
        segment = self.manager.get_segment(index)
        if segment is None:
            raise ChainError(f"segment {index} has not been generated")
        cfg = self.manager.config
        return segment.world_position(
            segment.entrance,
            height=cfg.teleport_height,
            depth=cfg.entrance_depth_offset,
        )

    def handle_exit_reached(self, index: int) -> CrossingResult:
        if index >= self.manager.last_index:
            log.info("Exit of final segment reached", index=index)
            return CrossingResult(CrossingStatus.IGNORED_TERMINAL, index)
        if self.transition_in_progress:
            log.warning("Ignoring exit signal during transition", index=index)
            return CrossingResult(CrossingStatus.IGNORED_DUPLICATE, index)
        if index != self.current_index:
            log.warning("Ignoring exit signal for inactive segment", index=index, current=self.current_index)
            return CrossingResult(CrossingStatus.IGNORED_STALE, index)

        self.transition_in_progress = True
        target_index = index + 1
        # Everything the new segment needs ahead of it is built before the
        # player moves, so a failure leaves them in segment ``index``.
        window = max(1, self.manager.config.look_ahead)
        try:
            for ahead in range(target_index, target_index + window + 1):
                if ahead > self.manager.last_index:
                    break
                self.manager.generate(ahead)
            position = self.teleport_target(target_index)
        except (ChainError, MazeConnectivityError) as err:
            self.transition_in_progress = False
            log.error("Crossing aborted", index=index, target=target_index, error=str(err))
            return CrossingResult(
                CrossingStatus.ABORTED, index, target_index, reason=str(err)
            )
        except Exception:
            self.transition_in_progress = False
            raise

        if self.teleport_handler is not None:
            self.teleport_handler(position)
        self.current_index = target_index
        self.manager.player_entered(target_index)  # window already built
        bonus = 0.0
        if self.session is not None:
            bonus = self.session.record_crossing(
                target_index, self.session.crossing_bonus(target_index)
            )
        log.info("Player entered segment", index=target_index, position=position)
        for callback in list(self._entered_callbacks):
            callback(target_index)
        return CrossingResult(
            CrossingStatus.COMPLETED, index, target_index, position=position, bonus=bonus
        )

    def finish_transition(self) -> None:
        if self.transition_in_progress:
            log.debug("Transition finished", index=self.current_index)
        self.transition_in_progress = False

    def process_tick(self, tick: int | None = None) -> List[int]:
        """Run deferred generation, then release the transition guard."""
        done = self.manager.process_tick(tick)
        self.finish_transition()
        return done


__all__ = [
    "CrossingStatus",
    "CrossingResult",
    "CrossingCoordinator",
]
