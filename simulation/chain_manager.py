"""Lazy, idempotent generation of the maze chain.

The manager owns every generated :class:`~maze.segment.Segment`.  Segments
are generated on demand (directly, through the player look-ahead window, or
from the tick-deferred queue) and never freed.  The chain is always
contiguous: asking for segment ``i`` first builds any missing segment below
it, so world offsets only ever grow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set, Tuple

import structlog

from game_rng import GameRNG, derive_seed
from maze.alignment import ChainAligner
from maze.collectibles import ItemType
from maze.paths import solve
from maze.segment import Segment, build_segment
from maze.sizing import SizeSequencer
from utils.config import ChainConfig

log = structlog.get_logger()

Coord = Tuple[int, int]


class ChainError(Exception):
    """Base class for maze chain failures."""


class SegmentIndexError(ChainError, IndexError):
    """Segment index is negative or past the chain limit."""


class GenerationInProgressError(ChainError):
    """``generate`` was re-entered for an index that is still being built."""


@dataclass
class ChainState:
    generated_indices: Set[int] = field(default_factory=set)
    cumulative_offset: float = 0.0

    def mark_generated(self, index: int, extent: float) -> None:
        if index in self.generated_indices:
            return
        self.generated_indices.add(index)
        self.cumulative_offset += extent

    @property
    def count(self) -> int:
        return len(self.generated_indices)


class ChainManager:
    """Build and hold the segments of one chain.

    Construct one per run and pass it to whatever needs it; nothing here
    is global.  ``seed`` overrides ``config.seed``; with neither set a
    random seed is drawn and logged so the run can be replayed.
    """

    def __init__(self, config: ChainConfig | None = None, seed: int | None = None) -> None:
        self.config = config or ChainConfig()
        root = GameRNG(seed if seed is not None else self.config.seed)
        self.seed: int = root.initial_seed
        self.sequencer = SizeSequencer(self.config.base_size, self.config.size_increment)
        self.aligner = ChainAligner(self.sequencer, self.config.alignment_point[0])
        self.state = ChainState()
        self.segments: Dict[int, Segment] = {}
        self.player_index: int | None = None
        self._in_flight: Set[int] = set()
        # index -> tick it was queued on; dict order is arrival order.
        self.pending: Dict[int, int | None] = {}
        self._listeners: List[Callable[[Segment], None]] = []
        log.info(
            "Chain manager created",
            seed=self.seed,
            base_size=self.config.base_size,
            max_segments=self.config.max_segments,
        )

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    @property
    def last_index(self) -> int:
        return self.config.last_index

    def in_range(self, index: int) -> bool:
        return 0 <= index <= self.last_index

    def _check_index(self, index: int) -> None:
        if not self.in_range(index):
            log.warning("Segment index out of range", index=index, last_index=self.last_index)
            raise SegmentIndexError(
                f"segment index {index} outside [0, {self.last_index}]"
            )

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def add_listener(self, callback: Callable[[Segment], None]) -> None:
        """Call ``callback(segment)`` each time a segment is generated."""
        self._listeners.append(callback)

    def segment_rng(self, index: int) -> GameRNG:
        return GameRNG(derive_seed(self.seed, index))

    def generate(self, index: int) -> Segment:
        """Return segment ``index``, building it (and any gap below it) if needed."""
        self._check_index(index)
        existing = self.segments.get(index)
        if existing is not None:
            log.debug("Segment already generated", index=index)
            return existing
        if index in self._in_flight:
            log.warning("Rejected re-entrant generation", index=index)
            raise GenerationInProgressError(f"segment {index} is already being generated")

        self._in_flight.add(index)
        try:
            for i in range(index + 1):
                if i not in self.segments:
                    self._generate_one(i)
        finally:
            self._in_flight.discard(index)
        return self.segments[index]

    def _generate_one(self, index: int) -> Segment:
        self._in_flight.add(index)
        try:
            offset = self.state.cumulative_offset
            segment = build_segment(
                index,
                self.config,
                self.sequencer,
                self.aligner,
                self.segment_rng(index),
                world_offset=offset,
            )
            self.segments[index] = segment
            self.state.mark_generated(index, self._extent(index))
        finally:
            self._in_flight.discard(index)
        log.info(
            "Generated segment",
            index=index,
            size=segment.size,
            world_offset=offset,
            items=len(segment.collectibles),
            total=self.state.count,
        )
        for callback in list(self._listeners):
            callback(segment)
        return segment

    def _extent(self, index: int) -> float:
        return self.sequencer.size(index) * self.config.cell_size + self.config.spacing

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def is_generated(self, index: int) -> bool:
        return index in self.segments

    def get_segment(self, index: int) -> Optional[Segment]:
        return self.segments.get(index)

    def get_size(self, index: int) -> int:
        """Side length of segment ``index``, whether or not it exists yet."""
        return self.sequencer.size(index)

    def get_entrance(self, index: int) -> Coord:
        segment = self.segments.get(index)
        return segment.entrance if segment is not None else self.aligner.entrance(index)

    def get_exit(self, index: int) -> Coord:
        segment = self.segments.get(index)
        return segment.exit if segment is not None else self.aligner.exit(index)

    def world_offset(self, index: int) -> float:
        """X offset of segment ``index`` in world space."""
        segment = self.segments.get(index)
        if segment is not None:
            return segment.world_offset
        if index < 0:
            raise ValueError(f"segment index must be non-negative, got {index}")
        return sum(self._extent(j) for j in range(index))

    # Host-facing names
    def get_maze_size(self, index: int) -> int:
        return self.get_size(index)

    def get_entrance_position(self, size: int, index: int) -> Coord:
        return self.aligner.entrance_for(size, index)

    def get_exit_position(self, size: int, index: int) -> Coord:
        return self.aligner.exit_for(size, index)

    def get_total_generated_count(self) -> int:
        return self.state.count

    # ------------------------------------------------------------------
    # Player progression
    # ------------------------------------------------------------------
    def player_entered(self, index: int) -> List[int]:
        """Record the player in segment ``index`` and fill the look-ahead window.

        Returns the indices that had to be generated.
        """
        self._check_index(index)
        self.player_index = index
        built: List[int] = []
        for ahead in range(index, index + self.config.look_ahead + 1):
            if ahead > self.last_index:
                log.debug("Look-ahead stops at chain limit", index=ahead)
                break
            if ahead not in self.segments:
                self.generate(ahead)
                built.append(ahead)
        return built

    def start(self) -> Segment:
        """Generate the opening segments and place the player in segment 0."""
        count = min(self.config.initial_segments, self.config.max_segments)
        self.generate(count - 1)
        self.player_entered(0)
        return self.segments[0]

    # ------------------------------------------------------------------
    # Tick-deferred generation
    # ------------------------------------------------------------------
    def schedule_generation(self, index: int, tick: int | None = None) -> bool:
        """Queue ``generate(index)`` for the next tick.

        At most one request per index is kept.  Returns ``False`` when the
        request was redundant.
        """
        self._check_index(index)
        if index in self.segments or index in self.pending:
            return False
        self.pending[index] = tick
        log.debug("Generation scheduled", index=index, tick=tick)
        return True

    def process_tick(self, tick: int | None = None) -> List[int]:
        """Run queued generation requests in arrival order."""
        done: List[int] = []
        for index in list(self.pending):
            self.pending.pop(index, None)
            if index in self.segments:
                continue
            self.generate(index)
            done.append(index)
        if done:
            log.debug("Processed deferred generation", tick=tick, indices=done)
        return done

    # ------------------------------------------------------------------
    # Segment queries
    # ------------------------------------------------------------------
    def _require(self, index: int) -> Segment:
        segment = self.segments.get(index)
        if segment is None:
            raise ChainError(f"segment {index} has not been generated")
        return segment

    def solution_path(self, index: int) -> List[Coord]:
        """Cells from entrance to exit of a generated segment."""
        segment = self._require(index)
        return solve(segment.walls, segment.entrance, segment.exit)

    def consume_collectible(self, index: int, cell: Coord) -> ItemType | None:
        segment = self._require(index)
        item = segment.take_collectible(cell)
        if item is not None:
            log.debug("Collectible consumed", index=index, cell=tuple(cell), item=item.label)
        return item


__all__ = [
    "ChainError",
    "SegmentIndexError",
    "GenerationInProgressError",
    "ChainState",
    "ChainManager",
]
