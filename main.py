# main.py
import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

import structlog

from game.session import ChainSession
from maze.paths import render_ascii
from simulation.chain_manager import ChainManager
from simulation.crossing import CrossingCoordinator, CrossingStatus
from simulation.pickups import PickupDispatcher
from utils.config import ChainConfig, load_yaml_config
from utils.logging_utils import LEVEL_NAMES, setup_logging

log = structlog.get_logger()

# --- Paths relative to this script's location ---
SCRIPT_DIR = Path(__file__).parent.resolve()
CONFIG_DIR = SCRIPT_DIR / "config"
CONFIG_FILE = CONFIG_DIR / "chain.yaml"
# --- End Paths ---

DEFAULT_SEGMENTS = 3
# Simulated walking pace through a corridor cell.
SECONDS_PER_CELL = 0.5


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a chain of mazes and simulate a run through it."
    )
    parser.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {CONFIG_FILE})")
    parser.add_argument("--seed", type=int, default=None, help="Chain seed (overrides config).")
    parser.add_argument(
        "--segments",
        type=int,
        default=DEFAULT_SEGMENTS,
        help="Number of segment exits to cross.",
    )
    parser.add_argument("--ascii", action="store_true", help="Print each visited segment.")
    parser.add_argument(
        "--log-level",
        choices=sorted(LEVEL_NAMES),
        type=str.lower,
        default=None,
        help="Logging level (default from config, else info).",
    )
    return parser


def load_config(path: Optional[Path]) -> tuple[ChainConfig, dict]:
    """Config from ``path``; the bundled file is optional, an explicit one is not."""
    if path is None:
        if not CONFIG_FILE.is_file():
            return ChainConfig(), {}
        path = CONFIG_FILE
    raw = load_yaml_config(path, "Chain")
    if not isinstance(raw, dict):
        log.warning("Config file is not a mapping, using defaults", path=str(path))
        return ChainConfig(), {}
    logging_cfg = raw.get("logging")
    if not isinstance(logging_cfg, dict):
        logging_cfg = {}
    return ChainConfig.from_dict(raw.get("chain", {})), logging_cfg


def run(
    config: ChainConfig,
    segments: int,
    seed: Optional[int] = None,
    show_ascii: bool = False,
) -> int:
    manager = ChainManager(config, seed=seed)
    session = ChainSession(config)
    coordinator = CrossingCoordinator(manager, session)
    pickups = PickupDispatcher(manager)
    pickups.register_handler(session.apply_effect)
    entered: List[int] = []
    coordinator.on_player_entered_segment(entered.append)

    manager.start()
    status = 0
    for tick in range(segments):
        index = coordinator.current_index
        path = manager.solution_path(index)
        segment = manager.get_segment(index)
        if show_ascii:
            print(f"\nSegment {index} ({segment.size}x{segment.size})")
            reveal = path if session.path_reveal_requested else None
            print(render_ascii(segment.walls, segment.entrance, segment.exit, segment.collectibles, reveal))
        for cell in path:
            pickups.player_overlapped(index, cell)
        if session.advance_time(len(path) * SECONDS_PER_CELL):
            log.info("Run over", index=index)
            break
        result = coordinator.handle_exit_reached(index)
        coordinator.process_tick(tick)
        if result.status is CrossingStatus.ABORTED:
            log.error("Run stopped on aborted crossing", index=index, reason=result.reason)
            status = 1
            break
        if result.status is CrossingStatus.IGNORED_TERMINAL:
            break

    summary = session.summary()
    print("-" * 30)
    print(f"Seed: {manager.seed}")
    print(f"Segments generated: {manager.get_total_generated_count()}")
    print(f"Segments entered: {entered}")
    print(f"Time remaining: {summary['remaining_time']:.1f}s")
    print(f"Collected: {summary['collected']}")
    print("-" * 30)
    return status


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config, logging_cfg = load_config(args.config)
    except FileNotFoundError as e:
        setup_logging(logging.INFO)
        log.critical("Config file not found", error=str(e))
        return 1
    except ValueError as e:
        setup_logging(logging.INFO)
        log.critical("Invalid chain configuration", error=str(e))
        return 1
    setup_logging(
        args.log_level or logging_cfg.get("level", "info"),
        colors=bool(logging_cfg.get("colors", True)),
    )
    if args.segments < 0:
        log.error("Segment count must be non-negative", segments=args.segments)
        return 1
    start = time.time()
    status = run(config, args.segments, seed=args.seed, show_ascii=args.ascii)
    log.info("Run finished", status=status, seconds=round(time.time() - start, 3))
    return status


if __name__ == "__main__":
    sys.exit(main())
