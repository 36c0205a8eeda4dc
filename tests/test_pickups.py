from game_rng import GameRNG
from maze.collectibles import ItemType
from simulation.chain_manager import ChainManager
from simulation.pickups import PickupDispatcher
from utils.config import ChainConfig


def _segment_with_items():
    manager = ChainManager(ChainConfig(), seed=5)
    segment = manager.generate(6)
    return manager, segment


def test_overlap_applies_effect_once():
    manager, segment = _segment_with_items()
    cell, item = next(iter(segment.collectibles.items()))
    dispatcher = PickupDispatcher(manager, GameRNG(seed=1))
    calls = []
    dispatcher.register_handler(lambda t, v: calls.append((t, v)))

    picked = dispatcher.player_overlapped(6, cell)
    assert picked is not None
    picked_item, value = picked
    assert picked_item is item
    if item is ItemType.TABBY:
        assert abs(value) == 7.0
    else:
        assert value == item.magnitude
    assert calls == [picked]
    assert dispatcher.player_overlapped(6, cell) is None
    assert calls == [picked]
    assert cell not in segment.collectibles


def test_empty_cell_does_nothing():
    manager, segment = _segment_with_items()
    dispatcher = PickupDispatcher(manager)
    calls = []
    dispatcher.register_handler(lambda t, v: calls.append(t))
    assert dispatcher.player_overlapped(6, segment.entrance) is None
    assert calls == []


def test_failing_handler_does_not_block_others():
    manager, segment = _segment_with_items()
    cell = next(iter(segment.collectibles))
    dispatcher = PickupDispatcher(manager)
    calls = []

    def boom(item, value):
        raise RuntimeError("handler failure")

    dispatcher.register_handler(boom)
    dispatcher.register_handler(lambda t, v: calls.append(t))
    assert dispatcher.player_overlapped(6, cell) is not None
    assert len(calls) == 1
