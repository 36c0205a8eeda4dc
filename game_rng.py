"""Seeded random number generation for maze carving and item placement.

Every random decision in the chain (neighbour picks while carving, candidate
shuffles, rarity draws, randomized item effects) goes through a
:class:`GameRNG`.  Each segment owns its own generator whose seed is derived
from the chain seed and the segment index via :func:`derive_seed`, so a
segment's content depends only on ``(seed, index)`` and never on the order in
which segments were requested.
"""

from __future__ import annotations

import secrets
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

_SEED_MASK = 0xFFFFFFFFFFFFFFFF
_LCG_MULTIPLIER = 6364136223846793005


def derive_seed(base: int, *values: int) -> int:
    """Mix ``values`` into ``base`` and return a 64-bit child seed."""
    seed = int(base) & _SEED_MASK
    for v in values:
        seed = (seed * _LCG_MULTIPLIER + int(v) + 1) & _SEED_MASK
    return seed


class GameRNG:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else secrets.randbits(32)
        self.rng = np.random.default_rng(self.initial_seed)
        self.weighted_choice_cache: Dict[Any, np.ndarray] = {}
        self.weighted_choice_cache_size = 64

    # ------------------------------------------------------------------
    # basic random helpers
    # ------------------------------------------------------------------
    def get_int(self, a: int, b: int) -> int:
        """Uniform integer in the inclusive range ``[a, b]``."""
        if a > b:
            raise ValueError("a <= b")
        return int(self.rng.integers(a, b + 1))

    def get_float(self, a: float = 0.0, b: float = 1.0) -> float:
        if a > b:
            raise ValueError("a <= b")
        return a + (b - a) * float(self.rng.random())

    def coin_flip(self, heads_probability: float = 0.5) -> bool:
        if not 0.0 <= heads_probability <= 1.0:
            raise ValueError("probability out of range")
        return self.get_float() < heads_probability

    # ------------------------------------------------------------------
    # weighted helpers
    # ------------------------------------------------------------------
    def weighted_choice(
        self,
        items: Sequence[Any],
        weights: Sequence[int],
        cache_key: Any | None = None,
    ) -> Any:
        """Pick one of ``items`` with probability proportional to ``weights``.

        Weights are integers.  A uniform integer is drawn in
        ``[0, total)`` and the first item whose cumulative weight exceeds
        the draw is returned.
        """
        if len(items) != len(weights):
            raise ValueError("items/weights length mismatch")
        if not items:
            raise ValueError("items empty")
        if any(w < 0 for w in weights):
            raise ValueError("weights must be non-negative")
        total = int(sum(weights))
        if total <= 0:
            raise ValueError("weight sum must be positive")

        cdf = None
        if cache_key is not None:
            cdf = self.weighted_choice_cache.get(cache_key)
        if cdf is None:
            cdf = np.cumsum(np.asarray(weights, dtype=np.int64))
            if cache_key is not None:
                if len(self.weighted_choice_cache) >= self.weighted_choice_cache_size:
                    # Oldest entry first; dicts keep insertion order.
                    del self.weighted_choice_cache[next(iter(self.weighted_choice_cache))]
                self.weighted_choice_cache[cache_key] = cdf

        draw = self.get_int(0, total - 1)
        idx = int(np.searchsorted(cdf, draw, side="right"))
        return items[min(idx, len(items) - 1)]

    # ------------------------------------------------------------------
    # sequence utilities
    # ------------------------------------------------------------------
    def shuffle(self, seq: List[Any]) -> None:
        self.rng.shuffle(seq)


__all__ = ["GameRNG", "derive_seed"]
