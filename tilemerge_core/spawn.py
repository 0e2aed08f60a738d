from __future__ import annotations

import random
from typing import Any, List, Optional, Sequence, Tuple

FOUR_PROBABILITY = 0.1


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Creates the random source used for spawning and preset dealing."""
    return random.Random(seed)


def spawn_value(rng: Any) -> int:
    """Draws the value for a freshly spawned tile: 4 one time in ten, else 2."""
    return 4 if rng.random() < FOUR_PROBABILITY else 2


def pick_spawn(empty: Sequence[Any], rng: Any) -> Optional[Tuple[Any, int]]:
    """Picks a uniformly random empty slot and a value for it.

    The slot is drawn before the value so a scripted source can be read in
    order: first `randrange(len(empty))`, then `random()`.
    """
    if not empty:
        return None
    slot = empty[rng.randrange(len(empty))]
    return slot, spawn_value(rng)


class ScriptedRandom:
    """Deterministic random source replaying fixed draws.

    `indices` feed `randrange` (each taken modulo the requested bound) and
    `draws` feed `random`. When a list runs out it wraps around.
    """

    def __init__(self, indices: Sequence[int] = (0,), draws: Sequence[float] = (0.5,)):
        if not indices or not draws:
            raise ValueError('ScriptedRandom needs at least one index and one draw')
        self._indices: List[int] = list(indices)
        self._draws: List[float] = list(draws)
        self._i = 0
        self._d = 0

    def randrange(self, n: int) -> int:
        value = self._indices[self._i % len(self._indices)]
        self._i += 1
        return value % n

    def random(self) -> float:
        value = self._draws[self._d % len(self._draws)]
        self._d += 1
        return value
