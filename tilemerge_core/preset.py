from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .board import is_power_of_two
from .engine import Board
from .spawn import make_rng

MAX_ADDITIONAL_TILES = 4


def default_score(target_value: int) -> int:
    """Score a scenario board starts with: target * (log2(target) - 1)."""
    if target_value <= 0:
        return 0
    exponent = target_value.bit_length() - 1
    return target_value * max(exponent - 1, 0)


@dataclass(frozen=True)
class BoardPreset:
    """A named scenario board: one target tile plus a few extra tiles from a pool."""
    identifier: str
    title: str
    target_value: int
    additional_tile_pool: Tuple[int, ...]
    additional_tile_count_range: Tuple[int, int]
    dimension: int = 4
    score: Optional[int] = None

    def __post_init__(self) -> None:
        if self.dimension < 2:
            raise ValueError('Preset dimension must be at least 2')
        if not is_power_of_two(self.target_value):
            raise ValueError('Target value must be a power of two')
        low, high = self.additional_tile_count_range
        if low < 0:
            raise ValueError('Additional tile count cannot be negative')
        high = min(high, MAX_ADDITIONAL_TILES)
        object.__setattr__(self, 'additional_tile_count_range', (min(low, high), high))
        object.__setattr__(self, 'additional_tile_pool', tuple(self.additional_tile_pool))
        if self.score is None:
            object.__setattr__(self, 'score', default_score(self.target_value))

    def make_tile_values(self, rng: Any) -> List[Optional[int]]:
        """Row-major values for a fresh scenario board.

        The first shuffled slot always receives the target value; the next
        `randint(low, high)` shuffled slots receive values drawn from the pool.
        """
        total = self.dimension * self.dimension
        positions = list(range(total))
        rng.shuffle(positions)

        values: List[Optional[int]] = [None] * total
        values[positions[0]] = self.target_value

        low, high = self.additional_tile_count_range
        high = min(high, total - 1)
        low = min(low, high)
        if high <= 0:
            count = 0
        elif low == high:
            count = low
        else:
            count = rng.randint(low, high)

        if count <= 0 or not self.additional_tile_pool:
            return values
        for pos in positions[1:1 + count]:
            values[pos] = rng.choice(self.additional_tile_pool)
        return values


PRESETS: Dict[str, BoardPreset] = {
    p.identifier: p
    for p in (
        BoardPreset(
            identifier='preset-1024',
            title='1024',
            target_value=1024,
            additional_tile_pool=(2, 4, 8, 16, 32, 64, 128, 256, 512),
            additional_tile_count_range=(1, 4),
        ),
        BoardPreset(
            identifier='preset-2048',
            title='2048',
            target_value=2048,
            additional_tile_pool=(4, 8, 16, 32, 64, 128, 256, 512, 1024),
            additional_tile_count_range=(1, 4),
        ),
        BoardPreset(
            identifier='preset-4096',
            title='4096',
            target_value=4096,
            additional_tile_pool=(8, 16, 32, 64, 128, 256, 512, 1024, 2048),
            additional_tile_count_range=(1, 4),
        ),
    )
}


def get_preset(identifier: str) -> BoardPreset:
    try:
        return PRESETS[identifier]
    except KeyError:
        raise ValueError(f'Unknown preset: {identifier!r}') from None


def deal_preset_board(preset: BoardPreset, seed: Optional[int] = None, rng: Any = None) -> Board:
    """Creates a scenario board from a preset, carrying the preset's score."""
    rng = rng if rng is not None else make_rng(seed)
    values = preset.make_tile_values(rng)
    return Board.from_values(values, target_value=preset.target_value, score=preset.score or 0, rng=rng)
