from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

_tile_ids = itertools.count(1)


def _next_tile_id() -> int:
    return next(_tile_ids)


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, text: str) -> 'Direction':
        """Accepts 'left', 'LEFT' or the single letters U/D/L/R."""
        key = str(text).strip().lower()
        for d in cls:
            if key == d.value or key == d.value[0]:
                return d
        raise ValueError(f"Invalid direction: {text!r}. Must be one of up, down, left, right")


@dataclass(frozen=True)
class Position:
    """A (row, column) slot on a square board, 0-indexed."""
    row: int
    column: int

    def index(self, size: int) -> int:
        """Calculates the row-major index for this position."""
        if not (0 <= self.row < size and 0 <= self.column < size):
            raise ValueError(f"Position {self.row},{self.column} out of bounds for size {size}")
        return self.row * size + self.column

    @classmethod
    def from_index(cls, index: int, size: int) -> 'Position':
        return cls(index // size, index % size)


@dataclass(frozen=True)
class Tile:
    """A numbered tile. Two tiles are equal only if they are the same tile."""
    value: int
    id: int = field(default_factory=_next_tile_id)


@dataclass(frozen=True)
class Spawn:
    position: Position
    tile: Tile


@dataclass(frozen=True)
class MoveResult:
    """Outcome of one move attempt."""
    did_move: bool
    score_gained: int
    spawned_tile: Optional[Spawn]
    did_win: bool
    is_game_over: bool


def is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0
