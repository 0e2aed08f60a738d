from __future__ import annotations

from typing import Any, List, Optional, Sequence

from .board import Direction, MoveResult, Position, Spawn, Tile, is_power_of_two
from .moves import collapse_line, has_adjacent_pair, lines_for, should_reverse
from .spawn import make_rng, pick_spawn


class Board:
    """The tile grid plus its score, highest tile and target.

    Slots are stored row-major. `rng` is anything with `random()` and
    `randrange(n)`; a fresh unseeded `random.Random` is used when omitted.
    """

    def __init__(self, size: int = 4, target_value: int = 2048, rng: Any = None):
        if size < 2:
            raise ValueError('Board must be at least 2x2')
        if not is_power_of_two(target_value):
            raise ValueError(f'Target value must be a power of two, got {target_value}')
        self.size = size
        self.target_value = target_value
        self.rng = rng if rng is not None else make_rng()
        self.tiles: List[Optional[Tile]] = [None] * (size * size)
        self.score = 0
        self.highest_value = 0

    @classmethod
    def from_values(
        cls,
        values: Sequence[Optional[int]],
        target_value: int = 2048,
        score: int = 0,
        rng: Any = None,
    ) -> 'Board':
        """Builds a board from row-major values, None (or 0) marking an empty slot."""
        size = int(round(len(values) ** 0.5))
        if size * size != len(values):
            raise ValueError(f'Expected a square number of values, got {len(values)}')
        for v in values:
            if v and (v < 2 or not is_power_of_two(v)):
                raise ValueError(f'Tile values must be powers of two from 2 up, got {v}')
        board = cls(size=size, target_value=target_value, rng=rng)
        board.tiles = [Tile(v) if v else None for v in values]
        board.score = score
        board.highest_value = max((t.value for t in board.tiles if t is not None), default=0)
        return board

    @property
    def is_win(self) -> bool:
        return self.highest_value >= self.target_value

    @property
    def is_full(self) -> bool:
        return all(t is not None for t in self.tiles)

    @property
    def has_moves(self) -> bool:
        """True while a slide or a merge is still possible."""
        if not self.is_full:
            return True
        return has_adjacent_pair(self.tiles, self.size)

    def tile_at(self, position: Position) -> Optional[Tile]:
        return self.tiles[position.index(self.size)]

    def rows(self) -> List[List[Optional[Tile]]]:
        return [self.tiles[start:start + self.size] for start in range(0, len(self.tiles), self.size)]

    def values(self) -> List[List[int]]:
        """Rows of plain values, 0 for an empty slot."""
        return [[t.value if t is not None else 0 for t in row] for row in self.rows()]

    def empty_positions(self) -> List[Position]:
        return [Position.from_index(i, self.size) for i, t in enumerate(self.tiles) if t is None]

    def copy(self) -> 'Board':
        """Working copy sharing tiles (they are immutable) and the random source."""
        other = Board(self.size, self.target_value, rng=self.rng)
        other.tiles = list(self.tiles)
        other.score = self.score
        other.highest_value = self.highest_value
        return other

    def reset(self, initial_tiles: int = 2) -> None:
        self.tiles = [None] * (self.size * self.size)
        self.score = 0
        self.highest_value = 0
        for _ in range(max(0, min(initial_tiles, len(self.tiles)))):
            self._spawn_tile()

    def move(self, direction: Direction) -> MoveResult:
        """Collapses every line toward `direction` and spawns a tile if anything changed."""
        previous = list(self.tiles)
        reversing = should_reverse(direction)
        gained = 0

        for line in lines_for(direction, self.size):
            current = [self.tiles[p.index(self.size)] for p in line]
            updated, line_gain = collapse_line(current, reversing, Tile)
            gained += line_gain
            for position, slot in zip(line, updated):
                self.tiles[position.index(self.size)] = slot

        changed = self.tiles != previous
        self.score += gained
        self.highest_value = max(
            self.highest_value,
            max((t.value for t in self.tiles if t is not None), default=0),
        )

        spawn = self._spawn_tile() if changed else None
        did_win = self.is_win
        return MoveResult(
            did_move=changed,
            score_gained=gained,
            spawned_tile=spawn,
            did_win=did_win,
            is_game_over=not did_win and not self.has_moves,
        )

    def _spawn_tile(self) -> Optional[Spawn]:
        picked = pick_spawn(self.empty_positions(), self.rng)
        if picked is None:
            return None
        position, value = picked
        tile = Tile(value)
        self.tiles[position.index(self.size)] = tile
        self.highest_value = max(self.highest_value, value)
        return Spawn(position=position, tile=tile)

    # Test-only mutation helpers.

    def set_tile(self, tile: Optional[Tile], position: Position) -> None:
        self.tiles[position.index(self.size)] = tile

    def set_score(self, score: int) -> None:
        self.score = score

    def set_highest_value(self, value: int) -> None:
        self.highest_value = value

    def pretty(self) -> str:
        """Generates a human-readable grid, '.' for empty slots."""
        width = max([len(str(t.value)) for t in self.tiles if t is not None] + [1])
        lines: List[str] = []
        for row in self.rows():
            lines.append(" ".join((str(t.value) if t is not None else ".").rjust(width) for t in row))
        return "\n".join(lines)
