from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from .board import Direction, Position, Tile

Slot = Optional[Tile]


def should_reverse(direction: Direction) -> bool:
    """Right and down collapse toward the high-index end of each line."""
    return direction in (Direction.RIGHT, Direction.DOWN)


def lines_for(direction: Direction, size: int) -> List[List[Position]]:
    """Splits the board into the lines that collapse independently for a move.

    Rows for LEFT/RIGHT, columns for UP/DOWN, always in natural index order.
    """
    if direction in (Direction.LEFT, Direction.RIGHT):
        return [[Position(r, c) for c in range(size)] for r in range(size)]
    return [[Position(r, c) for r in range(size)] for c in range(size)]


def collapse_line(
    slots: Sequence[Slot],
    reversing: bool,
    make_tile: Callable[[int], Tile],
) -> Tuple[List[Slot], int]:
    """Slides and merges one line toward its start (or its end when reversing).

    Each tile merges at most once; a merged tile is never merged again in the
    same pass. Returns the new slots in the line's natural order plus the
    score gained. An unchanged line comes back as the original slots with 0.
    """
    working = list(slots)
    if reversing:
        working.reverse()

    compacted = [t for t in working if t is not None]
    result: List[Slot] = []
    gained = 0
    i = 0
    while i < len(compacted):
        tile = compacted[i]
        if i + 1 < len(compacted) and compacted[i + 1].value == tile.value:
            merged = make_tile(tile.value * 2)
            result.append(merged)
            gained += merged.value
            i += 2
        else:
            result.append(tile)
            i += 1

    result.extend([None] * (len(slots) - len(result)))
    if reversing:
        result.reverse()

    if result == list(slots):
        return list(slots), 0
    return result, gained


def has_adjacent_pair(slots: Sequence[Slot], size: int) -> bool:
    """True when some tile shares its value with its right or lower neighbour."""
    for r in range(size):
        for c in range(size):
            tile = slots[r * size + c]
            if tile is None:
                continue
            if c + 1 < size:
                right = slots[r * size + c + 1]
                if right is not None and right.value == tile.value:
                    return True
            if r + 1 < size:
                below = slots[(r + 1) * size + c]
                if below is not None and below.value == tile.value:
                    return True
    return False
