from __future__ import annotations

# Facade module that re-exports the tilemerge core.
# The Flask app and tests import from here; single-responsibility
# modules live under tilemerge_core/*.

from tilemerge_core.board import (
    Direction,
    MoveResult,
    Position,
    Spawn,
    Tile,
    is_power_of_two,
)
from tilemerge_core.moves import (
    collapse_line,
    has_adjacent_pair,
    lines_for,
    should_reverse,
)
from tilemerge_core.spawn import (
    FOUR_PROBABILITY,
    ScriptedRandom,
    make_rng,
    pick_spawn,
    spawn_value,
)
from tilemerge_core.engine import Board
from tilemerge_core.preset import (
    PRESETS,
    BoardPreset,
    deal_preset_board,
    default_score,
    get_preset,
)
from tilemerge_core.db import (
    MemoryScorePersistence,
    ScorePersistence,
    SqliteScorePersistence,
    _resolve_db_path,
)
from tilemerge_core.session import (
    DEFAULT_PERSISTENCE_KEY,
    GameSession,
    Status,
)


def new_session(
    size: int = 4,
    target_value: int = 2048,
    initial_tiles: int = 2,
    seed: int | None = None,
    persistence: ScorePersistence | None = None,
    persistence_key: str = DEFAULT_PERSISTENCE_KEY,
) -> GameSession:
    """Convenience constructor wiring a seeded random source."""
    return GameSession(
        size=size,
        target_value=target_value,
        initial_tiles=initial_tiles,
        persistence=persistence,
        persistence_key=persistence_key,
        rng=make_rng(seed),
    )


def main() -> None:
    # CLI driver delegated to tilemerge_core.cli
    from tilemerge_core.cli import main as _main
    raise SystemExit(_main())


if __name__ == '__main__':
    main()
