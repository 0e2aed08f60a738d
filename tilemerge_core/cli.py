from __future__ import annotations

import argparse
import logging
import os
from typing import List, Optional

from .board import Direction
from .db import SqliteScorePersistence
from .preset import PRESETS, get_preset
from .session import DEFAULT_PERSISTENCE_KEY, GameSession
from .spawn import make_rng

logger = logging.getLogger(__name__)


def parse_moves(text: str) -> List[Direction]:
    """Turns a script like 'LLUR' or 'left,up' into directions."""
    text = text.strip()
    if not text:
        return []
    parts = text.split(',') if ',' in text else list(text.replace(' ', ''))
    return [Direction.parse(p) for p in parts if p.strip()]


def print_session(session: GameSession) -> None:
    print(session.board.pretty())
    print(f"score: {session.score}  best: {session.best_score}  status: {session.status.value}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Tile-merging puzzle engine driver')
    parser.add_argument('--size', type=int, default=4, help='Board size (NxN), at least 2')
    parser.add_argument('--target', type=int, default=2048, help='Winning tile value (power of two)')
    parser.add_argument('--initial-tiles', type=int, default=2, help='Tiles spawned on a fresh board')
    parser.add_argument('--preset', choices=sorted(PRESETS), default=None, help='Start from a scenario board')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for spawns and presets')
    parser.add_argument('--db', default=os.getenv('TILEMERGE_DB', 'data/tilemerge.db'), help='SQLite DB file path')
    parser.add_argument('--key', default=DEFAULT_PERSISTENCE_KEY, help='Best score key')
    parser.add_argument('--moves', default='', help="Moves to play, e.g. 'LLUR' or 'left,up'")
    parser.add_argument('--continue', dest='keep_going', action='store_true', help='Keep playing past a win')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        moves = parse_moves(args.moves)
    except ValueError as e:
        parser.error(str(e))

    persistence = SqliteScorePersistence(args.db)
    rng = make_rng(args.seed)
    try:
        if args.preset:
            session = GameSession.from_preset(
                get_preset(args.preset), persistence=persistence, persistence_key=args.key, rng=rng,
            )
        else:
            session = GameSession(
                size=args.size,
                target_value=args.target,
                initial_tiles=args.initial_tiles,
                persistence=persistence,
                persistence_key=args.key,
                rng=rng,
            )
    except ValueError as e:
        parser.error(str(e))
    logger.debug("session ready: size=%d target=%d db=%s", session.board.size, session.board.target_value, persistence.db_path)

    print('Initial board:')
    print_session(session)
    for direction in moves:
        if session.can_continue and args.keep_going:
            session.continue_playing()
        result = session.move(direction)
        if result is None:
            print(f"\nGame is {session.status.value}; ignoring remaining moves.")
            break
        print(f"\n{direction.value}: " + ('moved' if result.did_move else 'no change') + f" (+{result.score_gained})")
        print_session(session)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
