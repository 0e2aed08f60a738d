from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, List, Optional

from .board import Direction, MoveResult, Tile
from .db import MemoryScorePersistence, ScorePersistence
from .engine import Board
from .preset import BoardPreset, deal_preset_board

logger = logging.getLogger(__name__)

DEFAULT_PERSISTENCE_KEY = "bestScore"


class Status(Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


Listener = Callable[['GameSession'], None]


class GameSession:
    """One game: a board, its win/loss status and the best score.

    Moves, continue and restart recompute the status and then notify every
    registered listener with the session itself. Not thread-safe; callers
    serialize access.

    A ready-made `board` brings its own random source, so `rng` is only
    accepted when the session builds the board.
    """

    def __init__(
        self,
        size: int = 4,
        target_value: int = 2048,
        initial_tiles: int = 2,
        persistence: Optional[ScorePersistence] = None,
        persistence_key: str = DEFAULT_PERSISTENCE_KEY,
        rng: Any = None,
        board: Optional[Board] = None,
    ):
        if board is not None and rng is not None:
            raise ValueError("Pass rng to the Board, not alongside an existing board")
        if board is None:
            board = Board(size=size, target_value=target_value, rng=rng)
            self.initial_tiles = max(0, min(initial_tiles, size * size))
            board.reset(self.initial_tiles)
        else:
            self.initial_tiles = max(0, min(initial_tiles, board.size * board.size))
        self.board = board
        self.persistence = persistence if persistence is not None else MemoryScorePersistence()
        self.persistence_key = persistence_key
        self.last_move: Optional[MoveResult] = None
        self.status = Status.PLAYING
        self._continued = False
        self._listeners: List[Listener] = []

        self.best_score = self.persistence.load_best_score(persistence_key)
        self._update_best_score()
        self._update_status()

    @classmethod
    def from_preset(
        cls,
        preset: BoardPreset,
        seed: Optional[int] = None,
        persistence: Optional[ScorePersistence] = None,
        persistence_key: str = DEFAULT_PERSISTENCE_KEY,
        rng: Any = None,
    ) -> 'GameSession':
        """Starts a session on a scenario board dealt from `preset`."""
        board = deal_preset_board(preset, seed=seed, rng=rng)
        return cls(board=board, persistence=persistence, persistence_key=persistence_key)

    @property
    def score(self) -> int:
        return self.board.score

    @property
    def highest_tile(self) -> int:
        return self.board.highest_value

    @property
    def rows(self) -> List[List[Optional[Tile]]]:
        return self.board.rows()

    @property
    def can_continue(self) -> bool:
        return self.status == Status.WON and not self._continued

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def move(self, direction: Direction) -> Optional[MoveResult]:
        """Plays one move. Ignored unless the session is PLAYING."""
        if self.status != Status.PLAYING:
            return None

        working = self.board.copy()
        result = working.move(direction)
        self.last_move = result
        if result.did_move:
            self.board = working
            self._update_best_score()
        logger.debug(
            "move %s: moved=%s gained=%d score=%d",
            direction.value, result.did_move, result.score_gained, self.board.score,
        )
        self._update_status()
        self._notify()
        return result

    def continue_playing(self) -> None:
        """Keeps playing past the target tile. Only valid right after a win."""
        if self.status != Status.WON:
            return
        self._continued = True
        self._update_status()
        self._notify()

    def restart(self, initial_tiles: Optional[int] = None) -> None:
        count = self.initial_tiles if initial_tiles is None else initial_tiles
        board = Board(size=self.board.size, target_value=self.board.target_value, rng=self.board.rng)
        board.reset(count)
        self.board = board
        self.last_move = None
        self._continued = False
        self._update_status()
        self._update_best_score()
        self._notify()

    def _update_status(self) -> None:
        if self.board.is_win and not self._continued:
            status = Status.WON
        elif not self.board.has_moves:
            status = Status.LOST
        else:
            status = Status.PLAYING
        if status != self.status:
            logger.info("status %s -> %s (score %d)", self.status.value, status.value, self.board.score)
        self.status = status

    def _update_best_score(self) -> None:
        if self.board.score > self.best_score:
            self.best_score = self.board.score
            logger.info("new best score %d for %r", self.best_score, self.persistence_key)
            self.persistence.save(self.best_score, self.persistence_key)
            # Another session on the same key may already have stored more.
            self.best_score = max(self.best_score, self.persistence.load_best_score(self.persistence_key))

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
