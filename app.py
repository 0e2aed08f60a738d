from __future__ import annotations

import logging
import os
import threading
import uuid
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from game import (
    DEFAULT_PERSISTENCE_KEY,
    PRESETS,
    Direction,
    GameSession,
    MoveResult,
    ScorePersistence,
    SqliteScorePersistence,
    Tile,
    get_preset,
    make_rng,
)

logger = logging.getLogger(__name__)

DEFAULT_DB = os.getenv("TILEMERGE_DB", "data/tilemerge.db")
MAX_SIZE = 16

app = Flask(__name__)

# Process-local registry of running games, keyed by game id.
_sessions: Dict[str, GameSession] = {}
_sessions_lock = threading.Lock()
_persistence: Optional[ScorePersistence] = None


def get_persistence() -> ScorePersistence:
    global _persistence
    if _persistence is None:
        _persistence = SqliteScorePersistence(DEFAULT_DB)
    return _persistence


def set_persistence(persistence: Optional[ScorePersistence]) -> None:
    """Swaps the best score store (tests use an in-memory one)."""
    global _persistence
    _persistence = persistence


def reset_sessions() -> None:
    with _sessions_lock:
        _sessions.clear()


# ---------- JSON helpers ----------

def tile_to_json(t: Optional[Tile]) -> Optional[Dict[str, int]]:
    if t is None:
        return None
    return {"id": int(t.id), "value": int(t.value)}


def move_result_to_json(r: Optional[MoveResult]) -> Optional[Dict[str, Any]]:
    if r is None:
        return None
    spawn = None
    if r.spawned_tile is not None:
        spawn = {
            "position": [r.spawned_tile.position.row, r.spawned_tile.position.column],
            "tile": tile_to_json(r.spawned_tile.tile),
        }
    return {
        "didMove": bool(r.did_move),
        "scoreGained": int(r.score_gained),
        "spawnedTile": spawn,
        "didWin": bool(r.did_win),
        "isGameOver": bool(r.is_game_over),
    }


def session_to_json(game_id: str, s: GameSession) -> Dict[str, Any]:
    return {
        "gameId": game_id,
        "size": int(s.board.size),
        "targetValue": int(s.board.target_value),
        "rows": [[tile_to_json(t) for t in row] for row in s.rows],
        "score": int(s.score),
        "bestScore": int(s.best_score),
        "highestTile": int(s.highest_tile),
        "status": s.status.value,
        "canContinue": bool(s.can_continue),
        "lastMove": move_result_to_json(s.last_move),
    }


def _lookup(body: Dict[str, Any]):
    game_id = body.get("gameId")
    if not isinstance(game_id, str):
        return None, None
    return game_id, _sessions.get(game_id)


def _not_found(game_id: Any):
    return jsonify({"ok": False, "error": f"unknown game: {game_id}"}), 404


# ---------- Game API ----------

@app.get("/api/presets")
def api_presets() -> Any:
    return jsonify({
        "ok": True,
        "presets": [
            {
                "identifier": p.identifier,
                "title": p.title,
                "dimension": p.dimension,
                "targetValue": p.target_value,
                "score": p.score,
            }
            for p in PRESETS.values()
        ],
    })


@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    seed = body.get("seed", None)
    key = str(body.get("key", DEFAULT_PERSISTENCE_KEY))
    try:
        rng = make_rng(int(seed) if seed is not None else None)
        preset_id = body.get("preset")
        if preset_id:
            session = GameSession.from_preset(
                get_preset(str(preset_id)), persistence=get_persistence(), persistence_key=key, rng=rng,
            )
        else:
            size = int(body.get("size", 4))
            if size > MAX_SIZE:
                raise ValueError(f"size must be at most {MAX_SIZE}, got {size}")
            session = GameSession(
                size=size,
                target_value=int(body.get("target", 2048)),
                initial_tiles=int(body.get("initialTiles", 2)),
                persistence=get_persistence(),
                persistence_key=key,
                rng=rng,
            )
    except (TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad game options: {e}"}), 400

    game_id = uuid.uuid4().hex
    with _sessions_lock:
        _sessions[game_id] = session
    logger.info("new game %s (size %d, target %d)", game_id, session.board.size, session.board.target_value)
    return jsonify({"ok": True, "state": session_to_json(game_id, session)})


@app.post("/api/state")
def api_state() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    with _sessions_lock:
        game_id, session = _lookup(body)
        if session is None:
            return _not_found(game_id)
        state = session_to_json(game_id, session)
    return jsonify({"ok": True, "state": state})


@app.post("/api/move")
def api_move() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        direction = Direction.parse(body.get("direction", ""))
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    with _sessions_lock:
        game_id, session = _lookup(body)
        if session is None:
            return _not_found(game_id)
        result = session.move(direction)
        state = session_to_json(game_id, session)
    return jsonify({"ok": True, "accepted": result is not None, "state": state})


@app.post("/api/continue")
def api_continue() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    with _sessions_lock:
        game_id, session = _lookup(body)
        if session is None:
            return _not_found(game_id)
        session.continue_playing()
        state = session_to_json(game_id, session)
    return jsonify({"ok": True, "state": state})


@app.post("/api/restart")
def api_restart() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    initial = body.get("initialTiles", None)
    with _sessions_lock:
        game_id, session = _lookup(body)
        if session is None:
            return _not_found(game_id)
        try:
            session.restart(int(initial) if initial is not None else None)
        except (TypeError, ValueError) as e:
            return jsonify({"ok": False, "error": f"bad initialTiles: {e}"}), 400
        state = session_to_json(game_id, session)
    return jsonify({"ok": True, "state": state})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
