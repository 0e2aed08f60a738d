"""
tilemerge core Python package.

This package contains the tile-merging puzzle engine and the session state
machine built on top of it.
Modules:
- board.py: Tile, Position, Direction, MoveResult
- moves.py: line decomposition, collapse and adjacency checks
- spawn.py: random tile spawning and injectable random sources
- engine.py: Board (grid, score, move)
- session.py: GameSession, Status
- preset.py: BoardPreset and the built-in scenario boards
- db.py: best score persistence (memory, SQLite)
"""
