"""
Match-3 core Python package.

Pure simulation logic for a match-3 tile board; drivers (CLI, Flask app,
agents) live outside and call these primitives.
Modules:
- moves.py: Direction, Move and the edge-index enumeration
- board.py: Board, EMPTY_CELL, find_matches
- actions.py: action-space helpers for an external decision-maker
- cascade.py: driver-side cascade resolution
"""
