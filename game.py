from __future__ import annotations

# Facade module that re-exports the match-3 core for the Flask app and tests.
# Single-responsibility modules live under match3_core/*.

from match3_core.board import Board, Coord, EMPTY_CELL, MIN_RUN, find_matches
from match3_core.moves import Direction, Move, iter_moves, num_edge_indices
from match3_core.actions import action_mask, action_space_size, valid_moves
from match3_core.cascade import CascadeResult, DEFAULT_MAX_ROUNDS, play_move, resolve_cascade

__all__ = [
    'Board',
    'Coord',
    'EMPTY_CELL',
    'MIN_RUN',
    'find_matches',
    'Direction',
    'Move',
    'iter_moves',
    'num_edge_indices',
    'action_mask',
    'action_space_size',
    'valid_moves',
    'CascadeResult',
    'DEFAULT_MAX_ROUNDS',
    'play_move',
    'resolve_cascade',
]
