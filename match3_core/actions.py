from __future__ import annotations

from typing import List

from .board import Board
from .moves import Move, iter_moves, num_edge_indices


def action_space_size(rows: int, cols: int) -> int:
    """Size of the discrete action space: one action per internal edge."""
    return num_edge_indices(rows, cols)


def valid_moves(board: Board) -> List[Move]:
    """All moves the board currently accepts, in edge-index order."""
    return [m for m in iter_moves(board.rows, board.columns) if board.is_move_valid(m)]


def action_mask(board: Board) -> List[bool]:
    """Per edge index, whether the move is valid on the current board."""
    return [board.is_move_valid(m) for m in iter_moves(board.rows, board.columns)]
