from __future__ import annotations

import logging
from dataclasses import dataclass

from .board import Board
from .moves import Move

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 100


@dataclass(frozen=True)
class CascadeResult:
    """Outcome of resolving a board after a move."""
    applied: bool = True
    matched: bool = False
    rounds: int = 0      # clear/drop/fill rounds performed
    cleared: int = 0     # total tiles removed over all rounds
    settled: bool = True  # False if max_rounds was hit with matches still on the board


def resolve_cascade(board: Board, max_rounds: int = DEFAULT_MAX_ROUNDS) -> CascadeResult:
    """
    Repeats mark -> clear -> drop -> fill until the board has no run left.

    The loop belongs to the driver; the board only provides the single steps.
    A board with a single tile type never settles, hence the round cap.
    """
    if max_rounds < 1:
        raise ValueError('max_rounds must be at least 1')
    rounds = 0
    cleared = 0
    matched = False
    while board.mark_matched_cells():
        if rounds >= max_rounds:
            logger.warning('Cascade stopped after %d rounds with matches remaining', rounds)
            return CascadeResult(matched=matched, rounds=rounds, cleared=cleared, settled=False)
        matched = True
        cleared += board.count_matched()
        board.clear_matched_cells()
        board.drop_cells()
        board.fill_from_above()
        rounds += 1
    logger.debug('Cascade settled after %d rounds, %d tiles cleared', rounds, cleared)
    return CascadeResult(matched=matched, rounds=rounds, cleared=cleared)


def play_move(board: Board, move: Move, max_rounds: int = DEFAULT_MAX_ROUNDS) -> CascadeResult:
    """Validates and applies a move, then resolves the resulting cascade."""
    if not board.is_move_valid(move):
        return CascadeResult(applied=False)
    if not board.make_move(move):
        return CascadeResult(applied=False)
    return resolve_cascade(board, max_rounds)
