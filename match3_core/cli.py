from __future__ import annotations

import argparse
from typing import List, Optional

from .actions import action_space_size, valid_moves
from .board import Board
from .cascade import DEFAULT_MAX_ROUNDS, play_move
from .moves import Move


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Match-3 board simulator')
    parser.add_argument('--rows', type=int, default=8, help='Number of rows')
    parser.add_argument('--cols', type=int, default=8, help='Number of columns')
    parser.add_argument('--types', type=int, default=6, help='Number of distinct tile types')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for tile generation')
    parser.add_argument('--move', type=int, action='append', default=[], metavar='EDGE',
                        help='Apply the move with this edge index (repeatable)')
    parser.add_argument('--at', nargs=3, action='append', default=[], metavar=('ROW', 'COL', 'DIR'),
                        help='Apply the swap of ROW,COL with its neighbor in DIR (repeatable)')
    parser.add_argument('--list-valid', action='store_true', help='Print valid edge indices')
    parser.add_argument('--max-rounds', type=int, default=DEFAULT_MAX_ROUNDS,
                        help='Cascade round cap per move')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        board = Board(args.rows, args.cols, args.types, args.seed)
        moves = [Move.from_edge_index(e, args.rows, args.cols) for e in args.move]
        moves += [
            Move.from_position_and_direction(int(r), int(c), d, args.rows, args.cols)
            for r, c, d in args.at
        ]
    except ValueError as e:
        parser.error(str(e))

    print(f'Board {args.rows}x{args.cols}, {args.types} types, {action_space_size(args.rows, args.cols)} actions')
    print(board.pretty())
    if args.list_valid:
        print('Valid moves:', [m.edge_index for m in valid_moves(board)])

    for move in moves:
        other = move.other_cell()
        if not (0 <= other[0] < args.rows and 0 <= other[1] < args.cols and move.row >= 0 and move.column >= 0):
            parser.error(f'Move {move.edge_index} leaves the board')
        res = play_move(board, move, args.max_rounds)
        print(f'\nMove {move.edge_index} {move.cell()}->{other}:', end=' ')
        if not res.applied:
            print('rejected')
            continue
        status = 'settled' if res.settled else 'unsettled'
        print(f'{res.rounds} rounds, {res.cleared} cleared, {status}')
        print(board.pretty())
        if args.list_valid:
            print('Valid moves:', [m.edge_index for m in valid_moves(board)])
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
