from __future__ import annotations

import logging
import os
from typing import Any, Dict, List

from flask import Flask, jsonify, request

from game import (
    Board,
    Move,
    DEFAULT_MAX_ROUNDS,
    action_mask,
    action_space_size,
    play_move,
    valid_moves,
)

logger = logging.getLogger(__name__)

DEFAULT_ROWS = int(os.getenv("MATCH3_ROWS", "8"))
DEFAULT_COLS = int(os.getenv("MATCH3_COLS", "8"))
DEFAULT_CELL_TYPES = int(os.getenv("MATCH3_CELL_TYPES", "6"))
MAX_ROUNDS = int(os.getenv("MATCH3_MAX_ROUNDS", str(DEFAULT_MAX_ROUNDS)))

app = Flask(__name__)


class BadRequest(ValueError):
    pass


def _json_body() -> Dict[str, Any]:
    body = request.get_json(force=True, silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise BadRequest("request body must be a JSON object")
    return body


def _int_field(obj: Dict[str, Any], key: str, default: Any = None) -> int:
    try:
        return int(obj.get(key, default))
    except (TypeError, ValueError) as e:
        raise BadRequest(f"{key} must be an integer") from e


def board_to_json(b: Board) -> Dict[str, Any]:
    return {
        "rows": b.rows,
        "columns": b.columns,
        "numCellTypes": b.num_cell_types,
        "seed": b.seed,
        "draws": b.draws,
        "cells": [list(row) for row in b.cells],
    }


def board_from_json(obj: Dict[str, Any]) -> Board:
    if not isinstance(obj, dict):
        raise BadRequest("board required")
    try:
        cells = [[int(v) for v in row] for row in obj["cells"]]
        seed = obj.get("seed")
        board = Board.from_cells(
            cells,
            num_cell_types=int(obj["numCellTypes"]),
            seed=0 if seed is None else int(seed),
            draws=int(obj.get("draws", 0)),
        )
    except (KeyError, TypeError) as e:
        raise BadRequest(f"bad board: {e}") from e
    if "rows" in obj and _int_field(obj, "rows") != board.rows:
        raise BadRequest("rows does not match cells")
    if "columns" in obj and _int_field(obj, "columns") != board.columns:
        raise BadRequest("columns does not match cells")
    return board


def _matched_json(b: Board) -> List[List[bool]]:
    return [list(row) for row in b.matched]


def _move_from_json(body: Dict[str, Any], b: Board) -> Move:
    if "edge" in body:
        return Move.from_edge_index(_int_field(body, "edge"), b.rows, b.columns)
    try:
        row, col, direction = int(body["row"]), int(body["column"]), body["direction"]
    except (KeyError, TypeError) as e:
        raise BadRequest("move requires 'edge' or 'row', 'column' and 'direction'") from e
    move = Move.from_position_and_direction(row, col, direction, b.rows, b.columns)
    other_r, other_c = move.other_cell()
    if move.row < 0 or move.column < 0 or other_r >= b.rows or other_c >= b.columns:
        raise BadRequest("move leaves the board")
    return move


def _valid_edges(b: Board) -> List[int]:
    return [m.edge_index for m in valid_moves(b)]


@app.errorhandler(ValueError)
def handle_value_error(e: ValueError) -> Any:
    logger.info("Rejected %s %s: %s", request.method, request.path, e)
    return jsonify({"ok": False, "error": str(e)}), 400


@app.get("/")
def index() -> Any:
    return jsonify({
        "ok": True,
        "name": "match3",
        "endpoints": ["/api/new", "/api/legal", "/api/move", "/api/step"],
    })


@app.post("/api/new")
def api_new() -> Any:
    body = _json_body()
    rows = _int_field(body, "rows", DEFAULT_ROWS)
    cols = _int_field(body, "columns", DEFAULT_COLS)
    types = _int_field(body, "numCellTypes", DEFAULT_CELL_TYPES)
    # Without a seed the board picks one and reports it in the snapshot
    seed = None if body.get("seed") is None else _int_field(body, "seed")
    board = Board(rows, cols, types, seed)
    return jsonify({
        "ok": True,
        "board": board_to_json(board),
        "matched": _matched_json(board),
        "numActions": action_space_size(rows, cols),
        "validMoves": _valid_edges(board),
    })


@app.post("/api/legal")
def api_legal() -> Any:
    body = _json_body()
    board = board_from_json(body.get("board"))
    return jsonify({
        "ok": True,
        "validMoves": _valid_edges(board),
        "actionMask": action_mask(board),
    })


@app.post("/api/move")
def api_move() -> Any:
    body = _json_body()
    board = board_from_json(body.get("board"))
    move = _move_from_json(body, board)
    res = play_move(board, move, MAX_ROUNDS)
    if not res.applied:
        return jsonify({"ok": False, "error": "Illegal move", "validMoves": _valid_edges(board)}), 400
    return jsonify({
        "ok": True,
        "move": {"edge": move.edge_index, "row": move.row, "column": move.column,
                 "direction": move.direction.value},
        "board": board_to_json(board),
        "cascade": {
            "matched": res.matched,
            "rounds": res.rounds,
            "cleared": res.cleared,
            "settled": res.settled,
        },
        "validMoves": _valid_edges(board),
    })


_STEPS = {
    "mark": Board.mark_matched_cells,
    "clear": Board.clear_matched_cells,
    "drop": Board.drop_cells,
    "fill": Board.fill_from_above,
}


@app.post("/api/step")
def api_step() -> Any:
    body = _json_body()
    op = body.get("op")
    if not isinstance(op, str) or op not in _STEPS:
        raise BadRequest(f"op must be one of {sorted(_STEPS)}")
    # Match flags are not part of the snapshot; restoring a board rescans it
    board = board_from_json(body.get("board"))
    changed = _STEPS[op](board)
    return jsonify({
        "ok": True,
        "changed": bool(changed),
        "board": board_to_json(board),
        "matched": _matched_json(board),
    })


# Entrypoint for "python app.py"
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
