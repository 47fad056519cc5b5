import json
import unittest

from app import app as flask_app
from app import board_from_json, board_to_json
from game import EMPTY_CELL, Board

NEAR_MATCH = [
    [0, 1, 0],
    [2, 0, 2],
    [1, 2, 1],
]


class TestFlaskAPI(unittest.TestCase):
    def setUp(self):
        self.client = flask_app.test_client()

    def _post(self, path, payload):
        return self.client.post(path, data=json.dumps(payload), content_type="application/json")

    def _near_match_json(self, seed=4):
        return board_to_json(Board.from_cells(NEAR_MATCH, 3, seed=seed))

    def test_given_index_when_requested_then_lists_endpoints(self):
        r = self.client.get("/")
        self.assertEqual(r.status_code, 200)
        data = r.get_json()
        self.assertTrue(data["ok"])
        self.assertIn("/api/move", data["endpoints"])

    def test_given_new_game_when_posted_then_returns_board_and_action_space(self):
        payload = {"rows": 4, "columns": 5, "numCellTypes": 3, "seed": 123}
        r = self._post("/api/new", payload)
        self.assertEqual(r.status_code, 200)
        data = r.get_json()
        self.assertTrue(data["ok"])
        board = data["board"]
        self.assertEqual((board["rows"], board["columns"], board["numCellTypes"]), (4, 5, 3))
        self.assertEqual(board["draws"], 20)
        self.assertEqual(len(board["cells"]), 4)
        self.assertEqual(data["numActions"], 31)
        self.assertEqual(len(data["matched"]), 4)
        expected = Board(4, 5, 3, 123)
        self.assertEqual(board["cells"], [list(row) for row in expected.cells])

        again = self._post("/api/new", payload).get_json()
        self.assertEqual(again["board"], board)

    def test_given_new_game_without_sizes_when_posted_then_defaults_used(self):
        r = self._post("/api/new", {"seed": 1})
        data = r.get_json()
        self.assertEqual(r.status_code, 200)
        self.assertEqual(data["numActions"], 2 * data["board"]["rows"] * data["board"]["columns"]
                         - data["board"]["rows"] - data["board"]["columns"])

    def test_given_board_when_querying_legal_then_mask_and_edges(self):
        r = self._post("/api/legal", {"board": self._near_match_json()})
        self.assertEqual(r.status_code, 200)
        data = r.get_json()
        self.assertEqual(len(data["actionMask"]), 12)
        self.assertEqual(data["validMoves"], [i for i, ok in enumerate(data["actionMask"]) if ok])
        self.assertIn(7, data["validMoves"])

    def test_given_matching_edge_when_moving_then_cascade_reported(self):
        r = self._post("/api/move", {"board": self._near_match_json(), "edge": 7})
        self.assertEqual(r.status_code, 200)
        data = r.get_json()
        self.assertTrue(data["ok"])
        self.assertEqual(data["move"], {"edge": 7, "row": 0, "column": 1, "direction": "down"})
        self.assertTrue(data["cascade"]["matched"])
        self.assertGreaterEqual(data["cascade"]["cleared"], 3)
        self.assertGreaterEqual(data["board"]["draws"], 3)
        cells = [v for row in data["board"]["cells"] for v in row]
        self.assertNotIn(EMPTY_CELL, cells)

    def test_given_position_and_direction_when_moving_then_normalized_move(self):
        payload = {"board": self._near_match_json(), "row": 1, "column": 1, "direction": "up"}
        r = self._post("/api/move", payload)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.get_json()["move"]["edge"], 7)

    def test_given_non_matching_edge_when_moving_then_400_with_valid_moves(self):
        r = self._post("/api/move", {"board": self._near_match_json(), "edge": 0})
        self.assertEqual(r.status_code, 400)
        data = r.get_json()
        self.assertFalse(data["ok"])
        self.assertEqual(data["error"], "Illegal move")
        self.assertIn(7, data["validMoves"])

    def test_given_bad_requests_when_moving_then_400(self):
        board = self._near_match_json()
        for payload in [
            {"board": board, "edge": 99},
            {"board": board},
            {"board": board, "row": 0, "column": 0, "direction": "up"},
            {"board": board, "row": 0, "column": 0, "direction": "sideways"},
            {"edge": 0},
        ]:
            r = self._post("/api/move", payload)
            self.assertEqual(r.status_code, 400, payload)
            self.assertFalse(r.get_json()["ok"])

    def test_given_board_with_gaps_when_stepping_then_single_primitive_applied(self):
        board = Board.from_cells([[EMPTY_CELL, 1], [2, EMPTY_CELL]], 3, seed=2)
        r = self._post("/api/step", {"board": board_to_json(board), "op": "drop"})
        self.assertEqual(r.status_code, 200)
        data = r.get_json()
        self.assertTrue(data["changed"])
        self.assertEqual(data["board"]["cells"], [[2, 1], [EMPTY_CELL, EMPTY_CELL]])

        r2 = self._post("/api/step", {"board": data["board"], "op": "fill"})
        data2 = r2.get_json()
        self.assertTrue(data2["changed"])
        self.assertEqual(data2["board"]["draws"], 2)

    def test_given_matched_board_when_clear_step_then_run_emptied(self):
        board = Board.from_cells([[1, 1, 1], [0, 2, 0]], 3)
        r = self._post("/api/step", {"board": board_to_json(board), "op": "clear"})
        data = r.get_json()
        self.assertTrue(data["changed"])
        self.assertEqual(data["board"]["cells"][0], [EMPTY_CELL] * 3)
        self.assertEqual(data["matched"], [[False] * 3, [False] * 3])

    def test_given_unknown_op_when_stepping_then_400(self):
        r = self._post("/api/step", {"board": self._near_match_json(), "op": "explode"})
        self.assertEqual(r.status_code, 400)
        r2 = self._post("/api/step", {"board": self._near_match_json(), "op": ["fill"]})
        self.assertEqual(r2.status_code, 400)

    def test_given_unseeded_new_game_when_filling_snapshot_twice_then_same_cells(self):
        r = self._post("/api/new", {"rows": 3, "columns": 3, "numCellTypes": 4})
        self.assertEqual(r.status_code, 200)
        snapshot = r.get_json()["board"]
        self.assertIsInstance(snapshot["seed"], int)
        snapshot["cells"][2] = [EMPTY_CELL] * 3
        fills = []
        for _ in range(3):
            data = self._post("/api/step", {"board": snapshot, "op": "fill"}).get_json()
            self.assertTrue(data["changed"])
            fills.append(data["board"]["cells"])
        self.assertEqual(fills[0], fills[1])
        self.assertEqual(fills[1], fills[2])

    def test_given_snapshot_with_null_seed_when_filling_twice_then_same_cells(self):
        snapshot = {"numCellTypes": 3, "seed": None, "draws": 0, "cells": [[EMPTY_CELL, 0], [EMPTY_CELL, 1]]}
        first = self._post("/api/step", {"board": snapshot, "op": "fill"}).get_json()
        second = self._post("/api/step", {"board": snapshot, "op": "fill"}).get_json()
        self.assertEqual(first["board"]["seed"], 0)
        self.assertEqual(first["board"]["cells"], second["board"]["cells"])

    def test_given_malformed_payloads_when_posted_then_400_not_500(self):
        board = self._near_match_json()
        cases = [
            ("/api/new", {"rows": None}),
            ("/api/new", [1, 2]),
            ("/api/new", {"seed": [3]}),
            ("/api/move", {"board": board, "edge": None}),
            ("/api/move", {"board": board, "row": None, "column": 1, "direction": "up"}),
            ("/api/legal", {"board": {"cells": 5, "numCellTypes": 3}}),
            ("/api/legal", {"board": dict(board, rows=None)}),
            ("/api/step", "fill"),
        ]
        for path, payload in cases:
            r = self._post(path, payload)
            self.assertEqual(r.status_code, 400, (path, payload))
            self.assertFalse(r.get_json()["ok"])

    def test_given_board_when_roundtrip_json_then_equal(self):
        board = Board(3, 4, 5, 77)
        back = board_from_json(board_to_json(board))
        self.assertEqual(back.cells, board.cells)
        self.assertEqual(back.draws, board.draws)
        self.assertEqual(back.seed, 77)
        with self.assertRaises(ValueError):
            board_from_json({"rows": 2, "cells": [[0, 1]], "numCellTypes": 2})
        with self.assertRaises(ValueError):
            board_from_json({"cells": [[0, 1]]})


if __name__ == "__main__":
    unittest.main(verbosity=2)
