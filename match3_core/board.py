from __future__ import annotations

import random
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .moves import Coord, Move

EMPTY_CELL = -1
MIN_RUN = 3

Grid = Tuple[Tuple[int, ...], ...]


def find_matches(values: Sequence[int], rows: int, cols: int) -> Set[Coord]:
    """
    Returns every cell of a row-major grid that belongs to a run of at least
    MIN_RUN equal, non-empty values, horizontally or vertically.
    """
    found: Set[Coord] = set()
    for r in range(rows):
        for c in range(cols):
            v = values[r * cols + c]
            if v == EMPTY_CELL:
                continue

            # Vertical run, towards higher rows
            length = 1
            while r + length < rows and values[(r + length) * cols + c] == v:
                length += 1
            if length >= MIN_RUN:
                found.update((r + k, c) for k in range(length))

            # Horizontal run, towards higher columns
            length = 1
            while c + length < cols and values[r * cols + c + length] == v:
                length += 1
            if length >= MIN_RUN:
                found.update((r, c + k) for k in range(length))
    return found


class Board:
    """
    Mutable match-3 grid of tile types.

    Cells hold a type in [0, num_cell_types) or EMPTY_CELL. Gravity pulls
    tiles towards row 0, new tiles enter at the highest rows.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        num_cell_types: int,
        seed: Optional[int] = None,
        cells: Optional[Iterable[Iterable[int]]] = None,
    ) -> None:
        if rows < 1 or cols < 1:
            raise ValueError(f'Board dimensions must be positive, got {rows}x{cols}')
        if num_cell_types < 1:
            raise ValueError('num_cell_types must be at least 1')
        self._rows = rows
        self._columns = cols
        self._num_cell_types = num_cell_types
        if seed is None:
            # A concrete seed keeps (seed, draws) snapshots replayable
            seed = random.randrange(2 ** 31)
        self._seed = seed
        self._random = random.Random(seed)
        self._draws = 0
        self._matched: List[bool] = [False] * (rows * cols)
        if cells is None:
            self._cells: List[int] = [EMPTY_CELL] * (rows * cols)
            self._init_random()
        else:
            self._cells = self._flatten(cells)
        self.mark_matched_cells()

    @classmethod
    def from_cells(
        cls,
        cells: Iterable[Iterable[int]],
        num_cell_types: int,
        seed: int = 0,
        draws: int = 0,
    ) -> 'Board':
        """
        Builds a board from explicit values, given as a list of rows (row 0 first).
        The generator is advanced by `draws` draws so a snapshot taken with
        (cells, seed, draws) continues exactly like the board it came from.
        """
        grid = [list(row) for row in cells]
        if not grid or not grid[0]:
            raise ValueError('cells must contain at least one row and one column')
        if draws < 0:
            raise ValueError('draws must be non-negative')
        board = cls(len(grid), len(grid[0]), num_cell_types, seed, cells=grid)
        for _ in range(draws):
            board._next_type()
        return board

    def _flatten(self, cells: Iterable[Iterable[int]]) -> List[int]:
        flat: List[int] = []
        grid = [list(row) for row in cells]
        if len(grid) != self._rows or any(len(row) != self._columns for row in grid):
            raise ValueError(f'cells must be a {self._rows}x{self._columns} grid')
        for row in grid:
            for v in row:
                v = int(v)
                if v != EMPTY_CELL and not 0 <= v < self._num_cell_types:
                    raise ValueError(f'Cell value {v} outside [0, {self._num_cell_types})')
                flat.append(v)
        return flat

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def num_cell_types(self) -> int:
        return self._num_cell_types

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def draws(self) -> int:
        """Number of random tiles generated so far."""
        return self._draws

    @property
    def cells(self) -> Grid:
        """Snapshot of tile values, one tuple per row."""
        return self._snapshot(self._cells)

    @property
    def matched(self) -> Tuple[Tuple[bool, ...], ...]:
        """Snapshot of the match flags from the last scan, one tuple per row."""
        return self._snapshot(self._matched)

    def _snapshot(self, flat):
        cols = self._columns
        return tuple(tuple(flat[r * cols:(r + 1) * cols]) for r in range(self._rows))

    def index(self, r: int, c: int) -> int:
        return r * self._columns + c

    def at(self, r: int, c: int) -> int:
        return self._cells[self.index(r, c)]

    def is_matched(self, r: int, c: int) -> bool:
        return self._matched[self.index(r, c)]

    def coords(self) -> Iterable[Coord]:
        for r in range(self._rows):
            for c in range(self._columns):
                yield (r, c)

    def count_matched(self) -> int:
        return sum(self._matched)

    def count_empty(self) -> int:
        return self._cells.count(EMPTY_CELL)

    def is_move_valid(self, move: Move) -> bool:
        """
        Rejects swaps of two equal values, which can never create a new run.
        This is a simplification and may be too strict for some games.
        """
        other_r, other_c = move.other_cell()
        return self.at(move.row, move.column) != self.at(other_r, other_c)

    def make_move(self, move: Move) -> bool:
        """
        Swaps the two cells of `move` and reports whether the swap created a new run.
        A swap that creates no run through either swapped cell is reverted, even
        if runs already on the board are still unresolved.
        """
        a = self.index(move.row, move.column)
        b = self.index(*move.other_cell())
        self._swap(a, b)
        self.mark_matched_cells()
        if self._cells[a] != self._cells[b] and (self._matched[a] or self._matched[b]):
            return True
        self._swap(a, b)
        self.mark_matched_cells()
        return False

    def would_match(self, move: Move) -> bool:
        """Checks whether swapping `move` would create a new run, without changing the board."""
        values = list(self._cells)
        first = move.cell()
        second = move.other_cell()
        a = self.index(*first)
        b = self.index(*second)
        if values[a] == values[b]:
            return False
        values[a], values[b] = values[b], values[a]
        found = find_matches(values, self._rows, self._columns)
        return first in found or second in found

    def _swap(self, a: int, b: int) -> None:
        self._cells[a], self._cells[b] = self._cells[b], self._cells[a]

    def mark_matched_cells(self, override_cells: Optional[Iterable[Iterable[int]]] = None) -> bool:
        """
        Recomputes the match flags and returns whether any run was found.
        If `override_cells` is given, those values are scanned instead of the board's own.
        """
        values = self._cells if override_cells is None else self._flatten(override_cells)
        self._clear_marked()
        found = find_matches(values, self._rows, self._columns)
        for r, c in found:
            self._matched[self.index(r, c)] = True
        return bool(found)

    def clear_matched_cells(self) -> bool:
        """Empties every matched cell, then resets the match flags."""
        cleared = False
        for i, flag in enumerate(self._matched):
            if flag:
                cleared = True
                self._cells[i] = EMPTY_CELL
        self._clear_marked()
        return cleared

    def drop_cells(self) -> bool:
        """Compacts each column towards row 0, keeping tile order. Returns whether anything moved."""
        changed = False
        cols = self._columns
        for c in range(cols):
            column = [self._cells[r * cols + c] for r in range(self._rows)]
            tiles = [v for v in column if v != EMPTY_CELL]
            compacted = tiles + [EMPTY_CELL] * (self._rows - len(tiles))
            if compacted != column:
                changed = True
                for r, v in enumerate(compacted):
                    self._cells[r * cols + c] = v
        return changed

    def fill_from_above(self) -> bool:
        """Replaces every empty cell with a new random tile."""
        filled = False
        for i, v in enumerate(self._cells):
            if v == EMPTY_CELL:
                filled = True
                self._cells[i] = self._next_type()
        return filled

    def _next_type(self) -> int:
        self._draws += 1
        return self._random.randrange(self._num_cell_types)

    def _init_random(self) -> None:
        for i in range(len(self._cells)):
            self._cells[i] = self._next_type()

    def _clear_marked(self) -> None:
        for i in range(len(self._matched)):
            self._matched[i] = False

    def pretty(self, show_matched: bool = True) -> str:
        """Renders the board with the highest row first, '.' for empty and '*' after matched cells."""
        lines: List[str] = []
        width = len(str(max(self._num_cell_types - 1, 0)))
        for r in reversed(range(self._rows)):
            row: List[str] = []
            for c in range(self._columns):
                v = self.at(r, c)
                text = '.' if v == EMPTY_CELL else str(v)
                mark = '*' if show_matched and self.is_matched(r, c) else ' '
                row.append(text.rjust(width) + mark)
            lines.append(' '.join(row).rstrip())
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return (
            f'Board(rows={self._rows}, cols={self._columns}, '
            f'num_cell_types={self._num_cell_types}, seed={self._seed!r})'
        )
