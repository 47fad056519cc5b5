from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple, Union

Coord = Tuple[int, int]


class Direction(Enum):
    """Direction of a swap from the anchor cell. UP decreases the row index, the way gravity pulls."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> 'Direction':
        return _OPPOSITES[self]

    @classmethod
    def parse(cls, text: Union[str, 'Direction']) -> 'Direction':
        """Parses 'up'/'UP'/'u' style names into a Direction."""
        if isinstance(text, Direction):
            return text
        key = str(text).strip().lower()
        for d in cls:
            if key == d.value or key == d.value[0]:
                return d
        raise ValueError(f'Unknown direction: {text!r}')


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


def num_edge_indices(rows: int, cols: int) -> int:
    """Number of internal edges (adjacent cell pairs) in a rows x cols grid."""
    return rows * (cols - 1) + (rows - 1) * cols


@dataclass(frozen=True)
class Move:
    """
    A swap of two adjacent cells.

    Moves are enumerated as the internal edges of the grid. Right moves come
    first, (cols - 1) per row. Down moves follow, cols per row, for rows - 1 rows.
    A canonical move is always anchored so that its direction is RIGHT or DOWN.
    """
    edge_index: int
    row: int
    column: int
    direction: Direction

    @classmethod
    def from_edge_index(cls, edge_index: int, rows: int, cols: int) -> 'Move':
        if edge_index < 0 or edge_index >= num_edge_indices(rows, cols):
            raise ValueError(f'Invalid edge index {edge_index} for a {rows}x{cols} board')
        horizontal = (cols - 1) * rows
        if edge_index < horizontal:
            row, col = divmod(edge_index, cols - 1)
            return cls(edge_index, row, col, Direction.RIGHT)
        row, col = divmod(edge_index - horizontal, cols)
        return cls(edge_index, row, col, Direction.DOWN)

    @classmethod
    def from_position_and_direction(
        cls,
        row: int,
        col: int,
        direction: Union[str, Direction],
        rows: int,
        cols: int,
    ) -> 'Move':
        """Builds the canonical move for swapping (row, col) with its neighbor in `direction`."""
        d = Direction.parse(direction)
        # Normalize: only RIGHT and DOWN are stored
        if d is Direction.LEFT:
            d, col = Direction.RIGHT, col - 1
        elif d is Direction.UP:
            d, row = Direction.DOWN, row - 1

        if d is Direction.RIGHT:
            edge_index = col + row * (cols - 1)
        else:
            edge_index = (cols - 1) * rows + col + row * cols
        return cls(edge_index, row, col, d)

    def cell(self) -> Coord:
        return (self.row, self.column)

    def other_cell(self) -> Coord:
        """The neighbor swapped with the anchor cell."""
        d = self.direction
        if d is Direction.UP:
            return (self.row - 1, self.column)
        if d is Direction.DOWN:
            return (self.row + 1, self.column)
        if d is Direction.LEFT:
            return (self.row, self.column - 1)
        if d is Direction.RIGHT:
            return (self.row, self.column + 1)
        raise RuntimeError(f'Move has unrecognized direction {d!r}')


def iter_moves(rows: int, cols: int) -> Iterator[Move]:
    """Yields every canonical move of a rows x cols grid in edge-index order."""
    for edge_index in range(num_edge_indices(rows, cols)):
        yield Move.from_edge_index(edge_index, rows, cols)
