"""Core 2048 move mechanics shared by the rules server and tests."""

from enum import Enum
from typing import Dict, List, NamedTuple, Sequence, Tuple

import numpy as np

from board import EMPTY, Board, Coordinate

MAX_TILE = int(np.iinfo(np.int64).max)


class Direction(Enum):
    UP = "UP"
    RIGHT = "RIGHT"
    DOWN = "DOWN"
    LEFT = "LEFT"

    @classmethod
    def parse(cls, name: str) -> "Direction":
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown direction: {name}") from None


DIRECTION_NAMES: Sequence[str] = tuple(direction.value for direction in Direction)


class Trace(NamedTuple):
    """One tile event of a shift: a move (one source) or a merge (two sources)."""

    sources: Tuple[Coordinate, ...]
    destination: Coordinate
    value: int

    @property
    def merged(self) -> bool:
        return len(self.sources) > 1

    def to_dict(self) -> Dict:
        return {
            "sources": [list(pos) for pos in self.sources],
            "destination": list(self.destination),
            "value": self.value,
            "merged": self.merged,
        }


def _lines(size: int, direction: Direction) -> List[List[Coordinate]]:
    # Each line is ordered from the edge the tiles slide toward.
    forward = list(range(size))
    backward = forward[::-1]
    if direction is Direction.LEFT:
        return [[(r, c) for c in forward] for r in forward]
    if direction is Direction.RIGHT:
        return [[(r, c) for c in backward] for r in forward]
    if direction is Direction.UP:
        return [[(r, c) for r in forward] for c in forward]
    return [[(r, c) for r in backward] for c in forward]


def _reduce_line(cells: np.ndarray, line: List[Coordinate]) -> Tuple[List[int], List[Trace]]:
    tiles = [(pos, int(cells[pos])) for pos in line if cells[pos] != EMPTY]
    values: List[int] = []
    traces: List[Trace] = []
    idx = 0

    while idx < len(tiles):
        pos, value = tiles[idx]
        destination = line[len(values)]
        if idx + 1 < len(tiles) and tiles[idx + 1][1] == value:
            merged = value + tiles[idx + 1][1]
            if merged > MAX_TILE:
                raise OverflowError(f"Merging {value} at {pos} exceeds the largest storable tile {MAX_TILE}")
            values.append(merged)
            traces.append(Trace((pos, tiles[idx + 1][0]), destination, merged))
            idx += 2
        else:
            values.append(value)
            if pos != destination:
                traces.append(Trace((pos,), destination, value))
            idx += 1

    return values + [EMPTY] * (len(line) - len(values)), traces


def shift(board: Board, direction: Direction) -> List[Trace]:
    """
    Slide and merge every line of ``board`` toward ``direction``.

    Returns the traces of all moved and merged tiles. An empty list means the
    move changed nothing, and the board is left exactly as it was.
    """
    next_cells = board.cells.copy()
    traces: List[Trace] = []
    for line in _lines(board.size, direction):
        values, line_traces = _reduce_line(board.cells, line)
        for pos, value in zip(line, values):
            next_cells[pos] = value
        traces.extend(line_traces)

    if traces:
        board.cells[:, :] = next_cells
        board.move_count += 1
        board.score += sum(trace.value for trace in traces if trace.merged)
    return traces


def is_game_over(board: Board) -> bool:
    cells = board.cells
    if (cells == EMPTY).any():
        return False
    if (cells[:, 1:] == cells[:, :-1]).any():
        return False
    if (cells[1:, :] == cells[:-1, :]).any():
        return False
    return True


def valid_moves(board: Board) -> List[Direction]:
    return [direction for direction in Direction if shift(board.copy(), direction)]


def simulate_move(grid: Sequence[Sequence[int]], direction: Direction) -> Tuple[np.ndarray, List[Trace]]:
    board = Board.from_grid(grid)
    traces = shift(board, direction)
    return board.cells, traces


__all__ = [
    "DIRECTION_NAMES",
    "Direction",
    "Trace",
    "is_game_over",
    "shift",
    "simulate_move",
    "valid_moves",
]
