"""Grid state for the sliding-tile puzzle: cells, move counter, score and spawning."""

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

Coordinate = Tuple[int, int]

EMPTY = 0
MIN_SIZE = 2
DEFAULT_SIZE = 4
DEFAULT_SPAWN_RANGE = range(1, 3)


class InvalidConfig(ValueError):
    """Raised when a board cannot be built from the given size or tiles."""


class OutOfBounds(IndexError):
    """Raised when a coordinate falls outside the grid."""


def _integer_tiles(tiles: Iterable[int]) -> np.ndarray:
    # Integral floats such as JSON's 2.0 are accepted, anything else that
    # would change when stored as int64 is not.
    try:
        raw = np.array(list(tiles))
    except (OverflowError, ValueError) as exc:
        raise InvalidConfig(f"Tile values must be integers: {exc}") from exc
    if raw.dtype.kind not in "iuf":
        raise InvalidConfig("Tile values must be integers within the int64 range")
    with np.errstate(invalid="ignore"):
        values = raw.astype(np.int64)
    if not np.array_equal(values, raw):
        raise InvalidConfig("Tile values must be integers within the int64 range")
    return values


class Board:
    """A square grid of tiles. ``0`` marks an empty cell.

    The board owns a ``numpy.random.Generator`` used by :meth:`generate`
    unless the caller passes its own, so a seed makes spawning repeatable.
    """

    def __init__(
        self,
        size: int = DEFAULT_SIZE,
        tiles: Optional[Sequence[int]] = None,
        seed: Optional[int] = None,
        score: int = 0,
    ) -> None:
        if size < MIN_SIZE:
            raise InvalidConfig(f"Board size must be at least {MIN_SIZE}, received {size}")

        if score < 0:
            raise InvalidConfig(f"Score must be non-negative, received {score}")

        self.size = size
        self.move_count = 0
        self.score = score
        self.rng = np.random.default_rng(seed)

        if tiles is None:
            self.cells = np.zeros((size, size), dtype=np.int64)
        else:
            values = _integer_tiles(tiles)
            if values.shape != (size * size,):
                raise InvalidConfig(
                    f"Expected {size * size} tiles for a {size}x{size} board, received {values.size}"
                )
            if (values < 0).any():
                raise InvalidConfig("Tile values must be non-negative")
            self.cells = values.reshape(size, size)

    @classmethod
    def from_grid(cls, grid: Sequence[Sequence[int]], **kwargs) -> "Board":
        rows = [list(row) for row in grid]
        size = len(rows)
        if any(len(row) != size for row in rows):
            raise InvalidConfig(f"Expected a square grid, received {size} rows of lengths {[len(r) for r in rows]}")
        return cls(size, [value for row in rows for value in row], **kwargs)

    def _check(self, row: int, col: int) -> None:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise OutOfBounds(f"({row}, {col}) is outside the {self.size}x{self.size} board")

    def get(self, row: int, col: int) -> int:
        self._check(row, col)
        return int(self.cells[row, col])

    def set(self, row: int, col: int, value: int) -> None:
        self._check(row, col)
        if value < 0:
            raise ValueError(f"Tile value must be non-negative, received {value}")
        self.cells[row, col] = value

    def empty_cells(self) -> List[Coordinate]:
        rows, cols = np.nonzero(self.cells == EMPTY)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def generate(
        self,
        count: int,
        value_range: range = DEFAULT_SPAWN_RANGE,
        rng: Optional[np.random.Generator] = None,
    ) -> List[Coordinate]:
        """
        Spawn up to ``count`` tiles on distinct empty cells.

        Each value is drawn uniformly from ``value_range`` (half-open, so
        ``range(1, 3)`` yields 1 or 2). When fewer than ``count`` cells are
        empty, every empty cell is filled. Returns the filled coordinates.
        """
        if len(value_range) == 0:
            raise ValueError(f"Spawn range {value_range!r} is empty")

        rng = self.rng if rng is None else rng
        empty = self.empty_cells()
        picks = min(count, len(empty))
        if picks <= 0:
            return []

        chosen = rng.choice(len(empty), size=picks, replace=False)
        spawned: List[Coordinate] = []
        for idx in chosen:
            row, col = empty[int(idx)]
            self.cells[row, col] = value_range[int(rng.integers(len(value_range)))]
            spawned.append((row, col))
        return spawned

    def max_tile(self) -> int:
        return int(self.cells.max())

    def to_grid(self) -> List[List[int]]:
        return self.cells.tolist()

    def copy(self) -> "Board":
        clone = Board(self.size, self.cells.flatten().tolist(), score=self.score)
        clone.move_count = self.move_count
        return clone

    def render(self) -> str:
        lines: Iterable[str] = ("".join(f"{value:5}" for value in row) for row in self.cells.tolist())
        return "Situation:\n" + "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Board(size={self.size}, score={self.score}, move_count={self.move_count}, grid={self.to_grid()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and np.array_equal(self.cells, other.cells)


__all__ = [
    "Board",
    "Coordinate",
    "DEFAULT_SIZE",
    "DEFAULT_SPAWN_RANGE",
    "EMPTY",
    "InvalidConfig",
    "MIN_SIZE",
    "OutOfBounds",
]
