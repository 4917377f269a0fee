"""Tests for the Board grid model."""

import unittest

import numpy as np

from board import Board, InvalidConfig, OutOfBounds


class BoardConstructionTests(unittest.TestCase):
    def test_new_board_is_empty(self) -> None:
        board = Board(4)
        self.assertEqual(board.size, 4)
        self.assertEqual(board.move_count, 0)
        self.assertEqual(board.score, 0)
        self.assertEqual(len(board.empty_cells()), 16)

    def test_size_below_minimum_rejected(self) -> None:
        with self.assertRaises(InvalidConfig):
            Board(1)
        with self.assertRaises(InvalidConfig):
            Board(0)

    def test_initial_tiles_fill_row_major(self) -> None:
        board = Board(2, [1, 2, 0, 4])
        self.assertEqual(board.to_grid(), [[1, 2], [0, 4]])

    def test_initial_tiles_must_match_size(self) -> None:
        with self.assertRaises(InvalidConfig):
            Board(2, [1, 2, 3])

    def test_initial_tiles_must_be_non_negative(self) -> None:
        with self.assertRaises(InvalidConfig):
            Board(2, [1, -2, 0, 0])

    def test_from_grid_rejects_ragged_rows(self) -> None:
        with self.assertRaises(InvalidConfig):
            Board.from_grid([[2, 0, 0], [0, 2]])

    def test_fractional_tiles_rejected(self) -> None:
        with self.assertRaises(InvalidConfig):
            Board(2, [2.5, 2.0, 0, 0])

    def test_integral_float_tiles_accepted(self) -> None:
        board = Board(2, [2.0, 4.0, 0, 0])
        self.assertEqual(board.to_grid(), [[2, 4], [0, 0]])

    def test_non_numeric_tiles_rejected(self) -> None:
        with self.assertRaises(InvalidConfig):
            Board(2, ["2", 0, 0, 0])

    def test_tiles_beyond_int64_rejected(self) -> None:
        for huge in (2**63, 2**70):
            with self.assertRaises(InvalidConfig):
                Board(2, [huge, 0, 0, 0])

    def test_negative_score_rejected(self) -> None:
        with self.assertRaises(InvalidConfig):
            Board(2, score=-100)

    def test_invalid_config_is_a_value_error(self) -> None:
        self.assertTrue(issubclass(InvalidConfig, ValueError))


class BoardCellAccessTests(unittest.TestCase):
    def setUp(self) -> None:
        self.board = Board(3)

    def test_set_then_get(self) -> None:
        self.board.set(1, 2, 8)
        self.assertEqual(self.board.get(1, 2), 8)
        self.assertEqual(self.board.get(2, 1), 0)

    def test_get_out_of_bounds(self) -> None:
        for row, col in [(-1, 0), (0, 3), (3, 0), (0, -1)]:
            with self.assertRaises(OutOfBounds):
                self.board.get(row, col)

    def test_set_out_of_bounds(self) -> None:
        with self.assertRaises(OutOfBounds):
            self.board.set(3, 3, 2)

    def test_set_negative_value_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.board.set(0, 0, -2)


class BoardGenerateTests(unittest.TestCase):
    def test_generate_one_tile_in_range(self) -> None:
        """Exactly one empty cell becomes occupied, occupied cells are untouched."""

        board = Board(4, [2, 4, 0, 0] + [0] * 12, seed=7)
        before = board.cells.copy()

        spawned = board.generate(1, range(1, 3))

        self.assertEqual(len(spawned), 1)
        row, col = spawned[0]
        self.assertEqual(before[row, col], 0)
        self.assertIn(board.get(row, col), {1, 2})
        changed = np.argwhere(board.cells != before)
        self.assertEqual([tuple(pos) for pos in changed], [(row, col)])

    def test_generate_fills_distinct_cells(self) -> None:
        board = Board(3, seed=1)
        spawned = board.generate(5, range(2, 3))
        self.assertEqual(len(set(spawned)), 5)
        self.assertEqual(len(board.empty_cells()), 4)
        self.assertTrue(all(board.get(r, c) == 2 for r, c in spawned))

    def test_generate_stops_when_board_fills(self) -> None:
        board = Board(2, [2, 0, 4, 8], seed=3)
        spawned = board.generate(3, range(1, 3))
        self.assertEqual(spawned, [(0, 1)])
        self.assertEqual(board.empty_cells(), [])
        self.assertEqual(board.generate(1, range(1, 3)), [])

    def test_generate_does_not_touch_counters(self) -> None:
        board = Board(4, seed=0, score=12)
        board.generate(2, range(1, 3))
        self.assertEqual(board.move_count, 0)
        self.assertEqual(board.score, 12)

    def test_injected_generator_is_repeatable(self) -> None:
        first = Board(4)
        second = Board(4)
        first.generate(3, range(1, 3), rng=np.random.default_rng(42))
        second.generate(3, range(1, 3), rng=np.random.default_rng(42))
        self.assertEqual(first, second)

    def test_empty_range_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Board(2).generate(1, range(3, 3))


class BoardRenderTests(unittest.TestCase):
    def test_render_lists_every_cell(self) -> None:
        board = Board(2, [2, 0, 0, 16])
        self.assertEqual(board.render(), "Situation:\n    2    0\n    0   16\n")
        self.assertEqual(str(board), board.render())

    def test_render_does_not_mutate(self) -> None:
        board = Board(2, [2, 0, 0, 16])
        board.render()
        self.assertEqual(board.to_grid(), [[2, 0], [0, 16]])

    def test_copy_is_independent(self) -> None:
        board = Board(2, [2, 0, 0, 16], score=4)
        clone = board.copy()
        clone.set(0, 1, 8)
        self.assertEqual(board.get(0, 1), 0)
        self.assertEqual(clone.score, 4)
        self.assertEqual(board.max_tile(), 16)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
