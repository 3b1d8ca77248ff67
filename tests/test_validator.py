import unittest

from sudoku.core.exceptions import SudokuError, ValidationError
from sudoku.engine.grid import GridConfig
from sudoku.engine.validator import GridValidator


class GridValidatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = GridConfig(box_width=2, box_height=2).build_grid()
        self.validator = GridValidator()

    def test_consistent_grid_passes(self) -> None:
        self.grid.assign((0, 0), "1")
        self.grid.assign((2, 3), "4")
        result = self.validator.validate(self.grid)
        self.assertTrue(result.ok)
        self.assertEqual(result.messages, [])

    def test_duplicates_are_described(self) -> None:
        self.grid.assign((0, 0), "3")
        self.grid.assign((0, 3), "3", check=False)
        result = self.validator.validate(self.grid)
        self.assertFalse(result.ok)
        self.assertEqual(len(result.messages), 1)
        self.assertIn("Region(ROW, 0)", result.messages[0])
        self.assertIn("'3'", result.messages[0])

    def test_stale_possibilities_are_detected(self) -> None:
        self.grid.assign((0, 0), "1")
        # Simulate a missed update: (0,1) should no longer allow "1".
        self.grid.cell(0, 1).possible = self.grid.full_mask
        result = self.validator.validate(self.grid)
        self.assertFalse(result.ok)
        self.assertIn("(0,1)", result.messages[0])

    def test_audit_can_be_skipped(self) -> None:
        self.grid.cell(0, 1).possible = 0
        result = self.validator.validate(self.grid, audit_possibilities=False)
        self.assertTrue(result.ok)

    def test_unfilled_counter_drift_is_detected(self) -> None:
        self.grid.assign((1, 1), "2")
        self.grid._unfilled += 1
        result = self.validator.validate(self.grid, audit_possibilities=False)
        self.assertFalse(result.ok)
        self.assertIn("Unfilled counter", result.messages[0])

    def test_failed_checks_surface_as_sudoku_errors(self) -> None:
        self.grid.assign((0, 0), "3")
        self.grid.assign((3, 0), "3", check=False)
        with self.assertRaises(ValidationError) as ctx:
            self.validator._check_no_duplicates(self.grid)
        self.assertIsInstance(ctx.exception, SudokuError)
        self.assertIn("Region(COLUMN, 0)", str(ctx.exception))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
