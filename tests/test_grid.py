import unittest

from sudoku.core.constants import RegionKind
from sudoku.core.exceptions import ConfigurationError, InvariantViolation, UnknownSymbolError
from sudoku.core.models import Coord
from sudoku.data.alphabet import Alphabet, generate_numeric_range
from sudoku.engine.geometry import Geometry
from sudoku.engine.grid import GridConfig, SudokuGrid


SOLVED_4X4 = ["1234", "3412", "2143", "4321"]


def empty_grid(box_width: int = 3, box_height: int = 3, **kwargs) -> SudokuGrid:
    return GridConfig(box_width=box_width, box_height=box_height, **kwargs).build_grid()


def fill_rows(grid: SudokuGrid, rows, check: bool = True) -> None:
    for r, row in enumerate(rows):
        for c, symbol in enumerate(row):
            if symbol != ".":
                grid.assign((r, c), symbol, check=check)


def possibility_state(grid: SudokuGrid):
    masks = [cell.possible for cell in grid if cell.value is None]
    filled = [region.filled for region in grid.all_regions]
    return masks, filled, grid.num_unfilled


class GridConstructionTests(unittest.TestCase):
    def test_alphabet_size_must_match_box(self) -> None:
        with self.assertRaises(ConfigurationError):
            SudokuGrid(Geometry(3, 2), Alphabet(generate_numeric_range(1, 9)))

    def test_regions_are_grouped_by_kind(self) -> None:
        grid = empty_grid(3, 2)
        self.assertEqual(len(grid.rows), 6)
        self.assertEqual(len(grid.columns), 6)
        self.assertEqual(len(grid.boxes), 6)
        self.assertEqual(grid.other_regions, [])
        self.assertEqual(grid.num_unfilled, 36)
        box = grid.boxes[3]
        self.assertEqual(box.kind, RegionKind.BOX)
        self.assertEqual(box.coords[0], Coord(2, 3))
        self.assertEqual(box.coords[-1], Coord(3, 5))

    def test_regions_containing_includes_diagonals(self) -> None:
        grid = empty_grid(diagonals=True)
        self.assertEqual(len(grid.regions_containing((4, 4))), 5)
        self.assertEqual(len(grid.regions_containing((0, 0))), 4)
        self.assertEqual(len(grid.regions_containing((0, 8))), 4)
        self.assertEqual(len(grid.regions_containing((0, 1))), 3)

    def test_membership_rules_agree_with_enumerated_cells(self) -> None:
        grid = empty_grid(3, 2, diagonals=True)
        self.assertEqual(len(grid.other_regions), 2)
        grid.add_region([(0, 5), (1, 1), (2, 3), (3, 0), (4, 4), (5, 2)], name="scatter")
        for region in grid.all_regions:
            members = set(region.coords)
            self.assertEqual(len(members), 6)
            for coord in grid.geometry.iter_coords():
                self.assertEqual(region.contains(coord), coord in members, (region, coord))

    def test_anti_diagonal_membership(self) -> None:
        grid = empty_grid(3, 2, diagonals=True)
        anti = grid.other_regions[1]
        self.assertEqual(anti.coords, [Coord(i, 5 - i) for i in range(6)])
        self.assertTrue(anti.contains(Coord(2, 3)))
        self.assertFalse(anti.contains(Coord(3, 3)))

    def test_custom_region_must_be_well_formed(self) -> None:
        grid = empty_grid(2, 2)
        with self.assertRaises(ConfigurationError):
            grid.add_region([(0, 0), (1, 1), (2, 2)])
        with self.assertRaises(ConfigurationError):
            grid.add_region([(0, 0), (0, 0), (1, 1), (2, 2)])
        with self.assertRaises(ConfigurationError):
            grid.add_region([(0, 0), (1, 1), (2, 2), (4, 4)])


class GridAssignmentTests(unittest.TestCase):
    def test_assignment_strikes_symbol_from_containing_regions(self) -> None:
        grid = empty_grid()
        grid.assign((0, 0), "5")
        self.assertEqual(grid.num_unfilled, 80)
        self.assertEqual(grid.symbol_at((0, 0)), "5")
        self.assertFalse(grid.is_possible((0, 8), "5"))
        self.assertFalse(grid.is_possible((8, 0), "5"))
        self.assertFalse(grid.is_possible((2, 2), "5"))
        self.assertTrue(grid.is_possible((4, 4), "5"))
        self.assertEqual(grid.cell(0, 0).possible, 0)
        self.assertTrue(grid.rows[0].is_filled_in(grid.alphabet.ordinal("5")))
        self.assertEqual(grid.rows[0].num_unfilled(), 8)

    def test_assigning_impossible_symbol_is_trapped(self) -> None:
        grid = empty_grid()
        grid.assign((0, 0), "5")
        with self.assertRaises(InvariantViolation):
            grid.assign((0, 4), "5")
        with self.assertRaises(InvariantViolation):
            grid.assign((0, 0), "6")

    def test_unknown_symbol_rejected(self) -> None:
        grid = empty_grid(2, 2)
        with self.assertRaises(UnknownSymbolError):
            grid.assign((0, 0), "9")

    def test_retraction_matches_fresh_grid(self) -> None:
        grid = empty_grid()
        grid.assign((0, 0), "1")
        grid.assign((4, 4), "2")
        grid.assign((0, 4), "3")
        grid.clear((4, 4))

        fresh = empty_grid()
        fresh.assign((0, 0), "1")
        fresh.assign((0, 4), "3")

        self.assertEqual(possibility_state(grid), possibility_state(fresh))
        self.assertTrue(grid.is_possible((4, 5), "2"))

    def test_retracting_empty_cell_keeps_counter(self) -> None:
        grid = empty_grid(2, 2)
        grid.clear((1, 1))
        self.assertEqual(grid.num_unfilled, 16)

    def test_unchecked_given_overwrites_value(self) -> None:
        grid = empty_grid(2, 2)
        grid.assign((0, 0), "1")
        grid.assign((0, 0), "2", check=False)
        self.assertEqual(grid.symbol_at((0, 0)), "2")
        self.assertEqual(grid.num_unfilled, 15)
        self.assertTrue(grid.is_possible((0, 1), "1"))
        self.assertFalse(grid.is_possible((0, 1), "2"))

    def test_element_frequencies(self) -> None:
        grid = empty_grid(2, 2)
        grid.assign((0, 0), "1")
        grid.assign((1, 2), "1")
        grid.assign((0, 1), "4")
        self.assertEqual(grid.element_frequencies(), [2, 0, 0, 1])

    def test_custom_region_restricts_possibilities(self) -> None:
        grid = empty_grid(2, 2)
        grid.assign((0, 0), "1")
        grid.add_region([(0, 0), (1, 3), (2, 1), (3, 2)], name="scatter")
        self.assertFalse(grid.is_possible((2, 1), "1"))
        self.assertTrue(grid.is_possible((2, 2), "1"))
        self.assertEqual(len(grid.regions_containing((3, 2))), 4)


class GridVerificationTests(unittest.TestCase):
    def test_duplicate_in_row_fails_verification(self) -> None:
        grid = empty_grid()
        grid.assign((0, 0), "7")
        grid.assign((0, 5), "7", check=False)
        self.assertFalse(grid.verify())
        self.assertFalse(grid.verify_cell((0, 5)))
        self.assertTrue(grid.verify_cell((8, 8)))
        self.assertFalse(grid.is_solved())

    def test_verify_scans_cells_not_fill_state(self) -> None:
        grid = empty_grid(2, 2)
        grid.assign((0, 0), "1")
        grid.assign((3, 0), "1", check=False)
        # Fill state cannot see the repeat; the duplicate scan can.
        self.assertTrue(grid.columns[0].is_filled_in(0))
        self.assertFalse(grid.columns[0].verify())

    def test_completed_grid_is_solved(self) -> None:
        grid = empty_grid(2, 2)
        fill_rows(grid, SOLVED_4X4)
        self.assertEqual(grid.num_unfilled, 0)
        self.assertTrue(grid.verify())
        self.assertTrue(grid.is_solved())
        self.assertTrue(all(region.num_unfilled() == 0 for region in grid.all_regions))

    def test_partial_grid_verifies_but_is_not_solved(self) -> None:
        grid = empty_grid(2, 2)
        fill_rows(grid, ["12..", "34..", "....", "...."])
        self.assertTrue(grid.verify())
        self.assertFalse(grid.is_solved())


class GridCopyTests(unittest.TestCase):
    def test_copy_is_independent(self) -> None:
        grid = empty_grid(2, 2, diagonals=True)
        grid.assign((0, 0), "1")
        clone = grid.copy()
        clone.assign((1, 1), "2")
        self.assertIsNone(grid.symbol_at((1, 1)))
        self.assertTrue(grid.is_possible((2, 2), "2"))
        self.assertFalse(clone.is_possible((2, 2), "2"))
        self.assertEqual(len(clone.other_regions), 2)

    def test_copy_rebuilds_same_state(self) -> None:
        grid = empty_grid()
        fill_rows(grid, ["53..7....", "6..195...", ".98....6."])
        grid.add_region([(r, 8 - r) for r in range(9)], name="anti")
        clone = grid.copy()
        self.assertEqual(possibility_state(clone), possibility_state(grid))
        self.assertEqual(clone.assignments(), grid.assignments())
        self.assertEqual(clone.other_regions[0].name, "anti")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
