import io
import unittest

from sudoku.engine.grid import GridConfig
from sudoku.engine.solver import solve_grid
from sudoku.utils.pretty import format_board, pretty_print_grid, print_solve_report


class FormatBoardTests(unittest.TestCase):
    def test_single_width_symbols(self) -> None:
        grid = GridConfig(box_width=2, box_height=2).build_grid()
        grid.assign((0, 0), "1")
        grid.assign((3, 2), "4")
        expected = "\n".join(
            [
                "+-+-+-+-+",
                "|1| | | |",
                "+-+-+-+-+",
                "| | | | |",
                "+-+-+-+-+",
                "| | | | |",
                "+-+-+-+-+",
                "| | |4| |",
                "+-+-+-+-+",
            ]
        )
        self.assertEqual(format_board(grid), expected)

    def test_symbols_are_right_aligned_to_widest(self) -> None:
        grid = GridConfig(box_width=4, box_height=4).build_grid()
        grid.assign((0, 0), "7")
        grid.assign((0, 1), "16")
        lines = format_board(grid).splitlines()
        self.assertEqual(lines[0], "+" + "--+" * 16)
        self.assertTrue(lines[1].startswith("| 7|16|  |"))
        self.assertEqual(len(lines), 33)

    def test_pretty_print_writes_label(self) -> None:
        grid = GridConfig(box_width=2, box_height=1, symbols=["x", "y"]).build_grid()
        stream = io.StringIO()
        pretty_print_grid(grid, label="Board:", stream=stream)
        self.assertEqual(stream.getvalue().splitlines()[0], "Board:")


class SolveReportTests(unittest.TestCase):
    def test_report_lists_guesses_per_solution(self) -> None:
        grid = GridConfig(box_width=2, box_height=2).build_grid()
        for r, row in enumerate([".2.4", ".4.2", "2143", "4321"]):
            for c, symbol in enumerate(row):
                if symbol != ".":
                    grid.assign((r, c), symbol)
        result = solve_grid(grid)
        stream = io.StringIO()
        print_solve_report(result, original=grid, stream=stream)
        text = stream.getvalue()
        self.assertIn("Number of solutions: 2 (complete search)", text)
        self.assertIn("Solution 1 after 1 guess(es): '1' at (0,0)", text)
        self.assertIn("Solution 2 after 1 guess(es): '3' at (0,0)", text)

    def test_report_truncates_boards(self) -> None:
        grid = GridConfig(box_width=2, box_height=2).build_grid()
        result = solve_grid(grid)
        stream = io.StringIO()
        print_solve_report(result, stream=stream, max_boards=1)
        self.assertIn("287 more solution(s) not shown", stream.getvalue())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
