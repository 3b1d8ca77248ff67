"""CLI entrypoint for the generalized sudoku solver."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Tuple

from sudoku.core.constants import DEFAULT_BOX_HEIGHT, DEFAULT_BOX_WIDTH, SymbolStyle
from sudoku.core.exceptions import ConfigurationError, SudokuError
from sudoku.engine.cpsat import count_solutions
from sudoku.engine.grid import GridConfig
from sudoku.engine.solver import SolverConfig, SudokuSolver
from sudoku.utils.logger import configure_logging
from sudoku.utils.pretty import pretty_print_grid, print_solve_report


Given = Tuple[int, int, str]


def parse_given(text: str) -> Given:
    """Parse ``ROW,COL,SYMBOL`` (zero-based coordinates)."""

    parts = text.split(",", 2)
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected ROW,COL,SYMBOL, got {text!r}")
    try:
        row, col = int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"row and column must be integers in {text!r}") from exc
    return row, col, parts[2].strip()


def parse_givens_file(path: Path) -> List[Given]:
    """Read givens from a file, one ROW,COL,SYMBOL per line. Blank lines and # comments are skipped."""
    givens: List[Given] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        givens.append(parse_given(line))
    return givens


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve generalized sudoku puzzles and report every solution",
    )
    parser.add_argument("--box-width", type=int, default=DEFAULT_BOX_WIDTH, help="Cells per box, across")
    parser.add_argument("--box-height", type=int, default=DEFAULT_BOX_HEIGHT, help="Cells per box, down")
    parser.add_argument(
        "--symbols",
        nargs="+",
        metavar="SYMBOL",
        help="Explicit alphabet (must have box-width x box-height distinct symbols)",
    )
    parser.add_argument(
        "--symbol-style",
        type=str,
        choices=[style.value for style in SymbolStyle],
        default=SymbolStyle.NUMERIC.value,
        help="Default alphabet when --symbols is not given",
    )
    parser.add_argument("--diagonals", action="store_true", help="Both diagonals are regions too")
    parser.add_argument(
        "--given",
        action="append",
        type=parse_given,
        default=[],
        metavar="ROW,COL,SYMBOL",
        help="Pre-filled cell (zero-based coordinates); repeatable",
    )
    parser.add_argument(
        "--givens-file",
        type=Path,
        metavar="FILE",
        help="File with one ROW,COL,SYMBOL entry per line (# comments and blank lines ignored)",
    )
    parser.add_argument("--max-solutions", type=int, help="Stop after this many solutions")
    parser.add_argument("--max-nodes", type=int, help="Stop after exploring this many search nodes")
    parser.add_argument("--timeout", type=float, help="Stop searching after this many seconds")
    parser.add_argument("--workers", type=int, default=1, help="Threads for the first branch point")
    parser.add_argument("--show", type=int, default=3, help="Print at most this many solutions")
    parser.add_argument(
        "--cross-check",
        action="store_true",
        help="Also count solutions (up to 2) with OR-Tools CP-SAT",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.WARNING)
    configure_logging(level)

    givens: List[Given] = list(args.given)
    if args.givens_file:
        try:
            givens.extend(parse_givens_file(args.givens_file))
        except argparse.ArgumentTypeError as exc:
            parser.error(f"{args.givens_file}: {exc}")

    config = GridConfig(
        box_width=args.box_width,
        box_height=args.box_height,
        symbols=args.symbols,
        symbol_style=SymbolStyle(args.symbol_style),
        diagonals=args.diagonals,
    )
    try:
        grid = config.build_grid()
        for row, col, symbol in givens:
            if not (0 <= row < grid.geometry.size and 0 <= col < grid.geometry.size):
                parser.error(f"given {row},{col} is outside the {grid.geometry.size}x{grid.geometry.size} grid")
            grid.assign((row, col), symbol, check=False)
    except ConfigurationError as exc:
        parser.error(str(exc))
    except SudokuError as exc:
        parser.error(f"invalid given: {exc}")

    if not grid.verify():
        pretty_print_grid(grid, label="Givens conflict with each other:")

    solver = SudokuSolver(
        grid,
        SolverConfig(
            max_solutions=args.max_solutions,
            max_nodes=args.max_nodes,
            timeout_seconds=args.timeout,
            max_workers=args.workers,
        ),
    )
    result = solver.solve()
    print_solve_report(result, original=grid, max_boards=args.show)

    if args.cross_check:
        check = count_solutions(grid, limit=2)
        bound = "" if check.complete else "at least "
        print(f"\nCP-SAT cross-check: {bound}{check.count} solution(s) (status={check.status})")


if __name__ == "__main__":  # pragma: no cover
    main()
