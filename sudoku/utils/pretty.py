"""Pretty-print helpers for grids and solve results."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from ..engine.grid import SudokuGrid
    from ..engine.solver import SolveResult


def format_board(grid: SudokuGrid) -> str:
    """Bordered table, each cell right-aligned to the widest symbol, blanks for empty cells."""

    width = grid.alphabet.max_width
    divider = "+" + ("-" * width + "+") * grid.geometry.size
    lines: List[str] = [divider]
    for row in grid.cells:
        rendered = [
            f"{'' if cell.value is None else grid.alphabet.symbol(cell.value):>{width}}"
            for cell in row
        ]
        lines.append("|" + "|".join(rendered) + "|")
        lines.append(divider)
    return "\n".join(lines)


def pretty_print_grid(grid: SudokuGrid, *, label: str | None = None, stream=None) -> None:
    """Print the grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_board(grid), file=stream)


def print_solve_report(
    result: SolveResult,
    original: Optional[SudokuGrid] = None,
    *,
    stream=None,
    max_boards: Optional[int] = None,
) -> None:
    """Print the solution count and, for each solution, the guesses that led to it."""

    stream = stream or sys.stdout
    status = "complete" if result.complete else ("cancelled" if result.cancelled else "truncated")
    print(f"Number of solutions: {result.solution_count} ({status} search)", file=stream)
    print(
        f"Nodes explored: {result.nodes_explored} | "
        f"Failed branches: {result.failed_branches} | "
        f"Time: {result.elapsed_seconds:.2f}s",
        file=stream,
    )
    if original is not None:
        pretty_print_grid(original, label="Original grid:", stream=stream)

    shown = result.solutions if max_boards is None else result.solutions[:max_boards]
    for number, (grid, trace) in enumerate(zip(shown, result.traces), start=1):
        print(file=stream)
        if trace:
            guesses = ", ".join(str(guess) for guess in trace)
            print(f"Solution {number} after {len(trace)} guess(es): {guesses}", file=stream)
        else:
            print(f"Solution {number} found without guessing", file=stream)
        pretty_print_grid(grid, stream=stream)
    hidden = result.solution_count - len(shown)
    if hidden > 0:
        print(f"\n... {hidden} more solution(s) not shown", file=stream)
