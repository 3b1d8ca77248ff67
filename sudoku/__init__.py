"""Solver for generalized sudoku puzzles.

This package exposes the public API surface via:

- ``sudoku.engine.grid.SudokuGrid``: the cell grid and its constraint regions.
- ``sudoku.engine.solver.SudokuSolver``: propagation plus exhaustive backtracking.
- ``sudoku.data.alphabet.Alphabet``: validated symbol sets and range generators.
"""

from .data.alphabet import Alphabet, generate_alphabetic_range, generate_numeric_range
from .engine.geometry import Geometry
from .engine.grid import GridConfig, SudokuGrid
from .engine.solver import SolveResult, SolverConfig, SudokuSolver, solve_grid

__all__ = [
    "Alphabet",
    "Geometry",
    "GridConfig",
    "SudokuGrid",
    "SolveResult",
    "SolverConfig",
    "SudokuSolver",
    "generate_alphabetic_range",
    "generate_numeric_range",
    "solve_grid",
]

__version__ = "0.1.0"
