"""Independent solution counting with OR-Tools CP-SAT.

Used to cross-check the propagation solver: one integer variable per cell,
``AllDifferent`` over every region, givens fixed to their ordinals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ortools.sat.python import cp_model

from ..core.models import Coord
from ..utils.logger import get_logger
from .grid import SudokuGrid

LOGGER = get_logger(__name__)


@dataclass
class CrossCheckResult:
    count: int
    complete: bool
    status: str
    solutions: List[Dict[Coord, str]] = field(default_factory=list)


class _SolutionCollector(cp_model.CpSolverSolutionCallback):
    """Records solutions and stops the search once ``limit`` is reached."""

    def __init__(self, grid: SudokuGrid, cell_vars: Dict[Coord, cp_model.IntVar], limit: Optional[int]) -> None:
        super().__init__()
        self._grid = grid
        self._cell_vars = cell_vars
        self._limit = limit
        self.solutions: List[Dict[Coord, str]] = []
        self.hit_limit = False

    def on_solution_callback(self) -> None:
        symbols = self._grid.alphabet
        self.solutions.append(
            {coord: symbols.symbol(self.value(var)) for coord, var in self._cell_vars.items()}
        )
        if self._limit is not None and len(self.solutions) >= self._limit:
            self.hit_limit = True
            self.stop_search()


def count_solutions(
    grid: SudokuGrid,
    limit: Optional[int] = 2,
    timeout: float = 30.0,
) -> CrossCheckResult:
    """Enumerate solutions of ``grid`` with CP-SAT, stopping after ``limit``.

    ``complete`` is False when the limit or the timeout cut the enumeration
    short, in which case ``count`` is a lower bound.
    """

    model = cp_model.CpModel()
    upper = grid.num_elements - 1

    cell_vars: Dict[Coord, cp_model.IntVar] = {}
    for cell in grid:
        r, c = cell.coord
        var = model.new_int_var(0, upper, f"x_{r}_{c}")
        if cell.value is not None:
            model.add(var == cell.value)
        cell_vars[cell.coord] = var

    for region in grid.all_regions:
        model.add_all_different([cell_vars[coord] for coord in region.coords])

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.num_workers = 1

    collector = _SolutionCollector(grid, cell_vars, limit)
    LOGGER.info(
        "CP-SAT: %d cells, %d regions, enumerating (limit=%s, timeout=%0.1fs)...",
        len(cell_vars),
        len(grid.all_regions),
        limit,
        timeout,
    )
    status = solver.solve(model, collector)
    status_name = solver.status_name(status)

    complete = status in (cp_model.OPTIMAL, cp_model.INFEASIBLE) and not collector.hit_limit
    LOGGER.info(
        "CP-SAT: %d solution(s) found in %.2fs (status=%s)",
        len(collector.solutions),
        solver.wall_time,
        status_name,
    )
    return CrossCheckResult(
        count=len(collector.solutions),
        complete=complete,
        status=status_name,
        solutions=collector.solutions,
    )
