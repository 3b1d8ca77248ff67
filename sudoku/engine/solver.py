"""Propagation and backtracking solver.

Each grid under exploration is driven to a fixpoint by two inference rules:

  1. Naked single: a cell with exactly one possible symbol takes it.
  2. Hidden single: a region where a symbol fits in exactly one cell places it there.

When neither rule applies and cells remain unfilled, the solver picks a cell,
clones the grid once per possible symbol and explores every clone. All
branches are explored so that puzzles with several solutions are reported as
such.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.constants import SearchState
from ..core.exceptions import SearchContradiction
from ..core.models import Cell, Coord
from ..utils.logger import get_logger
from .grid import SudokuGrid
from .validator import GridValidator

LOGGER = get_logger(__name__)


@dataclass
class SolverConfig:
    """Bounds on the search. ``None`` means unbounded."""

    max_solutions: Optional[int] = None
    max_nodes: Optional[int] = None
    timeout_seconds: Optional[float] = None
    max_workers: int = 1


@dataclass(frozen=True)
class Guess:
    coord: Coord
    symbol: str

    def __str__(self) -> str:
        return f"{self.symbol!r} at {self.coord}"


@dataclass(eq=False)
class SearchNode:
    """One grid snapshot in the search tree.

    Nodes are only created where a guess is needed; ``parent`` is kept so a
    solution can report the guesses that led to it.
    """

    grid: SudokuGrid
    parent: Optional["SearchNode"] = None
    guess: Optional[Guess] = None
    children: List["SearchNode"] = field(default_factory=list)
    split_on: Optional[Coord] = None
    successful: Optional[bool] = None
    state: SearchState = SearchState.ACTIVE

    @property
    def depth(self) -> int:
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def guesses(self) -> List[Guess]:
        """Guesses from the root down to this node."""

        trail: List[Guess] = []
        node: Optional[SearchNode] = self
        while node is not None:
            if node.guess is not None:
                trail.append(node.guess)
            node = node.parent
        trail.reverse()
        return trail


@dataclass
class SolveResult:
    solutions: List[SudokuGrid] = field(default_factory=list)
    traces: List[List[Guess]] = field(default_factory=list)
    nodes_explored: int = 0
    failed_branches: int = 0
    truncated: bool = False
    cancelled: bool = False
    elapsed_seconds: float = 0.0

    @property
    def solution_count(self) -> int:
        return len(self.solutions)

    @property
    def first_solution(self) -> Optional[SudokuGrid]:
        return self.solutions[0] if self.solutions else None

    @property
    def is_unique(self) -> bool:
        return self.solution_count == 1 and not (self.truncated or self.cancelled)

    @property
    def complete(self) -> bool:
        """True when every branch of the search tree was explored."""

        return not (self.truncated or self.cancelled)


class _SearchBudget:
    """Counters and stop conditions shared by every branch of one solve."""

    def __init__(
        self, config: SolverConfig, cancel_event: Optional[threading.Event], started: float
    ) -> None:
        self.config = config
        self.cancel_event = cancel_event
        self.deadline = (
            started + config.timeout_seconds if config.timeout_seconds is not None else None
        )
        self.nodes = 0
        self.solutions = 0
        self.failures = 0
        self.stop_reason: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def stopped(self) -> bool:
        if self.stop_reason is None:
            self._check_external()
        return self.stop_reason is not None

    def _check_external(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            self.stop_reason = "cancelled"
        elif self.deadline is not None and time.monotonic() >= self.deadline:
            self.stop_reason = "timeout"

    def enter_node(self) -> bool:
        with self._lock:
            if self.stopped:
                return False
            if self.config.max_nodes is not None and self.nodes >= self.config.max_nodes:
                self.stop_reason = "node budget"
                return False
            self.nodes += 1
            return True

    def record_solution(self) -> None:
        with self._lock:
            self.solutions += 1

    def record_failure(self) -> None:
        with self._lock:
            self.failures += 1


class _SolutionQuota:
    """Solutions one depth-first stream may still collect.

    A serial search uses a single quota. A parallel search gives each root
    branch its own, so every branch yields the same leading solutions it
    would yield serially and the merge can keep the first ``limit`` in
    branch order. A quota is only touched by the thread running its stream.
    """

    def __init__(self, limit: Optional[int]) -> None:
        self.limit = limit
        self.count = 0

    @property
    def exhausted(self) -> bool:
        return self.limit is not None and self.count >= self.limit

    def take(self) -> bool:
        if self.exhausted:
            return False
        self.count += 1
        return True


# ----------------------------------------------------------------------
# Inference
# ----------------------------------------------------------------------
def fill_single_possibilities(grid: SudokuGrid) -> int:
    """Assign every cell whose possibility set has shrunk to one symbol."""

    filled = 0
    for cell in grid:
        if cell.value is not None:
            continue
        if not cell.possible:
            raise SearchContradiction(f"No symbol fits cell {cell.coord}")
        ordinal = cell.only_possible()
        if ordinal is not None:
            grid.assign_ordinal(cell.coord, ordinal)
            LOGGER.debug(
                "Filled %s with %r from only possibility",
                cell.coord,
                grid.alphabet.symbol(ordinal),
            )
            filled += 1
    return filled


def fill_by_elimination(grid: SudokuGrid) -> Optional[Cell]:
    """Find a region where some open symbol has exactly one eligible cell and place it."""

    for region in grid.all_regions:
        if region.is_full():
            continue
        seen_once = 0
        seen_twice = 0
        for cell in region.cells:
            seen_twice |= seen_once & cell.possible
            seen_once |= cell.possible
        open_symbols = region.full_mask & ~region.filled

        nowhere = open_symbols & ~seen_once
        if nowhere:
            symbol = grid.alphabet.symbol(_lowest_bit(nowhere))
            raise SearchContradiction(
                f"{region!r} has no cell left for {symbol!r}", region=region, symbol=symbol
            )

        hidden = open_symbols & seen_once & ~seen_twice
        if hidden:
            ordinal = _lowest_bit(hidden)
            target = next(cell for cell in region.cells if cell.is_possible(ordinal))
            grid.assign_ordinal(target.coord, ordinal)
            LOGGER.debug(
                "Filled %s with %r by elimination in %r",
                target.coord,
                grid.alphabet.symbol(ordinal),
                region,
            )
            return target
    return None


def _lowest_bit(mask: int) -> int:
    return (mask & -mask).bit_length() - 1


def propagate(grid: SudokuGrid) -> SearchState:
    """Apply both inference rules until the grid is filled or neither rule fires.

    Raises :class:`SearchContradiction` when the grid cannot be completed.
    """

    while grid.num_unfilled > 0:
        if fill_single_possibilities(grid):
            continue
        if fill_by_elimination(grid) is not None:
            continue
        return SearchState.STALLED
    return SearchState.FILLED


def branch_priority(grid: SudokuGrid, cell: Cell, frequencies: List[int]) -> Tuple[int, int, int]:
    """Sort key for choosing where to guess; lower is better.

    Fewest options first, then options that are rare on the grid (squared
    frequencies), then cells whose regions have the fewest open symbols.
    """

    options = cell.all_possible()
    rarity = sum(frequencies[ordinal] ** 2 for ordinal in options)
    desaturation = sum(region.num_unfilled() for region in grid.regions_containing(cell.coord))
    return len(options), rarity, desaturation


def select_branch_cell(grid: SudokuGrid) -> Cell:
    """Pick the unfilled cell with the lowest priority; ties go to row-major order."""

    frequencies = grid.element_frequencies()
    best: Optional[Cell] = None
    best_key: Optional[Tuple[int, int, int]] = None
    for cell in grid:
        if cell.value is not None:
            continue
        key = branch_priority(grid, cell, frequencies)
        if best_key is None or key < best_key:
            best, best_key = cell, key
    if best is None:
        raise ValueError("Cannot branch on a grid with no unfilled cells")
    return best


# ----------------------------------------------------------------------
# Search
# ----------------------------------------------------------------------
class SudokuSolver:
    """Explores the full search tree of a grid and collects every solution."""

    def __init__(self, grid: SudokuGrid, config: Optional[SolverConfig] = None) -> None:
        self.original = grid.copy()
        self.config = config or SolverConfig()
        self.validator = GridValidator()

    def solve(self, cancel_event: Optional[threading.Event] = None) -> SolveResult:
        started = time.monotonic()
        budget = _SearchBudget(self.config, cancel_event, started)
        root = SearchNode(self.original.copy())

        if not root.grid.verify():
            messages = self.validator.validate(root.grid).messages
            LOGGER.info("Initial board is inconsistent: %s", "; ".join(messages))
            budget.record_failure()
            root.state = SearchState.CONTRADICTED
            root.successful = False
            found: List[SearchNode] = []
        else:
            found = self._solve_node(root, budget, _SolutionQuota(self.config.max_solutions))

        stop_reason = budget.stop_reason
        limit = self.config.max_solutions
        if limit is not None and len(found) >= limit:
            del found[limit:]
            stop_reason = stop_reason or "solution limit"

        result = SolveResult(
            solutions=[node.grid for node in found],
            traces=[node.guesses() for node in found],
            nodes_explored=budget.nodes,
            failed_branches=budget.failures,
            truncated=stop_reason in ("node budget", "timeout", "solution limit"),
            cancelled=stop_reason == "cancelled",
            elapsed_seconds=time.monotonic() - started,
        )
        LOGGER.info(
            "Search finished: %d solution(s), %d node(s), %d failed branch(es) in %.2fs%s",
            result.solution_count,
            result.nodes_explored,
            result.failed_branches,
            result.elapsed_seconds,
            f" (stopped: {stop_reason})" if stop_reason else "",
        )
        return result

    def _solve_node(
        self, node: SearchNode, budget: _SearchBudget, quota: _SolutionQuota
    ) -> List[SearchNode]:
        if quota.exhausted or not budget.enter_node():
            return []
        grid = node.grid
        try:
            node.state = propagate(grid)
        except SearchContradiction as exc:
            node.state = SearchState.CONTRADICTED
            node.successful = False
            budget.record_failure()
            LOGGER.debug("Node at depth %d had no solution: %s", node.depth, exc)
            return []

        if node.state == SearchState.STALLED:
            return self._branch(node, budget, quota)

        if grid.is_solved():
            if not quota.take():
                return []
            node.successful = True
            budget.record_solution()
            LOGGER.debug("Board solved at depth %d", node.depth)
            return [node]

        node.successful = False
        budget.record_failure()
        LOGGER.warning(
            "Board filled but not solved: %s",
            "; ".join(self.validator.validate(grid).messages) or "unknown inconsistency",
        )
        return []

    def _branch(
        self, node: SearchNode, budget: _SearchBudget, quota: _SolutionQuota
    ) -> List[SearchNode]:
        grid = node.grid
        guess_at = select_branch_cell(grid)
        node.split_on = guess_at.coord
        options = guess_at.all_possible()
        LOGGER.debug(
            "Guessing at %s among %s (depth %d, %d unfilled)",
            guess_at.coord,
            [grid.alphabet.symbol(ordinal) for ordinal in options],
            node.depth,
            grid.num_unfilled,
        )

        node.children = []
        for ordinal in options:
            child_grid = grid.copy()
            child_grid.assign_ordinal(guess_at.coord, ordinal)
            guess = Guess(guess_at.coord, grid.alphabet.symbol(ordinal))
            node.children.append(SearchNode(child_grid, parent=node, guess=guess))

        found: List[SearchNode] = []
        if node.parent is None and self.config.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                futures = [
                    executor.submit(
                        self._solve_node, child, budget, _SolutionQuota(quota.limit)
                    )
                    for child in node.children
                ]
                for future in futures:
                    found.extend(future.result())
        else:
            for child in node.children:
                if budget.stopped or quota.exhausted:
                    break
                found.extend(self._solve_node(child, budget, quota))

        node.successful = bool(found)
        # Only solved leaves (and their ancestors, through parent links) outlive the subtree.
        node.children = []
        return found


def solve_grid(
    grid: SudokuGrid,
    config: Optional[SolverConfig] = None,
    cancel_event: Optional[threading.Event] = None,
) -> SolveResult:
    """Solve ``grid`` without modifying it."""

    return SudokuSolver(grid, config).solve(cancel_event)
