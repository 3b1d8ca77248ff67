"""Deterministic consistency checks for grids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from ..core.exceptions import ValidationError
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from .grid import SudokuGrid


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class GridValidator:
    """Runs every check and collects a message per problem found.

    Besides duplicate symbols, the validator audits the incremental
    bookkeeping: it rebuilds possibilities on a fresh copy and compares.
    """

    def validate(self, grid: SudokuGrid, *, audit_possibilities: bool = True) -> ValidationResult:
        messages: List[str] = []
        checks = [self._check_no_duplicates, self._check_unfilled_count]
        if audit_possibilities:
            checks.append(self._check_possibilities)
        for check in checks:
            try:
                check(grid)
            except ValidationError as exc:
                messages.append(str(exc))
        if messages:
            LOGGER.debug("Validation found %d problem(s)", len(messages))
        return ValidationResult(ok=not messages, messages=messages)

    def _check_no_duplicates(self, grid: SudokuGrid) -> None:
        problems = []
        for region in grid.all_regions:
            for ordinal, coords in region.duplicates().items():
                cells = ", ".join(str(coord) for coord in coords)
                problems.append(
                    f"{region!r} holds {grid.alphabet.symbol(ordinal)!r} more than once at {cells}"
                )
        if problems:
            raise ValidationError("; ".join(problems))

    def _check_unfilled_count(self, grid: SudokuGrid) -> None:
        actual = sum(1 for cell in grid if cell.value is None)
        if actual != grid.num_unfilled:
            raise ValidationError(
                f"Unfilled counter says {grid.num_unfilled} but {actual} cells are empty"
            )

    def _check_possibilities(self, grid: SudokuGrid) -> None:
        fresh = grid.copy()
        for cell in grid:
            expected = fresh.cell(*cell.coord)
            if cell.value is None and cell.possible != expected.possible:
                raise ValidationError(
                    f"Possibilities at {cell.coord} are {grid.possible_symbols(cell.coord)}, "
                    f"expected {fresh.possible_symbols(cell.coord)}"
                )
        for region, expected in zip(grid.all_regions, fresh.all_regions):
            if region.filled != expected.filled:
                raise ValidationError(f"Fill state of {region!r} is stale")
