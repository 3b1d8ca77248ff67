"""Custom exception hierarchy for puzzle construction and solving."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..engine.regions import Region


class SudokuError(Exception):
    """Base exception for solver failures."""


class ConfigurationError(SudokuError):
    """Raised when an alphabet, geometry or region cannot be built."""


class UnknownSymbolError(SudokuError):
    """Raised when a symbol is not part of the grid's alphabet."""


class InvariantViolation(SudokuError):
    """Raised when a symbol is assigned to a cell where it is not possible.

    Correct propagation never produces this, so it signals a bug upstream.
    """


class SearchContradiction(SudokuError):
    """Raised when a branch of the search can no longer be solved."""

    def __init__(
        self,
        message: str,
        region: Optional["Region"] = None,
        symbol: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.region = region
        self.symbol = symbol


class ValidationError(SudokuError):
    """Raised when a grid consistency check fails."""
