"""Shared constants and enumerations for the sudoku solver."""

from __future__ import annotations

from enum import Enum


DEFAULT_BOX_WIDTH = 3
DEFAULT_BOX_HEIGHT = 3


class RegionKind(str, Enum):
    """All supported constraint region variants."""

    ROW = "ROW"
    COLUMN = "COLUMN"
    BOX = "BOX"
    DIAGONAL = "DIAGONAL"
    CUSTOM = "CUSTOM"


class DiagonalKind(str, Enum):
    """The two corner-to-corner diagonals of a square grid."""

    LEADING = "LEADING"
    ANTI = "ANTI"


class SymbolStyle(str, Enum):
    """Presets for generating a default alphabet."""

    NUMERIC = "numeric"
    UPPER = "upper"
    LOWER = "lower"


class SearchState(str, Enum):
    """Lifecycle of a grid under exploration by the solver."""

    ACTIVE = "ACTIVE"
    STALLED = "STALLED"
    FILLED = "FILLED"
    CONTRADICTED = "CONTRADICTED"
