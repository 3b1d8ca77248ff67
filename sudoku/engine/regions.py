"""Constraint regions: rows, columns, boxes, diagonals and custom cell sets.

Each region kind contributes exactly two rules, an enumeration of its cells
and a membership test. Fill tracking and verification are shared by all kinds.
"""

from __future__ import annotations

from typing import Callable, Dict, Hashable, List, Sequence, Tuple

from ..core.constants import DiagonalKind, RegionKind
from ..core.exceptions import ConfigurationError
from ..core.models import Cell, Coord, count_bits
from .geometry import Geometry


Enumerator = Callable[[Geometry, Hashable], List[Coord]]
Membership = Callable[[Geometry, Hashable, Coord], bool]


def _row_coords(geometry: Geometry, key: Hashable) -> List[Coord]:
    return [Coord(key, c) for c in range(geometry.size)]


def _column_coords(geometry: Geometry, key: Hashable) -> List[Coord]:
    return [Coord(r, key) for r in range(geometry.size)]


def _box_coords(geometry: Geometry, key: Hashable) -> List[Coord]:
    top_left = geometry.box_coord_to_cell_coord(key)
    width = geometry.box_width
    return [top_left.plus(Coord(i // width, i % width)) for i in range(geometry.num_elements)]


def _diagonal_coords(geometry: Geometry, key: Hashable) -> List[Coord]:
    last = geometry.size - 1
    if key == DiagonalKind.LEADING:
        return [Coord(i, i) for i in range(geometry.size)]
    return [Coord(i, last - i) for i in range(geometry.size)]


def _custom_coords(geometry: Geometry, key: Hashable) -> List[Coord]:
    return [Coord(*coord) for coord in key]


def _in_row(geometry: Geometry, key: Hashable, coord: Coord) -> bool:
    return coord.row == key


def _in_column(geometry: Geometry, key: Hashable, coord: Coord) -> bool:
    return coord.col == key


def _in_box(geometry: Geometry, key: Hashable, coord: Coord) -> bool:
    return geometry.cell_coord_to_box_coord(coord) == key


def _in_diagonal(geometry: Geometry, key: Hashable, coord: Coord) -> bool:
    if key == DiagonalKind.LEADING:
        return coord.row == coord.col
    return coord.row + coord.col == geometry.num_elements - 1


def _in_custom(geometry: Geometry, key: Hashable, coord: Coord) -> bool:
    return coord in key


RULES: Dict[RegionKind, Tuple[Enumerator, Membership]] = {
    RegionKind.ROW: (_row_coords, _in_row),
    RegionKind.COLUMN: (_column_coords, _in_column),
    RegionKind.BOX: (_box_coords, _in_box),
    RegionKind.DIAGONAL: (_diagonal_coords, _in_diagonal),
    RegionKind.CUSTOM: (_custom_coords, _in_custom),
}


def custom_key(geometry: Geometry, coords: Sequence[Tuple[int, int]]) -> Tuple[Coord, ...]:
    """Validate a custom region's cells and return its normalized key."""

    normalized = tuple(Coord(*coord) for coord in coords)
    if len(set(normalized)) != len(normalized):
        raise ConfigurationError("Custom region lists a cell more than once")
    if len(normalized) != geometry.num_elements:
        raise ConfigurationError(
            f"Custom region must contain exactly {geometry.num_elements} cells, got {len(normalized)}"
        )
    for coord in normalized:
        if not geometry.contains(coord):
            raise ConfigurationError(f"Custom region cell {coord} is outside the grid")
    return normalized


class Region:
    """A set of cells that must hold each symbol at most once.

    ``filled`` is a bitmask over alphabet ordinals of the symbols already
    placed somewhere in the region.
    """

    def __init__(
        self,
        kind: RegionKind,
        key: Hashable,
        geometry: Geometry,
        cells: Dict[Coord, Cell],
        name: str | None = None,
    ) -> None:
        self.kind = kind
        self.key = key
        self.geometry = geometry
        self.name = name
        enumerate_coords, _ = RULES[kind]
        self.cells: List[Cell] = [cells[coord] for coord in enumerate_coords(geometry, key)]
        self.full_mask = (1 << geometry.num_elements) - 1
        self.filled = 0

    def __iter__(self):
        return iter(self.cells)

    def __repr__(self) -> str:
        if self.kind == RegionKind.CUSTOM:
            return f"Region(CUSTOM, {self.name or 'unnamed'})"
        key = self.key.value if isinstance(self.key, DiagonalKind) else self.key
        return f"Region({self.kind.value}, {key})"

    @property
    def coords(self) -> List[Coord]:
        return [cell.coord for cell in self.cells]

    def contains(self, coord: Coord) -> bool:
        _, membership = RULES[self.kind]
        return membership(self.geometry, self.key, coord)

    # ------------------------------------------------------------------
    # Fill tracking
    # ------------------------------------------------------------------
    def is_filled_in(self, ordinal: int) -> bool:
        return bool(self.filled >> ordinal & 1)

    def num_unfilled(self) -> int:
        return count_bits(self.full_mask & ~self.filled)

    def is_full(self) -> bool:
        return self.filled == self.full_mask

    def set_filled_in(self, ordinal: int, filled_cell: Cell) -> None:
        """Record ``ordinal`` as placed and strike it from every other cell."""

        self.filled |= 1 << ordinal
        for cell in self.cells:
            if cell is not filled_cell:
                cell.set_not_possible(ordinal)

    def reset_filled(self) -> None:
        self.filled = 0

    def verify(self) -> bool:
        """Scan the cells for a repeated symbol, ignoring ``filled``."""

        seen = 0
        for cell in self.cells:
            if cell.value is None:
                continue
            bit = 1 << cell.value
            if seen & bit:
                return False
            seen |= bit
        return True

    def duplicates(self) -> Dict[int, List[Coord]]:
        """Ordinals placed more than once, with the cells holding them."""

        placed: Dict[int, List[Coord]] = {}
        for cell in self.cells:
            if cell.value is not None:
                placed.setdefault(cell.value, []).append(cell.coord)
        return {ordinal: coords for ordinal, coords in placed.items() if len(coords) > 1}
