"""Grid representation and possibility bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..core.constants import (DEFAULT_BOX_HEIGHT, DEFAULT_BOX_WIDTH, DiagonalKind,
                              RegionKind, SymbolStyle)
from ..core.exceptions import ConfigurationError, InvariantViolation
from ..core.models import Cell, Coord
from ..data.alphabet import Alphabet, default_symbols
from ..utils.logger import get_logger
from .geometry import Geometry
from .regions import Region, custom_key


LOGGER = get_logger(__name__)


@dataclass
class GridConfig:
    """Configuration values describing a puzzle type."""

    box_width: int = DEFAULT_BOX_WIDTH
    box_height: int = DEFAULT_BOX_HEIGHT
    symbols: Optional[Sequence[str]] = None
    symbol_style: SymbolStyle = SymbolStyle.NUMERIC
    diagonals: bool = False

    def to_geometry(self) -> Geometry:
        return Geometry(self.box_width, self.box_height)

    def to_alphabet(self) -> Alphabet:
        if self.symbols is not None:
            return Alphabet(self.symbols)
        return Alphabet(default_symbols(self.symbol_style, self.box_width * self.box_height))

    def build_grid(self) -> "SudokuGrid":
        return SudokuGrid(self.to_geometry(), self.to_alphabet(), diagonals=self.diagonals)


class SudokuGrid:
    """The full grid of cells together with its rows, columns, boxes and extra regions.

    For every unassigned cell the possibility mask holds exactly the symbols
    that no containing region has already placed in another cell. Assignments
    keep this incrementally; retractions rebuild it from scratch.
    """

    def __init__(
        self,
        geometry: Geometry,
        alphabet: Alphabet,
        *,
        diagonals: bool = False,
        extra_regions: Iterable[Sequence[Tuple[int, int]]] = (),
    ) -> None:
        if geometry.num_elements != len(alphabet):
            raise ConfigurationError(
                f"A {geometry.box_width}x{geometry.box_height} box needs "
                f"{geometry.num_elements} symbols, got {len(alphabet)}"
            )
        self.geometry = geometry
        self.alphabet = alphabet
        self.num_elements = geometry.num_elements
        self.full_mask = alphabet.full_mask
        self._unfilled = geometry.num_cells

        size = geometry.size
        self.cells: List[List[Cell]] = [
            [Cell(Coord(r, c), self.full_mask) for c in range(size)] for r in range(size)
        ]
        self._by_coord: Dict[Coord, Cell] = {cell.coord: cell for cell in self}

        self.rows: List[Region] = [
            Region(RegionKind.ROW, i, geometry, self._by_coord) for i in range(size)
        ]
        self.columns: List[Region] = [
            Region(RegionKind.COLUMN, i, geometry, self._by_coord) for i in range(size)
        ]
        self.boxes: List[Region] = [
            Region(RegionKind.BOX, geometry.box_index_to_box_coord(i), geometry, self._by_coord)
            for i in range(size)
        ]
        self.other_regions: List[Region] = []
        if diagonals:
            for kind in DiagonalKind:
                self.other_regions.append(
                    Region(RegionKind.DIAGONAL, kind, geometry, self._by_coord)
                )
        for coords in extra_regions:
            self.other_regions.append(
                Region(RegionKind.CUSTOM, custom_key(geometry, coords), geometry, self._by_coord)
            )
        self._containing: Dict[Coord, List[Region]] = {}
        self._index_regions()

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    def _index_regions(self) -> None:
        self._containing = {
            cell.coord: self._collate_containing_regions(cell.coord) for cell in self
        }

    def _collate_containing_regions(self, coord: Coord) -> List[Region]:
        regions = [
            self.rows[coord.row],
            self.columns[coord.col],
            self.boxes[self.geometry.cell_coord_to_box_index(coord)],
        ]
        regions.extend(region for region in self.other_regions if region.contains(coord))
        return regions

    def copy(self) -> "SudokuGrid":
        """Copy assignments and region layout; possibilities are rebuilt from scratch."""

        clone = SudokuGrid(self.geometry, self.alphabet)
        for region in self.other_regions:
            clone.other_regions.append(
                Region(region.kind, region.key, clone.geometry, clone._by_coord, name=region.name)
            )
        clone._index_regions()
        for cell in self:
            if cell.value is not None:
                clone.assign_ordinal(cell.coord, cell.value, check=False)
        return clone

    def add_region(self, coords: Sequence[Tuple[int, int]], name: Optional[str] = None) -> Region:
        """Register a custom region and rebuild possibilities to include it."""

        region = Region(
            RegionKind.CUSTOM,
            custom_key(self.geometry, coords),
            self.geometry,
            self._by_coord,
            name=name,
        )
        self.other_regions.append(region)
        self._index_regions()
        self.recalculate_possibilities()
        LOGGER.debug("Added %r", region)
        return region

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------
    def assign(self, coord: Tuple[int, int], symbol: Optional[str], *, check: bool = True) -> None:
        """Assign ``symbol`` at ``coord``, or retract the cell when ``symbol`` is None.

        With ``check`` the symbol must currently be possible there. Callers
        loading external clues that may conflict pass ``check=False`` and rely
        on :meth:`verify` to surface duplicates.
        """

        ordinal = None if symbol is None else self.alphabet.ordinal(symbol)
        self.assign_ordinal(coord, ordinal, check=check)

    def assign_ordinal(
        self, coord: Tuple[int, int], ordinal: Optional[int], *, check: bool = True
    ) -> None:
        coord = Coord(*coord)
        cell = self._by_coord[coord]
        if ordinal is None:
            self._retract(cell)
            return

        if check and not cell.is_possible(ordinal):
            raise InvariantViolation(
                f"Symbol {self.alphabet.symbol(ordinal)!r} is not possible at {coord}"
            )
        if cell.value is not None:
            # Overwriting an unchecked given: drop the old value, then place.
            cell.set_value(ordinal)
            self.recalculate_possibilities()
            return

        cell.set_value(ordinal)
        self._unfilled -= 1
        for region in self._containing[coord]:
            region.set_filled_in(ordinal, cell)

    def clear(self, coord: Tuple[int, int]) -> None:
        self.assign_ordinal(coord, None)

    def _retract(self, cell: Cell) -> None:
        if cell.value is not None:
            self._unfilled += 1
        cell.set_value(None)
        self.recalculate_possibilities()

    def recalculate_possibilities(self) -> None:
        """Reset every mask and replay all current assignments."""

        for cell in self:
            cell.reset_possibilities(self.full_mask)
        for region in self.all_regions:
            region.reset_filled()
        for cell in self:
            if cell.value is not None:
                for region in self._containing[cell.coord]:
                    region.set_filled_in(cell.value, cell)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def verify(self) -> bool:
        """True iff no region holds two copies of the same symbol."""

        return all(region.verify() for region in self.all_regions)

    def verify_cell(self, coord: Tuple[int, int]) -> bool:
        return all(region.verify() for region in self.regions_containing(coord))

    def is_solved(self) -> bool:
        if not self.verify():
            return False
        return all(region.is_full() for region in self.all_regions)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    @property
    def all_regions(self) -> List[Region]:
        return self.rows + self.columns + self.boxes + self.other_regions

    @property
    def num_unfilled(self) -> int:
        return self._unfilled

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def regions_containing(self, coord: Tuple[int, int]) -> List[Region]:
        return list(self._containing[Coord(*coord)])

    def is_possible(self, coord: Tuple[int, int], symbol: str) -> bool:
        return self._by_coord[Coord(*coord)].is_possible(self.alphabet.ordinal(symbol))

    def possible_symbols(self, coord: Tuple[int, int]) -> List[str]:
        cell = self._by_coord[Coord(*coord)]
        return [self.alphabet.symbol(ordinal) for ordinal in cell.all_possible()]

    def symbol_at(self, coord: Tuple[int, int]) -> Optional[str]:
        value = self._by_coord[Coord(*coord)].value
        return None if value is None else self.alphabet.symbol(value)

    def assignments(self) -> Dict[Coord, str]:
        return {
            cell.coord: self.alphabet.symbol(cell.value) for cell in self if cell.value is not None
        }

    def element_frequencies(self) -> List[int]:
        """How many cells currently hold each ordinal."""

        frequencies = [0] * self.num_elements
        for cell in self:
            if cell.value is not None:
                frequencies[cell.value] += 1
        return frequencies

    def __repr__(self) -> str:
        return (
            f"SudokuGrid({self.geometry.box_width}x{self.geometry.box_height}, "
            f"unfilled={self._unfilled})"
        )
