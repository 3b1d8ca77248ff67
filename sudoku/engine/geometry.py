"""Coordinate arithmetic for a box-width x box-height grid layout.

A grid built from ``box_width x box_height`` boxes has as many boxes across as
a box is tall, and as many boxes down as a box is wide, so the grid is always
square with side ``box_width * box_height``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from ..core.exceptions import ConfigurationError
from ..core.models import Coord, Dims


@dataclass(frozen=True)
class Geometry:
    box_width: int
    box_height: int
    cells_per_box: Dims = field(init=False, repr=False)
    boxes_per_grid: Dims = field(init=False, repr=False)
    cells_per_grid: Dims = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.box_width <= 0 or self.box_height <= 0:
            raise ConfigurationError(
                f"Box dimensions must be positive, got {self.box_width}x{self.box_height}"
            )
        cells_per_box = Dims(self.box_width, self.box_height)
        boxes_per_grid = cells_per_box.flip()
        object.__setattr__(self, "cells_per_box", cells_per_box)
        object.__setattr__(self, "boxes_per_grid", boxes_per_grid)
        object.__setattr__(self, "cells_per_grid", boxes_per_grid.multiply(cells_per_box))

    @property
    def num_elements(self) -> int:
        return self.box_width * self.box_height

    @property
    def size(self) -> int:
        """Cells along one side of the grid."""

        return self.cells_per_grid.width

    @property
    def num_cells(self) -> int:
        return self.cells_per_grid.product()

    def contains(self, coord: Coord) -> bool:
        return 0 <= coord.row < self.size and 0 <= coord.col < self.size

    def box_coord_to_cell_coord(self, box_coord: Coord) -> Coord:
        """Top-left cell of the box."""

        return Coord(box_coord.row * self.box_height, box_coord.col * self.box_width)

    def cell_coord_to_box_coord(self, cell_coord: Coord) -> Coord:
        return Coord(cell_coord.row // self.box_height, cell_coord.col // self.box_width)

    def box_index_to_box_coord(self, index: int) -> Coord:
        boxes_wide = self.boxes_per_grid.width
        return Coord(index // boxes_wide, index % boxes_wide)

    def box_coord_to_box_index(self, box_coord: Coord) -> int:
        return box_coord.row * self.boxes_per_grid.width + box_coord.col

    def cell_coord_to_box_index(self, cell_coord: Coord) -> int:
        return self.box_coord_to_box_index(self.cell_coord_to_box_coord(cell_coord))

    def cell_index_to_cell_coord(self, index: int) -> Coord:
        return Coord(index // self.size, index % self.size)

    def cell_coord_to_cell_index(self, cell_coord: Coord) -> int:
        return cell_coord.row * self.size + cell_coord.col

    def iter_coords(self) -> Iterator[Coord]:
        """All cell coordinates in row-major order."""

        for index in range(self.num_cells):
            yield self.cell_index_to_cell_coord(index)
