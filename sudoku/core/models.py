"""Data models supporting the grid and solver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, NamedTuple, Optional


class Coord(NamedTuple):
    """Row and column of a cell (or of a box, in box units)."""

    row: int
    col: int

    def plus(self, other: "Coord") -> "Coord":
        return Coord(self.row + other.row, self.col + other.col)

    def __str__(self) -> str:
        return f"({self.row},{self.col})"


@dataclass(frozen=True)
class Dims:
    """Width and height, width first by convention."""

    width: int
    height: int

    def flip(self) -> "Dims":
        return Dims(self.height, self.width)

    def product(self) -> int:
        return self.width * self.height

    def multiply(self, other: "Dims") -> "Dims":
        return Dims(self.width * other.width, self.height * other.height)


def count_bits(mask: int) -> int:
    return bin(mask).count("1")


def iter_bits(mask: int) -> List[int]:
    """Ordinals set in ``mask``, lowest first."""

    ordinals: List[int] = []
    ordinal = 0
    while mask:
        if mask & 1:
            ordinals.append(ordinal)
        mask >>= 1
        ordinal += 1
    return ordinals


@dataclass(eq=False)
class Cell:
    """A grid position holding either an assigned ordinal or a possibility mask.

    Bit ``i`` of ``possible`` is set while ordinal ``i`` is still consistent
    with every region containing the cell. Once assigned, the mask is cleared.
    """

    coord: Coord
    possible: int
    value: Optional[int] = None

    def is_filled(self) -> bool:
        return self.value is not None

    def is_possible(self, ordinal: int) -> bool:
        return bool(self.possible >> ordinal & 1)

    def set_value(self, ordinal: Optional[int]) -> None:
        self.value = ordinal
        if ordinal is not None:
            self.possible = 0

    def set_not_possible(self, ordinal: int) -> None:
        self.possible &= ~(1 << ordinal)

    def reset_possibilities(self, full_mask: int) -> None:
        self.possible = 0 if self.value is not None else full_mask

    def num_possible(self) -> int:
        return count_bits(self.possible)

    def only_possible(self) -> Optional[int]:
        """Return the single possible ordinal, or None if there are zero or several."""

        mask = self.possible
        if mask and not mask & (mask - 1):
            return mask.bit_length() - 1
        return None

    def all_possible(self) -> List[int]:
        return iter_bits(self.possible)
