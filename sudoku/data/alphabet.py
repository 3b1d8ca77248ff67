"""Symbol alphabets and default alphabet generators."""

from __future__ import annotations

from bisect import bisect_left
from typing import Iterator, List, Optional, Sequence, Tuple

from ..core.constants import SymbolStyle
from ..core.exceptions import ConfigurationError, UnknownSymbolError


EMPTY_SYMBOLS_ERROR = "All symbols must be non-empty"
DUPLICATE_SYMBOLS_ERROR = "There must be no identical symbols (duplicate {!r})"
NON_POSITIVE_LENGTH_ERROR = "The number of symbols to generate must be positive"
BAD_FIRST_LETTER_ERROR = (
    "An alphabetic range must start with a letter between 'a' and 'z', or 'A' and 'Z'"
)
TOO_MANY_LETTERS_ERROR = "An alphabetic range starting from {!r} cannot have more than {} symbols"


class Alphabet:
    """Validated, sorted set of symbols with dense ordinals.

    Ordinals follow sorted order, so comparing ordinals and comparing symbol
    strings always agree.
    """

    def __init__(self, symbols: Sequence[str]) -> None:
        if any(symbol is None or len(symbol) == 0 for symbol in symbols):
            raise ConfigurationError(EMPTY_SYMBOLS_ERROR)
        ordered = sorted(symbols)
        for previous, current in zip(ordered, ordered[1:]):
            if previous == current:
                raise ConfigurationError(DUPLICATE_SYMBOLS_ERROR.format(current))
        self._symbols: Tuple[str, ...] = tuple(ordered)
        self.max_width = max((len(symbol) for symbol in ordered), default=0)
        self.full_mask = (1 << len(ordered)) - 1

    @property
    def symbols(self) -> Tuple[str, ...]:
        return self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and self.lookup(symbol) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self._symbols == other._symbols

    def __hash__(self) -> int:
        return hash(self._symbols)

    def __repr__(self) -> str:
        return f"Alphabet({list(self._symbols)!r})"

    def lookup(self, symbol: str) -> Optional[int]:
        """Binary search for ``symbol``; None when it is not in the alphabet."""

        index = bisect_left(self._symbols, symbol)
        if index < len(self._symbols) and self._symbols[index] == symbol:
            return index
        return None

    def ordinal(self, symbol: str) -> int:
        index = self.lookup(symbol)
        if index is None:
            raise UnknownSymbolError(f"Symbol {symbol!r} is not in {self!r}")
        return index

    def symbol(self, ordinal: int) -> str:
        return self._symbols[ordinal]


def generate_numeric_range(first: int, length: int) -> List[str]:
    if length <= 0:
        raise ConfigurationError(NON_POSITIVE_LENGTH_ERROR)
    return [str(first + i) for i in range(length)]


def generate_alphabetic_range(first: str, length: int) -> List[str]:
    """Consecutive letters from ``first``, staying within its case."""

    if length <= 0:
        raise ConfigurationError(NON_POSITIVE_LENGTH_ERROR)
    lower = len(first) == 1 and "a" <= first <= "z"
    upper = len(first) == 1 and "A" <= first <= "Z"
    if not (lower or upper):
        raise ConfigurationError(BAD_FIRST_LETTER_ERROR)

    last = "Z" if upper else "z"
    max_length = ord(last) - ord(first) + 1
    if length > max_length:
        raise ConfigurationError(TOO_MANY_LETTERS_ERROR.format(first, max_length))
    return [chr(ord(first) + i) for i in range(length)]


def default_symbols(style: SymbolStyle, count: int) -> List[str]:
    if style == SymbolStyle.NUMERIC:
        return generate_numeric_range(1, count)
    if style == SymbolStyle.UPPER:
        return generate_alphabetic_range("A", count)
    return generate_alphabetic_range("a", count)
