"""Tape encoding for the two-stack representation.

The tape is split at the head into two integers. ``right`` holds the head
cell in bit 0 and the cells to its right in the higher bits. ``left`` holds
the cells to the left of the head, nearest cell in bit 0. Every bit above
``max_length`` is part of the implicit blank field of zeros.
"""

from typing import Iterable, List

from tapestack.alphabet import Symbol
from tapestack.errors import TapeBoundExceeded

# Max distance from the head that a 1 can be written on either side
MAX_LENGTH = 40


def max_val(max_length=MAX_LENGTH):
    """Capacity threshold: a side at or above this value cannot grow by a cell."""
    return 1 << (max_length - 1)


MAX_VAL = max_val(MAX_LENGTH)


def encode_input(symbols: Iterable[Symbol], max_length=MAX_LENGTH) -> int:
    """Fold a head-first symbol sequence into the ``right`` stack integer."""
    symbols = list(symbols)
    if len(symbols) > max_length:
        raise TapeBoundExceeded("input", max_length)

    value = 0
    for symbol in reversed(symbols):
        value = (value << 1) | symbol.value
    return value


def decode_symbols(value: int, length: int) -> List[Symbol]:
    """Read the lowest ``length`` bits of a stack integer back as symbols."""
    return [Symbol((value >> i) & 1) for i in range(length)]


def _to_binary(value, max_length):
    if value < 0 or value >> max_length:
        raise TapeBoundExceeded("render", max_length)
    return format(value, f"0{max_length}b")


def decode_to_string(left: int, right: int, max_length=MAX_LENGTH) -> str:
    """Render both stacks in tape order; the head cell is at index ``max_length``."""
    return _to_binary(left, max_length) + _to_binary(right, max_length)[::-1]


def count_ones(left: int, right: int) -> int:
    return bin(left).count("1") + bin(right).count("1")


def parse_symbols(text: str) -> List[Symbol]:
    """Parse a head-first string such as ``"0110"`` into symbols."""
    try:
        return [Symbol(int(ch)) for ch in text.strip()]
    except ValueError as e:
        raise ValueError(f"Tape input must contain only '0' and '1', got {text!r}") from e
