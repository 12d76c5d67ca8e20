"""Fixed-width bit fields packed into 64-bit words.

Field ``i`` of width ``w`` starts at bit ``i * w`` of the stream. Bit ``b`` of
the stream is bit ``b % 64`` of word ``b // 64``. Fields are not padded to word
boundaries: a field that straddles one keeps its low bits in the first word and
the remainder in the low bits of the next.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

WORD_BITS = 64
_WORD_MASK = (1 << WORD_BITS) - 1


def bits_for_palette(palette_size: int) -> int:
    """Smallest field width able to hold indices ``0 .. palette_size - 1`` (min 1)."""
    if palette_size < 1:
        raise ValueError(f"palette size must be positive, got {palette_size}")
    return max(1, (palette_size - 1).bit_length())


def word_count(field_count: int, bit_width: int) -> int:
    return -(-field_count * bit_width // WORD_BITS)


def empty_words(field_count: int, bit_width: int) -> NDArray[np.uint64]:
    return np.zeros(word_count(field_count, bit_width), dtype=np.uint64)


def write_field(words: NDArray[np.uint64], bit_width: int, index: int, value: int) -> None:
    """OR ``value`` into field ``index``. Storage is expected to be zeroed there."""
    if not 1 <= bit_width <= WORD_BITS:
        raise ValueError(f"bit width must be in [1, 64], got {bit_width}")
    if value < 0 or value >> bit_width:
        raise ValueError(f"value {value} does not fit in {bit_width} bits")

    offset = index * bit_width
    word, bit = divmod(offset, WORD_BITS)
    words[word] = int(words[word]) | ((value << bit) & _WORD_MASK)
    if bit + bit_width > WORD_BITS:
        words[word + 1] = int(words[word + 1]) | (value >> (WORD_BITS - bit))


def read_field(words: NDArray[np.uint64], bit_width: int, index: int) -> int:
    offset = index * bit_width
    word, bit = divmod(offset, WORD_BITS)
    value = int(words[word]) >> bit
    if bit + bit_width > WORD_BITS:
        value |= int(words[word + 1]) << (WORD_BITS - bit)
    return value & ((1 << bit_width) - 1)


def to_signed_words(words: NDArray[np.uint64]) -> NDArray[np.int64]:
    """Reinterpret the words as signed 64-bit, as tag formats store them."""
    return words.view(np.int64)
