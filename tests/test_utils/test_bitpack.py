"""Tests for fixed-width bit field packing."""

import numpy as np
import pytest

from chunkgrid.utils.bitpack import (
    bits_for_palette,
    empty_words,
    read_field,
    to_signed_words,
    word_count,
    write_field,
)


@pytest.mark.parametrize(
    "palette_size,bits",
    [(1, 1), (2, 1), (3, 2), (4, 2), (5, 3), (8, 3), (9, 4), (16, 4), (17, 5), (256, 8)],
)
def test_bits_for_palette(palette_size, bits):
    assert bits_for_palette(palette_size) == bits


def test_bits_for_empty_palette_rejected():
    with pytest.raises(ValueError):
        bits_for_palette(0)


def test_word_count_rounds_up():
    assert word_count(0, 3) == 0
    assert word_count(21, 3) == 1  # 63 bits
    assert word_count(22, 3) == 2  # 66 bits
    assert word_count(64, 1) == 1
    assert word_count(65, 1) == 2


def test_field_crossing_word_boundary():
    # Five palette entries need 3-bit fields; field 21 starts at bit 63.
    bits = bits_for_palette(5)
    assert bits == 3
    words = empty_words(30, bits)
    write_field(words, bits, 21, 4)  # 0b100

    # Low bit (0) lands in bit 63 of word 0, the remaining 0b10 in word 1.
    assert int(words[0]) == 0
    assert int(words[1]) == 0b10
    assert read_field(words, bits, 21) == 4


def test_field_crossing_word_boundary_sets_bit_63():
    words = empty_words(30, 3)
    write_field(words, 3, 21, 0b111)
    assert int(words[0]) == 1 << 63
    assert int(words[1]) == 0b11
    assert read_field(words, 3, 21) == 7
    assert read_field(words, 3, 20) == 0
    assert read_field(words, 3, 22) == 0


def test_neighbouring_fields_do_not_bleed():
    words = empty_words(40, 3)
    values = [(i * 5) % 8 for i in range(40)]
    for i, v in enumerate(values):
        write_field(words, 3, i, v)
    assert [read_field(words, 3, i) for i in range(40)] == values


def test_fields_fill_first_word_low_bits_first():
    words = empty_words(4, 2)
    write_field(words, 2, 0, 1)
    write_field(words, 2, 1, 2)
    write_field(words, 2, 3, 3)
    assert int(words[0]) == 0b11_00_10_01


def test_value_too_wide_rejected():
    words = empty_words(4, 2)
    with pytest.raises(ValueError):
        write_field(words, 2, 0, 4)
    with pytest.raises(ValueError):
        write_field(words, 2, 0, -1)


def test_signed_view_keeps_bits():
    words = np.array([1 << 63, 5], dtype=np.uint64)
    signed = to_signed_words(words)
    assert signed.dtype == np.int64
    assert int(signed[0]) == -(1 << 63)
    assert int(signed[1]) == 5
