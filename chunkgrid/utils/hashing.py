"""Chunk hash oracle — fixed 64-bit avalanche mix over packed (x, z). No engine imports."""

from __future__ import annotations

from collections.abc import Callable

from chunkgrid.errors import ConfigurationError

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF

# 2^64 / golden ratio, odd.
_GOLDEN_GAMMA = 0x9E3779B97F4A7C15

HashFn = Callable[[int, int], int]


def pack_key(x: int, z: int) -> int:
    """z in the high 32 bits, x in the low 32 bits (two's complement)."""
    return ((z & _MASK32) << 32) | (x & _MASK32)


def mix64(value: int) -> int:
    h = (value * _GOLDEN_GAMMA) & _MASK64
    h ^= h >> 32
    h ^= h >> 16
    return h


def chunk_hash(x: int, z: int, mask: int) -> int:
    return mix64(pack_key(x, z)) & mask


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def make_hasher(hash_space_size: int) -> HashFn:
    """Return ``(x, z) -> hash`` bounded to ``[0, hash_space_size)``."""
    if not is_power_of_two(hash_space_size):
        raise ConfigurationError(
            f"hash space size must be a power of two, got {hash_space_size}"
        )
    mask = hash_space_size - 1

    def _hash(x: int, z: int) -> int:
        return chunk_hash(x, z, mask)

    return _hash
