"""Bit-level operations and float/random conversions for big integers.

Values are plain Python integers, treated as a sign and a magnitude:
bit operations act on the magnitude and keep the sign, as a
sign-magnitude big number does.
"""

from __future__ import annotations

import math
from typing import Protocol

ATOM_BITS = 32
ATOM_MASK = (1 << ATOM_BITS) - 1
_U64_LIMIT = 1 << 64


class _RandomSource(Protocol):
    def rand(self) -> int: ...


def _signed(negative: bool, magnitude: int) -> int:
    return -magnitude if negative else magnitude


def _check_index(i: int) -> None:
    if i < 0:
        raise ValueError(f"bit index must not be negative, got {i}")


def bits(z: int) -> int:
    """Return the number of bits needed to write ``|z|``."""
    return abs(z).bit_length()


def set_bit(z: int, i: int) -> int:
    """Return `z` with bit `i` of its magnitude set; the sign is kept."""
    _check_index(i)
    return _signed(z < 0, abs(z) | (1 << i))


def clear_bit(z: int, i: int) -> int:
    """Return `z` with bit `i` of its magnitude cleared; the sign is kept."""
    _check_index(i)
    return _signed(z < 0, abs(z) & ~(1 << i))


def test_bit(z: int, i: int) -> bool:
    """Return True if bit `i` of ``|z|`` is set."""
    _check_index(i)
    return bool((abs(z) >> i) & 1)


def lshift(z: int, i: int) -> int:
    """Shift the magnitude of `z` left by `i` bits, keeping the sign."""
    _check_index(i)
    return _signed(z < 0, abs(z) << i)


def rshift(z: int, i: int) -> int:
    """Shift the magnitude of `z` right by `i` bits, keeping the sign.

    This truncates toward zero for negative values.
    """
    _check_index(i)
    return _signed(z < 0, abs(z) >> i)


def bitand(a: int, b: int) -> int:
    """Return the bitwise AND of the magnitudes of `a` and `b` (non-negative)."""
    return abs(a) & abs(b)


def to_float(z: int) -> float:
    """Convert to an approximate float, atom by atom; overflows to infinity."""
    magnitude = abs(z)
    atoms = []
    while magnitude:
        atoms.append(magnitude & ATOM_MASK)
        magnitude >>= ATOM_BITS
    result = 0.0
    base = float(1 << ATOM_BITS)
    for atom in reversed(atoms):
        result = atom + result * base
    return -result if z < 0 else result


def from_float(d: float) -> int:
    """Convert a float to an integer, truncating toward zero.

    The magnitude must fit in 64 bits.
    """
    if math.isnan(d) or math.isinf(d):
        raise ValueError(f"cannot convert {d!r} to an integer")
    magnitude = int(abs(d))
    if magnitude >= _U64_LIMIT:
        raise OverflowError(f"{d!r} does not fit in 64 bits")
    return _signed(d < 0, magnitude)


def random_bignum(generator: _RandomSource, length: int) -> int:
    """Return a random number of at most ``|length|`` 32-bit atoms.

    Each atom is one output of `generator.rand()`, least significant first.
    A negative `length` yields a non-positive number.
    """
    count = abs(length)
    magnitude = 0
    for index in range(count):
        magnitude |= (generator.rand() & ATOM_MASK) << (ATOM_BITS * index)
    return _signed(length < 0, magnitude)