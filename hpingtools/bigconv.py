"""Digit tables and size estimates for big number string conversion.

Numbers are stored as little-endian sequences of 32-bit atoms, so every
table here is expressed in terms of a 32-bit atom.
"""

from __future__ import annotations

MIN_BASE = 2
MAX_BASE = 36
ATOM_BITS = 32
ATOM_MAX = (1 << ATOM_BITS) - 1

DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

_DIGIT_VALUES = {ch: value for value, ch in enumerate(DIGITS)}

# Number of digits in base b needed to write one 32-bit atom (log_b 2**32).
_BASE_TABLE = (
    0.0, 0.0,
    32.000000, 20.189752, 16.000000, 13.781650, 12.379290, 11.398630,
    10.666667, 10.094876, 9.632960, 9.250074, 8.926174, 8.647621,
    8.404785, 8.190657, 8.000000, 7.828817, 7.673999, 7.533085,
    7.404103, 7.285448, 7.175802, 7.074071, 6.979337, 6.890825,
    6.807874, 6.729917, 6.656467, 6.587099, 6.521442, 6.459171,
    6.400000, 6.343676, 6.289972, 6.238689, 6.189645,
)


def _check_base(base: int) -> None:
    if not MIN_BASE <= base <= MAX_BASE:
        raise ValueError(f"base must be between {MIN_BASE} and {MAX_BASE}, got {base}")


def digit_value(char: str) -> int:
    """Return the numeric value of a digit character, case-insensitively."""
    if len(char) != 1:
        raise ValueError(f"expected a single character, got {char!r}")
    try:
        return _DIGIT_VALUES[char.lower()]
    except KeyError:
        raise ValueError(f"invalid digit {char!r}") from None


def digit_char(value: int) -> str:
    """Return the lower-case digit character for a value in 0..35."""
    if not 0 <= value < len(DIGITS):
        raise ValueError(f"digit value out of range: {value}")
    return DIGITS[value]


def size_in_base(atoms: int, base: int) -> int:
    """Over-estimate the digits needed to write a number of `atoms` atoms.

    The minus sign and any terminator are not included.
    """
    _check_base(base)
    if atoms < 0:
        raise ValueError("atom count must not be negative")
    return int((_BASE_TABLE[base] + 0.000001) * atoms + 1)


def max_power(base: int) -> tuple[int, int]:
    """Return (base**e, e) for the largest e with base**e fitting in an atom."""
    _check_base(base)
    power, exponent = base, 1
    while power * base <= ATOM_MAX:
        power *= base
        exponent += 1
    return power, exponent


def popcount_byte(n: int) -> int:
    """Return the number of set bits in a byte value."""
    if not 0 <= n <= 0xFF:
        raise ValueError(f"byte value out of range: {n}")
    return bin(n).count("1")