"""Arbitrary precision integer arithmetic with truncating semantics.

Values are plain Python integers. Division truncates toward zero, the
remainder takes the sign of the dividend, and the modular reduction always
yields a non-negative result.
"""

from __future__ import annotations

import math


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def cmp(a: int, b: int) -> int:
    """Compare `a` and `b`: 1 if a > b, 0 if equal, -1 if a < b."""
    return _sign(a - b)


def cmpabs(a: int, b: int) -> int:
    """Compare the absolute values of `a` and `b`: 1, 0 or -1."""
    return _sign(abs(a) - abs(b))


def _check_divisor(d: int) -> None:
    if d == 0:
        raise ZeroDivisionError("division by zero")


def tdiv_qr(z: int, d: int) -> tuple[int, int]:
    """Return (quotient, remainder) of `z / d` truncated toward zero.

    The remainder has the sign of the dividend and
    ``quotient * d + remainder == z`` always holds.
    """
    _check_divisor(d)
    quotient, remainder = divmod(abs(z), abs(d))
    if (z < 0) != (d < 0):
        quotient = -quotient
    if z < 0:
        remainder = -remainder
    return quotient, remainder


def tdiv_q(z: int, d: int) -> int:
    """Return the quotient of `z / d` truncated toward zero."""
    return tdiv_qr(z, d)[0]


def tdiv_r(z: int, d: int) -> int:
    """Return the remainder of truncated division; it has the sign of `z`."""
    return tdiv_qr(z, d)[1]


def mod(z: int, m: int) -> int:
    """Reduce `z` modulo `m`; the result lies in ``0 <= r < |m|``."""
    remainder = tdiv_r(z, m)
    if remainder and z < 0:
        remainder += abs(m)
    return remainder


def _check_exponent(exp: int) -> None:
    if exp < 0:
        raise ValueError("negative exponents are not supported")


def powm(base: int, exp: int, modulus: int) -> int:
    """Return ``base**exp`` reduced modulo `modulus` (non-negative result)."""
    _check_exponent(exp)
    _check_divisor(modulus)
    magnitude = pow(abs(base), exp, abs(modulus))
    if base < 0 and exp & 1:
        magnitude = -magnitude
    return mod(magnitude, modulus)


def power(base: int, exp: int) -> int:
    """Return ``base**exp`` for a non-negative exponent."""
    _check_exponent(exp)
    return base**exp


def isqrt(z: int) -> int:
    """Return the integer square root of ``|z|``: r*r <= |z| < (r+1)**2."""
    return math.isqrt(abs(z))


def gcd(a: int, b: int) -> int:
    """Return the greatest common divisor of ``|a|`` and ``|b|``.

    ``gcd(a, 0) == |a|`` and ``gcd(0, b) == |b|``.
    """
    a, b = abs(a), abs(b)
    if a == 0:
        return b
    if b == 0:
        return a
    shift = 0
    while not (a | b) & 1:
        a >>= 1
        b >>= 1
        shift += 1
    while a:
        while not a & 1:
            a >>= 1
        while not b & 1:
            b >>= 1
        if a >= b:
            a = (a - b) >> 1
        else:
            b = (b - a) >> 1
    return b << shift


def factorial(n: int) -> int:
    """Return ``n!`` for n >= 1; by this library's convention 0 yields 0."""
    if n < 0:
        raise ValueError("factorial of a negative number")
    if n == 0:
        return 0
    result = 1
    for factor in range(2, n + 1):
        result *= factor
    return result