"""Conversion of big integers to and from text in bases 2 to 36."""

from __future__ import annotations

from hpingtools.bigconv import MAX_BASE, MIN_BASE, digit_char, digit_value, max_power


def _check_base(base: int) -> None:
    if not MIN_BASE <= base <= MAX_BASE:
        raise ValueError(f"base must be between {MIN_BASE} and {MAX_BASE}, got {base}")


def to_str(value: int, base: int = 10) -> str:
    """Write `value` in `base` with lower-case digits and a leading '-' if negative."""
    _check_base(base)
    if value == 0:
        return "0"
    chunk, chunk_digits = max_power(base)
    magnitude = abs(value)
    digits: list[str] = []
    # Divide by the largest power of the base that fits in an atom, then
    # split each remainder into single digits.
    while magnitude:
        magnitude, part = divmod(magnitude, chunk)
        for _ in range(chunk_digits):
            part, digit = divmod(part, base)
            digits.append(digit_char(digit))
            if part == 0 and magnitude == 0:
                break
    if value < 0:
        digits.append("-")
    return "".join(reversed(digits))


def _guess_base(text: str) -> tuple[int, str]:
    if not text.startswith("0"):
        return 10, text
    rest = text[1:]
    prefix = rest[:1].lower()
    if prefix == "x":
        return 16, rest[1:]
    if prefix == "b":
        return 2, rest[1:]
    return 8, rest


def from_str(text: str, base: int = 10) -> int:
    """Parse `text` as an integer in `base`.

    Surrounding whitespace and a leading '-' are accepted. With base 0 the
    base is guessed: a leading '0x' means 16, '0b' means 2, '0' means 8 and
    anything else 10. Raises ValueError on a bad base or digit.
    """
    body = text.lstrip()
    negative = body.startswith("-")
    if negative:
        body = body[1:]
    if base == 0:
        base, body = _guess_base(body)
    _check_base(base)
    body = body.rstrip()
    result = 0
    for char in body:
        try:
            digit = digit_value(char)
        except ValueError:
            raise ValueError(f"invalid digit {char!r} in {text!r}") from None
        if digit >= base:
            raise ValueError(f"digit {char!r} out of range for base {base} in {text!r}")
        result = result * base + digit
    return -result if negative else result