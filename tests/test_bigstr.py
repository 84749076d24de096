import pytest

from hpingtools.bigstr import from_str, to_str

VALUES = [0, 1, -1, 7, 255, -256, 10**20, -(2**100) + 3, 2**64 - 1, 123456789012345678901234567890]


@pytest.mark.parametrize("value", VALUES)
@pytest.mark.parametrize("base", [2, 3, 8, 10, 16, 36])
def test_round_trip(value, base):
    assert from_str(to_str(value, base), base) == value


@pytest.mark.parametrize("value", VALUES)
@pytest.mark.parametrize("base", [2, 7, 10, 16, 36])
def test_matches_python_parsing(value, base):
    assert int(to_str(value, base), base) == value


@pytest.mark.parametrize("value", VALUES)
def test_decimal_matches_str(value):
    assert to_str(value, 10) == str(value)


def test_zero_is_single_digit():
    assert to_str(0, 2) == "0"


def test_hex_is_lower_case():
    assert to_str(255, 16) == "ff"


def test_no_leading_zeros_across_chunks():
    text = to_str(10**9, 10)
    assert text[0] == "1"
    assert len(text) == 10


def test_negative_has_minus_prefix():
    text = to_str(-12345, 10)
    assert text.startswith("-")
    assert text[1:] == to_str(12345, 10)


def test_whitespace_and_sign():
    assert from_str("  -42  ", 10) == -42


def test_upper_case_digits_accepted():
    assert from_str("FF", 16) == from_str("ff", 16)


@pytest.mark.parametrize(
    "text, expected",
    [("0x1f", 31), ("0X1F", 31), ("017", 15), ("0b101", 5), ("99", 99), ("-0x10", -16), ("0", 0)],
)
def test_base_guess(text, expected):
    assert from_str(text, 0) == expected


def test_empty_body_is_zero():
    assert from_str("", 10) == 0


@pytest.mark.parametrize("base", [1, 37, -2])
def test_bad_base_to_str(base):
    with pytest.raises(ValueError):
        to_str(5, base)


@pytest.mark.parametrize("base", [1, 37])
def test_bad_base_from_str(base):
    with pytest.raises(ValueError):
        from_str("5", base)


def test_digit_out_of_range():
    with pytest.raises(ValueError):
        from_str("129", 8)


def test_invalid_character():
    with pytest.raises(ValueError):
        from_str("12_3", 10)


def test_inner_space_rejected():
    with pytest.raises(ValueError):
        from_str("- 5", 10)