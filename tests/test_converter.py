import pytest

from beanstalk.converter import (
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    convert,
    supports,
)
from beanstalk.errors import MalformedValueError, UnsupportedTargetTypeError


def test_string_is_identity():
    assert convert(" spaced  value ", str) == " spaced  value "


@pytest.mark.parametrize("value, expected", [("3", 3), ("-17", -17), ("+8", 8), ("0", 0)])
def test_int_parses_decimal(value, expected):
    assert convert(value, int) == expected


def test_plain_int_has_no_width():
    assert convert("123456789012345678901234567890", int) == 123456789012345678901234567890


@pytest.mark.parametrize("value", ["abc", "1.5", "", "0x10", "1_000", " 3"])
def test_int_rejects_non_digits(value):
    with pytest.raises(MalformedValueError):
        convert(value, int)


@pytest.mark.parametrize(
    "target_type, lowest, highest",
    [
        (Int8, -128, 127),
        (Int16, -32768, 32767),
        (Int32, -(2**31), 2**31 - 1),
        (Int64, -(2**63), 2**63 - 1),
        (UInt8, 0, 255),
        (UInt16, 0, 65535),
        (UInt32, 0, 2**32 - 1),
        (UInt64, 0, 2**64 - 1),
    ],
)
def test_fixed_width_bounds(target_type, lowest, highest):
    assert convert(str(lowest), target_type) == lowest
    assert convert(str(highest), target_type) == highest

    with pytest.raises(MalformedValueError, match="out of range"):
        convert(str(highest + 1), target_type)


def test_unsigned_rejects_negative():
    with pytest.raises(MalformedValueError, match="negative value for unsigned type"):
        convert("-1", UInt32)


def test_signed_underflow_is_rejected():
    with pytest.raises(MalformedValueError, match="out of range"):
        convert("-129", Int8)


@pytest.mark.parametrize(
    "value, expected",
    [("1.5", 1.5), ("-2", -2.0), ("6.02e23", 6.02e23), ("1E-3", 0.001), (".5", 0.5), ("3.", 3.0)],
)
def test_float_parses_decimal_with_exponent(value, expected):
    assert convert(value, float) == expected


@pytest.mark.parametrize("value", ["nan", "inf", "1e", "one", "1.2.3"])
def test_float_rejects_non_decimal(value):
    with pytest.raises(MalformedValueError):
        convert(value, float)


@pytest.mark.parametrize("value, expected", [("true", True), ("FALSE", False), ("True", True)])
def test_bool_is_case_insensitive(value, expected):
    assert convert(value, bool) is expected


@pytest.mark.parametrize("value", ["yes", "1", "", "truthy"])
def test_bool_rejects_anything_else(value):
    with pytest.raises(MalformedValueError):
        convert(value, bool)


@pytest.mark.parametrize("value", ["hello", -42, 255, 0.1, 1e-05, 12345.678, True, False])
def test_stringified_values_convert_back(value):
    assert convert(str(value), type(value)) == value


def test_unsupported_target_type():
    with pytest.raises(UnsupportedTargetTypeError) as raised:
        convert("a,b", list)

    assert raised.value.target_type is list
    assert not supports(list)
    assert supports(UInt8)


def test_malformed_value_reports_value_and_type():
    with pytest.raises(MalformedValueError, match="Cannot convert 'abc' to int") as raised:
        convert("abc", int)

    assert raised.value.value == "abc"
    assert raised.value.target_type is int
