"""Coercion of property strings to the declared types of configuration fields.

Python's ``int`` has no width, so fixed-width targets are expressed with the
``NewType`` aliases defined here. A field annotated ``Annotated[Int16,
Config()]`` holds a plain ``int`` at runtime, but its value is range-checked
against 16-bit signed bounds when bound.
"""

import re
from typing import Any, NewType

from beanstalk.errors import MalformedValueError, UnsupportedTargetTypeError

__all__ = [
    "convert",
    "supports",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
]

Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
UInt8 = NewType("UInt8", int)
UInt16 = NewType("UInt16", int)
UInt32 = NewType("UInt32", int)
UInt64 = NewType("UInt64", int)


def _signed(bits: int) -> tuple[int, int]:
    return -(2 ** (bits - 1)), 2 ** (bits - 1) - 1


def _unsigned(bits: int) -> tuple[int, int]:
    return 0, 2**bits - 1


_INTEGER_BOUNDS: dict[Any, tuple[int, int]] = {
    Int8: _signed(8),
    Int16: _signed(16),
    Int32: _signed(32),
    Int64: _signed(64),
    UInt8: _unsigned(8),
    UInt16: _unsigned(16),
    UInt32: _unsigned(32),
    UInt64: _unsigned(64),
}

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def supports(target_type: Any) -> bool:
    return target_type in (str, bool, int, float) or target_type in _INTEGER_BOUNDS


def convert(value: str, target_type: Any) -> Any:
    """Convert a property value to ``target_type``.

    Args:
        value: The raw property string.
        target_type: ``str``, ``bool``, ``int``, ``float`` or one of the
            fixed-width integer types of this module.

    Returns:
        The converted value.

    Raises:
        UnsupportedTargetTypeError: If ``target_type`` has no conversion.
        MalformedValueError: If ``value`` cannot be represented as ``target_type``.

    Example:
        >>> convert("3", int)        # 3
        >>> convert("TRUE", bool)    # True
        >>> convert("300", UInt8)    # raises MalformedValueError
    """
    if target_type is str:
        return value
    if target_type is bool:
        return _to_bool(value)
    if target_type is int:
        return _to_int(value, target_type)
    if target_type in _INTEGER_BOUNDS:
        return _to_bounded_int(value, target_type)
    if target_type is float:
        return _to_float(value)
    raise UnsupportedTargetTypeError(target_type)


def _to_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise MalformedValueError(value, bool, "expected 'true' or 'false'")


def _to_int(value: str, target_type: Any) -> int:
    if not _INTEGER_PATTERN.fullmatch(value):
        raise MalformedValueError(value, target_type, "not a decimal integer")
    return int(value)


def _to_bounded_int(value: str, target_type: Any) -> int:
    result = _to_int(value, target_type)
    lower, upper = _INTEGER_BOUNDS[target_type]
    if result < 0 and lower == 0:
        raise MalformedValueError(value, target_type, "negative value for unsigned type")
    if not lower <= result <= upper:
        raise MalformedValueError(value, target_type, f"out of range [{lower}, {upper}]")
    return result


def _to_float(value: str) -> float:
    if not _FLOAT_PATTERN.fullmatch(value):
        raise MalformedValueError(value, float, "not a decimal number")
    return float(value)
