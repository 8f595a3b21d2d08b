"""Exception types raised by the RNG and odds engines."""

from __future__ import annotations

from typing import List


class OddlyError(ValueError):
    """Base class for every error the engines raise."""


class InvalidArgumentError(OddlyError):
    """A parameter is non-integer, negative, or outside the operation's domain."""


class InsufficientRangeError(OddlyError):
    """More distinct values were requested than the range or pool holds."""


class NumericalRangeError(OddlyError, ArithmeticError):
    """Both the direct and the logarithmic evaluation paths failed."""


def describe_call(operation: str, **params: object) -> str:
    """Render ``operation(a=1, b=2)`` for error messages."""
    args = ", ".join(f"{key}={value!r}" for key, value in params.items())
    return f"{operation}({args})"


def require_int(value: object, call: str, name: str) -> int:
    """Return ``value`` as an int, accepting integral floats, or raise."""
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{call}: {name} must be an integer, got a bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise InvalidArgumentError(f"{call}: {name} must be an integer")


def require_ints(operation: str, **params: object) -> List[int]:
    """Validate several integer parameters; the call description is only built on failure."""
    values = []
    for name, value in params.items():
        if type(value) is not int:
            value = require_int(value, describe_call(operation, **params), name)
        values.append(value)
    return values
