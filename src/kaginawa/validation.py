"""Single-argument checks shared by the builders and API clients."""

from collections.abc import Iterable
from datetime import datetime

from kaginawa.errors import (
    EmptyValueError,
    InvalidArgumentError,
    MissingValueError,
    OutOfRangeError,
)

MAX_PORT = 65535


def require_text(name: str, value: str | None) -> str:
    """Return ``value`` if it is a non-empty string."""
    if value is None:
        raise MissingValueError(name)
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {type(value).__name__}")
    if not value:
        raise EmptyValueError(name)
    return value


def require_int(name: str, value: int | None) -> int:
    if value is None:
        raise MissingValueError(name)
    # bool is an int subclass but never a meaningful count
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    return value


def require_non_negative(name: str, value: int | None) -> int:
    value = require_int(name, value)
    if value < 0:
        raise OutOfRangeError(name, value)
    return value


def require_positive(name: str, value: int | None) -> int:
    value = require_int(name, value)
    if value < 1:
        raise OutOfRangeError(name, value)
    return value


def require_port(name: str, value: int | None) -> int:
    value = require_int(name, value)
    if value < 0 or value > MAX_PORT:
        raise OutOfRangeError(name, value)
    return value


def require_epoch_seconds(name: str, value: int | datetime | None) -> int:
    """Accept epoch seconds or a timezone-aware datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            raise InvalidArgumentError(f"{name} must be timezone-aware")
        value = int(value.timestamp())
    return require_non_negative(name, value)


def require_items(name: str, values: Iterable | None) -> tuple:
    """Copy ``values`` into an immutable tuple."""
    if values is None:
        raise MissingValueError(name)
    if isinstance(values, (str, bytes)):
        raise TypeError(f"{name} must be a sequence, not a string")
    return tuple(values)
