"""
Validation functions for monitor parameters.

All validators raise ``InvalidArgumentError`` carrying the name of the
offending field.
"""

import re
from typing import Any, Iterable, List, Optional

from .exceptions import InvalidArgumentError

_PID_PATTERN = re.compile(r"\d+", re.ASCII)

# Shapes accepted wherever "one id or a collection of ids" is allowed.
PID_COLLECTION_TYPES = (list, tuple, set, frozenset)


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is an integer within bounds.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        InvalidArgumentError: If validation fails
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(
            f"{field_name} must be an integer, got {value!r}",
            field_name=field_name,
            value=value
        )
    if value < min_value:
        raise InvalidArgumentError(
            f"{field_name} must be >= {min_value}, got {value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and value > max_value:
        raise InvalidArgumentError(
            f"{field_name} must be <= {max_value}, got {value}",
            field_name=field_name,
            value=value
        )
    return value


def validate_positive_float(
    value: Any,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a strictly positive number.

    Booleans and numeric strings are rejected: a duration has to be given
    as a real number.

    Args:
        value: Value to validate
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        InvalidArgumentError: If validation fails
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(
            f"{field_name} must be a number, got {value!r}",
            field_name=field_name,
            value=value
        )
    float_value = float(value)
    # NaN fails this comparison as well.
    if not float_value > 0:
        raise InvalidArgumentError(
            f"{field_name} must be > 0, got {value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise InvalidArgumentError(
            f"{field_name} must be <= {max_value}, got {value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_enum_choice(
    value: Any,
    valid_choices: List[str],
    field_name: str = "value"
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Raises:
        InvalidArgumentError: If value is not in valid_choices
    """
    if value not in valid_choices:
        raise InvalidArgumentError(
            f"{field_name} must be one of {valid_choices}, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_bool(value: Any, field_name: str = "value") -> bool:
    """Validate that a value is a real boolean."""
    if not isinstance(value, bool):
        raise InvalidArgumentError(
            f"{field_name} must be a boolean, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def normalize_pid(value: Any, field_name: str = "pid") -> int:
    """
    Normalize a process id to the canonical ``int`` form.

    Integers and strings of decimal digits (surrounding whitespace allowed)
    are accepted. Booleans and negative numbers are not process ids.

    Examples:
        >>> normalize_pid(" 42 ")
        42
        >>> normalize_pid(7)
        7

    Raises:
        InvalidArgumentError: If the value is not a process id
    """
    if isinstance(value, bool):
        pass
    elif isinstance(value, int):
        if value >= 0:
            return value
    elif isinstance(value, str):
        stripped = value.strip()
        if _PID_PATTERN.fullmatch(stripped):
            return int(stripped)
    raise InvalidArgumentError(
        f"{field_name} must be a non-negative integer or numeric string, got {value!r}",
        field_name=field_name,
        value=value
    )


def is_pid_scalar(value: Any) -> bool:
    """Return True if value has the shape of a single id (str or int)."""
    return isinstance(value, (str, int)) and not isinstance(value, bool)


def normalize_pid_collection(values: Iterable[Any], field_name: str = "pids") -> List[int]:
    """
    Normalize every entry of a collection, dropping duplicates.

    Order of first occurrence is preserved.

    Raises:
        InvalidArgumentError: If any entry is not a process id
    """
    normalized: List[int] = []
    seen = set()
    for index, value in enumerate(values):
        pid = normalize_pid(value, field_name=f"{field_name}[{index}]")
        if pid not in seen:
            seen.add(pid)
            normalized.append(pid)
    return normalized
