"""
Validation utilities for unioauth.

All validation functions raise ValidationError (or ConfigError for missing
configuration keys) with descriptive messages when validation fails.

Example:
    >>> validate_range(0, "timeout", min_value=0.1)
    ValidationError: Invalid 'timeout': must be at least 0.1 (got 0)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .exceptions import ConfigError, ValidationError

# =============================================================================
# TYPE VALIDATION
# =============================================================================


def validate_type(value: object, expected_type: type | tuple[type, ...], field_name: str) -> None:
    """Validate that value is of expected type.

    Args:
        value: The value to validate
        expected_type: Type or tuple of types to check against
        field_name: Name of the field (for error messages)

    Raises:
        ValidationError: If value is not of expected type
    """
    if not isinstance(value, expected_type):
        type_names = (
            expected_type.__name__
            if isinstance(expected_type, type)
            else " or ".join(t.__name__ for t in expected_type)
        )
        raise ValidationError(
            field_name, value, f"must be {type_names}, got {type(value).__name__}"
        )


def validate_string(value: object, field_name: str, allow_empty: bool = False) -> str:
    """Validate that value is a string (optionally non-empty).

    Returns:
        The validated string

    Raises:
        ValidationError: If value is not a string or is empty when not allowed
    """
    validate_type(value, str, field_name)
    assert isinstance(value, str)  # for type narrowing

    if not allow_empty and not value:
        raise ValidationError(field_name, value, "must be a non-empty string")

    return value


# =============================================================================
# RANGE VALIDATION
# =============================================================================


def validate_range(
    value: float,
    field_name: str,
    min_value: float | None = None,
    max_value: float | None = None,
) -> None:
    """Validate that a number is within specified range (inclusive).

    Raises:
        ValidationError: If value is not a number or is outside range
    """
    # bool is an int subclass; a timeout of True is always a mistake
    if isinstance(value, bool):
        raise ValidationError(field_name, value, "must be int or float, got bool")
    validate_type(value, (int, float), field_name)

    if min_value is not None and value < min_value:
        raise ValidationError(field_name, value, f"must be at least {min_value}")

    if max_value is not None and value > max_value:
        raise ValidationError(field_name, value, f"must be at most {max_value}")


# =============================================================================
# CONFIGURATION VALIDATION
# =============================================================================


def validate_required_keys(config: Mapping[str, Any], required: Iterable[str]) -> None:
    """Validate that every required key is present and non-empty.

    Keys are checked in the given order so the error always names the
    first missing one.

    Args:
        config: Configuration mapping supplied by the caller
        required: Key names required by the selected protocol variant

    Raises:
        ConfigError: Naming the first key that is missing or empty

    Example:
        >>> validate_required_keys({"client_id": ""}, ["client_id"])
        ConfigError: client_id is required.
    """
    for key in required:
        if not config.get(key):
            raise ConfigError(key)


def validate_choice(value: str, field_name: str, choices: Iterable[str]) -> str:
    """Validate that value is one of the allowed choices."""
    allowed = tuple(choices)
    if value not in allowed:
        raise ValidationError(field_name, value, f"must be one of {', '.join(allowed)}")
    return value


__all__ = [
    "validate_type",
    "validate_string",
    "validate_range",
    "validate_required_keys",
    "validate_choice",
]
