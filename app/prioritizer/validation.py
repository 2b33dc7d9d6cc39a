"""
Field checks shared by the payload validators.

Each check appends human-readable messages to `errors` and returns nothing;
callers surface the first message. A key that is absent is only an error
when `required` is set, a key present with null is always an error unless
the check says otherwise.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

# Bounds of the SQL store's Integer columns.
INT_COLUMN_MIN = -(2**31)
INT_COLUMN_MAX = 2**31 - 1


def is_int(value: Any) -> bool:
    # bool is an int subclass; JSON true/false are not scores.
    return isinstance(value, int) and not isinstance(value, bool)


def check_text(
    payload: dict,
    key: str,
    errors: list[str],
    *,
    required: bool = False,
    min_length: int = 1,
    choices: Iterable[str] | None = None,
) -> None:
    if key not in payload:
        if required:
            errors.append(f"{key} is required.")
        return
    value = payload[key]
    if value is None:
        errors.append(f"{key} must not be null.")
        return
    if not isinstance(value, str):
        errors.append(f"{key} must be a string.")
        return
    if len(value.strip()) < min_length:
        if min_length == 1:
            errors.append(f"{key} must not be empty.")
        else:
            errors.append(f"{key} must be at least {min_length} characters.")
        return
    if choices is not None:
        allowed = tuple(choices)
        if value.strip() not in allowed:
            errors.append(f"Invalid {key}. Must be one of: {', '.join(allowed)}")


def check_int(
    payload: dict,
    key: str,
    errors: list[str],
    *,
    required: bool = False,
    minimum: int | None = None,
    maximum: int | None = None,
) -> None:
    if key not in payload:
        if required:
            errors.append(f"{key} is required.")
        return
    value = payload[key]
    if value is None:
        errors.append(f"{key} must not be null.")
        return
    if not is_int(value):
        errors.append(f"{key} must be an integer.")
        return
    if minimum is not None and maximum is not None and not (minimum <= value <= maximum):
        errors.append(f"{key} must be between {minimum} and {maximum}.")
    elif minimum is not None and value < minimum:
        errors.append(f"{key} must be at least {minimum}.")
    elif maximum is not None and value > maximum:
        errors.append(f"{key} must be at most {maximum}.")


def check_string_list(payload: dict, key: str, errors: list[str]) -> None:
    """Null is accepted and means an empty list."""
    if key not in payload or payload[key] is None:
        return
    value = payload[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        errors.append(f"{key} must be a list of strings.")


def clean_text(value: str) -> str:
    return value.strip()


def clean_string_list(value: list[str] | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value if v.strip()]
