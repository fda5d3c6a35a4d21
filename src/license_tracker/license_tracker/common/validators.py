from __future__ import annotations

import re
from datetime import date
from typing import Any

from ..core.constants import MAX_PENALTY_POINTS
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    value = (value or "").strip()
    if len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} is too long")
    return value


def require_email(value: str, field_name: str = "Email") -> str:
    value = (value or "").strip()
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"Please enter a valid {field_name.lower()} address")
    return value


def require_int_range(value: Any, field_name: str, min_value: int, max_value: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if number < min_value:
        raise ValidationError(f"{field_name} must be at least {min_value}")
    if number > max_value:
        raise ValidationError(f"{field_name} cannot exceed {max_value}")
    return number


def require_penalty_points(value: Any, field_name: str = "Penalty points", *, min_value: int = 0) -> int:
    return require_int_range(value, field_name, min_value, MAX_PENALTY_POINTS)


def require_date(value: Any, field_name: str) -> date:
    if isinstance(value, date):
        return value
    raw = (value or "").strip() if isinstance(value, str) else ""
    if not raw:
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid date (YYYY-MM-DD)")
