from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.constants import MAX_NOTES_LENGTH
from ..core.exceptions import InvalidRangeError, ValidationError


def require_date_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise InvalidRangeError("Start date cannot be after end date")


def normalize_notes(value: Optional[str], field_name: str = "Notes") -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    text = value.strip()
    if not text:
        return None
    if len(text) > MAX_NOTES_LENGTH:
        raise ValidationError(f"{field_name} must be at most {MAX_NOTES_LENGTH} characters")
    return text


def parse_year(value: Optional[str]) -> Optional[int]:
    if value is None or not str(value).strip():
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"Invalid year parameter {value!r}") from None
