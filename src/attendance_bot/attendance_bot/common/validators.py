from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} bo'sh bo'lmasligi kerak")
    return value.strip()


def require_positive_int(value: str, field_name: str) -> int:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} butun son bo'lishi kerak")
    if number <= 0:
        raise ValidationError(f"{field_name} musbat bo'lishi kerak")
    return number
