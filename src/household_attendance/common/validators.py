from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def optional_text(value: Any, field_name: str, max_len: int) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    value = value.strip()
    if not value:
        return None
    if len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def require_coordinate(value: Any, field_name: str, bound: float) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} is invalid")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if not -bound <= number <= bound:
        raise ValidationError(f"{field_name} must be between {-bound:g} and {bound:g}")
    return number
