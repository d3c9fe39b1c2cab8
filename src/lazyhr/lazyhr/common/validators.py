from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.enums import ValidationReason
from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(ValidationReason.INVALID_VALUE, f"{field_name} must not be empty")
    return value.strip()


def require_non_negative(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(ValidationReason.INVALID_VALUE, f"{field_name} must be an integer")
    if number < 0:
        raise ValidationError(ValidationReason.INVALID_VALUE, f"{field_name} must be >= 0")
    return number


def require_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(ValidationReason.INVALID_VALUE, f"{field_name} must be one of: {allowed}")


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None
