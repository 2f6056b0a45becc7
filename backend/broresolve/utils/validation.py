from __future__ import annotations
"""Reusable validation helpers for request payloads.

Enum-backed fields are coerced to their enum member so callers never compare
raw strings, and every failure carries consistent 400 semantics.
"""
import re
from typing import Optional, Type, TypeVar
import enum
from broresolve.errors import ValidationError

E = TypeVar('E', bound=enum.Enum)

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def validate_choice(value, enum_cls: Type[E], field_name: str = 'status') -> E:
    """Coerce value into enum_cls or raise ValidationError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ', '.join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} invalid (expected one of: {allowed})")


def validate_optional_choice(value, enum_cls: Type[E], default: E, field_name: str) -> E:
    if value is None or value == '':
        return default
    return validate_choice(value, enum_cls, field_name)


def validate_text(value, field_name: str, min_len: int = 1, max_len: Optional[int] = None) -> str:
    """Strip and length-check a required text field."""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} required")
    stripped = value.strip()
    if len(stripped) < min_len:
        if min_len <= 1:
            raise ValidationError(f"{field_name} required")
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    if max_len is not None and len(stripped) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return stripped


def is_valid_email(value) -> bool:
    return isinstance(value, str) and bool(EMAIL_RE.match(value))


__all__ = ['validate_choice', 'validate_optional_choice', 'validate_text', 'is_valid_email', 'EMAIL_RE']
