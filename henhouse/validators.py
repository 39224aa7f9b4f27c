"""Validation helpers applied to form payloads before records reach the store."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Type, TypeVar

from .exceptions import ValidationError
from .models import parse_datetime

E = TypeVar("E", bound=Enum)

TITLE_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 500


def _quantize_two_decimals(amount: Decimal) -> Decimal:
    """Round the amount to two decimal places using HALF_UP rounding."""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def parse_amount(raw: object, field: str) -> Decimal:
    """Convert raw input to a non-negative Decimal with exactly two fraction digits."""
    if raw is None or isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError) as exc:
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative")

    try:
        return _quantize_two_decimals(amount)
    except InvalidOperation as exc:
        # quantize fails once the cents exceed the context precision.
        raise ValidationError(f"{field} is too large") from exc


def parse_count(raw: object, field: str) -> int:
    """Convert raw input to a non-negative whole number."""
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a whole number")
    if isinstance(raw, int):
        count = raw
    elif isinstance(raw, str) and raw.strip().isascii() and raw.strip().isdecimal():
        count = int(raw.strip())
    else:
        raise ValidationError(f"{field} must be a whole number")
    if count < 0:
        raise ValidationError(f"{field} cannot be negative")
    return count


def validate_required_str(value: object, field: str, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return trimmed


def validate_optional_str(value: object, field: str, max_length: int) -> str:
    """Like validate_required_str, but missing or blank input becomes an empty string."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return ""
    return validate_required_str(value, field, max_length)


def validate_datetime(value: object, field: str) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        try:
            dt = parse_datetime(value)
        except ValueError as exc:
            raise ValidationError(f"{field} must be an ISO 8601 datetime") from exc
    else:
        raise ValidationError(f"{field} must be a datetime or ISO 8601 string")
    return dt.astimezone(timezone.utc)


def validate_enum(value: object, field: str, enum_cls: Type[E], default: Optional[E] = None) -> E:
    """Match ``value`` against an enum's display strings or member names, case-insensitively."""
    if value is None and default is not None:
        return default
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    canonical = value.strip().lower()
    for member in enum_cls:
        if canonical in (member.value.lower(), member.name.lower()):
            return member
    choices = ", ".join(member.value for member in enum_cls)
    raise ValidationError(f"{field} must be one of: {choices}")


def validate_bool(value: object, field: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be true or false")
    return value
