"""
Field coercion: raw token -> typed field value.

An empty token is always null, whatever the declared type, and skips every
check below. Declaring the field nullable is the schema author's job; a
non-nullable field left null is rejected when the record is built.

Datetime fields are validated here so that a bad value is reported as
InvalidDateTimeError naming the field. Every other conversion follows the
record builder's rules (format_kernel.domain.record.convert_value).
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from format_kernel.domain.record import convert_value
from format_kernel.domain.schema import FieldSchema
from format_kernel.domain.temporal import format_local_datetime, parse_local_datetime
from format_kernel.exceptions import InvalidDateTimeError


def validate_datetime_field(field: FieldSchema, token: str) -> None:
    """
    Ensure a datetime-annotated field holds an ISO-8601 local date-time.

    No-op for fields without the datetime annotation.
    """
    if not field.is_datetime:
        return
    try:
        parse_local_datetime(token)
    except ValueError:
        raise InvalidDateTimeError(field.name, token) from None


def coerce_field(token: str, field: FieldSchema) -> Any:
    """Convert one token for field; "" -> None."""
    if token == "":
        return None
    validate_datetime_field(field, token)
    return convert_value(field, token)


def render_field(value: Any, field: FieldSchema) -> str:
    """
    Text form of a field value that coerce_field() reads back to the same value.

    None renders as the empty token.
    """
    if value is None:
        return ""
    if field.is_datetime and isinstance(value, datetime):
        return format_local_datetime(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8")
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, (date, time, datetime)):
        return value.isoformat()
    return str(value)
