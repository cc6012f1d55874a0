"""
Structured records and their builder.

RecordBuilder is the mutable accumulator a reader fills field by field for
one line. It is never shared across lines or threads. build() checks
nullability and freezes the values into a StructuredRecord.

String conversion (convert_and_set):

    boolean        "true" in any case -> True, anything else -> False
    int / long     optional sign plus digits, range-checked
    float / double Python float syntax
    bytes          UTF-8 encoded
    string         unchanged
    date           ISO date
    time-*         ISO time
    timestamp-*    ISO date-time; naive values are taken as UTC
    datetime       ISO-8601 local date-time (see temporal.py)
    decimal        Decimal, checked against the field's precision and scale
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from datetime import UTC, date, datetime, time
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any

from format_kernel.domain.schema import FieldSchema, FieldType, LogicalType, Schema, int_range
from format_kernel.domain.temporal import parse_local_datetime
from format_kernel.exceptions import FieldConversionError, NullFieldError, UnknownFieldError

_INTEGER = re.compile(r"[+-]?\d+")


class StructuredRecord(Mapping[str, Any]):
    """Immutable record: field name -> value, in schema order."""

    __slots__ = ("_schema", "_values")

    def __init__(self, schema: Schema, values: Mapping[str, Any]):
        self._schema = schema
        self._values = MappingProxyType(
            {name: values.get(name) for name in schema.field_names}
        )

    @property
    def schema(self) -> Schema:
        return self._schema

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"StructuredRecord({self._schema.name}, {dict(self._values)!r})"


class RecordBuilder:
    """Mutable accumulator for one record of a given schema."""

    def __init__(self, schema: Schema):
        self._schema = schema
        self._values: dict[str, Any] = {}

    @property
    def schema(self) -> Schema:
        return self._schema

    def _field(self, name: str) -> FieldSchema:
        f = self._schema.get_field(name)
        if f is None:
            raise UnknownFieldError(name)
        return f

    def set(self, name: str, value: Any) -> RecordBuilder:
        """Set an already-typed value (None allowed; nullability is checked at build)."""
        self._field(name)
        self._values[name] = value
        return self

    def convert_and_set(self, name: str, value: str | None) -> RecordBuilder:
        """Convert a string to the field's declared type and set it."""
        f = self._field(name)
        self._values[name] = None if value is None else convert_value(f, value)
        return self

    def get(self, name: str) -> Any:
        return self._values.get(name)

    def values(self) -> dict[str, Any]:
        """Copy of the values set so far."""
        return dict(self._values)

    def build(self) -> StructuredRecord:
        """
        Finalise the record.

        Raises:
            NullFieldError: a non-nullable field is unset or None.
        """
        for f in self._schema.fields:
            if self._values.get(f.name) is None and not f.nullable:
                raise NullFieldError(f.name)
        return StructuredRecord(self._schema, self._values)


# -----------------------------------------------------------------------------
# String conversion
# -----------------------------------------------------------------------------


def _fail(f: FieldSchema, value: str, reason: str = "") -> FieldConversionError:
    return FieldConversionError(f.name, value, f.display_type, reason)


def _convert_decimal(f: FieldSchema, value: str) -> Decimal:
    try:
        d = Decimal(value)
    except InvalidOperation:
        raise _fail(f, value) from None
    if not d.is_finite():
        raise _fail(f, value, "not a finite number")
    if f.scale is not None:
        exponent = d.as_tuple().exponent
        if -exponent > f.scale:
            raise _fail(f, value, f"scale exceeds {f.scale}")
        try:
            d = d.quantize(Decimal(1).scaleb(-f.scale))
        except InvalidOperation:
            raise _fail(f, value, f"precision exceeds {f.precision}") from None
    if f.precision is not None and len(d.as_tuple().digits) > f.precision:
        raise _fail(f, value, f"precision exceeds {f.precision}")
    return d


def _convert_logical(f: FieldSchema, value: str) -> Any:
    lt = f.logical_type
    try:
        if lt == LogicalType.DATE:
            return date.fromisoformat(value)
        if lt in (LogicalType.TIME_MILLIS, LogicalType.TIME_MICROS):
            return time.fromisoformat(value)
        if lt in (LogicalType.TIMESTAMP_MILLIS, LogicalType.TIMESTAMP_MICROS):
            ts = datetime.fromisoformat(value)
            return ts.replace(tzinfo=UTC) if ts.tzinfo is None else ts.astimezone(UTC)
        if lt == LogicalType.DATETIME:
            return parse_local_datetime(value)
    except ValueError as exc:
        raise _fail(f, value, str(exc)) from None
    return _convert_decimal(f, value)


def convert_value(f: FieldSchema, value: str) -> Any:
    """
    Convert a non-null string to the type declared by field f.

    Raises:
        FieldConversionError: value does not parse as the declared type.
    """
    if f.logical_type is not None:
        return _convert_logical(f, value)

    ft = f.field_type
    if ft == FieldType.STRING:
        return value
    if ft == FieldType.BOOLEAN:
        return value.lower() == "true"
    if ft in (FieldType.INT, FieldType.LONG):
        if not _INTEGER.fullmatch(value):
            raise _fail(f, value)
        n = int(value)
        low, high = int_range(ft)
        if not low <= n <= high:
            raise _fail(f, value, "out of range")
        return n
    if ft in (FieldType.FLOAT, FieldType.DOUBLE):
        try:
            return float(value)
        except ValueError:
            raise _fail(f, value) from None
    return value.encode("utf-8")
