"""
Record schema data structures.

Provides immutable, hashable schema definitions that drive field assignment
and type conversion in every format reader. Part of the functional core:
no I/O.

Schemas are written as Avro-style record JSON. A nullable field is a union
with "null"; logical types annotate a physical type:

    {"type": "record", "name": "event", "fields": [
        {"name": "id", "type": "long"},
        {"name": "note", "type": ["string", "null"]},
        {"name": "seen_at", "type": {"type": "string", "logicalType": "datetime"}}
    ]}
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any

from format_kernel.exceptions import InvalidSchemaError


class FieldType(str, Enum):
    """Physical field types."""

    BOOLEAN = "boolean"
    INT = "int"  # 32-bit signed
    LONG = "long"  # 64-bit signed
    FLOAT = "float"
    DOUBLE = "double"
    BYTES = "bytes"
    STRING = "string"


class LogicalType(str, Enum):
    """Logical annotations carried on top of a physical type."""

    DATE = "date"  # ISO 8601 date, physical int
    TIME_MILLIS = "time-millis"
    TIME_MICROS = "time-micros"
    TIMESTAMP_MILLIS = "timestamp-millis"
    TIMESTAMP_MICROS = "timestamp-micros"
    DATETIME = "datetime"  # ISO 8601 local date-time, physical string
    DECIMAL = "decimal"


_LOGICAL_PHYSICAL: dict[LogicalType, FieldType] = {
    LogicalType.DATE: FieldType.INT,
    LogicalType.TIME_MILLIS: FieldType.INT,
    LogicalType.TIME_MICROS: FieldType.LONG,
    LogicalType.TIMESTAMP_MILLIS: FieldType.LONG,
    LogicalType.TIMESTAMP_MICROS: FieldType.LONG,
    LogicalType.DATETIME: FieldType.STRING,
    LogicalType.DECIMAL: FieldType.BYTES,
}

_INT_RANGE = (-(2**31), 2**31 - 1)
_LONG_RANGE = (-(2**63), 2**63 - 1)


@dataclass(frozen=True)
class FieldSchema:
    """
    Schema definition for a single field.

    Immutable and hashable for use in frozen dataclasses.
    """

    name: str
    field_type: FieldType
    nullable: bool = False
    logical_type: LogicalType | None = None

    # For DECIMAL logical type
    precision: int | None = None
    scale: int | None = None

    def __post_init__(self) -> None:
        """Validate field schema configuration."""
        if not self.name:
            raise InvalidSchemaError("field name must be non-empty")
        if self.logical_type is not None:
            expected = _LOGICAL_PHYSICAL[self.logical_type]
            if self.field_type != expected:
                raise InvalidSchemaError(
                    f"field '{self.name}' with logical type {self.logical_type.value} "
                    f"must have physical type {expected.value}"
                )
        if self.logical_type == LogicalType.DECIMAL:
            if self.precision is None or self.precision <= 0:
                raise InvalidSchemaError(
                    f"decimal field '{self.name}' must have a positive precision"
                )
            if self.scale is not None and not 0 <= self.scale <= self.precision:
                raise InvalidSchemaError(
                    f"decimal field '{self.name}' scale must be between 0 and precision"
                )

    @property
    def is_datetime(self) -> bool:
        return self.logical_type == LogicalType.DATETIME

    @property
    def display_type(self) -> str:
        """Type name used in error messages."""
        if self.logical_type is not None:
            return self.logical_type.value
        return self.field_type.value


@dataclass(frozen=True)
class Schema:
    """
    Ordered record schema. Field order defines positional mapping to tokens.
    """

    name: str
    fields: tuple[FieldSchema, ...]

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for f in self.fields:
            if f.name in seen:
                raise InvalidSchemaError(f"duplicate field name '{f.name}'")
            seen.add(f.name)

    def __iter__(self) -> Iterator[FieldSchema]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def get_field(self, name: str) -> FieldSchema | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def without(self, names: Iterable[str]) -> Schema:
        """Return a copy of this schema with the named fields removed."""
        drop = frozenset(names)
        return Schema(
            name=self.name,
            fields=tuple(f for f in self.fields if f.name not in drop),
        )

    @property
    def fingerprint(self) -> str:
        """SHA-256 of the canonical JSON form; identical structure, identical hash."""
        return hashlib.sha256(_canonical(schema_to_json(self)).encode()).hexdigest()


# -----------------------------------------------------------------------------
# JSON <-> Schema
# -----------------------------------------------------------------------------


def _canonical(data: Any) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"))


def _parse_type(field_name: str, raw: Any) -> dict[str, Any]:
    """Resolve one field's type declaration into FieldSchema keyword args."""
    nullable = False
    if isinstance(raw, list):
        branches = [b for b in raw if b != "null"]
        if len(branches) != 1 or len(raw) - len(branches) > 1:
            raise InvalidSchemaError(
                f"field '{field_name}' union must be one type plus optional null"
            )
        nullable = len(branches) != len(raw)
        raw = branches[0]

    logical_type = None
    precision = None
    scale = None
    if isinstance(raw, Mapping):
        logical = raw.get("logicalType")
        if logical is not None:
            try:
                logical_type = LogicalType(logical)
            except ValueError:
                raise InvalidSchemaError(
                    f"field '{field_name}' has unsupported logical type {logical!r}"
                ) from None
        precision = raw.get("precision")
        scale = raw.get("scale")
        raw = raw.get("type")

    try:
        field_type = FieldType(raw)
    except ValueError:
        raise InvalidSchemaError(
            f"field '{field_name}' has unsupported type {raw!r}"
        ) from None

    return {
        "field_type": field_type,
        "nullable": nullable,
        "logical_type": logical_type,
        "precision": precision,
        "scale": scale,
    }


@lru_cache(maxsize=256)
def _parse_canonical(canonical: str) -> Schema:
    data = json.loads(canonical)
    if not isinstance(data, Mapping) or data.get("type") != "record":
        raise InvalidSchemaError("top-level schema must be a record")
    raw_fields = data.get("fields")
    if not isinstance(raw_fields, list):
        raise InvalidSchemaError("record schema must have a 'fields' list")

    fields: list[FieldSchema] = []
    for raw in raw_fields:
        if not isinstance(raw, Mapping) or "name" not in raw or "type" not in raw:
            raise InvalidSchemaError("each field needs a 'name' and a 'type'")
        fields.append(FieldSchema(name=raw["name"], **_parse_type(raw["name"], raw["type"])))
    return Schema(name=data.get("name", "record"), fields=tuple(fields))


def parse_schema(value: str | Mapping[str, Any]) -> Schema:
    """
    Parse an Avro-style record schema from JSON text or an already-decoded mapping.

    Results are cached by canonical JSON text, so structurally identical
    definitions return the same Schema instance.

    Raises:
        InvalidSchemaError: malformed JSON, non-record top level, or unsupported types.
    """
    if isinstance(value, str):
        try:
            data = json.loads(value)
        except json.JSONDecodeError as exc:
            raise InvalidSchemaError(f"not valid JSON: {exc}") from exc
    else:
        data = value
    return _parse_canonical(_canonical(data))


def _type_to_json(f: FieldSchema) -> Any:
    if f.logical_type is None:
        declared: Any = f.field_type.value
    else:
        declared = {"type": f.field_type.value, "logicalType": f.logical_type.value}
        if f.precision is not None:
            declared["precision"] = f.precision
        if f.scale is not None:
            declared["scale"] = f.scale
    if f.nullable:
        return [declared, "null"]
    return declared


def schema_to_json(schema: Schema) -> dict[str, Any]:
    """Inverse of parse_schema: return the JSON-ready mapping for a schema."""
    return {
        "type": "record",
        "name": schema.name,
        "fields": [{"name": f.name, "type": _type_to_json(f)} for f in schema.fields],
    }


def int_range(field_type: FieldType) -> tuple[int, int]:
    """Inclusive bounds for INT and LONG fields."""
    return _INT_RANGE if field_type == FieldType.INT else _LONG_RANGE
