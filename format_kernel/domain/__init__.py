"""
Pure domain layer.

Schemas and structured records with NO dependencies on:
- File systems
- Row sources
- Configuration loading

Schemas and finished records are immutable; builders are local to one line.
"""

from format_kernel.domain.record import RecordBuilder, StructuredRecord
from format_kernel.domain.schema import (
    FieldSchema,
    FieldType,
    LogicalType,
    Schema,
    parse_schema,
    schema_to_json,
)
from format_kernel.domain.temporal import format_local_datetime, parse_local_datetime

__all__ = [
    "FieldSchema",
    "FieldType",
    "LogicalType",
    "RecordBuilder",
    "Schema",
    "StructuredRecord",
    "format_local_datetime",
    "parse_local_datetime",
    "parse_schema",
    "schema_to_json",
]
