"""
Header-based schema derivation for delimited files.

The first line of a sample file names the columns. Every column becomes a
nullable string field, since a header says nothing about types; blank
names become ``field_<i>`` and repeated names get a ``_<i>`` suffix.
"""

from __future__ import annotations

from pathlib import Path

from format_kernel.domain.schema import FieldSchema, FieldType, Schema
from format_kernel.exceptions import InvalidSchemaError

from format_ingestion.adapters.line_source import TextLineRowSource
from format_ingestion.delimited.tokenizer import tokenize
from format_ingestion.domain.types import SplitDescriptor


def header_field_names(header: str, delimiter: str, quote_aware: bool = False) -> tuple[str, ...]:
    """Column names from a header line, made non-empty and unique."""
    names: list[str] = []
    seen: set[str] = set()
    for i, token in enumerate(tokenize(header, delimiter, quote_aware)):
        name = token.strip() or f"field_{i}"
        if name in seen:
            name = f"{name}_{i}"
        seen.add(name)
        names.append(name)
    return tuple(names)


def infer_header_schema(
    path: Path,
    delimiter: str,
    quote_aware: bool = False,
    encoding: str = "utf-8",
    name: str = "record",
) -> Schema:
    """
    Build an all-string, nullable schema from the header line of path.

    Raises:
        SourceOpenError / SourceReadError: the file cannot be read.
        InvalidSchemaError: the file is empty.
    """
    source = TextLineRowSource(encoding=encoding)
    source.open(SplitDescriptor(path=Path(path)))
    try:
        first = source.next()
    finally:
        source.close()
    if first is None:
        raise InvalidSchemaError(f"cannot derive a schema from empty file {path}")
    return Schema(
        name=name,
        fields=tuple(
            FieldSchema(name=n, field_type=FieldType.STRING, nullable=True)
            for n in header_field_names(first.line, delimiter, quote_aware)
        ),
    )
