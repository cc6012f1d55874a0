"""
Format definition schema.

Defines the human-authored, reviewable settings for a delimited reader.
YAML files are parsed into these types by the loader and checked by the
validator before any reader is built.
"""

from __future__ import annotations

from dataclasses import dataclass

from format_kernel.domain.schema import Schema

# ---------------------------------------------------------------------------
# Delimited format
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DelimitedFormatDef:
    """Settings for reading delimited text files."""

    delimiter: str
    schema: Schema | None = None
    enable_quoted_values: bool = False
    skip_header: bool = False

    # Path tracking (each names an output field in ``schema``)
    path_field: str | None = None  # string
    length_field: str | None = None  # long
    modification_time_field: str | None = None  # long
    filename_only: bool = False

    encoding: str = "utf-8"
    split_size: int | None = None  # Bytes per split; None reads each file as one split
    path_filter: str | None = None  # Regex selecting input files inside a directory

    @property
    def metadata_field_names(self) -> tuple[str, ...]:
        return tuple(
            n
            for n in (self.path_field, self.length_field, self.modification_time_field)
            if n
        )

    @property
    def data_schema(self) -> Schema | None:
        """Schema of the delimited columns: ``schema`` minus metadata fields."""
        if self.schema is None:
            return None
        return self.schema.without(self.metadata_field_names)
