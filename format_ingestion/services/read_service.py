"""
Read service: whole-file delimited reading on top of split readers.

Options are the format keys understood by
``format_config.loader.parse_delimited_format`` (delimiter,
enable_quoted_values, skip_header, schema, path_field, length_field,
modification_time_field, filename_only, encoding, split_size), plus
``path_filter``: a regex searched in the full path of each directory entry.

A directory is read file by file in name order, ignoring entries whose
name starts with "." or "_" and entries the path filter rejects. The
schema sample, when no schema is given, is the first file read. Each
file is divided into splits when split_size is set. Every split gets its
own reader, which is closed on every exit path. Log context for the split
is bound around each pull, never across a yield.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import replace
from pathlib import Path
from typing import Any

from format_kernel.domain.record import StructuredRecord
from format_kernel.exceptions import InvalidSchemaError
from format_kernel.logging_config import LogContext, get_logger

from format_config.loader import parse_delimited_format
from format_config.sampling import find_schema_sample_file, list_input_files
from format_config.schema import DelimitedFormatDef
from format_config.validator import FormatConfigValidationError, validate_format_def
from format_ingestion.adapters.base import RowSource, SourceProbe
from format_ingestion.adapters.line_source import TextLineRowSource, plan_splits
from format_ingestion.adapters.path_tracking import PathTrackingRecordReader
from format_ingestion.delimited.inference import infer_header_schema
from format_ingestion.delimited.reader import DelimitedRecordReader
from format_ingestion.domain.types import (
    DelimitedParseConfig,
    PathMetadataFields,
    SplitDescriptor,
)

logger = get_logger("ingestion.read_service")

_PROBE_SAMPLE_SIZE = 5

RowSourceFactory = Callable[[DelimitedFormatDef], RowSource]


def _default_row_source(fmt: DelimitedFormatDef) -> RowSource:
    return TextLineRowSource(encoding=fmt.encoding)


def create_record_reader(
    fmt: DelimitedFormatDef,
    row_source: RowSource | None = None,
) -> PathTrackingRecordReader:
    """
    Build the reader stack for one split: delimited parsing plus path metadata.

    Raises:
        InvalidSchemaError: ``fmt`` has no schema.
    """
    if fmt.schema is None or fmt.data_schema is None:
        raise InvalidSchemaError("a schema is required to read delimited records")
    config = DelimitedParseConfig(
        delimiter=fmt.delimiter,
        schema=fmt.data_schema,
        enable_quoted_values=fmt.enable_quoted_values,
        skip_header=fmt.skip_header,
    )
    delegate = DelimitedRecordReader(
        config,
        row_source=row_source if row_source is not None else _default_row_source(fmt),
        output_schema=fmt.schema,
    )
    metadata = PathMetadataFields(
        path_field=fmt.path_field,
        length_field=fmt.length_field,
        modification_time_field=fmt.modification_time_field,
        filename_only=fmt.filename_only,
    )
    return PathTrackingRecordReader(delegate, metadata)


class DelimitedReadService:
    """Read delimited files as StructuredRecords. Streams; never loads a whole file."""

    def __init__(self, row_source_factory: RowSourceFactory | None = None) -> None:
        self._row_source_factory = row_source_factory or _default_row_source

    def resolve_format(self, source_path: Path, options: dict[str, Any]) -> DelimitedFormatDef:
        """
        Parse and validate options, deriving a header schema when none is given.

        Raises:
            FormatConfigValidationError: the options are inconsistent.
        """
        fmt = parse_delimited_format(options)
        if fmt.schema is None:
            sample = find_schema_sample_file(source_path, fmt.path_filter)
            schema = infer_header_schema(
                sample, fmt.delimiter, fmt.enable_quoted_values, fmt.encoding
            )
            fmt = replace(fmt, schema=schema)
            logger.info(
                "schema_derived_from_header",
                extra={"sample": str(sample), "columns": schema.field_names},
            )
        result = validate_format_def(fmt)
        if not result.is_valid:
            raise FormatConfigValidationError(result.errors)
        return fmt

    def splits(self, source_path: Path, fmt: DelimitedFormatDef) -> list[SplitDescriptor]:
        planned: list[SplitDescriptor] = []
        for path in list_input_files(source_path, fmt.path_filter):
            if fmt.split_size is None:
                planned.append(SplitDescriptor(path=path))
            else:
                planned.extend(plan_splits(path, fmt.split_size))
        return planned

    def read_split(self, split: SplitDescriptor, fmt: DelimitedFormatDef) -> Iterator[StructuredRecord]:
        """Yield the records of one split, closing its reader however iteration ends."""
        reader = create_record_reader(fmt, self._row_source_factory(fmt))
        context = {"split_path": str(split.path), "split_start": split.start, "format_name": "delimited"}
        try:
            with LogContext.bind(**context):
                reader.initialize(split)
            while True:
                # Bound per pull; the caller's context is untouched between records.
                with LogContext.bind(**context):
                    if not reader.advance():
                        return
                    record = reader.current_record()
                yield record
        finally:
            with LogContext.bind(**context):
                reader.close()

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[StructuredRecord]:
        fmt = self.resolve_format(source_path, options)
        for split in self.splits(source_path, fmt):
            yield from self.read_split(split, fmt)

    def probe(self, source_path: Path, options: dict[str, Any]) -> SourceProbe:
        fmt = self.resolve_format(source_path, options)
        sample: list[dict[str, Any]] = []
        count = 0
        for split in self.splits(source_path, fmt):
            for record in self.read_split(split, fmt):
                if len(sample) < _PROBE_SAMPLE_SIZE:
                    sample.append(dict(record))
                count += 1
        return SourceProbe(
            row_count=count,
            columns=fmt.schema.field_names if fmt.schema else (),
            sample_rows=tuple(sample),
            encoding=fmt.encoding,
            detected_delimiter=fmt.delimiter,
        )
