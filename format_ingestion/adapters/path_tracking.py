"""
Path-tracking record reader: adds source file metadata to each record.

Wraps a reader whose current_record() returns a RecordBuilder over the full
output schema and fills the configured metadata fields before building:

    path_field               file URI (or bare file name with filename_only)
    length_field             file size in bytes
    modification_time_field  last modification time, epoch milliseconds

The delegate parses against the output schema minus these fields, so
metadata fields never consume a token.
"""

from __future__ import annotations

from collections.abc import Iterator
from types import TracebackType
from typing import Any

from format_kernel.domain.record import StructuredRecord
from format_kernel.exceptions import SourceOpenError
from format_kernel.logging_config import get_logger

from format_ingestion.adapters.base import RecordReader
from format_ingestion.domain.types import PathMetadataFields, SplitDescriptor

logger = get_logger("ingestion.path_tracking")


class PathTrackingRecordReader:
    """RecordReader decorator that injects path, length and mtime fields."""

    def __init__(self, delegate: RecordReader, metadata: PathMetadataFields) -> None:
        self._delegate = delegate
        self._metadata = metadata
        self._values: dict[str, Any] = {}

    @property
    def metadata_values(self) -> dict[str, Any]:
        """Metadata values for the current split (empty before initialize)."""
        return dict(self._values)

    def initialize(self, split: SplitDescriptor) -> None:
        self._delegate.initialize(split)
        if not self._metadata.names:
            return
        try:
            stat = split.path.stat()
        except OSError as exc:
            raise SourceOpenError(str(split.path), exc.strerror or str(exc)) from exc

        values: dict[str, Any] = {}
        md = self._metadata
        if md.path_field:
            values[md.path_field] = (
                split.path.name if md.filename_only else split.path.absolute().as_uri()
            )
        if md.length_field:
            values[md.length_field] = stat.st_size
        if md.modification_time_field:
            values[md.modification_time_field] = stat.st_mtime_ns // 1_000_000
        self._values = values
        logger.debug("path_metadata_resolved", extra={"fields": md.names})

    def advance(self) -> bool:
        return self._delegate.advance()

    def current_record(self) -> StructuredRecord:
        builder = self._delegate.current_record()
        for name, value in self._values.items():
            builder.set(name, value)
        return builder.build()

    def progress(self) -> float:
        return self._delegate.progress()

    def close(self) -> None:
        self._delegate.close()

    def __enter__(self) -> PathTrackingRecordReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __iter__(self) -> Iterator[StructuredRecord]:
        while self.advance():
            yield self.current_record()
