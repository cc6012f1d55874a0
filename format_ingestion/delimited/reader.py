"""
Delimited record reader.

Lifecycle:

    UNINITIALIZED --initialize(split)--> READY --advance() is False--> EXHAUSTED

- advance() pulls the next line from the row source. With skip_header the
  line at split index 0 is dropped and the following line is pulled
  instead; running out of lines there is a normal end of input.
- current_record() assembles the current line. It is only valid in READY
  after advance() returned True. Assembly errors propagate; the reader does
  not skip bad rows.
- close() releases the row source and may be called any number of times.
  The owner calls it on every exit path, including after a failed record.

One reader serves one split and one caller thread. The parse config and
schema are immutable and may be shared between readers.
"""

from __future__ import annotations

from collections.abc import Iterator
from types import TracebackType

from format_kernel.domain.record import RecordBuilder, StructuredRecord
from format_kernel.domain.schema import Schema
from format_kernel.exceptions import (
    FieldConversionError,
    FieldCountMismatchError,
    FormatError,
    InvalidDateTimeError,
    ReaderStateError,
)
from format_kernel.logging_config import get_logger

from format_ingestion.adapters.base import RowSource
from format_ingestion.adapters.line_source import TextLineRowSource
from format_ingestion.delimited.assembler import assemble_record
from format_ingestion.delimited.header import should_skip
from format_ingestion.domain.types import (
    DelimitedParseConfig,
    RawLine,
    ReaderState,
    SplitDescriptor,
)

logger = get_logger("ingestion.delimited_reader")


def _failure_details(exc: FormatError, line: RawLine) -> dict[str, object]:
    details: dict[str, object] = {
        "code": exc.code,
        "line_index": line.index,
        "offset": line.offset,
    }
    if isinstance(exc, FieldCountMismatchError):
        details["observed"] = exc.observed
        details["expected"] = exc.expected
    elif isinstance(exc, (InvalidDateTimeError, FieldConversionError)):
        details["field"] = exc.field_name
    return details


class DelimitedRecordReader:
    """Record reader turning split lines into RecordBuilders."""

    def __init__(
        self,
        config: DelimitedParseConfig,
        row_source: RowSource | None = None,
        output_schema: Schema | None = None,
    ) -> None:
        """
        Args:
            config: Parse settings; ``config.schema`` drives token assignment.
            row_source: Line source; defaults to a UTF-8 TextLineRowSource.
            output_schema: Schema of the produced builders when it is wider
                than ``config.schema`` (extra fields are left for the caller).
        """
        self._config = config
        self._source: RowSource = row_source if row_source is not None else TextLineRowSource()
        self._output_schema = output_schema or config.schema
        self._state = ReaderState.UNINITIALIZED
        self._closed = False
        self._current: RawLine | None = None
        self._split: SplitDescriptor | None = None
        self._records_read = 0

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def config(self) -> DelimitedParseConfig:
        return self._config

    @property
    def split(self) -> SplitDescriptor | None:
        return self._split

    def _check_open(self, operation: str) -> None:
        if self._closed:
            raise ReaderStateError("closed", operation)

    def initialize(self, split: SplitDescriptor) -> None:
        """Bind to split. Row source open failures propagate unchanged."""
        self._check_open("initialize")
        if self._state != ReaderState.UNINITIALIZED:
            raise ReaderStateError(self._state.value, "initialize")
        self._source.open(split)
        self._split = split
        self._state = ReaderState.READY
        logger.info(
            "reader_initialized",
            extra={
                "path": str(split.path),
                "start": split.start,
                "length": split.length,
                "skip_header": self._config.skip_header,
                "quoted_values": self._config.enable_quoted_values,
            },
        )

    def advance(self) -> bool:
        """Move to the next record. False once the split is exhausted."""
        self._check_open("advance")
        if self._state == ReaderState.UNINITIALIZED:
            raise ReaderStateError(self._state.value, "advance")
        if self._state == ReaderState.EXHAUSTED:
            return False

        raw = self._source.next()
        if raw is not None and should_skip(raw.index, self._config.skip_header):
            logger.debug("header_skipped", extra={"offset": raw.offset})
            raw = self._source.next()

        if raw is None:
            self._current = None
            self._state = ReaderState.EXHAUSTED
            return False
        self._current = raw
        self._records_read += 1
        return True

    def current_record(self) -> RecordBuilder:
        """Assemble the current line into a builder over the output schema."""
        self._check_open("current_record")
        if self._state != ReaderState.READY or self._current is None:
            raise ReaderStateError(self._state.value, "current_record")
        try:
            return assemble_record(
                self._current.line,
                self._config,
                RecordBuilder(self._output_schema),
            )
        except FormatError as exc:
            logger.warning("record_assembly_failed", extra=_failure_details(exc, self._current))
            raise

    def progress(self) -> float:
        if self._state == ReaderState.UNINITIALIZED:
            return 0.0
        return self._source.progress()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._current = None
        self._source.close()
        logger.info("reader_closed", extra={"records_read": self._records_read})

    # -- Python conveniences ------------------------------------------------

    def __enter__(self) -> DelimitedRecordReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __iter__(self) -> Iterator[StructuredRecord]:
        """Yield finished records until the split is exhausted."""
        while self.advance():
            yield self.current_record().build()
