"""
Reader and source protocols, plus the probe DTO.

Contracts:
    RowSource      yields one RawLine per line of a split (index from 0).
    RecordReader   pull-based reader: initialize / advance / current_record /
                   progress / close.
    SourceAdapter  whole-file surface: read() streams records, probe()
                   returns a quick snapshot (row count, columns, sample rows).

Architecture: format_ingestion/adapters. File I/O lives here, never in
format_ingestion/domain or format_ingestion/delimited.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Protocol, runtime_checkable

from format_ingestion.domain.types import RawLine, SplitDescriptor


@runtime_checkable
class RowSource(Protocol):
    """Line-oriented source over one split."""

    def open(self, split: SplitDescriptor) -> None:
        """Bind to the split. Raises SourceOpenError."""
        ...

    def next(self) -> RawLine | None:
        """Next line, or None at end of split. Raises SourceReadError."""
        ...

    def progress(self) -> float:
        """Fraction of the split consumed, 0.0 to 1.0."""
        ...

    def close(self) -> None:
        """Release the underlying file. Idempotent."""
        ...


@runtime_checkable
class RecordReader(Protocol):
    """Pull-based record reader driven by one caller thread."""

    def initialize(self, split: SplitDescriptor) -> None:
        ...

    def advance(self) -> bool:
        ...

    def current_record(self) -> Any:
        ...

    def progress(self) -> float:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class SourceAdapter(Protocol):
    """Protocol for reading structured source files into records."""

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[Any]:
        """Yield one record per source row. Streams; does not load entire file."""
        ...

    def probe(self, source_path: Path, options: dict[str, Any]) -> "SourceProbe":
        """Quick probe: row count, detected columns, sample rows."""
        ...


@dataclass(frozen=True)
class SourceProbe:
    """Result of probing a source file (row count, columns, first N rows)."""

    row_count: int
    columns: tuple[str, ...]
    sample_rows: tuple[dict[str, Any], ...]  # First 5 rows; do not mutate
    encoding: str | None = None
    detected_delimiter: str | None = None
