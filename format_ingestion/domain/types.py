"""
format_ingestion.domain.types -- Pure frozen dataclasses for record reading.

ZERO I/O. Imports only from format_kernel/domain/.

A parse session is described once (DelimitedParseConfig) and shared
read-only by every reader working on the same file; each reader owns only
its split and its position in it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from format_kernel.domain.schema import Schema


# =============================================================================
# Reader lifecycle
# =============================================================================


class ReaderState(str, Enum):
    """Record reader lifecycle state."""

    UNINITIALIZED = "uninitialized"  # Not yet bound to a split
    READY = "ready"  # Bound; advance() may be called
    EXHAUSTED = "exhausted"  # Row source has no more lines


# =============================================================================
# Input units
# =============================================================================


@dataclass(frozen=True)
class SplitDescriptor:
    """Contiguous byte range of one input file assigned to one reader."""

    path: Path
    start: int = 0
    length: int | None = None  # None: to end of file

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"split start must be >= 0, got {self.start}")
        if self.length is not None and self.length < 0:
            raise ValueError(f"split length must be >= 0, got {self.length}")

    @property
    def end(self) -> int | None:
        return None if self.length is None else self.start + self.length


@dataclass(frozen=True)
class RawLine:
    """One line pulled from a row source."""

    index: int  # 0-based position within the split
    line: str  # Line text without the line terminator
    offset: int = 0  # Byte offset of the line in the file


# =============================================================================
# Parse configuration
# =============================================================================


@dataclass(frozen=True)
class DelimitedParseConfig:
    """Immutable settings for one delimited reading session."""

    delimiter: str
    schema: Schema
    enable_quoted_values: bool = False
    skip_header: bool = False

    def __post_init__(self) -> None:
        if not self.delimiter:
            raise ValueError("delimiter must be a non-empty string")


@dataclass(frozen=True)
class PathMetadataFields:
    """Output fields that receive the source file's path, size and mtime."""

    path_field: str | None = None  # string: file URI, or name when filename_only
    length_field: str | None = None  # long: file size in bytes
    modification_time_field: str | None = None  # long: epoch millis
    filename_only: bool = False

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(
            n
            for n in (self.path_field, self.length_field, self.modification_time_field)
            if n
        )
