"""
Line row source over a byte-range split of a text file.

Split boundaries follow the usual line-reader rule so that every line of a
file is read by exactly one split:

    - a split that does not start at byte 0 discards its first (partial)
      line, which belongs to the previous split;
    - a split reads every line that *starts* at or before its end offset,
      even if the line runs past it.

Lines are returned without their terminator (\\n or \\r\\n) and numbered
from 0 within the split.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO

from format_kernel.exceptions import SourceOpenError, SourceReadError
from format_kernel.logging_config import get_logger

from format_ingestion.domain.types import RawLine, SplitDescriptor

logger = get_logger("ingestion.line_source")


class TextLineRowSource:
    """RowSource reading newline-terminated text from one split."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._file: BinaryIO | None = None
        self._path = ""
        self._start = 0
        self._end = 0
        self._pos = 0
        self._index = 0

    def open(self, split: SplitDescriptor) -> None:
        self._path = str(split.path)
        try:
            f = open(split.path, "rb")
        except OSError as exc:
            raise SourceOpenError(self._path, exc.strerror or str(exc)) from exc
        try:
            size = os.fstat(f.fileno()).st_size
            self._start = split.start
            self._end = size if split.end is None else split.end
            f.seek(split.start)
            self._pos = split.start
            if split.start != 0:
                self._pos += len(f.readline())
        except OSError as exc:
            f.close()
            raise SourceOpenError(self._path, exc.strerror or str(exc)) from exc
        self._file = f
        self._index = 0
        logger.debug(
            "split_opened",
            extra={"path": self._path, "start": self._start, "end": self._end},
        )

    def next(self) -> RawLine | None:
        if self._file is None:
            raise SourceReadError(self._path or "<unopened>", "source is not open")
        if self._pos > self._end:
            return None
        try:
            raw = self._file.readline()
        except OSError as exc:
            raise SourceReadError(self._path, exc.strerror or str(exc)) from exc
        if not raw:
            return None

        offset = self._pos
        self._pos += len(raw)
        if raw.endswith(b"\n"):
            raw = raw[:-1]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
        try:
            text = raw.decode(self._encoding)
        except UnicodeDecodeError as exc:
            raise SourceReadError(
                self._path, f"line at byte {offset} is not valid {self._encoding}: {exc.reason}"
            ) from exc

        line = RawLine(index=self._index, line=text, offset=offset)
        self._index += 1
        return line

    def progress(self) -> float:
        if self._start == self._end:
            return 0.0
        return min(1.0, (self._pos - self._start) / (self._end - self._start))

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


def plan_splits(path: Path, split_size: int) -> list[SplitDescriptor]:
    """
    Divide a file into contiguous splits of at most split_size bytes.

    An empty file yields a single empty split.
    """
    if split_size <= 0:
        raise ValueError(f"split_size must be positive, got {split_size}")
    size = Path(path).stat().st_size
    if size == 0:
        return [SplitDescriptor(path=Path(path), start=0, length=0)]
    return [
        SplitDescriptor(path=Path(path), start=start, length=min(split_size, size - start))
        for start in range(0, size, split_size)
    ]
