"""
Shared fixtures for the format reader tests.

Everything here is in-memory or under pytest's tmp_path; no test touches
the network.
"""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from format_kernel.domain.schema import parse_schema
from format_kernel.exceptions import SourceOpenError
from format_kernel.logging_config import LogContext, reset_logging
from format_ingestion.domain.types import RawLine, SplitDescriptor


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def make_schema(*fields: tuple[str, object], name: str = "record"):
    """Build a Schema from (name, avro type) pairs."""
    return parse_schema(
        {
            "type": "record",
            "name": name,
            "fields": [{"name": n, "type": t} for n, t in fields],
        }
    )


class FakeRowSource:
    """In-memory RowSource serving a fixed list of lines."""

    def __init__(self, lines: Iterable[str], fail_open: bool = False):
        self.lines = list(lines)
        self.fail_open = fail_open
        self.opened: SplitDescriptor | None = None
        self.close_calls = 0
        self.pulls = 0
        self._pos = 0

    def open(self, split: SplitDescriptor) -> None:
        if self.fail_open:
            raise SourceOpenError(str(split.path), "simulated failure")
        self.opened = split

    def next(self) -> RawLine | None:
        self.pulls += 1
        if self._pos >= len(self.lines):
            return None
        line = RawLine(index=self._pos, line=self.lines[self._pos], offset=self._pos)
        self._pos += 1
        return line

    def progress(self) -> float:
        if not self.lines:
            return 1.0
        return self._pos / len(self.lines)

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def abc_schema():
    """Three non-nullable string fields a, b, c."""
    return make_schema(("a", "string"), ("b", "string"), ("c", "string"))


@pytest.fixture
def write_file(tmp_path):
    """Write text to a file under tmp_path and return its path."""

    def _write(name: str, text: str, newline: str = "\n"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.replace("\n", newline).encode("utf-8"))
        return path

    return _write
