"""
Input file selection for a configured path.

A directory is read as the regular files directly inside it, in name
order. Entries whose names start with "." or "_" are markers and
checksums written by other jobs (``_SUCCESS``, ``.part-0.crc``) and are
never read. An optional regex, searched anywhere in an entry's full path,
narrows the selection further. The schema sample for header-derived
schemas is the first selected file.
"""

from __future__ import annotations

import re
from pathlib import Path

_HIDDEN_PREFIXES = (".", "_")


def is_input_file(entry: Path) -> bool:
    return entry.is_file() and not entry.name.startswith(_HIDDEN_PREFIXES)


def list_input_files(path: Path | str, regex_path_filter: str | None = None) -> list[Path]:
    """
    Files to read for path: the path itself when it is not a directory,
    otherwise the directory's input files matching ``regex_path_filter``.
    """
    p = Path(path)
    if not p.is_dir():
        return [p]
    pattern = re.compile(regex_path_filter) if regex_path_filter else None
    return [
        entry
        for entry in sorted(p.iterdir())
        if is_input_file(entry) and (pattern is None or pattern.search(str(entry)))
    ]


def find_schema_sample_file(path: Path | str, regex_path_filter: str | None = None) -> Path:
    """
    Return the file a schema should be derived from.

    Raises:
        FileNotFoundError: ``path`` does not exist.
        ValueError: the directory holds no input files, or none matches the filter.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Input path not found: {p}")
    if p.is_file():
        return p

    if not any(is_input_file(entry) for entry in p.iterdir()):
        raise ValueError(f"Provided directory is empty: {p}")
    matches = list_input_files(p, regex_path_filter)
    if not matches:
        raise ValueError(f'No file inside "{p}" matched regex "{regex_path_filter}"!')
    return matches[0]
