"""Header/offset policy for delimited splits."""

from __future__ import annotations


def should_skip(record_index: int, skip_header: bool) -> bool:
    """
    True iff the record is a header to discard.

    The check is against the index within the split, so with skip_header
    every split drops its own first line, not only the split holding the
    start of the file. Callers reading one file as several splits must
    either disable skip_header or read the file as a single split.
    """
    return skip_header and record_index == 0
