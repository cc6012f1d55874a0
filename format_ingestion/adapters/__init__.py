"""Row sources, record readers and source protocols (file I/O lives here)."""

from format_ingestion.adapters.base import RecordReader, RowSource, SourceAdapter, SourceProbe
from format_ingestion.adapters.line_source import TextLineRowSource, plan_splits
from format_ingestion.adapters.path_tracking import PathTrackingRecordReader

__all__ = [
    "PathTrackingRecordReader",
    "RecordReader",
    "RowSource",
    "SourceAdapter",
    "SourceProbe",
    "TextLineRowSource",
    "plan_splits",
]
