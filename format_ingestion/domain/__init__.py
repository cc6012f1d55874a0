"""
format_ingestion.domain -- Pure types and value objects for record reading.

ZERO I/O. Imports only from format_kernel/domain/.
"""

from format_ingestion.domain.types import (
    DelimitedParseConfig,
    PathMetadataFields,
    RawLine,
    ReaderState,
    SplitDescriptor,
)

__all__ = [
    "DelimitedParseConfig",
    "PathMetadataFields",
    "RawLine",
    "ReaderState",
    "SplitDescriptor",
]
