"""Services: orchestrate readers over files and splits."""

from format_config.sampling import list_input_files
from format_ingestion.services.read_service import (
    DelimitedReadService,
    create_record_reader,
)

__all__ = [
    "DelimitedReadService",
    "create_record_reader",
    "list_input_files",
]
