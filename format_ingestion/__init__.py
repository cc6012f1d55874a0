"""
format_ingestion -- Record readers for delimited text files.

Turns the lines of a file split into structured records: tokenizing,
schema-directed field assignment, header skipping, and path metadata.

Architecture:
    format_ingestion/ is a top-level package built on format_kernel/.
    Configuration objects come from format_config/; nothing in the kernel
    imports from ingestion.
"""
