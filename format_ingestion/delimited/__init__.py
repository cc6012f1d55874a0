"""Delimited text parsing: tokenizer, field coercion, record assembly, reader."""

from format_ingestion.delimited.assembler import assemble_record, mismatch_hints
from format_ingestion.delimited.coercion import coerce_field, render_field, validate_datetime_field
from format_ingestion.delimited.header import should_skip
from format_ingestion.delimited.inference import header_field_names, infer_header_schema
from format_ingestion.delimited.reader import DelimitedRecordReader
from format_ingestion.delimited.tokenizer import count_tokens, join_tokens, tokenize

__all__ = [
    "DelimitedRecordReader",
    "assemble_record",
    "coerce_field",
    "count_tokens",
    "header_field_names",
    "infer_header_schema",
    "join_tokens",
    "mismatch_hints",
    "render_field",
    "should_skip",
    "tokenize",
    "validate_datetime_field",
]
