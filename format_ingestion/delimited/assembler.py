"""
Record assembler: one delimited line -> one populated RecordBuilder.

Tokens are paired with schema fields by position. The line must split into
exactly as many tokens as the schema has fields; more or fewer both raise
FieldCountMismatchError, so a record is either fully assembled or not at
all.

The token count reported for a long row comes from a second tokenization
of the line, done only on that error path, so well-formed rows are split
once.
"""

from __future__ import annotations

from format_kernel.domain.record import RecordBuilder
from format_kernel.domain.schema import FieldType
from format_kernel.exceptions import FieldCountMismatchError

from format_ingestion.delimited.coercion import coerce_field
from format_ingestion.delimited.tokenizer import QUOTE, count_tokens, tokenize
from format_ingestion.domain.types import DelimitedParseConfig

# Field name the 'text' format uses for the whole line
TEXT_BODY_FIELD = "body"

HINT_TEXT_FORMAT = "Did you mean to use the 'text' format?"
HINT_QUOTED_VALUES = "Check if quoted values should be allowed."
HINT_FIELD_COUNT = "Check that the schema contains the right number of fields."


def mismatch_hints(line: str, config: DelimitedParseConfig) -> tuple[str, ...]:
    """Advisory text for a row whose field count does not match the schema."""
    body = config.schema.get_field(TEXT_BODY_FIELD)
    if body is not None and body.field_type == FieldType.STRING:
        return (HINT_TEXT_FORMAT,)
    hints: list[str] = []
    if not config.enable_quoted_values and QUOTE in line:
        hints.append(HINT_QUOTED_VALUES)
    hints.append(HINT_FIELD_COUNT)
    return tuple(hints)


def assemble_record(
    line: str,
    config: DelimitedParseConfig,
    builder: RecordBuilder | None = None,
) -> RecordBuilder:
    """
    Tokenize line and set each token on the matching schema field.

    ``builder`` may be supplied when the output schema is wider than the
    parse schema (for example with path metadata fields); it must contain
    every field of ``config.schema``.

    Raises:
        FieldCountMismatchError: token count differs from the schema field count.
        InvalidDateTimeError: a datetime field holds a non ISO-8601 value.
        FieldConversionError: a token does not parse as its field's type.
    """
    fields = config.schema.fields
    expected = len(fields)
    if builder is None:
        builder = RecordBuilder(config.schema)

    position = 0
    for token in tokenize(line, config.delimiter, config.enable_quoted_values):
        if position == expected:
            # Fields exhausted first: count the whole row for the report.
            observed = count_tokens(line, config.delimiter, config.enable_quoted_values)
            raise FieldCountMismatchError(observed, expected, mismatch_hints(line, config))
        field = fields[position]
        builder.set(field.name, coerce_field(token, field))
        position += 1

    if position < expected:
        # Tokens exhausted first.
        raise FieldCountMismatchError(position, expected, mismatch_hints(line, config))
    return builder
