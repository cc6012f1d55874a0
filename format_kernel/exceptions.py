"""
Typed Exception Hierarchy for the Format Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Readers run unattended inside batch jobs. A host engine deciding whether to
re-attempt a split, or an operator reading a failed job, must be able to tell
"the schema does not match the file" from "the file could not be opened"
without parsing message text.

Every error therefore:
  1. Has a TYPED exception class (catch by type, not message)
  2. Has a CODE attribute (machine-readable, log-safe)
  3. Carries structured DATA (counts, field names, paths)

Example - WRONG way to handle errors:
    try:
        record = reader.current_record()
    except Exception as e:
        if "schema only contains" in str(e):  # FRAGILE
            ...

Example - RIGHT way:
    try:
        record = reader.current_record()
    except FieldCountMismatchError as e:
        log.error("bad row", extra={"observed": e.observed, "expected": e.expected})

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    FormatReaderError (base)
    |
    +-- FormatError
    |   +-- FieldCountMismatchError
    |   +-- InvalidDateTimeError
    |   +-- FieldConversionError
    |
    +-- SchemaError
    |   +-- InvalidSchemaError
    |   +-- UnknownFieldError
    |   +-- NullFieldError
    |
    +-- SourceError
    |   +-- SourceOpenError
    |   +-- SourceReadError
    |
    +-- ReaderStateError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                  | When Raised
-----------|-----------------------|-------------------------------------------
Format     | FIELD_COUNT_MISMATCH  | Row token count != schema field count
           | INVALID_DATETIME      | Datetime field not ISO-8601 local
           | FIELD_CONVERSION      | Token cannot convert to the field type
-----------|-----------------------|-------------------------------------------
Schema     | INVALID_SCHEMA        | Schema JSON malformed or unsupported
           | UNKNOWN_FIELD         | Builder set on a field not in schema
           | NULL_FIELD            | Null in a non-nullable field at build
-----------|-----------------------|-------------------------------------------
Source     | SOURCE_OPEN_FAILURE   | Row source could not open the split
           | SOURCE_READ_FAILURE   | Row source failed while pulling a line
-----------|-----------------------|-------------------------------------------
Reader     | READER_STATE          | Operation invalid in the reader's state

None of these are retried inside the readers. Retry policy belongs to the
host (for example re-running a whole split on another worker).
"""


class FormatReaderError(Exception):
    """
    Base exception for all format reader errors.

    All subclasses must have a `code` class attribute
    for machine-readable error identification.
    """

    code: str = "FORMAT_READER_ERROR"


# Record format exceptions


class FormatError(FormatReaderError):
    """Base exception for a line that cannot be turned into a record."""

    code: str = "FORMAT_ERROR"


class FieldCountMismatchError(FormatError):
    """
    A row split into a different number of fields than the schema has.

    Only recoverable by reconfiguring the reader. ``hints`` holds advisory
    text (for example suggesting the text format or quoted values).
    """

    code: str = "FIELD_COUNT_MISMATCH"

    def __init__(self, observed: int, expected: int, hints: tuple[str, ...] = ()):
        self.observed = observed
        self.expected = expected
        self.hints = hints
        qualifier = "only " if observed > expected else ""
        message = (
            f"Found a row with {observed} field{'' if observed == 1 else 's'} "
            f"when the schema {qualifier}contains {expected} field{'' if expected == 1 else 's'}."
        )
        if hints:
            message = f"{message} {' '.join(hints)}"
        super().__init__(message)


class InvalidDateTimeError(FormatError):
    """Datetime field value is not an ISO-8601 local date-time."""

    code: str = "INVALID_DATETIME"

    def __init__(self, field_name: str, value: str):
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Datetime field '{field_name}' with value '{value}' is not in ISO-8601 format."
        )


class FieldConversionError(FormatError):
    """Token cannot be converted to the field's declared type."""

    code: str = "FIELD_CONVERSION"

    def __init__(self, field_name: str, value: str, target_type: str, reason: str = ""):
        self.field_name = field_name
        self.value = value
        self.target_type = target_type
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Cannot convert value '{value}' of field '{field_name}' to {target_type}{detail}"
        )


# Schema exceptions


class SchemaError(FormatReaderError):
    """Base exception for schema and builder errors."""

    code: str = "SCHEMA_ERROR"


class InvalidSchemaError(SchemaError):
    """Schema definition is malformed or uses an unsupported type."""

    code: str = "INVALID_SCHEMA"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid schema: {reason}")


class UnknownFieldError(SchemaError):
    """Field name does not exist in the builder's schema."""

    code: str = "UNKNOWN_FIELD"

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Field '{field_name}' is not in the schema")


class NullFieldError(SchemaError):
    """Non-nullable field is null when the record is built."""

    code: str = "NULL_FIELD"

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Field '{field_name}' is not nullable but has no value")


# Row source exceptions


class SourceError(FormatReaderError):
    """Base exception for row source failures."""

    code: str = "SOURCE_ERROR"


class SourceOpenError(SourceError):
    """Row source could not open its split."""

    code: str = "SOURCE_OPEN_FAILURE"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open {path}: {reason}")


class SourceReadError(SourceError):
    """Row source failed while pulling the next line."""

    code: str = "SOURCE_READ_FAILURE"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


# Reader lifecycle exceptions


class ReaderStateError(FormatReaderError):
    """Reader operation called in a state that does not allow it."""

    code: str = "READER_STATE"

    def __init__(self, state: str, operation: str):
        self.state = state
        self.operation = operation
        super().__init__(f"Cannot call {operation}() while reader is {state}")
