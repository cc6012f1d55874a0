"""
Format Definition Validator (``format_config.validator``).

Responsibility
--------------
Checks a parsed ``DelimitedFormatDef`` for consistency before a reader is
built from it.

Invariants enforced
-------------------
* A non-empty delimiter is present.
* Each path-tracking field exists in the schema with the right type:
  path -> string, length -> long, modification time -> long.
* Path-tracking fields are distinct.
* At least one schema field is left for the delimited columns.

Warnings
--------
* ``skip_header`` combined with ``split_size``: every split drops its own
  first line, so data rows are lost when a file spans several splits.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from format_kernel.domain.schema import FieldType

from format_config.schema import DelimitedFormatDef


@dataclass
class FormatValidationResult:
    """
    Result of format definition validation.

    ``is_valid`` is ``True`` only when ``errors`` is empty. Warnings do not
    block use but should be reviewed.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


class FormatConfigValidationError(Exception):
    """Format definition failed validation.

    Attributes:
        errors: Validation error messages.
    """

    code: str = "FORMAT_CONFIG_INVALID"

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid format configuration: " + "; ".join(errors))


def validate_format_def(fmt: DelimitedFormatDef) -> FormatValidationResult:
    """Validate a delimited format definition."""
    result = FormatValidationResult()

    if not fmt.delimiter:
        result.add_error("'delimiter' must be a non-empty string")

    _validate_metadata_fields(fmt, result)

    if fmt.split_size is not None and fmt.split_size <= 0:
        result.add_error(f"'split_size' must be positive, got {fmt.split_size}")
    if fmt.skip_header and fmt.split_size is not None:
        result.add_warning(
            "'skip_header' drops the first line of every split; "
            "data rows are lost when a file spans more than one split"
        )
    return result


_METADATA_TYPES = (
    ("path_field", FieldType.STRING),
    ("length_field", FieldType.LONG),
    ("modification_time_field", FieldType.LONG),
)


def _validate_metadata_fields(fmt: DelimitedFormatDef, result: FormatValidationResult) -> None:
    names = fmt.metadata_field_names
    if len(set(names)) != len(names):
        result.add_error("path, length and modification time fields must be distinct")

    if fmt.schema is None:
        if names:
            result.add_error("path tracking fields require a schema")
        return

    for attr, expected in _METADATA_TYPES:
        name = getattr(fmt, attr)
        if not name:
            continue
        f = fmt.schema.get_field(name)
        if f is None:
            result.add_error(f"{attr} '{name}' must exist in the schema")
        elif f.field_type != expected or f.logical_type is not None:
            result.add_error(
                f"{attr} '{name}' must be of type {expected.value}, found {f.display_type}"
            )

    if len(fmt.schema) - len(set(names)) <= 0:
        result.add_error("schema has no fields left for delimited values")
