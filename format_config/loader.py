"""
Configuration Loader (``format_config.loader``).

Responsibility
--------------
Loads YAML format files and parses them into the frozen
``format_config.schema`` dataclasses.

Keys are snake_case; the camelCase plugin property names
(``enableQuotedValues``, ``skipHeader``, ``pathField``, ``lengthField``,
``modificationTimeField``, ``filenameOnly``) are accepted as aliases.

Example::

    delimiter: "|"
    enable_quoted_values: true
    skip_header: true
    path_field: source_file
    schema:
      type: record
      name: orders
      fields:
        - {name: order_id, type: long}
        - {name: note, type: [string, "null"]}
        - {name: source_file, type: string}

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``delimiter``  -> ``KeyError``.
* Malformed boolean, integer or regex values  -> ``ValueError``.
* Malformed schema  -> ``InvalidSchemaError`` from the kernel.
* Inconsistent definition  -> ``FormatConfigValidationError``
  (``load_format_config`` only).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from format_kernel.domain.schema import Schema, parse_schema
from format_kernel.logging_config import get_logger

from format_config.schema import DelimitedFormatDef
from format_config.validator import FormatConfigValidationError, validate_format_def

logger = get_logger("config.loader")

_ALIASES: dict[str, str] = {
    "enableQuotedValues": "enable_quoted_values",
    "skipHeader": "skip_header",
    "pathField": "path_field",
    "lengthField": "length_field",
    "modificationTimeField": "modification_time_field",
    "filenameOnly": "filename_only",
    "splitSize": "split_size",
    "pathFilter": "path_filter",
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_bool(value: Any, key: str) -> bool:
    """
    Parse a boolean from YAML (bool, or "true"/"false" text in any case).

    Raises:
        ValueError: for any other value.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"'{key}' must be a boolean, got {value!r}")


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    return {_ALIASES.get(k, k): v for k, v in data.items()}


def parse_schema_value(value: Any) -> Schema | None:
    """Parse a schema given as JSON text or as a YAML mapping; empty -> None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_schema(value)


def parse_delimited_format(data: dict[str, Any]) -> DelimitedFormatDef:
    """
    Parse a ``DelimitedFormatDef`` from a dict.

    Preconditions:
        - ``data`` must contain ``delimiter``.
    Raises:
        KeyError: if ``delimiter`` is missing.
        ValueError: if a boolean, integer or regex value is malformed.
        InvalidSchemaError: if the schema cannot be parsed.
    """
    data = _normalize_keys(data)
    split_size = data.get("split_size")
    if split_size is not None:
        try:
            split_size = int(split_size)
        except (TypeError, ValueError):
            raise ValueError(f"'split_size' must be an integer, got {split_size!r}") from None

    path_filter = _optional_str(data.get("path_filter"))
    if path_filter is not None:
        try:
            re.compile(path_filter)
        except re.error as exc:
            raise ValueError(f"'path_filter' is not a valid regex: {exc}") from None

    return DelimitedFormatDef(
        delimiter=str(data["delimiter"]),
        schema=parse_schema_value(data.get("schema")),
        enable_quoted_values=parse_bool(data.get("enable_quoted_values", False), "enable_quoted_values"),
        skip_header=parse_bool(data.get("skip_header", False), "skip_header"),
        path_field=_optional_str(data.get("path_field")),
        length_field=_optional_str(data.get("length_field")),
        modification_time_field=_optional_str(data.get("modification_time_field")),
        filename_only=parse_bool(data.get("filename_only", False), "filename_only"),
        encoding=str(data.get("encoding") or "utf-8"),
        split_size=split_size,
        path_filter=path_filter,
    )


def load_format_config(path: Path) -> DelimitedFormatDef:
    """
    Load, parse and validate a delimited format YAML file.

    Raises:
        FormatConfigValidationError: if validation reports errors.
    """
    fmt = parse_delimited_format(load_yaml_file(path))
    result = validate_format_def(fmt)
    for warning in result.warnings:
        logger.warning("format_config_warning", extra={"path": str(path), "warning": warning})
    if not result.is_valid:
        raise FormatConfigValidationError(result.errors)
    logger.info(
        "format_config_loaded",
        extra={
            "path": str(path),
            "schema_fingerprint": fmt.schema.fingerprint if fmt.schema else None,
        },
    )
    return fmt
