"""
format_config -- declarative reader configuration.

Responsibility:
    Turns YAML (or already-decoded mappings) into frozen format
    definitions, validates them against their schema, and locates sample
    files for schema derivation.  Readers never read configuration files
    themselves; they receive a ``DelimitedFormatDef``.

Architecture position:
    Configuration layer.  Depends on ``format_kernel`` only; the kernel
    MUST NEVER import from ``format_config``.

Failure modes:
    - ``FileNotFoundError`` -- configuration or sample path missing.
    - ``yaml.YAMLError`` -- malformed YAML.
    - ``KeyError`` / ``ValueError`` -- missing or malformed keys.
    - ``FormatConfigValidationError`` -- definition parsed but inconsistent
      with its schema.
"""

from format_config.loader import load_format_config, load_yaml_file, parse_delimited_format
from format_config.sampling import find_schema_sample_file, list_input_files
from format_config.schema import DelimitedFormatDef
from format_config.validator import (
    FormatConfigValidationError,
    FormatValidationResult,
    validate_format_def,
)

__all__ = [
    "DelimitedFormatDef",
    "FormatConfigValidationError",
    "FormatValidationResult",
    "find_schema_sample_file",
    "list_input_files",
    "load_format_config",
    "load_yaml_file",
    "parse_delimited_format",
    "validate_format_def",
]
