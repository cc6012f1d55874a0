"""Tests for the YAML format loader (format_config/loader.py)."""

import pytest
import yaml

from format_config import (
    FormatConfigValidationError,
    load_format_config,
    load_yaml_file,
    parse_delimited_format,
)
from format_config.loader import parse_bool
from format_kernel.exceptions import InvalidSchemaError

ORDERS_YAML = """\
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
"""


class TestLoadYamlFile:
    def test_empty_file_is_empty_dict(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml_file(path) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml_file(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("delimiter: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_yaml_file(path)


class TestParseDelimitedFormat:
    """Dict -> DelimitedFormatDef."""

    def test_defaults(self):
        fmt = parse_delimited_format({"delimiter": ","})
        assert fmt.delimiter == ","
        assert fmt.schema is None
        assert fmt.enable_quoted_values is False
        assert fmt.skip_header is False
        assert fmt.encoding == "utf-8"
        assert fmt.split_size is None

    def test_camel_case_aliases(self):
        fmt = parse_delimited_format(
            {
                "delimiter": ";",
                "enableQuotedValues": "true",
                "skipHeader": True,
                "pathField": "file",
                "lengthField": "size",
                "modificationTimeField": "mtime",
                "filenameOnly": "TRUE",
                "splitSize": "1024",
                "pathFilter": r"\.csv$",
            }
        )
        assert fmt.enable_quoted_values is True
        assert fmt.skip_header is True
        assert fmt.metadata_field_names == ("file", "size", "mtime")
        assert fmt.filename_only is True
        assert fmt.split_size == 1024
        assert fmt.path_filter == r"\.csv$"

    def test_schema_as_json_text(self):
        fmt = parse_delimited_format(
            {
                "delimiter": ",",
                "schema": '{"type": "record", "name": "r", "fields": [{"name": "a", "type": "int"}]}',
            }
        )
        assert fmt.schema.field_names == ("a",)

    def test_blank_schema_is_none(self):
        assert parse_delimited_format({"delimiter": ",", "schema": "  "}).schema is None

    def test_missing_delimiter(self):
        with pytest.raises(KeyError):
            parse_delimited_format({"skip_header": True})

    def test_malformed_split_size(self):
        with pytest.raises(ValueError, match="split_size"):
            parse_delimited_format({"delimiter": ",", "split_size": "big"})

    def test_malformed_schema(self):
        with pytest.raises(InvalidSchemaError):
            parse_delimited_format({"delimiter": ",", "schema": {"type": "record"}})

    def test_invalid_path_filter(self):
        with pytest.raises(ValueError, match="path_filter"):
            parse_delimited_format({"delimiter": ",", "path_filter": "*.csv"})


class TestParseBool:
    @pytest.mark.parametrize("value, expected", [(True, True), (False, False), ("True", True), (" false ", False)])
    def test_accepted(self, value, expected):
        assert parse_bool(value, "k") is expected

    @pytest.mark.parametrize("value", ["yes", 1, None])
    def test_rejected(self, value):
        with pytest.raises(ValueError, match="'k' must be a boolean"):
            parse_bool(value, "k")


class TestLoadFormatConfig:
    def test_loads_and_validates(self, tmp_path):
        path = tmp_path / "orders.yaml"
        path.write_text(ORDERS_YAML)
        fmt = load_format_config(path)
        assert fmt.delimiter == "|"
        assert fmt.schema.name == "orders"
        assert fmt.data_schema.field_names == ("order_id", "note")

    def test_invalid_definition_raises(self, tmp_path):
        path = tmp_path / "orders.yaml"
        path.write_text(ORDERS_YAML.replace("path_field: source_file", "path_field: order_id"))
        with pytest.raises(FormatConfigValidationError) as exc_info:
            load_format_config(path)
        assert exc_info.value.code == "FORMAT_CONFIG_INVALID"
        assert any("path_field 'order_id'" in e for e in exc_info.value.errors)
