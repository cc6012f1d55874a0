"""Tests for schema parsing and structure (format_kernel/domain/schema.py)."""

import json

import pytest

from format_kernel.domain.schema import (
    FieldSchema,
    FieldType,
    LogicalType,
    Schema,
    parse_schema,
    schema_to_json,
)
from format_kernel.exceptions import InvalidSchemaError

ORDERS = {
    "type": "record",
    "name": "orders",
    "fields": [
        {"name": "id", "type": "long"},
        {"name": "note", "type": ["string", "null"]},
        {"name": "placed", "type": {"type": "string", "logicalType": "datetime"}},
        {
            "name": "amount",
            "type": {"type": "bytes", "logicalType": "decimal", "precision": 10, "scale": 2},
        },
    ],
}


class TestParseSchema:
    """Avro-style record JSON -> Schema."""

    def test_fields_in_order(self):
        schema = parse_schema(ORDERS)
        assert schema.name == "orders"
        assert schema.field_names == ("id", "note", "placed", "amount")

    def test_nullable_union(self):
        schema = parse_schema(ORDERS)
        assert schema.get_field("note").nullable is True
        assert schema.get_field("id").nullable is False

    def test_logical_types(self):
        schema = parse_schema(ORDERS)
        placed = schema.get_field("placed")
        assert placed.logical_type == LogicalType.DATETIME
        assert placed.is_datetime
        amount = schema.get_field("amount")
        assert amount.precision == 10
        assert amount.scale == 2

    def test_json_text_accepted(self):
        assert parse_schema(json.dumps(ORDERS)).field_names == parse_schema(ORDERS).field_names

    def test_cached_by_content(self):
        """Identical definitions, however written, share one Schema instance."""
        reordered = {"fields": ORDERS["fields"], "name": "orders", "type": "record"}
        assert parse_schema(ORDERS) is parse_schema(reordered)
        assert parse_schema(ORDERS) is parse_schema(json.dumps(ORDERS, indent=2))

    def test_round_trip_through_json(self):
        schema = parse_schema(ORDERS)
        assert parse_schema(schema_to_json(schema)) == schema


class TestInvalidSchemas:
    @pytest.mark.parametrize(
        "value",
        [
            "{not json",
            {"type": "enum", "name": "x"},
            {"type": "record", "name": "x"},
            {"type": "record", "fields": [{"name": "a"}]},
            {"type": "record", "fields": [{"name": "a", "type": "uuid"}]},
            {"type": "record", "fields": [{"name": "a", "type": ["int", "string"]}]},
            {"type": "record", "fields": [{"name": "a", "type": {"type": "int", "logicalType": "money"}}]},
            {"type": "record", "fields": [{"name": "a", "type": {"type": "int", "logicalType": "datetime"}}]},
            {"type": "record", "fields": [{"name": "a", "type": "int"}, {"name": "a", "type": "int"}]},
        ],
    )
    def test_rejected(self, value):
        with pytest.raises(InvalidSchemaError):
            parse_schema(value)

    def test_decimal_needs_precision(self):
        with pytest.raises(InvalidSchemaError):
            FieldSchema("amount", FieldType.BYTES, logical_type=LogicalType.DECIMAL)

    def test_decimal_scale_bounded_by_precision(self):
        with pytest.raises(InvalidSchemaError):
            FieldSchema(
                "amount", FieldType.BYTES, logical_type=LogicalType.DECIMAL, precision=2, scale=3
            )


class TestSchemaOperations:
    def test_without_drops_named_fields(self):
        schema = parse_schema(ORDERS)
        trimmed = schema.without(["note", "amount"])
        assert trimmed.field_names == ("id", "placed")
        assert schema.field_names == ("id", "note", "placed", "amount")

    def test_len_and_iter(self):
        schema = parse_schema(ORDERS)
        assert len(schema) == 4
        assert [f.name for f in schema] == list(schema.field_names)

    def test_fingerprint_is_structural(self):
        a = Schema("r", (FieldSchema("x", FieldType.INT),))
        b = Schema("r", (FieldSchema("x", FieldType.INT),))
        c = Schema("r", (FieldSchema("x", FieldType.LONG),))
        assert a.fingerprint == b.fingerprint
        assert a.fingerprint != c.fingerprint

    def test_display_type(self):
        schema = parse_schema(ORDERS)
        assert schema.get_field("id").display_type == "long"
        assert schema.get_field("placed").display_type == "datetime"
