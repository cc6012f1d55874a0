"""Tests for RecordBuilder and string conversion (format_kernel/domain/record.py)."""

from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal

import pytest

from format_kernel.domain.record import RecordBuilder, StructuredRecord
from format_kernel.exceptions import FieldConversionError, NullFieldError, UnknownFieldError
from tests.conftest import make_schema


def _convert(avro_type, value):
    schema = make_schema(("v", avro_type))
    return RecordBuilder(schema).convert_and_set("v", value).get("v")


class TestConvertAndSet:
    """String -> declared type."""

    @pytest.mark.parametrize("text, expected", [("true", True), ("TRUE", True), ("false", False), ("yes", False)])
    def test_boolean(self, text, expected):
        assert _convert("boolean", text) is expected

    def test_int_and_long(self):
        assert _convert("int", "-42") == -42
        assert _convert("int", "+7") == 7
        assert _convert("long", str(2**40)) == 2**40

    def test_int_out_of_range(self):
        with pytest.raises(FieldConversionError) as exc_info:
            _convert("int", str(2**31))
        assert exc_info.value.reason == "out of range"

    @pytest.mark.parametrize("text", ["1.5", "abc", " 1", ""])
    def test_int_rejects_non_digits(self, text):
        with pytest.raises(FieldConversionError):
            _convert("int", text)

    def test_float_and_double(self):
        assert _convert("float", "1.5") == 1.5
        assert _convert("double", "-2e3") == -2000.0

    def test_double_rejects_text(self):
        with pytest.raises(FieldConversionError):
            _convert("double", "one")

    def test_bytes_and_string(self):
        assert _convert("bytes", "héllo") == "héllo".encode("utf-8")
        assert _convert("string", "  kept as is ") == "  kept as is "

    def test_date_and_time(self):
        assert _convert({"type": "int", "logicalType": "date"}, "2024-02-29") == date(2024, 2, 29)
        assert _convert({"type": "long", "logicalType": "time-micros"}, "09:30:15.500000") == time(9, 30, 15, 500000)

    def test_timestamp_naive_taken_as_utc(self):
        value = _convert({"type": "long", "logicalType": "timestamp-millis"}, "2024-01-01T00:00:00")
        assert value == datetime(2024, 1, 1, tzinfo=UTC)

    def test_timestamp_with_offset_normalised(self):
        value = _convert({"type": "long", "logicalType": "timestamp-micros"}, "2024-01-01T02:00:00+02:00")
        assert value == datetime(2024, 1, 1, tzinfo=UTC)
        assert value.utcoffset() == timedelta(0)

    def test_datetime_is_local(self):
        value = _convert({"type": "string", "logicalType": "datetime"}, "2024-03-01T09:30")
        assert value == datetime(2024, 3, 1, 9, 30)
        assert value.tzinfo is None

    def test_datetime_rejects_offset(self):
        with pytest.raises(FieldConversionError):
            _convert({"type": "string", "logicalType": "datetime"}, "2024-03-01T09:30+01:00")

    def test_decimal(self):
        decimal_type = {"type": "bytes", "logicalType": "decimal", "precision": 6, "scale": 2}
        assert _convert(decimal_type, "12.5") == Decimal("12.50")
        with pytest.raises(FieldConversionError):
            _convert(decimal_type, "1.005")
        with pytest.raises(FieldConversionError):
            _convert(decimal_type, "123456.7")
        with pytest.raises(FieldConversionError):
            _convert(decimal_type, "NaN")

    def test_none_sets_null(self):
        assert _convert(["int", "null"], None) is None

    def test_unknown_field(self):
        builder = RecordBuilder(make_schema(("a", "string")))
        with pytest.raises(UnknownFieldError):
            builder.convert_and_set("b", "x")
        with pytest.raises(UnknownFieldError):
            builder.set("b", "x")


class TestBuild:
    def test_build_orders_values_by_schema(self):
        schema = make_schema(("a", "string"), ("b", "int"))
        record = RecordBuilder(schema).set("b", 2).set("a", "x").build()
        assert isinstance(record, StructuredRecord)
        assert list(record) == ["a", "b"]
        assert dict(record) == {"a": "x", "b": 2}
        assert record.schema is schema

    def test_null_in_non_nullable_field(self):
        schema = make_schema(("a", "string"), ("b", ["int", "null"]))
        builder = RecordBuilder(schema).set("a", None)
        with pytest.raises(NullFieldError) as exc_info:
            builder.build()
        assert exc_info.value.field_name == "a"

    def test_unset_nullable_field_is_none(self):
        schema = make_schema(("a", "string"), ("b", ["int", "null"]))
        record = RecordBuilder(schema).set("a", "x").build()
        assert record["b"] is None

    def test_record_is_read_only(self):
        record = RecordBuilder(make_schema(("a", "string"))).set("a", "x").build()
        with pytest.raises(TypeError):
            record["a"] = "y"

    def test_values_is_a_copy(self):
        builder = RecordBuilder(make_schema(("a", "string"))).set("a", "x")
        builder.values()["a"] = "changed"
        assert builder.get("a") == "x"
