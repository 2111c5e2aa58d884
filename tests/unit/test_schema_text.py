"""Tests for column schema text parsing."""

from __future__ import annotations

import pyarrow as pa
import pytest

from harness.errors import ErrorKind, SchemaTextError
from ingest.schema_text import parse_schema_text


def test_primitive_columns_in_order() -> None:
    """Columns keep their declaration order and primitive types."""
    schema = parse_schema_text("id INT, dep STRING, amount BIGINT, ok BOOLEAN, score DOUBLE")
    assert schema.names == ["id", "dep", "amount", "ok", "score"]
    assert schema.field("id").type == pa.int32()
    assert schema.field("dep").type == pa.string()
    assert schema.field("amount").type == pa.int64()
    assert schema.field("ok").type == pa.bool_()
    assert schema.field("score").type == pa.float64()


def test_not_null_marks_field_required() -> None:
    """``NOT NULL`` columns are non-nullable."""
    schema = parse_schema_text("id INT NOT NULL, dep STRING")
    assert schema.field("id").nullable is False
    assert schema.field("dep").nullable is True


def test_decimal_precision_and_scale() -> None:
    """Decimal parameters carry through."""
    schema = parse_schema_text("price DECIMAL(10, 2)")
    assert schema.field("price").type == pa.decimal128(10, 2)


def test_nested_types() -> None:
    """Arrays, maps and structs resolve recursively."""
    schema = parse_schema_text(
        "tags ARRAY<STRING>, attrs MAP<STRING, INT>, point STRUCT<x: INT, y: DOUBLE>"
    )
    assert schema.field("tags").type == pa.list_(pa.string())
    assert schema.field("attrs").type == pa.map_(pa.string(), pa.int32())
    point = schema.field("point").type
    assert isinstance(point, pa.StructType)
    assert [point.field(i).name for i in range(point.num_fields)] == ["x", "y"]


def test_date_column() -> None:
    """Dates map to day resolution."""
    assert parse_schema_text("day DATE").field("day").type == pa.date32()


@pytest.mark.parametrize("text", ["", "   ", "id INT, dep"])
def test_invalid_schema_text(text: str) -> None:
    """Blank, untyped or unparseable text raises SchemaTextError."""
    with pytest.raises(SchemaTextError) as excinfo:
        parse_schema_text(text)
    assert excinfo.value.kind is ErrorKind.SCHEMA
    assert excinfo.value.schema_text == text


def test_schema_error_is_value_error() -> None:
    """Schema errors can be caught as ValueError."""
    with pytest.raises(ValueError, match="schema text"):
        parse_schema_text("")
