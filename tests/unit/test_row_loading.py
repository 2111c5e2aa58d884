"""Tests for newline-delimited JSON row loading and appends."""

from __future__ import annotations

import pyarrow as pa
import pytest

from harness.errors import ErrorKind, IngestionFailure, TableCommitError, TableNotFound
from ingest.rows import append_rows, json_lines, load_rows
from tests.test_helpers.table_layer import RecordingTableLayer

SCHEMA = "id INT, dep STRING"


class TestLoadRows:
    """Tests for JSON parsing into Arrow rows."""

    def test_blank_payload_is_empty(self) -> None:
        """Payloads with only blank lines load no rows."""
        assert load_rows("\n  \n\t\n").num_rows == 0

    def test_blank_payload_with_schema_is_typed(self) -> None:
        """Empty payloads still carry the declared schema."""
        table = load_rows("", schema=SCHEMA)
        assert table.num_rows == 0
        assert table.schema.names == ["id", "dep"]

    def test_blank_lines_are_skipped_in_order(self) -> None:
        """Rows keep input order around blank lines."""
        table = load_rows('{"a":1}\n\n{"a":2}')
        assert table.num_rows == 2
        assert table.column("a").to_pylist() == [1, 2]

    def test_explicit_schema(self) -> None:
        """Schema text drives types, ignores unknown fields and fills missing ones."""
        table = load_rows(
            '{"dep": "hr", "id": 1, "extra": true}\n{"id": 2}',
            schema=SCHEMA,
        )
        assert table.schema.names == ["id", "dep"]
        assert table.schema.field("id").type == pa.int32()
        assert table.to_pylist() == [{"id": 1, "dep": "hr"}, {"id": 2, "dep": None}]

    def test_malformed_json(self) -> None:
        """Malformed lines raise IngestionFailure."""
        with pytest.raises(IngestionFailure) as excinfo:
            load_rows('{"id": 1}\nnot json')
        assert excinfo.value.kind is ErrorKind.INGEST
        assert excinfo.value.cause is excinfo.value.__cause__


def test_json_lines_keeps_order() -> None:
    """Only whitespace-only lines are dropped."""
    assert json_lines("a\n\n b \r\n\nc") == ["a", " b \r", "c"]


def test_unicode_line_breaks_stay_inside_rows() -> None:
    """Line separators other than line feeds never split a row."""
    assert json_lines('{"dep": "x\x85y"}') == ['{"dep": "x\x85y"}']
    table = load_rows('{"dep": "a\u2028b"}\n{"dep": "c\u2029d"}', schema="dep STRING")
    assert table.column("dep").to_pylist() == ["a\u2028b", "c\u2029d"]


def test_crlf_payload() -> None:
    """Carriage returns before line feeds are whitespace."""
    table = load_rows('{"id": 1}\r\n{"id": 2}\r\n', schema="id INT")
    assert table.column("id").to_pylist() == [1, 2]


class TestAppendRows:
    """Tests for appends through a table layer."""

    def test_append_is_one_commit(self) -> None:
        """Each append is a single layer call with every row."""
        layer = RecordingTableLayer()
        layer.create_table("t", pa.schema([("id", pa.int32()), ("dep", pa.string())]))
        append_rows(layer, "t", '{"id": 1, "dep": "hr"}\n\n{"id": 2, "dep": "it"}', schema=SCHEMA)
        assert layer.append_calls == [("t", 2)]
        assert layer.read_rows("t").column("id").to_pylist() == [1, 2]

    def test_append_rows_are_one_chunk(self) -> None:
        """Rows reach the layer as a single contiguous chunk."""
        layer = RecordingTableLayer()
        layer.create_table("t", pa.schema([("id", pa.int32()), ("dep", pa.string())]))
        payload = "\n".join(f'{{"id": {i}, "dep": "d{i}"}}' for i in range(50))
        append_rows(layer, "t", payload, schema=SCHEMA)
        stored = layer.tables["t"].chunks[0]
        assert all(column.num_chunks == 1 for column in stored.columns)

    def test_missing_table_raises_ingestion_failure(self) -> None:
        """Appending to a missing table chains the layer error."""
        layer = RecordingTableLayer()
        with pytest.raises(IngestionFailure) as excinfo:
            append_rows(layer, "missing", '{"id": 1}', schema=SCHEMA)
        failure = excinfo.value
        assert isinstance(failure.cause, TableNotFound)
        assert failure.__cause__ is failure.cause
        assert failure.table_name == "missing"
        assert "missing" in str(failure)

    def test_commit_failure_raises_ingestion_failure(self) -> None:
        """Rejected commits surface as IngestionFailure."""
        layer = RecordingTableLayer()
        layer.create_table("t", pa.schema([("id", pa.int32())]))
        layer.fail_appends_with = TableCommitError("conflict", table_name="t")
        with pytest.raises(IngestionFailure) as excinfo:
            append_rows(layer, "t", '{"id": 1}', schema="id INT")
        assert isinstance(excinfo.value.cause, TableCommitError)
