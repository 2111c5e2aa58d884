"""Newline-delimited JSON row loading and table appends."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

import pyarrow as pa
from pyarrow import json as pa_json

from harness.errors import IngestionFailure, TableLayerError
from ingest.schema_text import parse_schema_text

if TYPE_CHECKING:
    from storage.iceberg.tables import TableLayer

logger = logging.getLogger(__name__)

_APPEND_ERRORS: tuple[type[Exception], ...] = (
    TableLayerError,
    pa.ArrowException,
    ValueError,
    TypeError,
)


def json_lines(json_data: str) -> list[str]:
    """Return the non-blank lines of a JSON payload, in order.

    Only line feeds separate rows. Other Unicode line breaks may appear
    unescaped inside JSON strings.

    Returns
    -------
    list[str]
        Lines that contain more than whitespace.
    """
    return [line for line in json_data.split("\n") if line.strip()]


def _conform(table: pa.Table, schema: pa.Schema) -> pa.Table:
    columns = [
        table.column(field.name)
        if field.name in table.column_names
        else pa.nulls(table.num_rows, type=field.type)
        for field in schema
    ]
    return pa.Table.from_arrays(columns, schema=schema)


def load_rows(json_data: str, *, schema: str | None = None) -> pa.Table:
    """Load newline-delimited JSON into Arrow rows.

    Parameters
    ----------
    json_data
        One JSON object per line; blank lines are ignored.
    schema
        Optional column schema text. When omitted, PyArrow infers the schema.

    Returns
    -------
    pyarrow.Table
        Rows in input order. Empty when the payload has no non-blank lines.

    Raises
    ------
    IngestionFailure
        Raised when a line is not valid JSON for the schema.
    """
    arrow_schema = parse_schema_text(schema) if schema is not None else None
    lines = json_lines(json_data)
    if not lines:
        return arrow_schema.empty_table() if arrow_schema is not None else pa.table({})
    payload = "\n".join(lines).encode("utf-8")
    parse_options = (
        pa_json.ParseOptions(explicit_schema=arrow_schema, unexpected_field_behavior="ignore")
        if arrow_schema is not None
        else pa_json.ParseOptions()
    )
    try:
        table = pa_json.read_json(io.BytesIO(payload), parse_options=parse_options)
    except pa.ArrowException as exc:
        msg = f"Cannot parse {len(lines)} JSON rows: {exc}"
        raise IngestionFailure(msg, table_name=None, cause=exc) from exc
    if arrow_schema is not None:
        table = _conform(table, arrow_schema)
    logger.debug("Loaded %d JSON rows with columns %s", table.num_rows, table.column_names)
    return table


def append_rows(
    layer: TableLayer,
    table_name: str,
    json_data: str,
    *,
    schema: str | None = None,
) -> None:
    """Load JSON rows and append them to a table in one commit.

    Rows are combined into a single chunk so each append writes one data file,
    which keeps file-count metrics in snapshot summaries stable across runs.

    Raises
    ------
    IngestionFailure
        Raised when the table layer rejects the append, including when the
        table does not exist.
    """
    rows = load_rows(json_data, schema=schema).combine_chunks()
    try:
        layer.append_rows(table_name, rows)
    except _APPEND_ERRORS as exc:
        msg = f"Failed to write data to {table_name}: {exc}"
        raise IngestionFailure(msg, table_name=table_name, cause=exc) from exc


__all__ = ["append_rows", "json_lines", "load_rows"]
