"""Column schema text to Arrow schema conversion.

Schema text is a Spark-style column list such as
``"id INT NOT NULL, dep STRING, amount DECIMAL(10, 2)"``. Parsing goes through
SQLGlot so nested types (``ARRAY<...>``, ``STRUCT<...>``, ``MAP<...>``) follow
the dialect grammar instead of ad-hoc splitting.
"""

from __future__ import annotations

from functools import lru_cache

import pyarrow as pa
import sqlglot
import sqlglot.expressions as exp
from sqlglot.errors import ParseError

from harness.errors import SchemaTextError

SCHEMA_DIALECT = "spark"

_PRIMITIVE_TYPES: dict[str, pa.DataType] = {
    "BOOLEAN": pa.bool_(),
    "TINYINT": pa.int8(),
    "SMALLINT": pa.int16(),
    "INT": pa.int32(),
    "BIGINT": pa.int64(),
    "FLOAT": pa.float32(),
    "DOUBLE": pa.float64(),
    "DATE": pa.date32(),
    "TIMESTAMP": pa.timestamp("us", tz="UTC"),
    "TIMESTAMPTZ": pa.timestamp("us", tz="UTC"),
    "TIMESTAMPLTZ": pa.timestamp("us", tz="UTC"),
    "TIMESTAMPNTZ": pa.timestamp("us"),
    "DATETIME": pa.timestamp("us"),
    "TEXT": pa.string(),
    "VARCHAR": pa.string(),
    "NVARCHAR": pa.string(),
    "CHAR": pa.string(),
    "NCHAR": pa.string(),
    "BINARY": pa.binary(),
    "VARBINARY": pa.binary(),
}

_DEFAULT_DECIMAL = (10, 0)


def _fail(message: str, schema_text: str) -> SchemaTextError:
    return SchemaTextError(f"{message} in schema text {schema_text!r}.", schema_text=schema_text)


def _decimal_type(dtype: exp.DataType, schema_text: str) -> pa.DataType:
    params = [param.name for param in dtype.expressions]
    try:
        precision = int(params[0]) if params else _DEFAULT_DECIMAL[0]
        scale = int(params[1]) if len(params) > 1 else _DEFAULT_DECIMAL[1]
    except ValueError as exc:
        raise _fail(f"Invalid DECIMAL parameters {params}", schema_text) from exc
    return pa.decimal128(precision, scale)


def _nullable(column: exp.ColumnDef) -> bool:
    for constraint in column.args.get("constraints") or ():
        kind = constraint.args.get("kind")
        if isinstance(kind, exp.NotNullColumnConstraint) and not kind.args.get("allow_null"):
            return False
    return True


def _field(column: exp.ColumnDef, schema_text: str) -> pa.Field:
    kind = column.args.get("kind")
    if not isinstance(kind, exp.DataType):
        raise _fail(f"Column {column.name!r} has no type", schema_text)
    return pa.field(column.name, resolve_sql_type(kind, schema_text), nullable=_nullable(column))


def resolve_sql_type(dtype: exp.DataType, schema_text: str = "") -> pa.DataType:
    """Resolve a parsed SQL data type to an Arrow type.

    Returns
    -------
    pyarrow.DataType
        Arrow type for the SQL type.

    Raises
    ------
    SchemaTextError
        Raised when the type has no Arrow mapping.
    """
    type_name = dtype.this.name
    primitive = _PRIMITIVE_TYPES.get(type_name)
    if primitive is not None:
        return primitive
    if type_name == "DECIMAL":
        return _decimal_type(dtype, schema_text)
    if type_name == "ARRAY" and len(dtype.expressions) == 1:
        return pa.list_(resolve_sql_type(dtype.expressions[0], schema_text))
    if type_name == "MAP" and len(dtype.expressions) == 2:
        key, value = dtype.expressions
        return pa.map_(resolve_sql_type(key, schema_text), resolve_sql_type(value, schema_text))
    if type_name == "STRUCT":
        return pa.struct([_field(member, schema_text) for member in dtype.expressions])
    raise _fail(f"Unsupported column type {dtype.sql(dialect=SCHEMA_DIALECT)}", schema_text)


@lru_cache(maxsize=128)
def parse_schema_text(schema_text: str) -> pa.Schema:
    """Parse column schema text into an Arrow schema.

    Parameters
    ----------
    schema_text
        Comma-separated column definitions.

    Returns
    -------
    pyarrow.Schema
        Schema with columns in declaration order.

    Raises
    ------
    SchemaTextError
        Raised when the text cannot be parsed or declares no columns.
    """
    if not schema_text.strip():
        raise _fail("Empty column list", schema_text)
    try:
        statement = sqlglot.parse_one(
            f"CREATE TABLE __schema ({schema_text})",
            read=SCHEMA_DIALECT,
        )
    except ParseError as exc:
        raise _fail(f"Cannot parse column list ({exc})", schema_text) from exc
    schema = statement.this if isinstance(statement, exp.Create) else None
    if not isinstance(schema, exp.Schema):
        raise _fail("Expected a column list", schema_text)
    columns = [item for item in schema.expressions if isinstance(item, exp.ColumnDef)]
    if len(columns) != len(schema.expressions):
        raise _fail("Only column definitions are allowed", schema_text)
    return pa.schema([_field(column, schema_text) for column in columns])


__all__ = ["SCHEMA_DIALECT", "parse_schema_text", "resolve_sql_type"]
