"""Table creation and environment-specific table initialization."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from ingest.rows import append_rows
from ingest.schema_text import parse_schema_text
from matrix.policy import check_vectorization, coerce_file_format, vectorization_toggle_applies
from storage.iceberg.properties import (
    DEFAULT_FILE_FORMAT,
    PARQUET_VECTORIZATION_ENABLED,
    WRITE_DISTRIBUTION_MODE,
    format_bool,
)

if TYPE_CHECKING:
    from matrix.environment import EnvironmentConfig
    from storage.iceberg.tables import TableLayer

logger = logging.getLogger(__name__)


def _check_applied(layer: TableLayer, table_name: str, environment: EnvironmentConfig) -> None:
    applied = layer.table_properties(table_name)
    file_format = coerce_file_format(applied.get(DEFAULT_FILE_FORMAT))
    if vectorization_toggle_applies(file_format):
        vectorized = applied.get(PARQUET_VECTORIZATION_ENABLED) == format_bool(True)
    else:
        vectorized = environment.vectorized
    check_vectorization(file_format, vectorized=vectorized)


def init_table(
    layer: TableLayer,
    table_name: str,
    environment: EnvironmentConfig,
    extra_properties: Mapping[str, str] | None = None,
) -> None:
    """Apply environment table properties and check the vectorization policy.

    Sets the default file format and write distribution mode, and the
    vectorization toggle for formats whose policy leaves it free. The applied
    properties are then read back and checked against the policy. Extra
    properties from the environment and the caller are applied last.

    Raises
    ------
    UnsupportedFormat
        Raised when the environment names an unrecognized file format.
    PolicyViolation
        Raised when the applied vectorization setting contradicts the policy.
    """
    file_format = coerce_file_format(environment.file_format)
    layer.set_table_property(table_name, DEFAULT_FILE_FORMAT, file_format.value)
    layer.set_table_property(
        table_name,
        WRITE_DISTRIBUTION_MODE,
        str(environment.distribution_mode),
    )
    if vectorization_toggle_applies(file_format):
        layer.set_table_property(
            table_name,
            PARQUET_VECTORIZATION_ENABLED,
            format_bool(environment.vectorized),
        )
    _check_applied(layer, table_name, environment)
    props = {**environment.extra_properties, **(extra_properties or {})}
    for key, value in props.items():
        layer.set_table_property(table_name, key, value)
    logger.debug(
        "Initialized %s: format=%s vectorized=%s distribution=%s extra=%s",
        table_name,
        file_format,
        environment.vectorized,
        environment.distribution_mode,
        sorted(props),
    )


def create_and_init_table(
    layer: TableLayer,
    table_name: str,
    environment: EnvironmentConfig,
    schema: str,
    json_data: str | None = None,
    *,
    extra_properties: Mapping[str, str] | None = None,
) -> None:
    """Create a table from column schema text, initialize it and seed rows.

    Raises
    ------
    IngestionFailure
        Raised when the seed rows cannot be appended.
    """
    layer.create_table(table_name, parse_schema_text(schema))
    init_table(layer, table_name, environment, extra_properties)
    if json_data is not None:
        append_rows(layer, table_name, json_data, schema=schema)


__all__ = ["create_and_init_table", "init_table"]
