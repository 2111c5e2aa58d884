"""Temporary view registration in a DataFusion session."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

import pyarrow as pa

from ingest.rows import load_rows

if TYPE_CHECKING:
    from datafusion import SessionContext
    from datafusion.dataframe import DataFrame

logger = logging.getLogger(__name__)


def register_arrow_table(ctx: SessionContext, *, name: str, value: pa.Table) -> DataFrame:
    """Register an Arrow table under ``name``, replacing any prior registration.

    Returns
    -------
    datafusion.dataframe.DataFrame
        DataFrame for the registered table.
    """
    if ctx.table_exist(name):
        ctx.deregister_table(name)
    df = ctx.from_arrow(value, name=name)
    logger.debug("Registered %s with %d rows", name, value.num_rows)
    return df


def register_view(
    ctx: SessionContext,
    name: str,
    json_data: str,
    *,
    schema: str | None = None,
) -> DataFrame:
    """Load newline-delimited JSON rows and expose them as view ``name``.

    Returns
    -------
    datafusion.dataframe.DataFrame
        DataFrame for the registered view.
    """
    return register_arrow_table(ctx, name=name, value=load_rows(json_data, schema=schema))


def register_view_rows(
    ctx: SessionContext,
    name: str,
    rows: Sequence[Mapping[str, object]],
    *,
    schema: pa.Schema | None = None,
) -> DataFrame:
    """Expose Python row mappings as view ``name``.

    Returns
    -------
    datafusion.dataframe.DataFrame
        DataFrame for the registered view.
    """
    table = pa.Table.from_pylist([dict(row) for row in rows], schema=schema)
    return register_arrow_table(ctx, name=name, value=table)


__all__ = ["register_arrow_table", "register_view", "register_view_rows"]
