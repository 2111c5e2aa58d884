"""Per-run harness binding one environment to a table layer and a query session."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from datafusion import SessionContext

from harness.initializer import init_table
from ingest.rows import append_rows
from ingest.schema_text import parse_schema_text
from ingest.views import register_arrow_table, register_view, register_view_rows
from matrix.environment import EnvironmentConfig, environment_id
from storage.iceberg.catalogs import resolve_warehouse, table_layer_for

if TYPE_CHECKING:
    import pyarrow as pa
    from datafusion.dataframe import DataFrame

    from storage.iceberg.snapshots import CommitSnapshot
    from storage.iceberg.tables import TableLayer

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "default.rowlevel"


def _query_name(table_name: str) -> str:
    return table_name.rsplit(".", maxsplit=1)[-1]


class RowLevelHarness:
    """Table setup, ingestion and query helpers for one matrix entry.

    Parameters
    ----------
    environment
        Matrix entry the run uses.
    layer
        Table layer that owns tables and snapshots.
    ctx
        DataFusion session for views and queries. A fresh one is created when
        omitted.
    table_name
        Table the scenario mutates.
    extra_table_properties
        Properties applied to the table after the environment properties.
    """

    def __init__(
        self,
        environment: EnvironmentConfig,
        layer: TableLayer,
        *,
        ctx: SessionContext | None = None,
        table_name: str = DEFAULT_TABLE_NAME,
        extra_table_properties: Mapping[str, str] | None = None,
    ) -> None:
        self.environment = environment
        self.layer = layer
        self.ctx = ctx if ctx is not None else SessionContext()
        self.table_name = table_name
        self.extra_table_properties = dict(extra_table_properties or {})
        self._tables: dict[str, None] = {}

    @classmethod
    def for_environment(
        cls,
        environment: EnvironmentConfig,
        warehouse: Path | None = None,
        *,
        ctx: SessionContext | None = None,
        table_name: str = DEFAULT_TABLE_NAME,
        extra_table_properties: Mapping[str, str] | None = None,
    ) -> RowLevelHarness:
        """Build a harness backed by the environment's Iceberg catalog.

        ``warehouse`` defaults to :func:`storage.iceberg.catalogs.resolve_warehouse`.

        Returns
        -------
        RowLevelHarness
            Harness rooted in the warehouse.
        """
        root = resolve_warehouse(warehouse)
        logger.info("Preparing %s under %s", environment_id(environment), root)
        layer = table_layer_for(environment, root)
        return cls(
            environment,
            layer,
            ctx=ctx,
            table_name=table_name,
            extra_table_properties=extra_table_properties,
        )

    def init_table(self) -> None:
        """Apply environment and extra properties to the scenario table."""
        init_table(self.layer, self.table_name, self.environment, self.extra_table_properties)

    def create_and_init_table(self, schema: str, json_data: str | None = None) -> None:
        """Create the scenario table, initialize it and optionally seed rows.

        The table becomes visible to :meth:`sql` once it exists, even when a
        later initialization or seeding step fails.
        """
        self.layer.create_table(self.table_name, parse_schema_text(schema))
        self._tables[self.table_name] = None
        self.init_table()
        if json_data is not None:
            self.append(self.table_name, json_data, schema=schema)

    def append(self, table: str, json_data: str, *, schema: str | None = None) -> None:
        """Append JSON rows to ``table`` as one data file in one commit."""
        append_rows(self.layer, table, json_data, schema=schema)

    def register_view(self, name: str, json_data: str, *, schema: str | None = None) -> DataFrame:
        """Expose JSON rows as a temporary view, replacing an existing one.

        Returns
        -------
        datafusion.dataframe.DataFrame
            DataFrame for the view.
        """
        return register_view(self.ctx, name, json_data, schema=schema)

    def register_view_rows(
        self,
        name: str,
        rows: Sequence[Mapping[str, object]],
        *,
        schema: pa.Schema | None = None,
    ) -> DataFrame:
        """Expose Python row mappings as a temporary view.

        Returns
        -------
        datafusion.dataframe.DataFrame
            DataFrame for the view.
        """
        return register_view_rows(self.ctx, name, rows, schema=schema)

    def track_table(self, name: str) -> None:
        """Make a table created outside the harness visible to :meth:`sql`."""
        self._tables[name] = None

    def sql(self, query: str, *args: object) -> list[tuple[object, ...]]:
        """Run a query against the current contents of tracked tables.

        Tracked tables are registered under their unqualified names before the
        query runs, so ``default.rowlevel`` is queried as ``rowlevel``.

        Returns
        -------
        list[tuple[object, ...]]
            Result rows in query order.
        """
        for name in self._tables:
            register_arrow_table(self.ctx, name=_query_name(name), value=self.layer.read_rows(name))
        statement = query % args if args else query
        result = self.ctx.sql(statement).to_arrow_table()
        return list(zip(*(column.to_pylist() for column in result.columns), strict=True))

    def current_snapshot(self, table: str | None = None) -> CommitSnapshot | None:
        """Return the current snapshot of ``table`` (the scenario table by default).

        Returns
        -------
        CommitSnapshot | None
            Current snapshot, or ``None`` before the first commit.
        """
        return self.layer.current_snapshot(table or self.table_name)

    def drop_table(self, table: str | None = None) -> None:
        """Drop ``table`` (the scenario table by default) and forget its view."""
        name = table or self.table_name
        self._tables.pop(name, None)
        query_name = _query_name(name)
        if self.ctx.table_exist(query_name):
            self.ctx.deregister_table(query_name)
        self.layer.drop_table(name)

    @staticmethod
    def sleep(millis: int) -> None:
        """Block for ``millis`` milliseconds.

        Interruption propagates to the caller.
        """
        time.sleep(millis / 1000)


__all__ = ["DEFAULT_TABLE_NAME", "RowLevelHarness"]
