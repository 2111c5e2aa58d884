"""Table-layer protocol and its PyIceberg implementation."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import pyarrow as pa
from pyiceberg.exceptions import CommitFailedException, NoSuchTableError

from harness.errors import TableCommitError, TableNotFound
from storage.iceberg.snapshots import CommitSnapshot, commit_snapshot

if TYPE_CHECKING:
    from pyiceberg.catalog import Catalog
    from pyiceberg.table import Table

logger = logging.getLogger(__name__)


@runtime_checkable
class TableLayer(Protocol):
    """Operations the harness needs from a table-management layer."""

    def create_table(self, name: str, schema: pa.Schema) -> None:
        """Create an empty table with the given schema."""
        ...

    def drop_table(self, name: str) -> None:
        """Drop a table if it exists."""
        ...

    def set_table_property(self, name: str, key: str, value: str) -> None:
        """Set one table property in its own commit."""
        ...

    def table_properties(self, name: str) -> Mapping[str, str]:
        """Return the current table properties."""
        ...

    def append_rows(self, name: str, rows: pa.Table) -> None:
        """Append rows to a table in a single commit."""
        ...

    def read_rows(self, name: str) -> pa.Table:
        """Return the current table contents."""
        ...

    def current_snapshot(self, name: str) -> CommitSnapshot | None:
        """Return the current snapshot, or ``None`` for a table without commits."""
        ...


@contextmanager
def _table_errors(name: str) -> Iterator[None]:
    try:
        yield
    except NoSuchTableError as exc:
        raise TableNotFound(name) from exc
    except CommitFailedException as exc:
        msg = f"Commit to {name} failed: {exc}"
        raise TableCommitError(msg, table_name=name) from exc


def align_rows(rows: pa.Table, target: pa.Schema) -> pa.Table:
    """Align rows to a target schema by column name with safe casts.

    Columns missing from ``rows`` become nulls. Columns the target does not
    declare are rejected.

    Returns
    -------
    pyarrow.Table
        Rows with exactly the target schema.

    Raises
    ------
    ValueError
        Raised when ``rows`` carries columns the target does not declare.
    """
    unexpected = [name for name in rows.column_names if target.get_field_index(name) < 0]
    if unexpected:
        msg = f"Rows carry columns missing from the table schema: {unexpected}."
        raise ValueError(msg)
    columns: list[pa.ChunkedArray | pa.Array] = []
    for field in target:
        if field.name in rows.column_names:
            columns.append(rows.column(field.name).cast(field.type, safe=True))
        else:
            columns.append(pa.nulls(rows.num_rows, type=field.type))
    return pa.Table.from_arrays(columns, schema=target)


class IcebergTableLayer:
    """Table layer backed by a PyIceberg catalog.

    When ``cache_enabled`` is true, loaded table handles are reused across
    calls. A cached handle follows commits made through this layer, but not
    commits made through other handles on the same table.
    """

    def __init__(
        self,
        catalog: Catalog,
        *,
        namespace: str = "default",
        cache_enabled: bool = True,
    ) -> None:
        self.catalog = catalog
        self.namespace = namespace
        self.cache_enabled = cache_enabled
        self._tables: dict[str, Table] = {}

    def identifier(self, name: str) -> str:
        """Return the namespace-qualified identifier for a table name.

        Returns
        -------
        str
            ``namespace.table`` identifier.
        """
        if "." in name:
            return name
        return f"{self.namespace}.{name}"

    def table(self, name: str) -> Table:
        """Return the PyIceberg table handle for ``name``.

        Returns
        -------
        pyiceberg.table.Table
            Cached or freshly loaded table handle.
        """
        identifier = self.identifier(name)
        cached = self._tables.get(identifier)
        if cached is not None:
            return cached
        with _table_errors(identifier):
            table = self.catalog.load_table(identifier)
        if self.cache_enabled:
            self._tables[identifier] = table
        return table

    def invalidate(self, name: str | None = None) -> None:
        """Drop cached handles for one table, or all tables."""
        if name is None:
            self._tables.clear()
            return
        self._tables.pop(self.identifier(name), None)

    def create_table(self, name: str, schema: pa.Schema) -> None:
        identifier = self.identifier(name)
        table = self.catalog.create_table(identifier, schema=schema)
        logger.info("Created table %s with columns %s", identifier, schema.names)
        if self.cache_enabled:
            self._tables[identifier] = table

    def drop_table(self, name: str) -> None:
        identifier = self.identifier(name)
        self._tables.pop(identifier, None)
        try:
            self.catalog.drop_table(identifier)
        except NoSuchTableError:
            logger.debug("Table %s already absent", identifier)

    def set_table_property(self, name: str, key: str, value: str) -> None:
        table = self.table(name)
        with _table_errors(self.identifier(name)), table.transaction() as transaction:
            transaction.set_properties({key: value})
        logger.debug("Set %s=%s on %s", key, value, self.identifier(name))

    def table_properties(self, name: str) -> Mapping[str, str]:
        return dict(self.table(name).properties)

    def append_rows(self, name: str, rows: pa.Table) -> None:
        table = self.table(name)
        aligned = align_rows(rows, table.schema().as_arrow())
        with _table_errors(self.identifier(name)):
            table.append(aligned)
        logger.debug("Appended %d rows to %s", aligned.num_rows, self.identifier(name))

    def read_rows(self, name: str) -> pa.Table:
        return self.table(name).scan().to_arrow()

    def current_snapshot(self, name: str) -> CommitSnapshot | None:
        snapshot = self.table(name).current_snapshot()
        if snapshot is None:
            return None
        return commit_snapshot(snapshot)


__all__ = ["IcebergTableLayer", "TableLayer", "align_rows"]
