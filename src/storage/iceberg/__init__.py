"""Iceberg table layer: catalogs, tables and snapshot access."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

_EXPORT_MAP: dict[str, tuple[str, str]] = {
    "CommitSnapshot": ("storage.iceberg.snapshots", "CommitSnapshot"),
    "IcebergTableLayer": ("storage.iceberg.tables", "IcebergTableLayer"),
    "TableLayer": ("storage.iceberg.tables", "TableLayer"),
    "align_rows": ("storage.iceberg.tables", "align_rows"),
    "catalog_for": ("storage.iceberg.catalogs", "catalog_for"),
    "commit_snapshot": ("storage.iceberg.snapshots", "commit_snapshot"),
    "resolve_warehouse": ("storage.iceberg.catalogs", "resolve_warehouse"),
    "snapshot_operation": ("storage.iceberg.snapshots", "snapshot_operation"),
    "snapshot_summary": ("storage.iceberg.snapshots", "snapshot_summary"),
    "table_layer_for": ("storage.iceberg.catalogs", "table_layer_for"),
}

__all__ = tuple(sorted(_EXPORT_MAP))

if TYPE_CHECKING:
    from storage.iceberg.catalogs import catalog_for, resolve_warehouse, table_layer_for
    from storage.iceberg.snapshots import (
        CommitSnapshot,
        commit_snapshot,
        snapshot_operation,
        snapshot_summary,
    )
    from storage.iceberg.tables import IcebergTableLayer, TableLayer, align_rows


def __getattr__(name: str) -> object:
    export = _EXPORT_MAP.get(name)
    if export is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    module_name, attr = export
    module = importlib.import_module(module_name)
    value = getattr(module, attr)
    globals()[name] = value
    return value
