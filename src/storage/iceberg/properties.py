"""Iceberg table property names and snapshot vocabulary used by the harness."""

from __future__ import annotations

from enum import StrEnum

DEFAULT_FILE_FORMAT = "write.format.default"
WRITE_DISTRIBUTION_MODE = "write.distribution-mode"
PARQUET_VECTORIZATION_ENABLED = "read.parquet.vectorization.enabled"

CHANGED_PARTITION_COUNT_PROP = "changed-partition-count"
DELETED_FILES_PROP = "deleted-data-files"
ADDED_DELETE_FILES_PROP = "added-delete-files"
ADDED_FILES_PROP = "added-data-files"


class DataOperation(StrEnum):
    """Snapshot operation tags."""

    APPEND = "append"
    REPLACE = "replace"
    OVERWRITE = "overwrite"
    DELETE = "delete"


def format_bool(value: bool) -> str:
    """Render a boolean the way table properties store it.

    Returns
    -------
    str
        ``"true"`` or ``"false"``.
    """
    return "true" if value else "false"


__all__ = [
    "ADDED_DELETE_FILES_PROP",
    "ADDED_FILES_PROP",
    "CHANGED_PARTITION_COUNT_PROP",
    "DEFAULT_FILE_FORMAT",
    "DELETED_FILES_PROP",
    "PARQUET_VECTORIZATION_ENABLED",
    "WRITE_DISTRIBUTION_MODE",
    "DataOperation",
    "format_bool",
]
