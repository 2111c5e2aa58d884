"""Enumerations shared by matrix entries and the table layer."""

from __future__ import annotations

from enum import StrEnum


class FileFormat(StrEnum):
    """Data file encodings a table can default to."""

    PARQUET = "parquet"
    ORC = "orc"
    AVRO = "avro"


class DistributionMode(StrEnum):
    """Write distribution modes applied before a commit."""

    NONE = "none"
    HASH = "hash"
    RANGE = "range"


class CatalogImplementation(StrEnum):
    """Catalog adapter selectors.

    ``CATALOG`` is a standalone catalog. ``SESSION`` shares table handles with
    the query session and honors the ``cache-enabled`` catalog option.
    """

    CATALOG = "catalog"
    SESSION = "session"


__all__ = ["CatalogImplementation", "DistributionMode", "FileFormat"]
