"""PyIceberg catalog construction per matrix environment."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pyiceberg.catalog import load_catalog
from pyiceberg.exceptions import NamespaceAlreadyExistsError

from matrix.enums import CatalogImplementation
from matrix.environment import (
    CACHE_ENABLED_KEY,
    CATALOG_TYPE_KEY,
    DEFAULT_NAMESPACE_KEY,
    EnvironmentConfig,
)
from storage.iceberg.tables import IcebergTableLayer
from utils.env_utils import env_path

if TYPE_CHECKING:
    from pyiceberg.catalog import Catalog

logger = logging.getLogger(__name__)

# Options consumed by the harness rather than the catalog implementation.
_HARNESS_KEYS = frozenset({DEFAULT_NAMESPACE_KEY, CACHE_ENABLED_KEY})

WAREHOUSE_ENV = "ROWLEVEL_WAREHOUSE"
DEFAULT_WAREHOUSE = Path("build/warehouse")


def resolve_warehouse(warehouse: Path | None = None) -> Path:
    """Return the warehouse root for catalogs.

    Precedence: explicit ``warehouse``, then ``ROWLEVEL_WAREHOUSE``, then
    ``build/warehouse``.

    Returns
    -------
    Path
        Warehouse root directory.
    """
    if warehouse is not None:
        return warehouse
    return env_path(WAREHOUSE_ENV) or DEFAULT_WAREHOUSE


def catalog_properties(environment: EnvironmentConfig, warehouse: Path) -> dict[str, str]:
    """Return PyIceberg catalog properties for an environment.

    SQL catalogs get a SQLite metastore next to the warehouse unless the
    environment supplies a ``uri``.

    Returns
    -------
    dict[str, str]
        Properties passed to ``pyiceberg.catalog.load_catalog``.
    """
    root = warehouse / environment.catalog_name
    properties = {
        key: value
        for key, value in environment.catalog_config.items()
        if key not in _HARNESS_KEYS
    }
    properties.setdefault(CATALOG_TYPE_KEY, "sql")
    properties.setdefault("warehouse", root.resolve().as_uri())
    if properties[CATALOG_TYPE_KEY] == "sql":
        properties.setdefault("uri", f"sqlite:///{root.resolve() / 'catalog.db'}")
    return properties


def catalog_for(environment: EnvironmentConfig, warehouse: Path) -> Catalog:
    """Load the catalog for an environment and ensure its default namespace.

    Returns
    -------
    pyiceberg.catalog.Catalog
        Catalog rooted under ``warehouse``.
    """
    (warehouse / environment.catalog_name).mkdir(parents=True, exist_ok=True)
    properties = catalog_properties(environment, warehouse)
    catalog = load_catalog(environment.catalog_name, **properties)
    try:
        catalog.create_namespace(environment.default_namespace)
    except NamespaceAlreadyExistsError:
        logger.debug("Namespace %s already exists", environment.default_namespace)
    logger.info(
        "Loaded %s catalog %s (warehouse=%s)",
        properties[CATALOG_TYPE_KEY],
        environment.catalog_name,
        properties["warehouse"],
    )
    return catalog


def table_layer_for(environment: EnvironmentConfig, warehouse: Path) -> IcebergTableLayer:
    """Return the table layer for an environment.

    Standalone catalogs always reuse table handles; session catalogs honor the
    ``cache-enabled`` option.

    Returns
    -------
    IcebergTableLayer
        Layer bound to the environment's catalog and default namespace.
    """
    cache_enabled = (
        environment.cache_enabled
        if environment.implementation == CatalogImplementation.SESSION
        else True
    )
    return IcebergTableLayer(
        catalog_for(environment, warehouse),
        namespace=environment.default_namespace,
        cache_enabled=cache_enabled,
    )


__all__ = [
    "DEFAULT_WAREHOUSE",
    "WAREHOUSE_ENV",
    "catalog_for",
    "catalog_properties",
    "resolve_warehouse",
    "table_layer_for",
]
