"""Environment matrix for row-level operation scenarios."""

from __future__ import annotations

import logging
import random
import secrets
import threading

from matrix.enums import CatalogImplementation, DistributionMode, FileFormat
from matrix.environment import (
    CACHE_ENABLED_KEY,
    CATALOG_TYPE_KEY,
    DEFAULT_NAMESPACE_KEY,
    EnvironmentConfig,
)
from matrix.policy import resolve_vectorized
from utils.env_utils import env_int

logger = logging.getLogger(__name__)

MATRIX_SEED_ENV = "ROWLEVEL_MATRIX_SEED"

_SEED_LOCK = threading.Lock()
_PROCESS_SEED: list[int] = []


def resolve_matrix_seed(seed: int | None = None) -> int:
    """Return the seed used for nondeterministic matrix choices.

    Precedence: explicit ``seed``, then ``ROWLEVEL_MATRIX_SEED``, then a seed
    drawn once per process.

    Returns
    -------
    int
        Seed for the matrix generator.
    """
    if seed is not None:
        return seed
    env_seed = env_int(MATRIX_SEED_ENV)
    if env_seed is not None:
        return env_seed
    with _SEED_LOCK:
        if not _PROCESS_SEED:
            _PROCESS_SEED.append(secrets.randbits(32))
            logger.info(
                "Drew matrix seed %d; set %s=%d to replay this matrix.",
                _PROCESS_SEED[0],
                MATRIX_SEED_ENV,
                _PROCESS_SEED[0],
            )
        return _PROCESS_SEED[0]


def parameters(*, seed: int | None = None) -> tuple[EnvironmentConfig, ...]:
    """Return the ordered environment matrix.

    The filesystem-backed entry picks its vectorization flag from a generator
    seeded by :func:`resolve_matrix_seed`, so repeated runs cover both
    settings while any single run can be replayed.

    Returns
    -------
    tuple[EnvironmentConfig, ...]
        Matrix entries in run order.
    """
    rng = random.Random(resolve_matrix_seed(seed))
    return (
        EnvironmentConfig(
            catalog_name="testsql",
            implementation=CatalogImplementation.CATALOG,
            catalog_config={
                CATALOG_TYPE_KEY: "sql",
                DEFAULT_NAMESPACE_KEY: "default",
            },
            file_format=FileFormat.ORC,
            vectorized=True,
            distribution_mode=DistributionMode.NONE,
        ),
        EnvironmentConfig(
            catalog_name="testmemory",
            implementation=CatalogImplementation.CATALOG,
            catalog_config={
                CATALOG_TYPE_KEY: "in-memory",
            },
            file_format=FileFormat.PARQUET,
            vectorized=resolve_vectorized(FileFormat.PARQUET, rng),
            distribution_mode=DistributionMode.HASH,
        ),
        EnvironmentConfig(
            catalog_name="session_catalog",
            implementation=CatalogImplementation.SESSION,
            catalog_config={
                CATALOG_TYPE_KEY: "sql",
                DEFAULT_NAMESPACE_KEY: "default",
                "clients": "1",
                "parquet-enabled": "false",
                # Deletes issued through another table handle leave cached
                # session handles on a stale snapshot.
                CACHE_ENABLED_KEY: "false",
            },
            file_format=FileFormat.AVRO,
            vectorized=False,
            distribution_mode=DistributionMode.RANGE,
        ),
    )


__all__ = ["MATRIX_SEED_ENV", "parameters", "resolve_matrix_seed"]
