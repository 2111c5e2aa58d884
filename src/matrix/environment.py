"""Environment configuration records for the row-level operation matrix."""

from __future__ import annotations

import msgspec

from harness.errors import ErrorKind, HarnessError
from matrix.enums import CatalogImplementation, DistributionMode, FileFormat
from matrix.policy import check_vectorization, coerce_file_format
from serde_msgspec import StructBaseStrict

DEFAULT_NAMESPACE_KEY = "default-namespace"
CACHE_ENABLED_KEY = "cache-enabled"
CATALOG_TYPE_KEY = "type"


class EnvironmentConfig(StructBaseStrict, frozen=True):
    """One entry of the environment matrix.

    Construction enforces the vectorization policy, so every instance that
    exists is consistent with its file format.
    """

    catalog_name: str
    implementation: CatalogImplementation
    catalog_config: dict[str, str] = msgspec.field(default_factory=dict)
    file_format: FileFormat = FileFormat.PARQUET
    vectorized: bool = True
    distribution_mode: DistributionMode = DistributionMode.NONE
    extra_properties: dict[str, str] = msgspec.field(default_factory=dict)

    def __post_init__(self) -> None:
        """Reject unknown formats and vectorization flags that break the policy.

        Raises
        ------
        HarnessError
            Raised when the distribution mode or implementation is unknown.
        """
        check_vectorization(coerce_file_format(self.file_format), vectorized=self.vectorized)
        try:
            DistributionMode(self.distribution_mode)
            CatalogImplementation(self.implementation)
        except ValueError as exc:
            msg = f"Invalid environment {self.catalog_name!r}: {exc}"
            raise HarnessError(msg, kind=ErrorKind.CONFIG) from exc

    @property
    def default_namespace(self) -> str:
        """Return the namespace unqualified table names resolve into.

        Returns
        -------
        str
            Namespace name.
        """
        return self.catalog_config.get(DEFAULT_NAMESPACE_KEY, "default")

    @property
    def cache_enabled(self) -> bool:
        """Return whether the catalog adapter may cache table handles.

        Returns
        -------
        bool
            ``False`` only when ``cache-enabled`` is explicitly disabled.
        """
        raw = self.catalog_config.get(CACHE_ENABLED_KEY, "true")
        return raw.strip().lower() not in {"false", "0", "no"}


def environment_id(environment: EnvironmentConfig) -> str:
    """Return a readable, stable identifier for a matrix entry.

    Returns
    -------
    str
        Identifier used for pytest parameter ids and log lines.
    """
    return (
        f"catalog={environment.catalog_name},"
        f"impl={environment.implementation},"
        f"format={environment.file_format},"
        f"vectorized={str(environment.vectorized).lower()},"
        f"distribution={environment.distribution_mode}"
    )


__all__ = [
    "CACHE_ENABLED_KEY",
    "CATALOG_TYPE_KEY",
    "DEFAULT_NAMESPACE_KEY",
    "EnvironmentConfig",
    "environment_id",
]
