"""Unified error types for the row-level conformance harness."""

from __future__ import annotations

from collections.abc import Collection
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from validation.violations import SnapshotViolation


class ErrorKind(StrEnum):
    """Categorize harness errors by subsystem."""

    GENERIC = "generic"
    CONFIG = "config"
    POLICY = "policy"
    INGEST = "ingest"
    SCHEMA = "schema"
    TABLE = "table"
    VALIDATION = "validation"


class HarnessError(Exception):
    """Base exception for harness failures."""

    def __init__(self, message: str, *, kind: ErrorKind = ErrorKind.GENERIC) -> None:
        super().__init__(message)
        self.kind = kind


class UnsupportedFormat(HarnessError, ValueError):
    """Raised when a file format outside the recognized set is requested."""

    def __init__(self, file_format: object, *, supported: Collection[str] = ()) -> None:
        message = f"Unsupported file format: {file_format!r}."
        if supported:
            message = f"{message} Expected one of: {', '.join(sorted(supported))}."
        super().__init__(message, kind=ErrorKind.CONFIG)
        self.file_format = file_format


class PolicyViolation(HarnessError):
    """Raised when a vectorization flag contradicts the policy for its format."""

    def __init__(self, file_format: str, *, vectorized: bool, expected: bool) -> None:
        message = (
            f"Vectorized reads must be {expected} for format {file_format!r}, "
            f"got vectorized={vectorized}."
        )
        super().__init__(message, kind=ErrorKind.POLICY)
        self.file_format = file_format
        self.vectorized = vectorized
        self.expected = expected


class SchemaTextError(HarnessError, ValueError):
    """Raised when column schema text cannot be turned into an Arrow schema."""

    def __init__(self, message: str, *, schema_text: str) -> None:
        super().__init__(message, kind=ErrorKind.SCHEMA)
        self.schema_text = schema_text


class IngestionFailure(HarnessError):
    """Raised when rows cannot be loaded or committed to a table.

    The underlying exception is kept on ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, message: str, *, table_name: str | None, cause: BaseException) -> None:
        super().__init__(message, kind=ErrorKind.INGEST)
        self.table_name = table_name
        self.cause = cause


class TableLayerError(HarnessError):
    """Base exception for table-layer failures."""

    def __init__(self, message: str, *, table_name: str) -> None:
        super().__init__(message, kind=ErrorKind.TABLE)
        self.table_name = table_name


class TableNotFound(TableLayerError):
    """Raised when a table identifier does not resolve in the catalog."""

    def __init__(self, table_name: str) -> None:
        super().__init__(f"Table does not exist: {table_name}", table_name=table_name)


class TableCommitError(TableLayerError):
    """Raised when the table layer rejects a commit."""


class SnapshotValidationError(HarnessError, AssertionError):
    """Base exception for snapshot assertion failures."""

    def __init__(self, violation: SnapshotViolation) -> None:
        super().__init__(str(violation), kind=ErrorKind.VALIDATION)
        self.violation = violation
        self.expected = violation.expected
        self.actual = violation.actual


class OperationMismatch(SnapshotValidationError):
    """Raised when a snapshot operation differs from the expected operation."""


class MetricMismatch(SnapshotValidationError):
    """Raised when a snapshot summary metric differs from its expectation."""

    @property
    def key(self) -> str | None:
        """Return the summary key that failed.

        Returns
        -------
        str | None
            Summary key of the failing metric.
        """
        return self.violation.key


__all__ = [
    "ErrorKind",
    "HarnessError",
    "IngestionFailure",
    "MetricMismatch",
    "OperationMismatch",
    "PolicyViolation",
    "SchemaTextError",
    "SnapshotValidationError",
    "TableCommitError",
    "TableLayerError",
    "TableNotFound",
    "UnsupportedFormat",
]
