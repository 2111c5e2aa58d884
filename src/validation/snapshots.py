"""Snapshot summary assertions for row-level operations.

Each check is stateless: it reads the operation tag and summary metrics of an
already committed snapshot and compares them with the expectation. Metric
expectations are an exact string, a set of acceptable strings, ``None`` (the
key must be absent) or :data:`UNCONSTRAINED` (not checked).
"""

from __future__ import annotations

from collections.abc import Set as AbstractSet
from typing import Final, final

from harness.errors import MetricMismatch, OperationMismatch
from storage.iceberg.properties import (
    ADDED_DELETE_FILES_PROP,
    ADDED_FILES_PROP,
    CHANGED_PARTITION_COUNT_PROP,
    DELETED_FILES_PROP,
    DataOperation,
)
from storage.iceberg.snapshots import snapshot_operation, snapshot_summary
from validation.violations import SnapshotViolation, ViolationType


@final
class Unconstrained:
    """Marker for a metric that a check leaves unconstrained."""

    _instance: Unconstrained | None = None

    def __new__(cls) -> Unconstrained:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNCONSTRAINED"


UNCONSTRAINED: Final = Unconstrained()

type ExpectedValue = str | AbstractSet[str | None] | None | Unconstrained


def _snapshot_id(snapshot: object) -> int | None:
    value = getattr(snapshot, "snapshot_id", None)
    return value if isinstance(value, int) else None


def validate_property(snapshot: object, key: str, expected: ExpectedValue) -> None:
    """Assert one summary metric of a snapshot.

    A set expectation passes when the actual value is a member; any other
    expectation must equal the actual value exactly, where an absent key reads
    as ``None``.

    Raises
    ------
    MetricMismatch
        Raised when the metric does not satisfy the expectation.
    """
    if isinstance(expected, Unconstrained):
        return
    actual = snapshot_summary(snapshot).get(key)
    if isinstance(expected, AbstractSet):
        if actual in expected:
            return
        raise MetricMismatch(
            SnapshotViolation(
                ViolationType.METRIC_NOT_IN_SET,
                key=key,
                expected=tuple(sorted(expected, key=lambda value: (value is None, value or ""))),
                actual=actual,
                snapshot_id=_snapshot_id(snapshot),
            )
        )
    if actual != expected:
        raise MetricMismatch(
            SnapshotViolation(
                ViolationType.METRIC_MISMATCH,
                key=key,
                expected=expected,
                actual=actual,
                snapshot_id=_snapshot_id(snapshot),
            )
        )


def validate_snapshot(
    snapshot: object,
    operation: str,
    changed_partition_count: ExpectedValue = UNCONSTRAINED,
    deleted_data_files: ExpectedValue = UNCONSTRAINED,
    added_delete_files: ExpectedValue = UNCONSTRAINED,
    added_data_files: ExpectedValue = UNCONSTRAINED,
) -> None:
    """Assert the operation and file metrics of a snapshot.

    ``None`` metric arguments are treated as :data:`UNCONSTRAINED` here; use
    :func:`validate_property` to assert that a key is absent.

    Raises
    ------
    OperationMismatch
        Raised when the snapshot operation differs from ``operation``.
    """
    actual = snapshot_operation(snapshot)
    if actual != str(operation):
        raise OperationMismatch(
            SnapshotViolation(
                ViolationType.OPERATION_MISMATCH,
                expected=str(operation),
                actual=actual,
                snapshot_id=_snapshot_id(snapshot),
            )
        )
    checks = (
        (CHANGED_PARTITION_COUNT_PROP, changed_partition_count),
        (DELETED_FILES_PROP, deleted_data_files),
        (ADDED_DELETE_FILES_PROP, added_delete_files),
        (ADDED_FILES_PROP, added_data_files),
    )
    for key, expected in checks:
        if expected is None:
            continue
        validate_property(snapshot, key, expected)


def validate_delete(
    snapshot: object,
    changed_partition_count: ExpectedValue,
    deleted_data_files: ExpectedValue,
) -> None:
    """Assert a delete snapshot that only removed data files."""
    validate_snapshot(
        snapshot,
        DataOperation.DELETE,
        changed_partition_count=changed_partition_count,
        deleted_data_files=deleted_data_files,
    )


def validate_copy_on_write(
    snapshot: object,
    changed_partition_count: ExpectedValue,
    deleted_data_files: ExpectedValue,
    added_data_files: ExpectedValue,
) -> None:
    """Assert an overwrite snapshot that rewrote the affected data files."""
    validate_snapshot(
        snapshot,
        DataOperation.OVERWRITE,
        changed_partition_count=changed_partition_count,
        deleted_data_files=deleted_data_files,
        added_data_files=added_data_files,
    )


def validate_merge_on_read(
    snapshot: object,
    changed_partition_count: ExpectedValue,
    added_delete_files: ExpectedValue,
    added_data_files: ExpectedValue,
) -> None:
    """Assert an overwrite snapshot that added delete files next to the data."""
    validate_snapshot(
        snapshot,
        DataOperation.OVERWRITE,
        changed_partition_count=changed_partition_count,
        added_delete_files=added_delete_files,
        added_data_files=added_data_files,
    )


__all__ = [
    "UNCONSTRAINED",
    "ExpectedValue",
    "Unconstrained",
    "validate_copy_on_write",
    "validate_delete",
    "validate_merge_on_read",
    "validate_property",
    "validate_snapshot",
]
