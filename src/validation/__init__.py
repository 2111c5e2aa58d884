"""Snapshot validation checks and shared violation types."""

from validation.snapshots import (
    UNCONSTRAINED,
    validate_copy_on_write,
    validate_delete,
    validate_merge_on_read,
    validate_property,
    validate_snapshot,
)
from validation.violations import SnapshotViolation, ViolationType

__all__ = [
    "UNCONSTRAINED",
    "SnapshotViolation",
    "ViolationType",
    "validate_copy_on_write",
    "validate_delete",
    "validate_merge_on_read",
    "validate_property",
    "validate_snapshot",
]
