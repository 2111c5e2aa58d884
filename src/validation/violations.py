"""Snapshot validation violation types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class ViolationType(Enum):
    """Types of snapshot validation violations."""

    OPERATION_MISMATCH = "operation_mismatch"
    METRIC_MISMATCH = "metric_mismatch"
    METRIC_NOT_IN_SET = "metric_not_in_set"


@dataclass(frozen=True)
class SnapshotViolation:
    """Single snapshot violation with its expected and actual values."""

    violation_type: ViolationType
    key: str | None = None
    expected: str | tuple[str | None, ...] | None = None
    actual: str | None = None
    snapshot_id: int | None = None

    def __str__(self) -> str:
        """Return a human-readable violation message.

        Returns
        -------
        str
            Human-readable violation message.
        """
        message = _VIOLATION_FORMATTERS[self.violation_type](self)
        if self.snapshot_id is not None:
            return f"{message} (snapshot {self.snapshot_id})"
        return message


def _format_operation_mismatch(violation: SnapshotViolation) -> str:
    return (
        f"Operation must match: expected={violation.expected!r} actual={violation.actual!r}"
    )


def _format_metric_mismatch(violation: SnapshotViolation) -> str:
    return (
        f"Snapshot property {violation.key} has unexpected value: "
        f"expected={violation.expected!r} actual={violation.actual!r}"
    )


def _format_metric_not_in_set(violation: SnapshotViolation) -> str:
    expected = violation.expected if isinstance(violation.expected, tuple) else ()
    choices = ",".join("null" if value is None else value for value in expected)
    return (
        f"Snapshot property {violation.key} has unexpected value, "
        f"actual = {violation.actual}, expected one of : {choices}"
    )


_VIOLATION_FORMATTERS: dict[ViolationType, Callable[[SnapshotViolation], str]] = {
    ViolationType.OPERATION_MISMATCH: _format_operation_mismatch,
    ViolationType.METRIC_MISMATCH: _format_metric_mismatch,
    ViolationType.METRIC_NOT_IN_SET: _format_metric_not_in_set,
}


__all__ = ["SnapshotViolation", "ViolationType"]
