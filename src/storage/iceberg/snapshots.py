"""Normalized access to snapshot operation tags and summary metrics."""

from __future__ import annotations

from collections.abc import Mapping

import msgspec

from serde_msgspec import StructBaseStrict


class CommitSnapshot(StructBaseStrict, frozen=True):
    """Operation tag and summary metrics of one committed snapshot."""

    operation: str
    summary: dict[str, str] = msgspec.field(default_factory=dict)
    snapshot_id: int | None = None


def snapshot_operation(snapshot: object) -> str:
    """Return the operation tag of a snapshot.

    Accepts :class:`CommitSnapshot` and PyIceberg ``Snapshot`` objects, whose
    operation lives on ``snapshot.summary.operation``.

    Returns
    -------
    str
        Operation tag such as ``"delete"`` or ``"overwrite"``.

    Raises
    ------
    TypeError
        Raised when the object exposes no operation.
    """
    if isinstance(snapshot, CommitSnapshot):
        return snapshot.operation
    summary = getattr(snapshot, "summary", None)
    operation = getattr(summary, "operation", None)
    if operation is None:
        operation = getattr(snapshot, "operation", None)
    if operation is None:
        msg = f"Snapshot {type(snapshot).__name__} exposes no operation."
        raise TypeError(msg)
    return str(getattr(operation, "value", operation))


def snapshot_summary(snapshot: object) -> Mapping[str, str]:
    """Return the summary metrics of a snapshot, without the operation tag.

    Returns
    -------
    Mapping[str, str]
        Summary metric mapping.

    Raises
    ------
    TypeError
        Raised when the object exposes no summary mapping.
    """
    if isinstance(snapshot, CommitSnapshot):
        return snapshot.summary
    summary = getattr(snapshot, "summary", None)
    additional = getattr(summary, "additional_properties", None)
    if isinstance(additional, Mapping):
        return {str(key): str(value) for key, value in additional.items()}
    if isinstance(summary, Mapping):
        return {
            str(key): str(value)
            for key, value in summary.items()
            if key != "operation" and value is not None
        }
    msg = f"Snapshot {type(snapshot).__name__} exposes no summary mapping."
    raise TypeError(msg)


def commit_snapshot(snapshot: object) -> CommitSnapshot:
    """Return a normalized, immutable view of a snapshot.

    Returns
    -------
    CommitSnapshot
        Normalized snapshot record.
    """
    if isinstance(snapshot, CommitSnapshot):
        return snapshot
    snapshot_id = getattr(snapshot, "snapshot_id", None)
    return CommitSnapshot(
        operation=snapshot_operation(snapshot),
        summary=dict(snapshot_summary(snapshot)),
        snapshot_id=snapshot_id if isinstance(snapshot_id, int) else None,
    )


__all__ = ["CommitSnapshot", "commit_snapshot", "snapshot_operation", "snapshot_summary"]
