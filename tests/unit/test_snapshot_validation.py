"""Tests for snapshot summary assertions."""

from __future__ import annotations

import pytest

from harness.errors import ErrorKind, MetricMismatch, OperationMismatch, SnapshotValidationError
from tests.test_helpers.snapshots import snapshot
from validation import (
    UNCONSTRAINED,
    validate_copy_on_write,
    validate_delete,
    validate_merge_on_read,
    validate_property,
    validate_snapshot,
)


class TestValidateProperty:
    """Tests for single-metric expectations."""

    def test_exact_match(self) -> None:
        """Equal values pass."""
        validate_property(snapshot("delete", deleted_data_files="3"), "deleted-data-files", "3")

    def test_exact_mismatch(self) -> None:
        """Different values fail with both values attached."""
        with pytest.raises(MetricMismatch) as excinfo:
            validate_property(snapshot("delete", deleted_data_files="2"), "deleted-data-files", "3")
        error = excinfo.value
        assert error.key == "deleted-data-files"
        assert error.expected == "3"
        assert error.actual == "2"
        assert error.kind is ErrorKind.VALIDATION

    def test_absent_expected_absent(self) -> None:
        """``None`` expects the key to be missing."""
        validate_property(snapshot("delete"), "added-delete-files", None)

    def test_absent_expected_but_present(self) -> None:
        """A present key fails a ``None`` expectation."""
        with pytest.raises(MetricMismatch):
            validate_property(
                snapshot("delete", added_delete_files="1"),
                "added-delete-files",
                None,
            )

    def test_present_expected_but_absent(self) -> None:
        """A missing key fails an exact expectation."""
        with pytest.raises(MetricMismatch) as excinfo:
            validate_property(snapshot("delete"), "deleted-data-files", "1")
        assert excinfo.value.actual is None

    def test_set_membership(self) -> None:
        """Any member of an expected set passes."""
        validate_property(
            snapshot("overwrite", added_data_files="2"),
            "added-data-files",
            {"1", "2"},
        )

    def test_set_membership_allows_absent(self) -> None:
        """``None`` inside a set accepts a missing key."""
        validate_property(snapshot("overwrite"), "added-data-files", {"1", None})

    def test_set_mismatch_lists_choices(self) -> None:
        """Set failures name the actual value and every acceptable value."""
        with pytest.raises(MetricMismatch) as excinfo:
            validate_property(
                snapshot("overwrite", added_data_files="3"),
                "added-data-files",
                {"2", "1"},
            )
        message = str(excinfo.value)
        assert "added-data-files" in message
        assert "actual = 3" in message
        assert "expected one of : 1,2" in message

    def test_unconstrained(self) -> None:
        """Unconstrained expectations never fail."""
        validate_property(snapshot("delete"), "deleted-data-files", UNCONSTRAINED)


class TestValidateSnapshot:
    """Tests for operation and metric checks together."""

    def test_operation_mismatch(self) -> None:
        """The operation must match exactly."""
        with pytest.raises(OperationMismatch) as excinfo:
            validate_snapshot(snapshot("overwrite"), "delete")
        assert excinfo.value.expected == "delete"
        assert excinfo.value.actual == "overwrite"
        assert "delete" in str(excinfo.value)

    def test_operation_checked_before_metrics(self) -> None:
        """A wrong operation is reported even when metrics also differ."""
        with pytest.raises(OperationMismatch):
            validate_snapshot(snapshot("append"), "delete", deleted_data_files="9")

    def test_none_metrics_are_skipped(self) -> None:
        """``None`` metric arguments are not checked."""
        validate_snapshot(
            snapshot("overwrite", added_data_files="4"),
            "overwrite",
            changed_partition_count=None,
            deleted_data_files=None,
            added_delete_files=None,
            added_data_files=None,
        )

    def test_errors_are_assertion_errors(self) -> None:
        """Validation failures are assertion failures for test runners."""
        with pytest.raises(AssertionError):
            validate_snapshot(
                snapshot("delete", deleted_data_files="1"),
                "delete",
                deleted_data_files="2",
            )

    def test_snapshot_id_in_message(self) -> None:
        """Failures name the offending snapshot when it has an id."""
        with pytest.raises(SnapshotValidationError, match="snapshot 17"):
            validate_snapshot(snapshot("append", snapshot_id=17), "delete")


class TestShorthands:
    """Tests for the delete, copy-on-write and merge-on-read checks."""

    def test_delete_ignores_other_metrics(self) -> None:
        """Delete checks only partition count and deleted files."""
        validate_delete(
            snapshot(
                "delete",
                changed_partition_count="2",
                deleted_data_files="3",
                added_data_files="5",
                added_delete_files="7",
            ),
            "2",
            "3",
        )

    def test_delete_rejects_overwrite(self) -> None:
        """Delete checks require a delete operation."""
        with pytest.raises(OperationMismatch):
            validate_delete(snapshot("overwrite", changed_partition_count="1"), "1", None)

    def test_copy_on_write(self) -> None:
        """Copy-on-write checks deleted and added data files."""
        overwrite = snapshot(
            "overwrite",
            changed_partition_count="1",
            deleted_data_files="1",
            added_data_files="1",
        )
        validate_copy_on_write(overwrite, "1", "1", "1")
        with pytest.raises(MetricMismatch) as excinfo:
            validate_copy_on_write(overwrite, "1", "1", "2")
        assert excinfo.value.key == "added-data-files"

    def test_copy_on_write_ignores_delete_files(self) -> None:
        """Copy-on-write leaves added delete files unchecked."""
        validate_copy_on_write(
            snapshot("overwrite", changed_partition_count="1", added_delete_files="4"),
            "1",
            None,
            None,
        )

    def test_merge_on_read(self) -> None:
        """Merge-on-read checks added delete files and data files."""
        overwrite = snapshot(
            "overwrite",
            changed_partition_count="1",
            added_delete_files="1",
            deleted_data_files="9",
        )
        validate_merge_on_read(overwrite, "1", "1", None)
        with pytest.raises(MetricMismatch) as excinfo:
            validate_merge_on_read(overwrite, "1", {"2", "3"}, None)
        assert excinfo.value.key == "added-delete-files"

    def test_merge_on_read_rejects_delete(self) -> None:
        """Merge-on-read checks require an overwrite operation."""
        with pytest.raises(OperationMismatch):
            validate_merge_on_read(snapshot("delete"), "1", "1", "1")
