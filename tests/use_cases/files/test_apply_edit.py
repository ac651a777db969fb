"""
Tests for the ApplyEditUseCase.
"""

import os
from unittest.mock import MagicMock

import pytest

from workspace_agent.adapters.files.local_edit_applier import LocalEditApplier
from workspace_agent.entities.tool import EditResult, EditStatus
from workspace_agent.exceptions import EditStateError
from workspace_agent.ports.files.edit_approval_port import EditApprovalPort
from workspace_agent.use_cases.files.apply_edit import ApplyEditUseCase


@pytest.fixture
def edit_applier(file_repository, path_validator, mock_logger):
    return LocalEditApplier(file_repository, path_validator, mock_logger)


@pytest.fixture
def apply_edit(edit_applier, mock_logger):
    return ApplyEditUseCase(edit_applier, mock_logger)


class TestApplyEditUseCase:
    """Test cases for approving and rejecting proposed edits."""

    def test_approve_writes_and_marks_applied(self, temp_directory, file_operations, apply_edit):
        """Test the full propose then approve flow."""
        edit = file_operations.edit_file("f.txt", "foo", "bar").result

        assert apply_edit.approve(edit) is True

        assert edit.status is EditStatus.APPLIED
        assert edit.applied
        with open(os.path.join(temp_directory, "f.txt"), encoding="utf-8") as f:
            assert f.read() == "bar\nbaz"

    def test_reject_leaves_file_untouched(self, temp_directory, file_operations, apply_edit):
        """Test that a rejected edit never reaches the disk."""
        edit = file_operations.edit_file("f.txt", "foo", "bar").result

        apply_edit.reject(edit)

        assert edit.status is EditStatus.REJECTED
        assert not edit.applied
        with open(os.path.join(temp_directory, "f.txt"), encoding="utf-8") as f:
            assert f.read() == "foo\nbaz"

    def test_failed_write_keeps_edit_proposed(self, mock_logger):
        """Test that an edit stays proposed when the write fails."""
        applier = MagicMock(spec=EditApprovalPort)
        applier.apply.return_value = False
        use_case = ApplyEditUseCase(applier, mock_logger)
        edit = EditResult(path="f.txt", original_content="a", new_content="b", diff="")

        assert use_case.approve(edit) is False
        assert edit.status is EditStatus.PROPOSED
        applier.apply.assert_called_once_with("f.txt", "b", "a")

    def test_second_edit_to_same_file_is_not_applied_over_the_first(
        self, temp_directory, file_operations, apply_edit
    ):
        """Test that an edit computed before another edit was applied stays proposed."""
        first = file_operations.edit_file("f.txt", "foo", "FOO").result
        second = file_operations.edit_file("f.txt", "baz", "BAZ").result

        assert apply_edit.approve(first) is True
        assert apply_edit.approve(second) is False

        assert first.status is EditStatus.APPLIED
        assert second.status is EditStatus.PROPOSED
        with open(os.path.join(temp_directory, "f.txt"), encoding="utf-8") as f:
            assert f.read() == "FOO\nbaz"

        # Re-proposing against the current content succeeds
        retry = file_operations.edit_file("f.txt", "baz", "BAZ").result
        assert apply_edit.approve(retry) is True
        with open(os.path.join(temp_directory, "f.txt"), encoding="utf-8") as f:
            assert f.read() == "FOO\nBAZ"

    def test_cannot_approve_twice(self, file_operations, apply_edit):
        """Test that an applied edit cannot be applied again."""
        edit = file_operations.edit_file("f.txt", "foo", "bar").result
        apply_edit.approve(edit)

        with pytest.raises(EditStateError):
            apply_edit.approve(edit)

    def test_cannot_approve_rejected(self, file_operations, apply_edit):
        """Test that a rejected edit cannot be applied."""
        edit = file_operations.edit_file("f.txt", "foo", "bar").result
        apply_edit.reject(edit)

        with pytest.raises(EditStateError):
            apply_edit.approve(edit)

    def test_cannot_reject_applied(self, file_operations, apply_edit):
        """Test that an applied edit cannot be rejected."""
        edit = file_operations.edit_file("f.txt", "foo", "bar").result
        apply_edit.approve(edit)

        with pytest.raises(EditStateError):
            apply_edit.reject(edit)
