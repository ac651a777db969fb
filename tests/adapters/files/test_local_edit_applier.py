"""
Tests for the LocalEditApplier.
"""

import os
from unittest.mock import patch

from workspace_agent.adapters.files.local_edit_applier import LocalEditApplier
from workspace_agent.exceptions import IOFailureError


class TestLocalEditApplier:
    """Test cases for applying approved edits."""

    def test_apply_writes_content(self, temp_directory, file_repository, path_validator, mock_logger):
        """Test that an approved edit overwrites the file."""
        applier = LocalEditApplier(file_repository, path_validator, mock_logger)

        assert applier.apply("f.txt", "bar\nbaz", "foo\nbaz") is True
        with open(os.path.join(temp_directory, "f.txt"), encoding="utf-8") as f:
            assert f.read() == "bar\nbaz"

    def test_apply_refuses_paths_outside_root(self, file_repository, path_validator, mock_logger):
        """Test that the path is validated again before writing."""
        applier = LocalEditApplier(file_repository, path_validator, mock_logger)

        assert applier.apply("../escape.txt", "x", "") is False
        mock_logger.warning.assert_called()

    def test_apply_refuses_blocked_paths(self, temp_directory, file_repository, path_validator, mock_logger):
        """Test that blocklisted files are never written."""
        applier = LocalEditApplier(file_repository, path_validator, mock_logger)

        assert applier.apply(".env", "LEAK=1", "OPENAI_API_KEY=secret") is False
        with open(os.path.join(temp_directory, ".env"), encoding="utf-8") as f:
            assert f.read() == "OPENAI_API_KEY=secret"

    def test_apply_reports_write_failure(self, file_repository, path_validator, mock_logger):
        """Test that I/O errors are reported as a failed apply."""
        applier = LocalEditApplier(file_repository, path_validator, mock_logger)

        with patch.object(file_repository, "write_text", side_effect=IOFailureError("disk full")):
            assert applier.apply("f.txt", "x", "foo\nbaz") is False
        mock_logger.error.assert_called()

    def test_apply_refuses_changed_file(self, temp_directory, file_repository, path_validator, mock_logger):
        """Test that a file modified after the edit was computed is left alone."""
        applier = LocalEditApplier(file_repository, path_validator, mock_logger)
        with open(os.path.join(temp_directory, "f.txt"), "w", encoding="utf-8") as f:
            f.write("FOO\nbaz")

        assert applier.apply("f.txt", "foo\nBAZ", "foo\nbaz") is False
        mock_logger.warning.assert_called()
        with open(os.path.join(temp_directory, "f.txt"), encoding="utf-8") as f:
            assert f.read() == "FOO\nbaz"

    def test_apply_refuses_deleted_file(self, temp_directory, file_repository, path_validator, mock_logger):
        """Test that an edit to a file removed since the proposal is not recreated."""
        applier = LocalEditApplier(file_repository, path_validator, mock_logger)
        os.remove(os.path.join(temp_directory, "f.txt"))

        assert applier.apply("f.txt", "bar\nbaz", "foo\nbaz") is False
        assert not os.path.exists(os.path.join(temp_directory, "f.txt"))
