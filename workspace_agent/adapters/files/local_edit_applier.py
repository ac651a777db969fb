"""
Applies approved edits to the local file system.
"""

import logging
from typing import Optional

from typing_extensions import override

from workspace_agent.exceptions import FileNotFoundInWorkspaceError, FileRepositoryError
from workspace_agent.ports.files.edit_approval_port import EditApprovalPort
from workspace_agent.ports.files.file_repository_port import FileRepositoryPort
from workspace_agent.utils.workspace import PathValidator


class LocalEditApplier(EditApprovalPort):
    """Writes reviewed edits after re-checking the path and the file content."""

    def __init__(
        self,
        file_repository: FileRepositoryPort,
        path_validator: PathValidator,
        logger: Optional[logging.Logger] = None,
    ):
        self._file_repository = file_repository
        self._path_validator = path_validator
        self._logger = logger or logging.getLogger(__name__)

    @override
    def apply(self, path: str, new_content: str, original_content: str) -> bool:
        # The blocklist or root may have changed since the edit was proposed
        validation = self._path_validator.validate(path)
        if not validation.valid:
            self._logger.warning(f"Refusing to apply edit to {path}: {validation.error}")
            return False
        try:
            current = self._file_repository.read_text(validation.full_path)
        except FileNotFoundInWorkspaceError:
            current = None
        except FileRepositoryError as e:
            self._logger.error(f"Failed to apply edit to {path}: {e}")
            return False
        if current != original_content:
            self._logger.warning(
                f"Refusing to apply edit to {path}: file has changed since the edit was proposed"
            )
            return False
        try:
            self._file_repository.write_text(validation.full_path, new_content)
        except FileRepositoryError as e:
            self._logger.error(f"Failed to apply edit to {path}: {e}")
            return False
        self._logger.info(f"Applied edit: {validation.normalized_path}")
        return True
