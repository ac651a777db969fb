"""
Use case for approving or rejecting a proposed edit.
"""

import logging
from typing import Optional

from workspace_agent.entities.tool import EditResult, EditStatus
from workspace_agent.exceptions import EditStateError
from workspace_agent.ports.files.edit_approval_port import EditApprovalPort


class ApplyEditUseCase:
    """Moves an EditResult out of the proposed state."""

    def __init__(
        self, edit_applier: EditApprovalPort, logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the use case.

        Args:
            edit_applier: Port that writes approved content to disk
            logger: Logger instance to use for logging
        """
        self._edit_applier = edit_applier
        self._logger = logger or logging.getLogger(__name__)

    def approve(self, edit: EditResult) -> bool:
        """
        Write the edit's new content and mark it applied.

        Args:
            edit: A proposed edit

        Returns:
            True if the content was written. On False, including when the file
            no longer matches the content the edit was computed from, the edit
            stays proposed.

        Raises:
            EditStateError: If the edit is not in the proposed state
        """
        if edit.status != EditStatus.PROPOSED:
            raise EditStateError(f"Edit for {edit.path} is already {edit.status.value}")
        if not self._edit_applier.apply(edit.path, edit.new_content, edit.original_content):
            return False
        edit.mark_applied()
        return True

    def reject(self, edit: EditResult) -> EditResult:
        """
        Discard the edit without touching the file.

        Raises:
            EditStateError: If the edit is not proposed
        """
        edit.mark_rejected()
        self._logger.info(f"Rejected edit: {edit.path}")
        return edit
