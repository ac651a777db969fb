"""
Port for the human-gated step that writes a reviewed edit to disk.
"""

from abc import ABC, abstractmethod


class EditApprovalPort(ABC):
    """Port interface for applying an approved edit."""

    @abstractmethod
    def apply(self, path: str, new_content: str, original_content: str) -> bool:
        """
        Overwrite a file with the reviewed content.

        Args:
            path: Root-relative path from the EditResult
            new_content: Full content to write
            original_content: Content the edit was computed from. The file is
                left alone if it no longer holds exactly this text.

        Returns:
            True if the file was written, False otherwise
        """
        pass
