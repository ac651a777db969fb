"""
Dependency injection container for managing application dependencies.
"""

import logging
from typing import Any, Optional

from workspace_agent.adapters.files.local_edit_applier import LocalEditApplier
from workspace_agent.adapters.files.local_fs_adapter import LocalFileSystemAdapter
from workspace_agent.adapters.llm.openai_adapter import OpenAIStreamAdapter
from workspace_agent.config.settings import Settings
from workspace_agent.ports.files.edit_approval_port import EditApprovalPort
from workspace_agent.ports.files.file_repository_port import FileRepositoryPort
from workspace_agent.ports.llm.llm_port import CompletionStreamPort
from workspace_agent.ports.llm.tools_port import ToolsHandlerPort
from workspace_agent.use_cases.agent.agent_loop import AgentLoopUseCase
from workspace_agent.use_cases.agent.tool_call_parser import ToolCallParser
from workspace_agent.use_cases.files.apply_edit import ApplyEditUseCase
from workspace_agent.use_cases.files.file_operations import FileOperationsUseCase
from workspace_agent.use_cases.tools.files_tools import FilesToolsHandler
from workspace_agent.use_cases.tools.tool_executor import ToolExecutor
from workspace_agent.utils.workspace import PathValidator


class DependencyContainer:
    """
    Container for managing application dependencies using dependency injection.

    The completion client is owned here: it is built once per configuration
    and released by :meth:`close` or :meth:`reconfigure`.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._settings = settings
        self._instances: dict[str, Any] = {}
        self._logger = logger or logging.getLogger(__name__)

    def get_settings(self) -> Settings:
        """
        Get the active settings, loading them from the environment on first use.

        Returns:
            Settings instance
        """
        if self._settings is None:
            self._settings = Settings()
        return self._settings

    def get_path_validator(self) -> PathValidator:
        if "path_validator" not in self._instances:
            settings = self.get_settings()
            self._instances["path_validator"] = PathValidator(
                settings.workspace_root, settings.blocked_file_patterns
            )
        return self._instances["path_validator"]

    def get_file_repository(self) -> FileRepositoryPort:
        """
        Get file repository adapter instance.

        Returns:
            FileRepositoryPort implementation
        """
        if "file_repository" not in self._instances:
            self._instances["file_repository"] = LocalFileSystemAdapter(
                self.get_settings().workspace_root, self._logger
            )
        return self._instances["file_repository"]

    def get_file_operations_use_case(self) -> FileOperationsUseCase:
        """
        Get file operations use case with injected dependencies.

        Returns:
            Configured FileOperationsUseCase
        """
        if "file_operations_use_case" not in self._instances:
            self._instances["file_operations_use_case"] = FileOperationsUseCase(
                self.get_file_repository(),
                self.get_path_validator(),
                self.get_settings().max_file_read_size,
                self._logger,
            )
        return self._instances["file_operations_use_case"]

    def get_files_tools_handler(self) -> ToolsHandlerPort:
        if "files_tools_handler" not in self._instances:
            self._instances["files_tools_handler"] = FilesToolsHandler(
                self.get_file_operations_use_case(), self._logger
            )
        return self._instances["files_tools_handler"]

    def get_tool_executor(self) -> ToolExecutor:
        if "tool_executor" not in self._instances:
            self._instances["tool_executor"] = ToolExecutor(
                self.get_files_tools_handler(), self._logger
            )
        return self._instances["tool_executor"]

    def get_tool_call_parser(self) -> ToolCallParser:
        if "tool_call_parser" not in self._instances:
            self._instances["tool_call_parser"] = ToolCallParser(self._logger)
        return self._instances["tool_call_parser"]

    def get_completion_client(self) -> CompletionStreamPort:
        """
        Get the streaming completion client.

        Returns:
            CompletionStreamPort implementation

        Raises:
            ConfigurationError: If no API key is configured
        """
        if "completion_client" not in self._instances:
            self._instances["completion_client"] = OpenAIStreamAdapter(
                self.get_settings(), logger=self._logger
            )
        return self._instances["completion_client"]

    def set_completion_client(self, client: CompletionStreamPort) -> None:
        """Use a preconfigured completion client (alternative providers, tests)."""
        self._instances["completion_client"] = client

    def get_edit_applier(self) -> EditApprovalPort:
        if "edit_applier" not in self._instances:
            self._instances["edit_applier"] = LocalEditApplier(
                self.get_file_repository(), self.get_path_validator(), self._logger
            )
        return self._instances["edit_applier"]

    def get_apply_edit_use_case(self) -> ApplyEditUseCase:
        if "apply_edit_use_case" not in self._instances:
            self._instances["apply_edit_use_case"] = ApplyEditUseCase(
                self.get_edit_applier(), self._logger
            )
        return self._instances["apply_edit_use_case"]

    def create_agent_loop(
        self,
        model: Optional[str] = None,
        max_iterations: Optional[int] = None,
        instructions: Optional[str] = None,
    ) -> AgentLoopUseCase:
        """
        Build a new agent loop sharing this container's collaborators.

        Each conversation gets its own loop instance; only the file system and
        the completion client are shared.

        Args:
            model: Model override (defaults to settings)
            max_iterations: Iteration budget override (defaults to settings)
            instructions: System instructions override (defaults to settings)

        Returns:
            Configured AgentLoopUseCase
        """
        settings = self.get_settings()
        return AgentLoopUseCase(
            completion_client=self.get_completion_client(),
            tool_executor=self.get_tool_executor(),
            parser=self.get_tool_call_parser(),
            tools_handler=self.get_files_tools_handler(),
            instructions=instructions or settings.instructions,
            max_iterations=max_iterations or settings.max_iterations,
            model=model or settings.openai_model,
            enable_tools=settings.enable_file_operations,
            logger=self._logger,
        )

    async def close(self) -> None:
        """Release the completion client and drop every cached instance."""
        client = self._instances.get("completion_client")
        if client is not None:
            await client.aclose()
        self._instances.clear()

    async def reconfigure(self, settings: Settings) -> None:
        """Switch to new settings, rebuilding dependencies on next use."""
        await self.close()
        self._settings = settings

    def reset(self):
        """Reset all instances (useful for testing)."""
        self._instances.clear()


# Global container instance
container = DependencyContainer()
