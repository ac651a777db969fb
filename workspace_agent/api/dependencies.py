"""
FastAPI dependency functions for retrieving use cases from the container.
"""

from typing import Optional

from workspace_agent.container import container
from workspace_agent.use_cases.agent.agent_loop import AgentLoopUseCase
from workspace_agent.use_cases.files.apply_edit import ApplyEditUseCase
from workspace_agent.use_cases.files.file_operations import FileOperationsUseCase


def get_file_operations_uc() -> FileOperationsUseCase:
    """
    Get the file operations use case from the container.

    Returns:
        FileOperationsUseCase: The file operations use case instance
    """
    return container.get_file_operations_use_case()


def get_apply_edit_uc() -> ApplyEditUseCase:
    """
    Get the apply edit use case from the container.

    Returns:
        ApplyEditUseCase: The apply edit use case instance
    """
    return container.get_apply_edit_use_case()


def get_agent_loop(
    model: Optional[str] = None, max_iterations: Optional[int] = None
) -> AgentLoopUseCase:
    """
    Build a fresh agent loop for one request.

    Returns:
        AgentLoopUseCase: A new agent loop sharing the container's collaborators
    """
    return container.create_agent_loop(model=model, max_iterations=max_iterations)
