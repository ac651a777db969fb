"""
Configuration settings for the application.
"""

import os
from typing import Optional

from dotenv import load_dotenv

from workspace_agent.exceptions import ConfigurationError

# Load environment variables from .env file
_ = load_dotenv()

DEFAULT_BLOCKED_PATTERNS: list[str] = [
    ".env",
    ".env.*",
    "*.key",
    "*.pem",
    "*.p12",
    "credentials.*",
    "**/node_modules/**",
    "**/.git/**",
]

DEFAULT_MAX_FILE_READ_SIZE = 100_000
DEFAULT_MAX_ITERATIONS = 10

DEFAULT_INSTRUCTIONS = (
    "You are a coding assistant working inside the user's project. "
    "Inspect files before changing them, keep edits minimal, and explain "
    "what you changed in a short summary once you are done."
)


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self, **overrides: object):
        self.openai_api_key: Optional[str] = self._get_optional_env("OPENAI_API_KEY")
        self.openai_model: str = self._get_env("OPENAI_MODEL", "gpt-4o-mini")
        self.openai_api_base: str = self._get_env(
            "OPENAI_API_BASE", "https://api.openai.com/v1"
        )
        self.workspace_root: str = os.path.abspath(
            os.path.expanduser(self._get_env("AGENT_WORKSPACE_ROOT", os.getcwd()))
        )
        self.max_file_read_size: int = self._get_int_env(
            "AGENT_MAX_FILE_READ_SIZE", DEFAULT_MAX_FILE_READ_SIZE
        )
        self.blocked_file_patterns: list[str] = self._get_list_env(
            "AGENT_BLOCKED_FILE_PATTERNS", DEFAULT_BLOCKED_PATTERNS
        )
        self.max_iterations: int = self._get_int_env(
            "AGENT_MAX_ITERATIONS", DEFAULT_MAX_ITERATIONS
        )
        self.enable_file_operations: bool = self._get_bool_env(
            "AGENT_ENABLE_FILE_OPERATIONS", True
        )
        self.auto_apply_edits: bool = self._get_bool_env("AGENT_AUTO_APPLY_EDITS", False)
        self.instructions: str = self._get_env("AGENT_INSTRUCTIONS", DEFAULT_INSTRUCTIONS)

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise ConfigurationError(f"Unknown setting: {key}")
            setattr(self, key, value)

        if self.max_iterations < 1:
            raise ConfigurationError("AGENT_MAX_ITERATIONS must be at least 1")
        if self.max_file_read_size < 1:
            raise ConfigurationError("AGENT_MAX_FILE_READ_SIZE must be positive")

    def require_openai_api_key(self) -> str:
        """Return the API key, raise error if missing."""
        if not self.openai_api_key:
            raise ConfigurationError(
                "Required environment variable OPENAI_API_KEY is not set"
            )
        return self.openai_api_key

    def _get_optional_env(self, key: str) -> Optional[str]:
        """Get an environment variable, None when unset or empty."""
        value = os.getenv(key)
        return value or None

    def _get_env(self, key: str, default: str) -> str:
        """Get an environment variable with a default value."""
        return os.getenv(key) or default

    def _get_int_env(self, key: str, default: int) -> int:
        """Get an integer environment variable, raise error if not a number."""
        value = os.getenv(key)
        if value is None or not value.strip():
            return default
        try:
            return int(value.strip())
        except ValueError:
            raise ConfigurationError(f"Environment variable {key} must be an integer")

    def _get_bool_env(self, key: str, default: bool) -> bool:
        value = os.getenv(key)
        if value is None or not value.strip():
            return default
        return value.strip().lower() not in ("0", "false", "no", "off")

    def _get_list_env(self, key: str, default: list[str]) -> list[str]:
        value = os.getenv(key)
        if value is None or not value.strip():
            return list(default)
        return [item.strip() for item in value.split(",") if item.strip()]
