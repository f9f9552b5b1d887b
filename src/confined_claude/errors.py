"""Unified exception hierarchy for confined-claude.

All custom exceptions inherit from ConfinedClaudeError for consistent error
handling. The CLI catches these and converts them to user-facing messages.

Dependency direction:
    This module has NO internal dependencies (leaf module).
    It may be imported by: all other confined_claude modules.
"""

from __future__ import annotations


class ConfinedClaudeError(Exception):
    """Base exception for all confined-claude errors."""

    hint: str = ""


class ValidationError(ConfinedClaudeError):
    """Invalid command-line input (e.g. two command flags at once)."""


class DockerError(ConfinedClaudeError):
    """Docker operation errors.

    Base class for all Docker-related exceptions.
    """


class DockerNotFoundError(DockerError):
    """Raised when Docker is not installed or not in PATH."""

    hint = "Install it first: https://docs.docker.com/get-docker/"


class DockerNotRunningError(DockerError):
    """Raised when the Docker daemon cannot be reached."""

    hint = "Is the daemon running? Is your user in the 'docker' group?"


class DockerTimeoutError(DockerError):
    """Raised when a Docker operation times out."""


class ImageBuildError(DockerError):
    """Raised when Docker image build fails."""

    def __init__(self, message: str, returncode: int = 1) -> None:
        super().__init__(message)
        self.returncode = returncode


class CleanupError(ConfinedClaudeError):
    """Raised when persistent data cannot be deleted or recreated."""

    hint = "Files created inside the container may need: sudo rm -rf <path>"
