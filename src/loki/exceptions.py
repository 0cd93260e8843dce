"""Errors raised by loki."""

from typing import Optional


class GitError(Exception):
    """Git operation error."""


class CommandError(GitError):
    """A git command exited non-zero or could not be started."""

    def __init__(self, description: str, message: Optional[str] = None) -> None:
        """Initialize error.

        Args:
            description: What the command was doing, e.g. "push to origin"
            message: Details reported by git
        """
        self.description = description
        self.message = message

        error_msg = f"Failed to {description}"
        if message:
            error_msg += f": {message}"
        super().__init__(error_msg)


class PreconditionError(GitError):
    """The repository is not in a state the command can work with."""
