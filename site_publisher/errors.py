"""
Custom exception types used across site-publisher.

Every expected abort path raises one of these so the CLI can print a
single human-readable line and exit with status 1, while genuinely
unexpected failures still surface with a traceback.
"""

from __future__ import annotations

from typing import Optional, Sequence


class PublishError(Exception):
    """Base class for all site-publisher specific errors."""


class PreconditionError(PublishError):
    """Raised when a required executable is missing or not executable."""


class CommandError(PublishError):
    """Raised when an external command fails or cannot be started."""

    def __init__(
        self,
        args: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
        reason: Optional[str] = None,
    ) -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        message = reason or f"command failed with exit code {returncode}"
        detail = f"{message}: {' '.join(self.command)}"
        if stderr.strip():
            detail = f"{detail}\n{stderr.strip()}"
        super().__init__(detail)


class GitError(CommandError):
    """Raised when git operations fail."""


class BranchNotFoundError(PublishError):
    """Raised when the configured branch does not exist locally."""


class NoChangesError(PublishError):
    """Raised when there is nothing to commit for the configured scope."""


class RemoteUnavailableError(PublishError):
    """Raised when the remote is unreachable or does not carry the branch."""
