"""
Precondition checks for site-publisher runs.

These run before anything is deleted, installed or pushed, so a missing
tool fails fast without leaving partial state behind.
"""

from __future__ import annotations

import logging

from .config import Config
from .errors import PreconditionError
from .runner import CommandRunner

LOG = logging.getLogger(__name__)


def _require_executable(runner: CommandRunner, name: str, label: str) -> str:
    resolved = runner.which(name)
    if resolved is None:
        raise PreconditionError(
            f"'{label}' is not installed or is not executable by current user"
        )
    return resolved


def require_interpreter(config: Config, runner: CommandRunner) -> str:
    """
    Verify the configured interpreter and log its version.

    Returns the resolved interpreter path.
    """

    python = _require_executable(runner, config.python, "python3")
    result = runner.run([python, "-V"])
    # Python 2 printed its version on stderr.
    version = (result.stdout or result.stderr).strip()
    LOG.info("Python executable: %s, Python version: %s", python, version)
    return python


def require_git(runner: CommandRunner) -> str:
    """
    Verify git is available and log its version.
    """

    git = _require_executable(runner, "git", "git")
    version = runner.run([git, "--version"]).stdout.strip()
    LOG.info("Git executable: %s, Git version: %s", git, version)
    return git
