"""
Git integration for site-publisher.

This module wraps the git CLI for the handful of operations a publish
run needs: reading identity config, checking the branch and the remote,
detecting changes, staging, committing and pushing.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .errors import CommandError, GitError
from .runner import CommandResult, CommandRunner, PathLike

LOG = logging.getLogger(__name__)


class GitAdapter:
    """
    Runs git commands in a fixed working directory.
    """

    def __init__(self, runner: CommandRunner, cwd: PathLike) -> None:
        self.runner = runner
        self.cwd = cwd

    def _run_git(self, args: Sequence[str], check: bool = True) -> CommandResult:
        """
        Run a git command, converting failures into GitError.
        """

        cmd = ["git", *args]
        try:
            return self.runner.run(cmd, cwd=self.cwd, check=check)
        except GitError:
            raise
        except CommandError as exc:
            raise GitError(exc.command, exc.returncode, exc.stderr) from exc

    def version(self) -> str:
        return self._run_git(["--version"]).stdout.strip()

    def config_get(self, key: str) -> Optional[str]:
        """
        Return the configured value for key, or None when it is unset or
        empty.
        """

        result = self._run_git(["config", key], check=False)
        value = result.stdout.strip()
        if not result.ok or not value:
            return None
        return value

    def branch_exists(self, branch: str) -> bool:
        result = self._run_git(
            ["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"],
            check=False,
        )
        return result.ok

    def has_changes(self, branch: str, pathspecs: Sequence[str]) -> bool:
        """
        Return True if the working tree differs from branch under pathspecs.

        Untracked files that are not ignored count as changes too, so
        freshly generated files are picked up.
        """

        cmd = ["diff", "--quiet", branch, "--", *pathspecs]
        result = self._run_git(cmd, check=False)
        if result.returncode == 1:
            return True
        if result.returncode != 0:
            raise GitError(["git", *cmd], result.returncode, result.stderr)

        status = self._run_git(
            ["status", "--porcelain", "--untracked-files=all", "--", *pathspecs]
        ).stdout
        return any(line.startswith("??") for line in status.splitlines())

    def remote_branch_exists(self, remote: str, branch: str) -> bool:
        """
        Return True if remote is reachable and advertises branch.
        """

        result = self._run_git(
            ["ls-remote", "--exit-code", "--heads", remote, branch],
            check=False,
        )
        if not result.ok:
            LOG.debug("git ls-remote failed (%d): %s", result.returncode, result.stderr)
            return False
        refs = [line.split()[-1] for line in result.stdout.splitlines() if line.strip()]
        return f"refs/heads/{branch}" in refs

    def stage(self, pathspecs: Sequence[str]) -> None:
        self._run_git(["add", "--all", "--", *pathspecs])

    def staged_paths(self) -> List[str]:
        output = self._run_git(["diff", "--cached", "--name-only"]).stdout
        return [line for line in output.splitlines() if line.strip()]

    def unstage(self, pathspec: str) -> bool:
        """
        Reset the index entries under pathspec back to HEAD.

        Returns True if anything under pathspec was staged.
        """

        staged = self._run_git(["diff", "--cached", "--name-only", "--", pathspec]).stdout
        if not staged.strip():
            return False
        self._run_git(["reset", "-q", "--", pathspec])
        return True

    def commit(
        self,
        message: str,
        user_name: str,
        user_email: str,
        pathspecs: Sequence[str] = (),
    ) -> None:
        """
        Create a commit with a one-shot identity override.

        Empty messages are allowed; git config is never modified. With
        pathspecs, only changes under them are committed and anything
        else already in the index stays staged.
        """

        self._run_git(
            [
                "-c",
                f"user.name={user_name}",
                "-c",
                f"user.email={user_email}",
                "commit",
                "--allow-empty-message",
                "-m",
                message,
                *(["--", *pathspecs] if pathspecs else []),
            ]
        )

    def push(self, remote: str, branch: str) -> None:
        self._run_git(["push", remote, branch])
