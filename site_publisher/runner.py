"""
Command execution for site-publisher.

All external tools (the interpreter, pip, the generator and git) are
invoked through a CommandRunner so the orchestration can be exercised
with fakes in tests.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Union

from .errors import CommandError

LOG = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class CommandResult:
    """
    Outcome of one external command.

    stdout and stderr are empty when the output was streamed to the
    terminal instead of captured.
    """

    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """
    Runs external commands synchronously via subprocess.
    """

    def run(
        self,
        args: Sequence[PathLike],
        *,
        cwd: Optional[PathLike] = None,
        env: Optional[Mapping[str, str]] = None,
        capture: bool = True,
        check: bool = True,
    ) -> CommandResult:
        """
        Run a command and return its result.

        With check=True a non-zero exit status raises CommandError. A
        command that cannot be started always raises CommandError.
        """

        cmd = [str(arg) for arg in args]
        LOG.debug("Running command: %s", " ".join(cmd))
        try:
            completed = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd is not None else None,
                env=dict(env) if env is not None else None,
                check=False,
                text=True,
                capture_output=capture,
            )
        except OSError as exc:
            raise CommandError(cmd, reason=f"failed to execute {cmd[0]}: {exc}") from exc

        result = CommandResult(
            args=cmd,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if check and not result.ok:
            LOG.debug("%s stderr: %s", cmd[0], result.stderr)
            raise CommandError(cmd, result.returncode, result.stderr)
        return result

    def which(self, name: PathLike) -> Optional[str]:
        """
        Resolve an executable name or path.

        Returns None when the executable is missing or not executable by
        the current user.
        """

        return shutil.which(str(name))
