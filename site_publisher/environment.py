"""
Disposable virtual environment used to run the site generator.

The environment is owned by a single run: created before the build,
removed at the end of a successful publish. Steps call the
environment's interpreter directly instead of relying on shell
activation.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Dict, Mapping, Optional

from .runner import CommandRunner, PathLike

LOG = logging.getLogger(__name__)


class VirtualEnvironment:
    """
    A venv directory plus the runner used to drive it.
    """

    def __init__(self, path: Path, runner: CommandRunner) -> None:
        self.path = path
        self.runner = runner

    @property
    def bin_dir(self) -> Path:
        if os.name == "nt":
            return self.path / "Scripts"
        return self.path / "bin"

    @property
    def python(self) -> Path:
        if os.name == "nt":
            return self.bin_dir / "python.exe"
        return self.bin_dir / "python"

    def create(self, python: str) -> None:
        LOG.info("Setting up virtual environment in %s...", self.path)
        self.runner.run([python, "-m", "venv", self.path], capture=False)

    def activation_env(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Return a process environment equivalent to an activated venv.
        """

        env = dict(os.environ if base is None else base)
        env.pop("PYTHONHOME", None)
        env["VIRTUAL_ENV"] = str(self.path.resolve())
        env["PATH"] = os.pathsep.join(
            part for part in (str(self.bin_dir.resolve()), env.get("PATH")) if part
        )
        return env

    def install_requirements(
        self, requirements: PathLike, cwd: Optional[PathLike] = None
    ) -> None:
        LOG.info("Installing dependencies from %s...", requirements)
        self.runner.run(
            [self.python, "-m", "pip", "install", "-r", requirements],
            cwd=cwd,
            env=self.activation_env(),
            capture=False,
        )

    def run_script(self, script: PathLike, cwd: Optional[PathLike] = None) -> None:
        self.runner.run(
            [self.python, script],
            cwd=cwd,
            env=self.activation_env(),
            capture=False,
        )

    def remove(self) -> bool:
        """
        Delete the environment directory.

        Returns False, after logging a warning, when deletion fails.
        """

        if not self.path.exists():
            return True
        LOG.info("Cleaning up virtual environment...")
        try:
            shutil.rmtree(self.path)
        except OSError as exc:
            LOG.warning("Cannot clean up virtual environment %s: %s", self.path, exc)
            return False
        return True


def clean_output_dir(path: Path) -> bool:
    """
    Delete the generated output directory ahead of regeneration.

    A failed deletion is not fatal: the run continues, but stale output
    may survive, so a warning asks for a manual review.
    """

    if not path.exists():
        LOG.info("Output directory %s does not exist; nothing to clean up", path)
        return True

    LOG.info("Cleaning up %s...", path)
    try:
        shutil.rmtree(path)
    except OSError as exc:
        LOG.warning("Cannot clean up %s: %s", path, exc)
        LOG.warning(
            "Previously generated analyses may still show up on the site even "
            "after their sources were deleted; review %s manually",
            path,
        )
        return False
    return True
