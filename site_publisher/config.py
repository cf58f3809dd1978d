"""
Configuration model for site-publisher.

The CLI resolves a Config once at startup and passes it down into the
orchestration, so no step reads environment variables on its own.
Each git/interpreter option resolves in a fixed order: environment
override, then (for the author identity only) existing git config, then
a hard-coded default.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from .git_adapter import GitAdapter
from .runner import CommandRunner

LOG = logging.getLogger(__name__)

DEFAULT_PYTHON = "python3"
DEFAULT_GIT_REMOTE = "origin"
DEFAULT_GIT_BRANCH = "master"
DEFAULT_GIT_USER_NAME = "Build and Push Automation Script"
DEFAULT_GIT_USER_EMAIL = "<>"
DEFAULT_GIT_COMMIT_MESSAGE = "Automated commit to rebuild the static site"
DEFAULT_COMMIT_ENTIRE_REPO = "true"

DEFAULT_VENV_DIR = "venv"
DEFAULT_REQUIREMENTS_FILE = "requirements.txt"
DEFAULT_GENERATOR_SCRIPT = "generate_analytics.py"
DEFAULT_OUTPUT_DIR = "../docs/analytics"
DEFAULT_DOCS_DIR = "../docs"

# (environment variable, default) pairs, in the order shown by --help.
ENVIRONMENT_VARIABLES = [
    ("PYTHON", f"$(command -v {DEFAULT_PYTHON})"),
    ("GIT_REMOTE", DEFAULT_GIT_REMOTE),
    ("GIT_BRANCH", DEFAULT_GIT_BRANCH),
    ("GIT_USER_NAME", f"git config user.name, else {DEFAULT_GIT_USER_NAME!r}"),
    ("GIT_USER_EMAIL", f"git config user.email, else {DEFAULT_GIT_USER_EMAIL!r}"),
    ("GIT_COMMIT_MESSAGE", repr(DEFAULT_GIT_COMMIT_MESSAGE)),
    ("COMMIT_ENTIRE_REPO", DEFAULT_COMMIT_ENTIRE_REPO),
]


@dataclass
class Config:
    """
    Top-level configuration for a publish run.

    Relative paths (venv_dir, requirements_file, generator_script,
    output_dir, docs_dir) are interpreted against working_dir.
    """

    python: str = DEFAULT_PYTHON
    git_remote: str = DEFAULT_GIT_REMOTE
    git_branch: str = DEFAULT_GIT_BRANCH
    git_user_name: str = DEFAULT_GIT_USER_NAME
    git_user_email: str = DEFAULT_GIT_USER_EMAIL
    git_commit_message: str = DEFAULT_GIT_COMMIT_MESSAGE
    commit_entire_repo: bool = True

    working_dir: Path = Path(".")
    venv_dir: str = DEFAULT_VENV_DIR
    requirements_file: str = DEFAULT_REQUIREMENTS_FILE
    generator_script: str = DEFAULT_GENERATOR_SCRIPT
    output_dir: str = DEFAULT_OUTPUT_DIR
    docs_dir: str = DEFAULT_DOCS_DIR
    verbosity: int = 0

    @property
    def venv_path(self) -> Path:
        return self.working_dir / self.venv_dir

    @property
    def output_path(self) -> Path:
        return self.working_dir / self.output_dir

    @property
    def scope_label(self) -> str:
        if self.commit_entire_repo:
            return "repo"
        return self.docs_dir

    def changes_pathspecs(self) -> List[str]:
        """
        Return the git pathspecs covering the commit scope.

        Pathspecs are relative to working_dir, which is where git runs.
        The whole-repository scope always excludes the venv directory.
        """

        if not self.commit_entire_repo:
            return [self.docs_dir]
        return [":/", f":(exclude){self.venv_pathspec}"]

    @property
    def venv_pathspec(self) -> str:
        return Path(os.path.relpath(self.venv_path, self.working_dir)).as_posix()


def _env_value(environ: Mapping[str, str], name: str) -> Optional[str]:
    # Empty values count as unset, like ${VAR:-default} in sh.
    value = environ.get(name)
    if value is None or value == "":
        return None
    return value


def _git_identity(
    environ: Mapping[str, str],
    git: Optional[GitAdapter],
    env_name: str,
    git_key: str,
    default: str,
) -> str:
    override = _env_value(environ, env_name)
    if override is not None:
        return override
    if git is not None:
        configured = git.config_get(git_key)
        if configured:
            return configured
    return default


def resolve_config(
    environ: Mapping[str, str],
    runner: CommandRunner,
    *,
    working_dir: Path = Path("."),
    venv_dir: str = DEFAULT_VENV_DIR,
    requirements_file: str = DEFAULT_REQUIREMENTS_FILE,
    generator_script: str = DEFAULT_GENERATOR_SCRIPT,
    output_dir: str = DEFAULT_OUTPUT_DIR,
    docs_dir: str = DEFAULT_DOCS_DIR,
    verbosity: int = 0,
) -> Config:
    """
    Build a Config from environment overrides and read-only git queries.

    The git config tier is skipped when git is not installed; the
    pipeline's precondition check reports that case as fatal.
    """

    python = (
        _env_value(environ, "PYTHON")
        or runner.which(DEFAULT_PYTHON)
        or DEFAULT_PYTHON
    )

    git: Optional[GitAdapter] = None
    if runner.which("git") is not None:
        git = GitAdapter(runner, working_dir)

    commit_entire_repo = (
        _env_value(environ, "COMMIT_ENTIRE_REPO") or DEFAULT_COMMIT_ENTIRE_REPO
    ) == "true"

    return Config(
        python=python,
        git_remote=_env_value(environ, "GIT_REMOTE") or DEFAULT_GIT_REMOTE,
        git_branch=_env_value(environ, "GIT_BRANCH") or DEFAULT_GIT_BRANCH,
        git_user_name=_git_identity(
            environ, git, "GIT_USER_NAME", "user.name", DEFAULT_GIT_USER_NAME
        ),
        git_user_email=_git_identity(
            environ, git, "GIT_USER_EMAIL", "user.email", DEFAULT_GIT_USER_EMAIL
        ),
        git_commit_message=(
            _env_value(environ, "GIT_COMMIT_MESSAGE") or DEFAULT_GIT_COMMIT_MESSAGE
        ),
        commit_entire_repo=commit_entire_repo,
        working_dir=working_dir,
        venv_dir=venv_dir,
        requirements_file=requirements_file,
        generator_script=generator_script,
        output_dir=output_dir,
        docs_dir=docs_dir,
        verbosity=verbosity,
    )


def describe_config(config: Config) -> None:
    """
    Log the resolved settings before anything is committed.
    """

    LOG.info("Python interpreter: %s", config.python)
    LOG.info("Git remote: %s, Git branch: %s", config.git_remote, config.git_branch)
    LOG.info(
        "Git user name: %s, Git user email: %s",
        config.git_user_name,
        config.git_user_email,
    )
    LOG.info("Git commit message: %s", config.git_commit_message)
    if config.commit_entire_repo:
        LOG.info("Commit scope: entire repo (excluding %s)", config.venv_dir)
    else:
        LOG.info("Commit scope: %s", config.docs_dir)
