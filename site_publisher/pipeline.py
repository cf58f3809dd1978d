"""
High-level orchestration for site-publisher.

A run is a fixed sequence:
  - check the interpreter and git,
  - rebuild the generated output inside a disposable venv,
  - guard on the local branch, pending changes and the remote,
  - stage, commit and push the configured scope, and
  - remove the venv.

Any failure aborts the run immediately. There is no rollback; a failed
generation step leaves the venv behind.
"""

from __future__ import annotations

import logging

from .config import Config, describe_config
from .environment import VirtualEnvironment, clean_output_dir
from .errors import BranchNotFoundError, NoChangesError, RemoteUnavailableError
from .git_adapter import GitAdapter
from .preflight import require_git, require_interpreter
from .runner import CommandRunner

LOG = logging.getLogger(__name__)


def build_site(config: Config, venv: VirtualEnvironment, python: str) -> None:
    """
    Regenerate the output directory with the generator script.
    """

    venv.create(python)
    venv.install_requirements(
        config.working_dir / config.requirements_file, cwd=config.working_dir
    )

    clean_output_dir(config.output_path)

    LOG.info(
        "Running %s and regenerating %s...",
        config.generator_script,
        config.output_dir,
    )
    venv.run_script(config.working_dir / config.generator_script, cwd=config.working_dir)


def publish_changes(config: Config, git: GitAdapter) -> None:
    """
    Commit the configured scope and push it to the configured remote.

    Every guard runs before the first mutating git command, so a failed
    guard leaves the index, the history and the remote untouched.
    """

    branch = config.git_branch
    remote = config.git_remote

    LOG.info("Checking if git branch %s exists locally...", branch)
    if not git.branch_exists(branch):
        raise BranchNotFoundError(f"git branch {branch!r} doesn't exist locally")

    pathspecs = config.changes_pathspecs()
    LOG.info("Checking if %s had changes...", config.scope_label)
    if not git.has_changes(branch, pathspecs):
        raise NoChangesError(f"no changes detected in {config.scope_label}")
    LOG.info("Changes detected...")

    LOG.info("Checking if git remote %s is reachable and has branch %s...", remote, branch)
    if not git.remote_branch_exists(remote, branch):
        raise RemoteUnavailableError(
            f"git remote {remote!r} and/or branch {branch!r} are unavailable"
        )

    LOG.info("Staging changes in %s...", config.scope_label)
    git.stage(pathspecs)
    if config.commit_entire_repo and git.unstage(config.venv_pathspec):
        LOG.info("Unstaged %s; the virtual environment is never committed", config.venv_dir)
    LOG.debug("Staged paths: %s", ", ".join(git.staged_paths()))

    LOG.info("Committing changes...")
    # The whole-repository index is entirely in scope once the venv is out.
    git.commit(
        config.git_commit_message,
        config.git_user_name,
        config.git_user_email,
        pathspecs=[] if config.commit_entire_repo else pathspecs,
    )

    LOG.info("Pushing changes to %s/%s...", remote, branch)
    git.push(remote, branch)


def run_publish(config: Config, runner: CommandRunner) -> None:
    """
    Run the full build-and-push workflow for config.
    """

    python = require_interpreter(config, runner)
    require_git(runner)
    describe_config(config)

    venv = VirtualEnvironment(config.venv_path, runner)
    build_site(config, venv, python)

    git = GitAdapter(runner, config.working_dir)
    publish_changes(config, git)

    venv.remove()
    LOG.info("Build and push succeeded")
