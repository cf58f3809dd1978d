import subprocess

import pytest

from site_publisher.errors import CommandError, GitError
from site_publisher.git_adapter import GitAdapter
from site_publisher.runner import CommandResult, CommandRunner


class ScriptedRunner(CommandRunner):
    """
    Runner that answers git commands from a mapping of subcommand -> result.
    """

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []

    def run(self, args, *, cwd=None, env=None, capture=True, check=True):
        cmd = [str(arg) for arg in args]
        self.calls.append(cmd)
        subcommand = next(arg for arg in cmd[1:] if not arg.startswith("-") and "=" not in arg)
        returncode, stdout, stderr = self.responses.get(subcommand, (0, "", ""))
        result = CommandResult(args=cmd, returncode=returncode, stdout=stdout, stderr=stderr)
        if check and not result.ok:
            raise CommandError(cmd, returncode, stderr)
        return result


def test_run_git_includes_stderr_details_on_failure(monkeypatch):
    def fake_run(*args, **kwargs):
        return subprocess.CompletedProcess(
            args=["git", "push", "origin", "master"],
            returncode=128,
            stdout="",
            stderr="fatal: not a git repository",
        )

    monkeypatch.setattr("site_publisher.runner.subprocess.run", fake_run)
    git = GitAdapter(CommandRunner(), cwd=".")

    with pytest.raises(GitError) as excinfo:
        git.push("origin", "master")

    message = str(excinfo.value)
    assert "git push origin master" in message
    assert "fatal: not a git repository" in message
    assert excinfo.value.returncode == 128


def test_config_get_returns_none_for_unset_or_empty_values():
    assert GitAdapter(ScriptedRunner({"config": (1, "", "")}), ".").config_get("user.name") is None
    assert GitAdapter(ScriptedRunner({"config": (0, "\n", "")}), ".").config_get("user.name") is None
    assert GitAdapter(ScriptedRunner({"config": (0, "Jo\n", "")}), ".").config_get("user.name") == "Jo"


def test_branch_exists_checks_the_exact_local_ref():
    runner = ScriptedRunner({"show-ref": (1, "", "")})
    assert GitAdapter(runner, ".").branch_exists("master") is False
    assert runner.calls[0] == ["git", "show-ref", "--verify", "--quiet", "refs/heads/master"]


def test_has_changes_when_tracked_files_differ():
    runner = ScriptedRunner({"diff": (1, "", "")})
    assert GitAdapter(runner, ".").has_changes("master", ["../docs"]) is True
    assert runner.calls == [["git", "diff", "--quiet", "master", "--", "../docs"]]


def test_has_changes_counts_untracked_files():
    runner = ScriptedRunner(
        {"diff": (0, "", ""), "status": (0, "?? docs/analytics/new.html\n", "")}
    )
    assert GitAdapter(runner, ".").has_changes("master", ["../docs"]) is True


def test_has_changes_is_false_for_clean_scope():
    runner = ScriptedRunner({"diff": (0, "", ""), "status": (0, "", "")})
    assert GitAdapter(runner, ".").has_changes("master", [":/", ":(exclude)venv"]) is False
    assert runner.calls[1] == [
        "git",
        "status",
        "--porcelain",
        "--untracked-files=all",
        "--",
        ":/",
        ":(exclude)venv",
    ]


def test_has_changes_raises_on_unexpected_diff_failure():
    runner = ScriptedRunner({"diff": (128, "", "fatal: bad revision 'master'")})
    with pytest.raises(GitError) as excinfo:
        GitAdapter(runner, ".").has_changes("master", ["../docs"])
    assert "bad revision" in str(excinfo.value)


def test_remote_branch_exists_requires_exact_advertised_branch():
    advertised = "abc123\trefs/heads/master\n"
    runner = ScriptedRunner({"ls-remote": (0, advertised, "")})
    assert GitAdapter(runner, ".").remote_branch_exists("origin", "master") is True
    assert runner.calls[0] == ["git", "ls-remote", "--exit-code", "--heads", "origin", "master"]

    nested = "abc123\trefs/heads/release/master\n"
    runner = ScriptedRunner({"ls-remote": (0, nested, "")})
    assert GitAdapter(runner, ".").remote_branch_exists("origin", "master") is False


def test_remote_branch_exists_is_false_when_remote_unreachable():
    runner = ScriptedRunner({"ls-remote": (128, "", "fatal: could not read from remote")})
    assert GitAdapter(runner, ".").remote_branch_exists("origin", "master") is False


def test_commit_uses_one_shot_identity_and_allows_empty_message():
    runner = ScriptedRunner()
    GitAdapter(runner, ".").commit("", "Publisher", "<>")

    assert runner.calls == [
        [
            "git",
            "-c",
            "user.name=Publisher",
            "-c",
            "user.email=<>",
            "commit",
            "--allow-empty-message",
            "-m",
            "",
        ]
    ]


def test_push_targets_only_the_configured_branch():
    runner = ScriptedRunner()
    GitAdapter(runner, ".").push("upstream", "gh-pages")
    assert runner.calls == [["git", "push", "upstream", "gh-pages"]]


def test_commit_limits_itself_to_pathspecs():
    runner = ScriptedRunner()
    GitAdapter(runner, ".").commit("Rebuild", "Publisher", "<>", pathspecs=["../docs"])

    assert runner.calls[0][-4:] == ["-m", "Rebuild", "--", "../docs"]


def test_unstage_resets_staged_entries():
    runner = ScriptedRunner({"diff": (0, "scripts/venv/pyvenv.cfg\n", "")})

    assert GitAdapter(runner, ".").unstage("venv") is True
    assert runner.calls == [
        ["git", "diff", "--cached", "--name-only", "--", "venv"],
        ["git", "reset", "-q", "--", "venv"],
    ]


def test_unstage_is_a_no_op_when_nothing_is_staged():
    runner = ScriptedRunner({"diff": (0, "", "")})

    assert GitAdapter(runner, ".").unstage("venv") is False
    assert [call[1] for call in runner.calls] == ["diff"]
