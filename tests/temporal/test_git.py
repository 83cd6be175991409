"""Tests for the git collaborator."""

import shutil
import subprocess

import pytest

from codeplug.drift import parse_diff
from codeplug.exceptions import SourceControlError
from codeplug.scoring import ViolationDetector
from codeplug.temporal.git import GitIntegration

from conftest import make_convention, write_files

UTILITY = make_convention("naming", "Utility files use camelCase")


class TestParseLog:
    def test_parses_fields(self):
        raw = "\x1f".join(["a" * 40, "2026-01-02T03:04:05+00:00", "Fix: a | b", "Dev Name"]) + "\n"
        [commit] = GitIntegration(".")._parse_log(raw)
        assert commit.hash == "a" * 40
        assert commit.message == "Fix: a | b"
        assert commit.author == "Dev Name"

    def test_skips_noise(self):
        assert GitIntegration(".")._parse_log("warning: something\n\n") == []


class TestNotARepo:
    def test_queries_raise(self, tmp_path, monkeypatch):
        def fake_run(*args, **kwargs):
            return subprocess.CompletedProcess(args, 128, "", "fatal: not a git repository")

        monkeypatch.setattr(subprocess, "run", fake_run)
        git = GitIntegration(str(tmp_path))
        assert not git.is_repo()
        with pytest.raises(SourceControlError):
            git.recent_commits(5)
        with pytest.raises(SourceControlError):
            git.files_changed_since("1 week ago")


def git(repo, *args):
    subprocess.run(
        ["git", "-C", str(repo), "-c", "user.name=Dev", "-c", "user.email=dev@example.com", *args],
        check=True,
        capture_output=True,
    )


@pytest.fixture
def nested_repo(tmp_path):
    """A repository whose project lives under ``app/``."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    git(tmp_path, "init", "-q")
    write_files(tmp_path, {"app/src/auth_helper.ts": "export function login() {}\n", "README.md": "x\n"})
    git(tmp_path, "add", ".")
    git(tmp_path, "commit", "-q", "-m", "init")
    return tmp_path


class TestProjectInSubdirectory:
    def test_changed_files_relative_to_project(self, nested_repo):
        changed = GitIntegration(str(nested_repo / "app")).files_changed_since("1 year ago")
        assert changed == ["src/auth_helper.ts"]

    def test_commit_diff_relative_to_project(self, nested_repo):
        app = GitIntegration(str(nested_repo / "app"))
        [commit] = app.recent_commits(1)
        [hunk] = parse_diff(app.diff_for_commit(commit.hash))
        assert hunk.file == "src/auth_helper.ts"

    def test_staged_diff_relative_to_project(self, nested_repo):
        write_files(nested_repo, {"app/src/new_file.ts": "export const a = 1;\n"})
        git(nested_repo, "add", ".")
        [hunk] = parse_diff(GitIntegration(str(nested_repo / "app")).staged_diff())
        assert hunk.file == "src/new_file.ts"

    def test_since_audit_targets_project_files(self, nested_repo):
        app = nested_repo / "app"
        result = ViolationDetector(app, git=GitIntegration(str(app))).detect([UTILITY], since="1 year ago")
        assert result.target_files == ["src/auth_helper.ts"]
        [v] = result.violations
        assert v.expected == "authHelper.ts"
