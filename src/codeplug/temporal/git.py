"""Source-control collaborator backed by the ``git`` CLI via subprocess."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Optional, Protocol

from ..exceptions import SourceControlError
from ..logging_config import get_logger
from ..models import CommitInfo

logger = get_logger(__name__)

# Unit separator between log fields; subjects may contain any printable text.
_FIELD_SEP = "\x1f"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%aI", "%s", "%an"])


class SourceControl(Protocol):
    """What the core needs from version control."""

    def is_repo(self) -> bool: ...

    def recent_commits(self, count: int = 10) -> list[CommitInfo]: ...

    def diff_for_commit(self, commit_hash: str) -> str: ...

    def staged_diff(self) -> str: ...

    def files_changed_since(self, since: str) -> list[str]: ...


class GitIntegration:
    """Runs git queries against a working tree.

    Every query raises SourceControlError on failure; callers decide whether
    that aborts their operation. Paths in diffs and file lists are relative
    to ``repo_path`` even when it is a subdirectory of the repository.
    """

    def __init__(self, repo_path: str = ".", timeout: int = 30):
        self.repo_path = str(Path(repo_path).resolve())
        self.timeout = timeout

    def _run(self, args: list[str], operation: str, input_text: Optional[str] = None) -> str:
        try:
            result = subprocess.run(
                ["git", "-C", self.repo_path, *args],
                capture_output=True,
                text=True,
                input=input_text,
                timeout=self.timeout,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            raise SourceControlError(operation, str(e), self.repo_path)
        if result.returncode != 0:
            raise SourceControlError(operation, result.stderr.strip(), self.repo_path)
        return result.stdout

    def is_repo(self) -> bool:
        try:
            self._run(["rev-parse", "--git-dir"], "rev-parse")
            return True
        except SourceControlError:
            return False

    def recent_commits(self, count: int = 10) -> list[CommitInfo]:
        raw = self._run(["log", f"-n{count}", f"--format={_LOG_FORMAT}"], "log")
        return self._parse_log(raw)

    def diff_for_commit(self, commit_hash: str) -> str:
        # `git show` also works for the root commit, unlike `hash~1..hash`.
        return self._run(
            ["show", "--format=", "--patch", "--relative", "--no-color", "--no-ext-diff", commit_hash],
            f"show {commit_hash[:12]}",
        )

    def staged_diff(self) -> str:
        return self._run(["diff", "--cached", "--relative", "--no-color", "--no-ext-diff"], "diff --cached")

    def files_changed_since(self, since: str) -> list[str]:
        """Paths touched by commits after ``since`` (any git date expression)."""
        raw = self._run(
            ["log", f"--since={since}", "--name-only", "--relative", "--format="], "log --name-only"
        )
        return list(dict.fromkeys(line.strip() for line in raw.splitlines() if line.strip()))

    def ignored_paths(self, paths: list[str]) -> set[str]:
        """Subset of ``paths`` excluded by .gitignore rules."""
        if not paths:
            return set()
        try:
            result = subprocess.run(
                ["git", "-C", self.repo_path, "check-ignore", "--stdin"],
                capture_output=True,
                text=True,
                input="\n".join(paths),
                timeout=self.timeout,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            raise SourceControlError("check-ignore", str(e), self.repo_path)
        # Exit status 1 means "nothing ignored".
        if result.returncode not in (0, 1):
            raise SourceControlError("check-ignore", result.stderr.strip(), self.repo_path)
        return {line.strip() for line in result.stdout.splitlines() if line.strip()}

    _HEADER_RE = re.compile(r"^[0-9a-f]{40}\x1f")

    def _parse_log(self, raw: str) -> list[CommitInfo]:
        commits = []
        for line in raw.splitlines():
            if not self._HEADER_RE.match(line):
                continue
            parts = line.split(_FIELD_SEP, 3)
            if len(parts) < 4:
                logger.debug("Skipping malformed log line: %r", line)
                continue
            commits.append(
                CommitInfo(hash=parts[0], date=parts[1], message=parts[2], author=parts[3])
            )
        return commits
