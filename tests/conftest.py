"""Shared fixtures and builders for CodePlug tests."""

from pathlib import Path
from typing import Optional

import pytest

from codeplug.analysis.detector import convention_id
from codeplug.exceptions import SourceControlError
from codeplug.models import CommitInfo, Convention, ParsedFile, Violation
from codeplug.scanning import TreeSitterParser


def parse_source(path: str, code: str) -> ParsedFile:
    """Parse ``code`` as if it lived at ``path``."""
    raw = code.encode("utf-8")
    tree = TreeSitterParser().parse(raw, path)
    assert tree is not None, f"unsupported extension: {path}"
    return ParsedFile(path=path, source=code, tree=tree, source_bytes=raw)


def write_files(root: Path, files: dict[str, str]) -> None:
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


def make_convention(
    dimension: str,
    rule: str,
    confirmed: bool = True,
    severity: str = "medium",
    examples: Optional[list[str]] = None,
) -> Convention:
    return Convention(
        id=convention_id(dimension, rule),
        dimension=dimension,
        rule=rule,
        confidence=90,
        confirmed=confirmed,
        examples=examples or [],
        severity=severity,
    )


def make_violation(severity: str = "medium", **overrides) -> Violation:
    values = dict(
        id=f"v-{severity}",
        convention_id="naming-test",
        severity=severity,
        file="src/a.ts",
        message="Violates: test",
        expected="x",
        found="y",
        auto_fixable=False,
    )
    values.update(overrides)
    return Violation(**values)


class FakeGit:
    """In-memory stand-in for GitIntegration."""

    def __init__(
        self,
        commits: Optional[list[tuple[CommitInfo, str]]] = None,
        staged: str = "",
        changed: Optional[list[str]] = None,
        fail: bool = False,
    ):
        self.commits = commits or []
        self.staged = staged
        self.changed = changed or []
        self.fail = fail

    def _check(self, operation: str) -> None:
        if self.fail:
            raise SourceControlError(operation, "not a git repository")

    def is_repo(self) -> bool:
        return not self.fail

    def ignored_paths(self, paths: list[str]) -> set[str]:
        return set()

    def recent_commits(self, count: int = 10) -> list[CommitInfo]:
        self._check("log")
        return [c for c, _ in self.commits[:count]]

    def diff_for_commit(self, commit_hash: str) -> str:
        self._check("show")
        return next(diff for c, diff in self.commits if c.hash == commit_hash)

    def staged_diff(self) -> str:
        self._check("diff --cached")
        return self.staged

    def files_changed_since(self, since: str) -> list[str]:
        self._check("log --since")
        return list(self.changed)


def file_diff(path: str, added: list[str], removed: Optional[list[str]] = None) -> str:
    """A minimal unified diff touching one file."""
    removed = removed or []
    lines = [
        f"diff --git a/{path} b/{path}",
        "index 1111111..2222222 100644",
        f"--- a/{path}",
        f"+++ b/{path}",
        f"@@ -1,{len(removed)} +1,{len(added)} @@",
    ]
    lines += [f"-{line}" for line in removed]
    lines += [f"+{line}" for line in added]
    return "\n".join(lines) + "\n"


@pytest.fixture
def fake_git():
    return FakeGit()
