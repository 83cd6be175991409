"""Test file placement and naming."""

from __future__ import annotations

import re

from ...models import Finding, ParsedFile
from .base import is_test_file

COLOCATED = "Co-located __tests__/ directories"
SEPARATE_DIR = "Separate tests/ directory"
TEST_SUFFIX = "Test files use .test.{ext} naming"
SPEC_SUFFIX = "Test files use .spec.{ext} naming"

_TEST_NAME = re.compile(r"\.test\.[cm]?[jt]sx?$")
_SPEC_NAME = re.compile(r"\.spec\.[cm]?[jt]sx?$")


class TestVisitor:
    __test__ = False  # not a pytest class

    def visit(self, file: ParsedFile) -> list[Finding]:
        path = file.path
        if not is_test_file(path):
            return []

        findings = []
        if "__tests__/" in path:
            findings.append(self._sample(COLOCATED, path))
        elif path.startswith(("tests/", "test/")):
            findings.append(self._sample(SEPARATE_DIR, path))

        if _TEST_NAME.search(path):
            findings.append(self._sample(TEST_SUFFIX, path))
        elif _SPEC_NAME.search(path):
            findings.append(self._sample(SPEC_SUFFIX, path))
        return findings

    @staticmethod
    def _sample(pattern: str, path: str) -> Finding:
        return Finding(dimension="testing", pattern=pattern, count=1, total=1, example=path)
