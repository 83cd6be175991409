"""Visitor protocol and the fault-isolating runner."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Protocol, runtime_checkable

from ...logging_config import get_logger
from ...models import Finding, ParsedFile

logger = get_logger(__name__)

_TEST_MARKERS = (".test.", ".spec.")


@runtime_checkable
class Visitor(Protocol):
    """Turns one parsed file into findings.

    Implementations hold configuration only. ``visit`` must not do I/O or
    keep state between calls, and returns ``[]`` for files it does not
    understand.
    """

    def visit(self, file: ParsedFile) -> list[Finding]: ...


def file_stem(path: str) -> str:
    """File name without its final extension (``Foo.test.ts`` -> ``Foo.test``)."""
    return PurePosixPath(path).stem


def file_ext(path: str) -> str:
    return PurePosixPath(path).suffix.lower()


def is_test_file(path: str) -> bool:
    name = PurePosixPath(path).name
    return any(marker in name for marker in _TEST_MARKERS) or "__tests__/" in path


def run_visitors(file: ParsedFile, visitors: list[Visitor]) -> list[Finding]:
    """Run every visitor on ``file``; a failing visitor loses only its own findings."""
    findings: list[Finding] = []
    for visitor in visitors:
        try:
            findings.extend(visitor.visit(file))
        except Exception as e:  # visitor bugs must not abort the pass
            logger.debug("%s failed on %s: %s", type(visitor).__name__, file.path, e)
    return findings
