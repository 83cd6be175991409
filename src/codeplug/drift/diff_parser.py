"""Unified diff parsing into per-file hunks and per-file stats."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import DiffHunk

_FILE_HEADER = re.compile(r"^diff --git a/(.+?) b/(.+)$", re.MULTILINE)


@dataclass(frozen=True)
class DiffFileStat:
    file: str
    additions: int
    deletions: int
    binary: bool = False


def _sections(raw: str) -> list[tuple[str, list[str]]]:
    """(file, lines) for each ``diff --git`` section, file taken from the ``b/`` side."""
    headers = list(_FILE_HEADER.finditer(raw))
    sections = []
    for i, header in enumerate(headers):
        end = headers[i + 1].start() if i + 1 < len(headers) else len(raw)
        body = raw[header.end() : end]
        sections.append((header.group(2), body.splitlines()))
    return sections


def parse_diff(raw: str) -> list[DiffHunk]:
    """Split a unified diff into one :class:`DiffHunk` per changed file.

    Lines before the first ``@@`` marker are headers; after it, ``+`` and
    ``-`` prefixes separate added and removed lines.
    """
    hunks = []
    for file, lines in _sections(raw):
        hunk = DiffHunk(file=file)
        in_body = False
        for line in lines:
            if line.startswith("@@"):
                in_body = True
                continue
            if not in_body:
                if line.startswith("Binary files ") or line == "GIT binary patch":
                    hunk.binary = True
                continue
            if line.startswith("+"):
                hunk.added.append(line[1:])
            elif line.startswith("-"):
                hunk.removed.append(line[1:])
        hunks.append(hunk)
    return hunks


def diff_stats(raw: str) -> list[DiffFileStat]:
    return [
        DiffFileStat(h.file, len(h.added), len(h.removed), h.binary) for h in parse_diff(raw)
    ]
