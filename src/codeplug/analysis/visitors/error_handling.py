"""Async error handling: are awaited calls guarded by try/catch?"""

from __future__ import annotations

from typing import Any

from ...models import Finding, ParsedFile
from ...scanning import syntax

TRY_CATCH = "Try/catch error handling"
ASYNC_AWAIT = "Async/await pattern"


def guarded_awaits(fn_node: Any) -> tuple[int, int]:
    """(awaits, awaits inside a ``try`` block) in one function body.

    Nested functions are not entered; ``catch`` and ``finally`` blocks do
    not count as guarded.
    """
    awaits = guarded = 0
    stack = [(child, False) for child in reversed(fn_node.children)]
    while stack:
        node, in_try = stack.pop()
        if node.type in syntax.FUNCTION_TYPES:
            continue
        if node.type == "await_expression":
            awaits += 1
            guarded += int(in_try)
        if node.type == "try_statement":
            body = node.child_by_field_name("body")
            for child in reversed(node.children):
                stack.append((child, in_try or child == body))
            continue
        stack.extend((child, in_try) for child in reversed(node.children))
    return awaits, guarded


class ErrorHandlingVisitor:
    """Counts async functions that await, and how many guard every await."""

    def visit(self, file: ParsedFile) -> list[Finding]:
        async_fns = awaiting = fully_guarded = 0
        for node in syntax.walk(file.root):
            if node.type not in syntax.FUNCTION_TYPES or not syntax.has_token(node, "async"):
                continue
            async_fns += 1
            awaits, guarded = guarded_awaits(node)
            if awaits:
                awaiting += 1
                if guarded == awaits:
                    fully_guarded += 1

        findings = []
        if awaiting:
            findings.append(
                Finding(
                    dimension="error-handling",
                    pattern=TRY_CATCH,
                    count=fully_guarded,
                    total=awaiting,
                    example=file.path,
                )
            )
        if async_fns:
            findings.append(
                Finding(
                    dimension="api",
                    pattern=ASYNC_AWAIT,
                    count=async_fns,
                    total=async_fns,
                    example=file.path,
                )
            )
        return findings
