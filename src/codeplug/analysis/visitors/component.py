"""React component style: functional, class-based, hook composition."""

from __future__ import annotations

from typing import Optional

from ...config import NamingConfig
from ...models import Finding, ParsedFile
from ...scanning import syntax
from ..casing import HOOK_PREFIX
from .base import file_ext

FUNCTIONAL = "Functional components"
CLASS_BASED = "Class components"
HOOKS = "Hooks composition pattern"


class ComponentVisitor:
    def __init__(self, config: Optional[NamingConfig] = None):
        self.config = config or NamingConfig()

    def visit(self, file: ParsedFile) -> list[Finding]:
        if file_ext(file.path) not in self.config.component_extensions:
            return []

        source = file.source_bytes
        functional = class_based = hooks = False
        for node in syntax.walk(file.root):
            if node.type in syntax.FUNCTION_TYPES and not functional:
                functional = syntax.returns_jsx(node)
            elif node.type in syntax.CLASS_TYPES and not class_based:
                class_based = syntax.is_react_class(node, source)
            elif node.type == "call_expression" and not hooks:
                callee = node.child_by_field_name("function")
                if callee is not None and callee.type == "identifier":
                    hooks = bool(HOOK_PREFIX.match(syntax.text(callee, source)))

        findings = []
        for present, pattern in ((functional, FUNCTIONAL), (class_based, CLASS_BASED), (hooks, HOOKS)):
            if present:
                findings.append(
                    Finding(dimension="component", pattern=pattern, count=1, total=1, example=file.path)
                )
        return findings
