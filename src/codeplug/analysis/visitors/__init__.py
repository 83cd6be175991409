"""Visitor pipeline: stateless per-file pattern extractors.

Every visitor structurally satisfies :class:`Visitor`; the pipeline is the
flat list returned by :func:`default_visitors`.
"""

from typing import Optional

from ...config import CodePlugSettings, default_settings
from .base import Visitor, is_test_file, run_visitors
from .component import ComponentVisitor
from .error_handling import ErrorHandlingVisitor
from .imports import ImportVisitor
from .naming import NamingVisitor
from .schema import SchemaVisitor
from .structure import StructureVisitor, placement_findings
from .testing import TestVisitor


def default_visitors(settings: Optional[CodePlugSettings] = None) -> list[Visitor]:
    settings = settings or default_settings
    return [
        NamingVisitor(settings.naming),
        ComponentVisitor(settings.naming),
        TestVisitor(),
        ErrorHandlingVisitor(),
        ImportVisitor(),
        SchemaVisitor(),
        StructureVisitor(settings.structure),
    ]


__all__ = [
    "Visitor",
    "run_visitors",
    "default_visitors",
    "is_test_file",
    "placement_findings",
    "NamingVisitor",
    "ComponentVisitor",
    "TestVisitor",
    "ErrorHandlingVisitor",
    "ImportVisitor",
    "SchemaVisitor",
    "StructureVisitor",
]
