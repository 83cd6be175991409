"""Pydantic schemas for everything persisted under ``.codeplug/``.

JSON files use camelCase keys; the models accept either spelling on input
and always dump by alias.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel
from pydantic.alias_generators import to_camel

from ..models import Dimension, RuleScope, Severity


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConventionModel(_CamelModel):
    id: str
    dimension: Dimension
    rule: str
    confidence: float = Field(ge=0, le=100)
    confirmed: bool
    examples: list[str]
    severity: Severity


class ConventionsFileModel(_CamelModel):
    version: str
    created: str
    updated: str
    conventions: list[ConventionModel]


class ViolationModel(_CamelModel):
    id: str
    convention_id: str
    severity: Severity
    file: str
    line: Optional[int] = None
    message: str
    expected: str
    found: str
    auto_fixable: bool


class ViolationsFileModel(RootModel[list[ViolationModel]]):
    """``violations.json`` is a bare array."""


class CustomRuleModel(_CamelModel):
    id: str
    pattern: str
    scope: RuleScope
    message: str
    severity: Optional[Severity] = None


class RulesFileModel(_CamelModel):
    version: Optional[str] = None
    rules: list[CustomRuleModel]


class ScoreRecordModel(_CamelModel):
    id: str
    project_hash: str
    score: int = Field(ge=0, le=100)
    breakdown: dict[Severity, int]
    created_at: str


class DecisionModel(_CamelModel):
    id: str
    accept: bool
    severity: Optional[Severity] = None


class DecisionsFileModel(_CamelModel):
    """Confirmation decisions for convention candidates, keyed by candidate id."""

    decisions: list[DecisionModel]
