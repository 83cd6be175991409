"""Configuration loading and management for CodePlug.

Configuration sources are merged in priority order:
    1. Defaults (defined in the section dataclasses below)
    2. Global config (~/.codeplug.toml)
    3. Project config (<project>/.codeplug/config.toml)
    4. Explicit config file (if given)
    5. Environment variables (CODEPLUG_<SECTION>_<FIELD>)
    6. Keyword overrides (``{"scoring": {"threshold": 80}}``)

Example:
    >>> settings = load_settings(Path("."), scoring={"threshold": 80})
    >>> settings.scoring.threshold
    80
"""

from __future__ import annotations

import os
import re
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError
from .models import DIMENSIONS, SEVERITIES

ModelTier = Literal["default", "lite"]

CODEPLUG_DIR = ".codeplug"
CONFIG_FILE = "config.toml"
CONVENTIONS_FILE = "conventions.json"
VIOLATIONS_FILE = "violations.json"
RULES_FILE = "rules.json"
SCORE_DB_FILE = "scores.db"

SEVERITY_NAMES = SEVERITIES


@dataclass(frozen=True)
class DirectoryPlacementRule:
    """Files whose stem matches ``file_pattern`` belong under ``dir``."""

    file_pattern: str
    dir: str
    pattern_name: str

    def __post_init__(self) -> None:
        try:
            re.compile(self.file_pattern)
        except re.error as e:
            raise InvalidConfigError("structure.directory_placement", self.file_pattern, str(e))


@dataclass(frozen=True)
class ArchitectureConfig:
    """Top-level directory sets used to classify project architecture."""

    feature_based: list[str] = field(default_factory=lambda: ["features", "modules", "domains"])
    mvc: list[str] = field(default_factory=lambda: ["models", "views", "controllers"])
    layered: list[str] = field(
        default_factory=lambda: ["domain", "application", "infrastructure", "presentation"]
    )


@dataclass(frozen=True)
class AnalysisConfig:
    """File discovery and batching.

    Attributes:
        include: Glob patterns (relative to the project root) of files to analyze
        ignore: Glob patterns excluded from analysis
        batch_size: Files parsed concurrently before handing off to the aggregator
        respect_gitignore: Drop files that git reports as ignored
    """

    include: list[str] = field(
        default_factory=lambda: [
            "**/*.ts",
            "**/*.tsx",
            "**/*.js",
            "**/*.jsx",
            "**/*.mjs",
            "**/*.cjs",
        ]
    )
    ignore: list[str] = field(
        default_factory=lambda: [
            "**/node_modules/**",
            "**/dist/**",
            "**/build/**",
            "**/coverage/**",
            "**/.git/**",
            "**/.codeplug/**",
            "**/*.d.ts",
            "**/*.min.js",
        ]
    )
    batch_size: int = 50
    respect_gitignore: bool = True

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise InvalidConfigError("analysis.batch_size", self.batch_size, "must be at least 1")


@dataclass(frozen=True)
class StructureConfig:
    """Directory-placement rules and architecture directory sets."""

    directory_placement: list[DirectoryPlacementRule] = field(
        default_factory=lambda: [
            DirectoryPlacementRule(r"^use[A-Z]", "hooks", "Hooks live in hooks/ directory"),
            DirectoryPlacementRule(r"Service$", "services", "Services live in services/ directory"),
            DirectoryPlacementRule(
                r"(Helper|Util|Utils)$", "utils", "Utilities live in utils/ directory"
            ),
            DirectoryPlacementRule(r"Store$", "stores", "Stores live in stores/ directory"),
        ]
    )
    architecture: ArchitectureConfig = field(default_factory=ArchitectureConfig)


@dataclass(frozen=True)
class NamingConfig:
    """Naming heuristics.

    Attributes:
        component_extensions: Extensions whose files are treated as UI components
    """

    component_extensions: list[str] = field(default_factory=lambda: [".tsx", ".jsx"])


@dataclass(frozen=True)
class ConventionConfig:
    """Convention promotion and semantic-coherence settings."""

    confidence_threshold: int = 60
    min_pattern_confidence: int = 50
    severity_map: dict[str, str] = field(
        default_factory=lambda: {
            "naming": "medium",
            "structure": "high",
            "component": "medium",
            "testing": "low",
            "error-handling": "high",
            "imports": "low",
            "git": "low",
            "state": "medium",
            "api": "medium",
        }
    )
    enable_semantic_coherence: bool = False
    semantic_fit_threshold: float = 0.6

    def __post_init__(self) -> None:
        if not 0 <= self.confidence_threshold <= 100:
            raise InvalidConfigError(
                "convention.confidence_threshold", self.confidence_threshold, "must be 0-100"
            )
        if not 0 <= self.min_pattern_confidence <= 100:
            raise InvalidConfigError(
                "convention.min_pattern_confidence", self.min_pattern_confidence, "must be 0-100"
            )
        if not 0.0 <= self.semantic_fit_threshold <= 1.0:
            raise InvalidConfigError(
                "convention.semantic_fit_threshold", self.semantic_fit_threshold, "must be 0.0-1.0"
            )
        for dimension, severity in self.severity_map.items():
            if dimension not in DIMENSIONS:
                raise InvalidConfigError(
                    f"convention.severity_map.{dimension}", severity, "unknown dimension"
                )
            if severity not in SEVERITY_NAMES:
                raise InvalidConfigError(
                    f"convention.severity_map.{dimension}", severity, "unknown severity"
                )


@dataclass(frozen=True)
class ScoringConfig:
    """Compliance scoring weights, pass threshold and trend window."""

    weights: dict[str, int] = field(
        default_factory=lambda: {"critical": 15, "high": 8, "medium": 3, "low": 1}
    )
    threshold: int = 70
    trend_window: int = 8

    def __post_init__(self) -> None:
        missing = [s for s in SEVERITY_NAMES if s not in self.weights]
        if missing:
            raise InvalidConfigError("scoring.weights", self.weights, f"missing {missing}")
        if any(w < 0 for w in self.weights.values()):
            raise InvalidConfigError("scoring.weights", self.weights, "weights must be >= 0")
        if not 0 <= self.threshold <= 100:
            raise InvalidConfigError("scoring.threshold", self.threshold, "must be 0-100")
        if self.trend_window < 2:
            raise InvalidConfigError("scoring.trend_window", self.trend_window, "must be at least 2")


@dataclass(frozen=True)
class DriftConfig:
    """Commit scanning depth and review gate."""

    commit_count: int = 5
    confidence_threshold: float = 0.7

    def __post_init__(self) -> None:
        if self.commit_count < 1:
            raise InvalidConfigError("drift.commit_count", self.commit_count, "must be at least 1")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise InvalidConfigError(
                "drift.confidence_threshold", self.confidence_threshold, "must be 0.0-1.0"
            )


@dataclass(frozen=True)
class ModelsConfig:
    """Model backend tier and download cache."""

    tier: ModelTier = "default"
    cache_dir: str = str(Path.home() / ".codeplug" / "models")

    def __post_init__(self) -> None:
        if self.tier not in ("default", "lite"):
            raise InvalidConfigError("models.tier", self.tier, "expected 'default' or 'lite'")


@dataclass(frozen=True)
class CodePlugSettings:
    """All configuration sections."""

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    structure: StructureConfig = field(default_factory=StructureConfig)
    naming: NamingConfig = field(default_factory=NamingConfig)
    convention: ConventionConfig = field(default_factory=ConventionConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    drift: DriftConfig = field(default_factory=DriftConfig)
    models: ModelsConfig = field(default_factory=ModelsConfig)


default_settings = CodePlugSettings()

_SECTION_TYPES: dict[str, type] = {
    "analysis": AnalysisConfig,
    "structure": StructureConfig,
    "naming": NamingConfig,
    "convention": ConventionConfig,
    "scoring": ScoringConfig,
    "drift": DriftConfig,
    "models": ModelsConfig,
}


def load_settings(
    project_root: Optional[Path] = None,
    config_file: Optional[Path] = None,
    **overrides: dict[str, Any],
) -> CodePlugSettings:
    """Load settings with auto-discovery and merging.

    Args:
        project_root: Project whose ``.codeplug/config.toml`` is consulted
        config_file: Optional explicit TOML file
        **overrides: Per-section dicts, e.g. ``drift={"commit_count": 10}``

    Returns:
        Validated CodePlugSettings instance

    Raises:
        InvalidConfigError: If a config file is unreadable or holds invalid values
    """
    merged: dict[str, dict[str, Any]] = {}

    global_config = Path.home() / ".codeplug.toml"
    if global_config.exists():
        _merge(merged, _load_toml_file(global_config))

    if project_root is not None:
        project_config = Path(project_root) / CODEPLUG_DIR / CONFIG_FILE
        if project_config.exists():
            _merge(merged, _load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise InvalidConfigError("config_file", config_file, "file not found")
        _merge(merged, _load_toml_file(config_file))

    _merge(merged, _load_env_vars())
    _merge(merged, overrides)

    sections: dict[str, Any] = {}
    for name, values in merged.items():
        section_type = _SECTION_TYPES.get(name)
        if section_type is None:
            raise InvalidConfigError(name, values, "unknown config section")
        if not isinstance(values, dict):
            raise InvalidConfigError(name, values, "section must be a table")
        sections[name] = _build_section(name, section_type, values)

    return replace(default_settings, **sections)


def _merge(target: dict[str, dict[str, Any]], source: dict[str, Any]) -> None:
    for section, values in source.items():
        if isinstance(values, dict):
            target.setdefault(section, {}).update(values)
        else:
            target[section] = values


def _build_section(name: str, section_type: type, values: dict[str, Any]) -> Any:
    values = dict(values)
    if section_type is StructureConfig:
        rules = values.get("directory_placement")
        if rules is not None:
            values["directory_placement"] = [
                r if isinstance(r, DirectoryPlacementRule) else DirectoryPlacementRule(**r)
                for r in rules
            ]
        arch = values.get("architecture")
        if isinstance(arch, dict):
            values["architecture"] = ArchitectureConfig(**arch)
    try:
        return section_type(**values)
    except TypeError as e:
        raise InvalidConfigError(name, values, str(e))


def _load_env_vars() -> dict[str, dict[str, Any]]:
    """Load scalar settings from CODEPLUG_<SECTION>_<FIELD> environment variables.

    Examples:
        CODEPLUG_SCORING_THRESHOLD=80
        CODEPLUG_DRIFT_COMMIT_COUNT=10
        CODEPLUG_CONVENTION_ENABLE_SEMANTIC_COHERENCE=true
        CODEPLUG_MODELS_TIER=lite
    """
    result: dict[str, dict[str, Any]] = {}

    for section, section_type in _SECTION_TYPES.items():
        type_hints = get_type_hints(section_type)
        for f in fields(section_type):
            env_key = f"CODEPLUG_{section.upper()}_{f.name.upper()}"
            env_value = os.environ.get(env_key)
            if env_value is None:
                continue
            try:
                parsed = _parse_env_value(env_value, type_hints.get(f.name))
            except ValueError as e:
                raise InvalidConfigError(env_key, env_value, str(e))
            if parsed is not None:
                result.setdefault(section, {})[f.name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to a scalar field type.

    Returns None for field types that cannot be expressed in one variable
    (lists, dicts, nested sections).
    """
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise InvalidConfigError("config_file", path, str(e))
