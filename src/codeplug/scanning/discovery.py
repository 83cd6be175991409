"""Source file discovery: include/ignore globs plus .gitignore rules."""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path
from typing import Optional

from ..config import AnalysisConfig
from ..exceptions import SourceControlError
from ..logging_config import get_logger
from ..temporal.git import GitIntegration
from .treesitter_parser import SUPPORTED_EXTENSIONS

logger = get_logger(__name__)


def glob_match(rel_path: str, pattern: str) -> bool:
    """Match a project-relative posix path against a ``**``-style glob.

    A leading ``**/`` also matches at the project root, so ``**/*.ts``
    matches ``index.ts`` as well as ``src/index.ts``.
    """
    if fnmatchcase(rel_path, pattern):
        return True
    while pattern.startswith("**/"):
        pattern = pattern[3:]
        if fnmatchcase(rel_path, pattern):
            return True
    return False


def matches_any(rel_path: str, patterns: list[str]) -> bool:
    return any(glob_match(rel_path, p) for p in patterns)


def walk_files(root: Path, ignore: list[str]) -> list[str]:
    """All files under ``root`` as sorted relative posix paths.

    Uses an explicit directory stack; ignored directories are pruned before
    descent and symlinked directories are not followed.
    """
    found: list[str] = []
    stack: list[Path] = [root]
    while stack:
        current = stack.pop()
        try:
            entries = sorted(current.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.warning("Cannot list %s: %s", current, e)
            continue
        for entry in entries:
            rel = entry.relative_to(root).as_posix()
            if entry.is_dir():
                if entry.is_symlink() or matches_any(rel + "/", ignore):
                    continue
                stack.append(entry)
            elif entry.is_file() and not matches_any(rel, ignore):
                found.append(rel)
    return sorted(found)


def discover_source_files(
    project_root: Path,
    config: Optional[AnalysisConfig] = None,
    git: Optional[GitIntegration] = None,
) -> list[str]:
    """Resolve the configured include/ignore globs to parseable source files.

    Args:
        project_root: Directory to scan
        config: Include/ignore configuration
        git: Repository handle used to honor .gitignore (created on demand)

    Returns:
        Sorted project-relative posix paths with a supported extension
    """
    config = config or AnalysisConfig()
    root = Path(project_root)

    files = [
        rel
        for rel in walk_files(root, config.ignore)
        if matches_any(rel, config.include) and Path(rel).suffix.lower() in SUPPORTED_EXTENSIONS
    ]

    if config.respect_gitignore and files:
        git = git or GitIntegration(str(root))
        if git.is_repo():
            try:
                ignored = git.ignored_paths(files)
            except SourceControlError as e:
                logger.warning("Could not apply .gitignore rules: %s", e)
                ignored = set()
            files = [f for f in files if f not in ignored]

    logger.debug("Discovered %d source files under %s", len(files), root)
    return files
