"""Batch analyzer: discover, parse and aggregate a whole project.

Files are parsed in fixed-size batches. Within a batch, reads and parses run
concurrently in worker threads; the batch is awaited as a unit and handed to
the aggregator before the next batch starts, so at most ``batch_size`` trees
are resident at once and the aggregator is only ever fed by one batch.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from ..config import CodePlugSettings, default_settings
from ..exceptions import FileAccessError, ParsingError
from ..logging_config import get_logger
from ..models import AnalysisResult, FolderNode, ParsedFile
from ..temporal.git import GitIntegration
from .discovery import discover_source_files
from .treesitter_parser import TreeSitterParser, grammar_for

if TYPE_CHECKING:
    from ..analysis.aggregator import PatternAggregator

logger = get_logger(__name__)


def read_and_parse(root: Path, rel_path: str, parser: Optional[TreeSitterParser] = None) -> ParsedFile:
    """Read one file and parse it.

    Raises:
        FileAccessError: The file cannot be read or decoded
        ParsingError: No grammar handles the file, or the parser failed
    """
    parser = parser or TreeSitterParser()
    full = root / rel_path
    try:
        raw = full.read_bytes()
    except OSError as e:
        raise FileAccessError(full, str(e))
    try:
        source = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FileAccessError(full, f"not valid UTF-8: {e}")

    try:
        tree = parser.parse(raw, rel_path)
    except (ValueError, RuntimeError) as e:
        raise ParsingError(full, grammar_for(rel_path) or "unknown", str(e))
    if tree is None:
        raise ParsingError(full, "unknown", "unsupported file extension")
    return ParsedFile(path=rel_path, source=source, tree=tree, source_bytes=raw)


def build_folder_tree(file_paths: Iterable[str]) -> FolderNode:
    """Directory tree of the given relative paths; every node counts files beneath it."""
    root = FolderNode(name=".", path=".")
    for rel in file_paths:
        parts = rel.split("/")
        current = root
        current.file_count += 1
        for i, dir_name in enumerate(parts[:-1]):
            child = current.child(dir_name)
            if child is None:
                child = FolderNode(name=dir_name, path="/".join(parts[: i + 1]))
                current.children.append(child)
            child.file_count += 1
            current = child
    return root


class AstAnalyzer:
    """Analyzes a project directory into detected patterns.

    Usage::

        result = AstAnalyzer(Path("."), settings).analyze()
        for pattern in result.patterns:
            print(pattern.pattern, pattern.confidence)
    """

    def __init__(
        self,
        project_root: Path,
        settings: Optional[CodePlugSettings] = None,
        git: Optional[GitIntegration] = None,
    ):
        self.project_root = Path(project_root)
        self.settings = settings or default_settings
        self.git = git
        self.parser = TreeSitterParser()

    def discover(self) -> list[str]:
        return discover_source_files(self.project_root, self.settings.analysis, self.git)

    def parse_file(self, rel_path: str) -> Optional[ParsedFile]:
        """Parse one file, or None if it cannot be read or parsed."""
        try:
            return read_and_parse(self.project_root, rel_path, self.parser)
        except (FileAccessError, ParsingError) as e:
            logger.debug("Skipping %s: %s", rel_path, e)
            return None

    async def iter_batches(self, file_paths: list[str]) -> AsyncIterator[list[ParsedFile]]:
        """Yield parsed batches of ``batch_size`` files; unparseable files are omitted."""
        size = self.settings.analysis.batch_size
        for start in range(0, len(file_paths), size):
            batch = file_paths[start : start + size]
            parsed = await asyncio.gather(
                *(asyncio.to_thread(self.parse_file, rel) for rel in batch)
            )
            yield [p for p in parsed if p is not None]

    async def analyze_async(self, aggregator: Optional[PatternAggregator] = None) -> AnalysisResult:
        from ..analysis.aggregator import PatternAggregator

        start = time.perf_counter()
        files = self.discover()
        aggregator = aggregator or PatternAggregator(self.settings)

        async for batch in self.iter_batches(files):
            aggregator.ingest(batch)

        folder_structure = build_folder_tree(files)
        aggregator.ingest_structure(folder_structure, files)

        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info("Analyzed %d files in %d ms", len(files), duration_ms)
        return AnalysisResult(
            file_count=len(files),
            duration_ms=duration_ms,
            patterns=aggregator.get_patterns(),
            folder_structure=folder_structure,
            file_paths=files,
        )

    def analyze(self) -> AnalysisResult:
        """Synchronous entry point around :meth:`analyze_async`."""
        return asyncio.run(self.analyze_async())
