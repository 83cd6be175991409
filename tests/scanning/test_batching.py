"""Tests for batched parsing and hand-off to the aggregator."""

import asyncio

from codeplug.analysis.aggregator import PatternAggregator
from codeplug.config import AnalysisConfig, CodePlugSettings
from codeplug.scanning import AstAnalyzer

from conftest import FakeGit, write_files

FILES = [f"src/mod{i}.ts" for i in range(5)]


class RecordingAggregator(PatternAggregator):
    def __init__(self, settings, events):
        super().__init__(settings)
        self.events = events
        self.batches = []

    def ingest(self, batch):
        paths = [f.path for f in batch]
        self.batches.append(paths)
        self.events.append(("ingest", paths))
        super().ingest(batch)


def analyzer(tmp_path, batch_size=2):
    write_files(tmp_path, {path: f"export const value{i} = {i};\n" for i, path in enumerate(FILES)})
    settings = CodePlugSettings(analysis=AnalysisConfig(batch_size=batch_size))
    return AstAnalyzer(tmp_path, settings, git=FakeGit())


class TestBatching:
    def test_batch_sizes(self, tmp_path):
        a = analyzer(tmp_path)

        async def collect():
            return [batch async for batch in a.iter_batches(a.discover())]

        batches = asyncio.run(collect())
        assert [len(b) for b in batches] == [2, 2, 1]
        assert [f.path for b in batches for f in b] == FILES

    def test_each_batch_ingested_before_next_parse(self, tmp_path):
        a = analyzer(tmp_path)
        events = []
        parse = a.parse_file

        def recording_parse(rel):
            events.append(("parse", rel))
            return parse(rel)

        a.parse_file = recording_parse
        aggregator = RecordingAggregator(a.settings, events)
        result = asyncio.run(a.analyze_async(aggregator))

        assert aggregator.batches == [FILES[0:2], FILES[2:4], FILES[4:5]]
        kinds = [kind for kind, _ in events]
        assert kinds == ["parse", "parse", "ingest", "parse", "parse", "ingest", "parse", "ingest"]
        assert result.file_count == 5
