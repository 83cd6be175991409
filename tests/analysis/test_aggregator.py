"""Tests for pattern aggregation and project-level structure patterns."""

from codeplug.analysis.aggregator import (
    FEATURE_BASED,
    MVC,
    SRC_ROOT,
    PatternAccumulator,
    PatternAggregator,
    percent,
)
from codeplug.models import Finding
from codeplug.scanning import AstAnalyzer, build_folder_tree

from conftest import FakeGit, write_files


def finding(count, total, pattern="Utility files use camelCase", example=None):
    return Finding(dimension="naming", pattern=pattern, count=count, total=total, example=example)


class TestPercent:
    def test_rounds_half_up(self):
        assert percent(1, 8) == 13  # 12.5
        assert percent(2, 3) == 67
        assert percent(1, 3) == 33

    def test_empty_total(self):
        assert percent(0, 0) == 0


class TestAccumulation:
    def test_sums_counts(self):
        acc = PatternAccumulator("naming", "p")
        acc.add(finding(1, 1))
        acc.add(finding(0, 1))
        acc.add(finding(2, 2))
        assert (acc.count, acc.total, acc.confidence) == (3, 4, 75)

    def test_examples_capped(self):
        acc = PatternAccumulator("naming", "p")
        for i in range(8):
            acc.add(finding(1, 1, example=f"f{i}.ts"))
        assert len(acc.examples) == 5

    def test_below_minimum_filtered(self):
        agg = PatternAggregator(visitors=[])
        agg.add_finding(finding(1, 3))
        assert agg.get_patterns() == []

    def test_sorted_by_confidence(self):
        agg = PatternAggregator(visitors=[])
        agg.add_finding(finding(3, 4, pattern="a"))
        agg.add_finding(finding(1, 1, pattern="b"))
        assert [p.pattern for p in agg.get_patterns()] == ["b", "a"]


class TestStructure:
    def test_feature_based_and_src_root(self):
        paths = ["features/auth/login.ts", "src/app.ts"]
        agg = PatternAggregator(visitors=[])
        agg.ingest_structure(build_folder_tree(paths), paths)
        patterns = {p.pattern: p for p in agg.get_patterns()}
        assert patterns[FEATURE_BASED].confidence == 100
        assert (patterns[FEATURE_BASED].frequency, patterns[FEATURE_BASED].total) == (1, 1)
        assert SRC_ROOT in patterns

    def test_mvc_needs_two_dirs(self):
        one = ["models/user.ts"]
        agg = PatternAggregator(visitors=[])
        agg.ingest_structure(build_folder_tree(one), one)
        assert MVC not in {p.pattern for p in agg.get_patterns()}

        two = ["models/user.ts", "views/home.ts"]
        agg = PatternAggregator(visitors=[])
        agg.ingest_structure(build_folder_tree(two), two)
        assert MVC in {p.pattern for p in agg.get_patterns()}

    def test_placement_recomputed_over_project(self):
        paths = ["src/hooks/useAuth.ts", "src/hooks/useUser.ts", "src/lib/useTheme.ts"]
        agg = PatternAggregator(visitors=[])
        agg.ingest_structure(build_folder_tree(paths), paths)
        hooks = {p.pattern: p for p in agg.get_patterns()}["Hooks live in hooks/ directory"]
        assert (hooks.frequency, hooks.total, hooks.confidence) == (2, 3, 67)

    def test_placement_needs_directory(self):
        paths = ["src/useAuth.ts"]
        agg = PatternAggregator(visitors=[])
        agg.ingest_structure(build_folder_tree(paths), paths)
        assert "Hooks live in hooks/ directory" not in {p.pattern for p in agg.get_patterns()}


class TestAnalyzer:
    def test_pascal_component_project(self, tmp_path):
        write_files(
            tmp_path,
            {
                "components/UserCard.tsx": "export default function UserCard() { return <div />; }",
                "components/NavBar.tsx": "export default function NavBar() { return <nav />; }",
                "components/Footer.tsx": "export default function Footer() { return <footer />; }",
            },
        )
        result = AstAnalyzer(tmp_path, git=FakeGit()).analyze()
        assert result.file_count == 3
        patterns = {p.pattern: p for p in result.patterns}
        component = patterns["React components use PascalCase file names"]
        assert component.confidence == 100
        assert component.total == 3

    def test_unreadable_file_skipped(self, tmp_path):
        write_files(tmp_path, {"src/ok.ts": "export const a = 1;"})
        (tmp_path / "src" / "bad.ts").write_bytes(b"\xff\xfe\x00bad")
        result = AstAnalyzer(tmp_path, git=FakeGit()).analyze()
        assert result.file_count == 2
        assert "Utility files use camelCase" in {p.pattern for p in result.patterns}
