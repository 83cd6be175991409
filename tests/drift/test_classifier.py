"""Tests for drift classification over diffs and commits."""

from io import StringIO

from rich.console import Console

from codeplug.config import CodePlugSettings, DriftConfig
from codeplug.drift import DriftClassifier, render_drift_report
from codeplug.models import CommitInfo

from conftest import FakeGit, file_diff, make_convention

CAMEL = make_convention("naming", "Utility files use camelCase")


def classifier(git=None, **drift):
    settings = CodePlugSettings(drift=DriftConfig(**drift)) if drift else None
    return DriftClassifier(settings=settings, git=git or FakeGit())


class TestClassifyDiff:
    def test_empty_diff_yields_nothing(self):
        assert classifier().classify_diff("", [CAMEL]) == []

    def test_no_confirmed_conventions_yields_nothing(self):
        diff = file_diff("src/a.ts", ["const user_name = 1;"])
        unconfirmed = make_convention("naming", "Utility files use camelCase", confirmed=False)
        assert classifier().classify_diff(diff, [unconfirmed]) == []

    def test_snake_case_identifiers_against_camel_case(self):
        diff = file_diff(
            "src/user.ts",
            ["const user_name = getName();", "function get_user_data() {}"],
        )
        results = classifier().classify_diff(diff, [CAMEL])
        assert len(results) >= 1
        assert results[0].classification in ("drifting", "ambiguous")
        assert results[0].confidence > 0

    def test_conforming_camel_case_yields_nothing(self):
        diff = file_diff("src/user.ts", ["const userName = getName();", "function getUserData() {}"])
        assert classifier().classify_diff(diff, [CAMEL]) == []

    def test_non_source_files_ignored(self):
        diff = file_diff("README.md", ["const user_name = 1"]) + file_diff("package.json", ["const user_name = 1"])
        assert classifier().classify_diff(diff, [CAMEL]) == []
        mixed = diff + file_diff("src/a.ts", ["const user_name = 1"])
        assert [r.file for r in classifier().classify_diff(mixed, [CAMEL])] == ["src/a.ts"]

    def test_scenario_user_name_literal(self):
        diff = file_diff("src/config.ts", ['const user_name = "alice";'])
        results = classifier().classify_diff(diff, [CAMEL])
        assert any(r.file == "src/config.ts" and r.dimension == "naming" for r in results)

    def test_pascal_case_rule_flags_lowercase_class(self):
        pascal = make_convention("naming", "Class/service files use PascalCase")
        diff = file_diff("src/UserProfile.ts", ["class userProfile {}"])
        results = classifier().classify_diff(diff, [pascal])
        assert results
        assert results[0].classification != "following"

    def test_named_export_rule_flags_default_export(self):
        structure = make_convention("structure", "Prefer named export over default export")
        diff = file_diff("src/main.ts", ["export default function main() {}"])
        results = classifier().classify_diff(diff, [structure])
        assert len(results) == 1
        assert results[0].classification == "drifting"
        assert results[0].confidence == 0.8

    def test_type_import_rule(self):
        imports = make_convention("imports", "Use import type for type-only imports")
        diff = file_diff("src/a.ts", ["import { SomeType } from './types';", "const x: type = {};"])
        results = classifier().classify_diff(diff, [imports])
        assert len(results) == 1
        assert results[0].dimension == "imports"

    def test_one_result_per_convention(self):
        structure = make_convention("structure", "Prefer named export over default export")
        diff = file_diff(
            "src/main.ts",
            ["export default function main() {}", "const user_name = 1;"],
        )
        results = classifier().classify_diff(diff, [CAMEL, structure])
        assert len(results) == 2
        assert {r.dimension for r in results} == {"naming", "structure"}

    def test_dimension_without_matcher_is_skipped(self):
        state = make_convention("state", "Global state lives in stores")
        diff = file_diff("src/a.ts", ["const user_name = 1;"])
        assert classifier().classify_diff(diff, [state]) == []

    def test_low_confidence_needs_review(self):
        errors = make_convention("error-handling", "Try/catch error handling")
        diff = file_diff("src/api.ts", ["async function load() {", "  await fetch(url);", "}"])
        [result] = classifier().classify_diff(diff, [errors])
        assert result.classification == "ambiguous"
        assert result.needs_review

    def test_classification_is_not_demoted_by_gate(self):
        diff = file_diff("src/a.ts", ["const user_name = 1;", "let item_count = 2;", "const okName = 3;"])
        [result] = classifier().classify_diff(diff, [CAMEL])
        assert result.confidence == 0.67
        assert result.classification == "drifting"
        assert result.needs_review

    def test_binary_files_are_ignored(self):
        diff = (
            "diff --git a/logo.png b/logo.png\n"
            "index 1111111..2222222 100644\n"
            "Binary files a/logo.png and b/logo.png differ\n"
        )
        assert classifier().classify_diff(diff, [CAMEL]) == []


def commit(sha: str, message: str = "change") -> CommitInfo:
    return CommitInfo(hash=sha * 40, date="2026-01-01T00:00:00+00:00", message=message, author="dev")


class TestCommitScanning:
    def test_each_commit_classified(self):
        git = FakeGit(
            commits=[
                (commit("a"), file_diff("src/a.ts", ["const user_name = 1;"])),
                (commit("b"), file_diff("src/b.ts", ["const userName = 1;"])),
            ]
        )
        scan = classifier(git).check_recent_commits([CAMEL])
        assert scan.error is None
        assert len(scan.commits) == 2
        assert len(scan.commits[0].results) == 1
        assert scan.commits[1].results == []

    def test_count_defaults_to_config(self):
        git = FakeGit(commits=[(commit(c), "") for c in "abcdef"])
        scan = classifier(git, commit_count=3).check_recent_commits([CAMEL])
        assert len(scan.commits) == 3

    def test_history_failure_aborts_cleanly(self):
        scan = classifier(FakeGit(fail=True)).check_recent_commits([CAMEL])
        assert scan.error is not None
        assert scan.commits == []
        assert scan.results == []

    def test_staged_changes(self):
        git = FakeGit(staged=file_diff("src/a.ts", ["const user_name = 1;"]))
        scan = classifier(git).check_staged([CAMEL])
        assert len(scan.results) == 1

    def test_report_lists_drifting_before_ambiguous(self):
        errors = make_convention("error-handling", "Try/catch error handling")
        git = FakeGit(
            commits=[
                (commit("a", "add loader"), file_diff("src/api.ts", ["async function load() { await x(); }"])),
                (commit("b", "rename"), file_diff("src/b.ts", ["const user_name = 1;"])),
            ]
        )
        scan = classifier(git).check_recent_commits([CAMEL, errors])
        out = StringIO()
        render_drift_report(scan, Console(file=out, width=120, color_system=None))
        text = out.getvalue()
        assert text.index("DRIFTING") < text.index("AMBIGUOUS")
        assert "1 drifting, 1 ambiguous" in text
