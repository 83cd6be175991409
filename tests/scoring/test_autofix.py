"""Tests for the file-rename auto-fixer."""

from codeplug.persistence import ViolationStore
from codeplug.scoring import AutoFixer
from codeplug.scoring.autofix import rename_action

from conftest import make_violation, write_files


def rename(vid, file, expected, fixable=True):
    name = file.rsplit("/", 1)[-1]
    return make_violation(id=vid, file=file, expected=expected, found=name, auto_fixable=fixable)


class TestRenameAction:
    def test_same_directory_rename(self):
        action = rename_action(rename("v1", "src/auth_helper.ts", "authHelper.ts"))
        assert (action.source, action.target) == ("src/auth_helper.ts", "src/authHelper.ts")

    def test_not_a_rename(self):
        assert rename_action(make_violation(auto_fixable=True, expected="x", found="1/3 conforming")) is None
        assert rename_action(rename("v1", "src/a_b.ts", "aB.ts", fixable=False)) is None

    def test_extension_must_match(self):
        assert rename_action(rename("v1", "src/a_b.ts", "aB.js")) is None


class TestAutoFixer:
    def test_fix_all(self, tmp_path):
        write_files(tmp_path, {"src/auth_helper.ts": "x", "src/date_util.ts": "y"})
        manual = make_violation(id="m", auto_fixable=False)
        store = ViolationStore(tmp_path)
        store.save(
            [
                rename("a", "src/auth_helper.ts", "authHelper.ts"),
                rename("b", "src/date_util.ts", "dateUtil.ts"),
                manual,
            ]
        )
        report = AutoFixer(tmp_path).fix_all()
        assert {o.violation_id for o in report.fixed} == {"a", "b"}
        assert (tmp_path / "src" / "authHelper.ts").read_text() == "x"
        assert not (tmp_path / "src" / "auth_helper.ts").exists()
        assert [v.id for v in store.load()] == ["m"]

    def test_refuses_to_overwrite(self, tmp_path):
        write_files(tmp_path, {"src/auth_helper.ts": "old", "src/authHelper.ts": "existing"})
        store = ViolationStore(tmp_path)
        store.save([rename("a", "src/auth_helper.ts", "authHelper.ts")])
        report = AutoFixer(tmp_path).fix_by_id("a")
        assert report.outcomes[0].status == "skipped"
        assert (tmp_path / "src" / "authHelper.ts").read_text() == "existing"
        assert len(store.load()) == 1

    def test_unknown_id(self, tmp_path):
        report = AutoFixer(tmp_path).fix_by_id("missing")
        assert report.outcomes[0].status == "skipped"

    def test_auto_fixable_non_rename_is_manual(self, tmp_path):
        store = ViolationStore(tmp_path)
        store.save([make_violation(id="x", auto_fixable=True, expected="rule text", found="a.ts")])
        report = AutoFixer(tmp_path).fix_all()
        assert [o.status for o in report.outcomes] == ["manual"]
