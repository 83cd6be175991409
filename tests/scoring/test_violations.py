"""Tests for violation detection and audits."""

from codeplug.config import CodePlugSettings, ConventionConfig, ModelsConfig
from codeplug.inference import ModelManager
from codeplug.models import CustomRule
from codeplug.persistence import ViolationStore
from codeplug.scoring import AutoFixer, ViolationDetector

from conftest import FakeGit, make_convention, write_files

UTILITY = make_convention("naming", "Utility files use camelCase")
COMPONENTS = make_convention("naming", "React components use PascalCase file names", severity="high")
CLASSES = make_convention("naming", "Class/service files use PascalCase")


def detector(root, git=None, settings=None, models=None):
    return ViolationDetector(root, settings, git=git or FakeGit(), models=models)


class TestConventionViolations:
    def test_utility_rename(self, tmp_path):
        write_files(tmp_path, {"src/auth_helper.ts": "export function login() {}", "src/format.ts": ""})
        result = detector(tmp_path).detect([UTILITY])
        [v] = result.violations
        assert v.expected == "authHelper.ts"
        assert v.found == "auth_helper.ts"
        assert v.auto_fixable
        assert v.convention_id == UTILITY.id

    def test_component_renamed_after_export(self, tmp_path):
        code = "export default function UserCard() { return <div />; }"
        write_files(tmp_path, {"src/card.tsx": code})
        [v] = detector(tmp_path).detect([COMPONENTS]).violations
        assert (v.expected, v.found) == ("UserCard.tsx", "card.tsx")
        assert v.severity == "high"

    def test_class_mismatch_not_auto_fixable(self, tmp_path):
        write_files(tmp_path, {"src/UserService.ts": "export class AccountService {}"})
        [v] = detector(tmp_path).detect([CLASSES]).violations
        assert (v.expected, v.found) == ("UserService", "AccountService")
        assert not v.auto_fixable

    def test_unconfirmed_conventions_ignored(self, tmp_path):
        write_files(tmp_path, {"src/auth_helper.ts": ""})
        unconfirmed = make_convention("naming", "Utility files use camelCase", confirmed=False)
        assert detector(tmp_path).detect([unconfirmed]).violations == []

    def test_aggregate_finding(self, tmp_path):
        constants = make_convention("naming", "Constants use SCREAMING_SNAKE_CASE")
        write_files(tmp_path, {"src/config.ts": 'const a = 1;\nconst B = 2;\nconst c = "x";\n'})
        [v] = detector(tmp_path).detect([constants]).violations
        assert v.found == "1/3 conforming"
        assert v.expected == constants.rule


class TestCustomRules:
    def test_scopes(self, tmp_path):
        write_files(
            tmp_path,
            {"src/legacy/old.ts": "const a = 1;\nconsole.log(a);\n", "src/new.ts": "export {};"},
        )
        rules = [
            CustomRule(id="no-console", pattern=r"console\.log", scope="content", message="No console"),
            CustomRule(id="no-legacy", pattern=r"/legacy/", scope="path", message="No legacy", severity="high"),
            CustomRule(id="bad", pattern="(", scope="filename", message="invalid regex"),
        ]
        violations = detector(tmp_path).check_custom_rules(["src/legacy/old.ts", "src/new.ts"], rules)
        by_id = {v.convention_id: v for v in violations}
        assert set(by_id) == {"custom:no-console", "custom:no-legacy"}
        assert by_id["custom:no-console"].line == 2
        assert by_id["custom:no-console"].severity == "medium"
        assert by_id["custom:no-legacy"].severity == "high"
        assert by_id["custom:no-legacy"].line is None


class TestAudit:
    def test_persists_violations(self, tmp_path):
        write_files(tmp_path, {"src/auth_helper.ts": ""})
        result = detector(tmp_path).audit([UTILITY])
        assert [v.id for v in ViolationStore(tmp_path).load()] == [v.id for v in result.violations]

    def test_tool_config_files_not_renamed(self, tmp_path):
        write_files(tmp_path, {"vite.config.ts": "export default {};", "src/auth_helper.ts": ""})
        result = detector(tmp_path).audit([UTILITY])
        assert [v.file for v in result.violations] == ["src/auth_helper.ts"]
        AutoFixer(tmp_path).fix_all()
        assert (tmp_path / "vite.config.ts").exists()
        assert (tmp_path / "src" / "authHelper.ts").exists()

    def test_since_limits_targets(self, tmp_path):
        write_files(tmp_path, {"src/auth_helper.ts": "", "src/date_util.ts": ""})
        git = FakeGit(changed=["src/date_util.ts", "README.md"])
        result = detector(tmp_path, git).detect([UTILITY], since="1 week ago")
        assert result.target_files == ["src/date_util.ts"]
        assert [v.file for v in result.violations] == ["src/date_util.ts"]

    def test_since_without_history_aborts(self, tmp_path):
        write_files(tmp_path, {"src/auth_helper.ts": ""})
        result = detector(tmp_path, FakeGit(fail=True)).audit([UTILITY], since="1 week ago")
        assert result.aborted
        assert result.violations == []
        assert not (tmp_path / ".codeplug" / "violations.json").exists()


class FailingBackend:
    def load(self, role, spec, cache_dir):
        raise OSError("model download failed")


class FixedZeroShot:
    def __init__(self, related):
        self.related = related

    def classify(self, text, labels):
        return {"related": self.related, "unrelated": 1 - self.related}

    def close(self):
        pass


class FixedBackend:
    def __init__(self, related):
        self.related = related
        self.loads = 0

    def load(self, role, spec, cache_dir):
        self.loads += 1
        return FixedZeroShot(self.related)


class TestSemanticPass:
    FILES = {f"src/file{i}.ts": f"export function thing{i}() {{}}" for i in range(3)}

    def settings(self, tmp_path):
        return CodePlugSettings(
            convention=ConventionConfig(enable_semantic_coherence=True),
            models=ModelsConfig(cache_dir=str(tmp_path / "models")),
        )

    def test_backend_failure_skips_pass(self, tmp_path):
        write_files(tmp_path, self.FILES)
        settings = self.settings(tmp_path)
        models = ModelManager(settings.models, backend=FailingBackend())
        semantic = make_convention("naming", "Export semantically fits file context")
        result = detector(tmp_path, settings=settings, models=models).detect([UTILITY, semantic])
        assert result.semantic_status == "skipped"
        assert result.semantic_error
        assert result.violations == []

    def test_low_fit_reported(self, tmp_path):
        write_files(tmp_path, self.FILES)
        settings = self.settings(tmp_path)
        backend = FixedBackend(related=0.1)
        models = ModelManager(settings.models, backend=backend)
        semantic = make_convention("naming", "Export semantically fits file context")
        result = detector(tmp_path, settings=settings, models=models).detect([semantic])
        assert result.semantic_status == "ran"
        assert len(result.violations) == 3
        assert backend.loads == 1
        assert not models.is_loaded()

    def test_needs_three_targets(self, tmp_path):
        write_files(tmp_path, {"src/a.ts": "export function a() {}"})
        settings = self.settings(tmp_path)
        models = ModelManager(settings.models, backend=FailingBackend())
        semantic = make_convention("naming", "Export semantically fits file context")
        result = detector(tmp_path, settings=settings, models=models).detect([semantic])
        assert result.semantic_status == "not_applicable"
