"""Unit tests for the structure rules."""

import pytest

from code_style.rules.structure.folder_structure import FolderStructureRule
from code_style.rules.structure.hook_file_naming import HookFileNamingRule
from code_style.rules.structure.redundant_folder_suffix import RedundantFolderSuffixRule

CODE = "export const x = 1;"


class TestFolderStructureRule:
    """Flat versus wrapped module folders."""

    @pytest.fixture
    def rule(self):
        return FolderStructureRule()

    def run(self, run_rule, rule, fake_fs, files, path, options=None):
        return run_rule(rule, CODE, path, options=options, file_system=fake_fs(files))

    def test_rule_properties(self, rule):
        assert rule.rule_id == "STRUCTURE.FOLDER_STRUCTURE"
        assert rule.category == "structure"
        assert not rule.can_auto_fix()

    def test_consistently_flat_folder(self, rule, run_rule, fake_fs):
        files = ["src/atoms/input.tsx", "src/atoms/button.tsx"]
        assert self.run(run_rule, rule, fake_fs, files, "src/atoms/input.tsx") == []

    def test_single_file_wrappers_are_unnecessary(self, rule, run_rule, fake_fs):
        files = ["src/atoms/button/index.tsx", "src/atoms/input/index.tsx"]
        findings = self.run(run_rule, rule, fake_fs, files, "src/atoms/button/index.tsx")
        assert len(findings) == 1
        assert findings[0].summary.startswith('Unnecessary wrapper folders in "atoms/"')
        assert findings[0].anchor is None
        assert findings[0].fix is None

    def test_mixed_folder_without_justification(self, rule, run_rule, fake_fs):
        files = ["src/atoms/input.tsx", "src/atoms/button/index.tsx"]
        # The flat file is fine; the lone wrapper is flagged
        assert self.run(run_rule, rule, fake_fs, files, "src/atoms/input.tsx") == []
        findings = self.run(run_rule, rule, fake_fs, files, "src/atoms/button/index.tsx")
        assert findings[0].summary.startswith("Unnecessary wrapper folder:")

    def test_mixed_folder_with_justified_wrapper(self, rule, run_rule, fake_fs):
        files = [
            "src/atoms/input.tsx",
            "src/atoms/button/index.tsx",
            "src/atoms/button/styles.ts",
        ]
        findings = self.run(run_rule, rule, fake_fs, files, "src/atoms/input.tsx")
        assert "should be wrapped in a folder" in findings[0].summary
        assert self.run(run_rule, rule, fake_fs, files, "src/atoms/button/index.tsx") == []

    def test_loose_module_file(self, rule, run_rule, fake_fs):
        findings = self.run(run_rule, rule, fake_fs, [], "src/data.js")
        assert findings[0].summary.startswith('"data" should be a folder')

    def test_unreadable_folder_has_no_opinion(self, rule, run_rule, fake_fs):
        assert self.run(run_rule, rule, fake_fs, [], "src/atoms/button/index.tsx") == []

    def test_module_folders_option_replaces_defaults(self, rule, run_rule, fake_fs):
        files = ["src/blocks/a/index.tsx", "src/blocks/b/index.tsx"]
        assert self.run(run_rule, rule, fake_fs, files, "src/blocks/a/index.tsx") == []
        findings = self.run(
            run_rule, rule, fake_fs, files, "src/blocks/a/index.tsx",
            options={"moduleFolders": ["blocks"]},
        )
        assert len(findings) == 1

    def test_reads_local_directories(self, rule, run_rule, react_project):
        root = react_project(
            {"src/atoms/button/index.tsx": CODE, "src/atoms/input/index.tsx": CODE}
        )
        findings = run_rule(rule, CODE, str(root / "src/atoms/input/index.tsx"))
        assert len(findings) == 1


class TestHookFileNamingRule:
    """Hook file names carry their module."""

    @pytest.mark.parametrize(
        "path",
        [
            "src/hooks/super-admins/use-create-super-admin.ts",
            "src/hooks/super-admins/use-super-admins-list.ts",
            "src/hooks/dashboard/super-admins/use-get-dashboard-super-admin.ts",
            "src/hooks/shared/users/use-update-user.ts",
            "src/hooks/use-auth.ts",
            "src/hooks/users/index.ts",
            "src/utils/users/use-thing.ts",
        ],
    )
    def test_conforming_paths(self, path):
        assert HookFileNamingRule.check_name(path) is None

    def test_missing_module_name(self):
        message = HookFileNamingRule.check_name("src/hooks/users/use-create.ts")
        assert message == 'Hook file "use-create" should end with "-user" (use-{verb}-user)'

    def test_missing_verb(self):
        message = HookFileNamingRule.check_name("src/hooks/users/use-user.ts")
        assert "is missing a verb" in message

    def test_list_hook(self):
        message = HookFileNamingRule.check_name("src/hooks/dashboard/users/use-list.ts")
        assert 'should be named "use-dashboard-users-list"' in message

    def test_file_level_finding(self, run_rule):
        findings = run_rule(HookFileNamingRule(), CODE, "src/hooks/users/use-create.ts")
        assert len(findings) == 1
        assert findings[0].line_number is None


class TestRedundantFolderSuffixRule:
    """Names repeating an ancestor folder."""

    @pytest.fixture
    def rule(self):
        return RedundantFolderSuffixRule()

    def test_file_suffix(self, rule, run_rule):
        findings = run_rule(rule, CODE, "src/layouts/main-layout.tsx")
        assert len(findings) == 1
        assert findings[0].summary.endswith('rename to "main"')

    def test_folder_suffix(self, rule, run_rule):
        findings = run_rule(rule, CODE, "src/atoms/forms-atom/index.tsx")
        assert len(findings) == 1
        assert findings[0].summary.startswith('Folder name "forms-atom"')

    def test_file_named_like_parent(self, rule, run_rule):
        findings = run_rule(rule, CODE, "src/atoms/input/input.tsx")
        assert findings[0].summary.endswith('use "input/index.tsx" instead')

    @pytest.mark.parametrize(
        "path",
        ["src/layouts/main.tsx", "lib/layouts/main-layout.tsx", "src/app.tsx", "src/atoms/input/index.tsx"],
    )
    def test_not_reported(self, rule, run_rule, path):
        assert run_rule(rule, CODE, path) == []
