"""Unit tests for code_style.naming.paths module."""

import pytest

from code_style.naming.paths import (
    NameKind,
    derive_expected_name,
    file_stem,
    hook_name_for_file,
    module_info,
    singularize,
    split_path,
    suffix_table,
)


class TestPathHelpers:
    """Splitting, stems and singularization."""

    @pytest.mark.parametrize(
        "word,expected",
        [("layouts", "layout"), ("categories", "category"), ("boxes", "box"), ("data", "data")],
    )
    def test_singularize(self, word, expected):
        assert singularize(word) == expected

    def test_split_path_normalizes_backslashes(self):
        assert split_path("src\\components\\button.tsx") == ["src", "components", "button.tsx"]

    def test_file_stem_strips_source_suffix(self):
        assert file_stem("src/layouts/auth/index.tsx") == "index"
        assert file_stem("src/data/user-roles.js") == "user-roles"

    def test_suffix_table_extends_with_extra_folders(self):
        table = suffix_table(["widgets"])
        assert table["widgets"] == "Widget"
        assert table["layouts"] == "Layout"


class TestModuleInfo:
    """Locating the module folder."""

    def test_innermost_module_folder(self):
        info = module_info("src/components/forms/views/login.tsx")
        assert info.folder == "views"
        assert info.intermediate == ()
        assert info.file_name == "login"

    def test_grouping_folders_are_elided(self):
        info = module_info("src/components/shared/button/index.tsx")
        assert info.folder == "components"
        assert info.intermediate == ("button",)

    def test_barrel(self):
        assert module_info("src/views/index.ts").is_barrel
        assert not module_info("src/views/home/index.ts").is_barrel

    def test_no_module_folder(self):
        assert module_info("src/app.tsx") is None

    def test_folder_flags(self):
        assert module_info("src/data/users.js").is_camel_case
        assert module_info("src/pages/home.tsx").requires_jsx


class TestDeriveExpectedName:
    """Expected export names from folder chains."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("src/layouts/auth/index.tsx", "AuthLayout"),
            ("src/layouts/main.tsx", "MainLayout"),
            ("src/views/dashboard/settings/index.tsx", "SettingsDashboardView"),
            ("src/views/dashboard/settings.tsx", "SettingsDashboardView"),
            ("src/components/button.tsx", "Button"),
            ("src/data/user-roles.js", "userRolesData"),
            ("src/contexts/auth.tsx", "AuthContext"),
            ("src/services/api-client.ts", "apiClientService"),
        ],
    )
    def test_expected_names(self, path, expected):
        assert derive_expected_name(path) == expected

    def test_barrel_and_unmatched_paths_have_no_name(self):
        assert derive_expected_name("src/views/index.ts") is None
        assert derive_expected_name("src/app.tsx") is None

    def test_extra_folders(self):
        assert derive_expected_name("src/widgets/clock.tsx") is None
        assert derive_expected_name("src/widgets/clock.tsx", extra_folders=["widgets"]) == "ClockWidget"

    def test_is_deterministic(self):
        path = "src/components/shared/user-card/index.tsx"
        assert derive_expected_name(path) == derive_expected_name(path) == "UserCard"

    def test_hook_names(self):
        assert derive_expected_name("src/hooks/users/use-create-user.ts", NameKind.HOOK) == "useCreateUser"
        assert hook_name_for_file("src/hooks/create-user.ts") == "useCreateUser"
        assert hook_name_for_file("src/hooks/index.ts") is None
