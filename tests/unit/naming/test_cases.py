"""Unit tests for code_style.naming.cases module."""

import pytest

from code_style.naming.cases import (
    CaseFamily,
    classify,
    is_hook_name,
    split_words,
    to_camel,
    to_kebab,
    to_pascal,
    to_upper_snake,
)


class TestClassify:
    """Case family classification."""

    @pytest.mark.parametrize(
        "identifier,family",
        [
            ("userName", CaseFamily.CAMEL),
            ("user", CaseFamily.CAMEL),
            ("UserName", CaseFamily.PASCAL),
            ("USER_NAME", CaseFamily.UPPER_SNAKE),
            ("ID", CaseFamily.UPPER_SNAKE),
            ("user_name", CaseFamily.SNAKE),
            ("user-name", CaseFamily.KEBAB),
            ("_private", CaseFamily.UNKNOWN),
            ("$el", CaseFamily.UNKNOWN),
        ],
    )
    def test_classify(self, identifier, family):
        assert classify(identifier) == family

    def test_hook_names(self):
        assert is_hook_name("useUser")
        assert not is_hook_name("use")
        assert not is_hook_name("user")
        assert not is_hook_name("useuser")


class TestConversions:
    """Case conversions."""

    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("user_name", "userName"),
            ("CODE_LENGTH", "codeLength"),
            ("user-name", "userName"),
            ("UserName", "userName"),
            ("URL", "url"),
            ("userName", "userName"),
            ("__user_name", "__userName"),
        ],
    )
    def test_to_camel(self, identifier, expected):
        assert to_camel(identifier) == expected

    def test_to_pascal(self):
        assert to_pascal("super-admins") == "SuperAdmins"
        assert to_pascal("auth") == "Auth"

    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("pending", "PENDING"),
            ("inProgress", "IN_PROGRESS"),
            ("InProgress", "IN_PROGRESS"),
            ("ABCWord", "ABC_WORD"),
            ("in-progress", "IN_PROGRESS"),
            ("ALREADY_DONE", "ALREADY_DONE"),
        ],
    )
    def test_to_upper_snake(self, identifier, expected):
        assert to_upper_snake(identifier) == expected

    @pytest.mark.parametrize("identifier", ["user_name", "CODE_LENGTH", "UserName", "a-b-c"])
    def test_to_camel_is_idempotent(self, identifier):
        once = to_camel(identifier)
        assert to_camel(once) == once

    @pytest.mark.parametrize("identifier", ["inProgress", "ABCWord", "x"])
    def test_to_upper_snake_is_idempotent(self, identifier):
        once = to_upper_snake(identifier)
        assert to_upper_snake(once) == once

    def test_split_words_and_kebab(self):
        assert split_words("useCreateUser") == ["use", "create", "user"]
        assert split_words("HTMLParser") == ["html", "parser"]
        assert to_kebab("useCreateUser") == "use-create-user"
