"""Unit tests for the formatting rules."""

import pytest

from code_style.rules.formatting.class_name_order import (
    ClassNameOrderRule,
    reorder_preserving_spacing,
)
from code_style.rules.formatting.class_name_spaces import ClassNameSpacesRule
from code_style.rules.formatting.comment_format import CommentFormatRule


class AlphabeticalOrder:
    """Minimal ClassOrderer sorting classes alphabetically."""

    def classify(self, token):
        return 0

    def looks_like_utility_list(self, text):
        return False

    def sort(self, text):
        return " ".join(sorted(text.split()))


class TestClassNameOrderRule:
    """Utility class ordering."""

    @pytest.fixture
    def rule(self):
        return ClassNameOrderRule()

    def test_rule_properties(self, rule):
        assert rule.rule_id == "FORMATTING.CLASS_NAME_ORDER"
        assert rule.category == "formatting"
        assert rule.can_auto_fix()

    def test_attribute_is_reordered(self, rule, fix_text):
        result = fix_text('const A = () => <div className="p-4 flex" />;', "src/a.jsx", rule=rule)
        assert result.text == 'const A = () => <div className="flex p-4" />;'

    def test_expression_container_string(self, rule, run_rule):
        findings = run_rule(rule, 'const A = () => <div className={"text-sm mt-2"} />;', "src/a.jsx")
        assert findings[0].summary == 'Classes should be ordered as "mt-2 text-sm"'

    def test_spacing_is_preserved(self):
        assert reorder_preserving_spacing(" p-4  flex", ["flex", "p-4"]) == " flex  p-4"

    def test_class_variables(self, rule, fix_text):
        code = 'const buttonClasses = "p-4 flex";\nconst styles = { root: "p-2 flex items-center" };'
        result = fix_text(code, "src/a.js", rule=rule)
        assert result.text == (
            'const buttonClasses = "flex p-4";\n'
            'const styles = { root: "flex items-center p-2" };'
        )

    @pytest.mark.parametrize(
        "code",
        [
            'const A = () => <div className="flex p-4" />;',
            'const A = () => <div className="p-4" />;',
            'const A = () => <div id="p-4 flex" />;',
            'const title = "hello world";',
            'const A = () => <div className={cx("p-4 flex")} />;',
        ],
    )
    def test_not_reported(self, rule, run_rule, code):
        assert run_rule(rule, code, "src/a.jsx") == []

    def test_multiline_strings_are_skipped(self, rule, run_rule):
        code = 'const buttonClass = "p-4\\\n flex";'
        assert run_rule(rule, code, "src/a.js") == []

    def test_custom_class_orderer(self, rule, run_rule):
        code = 'const A = () => <div className="flex b-1 a-1" />;'
        findings = run_rule(rule, code, "src/a.jsx", class_orderer=AlphabeticalOrder())
        assert findings[0].summary == 'Classes should be ordered as "a-1 b-1 flex"'


class TestClassNameSpacesRule:
    """Extra whitespace in class strings."""

    @pytest.fixture
    def rule(self):
        return ClassNameSpacesRule()

    def test_spaces_are_collapsed(self, rule, fix_text):
        result = fix_text('const A = () => <b className="  flex   p-4 " />;', "src/a.jsx", rule=rule)
        assert result.text == 'const A = () => <b className="flex p-4" />;'

    def test_clean_string(self, rule, run_rule):
        assert run_rule(rule, 'const A = () => <b className="flex p-4" />;', "src/a.jsx") == []

    def test_class_variable(self, rule, run_rule):
        findings = run_rule(rule, 'const cardClass = "card  shadow";', "src/a.js")
        assert findings[0].summary == "Class string should not have extra spaces"


class TestCommentFormatRule:
    """Comment spacing and syntax."""

    @pytest.fixture
    def rule(self):
        return CommentFormatRule()

    def test_line_comment_space(self, rule, fix_text):
        result = fix_text("const a = 1;\n//comment\nlog(a);", "src/a.js", rule=rule)
        assert result.text == "const a = 1;\n// comment\nlog(a);"

    def test_single_line_block_becomes_line_comment(self, rule, fix_text):
        result = fix_text("const a = 1;\n/*   note */\nlog(a);", "src/a.js", rule=rule)
        assert result.text == "const a = 1;\n// note\nlog(a);"

    def test_multiline_block_spacing(self, rule, fix_text):
        result = fix_text("const a = 1;\n/*first\nsecond*/\nlog(a);", "src/a.js", rule=rule)
        assert result.text == "const a = 1;\n/* first\nsecond */\nlog(a);"

    def test_trailing_comment_spacing(self, rule, fix_text):
        result = fix_text("const a = 1;   // note\nconst b = 2;// other", "src/a.js", rule=rule)
        assert result.text == "const a = 1; // note\nconst b = 2; // other"

    @pytest.mark.parametrize(
        "code",
        [
            "const a = 1;\n/** Documented. */\nlog(a);",
            "const a = 1;\n/* eslint-disable no-console */\nlog(a);",
            "foo(/* inline */ 1);",
            "const a = 1;\n/// <reference path='x' />\nlog(a);",
            "const A = () => <div>{/* jsx comment */}</div>;",
            "const a = 1; // fine",
        ],
    )
    def test_not_reported(self, rule, run_rule, code):
        assert run_rule(rule, code, "src/a.jsx") == []

    def test_top_of_file_needs_blank_line(self, rule, fix_text):
        result = fix_text("// header\nconst a = 1;", "src/a.js", rule=rule)
        assert result.text == "// header\n\nconst a = 1;"

    def test_top_of_file_comments_are_contiguous(self, rule, fix_text):
        result = fix_text("// header\n\n// second\nconst a = 1;", "src/a.js", rule=rule)
        assert result.text == "// header\n// second\n\nconst a = 1;"
        assert result.applied_fixes == 2

    def test_findings_carry_comment_range(self, rule, run_rule):
        findings = run_rule(rule, "const a = 1;\n//x\n", "src/a.js")
        assert findings[0].anchor == (13, 16)
        assert findings[0].line_number == 2
