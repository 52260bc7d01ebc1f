"""Unit tests for code_style.analysis.source module."""

from pathlib import Path

import pytest

from code_style.analysis.source import (
    SUPPORTED_EXTENSIONS,
    SourceModel,
    find_ancestor,
    get_parser,
    unwrap_parentheses,
)
from code_style.errors import ErrorCategory, SourceParseError


class TestParsing:
    """Grammar selection and syntax errors."""

    @pytest.mark.parametrize(
        "path,language",
        [
            ("a.js", "javascript"),
            ("a.jsx", "javascript"),
            ("a.mjs", "javascript"),
            ("a.ts", "typescript"),
            ("a.tsx", "tsx"),
        ],
    )
    def test_language_follows_extension(self, path, language):
        source = SourceModel.parse("const a = 1;", Path(path))
        assert source.language == language

    def test_supported_extensions(self):
        assert ".tsx" in SUPPORTED_EXTENSIONS
        assert ".jsx" in SUPPORTED_EXTENSIONS
        assert ".py" not in SUPPORTED_EXTENSIONS

    def test_parser_is_reused_within_thread(self):
        _, first = get_parser(".tsx")
        _, second = get_parser(".tsx")
        assert first is second

    def test_jsx_parses_in_tsx(self, parse):
        source = parse("const App = () => <div className=\"a\" />;", "src/app.tsx")
        assert source.root.type == "program"

    def test_syntax_error_raises_with_location(self, parse):
        with pytest.raises(SourceParseError) as exc_info:
            parse("const a = 1;\nconst = ;\n", "src/broken.js")
        error = exc_info.value
        assert error.category == ErrorCategory.PARSE
        assert error.file_path == "src/broken.js"
        assert error.line == 2

    def test_accepts_string_path(self):
        source = SourceModel.parse("let x;", "src/x.js")
        assert source.file_path == Path("src/x.js")


class TestOffsets:
    """Character offsets, lines and columns."""

    def test_text_of_root_is_whole_file(self, parse):
        text = "const a = 1;\nconst b = a;\n"
        source = parse(text, "a.js")
        assert source.text_of(source.root) == text

    def test_line_col_is_one_based_line_zero_based_column(self, parse):
        source = parse("const a = 1;\nconst bb = 2;", "a.js")
        offset = source.text.index("bb")
        assert source.line_col(offset) == (2, 6)
        assert source.offset_of(2, 6) == offset

    def test_character_offsets_with_non_ascii_text(self, parse):
        text = 'const label = "héllo";\nconst user_name = 1;'
        source = parse(text, "a.js")
        declarator = [n for n in source.walk() if n.type == "variable_declarator"][1]
        name = declarator.child_by_field_name("name")
        start, end = source.range_of(name)
        assert text[start:end] == "user_name"

    def test_every_node_range_matches_its_text(self, parse):
        """Mixed 2-, 3- and 4-byte characters map to the right slices."""
        text = 'const a = "é";\nconst b = "日本";\nconst c = "🎉";\nlog(a, b, c);\n'
        source = parse(text, "a.js")

        for node in source.walk():
            start, end = source.range_of(node)
            assert text[start:end] == source.text_of(node)
        assert source.char_offset(len(text.encode("utf-8"))) == len(text)

    def test_line_text(self, parse):
        source = parse("let a;\nlet b;", "a.js")
        assert source.line_text(2) == "let b;"
        assert source.line_text(3) is None


class TestTokens:
    """Token stream and comment access."""

    def test_comments_are_separate_from_code_tokens(self, parse):
        source = parse("// top\nconst a = 1; /* trailing */\n", "a.js")
        assert [c.text for c in source.comments] == ["// top", "/* trailing */"]
        assert all(not t.is_comment for t in source.code_tokens)
        assert source.first_code_token.text == "const"

    def test_token_before_and_after(self, parse):
        source = parse("const a = 1; // note", "a.js")
        comment = source.comments[0]
        before = source.token_before(comment.start)
        assert before.text == ";"
        assert source.token_after(0).text == "const"
        assert source.token_after(comment.end) is None

    def test_tokens_are_in_source_order(self, parse):
        source = parse("const a = b + c;", "a.js")
        starts = [t.start for t in source.tokens]
        assert starts == sorted(starts)


class TestTreeHelpers:
    """walk, find_ancestor and unwrap_parentheses."""

    def test_walk_yields_named_nodes_in_source_order(self, parse):
        source = parse("const a = 1; const b = 2;", "a.js")
        names = [
            source.text_of(n.child_by_field_name("name"))
            for n in source.walk()
            if n.type == "variable_declarator"
        ]
        assert names == ["a", "b"]

    def test_find_ancestor(self, parse):
        source = parse("function f() { return x; }", "a.js")
        ident = [n for n in source.walk() if n.type == "identifier" and source.text_of(n) == "x"][0]
        function = find_ancestor(ident, {"function_declaration"})
        assert function is not None
        assert find_ancestor(ident, {"class_declaration"}) is None

    def test_unwrap_parentheses(self, parse):
        source = parse("const a = ((b));", "a.js")
        value = [n for n in source.walk() if n.type == "variable_declarator"][0].child_by_field_name(
            "value"
        )
        inner = unwrap_parentheses(value)
        assert inner.type == "identifier"
        assert source.text_of(inner) == "b"
