"""Source model: one file's tree-sitter tree, token stream and raw text.

Offsets handed out by this module are character offsets into the
Python string, never tree-sitter byte offsets, so edits computed from
them can be applied to the text directly.
"""

import threading
from bisect import bisect_right
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Any

from tree_sitter import Language, Node, Parser, Tree

from ..errors import SourceParseError

JAVASCRIPT_EXTENSIONS = [".js", ".jsx", ".mjs", ".cjs"]
TYPESCRIPT_EXTENSIONS = [".ts"]
TSX_EXTENSIONS = [".tsx"]
SUPPORTED_EXTENSIONS = JAVASCRIPT_EXTENSIONS + TYPESCRIPT_EXTENSIONS + TSX_EXTENSIONS

# Parsers are not thread-safe; one cache per worker thread
_LOCAL = threading.local()


def _language_for(suffix: str) -> tuple[str, Any]:
    """Pick the grammar for a file extension."""
    if suffix in TSX_EXTENSIONS:
        import tree_sitter_typescript as tsts

        return "tsx", tsts.language_tsx()
    if suffix in TYPESCRIPT_EXTENSIONS:
        import tree_sitter_typescript as tsts

        return "typescript", tsts.language_typescript()

    import tree_sitter_javascript as tsjs

    return "javascript", tsjs.language()


def get_parser(suffix: str) -> tuple[str, Parser]:
    """Return (language name, parser) for a file suffix.

    Parsers are created lazily and reused within the calling thread.
    """
    name, capsule = _language_for(suffix.lower())
    parsers: dict[str, Parser] = _LOCAL.__dict__.setdefault("parsers", {})
    parser = parsers.get(name)
    if parser is None:
        parser = Parser(Language(capsule))
        parsers[name] = parser
    return name, parser


def node_key(node: Node) -> tuple[int, int, str]:
    """Stable identity for a node within one tree."""
    return (node.start_byte, node.end_byte, node.type)


@dataclass(frozen=True)
class Token:
    """A leaf of the syntax tree, with character offsets."""

    type: str
    text: str
    start: int
    end: int
    line: int
    column: int
    is_comment: bool = False


class SourceModel:
    """Parsed view of a single file.

    Example:
        source = SourceModel.parse("const a = 1;", Path("a.js"))
        source.text_of(source.root)  # "const a = 1;"
    """

    def __init__(self, text: str, file_path: Path, tree: Tree, language: str):
        self.text = text
        self.file_path = file_path
        self.tree = tree
        self.language = language
        self._bytes = text.encode("utf-8")
        self._ascii = len(self._bytes) == len(text)

    @classmethod
    def parse(cls, text: str, file_path: Path | str) -> "SourceModel":
        """Parse text with the grammar matching the file suffix.

        Raises:
            SourceParseError: If the tree contains syntax errors.
        """
        file_path = Path(file_path)
        language, parser = get_parser(file_path.suffix)
        tree = parser.parse(text.encode("utf-8"))
        source = cls(text, file_path, tree, language)

        if tree.root_node.has_error:
            error_node = source._first_error(tree.root_node)
            if error_node is not None:
                line, column = source.line_col(source.start_of(error_node))
                raise SourceParseError(str(file_path), line, column)
            raise SourceParseError(str(file_path))

        return source

    @property
    def root(self) -> Node:
        return self.tree.root_node

    # -- offsets ---------------------------------------------------------

    @cached_property
    def _line_starts(self) -> list[int]:
        starts = [0]
        for index, char in enumerate(self.text):
            if char == "\n":
                starts.append(index + 1)
        return starts

    @cached_property
    def _char_byte_starts(self) -> list[int]:
        """UTF-8 byte offset of every character, plus the total length."""
        starts = [0] * (len(self.text) + 1)
        position = 0
        for index, char in enumerate(self.text):
            starts[index] = position
            code = ord(char)
            position += 1 if code < 0x80 else 2 if code < 0x800 else 3 if code < 0x10000 else 4
        starts[-1] = position
        return starts

    def char_offset(self, byte_offset: int) -> int:
        """Convert a tree-sitter byte offset to a character offset."""
        if self._ascii:
            return byte_offset
        return bisect_right(self._char_byte_starts, byte_offset) - 1

    def start_of(self, node: Node) -> int:
        return self.char_offset(node.start_byte)

    def end_of(self, node: Node) -> int:
        return self.char_offset(node.end_byte)

    def range_of(self, node: Node) -> tuple[int, int]:
        """Half-open character range of a node."""
        return self.start_of(node), self.end_of(node)

    def text_of(self, node: Node) -> str:
        return self._bytes[node.start_byte : node.end_byte].decode("utf-8")

    def line_col(self, offset: int) -> tuple[int, int]:
        """1-based line and 0-based column for a character offset."""
        line_index = bisect_right(self._line_starts, offset) - 1
        return line_index + 1, offset - self._line_starts[line_index]

    def offset_of(self, line: int, column: int) -> int:
        """Character offset of a 1-based line and 0-based column."""
        return self._line_starts[line - 1] + column

    @cached_property
    def lines(self) -> list[str]:
        return self.text.split("\n")

    def line_text(self, line: int) -> str | None:
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1]
        return None

    # -- tokens ----------------------------------------------------------

    @cached_property
    def tokens(self) -> list[Token]:
        """All leaf tokens in source order, comments included."""
        tokens: list[Token] = []
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.type == "comment" or (node.child_count == 0 and node.end_byte > node.start_byte):
                start = self.start_of(node)
                line, column = self.line_col(start)
                tokens.append(
                    Token(
                        type=node.type,
                        text=self.text_of(node),
                        start=start,
                        end=self.end_of(node),
                        line=line,
                        column=column,
                        is_comment=node.type == "comment",
                    )
                )
                continue
            stack.extend(reversed(node.children))
        return tokens

    @cached_property
    def code_tokens(self) -> list[Token]:
        return [t for t in self.tokens if not t.is_comment]

    @cached_property
    def comments(self) -> list[Token]:
        return [t for t in self.tokens if t.is_comment]

    @property
    def first_code_token(self) -> Token | None:
        return self.code_tokens[0] if self.code_tokens else None

    def token_before(self, offset: int, include_comments: bool = False) -> Token | None:
        """Last token ending at or before ``offset``."""
        tokens = self.tokens if include_comments else self.code_tokens
        ends = [t.end for t in tokens]
        index = bisect_right(ends, offset) - 1
        return tokens[index] if index >= 0 else None

    def token_after(self, offset: int, include_comments: bool = False) -> Token | None:
        """First token starting at or after ``offset``."""
        tokens = self.tokens if include_comments else self.code_tokens
        for token in tokens:
            if token.start >= offset:
                return token
        return None

    # -- tree helpers ----------------------------------------------------

    def walk(self):
        """Yield every named node depth-first in source order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.is_named:
                yield node
            stack.extend(reversed(node.children))

    def _first_error(self, node: Node) -> Node | None:
        if node.type == "ERROR" or node.is_missing:
            return node
        for child in node.children:
            if child.has_error or child.is_missing:
                found = self._first_error(child)
                if found is not None:
                    return found
        return None


def find_ancestor(node: Node, node_types: set[str] | tuple[str, ...]) -> Node | None:
    """Nearest ancestor (excluding node) whose type is in node_types."""
    current = node.parent
    while current is not None:
        if current.type in node_types:
            return current
        current = current.parent
    return None


def unwrap_parentheses(node: Node | None) -> Node | None:
    """Strip parenthesized_expression wrappers."""
    while node is not None and node.type == "parenthesized_expression":
        inner = [c for c in node.named_children if c.type != "comment"]
        if not inner:
            break
        node = inner[0]
    return node
