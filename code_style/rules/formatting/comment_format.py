"""
Comment format rule.

- ``//comment`` gets a space after the delimiter
- single-line ``/* comment */`` becomes ``// comment``
- multi-line block comments get a space after ``/*`` and before ``*/``
- a trailing comment sits exactly one space after the code before it
- top-of-file comments are contiguous and followed by one blank line
"""

import re

from ...analysis.source import Token
from ..base import BaseRule, Finding, FixProducer, RuleContext, Severity


def _replace(start: int, end: int, text: str) -> FixProducer:
    def fix(builder):
        builder.replace_range(start, end, text)

    return fix


class CommentFormatRule(BaseRule):
    """Comment spacing and single-line comment syntax."""

    DIRECTIVE = re.compile(r"^(eslint-disable|eslint-enable|global\s|@ts-|istanbul\s|prettier-ignore)")

    @property
    def rule_id(self) -> str:
        return "FORMATTING.COMMENT_FORMAT"

    @property
    def name(self) -> str:
        return "Comment Format"

    @property
    def category(self) -> str:
        return "formatting"

    @property
    def default_severity(self) -> Severity:
        return Severity.LOW

    @property
    def description(self) -> str:
        return (
            "Comments need a space after their delimiter, single-line block comments "
            "use //, and top-of-file comments are followed by a blank line."
        )

    def can_auto_fix(self) -> bool:
        return True

    def check(self, context: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        for comment in context.source.comments:
            finding = self._check_syntax(comment, context)
            if finding is not None:
                findings.append(finding)
            finding = self._check_trailing_spacing(comment, context)
            if finding is not None:
                findings.append(finding)
        findings.extend(self._check_top_of_file(context))
        return findings

    def _check_syntax(self, comment: Token, context: RuleContext) -> Finding | None:
        text = comment.text
        if text.startswith("//"):
            value = text[2:]
            if value and not value.startswith((" ", "/", "\t")):
                return self._create_finding(
                    summary="Line comment should have a space after //",
                    context=context,
                    start=comment.start,
                    end=comment.end,
                    fix=_replace(comment.start, comment.end, f"// {value}"),
                )
            return None

        if not text.startswith("/*") or not text.endswith("*/") or len(text) < 4:
            return None
        value = text[2:-2]

        if "\n" not in value:
            trimmed = value.strip()
            # Doc comments, directives and comments followed by code stay block comments
            if not trimmed or value.startswith("*") or self.DIRECTIVE.match(trimmed):
                return None
            if self._code_follows_on_line(comment, context):
                return None
            return self._create_finding(
                summary="Single-line comments should use // instead of /* */",
                context=context,
                start=comment.start,
                end=comment.end,
                fix=_replace(comment.start, comment.end, f"// {trimmed}"),
            )

        needs_start = not value.startswith((" ", "*", "\n", "\r"))
        needs_end = not value.endswith((" ", "*", "\n", "\t"))
        if not (needs_start or needs_end):
            return None
        fixed = (" " if needs_start else "") + value + (" " if needs_end else "")
        return self._create_finding(
            summary="Block comment should have a space after /* and before */",
            context=context,
            start=comment.start,
            end=comment.end,
            fix=_replace(comment.start, comment.end, f"/*{fixed}*/"),
        )

    @staticmethod
    def _code_follows_on_line(comment: Token, context: RuleContext) -> bool:
        after = context.source.token_after(comment.end)
        return after is not None and after.line == context.source.line_col(comment.end)[0]

    def _check_trailing_spacing(self, comment: Token, context: RuleContext) -> Finding | None:
        source = context.source
        before = source.token_before(comment.start)
        if before is None or source.line_col(before.end)[0] != comment.line:
            return None
        # {/* jsx comment */} and (/* inline */ args)
        if before.text in ("{", "(", "["):
            return None
        if comment.start - before.end == 1 and source.text[before.end] == " ":
            return None
        return self._create_finding(
            summary="Trailing comment should have exactly one space before it",
            context=context,
            start=comment.start,
            end=comment.end,
            fix=_replace(before.end, comment.start, " "),
        )

    def _check_top_of_file(self, context: RuleContext) -> list[Finding]:
        source = context.source
        first = source.first_code_token
        if first is None:
            return []
        top = [c for c in source.comments if c.end <= first.start]
        if not top:
            return []

        findings: list[Finding] = []
        for current, following in zip(top, top[1:]):
            gap = source.text[current.end : following.start]
            if gap.count("\n") > 1 and not gap.strip():
                findings.append(
                    self._create_finding(
                        summary="No blank lines allowed between top-of-file comments",
                        context=context,
                        start=following.start,
                        end=following.end,
                        fix=_replace(current.end, following.start, "\n"),
                    )
                )

        last = top[-1]
        last_line = source.line_col(last.end)[0]
        if first.line == last_line + 1:
            findings.append(
                self._create_finding(
                    summary="Expected a blank line between top-of-file comments and code",
                    context=context,
                    start=first.start,
                    end=first.end,
                    fix=_replace(last.end, last.end, "\n"),
                )
            )
        elif first.line == last_line:
            findings.append(
                self._create_finding(
                    summary="Code should start on a new line after top-of-file comments",
                    context=context,
                    start=first.start,
                    end=first.end,
                    fix=_replace(first.start, first.start, "\n\n"),
                )
            )
        return findings
