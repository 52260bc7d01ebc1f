"""
Redundant folder suffix rule.

Names below ``src/`` should not repeat an ancestor folder:
``layouts/main-layout.tsx`` should be ``layouts/main.tsx``,
``atoms/forms-atom/`` should be ``atoms/forms/`` and ``input/input.tsx``
should be ``input/index.tsx``. Index files are never flagged.
"""

from ...naming.paths import SOURCE_SUFFIX, file_stem, singularize, split_path
from ..base import BaseRule, Finding, RuleContext, Severity


class RedundantFolderSuffixRule(BaseRule):
    """File and folder names repeating an ancestor folder."""

    SOURCE_ROOT = "src"

    @property
    def rule_id(self) -> str:
        return "STRUCTURE.REDUNDANT_FOLDER_SUFFIX"

    @property
    def name(self) -> str:
        return "No Redundant Folder Suffix"

    @property
    def category(self) -> str:
        return "structure"

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def description(self) -> str:
        return (
            "File and folder names must not end with the singular name of an "
            "ancestor folder; the folder already provides that context."
        )

    def check(self, context: RuleContext) -> list[Finding]:
        parts = split_path(context.file_path)
        if self.SOURCE_ROOT not in parts[:-1]:
            return []

        root = parts.index(self.SOURCE_ROOT)
        ancestors = parts[root + 1 : -1]
        if not ancestors:
            return []

        findings: list[Finding] = []
        for i, folder in enumerate(ancestors[1:], start=1):
            for ancestor in ancestors[:i]:
                suffix = f"-{singularize(ancestor)}"
                if folder.endswith(suffix):
                    findings.append(
                        self._create_finding(
                            summary=(
                                f'Folder name "{folder}" has redundant suffix "{suffix}": '
                                f'"{ancestor}/" already provides this context, rename to '
                                f'"{folder[: -len(suffix)]}"'
                            ),
                            context=context,
                        )
                    )

        stem = file_stem(context.file_path)
        if stem == "index":
            return findings

        if len(ancestors) >= 2 and stem == ancestors[-1]:
            match = SOURCE_SUFFIX.search(parts[-1])
            extension = match.group(0) if match else ""
            findings.append(
                self._create_finding(
                    summary=(
                        f'File name "{stem}" is the same as its parent folder "{stem}/"; '
                        f'use "{stem}/index{extension}" instead'
                    ),
                    context=context,
                )
            )
            return findings

        for ancestor in ancestors:
            suffix = f"-{singularize(ancestor)}"
            if stem.endswith(suffix):
                findings.append(
                    self._create_finding(
                        summary=(
                            f'File name "{stem}" has redundant suffix "{suffix}": '
                            f'"{ancestor}/" already provides this context, rename to '
                            f'"{stem[: -len(suffix)]}"'
                        ),
                        context=context,
                    )
                )
                break

        return findings
