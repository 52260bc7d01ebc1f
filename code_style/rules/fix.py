"""
Fix synthesis: text edits, scope-aware renames and conflict resolution.

A Finding carries a fix producer; the synthesizer runs it against a
FixBuilder bound to the current iteration's scope index. The builder
turns high-level requests (rename this binding) into concrete
TextEdits, visiting the declaration and every reference exactly once
and expanding shorthand sites. All edits produced in one pass are then
pooled and resolved first-writer-wins; losers are retried on the next
iteration against the re-parsed text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tree_sitter import Node

from ..analysis.scope import Binding, Reference, ScopeIndex, SiteForm
from ..analysis.source import SourceModel

if TYPE_CHECKING:
    from .base import Finding

logger = logging.getLogger(__name__)


class FixError(Exception):
    """A fix could not be expressed as a consistent edit set."""


@dataclass(frozen=True, order=True)
class TextEdit:
    """Replace the half-open character range [start, end) with replacement."""

    start: int
    end: int
    replacement: str

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise FixError(f"Invalid edit range [{self.start}, {self.end})")

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end

    def overlaps(self, other: TextEdit) -> bool:
        """Ranges intersect, or both edits start at the same offset."""
        if self.start == other.start:
            return True
        return self.start < other.end and other.start < self.end


@dataclass
class Fix:
    """An ordered, pairwise non-overlapping set of edits.

    Exact duplicate edits are collapsed; any other overlap is an error.
    """

    edits: tuple[TextEdit, ...]
    rule_id: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        ordered = sorted(set(self.edits))
        for previous, current in zip(ordered, ordered[1:]):
            if previous.overlaps(current):
                raise FixError(
                    f"Overlapping edits in one fix: [{previous.start}, {previous.end}) "
                    f"and [{current.start}, {current.end})"
                )
        self.edits = tuple(ordered)

    @property
    def start(self) -> int:
        return self.edits[0].start

    def apply(self, text: str) -> str:
        return apply_edits(text, self.edits)


def apply_edits(text: str, edits) -> str:
    """Apply non-overlapping edits to text in one left-to-right sweep."""
    pieces: list[str] = []
    cursor = 0
    for edit in sorted(edits):
        if edit.start < cursor:
            raise FixError(f"Edit at {edit.start} overlaps a previous edit ending at {cursor}")
        if edit.end > len(text):
            raise FixError(f"Edit [{edit.start}, {edit.end}) exceeds text length {len(text)}")
        pieces.append(text[cursor : edit.start])
        pieces.append(edit.replacement)
        cursor = edit.end
    pieces.append(text[cursor:])
    return "".join(pieces)


class FixBuilder:
    """Collects edits for one finding.

    Example usage:
        def fix(builder: FixBuilder) -> None:
            builder.rename_identifier(name_node, "userName")
    """

    def __init__(self, source: SourceModel, scope: ScopeIndex):
        self.source = source
        self.scope = scope
        self._edits: list[TextEdit] = []
        self._emitted: set[tuple[int, int]] = set()

    # -- primitive edits -------------------------------------------------

    def replace_range(self, start: int, end: int, text: str) -> None:
        """Replace a character range; a range already edited is skipped."""
        if (start, end) in self._emitted:
            return
        self._emitted.add((start, end))
        self._edits.append(TextEdit(start, end, text))

    def replace(self, node: Node, text: str) -> None:
        self.replace_range(*self.source.range_of(node), text)

    def insert_before(self, node: Node, text: str) -> None:
        start = self.source.start_of(node)
        self.replace_range(start, start, text)

    def insert_after(self, node: Node, text: str) -> None:
        end = self.source.end_of(node)
        self.replace_range(end, end, text)

    def remove(self, node: Node) -> None:
        self.replace(node, "")

    def remove_range(self, start: int, end: int) -> None:
        self.replace_range(start, end, "")

    # -- renames ---------------------------------------------------------

    def rename_binding(self, binding: Binding, new_name: str) -> None:
        """Rename a declaration and every reference resolved to it."""
        for site in self.scope.rename_sites(binding):
            self._rename_site(site, new_name)

    def rename_identifier(self, node: Node, new_name: str) -> bool:
        """Rename the binding declared or referenced at node.

        When no local binding exists only the single site is rewritten.

        Returns:
            True if a full rename was emitted, False for a single-site edit.
        """
        binding = self.scope.binding_at(node)
        if binding is None:
            logger.debug(
                f"No binding for '{self.source.text_of(node)}' in {self.source.file_path}; "
                f"renaming a single site"
            )
            self.replace(node, new_name)
            return False
        self.rename_binding(binding, new_name)
        return True

    def _rename_site(self, site: Reference, new_name: str) -> None:
        if site.form in (SiteForm.PATTERN_SHORTHAND, SiteForm.OBJECT_SHORTHAND):
            text = f"{site.name}: {new_name}"
        elif site.form == SiteForm.IMPORT_SPECIFIER:
            text = f"{site.name} as {new_name}"
        elif site.form == SiteForm.EXPORT_SPECIFIER:
            text = f"{new_name} as {site.name}"
        else:
            text = new_name
        self.replace_range(site.start, site.end, text)

    # -- result ----------------------------------------------------------

    @property
    def edits(self) -> list[TextEdit]:
        return list(self._edits)

    def build(self, rule_id: str | None = None, description: str | None = None) -> Fix | None:
        """Freeze the collected edits; None when nothing changes the text."""
        edits = [
            e for e in self._edits if self.source.text[e.start : e.end] != e.replacement
        ]
        if not edits:
            return None
        return Fix(edits=tuple(edits), rule_id=rule_id, description=description)


@dataclass
class ConflictResolution:
    """Outcome of pooling one pass's fixes."""

    accepted: list[tuple[Finding, Fix]] = field(default_factory=list)
    deferred: list[tuple[Finding, Fix]] = field(default_factory=list)

    @property
    def edits(self) -> list[TextEdit]:
        return sorted(edit for _, fix in self.accepted for edit in fix.edits)


class FixSynthesizer:
    """Turns findings into fixes and schedules them for one pass."""

    def __init__(self, source: SourceModel, scope: ScopeIndex):
        self.source = source
        self.scope = scope

    def synthesize(self, finding: Finding) -> Fix | None:
        """Run the finding's fix producer.

        A producer that raises degrades the finding to report-only.
        """
        if finding.fix is None:
            return None
        builder = FixBuilder(self.source, self.scope)
        try:
            finding.fix(builder)
            return builder.build(rule_id=finding.rule_id, description=finding.summary)
        except Exception as e:
            logger.warning(
                f"Could not synthesize fix for {finding.rule_id} at "
                f"{finding.file_path}:{finding.line_number}: {e}"
            )
            finding.fix = None
            return None

    def resolve_conflicts(self, candidates: list[tuple[Finding, Fix]]) -> ConflictResolution:
        """First-writer-wins scheduling of whole fixes.

        Fixes are visited by their first edit's offset; a fix with any
        edit overlapping an already accepted edit is deferred as a
        whole so that renames never apply partially.
        """
        resolution = ConflictResolution()
        accepted_edits: list[TextEdit] = []
        ordered = sorted(enumerate(candidates), key=lambda item: (item[1][1].start, item[0]))
        for _, (finding, fix) in ordered:
            if any(edit.overlaps(taken) for edit in fix.edits for taken in accepted_edits):
                resolution.deferred.append((finding, fix))
                continue
            resolution.accepted.append((finding, fix))
            accepted_edits.extend(fix.edits)
        if resolution.deferred:
            logger.debug(
                f"{len(resolution.deferred)} fixes deferred to the next pass in {self.source.file_path}"
            )
        return resolution
