"""Centralized output manager for the CLI with color and quiet mode support.

Honors the NO_COLOR convention (https://no-color.org/), FORCE_COLOR,
the --no-color flag and TTY detection, and falls back to plain-text
symbols when color is off.
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TextIO

import click

from .rules.base import Finding, Severity

if TYPE_CHECKING:
    from .driver import FileResult


def should_use_color(
    explicit_flag: bool | None = None,
    stream: TextIO | None = None,
) -> bool:
    """Determine if color output should be used.

    Priority order:
    1. Explicit flag
    2. NO_COLOR environment variable
    3. FORCE_COLOR environment variable
    4. TTY detection

    Args:
        explicit_flag: True forces colors, False disables them, None auto-detects.
        stream: Output stream to check for TTY. Defaults to stdout.
    """
    if explicit_flag is not None:
        return explicit_flag

    # Any value (including empty) means "no color"
    if "NO_COLOR" in os.environ:
        return False

    if "FORCE_COLOR" in os.environ:
        return True

    if stream is None:
        stream = sys.stdout
    if hasattr(stream, "isatty") and not stream.isatty():
        return False

    return True


@dataclass
class OutputConfig:
    """Configuration for CLI output behavior."""

    use_color: bool = True
    quiet: bool = False
    verbose: bool = False
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    err_stream: TextIO = field(default_factory=lambda: sys.stderr)

    @classmethod
    def from_flags(
        cls,
        verbose: bool = False,
        quiet: bool = False,
        no_color: bool = False,
    ) -> OutputConfig:
        """Create OutputConfig from CLI flags."""
        use_color = should_use_color(explicit_flag=False if no_color else None)
        return cls(use_color=use_color, quiet=quiet, verbose=verbose)


class OutputManager:
    """Centralized output handler for the CLI.

    Example:
        >>> output = OutputManager(OutputConfig(use_color=False))
        >>> output.success("No style violations")
        [OK] No style violations
    """

    COLORS = {
        "green": "\033[92m",
        "red": "\033[91m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "cyan": "\033[96m",
        "bold": "\033[1m",
        "dim": "\033[2m",
        "reset": "\033[0m",
    }

    SYMBOLS = {
        "success": {"color": "\033[92m✓\033[0m", "plain": "[OK]"},
        "error": {"color": "\033[91m✗\033[0m", "plain": "[FAIL]"},
        "warning": {"color": "\033[93m⚠\033[0m", "plain": "[WARN]"},
        "info": {"color": "\033[94mℹ\033[0m", "plain": "[INFO]"},
        "fixed": {"color": "\033[96m⚒\033[0m", "plain": "[FIXED]"},
    }

    SEVERITY_COLORS = {
        Severity.CRITICAL: "red",
        Severity.HIGH: "red",
        Severity.MEDIUM: "yellow",
        Severity.LOW: "cyan",
    }

    def __init__(self, config: OutputConfig | None = None):
        self.config = config or OutputConfig()

    def _get_symbol(self, symbol_type: str) -> str:
        symbol_data = self.SYMBOLS.get(symbol_type, self.SYMBOLS["info"])
        return symbol_data["color"] if self.config.use_color else symbol_data["plain"]

    def _colorize(self, text: str, color: str) -> str:
        if not self.config.use_color:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def _output(
        self,
        message: str,
        symbol_type: str | None = None,
        err: bool = False,
        force: bool = False,
    ) -> None:
        """Output a message with optional symbol prefix.

        Args:
            message: Message to output.
            symbol_type: Type of symbol to prefix (or None for no symbol).
            err: Output to stderr instead of stdout.
            force: Output even in quiet mode.
        """
        if self.config.quiet and not err and not force:
            return

        stream = self.config.err_stream if err else self.config.stream
        line = f"{self._get_symbol(symbol_type)} {message}" if symbol_type else message
        click.echo(line, file=stream)

    def success(self, message: str, force: bool = False) -> None:
        self._output(message, symbol_type="success", force=force)

    def error(self, message: str) -> None:
        """Output an error message (always shown, even in quiet mode)."""
        self._output(message, symbol_type="error", err=True, force=True)

    def warning(self, message: str, force: bool = False) -> None:
        self._output(message, symbol_type="warning", force=force)

    def info(self, message: str) -> None:
        self._output(message, symbol_type="info")

    def debug(self, message: str) -> None:
        """Output a debug message (only in verbose mode)."""
        if not self.config.verbose:
            return
        self._output(f"DEBUG: {self._colorize(message, 'dim')}")

    def plain(self, message: str, force: bool = False) -> None:
        self._output(message, force=force)

    def finding(self, finding: Finding) -> None:
        """One finding as ``path:line:col  severity  summary  [rule]``.

        Findings that remain are what the run failed on, so they are
        shown in quiet mode too.
        """
        location = finding.file_path
        if finding.line_number is not None:
            location += f":{finding.line_number}:{finding.column or 0}"
        severity = self._colorize(
            finding.severity.value.ljust(8), self.SEVERITY_COLORS[finding.severity]
        )
        rule = self._colorize(f"[{finding.rule_id}]", "dim")
        self._output(f"{location}  {severity} {finding.summary}  {rule}", force=True)
        if self.config.verbose:
            for hint in finding.remediation_hints:
                self._output(f"    {self._colorize(hint, 'dim')}")

    def file_result(self, result: FileResult) -> None:
        """Everything known about one file: applied fixes, failures, findings."""
        if result.error is not None:
            self.error(result.error.message)
            return
        if result.changed:
            self._output(
                f"{result.file_path}: applied {result.applied_fixes} fixes "
                f"in {result.iterations} iterations",
                symbol_type="fixed",
            )
        if not result.fixpoint_reached:
            self.warning(
                f"{result.file_path}: fixes did not converge; remaining findings need manual review",
                force=True,
            )
        for rule_error in result.errors:
            self.warning(f"{result.file_path}: rule {rule_error.rule_id} failed: {rule_error.error_message}")
        for finding in result.findings:
            self.finding(finding)

    def summary(
        self,
        total: int,
        changed: int = 0,
        findings: int = 0,
        failed: int = 0,
        duration_ms: float | None = None,
    ) -> None:
        """Output a summary line with counts (shown even in quiet mode)."""
        parts = [f"{total} files"]
        if changed > 0:
            parts.append(f"{changed} fixed")
        parts.append(f"{findings} findings")
        if failed > 0:
            parts.append(f"{failed} failed")
        if duration_ms is not None:
            if duration_ms < 1000:
                parts.append(f"{duration_ms:.0f}ms")
            else:
                parts.append(f"{duration_ms / 1000:.1f}s")

        summary_text = " | ".join(parts)
        if failed > 0:
            self._output(summary_text, symbol_type="error", force=True)
        elif findings > 0:
            self._output(summary_text, symbol_type="warning", force=True)
        else:
            self._output(summary_text, symbol_type="success", force=True)

    def json_report(self, results: Sequence[FileResult]) -> None:
        """Machine-readable report; always written, quiet or not."""
        report = {
            "files": [r.to_dict() for r in results],
            "summary": {
                "files": len(results),
                "changed": sum(1 for r in results if r.changed),
                "findings": sum(len(r.findings) for r in results),
                "failed": sum(1 for r in results if r.error is not None),
            },
        }
        click.echo(json.dumps(report, indent=2), file=self.config.stream)
