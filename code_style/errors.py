"""Structured error types with recovery suggestions.

Errors that reach the command line carry a category, a message, an
optional actionable suggestion and an exit code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of errors for organization and handling."""

    CONFIGURATION = "configuration"  # Invalid config or rule options
    FILE_SYSTEM = "file_system"  # Path issues, permissions
    PARSE = "parse"  # Source could not be parsed
    VALIDATION = "validation"  # Invalid arguments
    RUNTIME = "runtime"  # Unexpected errors


@dataclass
class CodeStyleError(Exception):
    """Base class for structured errors with recovery suggestions.

    Attributes:
        category: Error category for grouping.
        message: Human-readable error message.
        suggestion: Optional actionable recovery suggestion.
        details: Optional additional details dict.
        exit_code: Exit code to use when this error causes termination.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)
    exit_code: int = 1

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        """Format the error for display.

        Args:
            use_color: Whether to include ANSI color codes.

        Returns:
            Formatted error string with suggestion if available.
        """
        red = "\033[91m" if use_color else ""
        cyan = "\033[96m" if use_color else ""
        dim = "\033[2m" if use_color else ""
        reset = "\033[0m" if use_color else ""

        lines = [f"{red}Error:{reset} {self.message}"]

        if self.suggestion:
            lines.append(f"{cyan}Suggestion:{reset} {self.suggestion}")

        if self.details:
            for key, value in self.details.items():
                lines.append(f"{dim}  {key}: {value}{reset}")

        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format(use_color=False)


class SourceParseError(CodeStyleError):
    """A file could not be parsed; fatal for that file only."""

    def __init__(self, file_path: str, line: int | None = None, column: int | None = None):
        location = f"{file_path}:{line}:{column}" if line is not None else file_path
        super().__init__(
            category=ErrorCategory.PARSE,
            message=f"Syntax error in {location}",
            suggestion="Fix the syntax error before running style checks",
            details={"file": file_path},
            exit_code=1,
        )
        self.file_path = file_path
        self.line = line
        self.column = column


class PathNotFoundError(CodeStyleError):
    """A path given on the command line does not exist."""

    def __init__(self, path: str):
        super().__init__(
            category=ErrorCategory.FILE_SYSTEM,
            message=f"Path not found: {path}",
            suggestion="Verify the path exists and you have read permissions",
            details={"path": path},
            exit_code=2,
        )


class FileAccessError(CodeStyleError):
    """A source file could not be read or written."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            category=ErrorCategory.FILE_SYSTEM,
            message=f"Cannot access {path}: {reason}",
            suggestion="Check file permissions and encoding (UTF-8 expected)",
            details={"path": path},
            exit_code=1,
        )


class ConfigurationError(CodeStyleError):
    """Error in a configuration file or settings."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        suggestion: str | None = None,
    ):
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion=suggestion or "Check your configuration file syntax and rule options",
            details={"config_file": config_file} if config_file else None,
            exit_code=2,
        )


class RuleOptionsError(ConfigurationError):
    """Options for a rule failed schema validation."""

    def __init__(self, rule_id: str, reason: str):
        super().__init__(
            message=f"Invalid options for rule {rule_id}: {reason}",
            suggestion=f"Run 'code-style rules --rule {rule_id}' to see accepted options",
        )
        self.rule_id = rule_id


def handle_exception(
    error: Exception,
    use_color: bool = True,
    verbose: bool = False,
) -> tuple[str, int]:
    """Convert any exception to formatted output and exit code.

    Args:
        error: The exception to handle.
        use_color: Whether to use color in output.
        verbose: Whether to include full traceback.

    Returns:
        Tuple of (formatted_message, exit_code).
    """
    import traceback

    if isinstance(error, CodeStyleError):
        message = error.format(use_color=use_color)
        exit_code = error.exit_code
    else:
        red = "\033[91m" if use_color else ""
        reset = "\033[0m" if use_color else ""
        message = f"{red}Error:{reset} {error}"
        exit_code = 1

    if verbose:
        message += "\n\nTraceback:\n" + traceback.format_exc()

    return message, exit_code
