"""
Driver: the parse -> index -> find -> fix loop.

Each iteration re-parses the current text, rebuilds the scope index
from scratch, runs every rule in one traversal, synthesizes fixes for
the findings, drops overlapping fixes (first writer wins) and applies
the rest. The loop stops when no fix changes the text or when the
iteration cap is hit; fixes that lost a conflict are retried on the
next iteration against the re-parsed text.
"""

import logging
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .analysis.scope import ScopeIndex
from .analysis.source import SUPPORTED_EXTENSIONS, SourceModel
from .errors import CodeStyleError, ErrorCategory, FileAccessError, PathNotFoundError, SourceParseError
from .fs import FileSystem
from .rules.base import Finding, RuleContext, Severity
from .rules.config import RuleEngineConfig
from .rules.engine import RuleEngine, RuleError, create_rule_engine
from .rules.fix import FixError, FixSynthesizer, apply_edits
from .tailwind import ClassOrderer

logger = logging.getLogger(__name__)

# Directories never descended into when collecting files
SKIP_DIRECTORIES = frozenset({"node_modules", "dist", "build", "coverage", "out"})


@dataclass
class FileResult:
    """Outcome of driving one file to its fixed point."""

    file_path: str
    original_text: str
    text: str
    iterations: int = 0
    applied_fixes: int = 0
    findings: list[Finding] = field(default_factory=list)
    errors: list[RuleError] = field(default_factory=list)
    error: CodeStyleError | None = None
    fixpoint_reached: bool = True
    execution_time_ms: float = 0.0

    @property
    def changed(self) -> bool:
        return self.text != self.original_text

    @property
    def parse_error(self) -> SourceParseError | None:
        return self.error if isinstance(self.error, SourceParseError) else None

    def should_fail(self, threshold: Severity = Severity.MEDIUM) -> bool:
        """File-level failure, or a remaining finding at or above threshold."""
        if self.error is not None:
            return True
        return any(f.severity >= threshold for f in self.findings)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "file_path": self.file_path,
            "changed": self.changed,
            "iterations": self.iterations,
            "applied_fixes": self.applied_fixes,
            "fixpoint_reached": self.fixpoint_reached,
            "execution_time_ms": self.execution_time_ms,
            "error": self.error.message if self.error is not None else None,
            "findings": [f.to_dict() for f in self.findings],
            "rule_errors": [e.to_dict() for e in self.errors],
        }


def _manual(findings: list[Finding]) -> list[Finding]:
    for finding in findings:
        finding.fix = None
    return findings


class Driver:
    """Runs the rule engine over one file until its fixes converge.

    Example usage:
        driver = Driver()
        result = driver.run_text("const user_name = 'a';", "src/app.js")
        result.text  # "const userName = 'a';"
    """

    def __init__(
        self,
        engine: RuleEngine | None = None,
        config: RuleEngineConfig | None = None,
        fix: bool = True,
        max_iterations: int | None = None,
        file_system: FileSystem | None = None,
        class_orderer: ClassOrderer | None = None,
        rule_ids: Iterable[str] | None = None,
    ):
        """Initialize the driver.

        Args:
            engine: Rule engine to use; a fresh one with all rules by default
            config: Configuration for the default engine
            fix: Apply fixes; False runs a single report-only pass
            max_iterations: Iteration cap, overriding the configured one
            file_system: Directory lister for folder checks
            class_orderer: Utility-class ordering policy
            rule_ids: Restrict the run to these rules
        """
        self.engine = engine or create_rule_engine(config)
        self.fix = fix
        self.max_iterations = max_iterations or self.engine.config.driver.max_iterations
        self.file_system = file_system
        self.class_orderer = class_orderer
        self.rule_ids = list(rule_ids) if rule_ids else None

    def _context(self, text: str, file_path: Path) -> RuleContext:
        source = SourceModel.parse(text, file_path)
        kwargs: dict[str, Any] = {}
        if self.file_system is not None:
            kwargs["file_system"] = self.file_system
        if self.class_orderer is not None:
            kwargs["class_orderer"] = self.class_orderer
        return RuleContext(source=source, scope=ScopeIndex.build(source), **kwargs)

    def _analyze(self, text: str, file_path: Path) -> tuple[RuleContext, list[Finding], list[RuleError]]:
        context = self._context(text, file_path)
        engine_result = self.engine.run(context, rule_ids=self.rule_ids)
        return context, engine_result.findings, engine_result.errors

    def run_text(self, text: str, file_path: Path | str) -> FileResult:
        """Drive text (as if stored at file_path) to its fixed point.

        Returns:
            FileResult with the final text and the findings that remain.
        """
        file_path = Path(file_path)
        start_time = time.perf_counter()
        result = FileResult(file_path=str(file_path), original_text=text, text=text)

        current = text
        previous: tuple[str, list[Finding], list[RuleError]] | None = None
        converged = False

        for iteration in range(1, self.max_iterations + 1):
            result.iterations = iteration
            try:
                context, findings, errors = self._analyze(current, file_path)
            except SourceParseError as e:
                if previous is None:
                    logger.error(f"Skipping {file_path}: {e.message}", extra={"file_path": str(file_path)})
                    result.error = e
                    break
                # A fix produced text that no longer parses; keep the last good text
                logger.error(
                    f"Fixes for {file_path} produced unparseable text ({e.message}); "
                    f"reverting to the text of iteration {iteration - 1}",
                    extra={"file_path": str(file_path), "iteration": iteration},
                )
                current, findings, errors = previous
                result.findings, result.errors = _manual(findings), errors
                converged = True
                result.fixpoint_reached = False
                break

            result.findings, result.errors = findings, errors
            if not self.fix:
                converged = True
                break

            synthesizer = FixSynthesizer(context.source, context.scope)
            candidates = []
            for finding in findings:
                fix = synthesizer.synthesize(finding)
                if fix is not None:
                    candidates.append((finding, fix))
            if not candidates:
                converged = True
                break

            resolution = synthesizer.resolve_conflicts(candidates)
            try:
                updated = apply_edits(current, resolution.edits)
            except FixError as e:
                logger.warning(f"Could not apply fixes to {file_path}: {e}")
                _manual(findings)
                converged = True
                result.fixpoint_reached = False
                break
            if updated == current:
                converged = True
                break

            logger.debug(
                f"{file_path}: iteration {iteration} applied {len(resolution.accepted)} fixes, "
                f"deferred {len(resolution.deferred)}",
                extra={"file_path": str(file_path), "iteration": iteration},
            )
            previous = (current, findings, errors)
            current = updated
            result.applied_fixes += len(resolution.accepted)

        if not converged and result.error is None:
            logger.warning(
                f"Fixpoint not reached for {file_path} after {self.max_iterations} iterations",
                extra={"file_path": str(file_path), "iteration": self.max_iterations},
            )
            result.fixpoint_reached = False
            try:
                _, findings, errors = self._analyze(current, file_path)
            except SourceParseError as e:
                logger.error(f"Final text for {file_path} does not parse ({e.message}); reverting")
                if previous is not None:
                    current, findings, errors = previous
                else:
                    findings, errors = result.findings, result.errors
            result.findings, result.errors = _manual(findings), errors

        result.text = current
        result.execution_time_ms = (time.perf_counter() - start_time) * 1000
        return result

    def run(self, path: Path | str, write: bool = False) -> FileResult:
        """Drive a file on disk, optionally writing the fixed text back."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read {path}: {e}")
            return FileResult(
                file_path=str(path), original_text="", text="", error=FileAccessError(str(path), str(e))
            )

        result = self.run_text(text, path)
        if write and result.changed:
            try:
                path.write_text(result.text, encoding="utf-8")
                logger.info(f"Wrote {result.applied_fixes} fixes to {path}")
            except OSError as e:
                logger.error(f"Cannot write {path}: {e}")
                result.error = FileAccessError(str(path), str(e))
        return result


def collect_files(paths: Iterable[Path | str]) -> list[Path]:
    """Expand files and directories into supported source files.

    Raises:
        PathNotFoundError: If a given path does not exist.
    """
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise PathNotFoundError(str(path))
        if path.is_file():
            files.append(path)
            continue
        for candidate in sorted(path.rglob("*")):
            relative = candidate.relative_to(path).parts
            if any(part in SKIP_DIRECTORIES or part.startswith(".") for part in relative[:-1]):
                continue
            if candidate.is_file() and candidate.suffix in SUPPORTED_EXTENSIONS:
                files.append(candidate)
    return list(dict.fromkeys(files))


def run_files(
    paths: Iterable[Path | str],
    config: RuleEngineConfig | None = None,
    fix: bool = True,
    write: bool = False,
    parallel: bool | None = None,
    max_workers: int | None = None,
    max_iterations: int | None = None,
    rule_ids: Iterable[str] | None = None,
    engine: RuleEngine | None = None,
) -> list[FileResult]:
    """Drive many files; each gets its own Driver and engine.

    Rules are discovered and their options validated once; every file
    then runs on a fork of that engine. Results are returned in input
    order.
    """
    if engine is not None:
        config = engine.config
    config = config or RuleEngineConfig()
    files = collect_files(paths)
    rule_ids = list(rule_ids) if rule_ids else None
    parallel = config.driver.parallel_files if parallel is None else parallel
    max_workers = max_workers or config.driver.max_workers
    base_engine = engine or create_rule_engine(config)

    def process(path: Path) -> FileResult:
        driver = Driver(
            engine=base_engine.fork(), fix=fix, max_iterations=max_iterations, rule_ids=rule_ids
        )
        return driver.run(path, write=write)

    if not parallel or len(files) <= 1:
        return [process(path) for path in files]

    results: dict[Path, FileResult] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_file = {executor.submit(process, path): path for path in files}
        for future in as_completed(future_to_file):
            path = future_to_file[future]
            try:
                results[path] = future.result()
            except CodeStyleError:
                raise
            except Exception as e:
                logger.error(f"Error processing {path}: {e}")
                results[path] = FileResult(
                    file_path=str(path),
                    original_text="",
                    text="",
                    error=CodeStyleError(category=ErrorCategory.RUNTIME, message=str(e)),
                )
    return [results[path] for path in files]
