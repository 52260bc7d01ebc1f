"""
Shared fixtures for the code_style test suite.

Provides test fixtures for:
- Parsing sources and building scope indexes
- Running a single rule through the engine
- Driving text through the fix loop
- In-memory and on-disk React project trees
"""

import logging
from collections.abc import Callable
from pathlib import Path, PurePosixPath

import pytest

from code_style.analysis.scope import ScopeIndex
from code_style.analysis.source import SourceModel
from code_style.driver import Driver, FileResult
from code_style.fs import DirectoryEntry
from code_style.rules.base import BaseRule, Finding, RuleContext
from code_style.rules.config import RuleEngineConfig
from code_style.rules.engine import RuleEngine
from code_style.style_logging import ROOT_LOGGER


class FakeFileSystem:
    """In-memory directory tree built from a list of file paths.

    Example:
        fs = FakeFileSystem(["src/atoms/input.tsx", "src/atoms/button/index.tsx"])
        fs.list_children(Path("src/atoms"))  # button/, input.tsx
    """

    def __init__(self, files: list[str]):
        self._children: dict[str, dict[str, bool]] = {}
        for file in files:
            parts = PurePosixPath(file).parts
            for depth in range(len(parts)):
                parent = "/".join(parts[:depth])
                is_dir = depth < len(parts) - 1
                self._children.setdefault(parent, {})[parts[depth]] = is_dir

    def list_children(self, path: Path) -> list[DirectoryEntry]:
        children = self._children.get("/".join(Path(path).parts), {})
        return [
            DirectoryEntry(name=name, is_dir=is_dir, is_file=not is_dir)
            for name, is_dir in sorted(children.items())
        ]


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_package_logger():
    """CLI runs install handlers on the package logger; undo that after each test."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Parsing fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def parse() -> Callable[..., SourceModel]:
    """Factory: parse text as if stored at path."""

    def _parse(text: str, path: str = "src/app.tsx") -> SourceModel:
        return SourceModel.parse(text, Path(path))

    return _parse


@pytest.fixture
def build_scope(parse) -> Callable[..., ScopeIndex]:
    """Factory: parse text and build its scope index."""

    def _build(text: str, path: str = "src/app.tsx") -> ScopeIndex:
        return ScopeIndex.build(parse(text, path))

    return _build


@pytest.fixture
def make_context() -> Callable[..., RuleContext]:
    """Factory: a RuleContext with default configuration."""

    def _make(text: str, path: str = "src/app.tsx", **kwargs) -> RuleContext:
        kwargs.setdefault("config", RuleEngineConfig())
        return RuleContext.from_text(text, Path(path), **kwargs)

    return _make


# ---------------------------------------------------------------------------
# Rule fixtures
# ---------------------------------------------------------------------------


def engine_for(rule: BaseRule, options: dict | None = None) -> RuleEngine:
    """An engine with exactly one registered rule."""
    config = RuleEngineConfig()
    if options:
        config = RuleEngineConfig.from_dict({"rules": {rule.rule_id: {"options": options}}})
    engine = RuleEngine(config=config)
    engine.register(rule)
    return engine


@pytest.fixture
def run_rule(make_context) -> Callable[..., list[Finding]]:
    """Factory: findings of one rule over text."""

    def _run(
        rule: BaseRule,
        text: str,
        path: str = "src/app.tsx",
        options: dict | None = None,
        **context_kwargs,
    ) -> list[Finding]:
        engine = engine_for(rule, options)
        context = make_context(text, path, config=engine.config, **context_kwargs)
        result = engine.run(context)
        assert not result.errors, result.errors
        return result.findings

    return _run


@pytest.fixture
def fix_text() -> Callable[..., FileResult]:
    """Factory: drive text to its fixed point with one rule (or all rules)."""

    def _fix(
        text: str,
        path: str = "src/app.tsx",
        rule: BaseRule | None = None,
        options: dict | None = None,
        **driver_kwargs,
    ) -> FileResult:
        if rule is not None:
            driver_kwargs.setdefault("engine", engine_for(rule, options))
        driver_kwargs.setdefault("file_system", FakeFileSystem([]))
        return Driver(**driver_kwargs).run_text(text, path)

    return _fix


# ---------------------------------------------------------------------------
# Project tree fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def react_project(tmp_path) -> Callable[[dict[str, str]], Path]:
    """Factory: write {relative path: content} under tmp_path/project."""

    def _create(files: dict[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _create


@pytest.fixture
def fake_fs() -> Callable[[list[str]], FakeFileSystem]:
    """Factory: an in-memory FileSystem holding the given files."""
    return FakeFileSystem
