"""Unit tests for code_style.rules.engine module."""

from code_style.rules.base import BaseRule, Finding, RuleContext, Severity
from code_style.rules.config import RuleConfig, RuleEngineConfig
from code_style.rules.engine import (
    RuleEngine,
    RuleEngineResult,
    RuleError,
    create_rule_engine,
)


class MockRule(BaseRule):
    """A rule reporting every identifier whose text is in ``names``."""

    def __init__(
        self,
        rule_id: str = "TEST.MOCK",
        category: str = "naming",
        names: tuple[str, ...] = ("bad",),
        supported_languages: list[str] | None = None,
        file_findings: int = 0,
    ):
        self._rule_id = rule_id
        self._category = category
        self._names = names
        self._supported_languages = supported_languages
        self._file_findings = file_findings
        self.visited = 0

    @property
    def rule_id(self) -> str:
        return self._rule_id

    @property
    def name(self) -> str:
        return "Mock Rule"

    @property
    def category(self) -> str:
        return self._category

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def supported_languages(self) -> list[str] | None:
        return self._supported_languages

    def visitors(self):
        return {"identifier": self._check}

    def _check(self, node, context):
        self.visited += 1
        if context.source.text_of(node) in self._names:
            return [self._create_finding(summary="mock", context=context, node=node)]
        return []

    def check(self, context: RuleContext) -> list[Finding]:
        return [
            self._create_finding(summary="file", context=context) for _ in range(self._file_findings)
        ]


class FailingRule(MockRule):
    """A rule whose handler raises on the first identifier."""

    def _check(self, node, context):
        self.visited += 1
        raise RuntimeError("handler exploded")


class LateFailingRule(MockRule):
    """Reports ``a``, then raises on ``b``."""

    def _check(self, node, context):
        if context.source.text_of(node) == "b":
            raise RuntimeError("handler exploded")
        return [self._create_finding(summary="f", context=context, node=node)]


class TestRegistration:
    """Registering, unregistering and selecting rules."""

    def test_register_and_lookup(self):
        engine = RuleEngine()
        rule = MockRule()
        assert engine.register(rule)
        assert engine.get_rule("TEST.MOCK") is rule
        assert engine.get_rules_by_category("naming") == [rule]
        assert engine.unregister("TEST.MOCK")
        assert engine.get_rule("TEST.MOCK") is None
        assert not engine.unregister("TEST.MOCK")

    def test_disabled_rule_is_not_registered(self):
        config = RuleEngineConfig(rules={"TEST.MOCK": RuleConfig(enabled=False)})
        engine = RuleEngine(config=config)
        assert not engine.register(MockRule())
        assert engine.get_all_rules() == []

    def test_load_rules_discovers_builtin_rules(self):
        engine = create_rule_engine()
        ids = {rule.rule_id for rule in engine.get_all_rules()}
        assert "NAMING.VARIABLE_NAMING" in ids
        assert "STRUCTURE.FOLDER_STRUCTURE" in ids
        assert "FORMATTING.CLASS_NAME_ORDER" in ids
        assert len(ids) == 13

    def test_fork_keeps_rules_and_options(self):
        config = RuleEngineConfig.from_dict(
            {"rules": {"NAMING.PROP_NAMING": {"options": {"callbackPrefix": "handle"}}}}
        )
        engine = create_rule_engine(config)
        forked = engine.fork()

        assert forked.config is engine.config
        assert {r.rule_id for r in forked.get_all_rules()} == {
            r.rule_id for r in engine.get_all_rules()
        }
        # Discovered rules are fresh instances; validated options are shared
        assert forked.get_rule("NAMING.PROP_NAMING") is not engine.get_rule("NAMING.PROP_NAMING")
        assert forked._options["NAMING.PROP_NAMING"] is engine._options["NAMING.PROP_NAMING"]

    def test_fork_reuses_registered_instances(self):
        engine = RuleEngine()
        rule = MockRule()
        engine.register(rule)
        assert engine.fork().get_rule("TEST.MOCK") is rule


class TestRun:
    """The shared traversal."""

    def test_findings_sorted_by_anchor_then_rule(self, make_context):
        engine = RuleEngine()
        engine.register(MockRule("TEST.B", names=("x", "y")))
        engine.register(MockRule("TEST.A", names=("y",)))
        result = engine.run(make_context("log(y, x);", "a.js"))
        assert [(f.start, f.rule_id) for f in result.findings] == [
            (4, "TEST.A"),
            (4, "TEST.B"),
            (7, "TEST.B"),
        ]

    def test_file_level_findings_sort_first(self, make_context):
        engine = RuleEngine()
        engine.register(MockRule(file_findings=1))
        result = engine.run(make_context("log(bad);", "a.js"))
        assert result.findings[0].anchor is None
        assert result.findings[1].anchor == (4, 7)

    def test_single_traversal_calls_each_handler_per_node(self, make_context):
        engine = RuleEngine()
        first, second = MockRule("TEST.A"), MockRule("TEST.B")
        engine.register(first)
        engine.register(second)
        engine.run(make_context("a(b, c);", "a.js"))
        assert first.visited == second.visited == 3

    def test_rule_filters(self, make_context):
        engine = RuleEngine()
        engine.register(MockRule("TEST.A"))
        engine.register(MockRule("TEST.B", category="formatting"))
        context = make_context("bad;", "a.js")
        assert {f.rule_id for f in engine.run(context, rule_ids=["TEST.B"]).findings} == {"TEST.B"}
        context = make_context("bad;", "a.js")
        assert {f.rule_id for f in engine.run(context, categories=["naming"]).findings} == {"TEST.A"}

    def test_language_filter(self, make_context):
        engine = RuleEngine()
        engine.register(MockRule(supported_languages=["tsx"]))
        result = engine.run(make_context("bad;", "a.js"))
        assert result.findings == []
        assert result.rules_skipped == 1

    def test_failing_handler_is_isolated(self, make_context):
        engine = RuleEngine()
        failing = FailingRule("TEST.FAIL")
        engine.register(failing)
        engine.register(MockRule("TEST.OK"))
        result = engine.run(make_context("bad(bad);", "a.js"))

        assert [f.rule_id for f in result.findings] == ["TEST.OK", "TEST.OK"]
        assert len(result.errors) == 1
        error = result.errors[0]
        assert isinstance(error, RuleError)
        assert error.rule_id == "TEST.FAIL"
        assert error.exception_type == "RuntimeError"
        # Disabled for the rest of the file after the first failure
        assert failing.visited == 1

    def test_failed_rule_drops_earlier_findings(self, make_context):
        """Findings made before the failure are discarded with the check."""
        engine = RuleEngine()
        engine.register(LateFailingRule("TEST.LATE"))
        result = engine.run(make_context("a; b; c;", "a.js"))

        assert result.findings == []
        assert result.rule_results["TEST.LATE"].findings == []
        assert [e.rule_id for e in result.errors] == ["TEST.LATE"]

    def test_stop_on_error_when_configured(self, make_context):
        engine = RuleEngine(config=RuleEngineConfig(continue_on_error=False))
        engine.register(FailingRule("TEST.A"))
        engine.register(MockRule("TEST.B"))
        result = engine.run(make_context("bad(bad);", "a.js"))
        assert len(result.errors) == 1
        assert len(result.findings) < 2


class TestRuleEngineResult:
    """Result aggregation."""

    def test_counts_and_blocking(self):
        findings = [
            Finding(rule_id="A", severity=Severity.LOW, summary="", file_path="a.js"),
            Finding(rule_id="B", severity=Severity.HIGH, summary="", file_path="a.js"),
        ]
        result = RuleEngineResult(findings=findings)
        assert result.low_count == 1
        assert result.high_count == 1
        assert result.should_block(Severity.MEDIUM)
        assert not result.should_block(Severity.CRITICAL)
        assert result.to_dict()["summary"]["total_findings"] == 2
        assert result.get_findings_by_rule("B") == [findings[1]]
