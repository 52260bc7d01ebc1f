"""Click-based CLI for the style checker."""

import sys
import time
from pathlib import Path
from typing import Any

import click

from . import __version__
from .driver import run_files
from .errors import CodeStyleError, ErrorCategory, handle_exception
from .output import OutputConfig, OutputManager
from .rules.config import RuleEngineConfigLoader
from .rules.engine import create_rule_engine
from .style_logging import setup_logging


def common_options(f: Any) -> Any:
    """Output and configuration options shared by every command."""
    f = click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")(f)
    f = click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")(f)
    f = click.option("--no-color", is_flag=True, help="Disable colored output")(f)
    f = click.option(
        "--config",
        "config_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Configuration file path",
    )(f)
    return f


def _setup(verbose: bool, quiet: bool, no_color: bool, log_file: Path | None = None) -> OutputManager:
    if quiet and verbose:
        raise click.UsageError("--quiet and --verbose are mutually exclusive")
    setup_logging(quiet=quiet, verbose=verbose, log_file=log_file)
    return OutputManager(OutputConfig.from_flags(verbose=verbose, quiet=quiet, no_color=no_color))


def _fail(output: OutputManager, error: Exception, verbose: bool) -> None:
    message, exit_code = handle_exception(error, use_color=output.config.use_color, verbose=verbose)
    click.echo(message, err=True)
    sys.exit(exit_code)


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Naming, structure and formatting conventions for React codebases."""


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@common_options
@click.option("--fix", is_flag=True, help="Apply fixes and write the files back")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Report format",
)
@click.option("--max-iterations", type=click.IntRange(min=1), help="Cap on fix iterations per file")
@click.option("--rule", "rule_ids", multiple=True, help="Only run this rule (repeatable)")
@click.option("--log-file", type=click.Path(path_type=Path), help="Also log to this file")
def check(
    paths: tuple[Path, ...],
    verbose: bool,
    quiet: bool,
    no_color: bool,
    config_file: Path | None,
    fix: bool,
    output_format: str,
    max_iterations: int | None,
    rule_ids: tuple[str, ...],
    log_file: Path | None,
) -> None:
    """Check PATHS (files or directories) and optionally fix them."""
    output = _setup(verbose, quiet, no_color, log_file)
    start_time = time.perf_counter()

    try:
        config = RuleEngineConfigLoader(Path.cwd()).load(config_file)
        # Validates every configured options block before any file is touched
        engine = create_rule_engine(config)
        known = {rule.rule_id for rule in engine.get_all_rules()}
        unknown = [rid for rid in rule_ids if rid not in known]
        if unknown:
            raise CodeStyleError(
                category=ErrorCategory.VALIDATION,
                message=f"Unknown or disabled rule: {', '.join(unknown)}",
                suggestion="Run 'code-style rules' to list available rules",
                exit_code=2,
            )

        results = run_files(
            paths,
            config=config,
            fix=fix,
            write=fix,
            max_iterations=max_iterations,
            rule_ids=rule_ids or None,
            engine=engine,
        )
    except CodeStyleError as e:
        _fail(output, e, verbose)
        return

    if output_format == "json":
        output.json_report(results)
    else:
        for result in results:
            output.file_result(result)
        output.summary(
            total=len(results),
            changed=sum(1 for r in results if r.changed),
            findings=sum(len(r.findings) for r in results),
            failed=sum(1 for r in results if r.error is not None),
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )

    if any(r.should_fail(config.fail_on_severity) for r in results):
        sys.exit(1)


@cli.command()
@common_options
@click.option("--rule", "rule_id", help="Show one rule with its options")
@click.option("--category", help="Only list rules in this category")
def rules(
    verbose: bool,
    quiet: bool,
    no_color: bool,
    config_file: Path | None,
    rule_id: str | None,
    category: str | None,
) -> None:
    """List available rules."""
    output = _setup(verbose, quiet, no_color)
    try:
        engine = create_rule_engine(RuleEngineConfigLoader(Path.cwd()).load(config_file))
    except CodeStyleError as e:
        _fail(output, e, verbose)
        return

    selected = engine.get_rules_by_category(category) if category else engine.get_all_rules()
    if rule_id:
        selected = [r for r in selected if r.rule_id == rule_id]
        if not selected:
            output.error(f"Unknown or disabled rule: {rule_id}")
            sys.exit(2)

    for rule in sorted(selected, key=lambda r: r.rule_id):
        severity = rule.get_severity(
            engine.config.get_rule_config(rule.rule_id),
            engine.config.get_category_config(rule.category),
        )
        fixable = "fixable" if rule.can_auto_fix() else "report-only"
        output.plain(f"{rule.rule_id:<40} {severity.value:<8} {fixable}", force=True)
        if verbose or rule_id:
            output.plain(f"    {rule.description}", force=True)
            for name, info in rule.options_model.model_fields.items():
                default = info.get_default(call_default_factory=True)
                output.plain(f"    option {info.alias or name} = {default!r}", force=True)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
