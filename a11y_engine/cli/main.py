"""Click-based CLI for the accessibility engine."""

import json
import sys
from pathlib import Path
from typing import Any

import click

from ..checkers.base import BaseChecker
from ..checkers.registry import create_default_registry
from ..config import EngineConfig, load_engine_config
from ..dom.document import COLOR_SCHEMES, LiveDocument
from ..engine_logging import LogCategory, get_category_logger, setup_logging
from ..errors import ConfigurationError, RenderError
from ..models import AccessibilityIssue, Severity, sort_issues
from ..reporters import SARIFExporter, summarize, to_json
from .errors import (
    CLIError,
    InvalidConfigError,
    RenderFailedError,
    SourceNotFoundError,
    UnknownCheckerError,
)
from .output import OutputConfig, OutputManager

logger = get_category_logger(LogCategory.CLI)

SEVERITY_CHOICES = [s.value for s in Severity]


def common_options(f: Any) -> Any:
    """Logging and output options shared by commands."""
    f = click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")(f)
    f = click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")(f)
    f = click.option("--no-color", is_flag=True, help="Disable colored output")(f)
    return f


@click.group()
@click.version_option(version="0.1.0", prog_name="a11y-engine")
def cli() -> None:
    """Accessibility checks for HTML documents."""


def _load_config(config_path: str | None, color_scheme: str | None) -> EngineConfig:
    try:
        return load_engine_config(
            Path(config_path) if config_path else None, color_scheme=color_scheme
        )
    except ConfigurationError as e:
        raise InvalidConfigError(str(e), e.config_file) from e


def _load_document(source: str, render: bool, config: EngineConfig) -> LiveDocument:
    if render:
        from ..dom.playwright_loader import render_document

        path = Path(source)
        url = path.resolve().as_uri() if path.exists() else source
        try:
            return render_document(
                url,
                color_scheme=config.color_scheme,
                timeout_ms=config.render_timeout_ms,
            )
        except (ImportError, RenderError) as e:
            raise RenderFailedError(str(e), url) from e

    path = Path(source)
    if not path.is_file():
        raise SourceNotFoundError(source)
    url = config.reporting.page_url or path.resolve().as_uri()
    return LiveDocument.from_html(
        path.read_text(encoding="utf-8"), url=url, color_scheme=config.color_scheme
    )


def _select_checkers(registry, checker_ids: tuple[str, ...]) -> list[BaseChecker]:
    if not checker_ids:
        return registry.get_all()
    selected = []
    for checker_id in checker_ids:
        checker = registry.get(checker_id)
        if checker is None:
            raise UnknownCheckerError(checker_id, [c.checker_id for c in registry.get_all()])
        selected.append(checker)
    return selected


def _exceeds(issues: list[AccessibilityIssue], threshold: Severity) -> bool:
    return any(
        isinstance(issue.severity, Severity) and issue.severity >= threshold
        for issue in issues
    )


@cli.command()
@click.argument("source")
@click.option(
    "--checker",
    "-c",
    "checker_ids",
    multiple=True,
    help="Checker id to run (repeatable); all checkers when omitted",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "sarif"]),
    default="text",
    show_default=True,
    help="Report format",
)
@click.option(
    "--color-scheme",
    type=click.Choice(list(COLOR_SCHEMES)),
    default=None,
    help="Color scheme to audit under",
)
@click.option("--render", is_flag=True, help="Render SOURCE in Chromium first")
@click.option(
    "--annotated-output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the annotated document to this path",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(),
    default=None,
    help="Configuration file path",
)
@click.option(
    "--fail-on",
    type=click.Choice(SEVERITY_CHOICES, case_sensitive=False),
    default=None,
    help="Exit with status 1 when an issue at or above this severity is found",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write logs to this file",
)
@common_options
def audit(
    source: str,
    checker_ids: tuple[str, ...],
    output_format: str,
    color_scheme: str | None,
    render: bool,
    annotated_output: str | None,
    config_path: str | None,
    fail_on: str | None,
    log_file: str | None,
    verbose: bool,
    quiet: bool,
    no_color: bool,
) -> None:
    """Audit an HTML file (or a URL with --render).

    Examples:
        a11y-engine audit page.html
        a11y-engine audit page.html -c heading-order --format json
        a11y-engine audit https://example.com --render --format sarif
    """
    setup_logging(
        quiet=quiet,
        verbose=verbose,
        log_file=Path(log_file) if log_file else None,
    )
    output = OutputManager(OutputConfig.from_flags(verbose=verbose, quiet=quiet, no_color=no_color))

    try:
        config = _load_config(config_path, color_scheme)
        threshold = (
            Severity.parse(fail_on) if fail_on else config.reporting.fail_on_severity
        )
        document = _load_document(source, render, config)
        registry = create_default_registry(document, config)
        checkers = _select_checkers(registry, checker_ids)
    except CLIError as e:
        output.error(e.format(use_color=output.config.use_color))
        sys.exit(e.exit_code)

    issues: list[AccessibilityIssue] = []
    applied: list[BaseChecker] = []
    for checker in checkers:
        result = checker.run("apply")
        if not result.success:
            logger.debug(f"{checker.checker_id}: nothing to check")
            continue
        issues.extend(checker.diagnostics)
        if annotated_output:
            applied.append(checker)
        else:
            # Later checkers must see the document without these annotations
            checker.run("cleanup")

    if annotated_output:
        Path(annotated_output).write_text(document.serialize(), encoding="utf-8")
        logger.info(f"Wrote annotated document to {annotated_output}")

    # Snapshots nest, so restore in reverse
    for checker in reversed(applied):
        checker.run("cleanup")

    issues = sort_issues(issues)
    failed = _exceeds(issues, threshold)

    if output_format == "json":
        output.plain(to_json(issues, url=document.url), force=True)
    elif output_format == "sarif":
        output.plain(json.dumps(SARIFExporter().export(issues), indent=2), force=True)
    else:
        _display_text_report(output, checkers, issues)
        output.summary(summarize(issues), failed)

    sys.exit(1 if failed else 0)


def _display_text_report(
    output: OutputManager,
    checkers: list[BaseChecker],
    issues: list[AccessibilityIssue],
) -> None:
    output.header("Accessibility Audit")
    for checker in checkers:
        found = [issue for issue in issues if issue.agent_id == checker.checker_id]
        if not found:
            output.success(f"{checker.name}: no issues")
            continue
        output.warning(f"{checker.name}: {len(found)} issue(s)", force=True)
        for issue in found:
            output.issue(issue)


@cli.command("list-checkers")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_checkers(as_json: bool) -> None:
    """List available checkers and their categories."""
    registry = create_default_registry(LiveDocument.from_html(""))
    rows = [
        {
            "id": checker.checker_id,
            "name": checker.name,
            "category": registry.category_of(checker.checker_id),
            "rule": checker.rule_id,
        }
        for checker in registry.get_all()
    ]
    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return
    for category, checker_ids in registry.categories().items():
        click.echo(click.style(category, bold=True))
        for row in rows:
            if row["id"] in checker_ids:
                click.echo(f"  {row['id']:<20} {row['name']} ({row['rule']})")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
