"""CLI entry point for oas-diff."""

import logging
import sys
from pathlib import Path

import click

from oas_diff.diff.changes import ComparisonResult
from oas_diff.diff.engine import ComparisonEngine
from oas_diff.errors import ComparisonError, SpecLoadError
from oas_diff.parser.convert import convert as convert_content
from oas_diff.parser.detect import SpecFormat, detect_format, detect_format_from_location
from oas_diff.parser.openapi import DEFAULT_TIMEOUT, read_source
from oas_diff.report.payload import to_json
from oas_diff.report.text import TextReportGenerator, summary

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CommandFailed(click.ClickException):
    """A document could not be processed; distinct from the breaking-change exit code."""

    exit_code = 2


def _run(old: str, new: str, timeout: float) -> ComparisonResult:
    engine = ComparisonEngine(timeout=timeout)
    try:
        return engine.compare_locations(old, new)
    except (SpecLoadError, ComparisonError) as e:
        raise CommandFailed(str(e)) from e


def _render(result: ComparisonResult, fmt: str) -> str:
    if fmt == "json":
        return to_json(result)
    if fmt == "summary":
        return summary(result)
    return TextReportGenerator().generate(result)


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    envvar="OAS_DIFF_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity (logs go to stderr).",
)
def main(log_level: str):
    """oas-diff: detect breaking changes between two OpenAPI documents."""
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, force=True)


@main.command()
@click.argument("old")
@click.argument("new")
@click.option("--format", "fmt", default="text", type=click.Choice(["text", "json", "summary"]), help="Report format.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the report to a file instead of stdout.")
@click.option("--fail-on-breaking", is_flag=True, help="Exit with status 1 when breaking changes are found.")
@click.option("--timeout", default=DEFAULT_TIMEOUT, show_default=True, type=float, help="Timeout in seconds for URL locations.")
def compare(old: str, new: str, fmt: str, output: Path | None, fail_on_breaking: bool, timeout: float):
    """Compare OLD and NEW (file paths or http(s) URLs) and print a report."""
    result = _run(old, new, timeout)
    report = _render(result, fmt)

    if output is None:
        click.echo(report, nl=not report.endswith("\n"))
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(report, encoding="utf-8")
        click.echo(f"Report saved to {output}")

    if fail_on_breaking and result.has_breaking_changes:
        sys.exit(1)


@main.command()
@click.argument("old")
@click.argument("new")
@click.option("--timeout", default=DEFAULT_TIMEOUT, show_default=True, type=float, help="Timeout in seconds for URL locations.")
def check(old: str, new: str, timeout: float):
    """Exit with status 1 if NEW breaks clients of OLD."""
    result = _run(old, new, timeout)
    click.echo(summary(result))
    for change in result.breaking_changes:
        click.echo(f"  [{change.severity.value}] {change.location}: {change.description}")
    if result.has_breaking_changes:
        sys.exit(1)


@main.command("rules")
def list_rules():
    """List the built-in comparison rules."""
    engine = ComparisonEngine()
    for rule in engine.rules:
        click.echo(rule.name)
    click.echo(f"{len(engine.rules)} rules")


@main.command()
@click.argument("source")
@click.option("--to", "target", default=None, type=click.Choice(["json", "yaml"]), help="Target format (default: the other one).")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the converted document to a file instead of stdout.")
@click.option("--timeout", default=DEFAULT_TIMEOUT, show_default=True, type=float, help="Timeout in seconds for URL locations.")
def convert(source: str, target: str | None, output: Path | None, timeout: float):
    """Convert the document at SOURCE between YAML and JSON."""
    try:
        text = read_source(source, timeout)
        source_format = detect_format_from_location(source)
        if source_format is SpecFormat.UNKNOWN:
            source_format = detect_format(text)
        if target is None:
            target_format = SpecFormat.YAML if source_format is SpecFormat.JSON else SpecFormat.JSON
        else:
            target_format = SpecFormat(target)
        converted = convert_content(text, source_format, target_format, source)
    except SpecLoadError as e:
        raise CommandFailed(str(e)) from e

    if output is None:
        click.echo(converted, nl=False)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(converted, encoding="utf-8")
        click.echo(f"Converted document saved to {output}")
