"""Typer CLI entry point for FormGuard."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
import uvicorn

from formguard import __version__
from formguard.config import Settings, get_settings
from formguard.engine import FIELDS, FormEngine
from formguard.models import (
    MAX_FIELD_LENGTH,
    ContactSubmission,
    MessageReport,
    SecurityVerdict,
    SubmissionReport,
    ValidationVerdict,
)

app = typer.Typer(
    name="formguard",
    help="FormGuard: contact-form validation and injection screening.",
    add_completion=False,
)

_CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Path to YAML config file.")
_JSON_OPTION = typer.Option(False, "--json", "-j", help="Output raw JSON.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"FormGuard v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None, "--version", "-V", callback=_version_callback, is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """FormGuard CLI."""


def _load_settings(config: Path | None) -> Settings:
    if config is not None and not config.is_file():
        typer.echo(f"Error: config file not found: {config}", err=True)
        raise typer.Exit(code=2)
    settings = get_settings(config_path=config)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return settings


def _read_input(text: str | None, file: Path | None, stdin: bool) -> str:
    sources = sum([text is not None, file is not None, stdin])
    if sources == 0:
        typer.echo(
            "Error: provide exactly one input source: --text, --file, or --stdin\n"
            "Examples:\n"
            '  formguard message --text "Hello, I would like a quote."\n'
            "  formguard message --file message.txt\n"
            "  echo 'content' | formguard message --stdin",
            err=True,
        )
        raise typer.Exit(code=2)
    if sources > 1:
        typer.echo("Error: provide only one of --text, --file, or --stdin", err=True)
        raise typer.Exit(code=2)

    if text is not None:
        return text
    if file is not None:
        if not file.is_file():
            typer.echo(f"Error: not a readable file: {file}", err=True)
            raise typer.Exit(code=2)
        if file.stat().st_size > MAX_FIELD_LENGTH * 4:
            typer.echo(
                f"Error: file too large. Max supported: ~{MAX_FIELD_LENGTH:,} characters.",
                err=True,
            )
            raise typer.Exit(code=2)
        return file.read_text(encoding="utf-8")
    return sys.stdin.read()


def _status(ok: bool) -> str:
    if ok:
        return typer.style("PASS", fg=typer.colors.GREEN, bold=True)
    return typer.style("FAIL", fg=typer.colors.RED, bold=True)


def _print_verdict(verdict: ValidationVerdict) -> None:
    typer.echo(f"  {verdict.field}: {_status(verdict.valid)}")
    if verdict.confidence is not None:
        typer.echo(f"      confidence: {verdict.confidence}")
    if verdict.reason:
        typer.echo(f"      {verdict.reason}")
    if verdict.suggestions:
        typer.echo(f"      did you mean: {', '.join(verdict.suggestions)}")


def _print_message(report: MessageReport) -> None:
    typer.echo(f"  message: {_status(report.valid)} (quality: {report.quality})")
    for issue in report.issues:
        typer.echo(f"      - {issue}")
    typer.echo(f"      {report.feedback.message}")
    for suggestion in report.suggestions:
        typer.echo(f"      hint: {suggestion}")


def _print_security(verdict: SecurityVerdict) -> None:
    typer.echo(f"  {verdict.field}: {_status(verdict.valid)}")
    if verdict.threat:
        typer.echo(f"      {verdict.threat}")


def _finish(
    result: ValidationVerdict | MessageReport | SecurityVerdict,
    output_json: bool,
) -> None:
    if output_json:
        typer.echo(result.model_dump_json(indent=2))
    elif isinstance(result, MessageReport):
        _print_message(result)
    elif isinstance(result, SecurityVerdict):
        _print_security(result)
    else:
        _print_verdict(result)
    if not result.valid:
        raise typer.Exit(code=1)


@app.command()
def name(
    value: str = typer.Argument(..., help="Name to validate."),
    config: Path | None = _CONFIG_OPTION,
    output_json: bool = _JSON_OPTION,
) -> None:
    """Check whether VALUE looks like a real human name."""
    engine = FormEngine(settings=_load_settings(config))
    _finish(engine.validate_field("name", value), output_json)


@app.command()
def email(
    value: str = typer.Argument(..., help="Email address to validate."),
    config: Path | None = _CONFIG_OPTION,
    output_json: bool = _JSON_OPTION,
) -> None:
    """Check whether VALUE is a plausible email address."""
    engine = FormEngine(settings=_load_settings(config))
    _finish(engine.validate_field("email", value), output_json)


@app.command()
def message(
    text: str | None = typer.Option(None, "--text", "-t", help="Inline message text."),
    file: Path | None = typer.Option(None, "--file", "-f", help="Read the message from a file."),
    stdin: bool = typer.Option(False, "--stdin", "-s", help="Read the message from stdin."),
    config: Path | None = _CONFIG_OPTION,
    output_json: bool = _JSON_OPTION,
) -> None:
    """Analyse a free-text message for spam, gibberish and real content."""
    content = _read_input(text, file, stdin)
    engine = FormEngine(settings=_load_settings(config))
    _finish(engine.validate_field("message", content), output_json)


@app.command()
def scan(
    field: str = typer.Option("message", "--field", help="Field name (sets the length cap)."),
    text: str | None = typer.Option(None, "--text", "-t", help="Inline value."),
    file: Path | None = typer.Option(None, "--file", "-f", help="Read the value from a file."),
    stdin: bool = typer.Option(False, "--stdin", "-s", help="Read the value from stdin."),
    config: Path | None = _CONFIG_OPTION,
    output_json: bool = _JSON_OPTION,
) -> None:
    """Screen a raw value for injection patterns."""
    content = _read_input(text, file, stdin)
    engine = FormEngine(settings=_load_settings(config))
    _finish(engine.check_field(field, content), output_json)


@app.command()
def submit(
    name_: str = typer.Option(..., "--name", "-n", help="Name field."),
    email_: str = typer.Option(..., "--email", "-e", help="Email field."),
    message_: str = typer.Option(..., "--message", "-m", help="Message field."),
    honeypot: str | None = typer.Option(None, "--honeypot", help="Hidden honeypot field."),
    config: Path | None = _CONFIG_OPTION,
    output_json: bool = _JSON_OPTION,
) -> None:
    """Run a complete submission through every check."""
    engine = FormEngine(settings=_load_settings(config))
    submission = ContactSubmission(
        name=name_, email=email_, message=message_, honeypot=honeypot,
    )
    report = engine.validate_submission(submission)

    if output_json:
        typer.echo(report.model_dump_json(indent=2))
    else:
        _print_report(report)

    if not report.accepted:
        raise typer.Exit(code=1)


def _print_report(report: SubmissionReport) -> None:
    typer.echo(f"\n{'='*60}")
    typer.echo("  FormGuard Submission Report")
    typer.echo(f"  Request ID: {report.request_id}")
    typer.echo(f"{'='*60}")
    typer.echo(f"  Overall: {_status(report.accepted)}")
    if report.reason:
        typer.echo(f"  {report.reason}")
    typer.echo(f"{'─'*60}")

    for verdict in report.security:
        if not verdict.valid:
            _print_security(verdict)
    for field in FIELDS:
        result = getattr(report, field)
        if isinstance(result, MessageReport):
            _print_message(result)
        elif isinstance(result, ValidationVerdict):
            _print_verdict(result)

    typer.echo(f"{'='*60}\n")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address."),
    port: int | None = typer.Option(None, "--port", "-p", help="Port number."),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload."),
    config: Path | None = _CONFIG_OPTION,
) -> None:
    """Start the FastAPI server."""
    from formguard.api.main import create_app

    settings = _load_settings(config)
    # --reload needs an import string, which always builds from env settings.
    target = "formguard.api.main:app" if reload else create_app(settings=settings)
    uvicorn.run(
        target,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    app()
