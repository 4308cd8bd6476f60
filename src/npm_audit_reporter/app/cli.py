from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from dependency_injector import providers

from .. import __version__
from .config import AppConfig
from .cli_formatter import format_attributions, format_outcome
from .main import _create_container, build_request
from ..core.domain.exceptions import ManifestAbsentError, ManifestError
from ..core.domain.models import Failed, Ok

app = typer.Typer(add_completion=False, no_args_is_help=True, help="NPM security plugin")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _echo_info(message: str) -> None:
    typer.echo(f"INFO - {message}")


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Audit an npm project and ship the dependency report."""


@app.command()
def run(
    token: str | None = typer.Option(None, "--token", "-t", help="Token used to identify report provider."),
    output_path: Path | None = typer.Option(None, "--output-path", "-o", help="Output file absolute path [optional]"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to transport the report to (443 by default) [optional]"),
    host: str | None = typer.Option(None, "--host", "-u", help="Host to transport the report to [optional]"),
    root: Path | None = typer.Option(None, "--root", help="Project root (current directory by default)"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level", case_sensitive=False),
    json_output: bool = typer.Option(False, "--json", help="Print the bundle as JSON on success"),
):
    """Run the audit and deliver the report (or save it with --output-path)."""
    level = logging._nameToLevel.get(log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s', force=True)

    config = AppConfig().with_overrides(
        token=token,
        output_path=output_path,
        host=host,
        port=port,
        root=root,
        log_level=log_level,
    )

    if not config.transport.token:
        typer.echo("INFO - System exit since no token provided.")
        typer.echo("INFO - Use '--help' argument to see help.")
        return

    typer.echo("INFO - Verifying npm.")

    container = _create_container(config)
    container.notifier.override(providers.Object(_echo_info))
    try:
        uc = container.report_uc()
        outcome = uc.execute(request=build_request(config))
    finally:
        container.shutdown_resources()

    if json_output and isinstance(outcome, Ok):
        typer.echo(json.dumps(outcome.bundle, ensure_ascii=False, indent=2))
    else:
        typer.echo(format_outcome(outcome), err=isinstance(outcome, Failed))

    if isinstance(outcome, Failed):
        raise typer.Exit(code=1)


@app.command()
def deps(
    root: Path | None = typer.Option(None, "--root", help="Project root (current directory by default)"),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """List declared dependencies with the commit and author that last touched them."""
    config = AppConfig().with_overrides(root=root)

    container = _create_container(config)
    try:
        uc = container.attributions_uc()
        entries = uc.execute(root=config.project.root.resolve())
    except (ManifestAbsentError, ManifestError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        container.shutdown_resources()

    if json_output:
        typer.echo(json.dumps({"items": [e.to_dict() for e in entries]}, ensure_ascii=False, indent=2))
    else:
        typer.echo(format_attributions(entries))


if __name__ == "__main__":
    app()
