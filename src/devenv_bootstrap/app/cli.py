from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

import typer
from dotenv import load_dotenv
from pydantic import ValidationError

from . import main
from .config import AppConfig, LoggingConfig, RuntimeConfig
from .cli_formatter import (
    format_bootstrap_report,
    format_ensure_result,
    format_patch_status,
    format_patch_summary,
    format_verification,
)
from ..core.domain.exceptions import BootstrapError
from ..shared.to_jsonable import to_jsonable

load_dotenv()

app = typer.Typer(add_completion=False, no_args_is_help=True)
patch_app = typer.Typer(no_args_is_help=True, help="Apply, revert or inspect local registry patches.")
app.add_typer(patch_app, name="patch")


def _load_config(command: str, log_level: str) -> AppConfig:
    """Load config from env and attach this invocation's run name and log level."""
    level = logging._nameToLevel.get(log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", force=True)

    try:
        config = AppConfig()
    except ValidationError as e:
        typer.echo(f"Error: invalid configuration\n{e}", err=True)
        raise typer.Exit(code=2)

    run_name = f"{datetime.now():%Y%m%d-%H%M%S}-{command}"
    return config.model_copy(
        update={
            "runtime": RuntimeConfig(run_name=run_name),
            "logging": LoggingConfig(
                level=logging.getLevelName(level),
                console_output=config.logging.console_output,
                logger_name=config.logging.logger_name,
            ),
        }
    )


def _echo_json(obj: object) -> None:
    typer.echo(json.dumps(to_jsonable(obj), ensure_ascii=False, indent=2))


def _fail(e: BootstrapError) -> None:
    typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(code=1)


@app.command()
def clone(
    log_level: str = typer.Option("INFO", "--log-level", help="Log level", case_sensitive=False),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Clone every configured repository into the workspace root."""
    config = _load_config("clone", log_level)
    if not json_output:
        typer.echo(f"Workspace: {config.workspace.root}")

    result = main.clone_repositories(config=config)

    if json_output:
        _echo_json(result)
    else:
        typer.echo(format_ensure_result(result))
    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def restore(
    archive: Path | None = typer.Option(None, "--archive", "-a", help="Registry backup archive (.tar.gz)"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level", case_sensitive=False),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Restore the local registry from a backup and verify expected packages."""
    config = _load_config("restore", log_level)

    try:
        result = main.restore_registry(archive_path=archive, config=config)
    except BootstrapError as e:
        _fail(e)

    if json_output:
        _echo_json(result)
    else:
        typer.echo(format_verification(result))


@patch_app.command("apply")
def patch_apply(
    log_level: str = typer.Option("INFO", "--log-level", help="Log level", case_sensitive=False),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Point manifests and lock files at the local registry."""
    config = _load_config("patch-apply", log_level)
    summary = main.apply_patches(config=config)

    if json_output:
        _echo_json(summary)
    else:
        typer.echo(format_patch_summary(summary, "applied"))
    if not summary.ok:
        raise typer.Exit(code=1)


@patch_app.command("revert")
def patch_revert(
    log_level: str = typer.Option("INFO", "--log-level", help="Log level", case_sensitive=False),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Restore patched files to their committed state."""
    config = _load_config("patch-revert", log_level)
    summary = main.revert_patches(config=config)

    if json_output:
        _echo_json(summary)
    else:
        typer.echo(format_patch_summary(summary, "reverted"))
    if not summary.ok:
        raise typer.Exit(code=1)


@patch_app.command("status")
def patch_status(
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Show whether each patch target is applied, original or not checked out."""
    config = _load_config("patch-status", "WARNING")
    entries = main.patch_status(config=config)

    if json_output:
        _echo_json([{"path": e.target.path, "kind": e.target.kind, "state": e.state} for e in entries])
    else:
        typer.echo(format_patch_status(entries))


@app.command()
def up(
    archive: Path | None = typer.Option(None, "--archive", "-a", help="Registry backup archive (.tar.gz)"),
    skip_restore: bool = typer.Option(False, "--skip-restore", help="Do not restore the registry"),
    skip_build: bool = typer.Option(False, "--skip-build", help="Do not build service images"),
    skip_start: bool = typer.Option(False, "--skip-start", help="Do not start services"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level", case_sensitive=False),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Bootstrap the environment: restore, clone, patch, build, revert, start.

    Patches are reverted even when a phase fails, so tracked files are not left modified.
    """
    config = _load_config("up", log_level)
    if not json_output:
        typer.echo(f"Workspace: {config.workspace.root}")

    try:
        report = main.bootstrap(
            archive_path=archive,
            restore=not skip_restore,
            build=not skip_build,
            start=not skip_start,
            config=config,
        )
    except BootstrapError as e:
        _fail(e)

    if json_output:
        _echo_json(report)
    else:
        typer.echo(format_bootstrap_report(report))


if __name__ == "__main__":
    app()
