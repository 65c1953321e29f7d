"""CLI entry point."""
import json
from pathlib import Path
from typing import Optional

import typer

from s3_state_backend.domain.backends.base import Backend
from s3_state_backend.domain.entities.diagnostics import Diagnostics
from s3_state_backend.infra.backends import get_backend
from s3_state_backend.infra.common import ConfigError, get_logger, setup_logging
from s3_state_backend.infra.configs import load_backend_config, load_env_file

setup_logging()
logger = get_logger(__name__)

app = typer.Typer(help="Validate and apply S3 state backend configuration.", no_args_is_help=True)


def _report(diags: Diagnostics) -> None:
    for diagnostic in diags:
        typer.echo(str(diagnostic) + "\n", err=True)


def _load(config_file: Path, section: Optional[str]) -> dict:
    load_env_file()
    try:
        return load_backend_config(config_file, section=section)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _backend(name: str) -> Backend:
    try:
        return get_backend(name)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def schema(
    backend: str = typer.Option("s3", "--backend", help="Backend type"),
):
    """Print the accepted configuration attributes as JSON."""
    attributes = _backend(backend).config_schema()
    payload = {name: attr.model_dump(exclude_none=True) for name, attr in attributes.items()}
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def validate(
    config_file: Path = typer.Argument(..., help="YAML or JSON file with backend attributes"),
    section: Optional[str] = typer.Option(None, "--section", help="Top-level key holding the attributes"),
    backend: str = typer.Option("s3", "--backend", help="Backend type"),
):
    """Validate a backend configuration without contacting AWS."""
    raw = _load(config_file, section)
    _, diags = _backend(backend).prepare_config(raw)
    _report(diags)
    if diags.has_errors():
        raise typer.Exit(code=1)
    typer.echo("Configuration is valid.")


@app.command()
def configure(
    config_file: Path = typer.Argument(..., help="YAML or JSON file with backend attributes"),
    section: Optional[str] = typer.Option(None, "--section", help="Top-level key holding the attributes"),
    backend: str = typer.Option("s3", "--backend", help="Backend type"),
):
    """Validate a configuration and build the AWS clients for it."""
    raw = _load(config_file, section)
    instance = _backend(backend)
    diags = instance.initialize(raw)
    _report(diags)
    if diags.has_errors():
        raise typer.Exit(code=1)
    typer.echo(f"Backend {backend!r} configured.")


if __name__ == "__main__":
    app()
