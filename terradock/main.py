"""Command-line interface for terradock."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from . import __version__
from .config import Settings
from .core.executor import ExecutionParameters, TerraformExecutor, print_progress
from .errors import TerradockError
from .utils import setup_logging, validate_docker_installed

logger = logging.getLogger(__name__)

app = typer.Typer(help="Run Terraform commands inside a Docker container", add_completion=False)


def _version_callback(value: bool):
    if value:
        typer.echo(f"terradock {__version__}")
        raise typer.Exit()


def _echo_progress(line: str) -> None:
    """Stream a line to stderr; stdout is kept for the JSON result."""
    typer.echo(line, err=True)


def _load_variables(var_file_json: Optional[Path], var_file: Optional[Path]):
    if var_file_json:
        with open(var_file_json, "r") as f:
            return json.load(f)
    if var_file:
        with open(var_file, "r") as f:
            return f.read()
    return None


@app.command()
def run_command(
    command: str = typer.Argument(
        ...,
        help='Terraform command, e.g. "plan" or "apply -auto-approve"'
    ),
    args: Optional[List[str]] = typer.Argument(
        None,
        help="Additional Terraform arguments (put them after --)"
    ),
    working_directory: Optional[str] = typer.Option(
        None,
        "--working-directory", "-d",
        help="Terraform project directory (defaults to current directory)"
    ),
    var_file_json: Optional[Path] = typer.Option(
        None,
        "--var-file-json",
        help="JSON file with variable values"
    ),
    var_file: Optional[Path] = typer.Option(
        None,
        "--var-file",
        help=".tfvars file passed into the container"
    ),
    secret_env: Optional[List[str]] = typer.Option(
        None,
        "--secret-env", "-e",
        help="Secret environment variable KEY=VALUE (can be specified multiple times)"
    ),
    raw_output: bool = typer.Option(
        False,
        "--raw-output",
        help="Stream native Terraform output instead of returning JSON"
    ),
    image: Optional[str] = typer.Option(
        None,
        "--image",
        help="Docker image for Terraform (defaults to settings)"
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to settings)"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
):
    """
    Run a Terraform command in a throwaway container.

    Examples:

        terradock plan -d infra/ --var-file-json vars.json

        terradock apply -e TF_TOKEN=abc -- -auto-approve
    """
    settings = Settings()
    setup_logging(
        log_level=log_level or settings.get("log_level", "INFO"),
        log_file=settings.get("log_file", False),
    )

    if var_file_json and var_file:
        typer.echo("Error: use either --var-file-json or --var-file, not both", err=True)
        raise typer.Exit(code=1)

    docker_binary = settings.get("docker_binary", "docker")
    installed, docker_version = validate_docker_installed(docker_binary)
    if not installed:
        typer.echo(f"Error: Docker CLI not found: {docker_binary}", err=True)
        raise typer.Exit(code=1)
    logger.debug(docker_version)

    try:
        variables = _load_variables(var_file_json, var_file)
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"Error reading variables: {e}", err=True)
        raise typer.Exit(code=1)

    params = ExecutionParameters(
        command=command,
        working_directory=working_directory,
        variables=variables,
        secret_env_variables="\n".join(secret_env or []) or None,
        raw_output=raw_output,
        additional_args=tuple(args or ()),
        custom_docker_image=image or settings.get("docker_image"),
    )

    try:
        result = TerraformExecutor.from_settings(settings).execute(
            params,
            progress_callback=print_progress if raw_output else _echo_progress,
        )
    except TerradockError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if not raw_output:
        typer.echo(json.dumps(result, indent=2))


def main():
    """Main CLI entry point."""
    app()


__all__ = ["app", "main"]
