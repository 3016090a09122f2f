"""Helpers shared by CLI commands."""

import sys

import click

from schemasync.core.logging import configure_logging
from schemasync.models.loader import load_project
from schemasync.models.project import Project

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def project_options(command):
    """Attach the --vars / --log-level / --json-logs options."""
    command = click.option(
        "--json-logs",
        is_flag=True,
        help="Use JSON format for logs",
    )(command)
    command = click.option(
        "--log-level",
        default="INFO",
        type=click.Choice(LOG_LEVELS),
        help="Log level (default: INFO)",
    )(command)
    command = click.option(
        "--vars",
        multiple=True,
        help="CLI variables in key=value format (can be used multiple times)",
    )(command)
    return command


def parse_vars(vars: tuple) -> dict[str, str]:
    cli_vars = {}
    for var in vars:
        if "=" not in var:
            click.echo(f"Error: Invalid variable format: {var}. Use key=value", err=True)
            sys.exit(1)
        key, value = var.split("=", 1)
        cli_vars[key] = value
    return cli_vars


def load(project_path: str, vars: tuple) -> Project:
    cli_vars = parse_vars(vars)
    return load_project(project_path, cli_vars=cli_vars if cli_vars else None)


def setup_logging(log_level: str, json_logs: bool, project_name: str) -> None:
    try:
        configure_logging(level=log_level, json_format=json_logs, project_name=project_name)
    except ImportError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
