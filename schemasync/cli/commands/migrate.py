"""CLI command for running migrations."""

import sys

import click

from schemasync.api import run_project
from schemasync.cli.commands.common import load, project_options, setup_logging
from schemasync.core.exceptions import (
    ConfigError,
    ImmutableDiffError,
    SchemaSyncError,
    ValidationError,
)


@click.command()
@click.argument("project_path", type=click.Path(exists=True))
@project_options
def migrate(project_path: str, vars: tuple, log_level: str, json_logs: bool):
    """Create missing collections, fields and indexes for a project.

    Examples:

        schemasync migrate project.yaml
        schemasync migrate project.yaml --vars env=prod
        schemasync migrate project.yaml --log-level DEBUG --json-logs
    """
    try:
        project = load(project_path, vars)
        setup_logging(log_level, json_logs, project.name)

        click.echo(f"Migrating project: {project.name}")
        report = run_project(project)
        click.echo(report.get_summary())
        click.echo("Migration completed successfully")

    except (ConfigError, ValidationError) as e:
        click.echo(f"Project error: {e}", err=True)
        sys.exit(1)
    except ImmutableDiffError as e:
        click.echo(f"Schema conflict: {e}", err=True)
        sys.exit(1)
    except SchemaSyncError as e:
        click.echo(f"Migration error: {e}", err=True)
        sys.exit(1)
