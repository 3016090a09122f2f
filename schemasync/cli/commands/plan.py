"""CLI command for previewing a migration."""

import sys

import click

from schemasync.api import build_engine
from schemasync.cli.commands.common import load, project_options, setup_logging
from schemasync.core.exceptions import ConfigError, SchemaSyncError, ValidationError


@click.command()
@click.argument("project_path", type=click.Path(exists=True))
@click.option(
    "--check",
    is_flag=True,
    help="Exit with status 1 unless the remote schema is already converged",
)
@project_options
def plan(project_path: str, check: bool, vars: tuple, log_level: str, json_logs: bool):
    """Show what a migration would change, without writing anything.

    Examples:

        schemasync plan project.yaml
        schemasync plan project.yaml --check
    """
    try:
        project = load(project_path, vars)
        setup_logging(log_level, json_logs, project.name)

        migration_plan = build_engine(project).plan(project.descriptor)
        click.echo(migration_plan.describe())

        for table, diff in migration_plan.conflicts:
            click.echo(
                f"Conflict: {table}.{diff.key} differs in {', '.join(diff.changes)}",
                err=True,
            )

        if migration_plan.is_converged:
            click.echo("Remote schema is up to date")
        elif check:
            sys.exit(1)

    except (ConfigError, ValidationError) as e:
        click.echo(f"Project error: {e}", err=True)
        sys.exit(1)
    except SchemaSyncError as e:
        click.echo(f"Plan error: {e}", err=True)
        sys.exit(1)
