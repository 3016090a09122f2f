"""CLI command for inspecting and dropping remote indexes."""

import sys

import click

from schemasync.api import build_engine
from schemasync.cli.commands.common import load, project_options, setup_logging
from schemasync.core.exceptions import ConfigError, SchemaSyncError


@click.command()
@click.argument("project_path", type=click.Path(exists=True))
@click.argument("table_name")
@click.option("--drop", "drop_key", help="Delete the index with this key")
@project_options
def indexes(
    project_path: str,
    table_name: str,
    drop_key: str | None,
    vars: tuple,
    log_level: str,
    json_logs: bool,
):
    """List the remote indexes of a table, or drop one.

    Examples:

        schemasync indexes project.yaml posts
        schemasync indexes project.yaml posts --drop idx_title
    """
    try:
        project = load(project_path, vars)
        setup_logging(log_level, json_logs, project.name)

        table = project.descriptor.get_table(table_name)
        if table is None:
            click.echo(f"Error: Unknown table: {table_name}", err=True)
            sys.exit(1)

        engine = build_engine(project)
        if drop_key:
            engine.drop_index(table, drop_key)
            click.echo(f"Dropped index {drop_key} from {table.collection_id}")
            return

        remote_indexes = engine.list_indexes(table)
        click.echo(f"Indexes on {table.collection_id}:")
        for index in remote_indexes:
            click.echo(
                f"  - {index.key} ({index.kind}, {index.status.value}): "
                f"{', '.join(index.attributes)}"
            )

    except ConfigError as e:
        click.echo(f"Project error: {e}", err=True)
        sys.exit(1)
    except SchemaSyncError as e:
        click.echo(f"Store error: {e}", err=True)
        sys.exit(1)
