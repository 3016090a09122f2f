"""CLI command for validating project files."""

import sys

import click

from schemasync.cli.commands.common import load, project_options, setup_logging
from schemasync.core.exceptions import ConfigError, ValidationError
from schemasync.core.validation import validate_descriptor


@click.command()
@click.argument("project_path", type=click.Path(exists=True))
@project_options
def validate(project_path: str, vars: tuple, log_level: str, json_logs: bool):
    """Validate a project YAML file without contacting the store.

    Checks:
    - YAML syntax
    - Template variable resolution
    - Project and table schema validation
    - Table names, field maps and enum values

    Examples:

        schemasync validate project.yaml
        schemasync validate project.yaml --vars env=prod
    """
    try:
        project = load(project_path, vars)
        setup_logging(log_level, json_logs, project.name)
        validate_descriptor(project.descriptor)

        click.echo(f"✓ Project '{project.name}' is valid")
        click.echo(f"  Store: {project.store.type}")
        click.echo(f"  Database: {project.store.database_id}")
        click.echo(f"  Tables: {len(project.tables)}")
        for table in project.tables:
            click.echo(
                f"    - {table.collection_id}: {len(table.fields)} field(s), "
                f"{len(table.indexes)} index(es)"
            )

    except (ConfigError, ValidationError) as e:
        click.echo(f"✗ Project validation failed: {e}", err=True)
        sys.exit(1)
