"""CLI command for exporting a schema to another format."""

import sys
from pathlib import Path

import click

from schemasync.cli.commands.common import load, project_options, setup_logging
from schemasync.core.exceptions import ConfigError, ValidationError
from schemasync.exporters import EXPORTERS


@click.command()
@click.argument("project_path", type=click.Path(exists=True))
@click.option(
    "--format",
    "export_format",
    required=True,
    type=click.Choice(sorted(EXPORTERS)),
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Write to this file instead of stdout",
)
@project_options
def export(
    project_path: str,
    export_format: str,
    output: str | None,
    vars: tuple,
    log_level: str,
    json_logs: bool,
):
    """Export the project's tables as SQL DDL, security rules or text.

    Examples:

        schemasync export project.yaml --format sql
        schemasync export project.yaml --format rules -o database.rules.json
    """
    try:
        project = load(project_path, vars)
        setup_logging(log_level, json_logs, project.name)
        content = EXPORTERS[export_format](project.descriptor)
    except (ConfigError, ValidationError) as e:
        click.echo(f"Export failed: {e}", err=True)
        sys.exit(1)

    if output:
        Path(output).write_text(content, encoding="utf-8")
        click.echo(f"Wrote {export_format} export to {output}")
    else:
        click.echo(content, nl=not content.endswith("\n"))
