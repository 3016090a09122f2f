"""Main CLI entry point for schemasync."""

import click

from schemasync import __version__
from schemasync.cli.commands.export import export
from schemasync.cli.commands.indexes import indexes
from schemasync.cli.commands.list import list_stores
from schemasync.cli.commands.migrate import migrate
from schemasync.cli.commands.plan import plan
from schemasync.cli.commands.validate import validate


@click.group()
@click.version_option(version=__version__)
def main():
    """Schema Sync - Declarative schema migrations for document stores."""
    pass


# Register commands
main.add_command(migrate)
main.add_command(plan)
main.add_command(validate)
main.add_command(export)
main.add_command(indexes)
main.add_command(list_stores)


if __name__ == "__main__":
    main()
