"""CLI command for listing available stores."""

import click

from schemasync.stores import list_store_types


@click.command("list-stores")
def list_stores():
    """List available schema store types."""
    click.echo("Available Stores:")
    for store_type in list_store_types():
        click.echo(f"  - {store_type}")
