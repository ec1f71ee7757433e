"""
Utility commands for the addresses CLI.
Provides helper commands for system operations and diagnostics.
"""

import click
from sqlalchemy import inspect, text

from ..cli.base import BaseCommand, command_error_handler

class TestConnectionCommand(BaseCommand):
    """Command to test database connectivity."""

    @command_error_handler
    def execute(self) -> None:
        """Execute the connection test."""
        self.logger.info("Testing database connection...")

        with self.store.session() as session:
            session.execute(text("SELECT 1")).scalar()

        click.secho("Successfully connected to the database!", fg='green')

        table = self.config.schema.addresses_table
        if inspect(self.store.session_manager.engine).has_table(table):
            click.echo(f"Table '{table}' exists.")
        else:
            click.secho(f"Table '{table}' is missing; run init-db to create it.", fg='yellow')
