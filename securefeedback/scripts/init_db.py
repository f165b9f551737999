"""CLI command for creating the registrant schema.

Usage:
    flask --app "securefeedback:create_app()" init-db
"""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from securefeedback.core.startup import StartupError, initialize_database


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Connect to the database and create the registrant table if missing."""
    click.echo("Initializing database...")
    try:
        ready = initialize_database(current_app)
    except StartupError as exc:
        cause = exc.__cause__ or exc
        raise click.ClickException(f"Database initialization failed: {cause}")
    if not ready:
        raise click.ClickException("Database unavailable; schema not verified")
    click.echo("  ✓ Registrant table ready")


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(init_db_command)
