#!/usr/bin/env python3
"""
Command line entry point: run the API server and manage the database.
"""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path

import click
import uvicorn

from aspire import __version__
from aspire.config import settings
from aspire.logging import configure_logging, get_logger

logger = get_logger(__name__)

LOG_LEVELS = ["debug", "info", "warning", "error"]


@click.group()
@click.version_option(version=__version__, prog_name="aspire")
def cli() -> None:
    """Aspire: aspirations and folders behind a GraphQL API."""


@cli.command()
@click.option("--host", default=settings.api_host, show_default=True, help="Host to bind to")
@click.option("--port", default=settings.api_port, show_default=True, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, default=settings.api_reload, help="Reload on code changes")
@click.option("--workers", default=1, show_default=True, type=int, help="Worker processes")
@click.option(
    "--log-level",
    default=settings.log_level.lower(),
    show_default=True,
    type=click.Choice(LOG_LEVELS),
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Start the API server."""
    configure_logging(debug=log_level == "debug", level=log_level)
    logger.info("Starting Aspire API server", host=host, port=port, reload=reload, workers=workers)

    # An import string is required for reload and multi-worker mode
    target = "aspire.api.app:app" if reload or workers > 1 else _load_app()
    try:
        uvicorn.run(
            target,
            host=host,
            port=port,
            reload=reload,
            workers=1 if reload else workers,
            log_level=log_level,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")


def _load_app():
    from aspire.api.app import app

    return app


@cli.group()
def db() -> None:
    """Manage the database schema."""


def get_alembic_config():
    """Load alembic.ini from the project root."""
    from alembic.config import Config

    alembic_ini = Path(__file__).resolve().parents[2] / "alembic.ini"
    if not alembic_ini.exists():
        raise click.ClickException(f"alembic.ini not found at {alembic_ini}")
    return Config(str(alembic_ini))


def _run_with_engine(action: Callable[[], Awaitable[None]], label: str) -> None:
    from aspire.database.connection import dispose_database

    async def run() -> None:
        try:
            await action()
        finally:
            await dispose_database()

    configure_logging(level=settings.log_level)
    try:
        asyncio.run(run())
    except Exception as e:
        logger.error(f"Failed to {label}", error=str(e))
        click.echo(f"✗ Could not {label}: {e}", err=True)
        sys.exit(1)
    click.echo(f"✓ Done: {label}")


@db.command("create-tables")
def create_tables() -> None:
    """Create every table straight from the models (skips migrations)."""
    from aspire.database.connection import create_all_tables

    _run_with_engine(create_all_tables, "create tables")


@db.command("drop-tables")
@click.confirmation_option(prompt="Drop every Aspire table?")
def drop_tables() -> None:
    """Drop every table known to the models."""
    from aspire.database.connection import drop_all_tables

    _run_with_engine(drop_all_tables, "drop tables")


def _alembic(command_name: str, *args: str) -> None:
    from alembic import command

    configure_logging(level=settings.log_level)
    logger.info("Running alembic", command=command_name, args=list(args))
    try:
        getattr(command, command_name)(get_alembic_config(), *args)
    except click.ClickException:
        raise
    except Exception as e:
        logger.error("Alembic command failed", command=command_name, error=str(e))
        sys.exit(1)


@db.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Upgrade the database to REVISION (default: head)."""
    _alembic("upgrade", revision)


@db.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Downgrade the database to REVISION (default: one step back)."""
    _alembic("downgrade", revision)


@db.command()
def current() -> None:
    """Show the current database revision."""
    _alembic("current")


def main():
    cli()


if __name__ == "__main__":
    main()
