"""Main CLI entry point."""

import dataclasses
import logging

import click

from ledgerflow.config import ConfigValidationError, load_settings
from ledgerflow.services import database_from_settings
from ledgerflow.utils.logger import configure_logging

# Import and register all commands at module level
from ledgerflow.cli.commands import (
    accounts,
    import_cmd,
    post,
    reset,
    review,
    serve,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides LEDGERFLOW_DB_PATH environment variable)",
    envvar="LEDGERFLOW_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL (overrides LEDGERFLOW_DATABASE_URL environment variable)",
    envvar="LEDGERFLOW_DATABASE_URL",
)
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stdout")
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, verbose: bool):
    """ledgerflow - Bank CSV import and ledger posting.

    Import bank and credit-card CSV exports, review the suggested
    accounts, and post approved transactions as journal entries.
    """
    ctx.ensure_object(dict)
    if verbose:
        configure_logging(logging.INFO)

    try:
        settings = load_settings()
    except ConfigValidationError as e:
        raise click.UsageError(str(e))
    if db_path is not None:
        settings = dataclasses.replace(settings, database_path=db_path, database_url=None)
    if database_url is not None:
        settings = dataclasses.replace(settings, database_url=database_url)
    ctx.obj["settings"] = settings

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = database_from_settings(settings)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
accounts.register_commands(cli)
import_cmd.register_commands(cli)
post.register_commands(cli)
reset.register_commands(cli)
review.register_commands(cli)
serve.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
