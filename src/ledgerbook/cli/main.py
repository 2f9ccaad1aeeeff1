"""Main CLI entry point."""

import getpass
import logging

import click
from ledgerbook.database.factories import create_sqlite_database

# Import and register all commands at module level
from ledgerbook.cli.commands import (
    account,
    category,
    draft,
    entry,
    report,
)


def _default_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "default"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option(
    "--user",
    help="Owner of saved reports (defaults to LEDGERBOOK_USER or the login name)",
    envvar="LEDGERBOOK_USER",
)
@click.option("--verbose", "-v", is_flag=True, help="Log database writes and autosaves")
@click.pass_context
def cli(ctx, db_path: str | None, user: str | None, verbose: bool):
    """Ledgerbook - Bookkeeping ledger.

    Keep receivable and debt entries per account, post balanced batches,
    and produce account statements and summaries.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["user"] = user or _default_user()
        ctx.call_on_close(db.disconnect)


# Register all commands
category.register_commands(cli)
account.register_commands(cli)
entry.register_commands(cli)
draft.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
