"""CLI error handling helpers."""

import click

from ledgerbook.domain.errors import DomainError, UnbalancedBatchError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, UnbalancedBatchError):
        click.echo("Adjust the rows so receivable and debt totals match.", err=True)
    ctx.exit(1)
