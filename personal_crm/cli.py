"""Command-line interface for the personal CRM.

Usage examples
--------------
$ personal-crm migrate
$ personal-crm export --output contacts.csv
$ personal-crm --database-url sqlite:///./other.db import contacts.csv
"""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import click
from sqlalchemy.ext.asyncio import AsyncEngine

from personal_crm.core.config import Settings, get_settings
from personal_crm.core.db import create_engine, create_session_factory
from personal_crm.core.errors import CrmError
from personal_crm.core.logging import configure_logging
from personal_crm.core.migrations import get_schema_version, run_migrations
from personal_crm.services.crm import CrmService

T = TypeVar("T")


def _run(settings: Settings, action: Callable[[AsyncEngine], Awaitable[T]]) -> T:
    async def runner() -> T:
        engine = create_engine(settings.async_database_url)
        try:
            await run_migrations(engine)
            return await action(engine)
        finally:
            await engine.dispose()

    return asyncio.run(runner())


async def _with_service(engine: AsyncEngine, call: Callable[[CrmService], Awaitable[T]]) -> T:
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        return await call(CrmService(session))


@click.group()
@click.option(
    "--database-url",
    envvar="DATABASE_URL",
    default=None,
    metavar="URL",
    help="SQLite database to operate on; defaults to the configured DATABASE_URL.",
)
@click.option("-v", "--verbose", is_flag=True, help="Emit INFO level JSON logs.")
@click.pass_context
def cli(ctx: click.Context, database_url: str | None, verbose: bool) -> None:
    """Personal CRM command-line interface."""

    settings = get_settings()
    if database_url:
        settings = settings.model_copy(update={"database_url": database_url})
    if verbose:
        configure_logging(settings)
    ctx.obj = settings


@cli.command()
@click.pass_obj
def migrate(settings: Settings) -> None:
    """Create or upgrade the CRM tables."""

    async def schema_version(engine: AsyncEngine) -> int:
        async with engine.connect() as connection:
            return await get_schema_version(connection)

    version = _run(settings, schema_version)
    click.echo(f"Database schema is at version {version}.")


@cli.command("export")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the CSV to FILE instead of standard output.",
)
@click.pass_obj
def export_contacts(settings: Settings, output: Path | None) -> None:
    """Export every contact as CSV."""

    content = _run(
        settings, lambda engine: _with_service(engine, lambda svc: svc.export_contacts_csv())
    )
    if output is None:
        click.echo(content)
        return
    output.write_text(content + "\n", encoding="utf-8")
    click.echo(f"Exported contacts to {output}", err=True)


@cli.command("import")
@click.argument(
    "file", type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path)
)
@click.pass_obj
def import_contacts(settings: Settings, file: Path) -> None:
    """Import contacts from a CSV FILE, skipping likely duplicates."""

    text = file.read_text(encoding="utf-8-sig")
    try:
        result = _run(
            settings,
            lambda engine: _with_service(engine, lambda svc: svc.import_contacts_csv(text)),
        )
    except CrmError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(
        f"Created {result.created}, skipped {result.skipped}, "
        f"duplicates {len(result.duplicates)}, errors {len(result.errors)}"
    )
    for duplicate in result.duplicates:
        click.echo(
            f"Row {duplicate.row}: {duplicate.incoming} matches existing contact "
            f"#{duplicate.existing.id}"
        )
    for error in result.errors:
        click.echo(error, err=True)


if __name__ == "__main__":  # pragma: no cover
    cli()
