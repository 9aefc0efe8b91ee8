"""Ordered, versioned schema migrations for the CRM tables.

Each migration runs in its own transaction together with the version bump,
so a failure leaves the stored version untouched and the whole script is
retried on the next run. Scripts only create missing tables and indexes,
which keeps re-running them harmless.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from sqlalchemy import Connection, select, update
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from personal_crm.models import (
    Base,
    Company,
    Contact,
    ExtensionField,
    Group,
    GroupMember,
    Interaction,
    ModuleVersion,
    Relationship,
    Reminder,
)

logger = logging.getLogger(__name__)

MODULE_NAME = "crm"


@dataclass(frozen=True)
class Migration:
    description: str
    apply: Callable[[Connection], None]


def _create_tables(*models: type[Base]) -> Callable[[Connection], None]:
    tables = [model.__table__ for model in models]

    def apply(connection: Connection) -> None:
        Base.metadata.create_all(connection, tables=tables, checkfirst=True)

    return apply


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        "core tables",
        _create_tables(Company, Contact, Interaction, Reminder, Relationship, Group),
    ),
    Migration("group membership", _create_tables(GroupMember)),
    Migration("extension fields", _create_tables(ExtensionField)),
)


async def get_schema_version(connection: AsyncConnection, module: str = MODULE_NAME) -> int:
    """Return the number of migrations applied for ``module``."""

    await connection.run_sync(_ensure_version_table)
    version = await connection.scalar(
        select(ModuleVersion.version).where(ModuleVersion.module == module)
    )
    return version or 0


async def run_migrations(
    engine: AsyncEngine,
    module: str = MODULE_NAME,
    migrations: Sequence[Migration] = MIGRATIONS,
) -> int:
    """Apply pending migrations and return the resulting schema version."""

    async with engine.begin() as connection:
        current = await get_schema_version(connection, module)

    for index in range(current, len(migrations)):
        migration = migrations[index]
        async with engine.begin() as connection:
            await connection.run_sync(migration.apply)
            await _store_version(connection, module, index + 1)
        logger.info(
            "Applied migration",
            extra={"schema": module, "version": index + 1, "description": migration.description},
        )

    return max(current, len(migrations))


def _ensure_version_table(connection: Connection) -> None:
    ModuleVersion.__table__.create(connection, checkfirst=True)


async def _store_version(connection: AsyncConnection, module: str, version: int) -> None:
    result = await connection.execute(
        update(ModuleVersion).where(ModuleVersion.module == module).values(version=version)
    )
    if result.rowcount == 0:
        await connection.execute(
            ModuleVersion.__table__.insert().values(module=module, version=version)
        )
