"""
Versioned schema migrations, applied once per database at deploy time.

Applied versions are recorded in `schema_migrations`; each pending
migration runs in its own transaction together with its bookkeeping row.
"""
import logging
from typing import Callable, List, NamedTuple, Optional
from sqlalchemy import Column, DateTime, MetaData, String, Table, func, select
from sqlalchemy.engine import Connection, Engine
from together.db.migrations import m0001_initial_schema

logger = logging.getLogger(__name__)

migration_metadata = MetaData()

schema_migrations = Table(
    "schema_migrations",
    migration_metadata,
    Column("version", String(32), primary_key=True),
    Column("description", String(255), nullable=False),
    Column("applied_at", DateTime, nullable=False, server_default=func.now()),
)


class Migration(NamedTuple):
    version: str
    description: str
    upgrade: Callable[[Connection], None]


# Ordered; never edit or reorder an entry once released
MIGRATIONS: List[Migration] = [
    Migration(m0001_initial_schema.VERSION, m0001_initial_schema.DESCRIPTION, m0001_initial_schema.upgrade),
]


def applied_versions(connection: Connection) -> List[str]:
    return list(connection.execute(
        select(schema_migrations.c.version).order_by(schema_migrations.c.version)
    ).scalars())


def run_migrations(engine: Optional[Engine] = None) -> List[str]:
    """
    Apply every pending migration.

    Returns:
        Versions applied by this call (empty when the schema is current)
    """
    if engine is None:
        from together.db.session import engine

    migration_metadata.create_all(bind=engine, checkfirst=True)

    with engine.connect() as connection:
        done = set(applied_versions(connection))

    applied = []
    for migration in MIGRATIONS:
        if migration.version in done:
            continue
        logger.info(f"Applying migration {migration.version}: {migration.description}")
        with engine.begin() as connection:
            migration.upgrade(connection)
            connection.execute(schema_migrations.insert().values(
                version=migration.version,
                description=migration.description
            ))
        applied.append(migration.version)

    if not applied:
        logger.info("Schema is up to date")
    return applied
