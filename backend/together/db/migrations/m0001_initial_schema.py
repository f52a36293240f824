"""
0001: users, persons, finance and currency_rates.

Replaces the old startup-time `ALTER TABLE ... ADD COLUMN IF NOT EXISTS`
patches for the person columns; person/person_key exist from the start.
"""
from sqlalchemy.engine import Connection
from together.db.base import Base
import together.models  # noqa: F401  (registers every table on Base.metadata)

VERSION = "0001"
DESCRIPTION = "initial schema"

TABLES = ("users", "persons", "finance", "currency_rates")


def upgrade(connection: Connection) -> None:
    """Create the four tables with their constraints and indexes."""
    tables = [Base.metadata.tables[name] for name in TABLES]
    Base.metadata.create_all(bind=connection, tables=tables, checkfirst=True)
