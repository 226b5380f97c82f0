"""An example table added on top of the core schema, with its access functions."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Callable, Optional

from microcluster.mapper import EntityMapper


@dataclass
class ExtendedTable:
    """An entry of the ``extended_table`` table."""

    id: int = 0
    key: str = ""
    value: str = ""


@dataclass
class ExtendedTableFilter:
    """Selects entries of ``extended_table`` by key."""

    key: Optional[str] = None


def schema_append_1(connection: sqlite3.Connection) -> None:
    """Create ``extended_table``."""
    connection.execute(
        """
CREATE TABLE extended_table (
  id           INTEGER  PRIMARY         KEY    AUTOINCREMENT  NOT  NULL,
  key          TEXT     NOT             NULL,
  value        TEXT     NOT             NULL,
  UNIQUE(key)
);
"""
    )


def schema_append_2(connection: sqlite3.Connection) -> None:
    """Create ``some_other_table``."""
    connection.execute(
        """
CREATE TABLE some_other_table (
  id                  INTEGER  PRIMARY           KEY    AUTOINCREMENT  NOT  NULL,
  field_one           TEXT     NOT               NULL,
  field_two           TEXT     NOT               NULL,
  UNIQUE(field_one),
  UNIQUE(field_two)
);
"""
    )


# Each entry raises the schema version by one, applied after the core updates.
SCHEMA_EXTENSIONS: tuple[Callable[[sqlite3.Connection], None], ...] = (
    schema_append_1,
    schema_append_2,
)


def apply_schema_extensions(connection: sqlite3.Connection) -> None:
    """Apply every schema extension in order."""
    for update in SCHEMA_EXTENSIONS:
        update(connection)


_MAPPER: EntityMapper[ExtendedTable] = EntityMapper(
    table="extended_table",
    entity=ExtendedTable,
    columns=("key", "value"),
    key="key",
    filters=("key",),
    delete_by="key",
    entity_name="ExtendedTable",
)


def get_extended_tables(
    connection: sqlite3.Connection, *args: ExtendedTableFilter
) -> list[ExtendedTable]:
    """Return all entries, or those matching any of the given filters."""
    return _MAPPER.get_many(connection, *args)


def get_extended_table(connection: sqlite3.Connection, key: str) -> ExtendedTable:
    """Return the entry with the given key."""
    return _MAPPER.get_one(connection, key)


def get_extended_table_id(connection: sqlite3.Connection, key: str) -> int:
    """Return the row ID of the entry with the given key."""
    return _MAPPER.get_id(connection, key)


def extended_table_exists(connection: sqlite3.Connection, key: str) -> bool:
    """Report whether an entry with the given key exists."""
    return _MAPPER.exists(connection, key)


def create_extended_table(connection: sqlite3.Connection, entry: ExtendedTable) -> int:
    """Add an entry and return its row ID."""
    return _MAPPER.create(connection, entry)


def delete_extended_table(connection: sqlite3.Connection, key: str) -> None:
    """Delete the entry with the given key."""
    _MAPPER.delete_one(connection, key)


def update_extended_table(
    connection: sqlite3.Connection, key: str, entry: ExtendedTable
) -> None:
    """Replace the entry with the given key."""
    _MAPPER.update(connection, key, entry)