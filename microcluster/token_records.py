"""Database entries for join tokens."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from microcluster.mapper import EntityMapper

logger = logging.getLogger(__name__)


@dataclass
class CoreTokenRecord:
    """A join token record as stored in the database."""

    id: int = 0
    secret: str = ""
    name: str = ""
    expiry_date: Optional[datetime] = None

    def expired(self) -> bool:
        """Report whether the token has an expiry date in the past."""
        if self.expiry_date is None:
            return False
        return self.expiry_date < datetime.now(self.expiry_date.tzinfo)


@dataclass
class CoreTokenRecordFilter:
    """Selects token records; only filtering by secret is supported."""

    id: Optional[int] = None
    secret: Optional[str] = None
    name: Optional[str] = None


def _encode_time(value: Optional[datetime]) -> Optional[str]:
    return None if value is None else value.isoformat()


def _decode_time(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


_MAPPER: EntityMapper[CoreTokenRecord] = EntityMapper(
    table="core_token_records",
    entity=CoreTokenRecord,
    columns=("secret", "name", "expiry_date"),
    key="secret",
    filters=("secret",),
    delete_by="name",
    encoders={"expiry_date": _encode_time},
    decoders={"expiry_date": _decode_time},
    entity_name="CoreTokenRecord",
)


def get_core_token_records(
    connection: sqlite3.Connection, *args: CoreTokenRecordFilter
) -> list[CoreTokenRecord]:
    """Return all token records, or those matching any of the given filters."""
    return _MAPPER.get_many(connection, *args)


def get_core_token_record(connection: sqlite3.Connection, secret: str) -> CoreTokenRecord:
    """Return the token record with the given secret."""
    return _MAPPER.get_one(connection, secret)


def get_core_token_record_id(connection: sqlite3.Connection, secret: str) -> int:
    """Return the row ID of the token record with the given secret."""
    return _MAPPER.get_id(connection, secret)


def core_token_record_exists(connection: sqlite3.Connection, secret: str) -> bool:
    """Report whether a token record with the given secret exists."""
    return _MAPPER.exists(connection, secret)


def create_core_token_record(connection: sqlite3.Connection, record: CoreTokenRecord) -> int:
    """Add a token record and return its row ID."""
    return _MAPPER.create(connection, record)


def delete_core_token_record(connection: sqlite3.Connection, name: str) -> None:
    """Delete the token record with the given name."""
    _MAPPER.delete_one(connection, name)


def delete_expired_core_token_records(connection: sqlite3.Connection) -> None:
    """Delete every token record whose expiry date has passed."""
    for record in get_core_token_records(connection):
        if record.expired():
            delete_core_token_record(connection, record.name)
            logger.info("Removed expired join token %r", record.name)