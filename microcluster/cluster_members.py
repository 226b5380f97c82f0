"""Database entries for the members of the replicated database cluster."""

from __future__ import annotations

import enum
import json
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from microcluster.mapper import EntityMapper

ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


class Role(str, enum.Enum):
    """Role of a cluster member in the database."""

    # The member is about to be added or removed.
    PENDING = "PENDING"


@dataclass
class CoreClusterMember:
    """A cluster member as stored in the global database."""

    id: int = 0
    name: str = ""
    address: str = ""
    certificate: str = ""
    schema_internal: int = 0
    schema_external: int = 0
    api_extensions: list[str] = field(default_factory=list)
    heartbeat: datetime = ZERO_TIME
    role: str = ""


@dataclass
class CoreClusterMemberFilter:
    """Selects cluster members by exactly one of its fields."""

    address: Optional[str] = None
    name: Optional[str] = None


def _encode_time(value: datetime) -> str:
    return value.isoformat()


def _decode_time(value: Any) -> datetime:
    if value is None or value == "":
        return ZERO_TIME
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _encode_extensions(value: Any) -> str:
    return json.dumps(list(value or []))


def _decode_extensions(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    return list(json.loads(value))


def _encode_role(value: Any) -> str:
    return value.value if isinstance(value, Role) else str(value)


_MAPPER: EntityMapper[CoreClusterMember] = EntityMapper(
    table="core_cluster_members",
    entity=CoreClusterMember,
    columns=(
        "name",
        "address",
        "certificate",
        "schema_internal",
        "schema_external",
        "api_extensions",
        "heartbeat",
        "role",
    ),
    key="name",
    filters=("address", "name"),
    delete_by="address",
    encoders={
        "api_extensions": _encode_extensions,
        "heartbeat": _encode_time,
        "role": _encode_role,
    },
    decoders={
        "api_extensions": _decode_extensions,
        "heartbeat": _decode_time,
    },
    entity_name="CoreClusterMember",
)


def get_core_cluster_members(
    connection: sqlite3.Connection, *args: CoreClusterMemberFilter
) -> list[CoreClusterMember]:
    """Return all cluster members, or those matching any of the given filters."""
    return _MAPPER.get_many(connection, *args)


def get_core_cluster_member(connection: sqlite3.Connection, name: str) -> CoreClusterMember:
    """Return the cluster member with the given name."""
    return _MAPPER.get_one(connection, name)


def get_core_cluster_member_id(connection: sqlite3.Connection, name: str) -> int:
    """Return the row ID of the cluster member with the given name."""
    return _MAPPER.get_id(connection, name)


def core_cluster_member_exists(connection: sqlite3.Connection, name: str) -> bool:
    """Report whether a cluster member with the given name exists."""
    return _MAPPER.exists(connection, name)


def create_core_cluster_member(
    connection: sqlite3.Connection, member: CoreClusterMember
) -> int:
    """Add a cluster member and return its row ID."""
    return _MAPPER.create(connection, member)


def delete_core_cluster_member(connection: sqlite3.Connection, address: str) -> None:
    """Delete the cluster member with the given address."""
    _MAPPER.delete_one(connection, address)


def update_core_cluster_member(
    connection: sqlite3.Connection, name: str, member: CoreClusterMember
) -> None:
    """Replace the cluster member with the given name."""
    _MAPPER.update(connection, name, member)