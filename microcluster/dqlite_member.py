"""Cluster member details that are known locally, without the database."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class NodeRole(enum.IntEnum):
    """Role of a node in the replicated database."""

    VOTER = 0
    STAND_BY = 1
    SPARE = 2

    def __str__(self) -> str:
        return _ROLE_NAMES[self]


_ROLE_NAMES = {
    NodeRole.VOTER: "voter",
    NodeRole.STAND_BY: "stand-by",
    NodeRole.SPARE: "spare",
}

_ROLES_BY_NAME = {name: role for role, name in _ROLE_NAMES.items()}


@dataclass(frozen=True)
class NodeInfo:
    """Identity, address and role of a database node."""

    id: int
    address: str
    role: NodeRole


@dataclass
class DqliteMember:
    """A cluster member as seen by the local database node."""

    dqlite_id: int
    address: str
    role: str
    name: str

    def node_info(self) -> NodeInfo:
        """Return the database node information for this member."""
        role = _ROLES_BY_NAME.get(self.role)
        if role is None:
            raise ValueError(f'invalid dqlite role "{self.role}"')

        return NodeInfo(id=self.dqlite_id, address=self.address, role=role)


@dataclass
class Schema:
    """An entry of the database schema table."""

    id: int
    version: int
    updated_at: Optional[datetime] = None