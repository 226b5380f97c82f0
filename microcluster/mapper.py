"""Generic table access: fetch, create, update and delete entities by key."""

from __future__ import annotations

import dataclasses
import sqlite3
from http import HTTPStatus
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from microcluster.statements import CORE_PROJECT, REGISTRY, StatementRegistry

T = TypeVar("T")


class StatusError(Exception):
    """An error that carries an HTTP status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = HTTPStatus(status)


class NotFoundError(StatusError):
    """The requested entry does not exist."""

    def __init__(self, message: str) -> None:
        super().__init__(HTTPStatus.NOT_FOUND, message)


class ConflictError(StatusError):
    """An entry with the same key already exists."""

    def __init__(self, message: str) -> None:
        super().__init__(HTTPStatus.CONFLICT, message)


def _convert(
    converters: Mapping[str, Callable[[Any], Any]], name: str, value: Any
) -> Any:
    converter = converters.get(name)
    if converter is None:
        return value
    return converter(value)


class EntityMapper(Generic[T]):
    """Registers the statements for one table and runs them.

    The entity is a dataclass whose fields are ``id`` plus ``columns``. Filters
    are dataclasses whose fields name columns; each filter may set exactly one
    of the columns listed in ``filters``.
    """

    def __init__(
        self,
        *,
        table: str,
        entity: Callable[..., T],
        columns: Iterable[str],
        key: str,
        filters: Iterable[str],
        delete_by: str,
        registry: Optional[StatementRegistry] = None,
        project: str = CORE_PROJECT,
        encoders: Optional[Mapping[str, Callable[[Any], Any]]] = None,
        decoders: Optional[Mapping[str, Callable[[Any], Any]]] = None,
        entity_name: Optional[str] = None,
    ) -> None:
        self.table = table
        self.entity = entity
        self.columns = tuple(columns)
        self.key = key
        self.filters = tuple(filters)
        self.delete_by = delete_by
        self.registry = registry if registry is not None else REGISTRY
        self.encoders = dict(encoders or {})
        self.decoders = dict(decoders or {})
        self.entity_name = entity_name or getattr(entity, "__name__", table)

        if key not in self.filters:
            raise ValueError(f"Key column {key!r} must be one of the filter columns")

        def register(sql: str) -> int:
            return self.registry.register(sql, project)

        select = ", ".join(f"{table}.{column}" for column in ("id", *self.columns))
        order = f"  ORDER BY {table}.{key}\n"
        self._objects = register(f"\nSELECT {select}\n  FROM {table}\n{order}")
        self._objects_by = {
            column: register(
                f"\nSELECT {select}\n  FROM {table}\n"
                f"  WHERE ( {table}.{column} = ? )\n{order}"
            )
            for column in self.filters
        }
        self._id = register(f"\nSELECT {table}.id FROM {table}\n  WHERE {table}.{key} = ?\n")
        placeholders = ", ".join("?" for _ in self.columns)
        self._create = register(
            f"\nINSERT INTO {table} ({', '.join(self.columns)})\n  VALUES ({placeholders})\n"
        )
        self._delete = register(f"\nDELETE FROM {table} WHERE {delete_by} = ?\n")
        assignments = ", ".join(f"{column} = ?" for column in self.columns)
        self._update = register(f"\nUPDATE {table}\n  SET {assignments}\n WHERE id = ?\n")

    def _from_row(self, row: Iterable[Any]) -> T:
        values = dict(zip(("id", *self.columns), row))
        decoded = {
            name: _convert(self.decoders, name, value) for name, value in values.items()
        }
        return self.entity(**decoded)

    def _to_args(self, obj: T) -> tuple:
        return tuple(
            _convert(self.encoders, column, getattr(obj, column))
            for column in self.columns
        )

    def _select(self, connection: sqlite3.Connection, sql: str, args: Iterable[Any]) -> list[T]:
        return [self._from_row(row) for row in connection.execute(sql, tuple(args)).fetchall()]

    def _filter_column(self, flt: Any) -> str:
        active = [
            field.name
            for field in dataclasses.fields(flt)
            if getattr(flt, field.name) is not None
        ]
        if not active:
            raise ValueError(f"Cannot filter on empty {type(flt).__name__}")
        if len(active) != 1 or active[0] not in self._objects_by:
            raise ValueError("No statement exists for the given Filter")
        return active[0]

    def get_many(self, connection: sqlite3.Connection, *filters: Any) -> list[T]:
        """Return all entries, or those matching any of the given filters."""
        if not filters:
            return self._select(connection, self.registry.stmt(self._objects), ())

        args: list[Any] = []
        query_parts: list[str] = ["", ""]
        for index, flt in enumerate(filters):
            column = self._filter_column(flt)
            args.append(getattr(flt, column))
            code = self._objects_by[column]

            if len(filters) == 1:
                return self._select(connection, self.registry.stmt(code), args)

            parts = self.registry.stmt_string(code).split("ORDER BY", 1)
            if index == 0:
                query_parts = parts + [""] * (2 - len(parts))
                continue

            _, _, where = parts[0].partition("WHERE")
            query_parts[0] += "OR" + where

        return self._select(connection, "ORDER BY".join(query_parts), args)

    def get_one(self, connection: sqlite3.Connection, key: Any) -> T:
        """Return the single entry with the given key."""
        code = self._objects_by[self.key]
        objects = self._select(connection, self.registry.stmt(code), (key,))
        if not objects:
            raise NotFoundError(f"{self.entity_name} not found")
        if len(objects) > 1:
            raise RuntimeError(f'More than one "{self.table}" entry matches')
        return objects[0]

    def get_id(self, connection: sqlite3.Connection, key: Any) -> int:
        """Return the row ID of the entry with the given key."""
        row = connection.execute(self.registry.stmt(self._id), (key,)).fetchone()
        if row is None:
            raise NotFoundError(f"{self.entity_name} not found")
        return int(row[0])

    def exists(self, connection: sqlite3.Connection, key: Any) -> bool:
        """Report whether an entry with the given key exists."""
        try:
            self.get_id(connection, key)
        except NotFoundError:
            return False
        return True

    def create(self, connection: sqlite3.Connection, obj: T) -> int:
        """Insert a new entry and return its row ID."""
        if self.exists(connection, getattr(obj, self.key)):
            raise ConflictError(f'This "{self.table}" entry already exists')

        cursor = connection.execute(self.registry.stmt(self._create), self._to_args(obj))
        return int(cursor.lastrowid)

    def delete_one(self, connection: sqlite3.Connection, value: Any) -> None:
        """Delete the single entry whose delete column equals ``value``."""
        cursor = connection.execute(self.registry.stmt(self._delete), (value,))
        deleted = cursor.rowcount
        if deleted == 0:
            raise NotFoundError(f"{self.entity_name} not found")
        if deleted > 1:
            raise RuntimeError(
                f"Query deleted {deleted} {self.entity_name} rows instead of 1"
            )

    def update(self, connection: sqlite3.Connection, key: Any, obj: T) -> None:
        """Replace the entry with the given key by ``obj``."""
        row_id = self.get_id(connection, key)
        cursor = connection.execute(
            self.registry.stmt(self._update), (*self._to_args(obj), row_id)
        )
        if cursor.rowcount != 1:
            raise RuntimeError(f"Query updated {cursor.rowcount} rows instead of 1")