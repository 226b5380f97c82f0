"""Registry of SQL statements that are checked once and then reused by code."""

from __future__ import annotations

import inspect
import logging
import os
import re
import sqlite3
from typing import Optional

logger = logging.getLogger(__name__)

CORE_PROJECT = "microcluster"

_MODULE_VERSION = re.compile(r"v[0-9]+")


class StatementRegistry:
    """Holds SQL statements by project and the subset that has been prepared."""

    def __init__(self) -> None:
        self._by_project: dict[str, dict[int, str]] = {}
        self._prepared: dict[int, str] = {}

    def register(self, sql: str, project: Optional[str] = None) -> int:
        """Register a statement and return its code, unique across all projects.

        Without a project, the project is derived from the caller's file path.
        """
        if project is None:
            project = get_caller_project()

        code = sum(len(statements) for statements in self._by_project.values())
        self._by_project.setdefault(project, {})[code] = sql
        return code

    def prepare(
        self, connection: sqlite3.Connection, project: str, skip_errors: bool = False
    ) -> None:
        """Compile every statement of the core project and of ``project``.

        A statement that fails to compile raises, unless ``skip_errors`` is set,
        in which case it stays unprepared.
        """
        logger.info("Preparing statements for project %r", project)

        projects = [CORE_PROJECT]
        if project != CORE_PROJECT:
            projects.append(project)

        for name in projects:
            for code, sql in self._by_project.get(name, {}).items():
                try:
                    _compile(connection, sql)
                except sqlite3.Error as err:
                    if skip_errors:
                        continue
                    raise type(err)(f"{sql!r}: {err}") from err

                self._prepared[code] = sql

    def stmt(self, code: int) -> str:
        """Return the prepared statement with the given code."""
        try:
            return self._prepared[code]
        except KeyError:
            raise LookupError(
                f"No prepared statement registered with code {code}"
            ) from None

    def stmt_string(self, code: int) -> str:
        """Return the registered query text with the given code."""
        for statements in self._by_project.values():
            if code in statements:
                return statements[code]

        raise LookupError(f"No prepared statement registered with code {code}")


def _compile(connection: sqlite3.Connection, sql: str) -> None:
    """Have SQLite compile the statement without running it."""
    connection.execute("EXPLAIN " + sql, (None,) * sql.count("?")).fetchall()


def _base(path: str) -> str:
    sep = os.sep
    if not path:
        return "."

    stripped = path.rstrip(sep)
    if not stripped:
        return sep

    return stripped.rsplit(sep, 1)[-1]


def project_from_path(path: str) -> str:
    """Derive a project name from a source file path."""
    sep = os.sep

    # Snap build path: ...parts/<project>/build...
    _, found, after = path.partition(f"parts{sep}")
    if found:
        project, found, _ = after.partition(f"{sep}build")
        if found:
            return project

    # Module path: .../<project>@<version>...
    before, found, _ = path.partition("@")
    base = _base(before)
    if found and base:
        if _MODULE_VERSION.fullmatch(base):
            return _base(os.path.dirname(before))
        return base

    # Source tree of the form .../src/<host>/<author>/<project>/...
    _, _, after = path.partition(f"{sep}src{sep}")
    tree = after.split(sep)
    if len(tree) >= 3:
        return tree[2]

    return ""


def get_caller_project() -> str:
    """Return the project of whoever called the function that called this one."""
    frame = inspect.currentframe()
    for _ in range(2):
        frame = frame.f_back if frame is not None else None

    if frame is None:
        return ""

    try:
        return project_from_path(frame.f_code.co_filename)
    finally:
        del frame


REGISTRY = StatementRegistry()