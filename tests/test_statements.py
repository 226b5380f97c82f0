import os
import sqlite3

import pytest

from microcluster.statements import (
    StatementRegistry,
    get_caller_project,
    project_from_path,
)


def _path(*parts):
    return os.sep + os.sep.join(parts)


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE things (id INTEGER PRIMARY KEY, name TEXT)")
    yield conn
    conn.close()


def test_codes_are_unique_across_projects():
    registry = StatementRegistry()
    first = registry.register("SELECT 1", "alpha")
    second = registry.register("SELECT 2", "beta")
    third = registry.register("SELECT 3", "alpha")
    assert second == first + 1
    assert third == second + 1
    assert registry.stmt_string(first) == "SELECT 1"
    assert registry.stmt_string(second) == "SELECT 2"
    assert registry.stmt_string(third) == "SELECT 3"


def test_stmt_string_unknown_code():
    registry = StatementRegistry()
    with pytest.raises(LookupError, match="No prepared statement registered with code 7"):
        registry.stmt_string(7)


def test_stmt_requires_prepare(connection):
    registry = StatementRegistry()
    code = registry.register("SELECT id FROM things WHERE name = ?", "other")
    with pytest.raises(LookupError):
        registry.stmt(code)
    registry.prepare(connection, "other", False)
    assert registry.stmt(code) == "SELECT id FROM things WHERE name = ?"


def test_prepare_includes_core_project(connection):
    registry = StatementRegistry()
    core = registry.register("SELECT name FROM things", "microcluster")
    own = registry.register("DELETE FROM things WHERE id = ?", "app")
    unrelated = registry.register("SELECT 1", "elsewhere")
    registry.prepare(connection, "app", False)
    assert registry.stmt(core) == "SELECT name FROM things"
    assert registry.stmt(own) == "DELETE FROM things WHERE id = ?"
    with pytest.raises(LookupError):
        registry.stmt(unrelated)


def test_prepare_does_not_modify_data(connection):
    registry = StatementRegistry()
    registry.register("INSERT INTO things (name) VALUES (?)", "app")
    registry.prepare(connection, "app", False)
    assert connection.execute("SELECT count(*) FROM things").fetchone()[0] == 0


def test_prepare_reports_bad_statement(connection):
    registry = StatementRegistry()
    registry.register("SELECT * FROM missing_table", "app")
    with pytest.raises(sqlite3.OperationalError, match="missing_table"):
        registry.prepare(connection, "app", False)


def test_prepare_can_skip_errors(connection):
    registry = StatementRegistry()
    bad = registry.register("SELECT * FROM missing_table", "app")
    good = registry.register("SELECT id FROM things", "app")
    registry.prepare(connection, "app", True)
    assert registry.stmt(good) == "SELECT id FROM things"
    with pytest.raises(LookupError):
        registry.stmt(bad)


def test_project_from_snap_build_path():
    path = _path("root", "parts", "myproject", "build", "cluster", "stmt.go")
    assert project_from_path(path) == "myproject"


def test_project_from_versioned_module_path():
    path = _path("home", "u", "mod", "example.com", "org", "cluster", "v3@v3.0.0", "stmt.go")
    assert project_from_path(path) == "cluster"


def test_project_from_module_path():
    path = _path("home", "u", "mod", "example.com", "org", "widget@v1.2.0", "stmt.go")
    assert project_from_path(path) == "widget"


def test_project_from_source_tree():
    path = _path("home", "u", "go", "src", "example.com", "author", "gadget", "pkg", "f.go")
    assert project_from_path(path) == "gadget"


def test_project_from_unknown_path():
    assert project_from_path(_path("tmp", "file.py")) == ""


def _ask_caller_project():
    return get_caller_project()


def test_caller_project_uses_callers_file():
    assert _ask_caller_project() == project_from_path(__file__)


def test_register_without_project_uses_caller():
    registry = StatementRegistry()
    code = registry.register("SELECT 1")
    project = project_from_path(__file__)
    other = registry.register("SELECT 2", project)
    assert registry.stmt_string(code) == "SELECT 1"
    conn = sqlite3.connect(":memory:")
    try:
        registry.prepare(conn, project or "microcluster", False)
        assert registry.stmt(code) == "SELECT 1"
        assert registry.stmt(other) == "SELECT 2"
    finally:
        conn.close()