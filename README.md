# microcluster

Building blocks for a small clustered daemon that keeps its shared state in
SQLite: a registry of SQL statements, table helpers for cluster members and
join tokens, the local daemon configuration file, and a way to run a query
against every client of a cluster.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

### `microcluster.statements`

`StatementRegistry` keeps the SQL text of every registered statement under a
code that is unique across all projects.

- `register(sql, project=None)` stores a statement and returns its code. With
  no project, the project is worked out from the caller's file path.
- `prepare(connection, project, skip_errors=False)` has SQLite compile every
  statement of the `microcluster` project and of `project`. A statement that
  does not compile raises `sqlite3.Error`, unless `skip_errors` is set, in
  which case it is left unprepared.
- `stmt(code)` returns a prepared statement and `stmt_string(code)` any
  registered one; both raise `LookupError` for an unknown code.

`project_from_path(path)` derives a project name from a source path (a
`parts/<project>/build` path, a `<project>@<version>` module path, or a
`src/<host>/<author>/<project>` tree). `get_caller_project()` applies it to
the file of the caller's caller. `REGISTRY` is the shared registry that the
table helpers use.

### `microcluster.mapper`

`EntityMapper` registers the statements for one table and offers `get_many`,
`get_one`, `get_id`, `exists`, `create`, `delete_one` and `update`. Each
filter passed to `get_many` must set exactly one supported field; several
filters are combined with `OR`. Missing rows raise `NotFoundError`, a
duplicate key on `create` raises `ConflictError`; both are `StatusError`s
carrying an `http.HTTPStatus`. An empty filter, or one with no matching
statement, raises `ValueError`.

Statements are only usable after `REGISTRY.prepare(...)` has been run on a
connection whose tables exist.

### `microcluster.cluster_members`

`CoreClusterMember` rows of the `core_cluster_members` table, `Role` (with
`Role.PENDING`), `CoreClusterMemberFilter` (by `address` or `name`) and the
functions `get_core_cluster_members`, `get_core_cluster_member`,
`get_core_cluster_member_id`, `core_cluster_member_exists`,
`create_core_cluster_member`, `delete_core_cluster_member` (by address) and
`update_core_cluster_member` (by name). API extensions are stored as JSON and
heartbeats as ISO 8601 text.

### `microcluster.token_records`

`CoreTokenRecord` rows of the `core_token_records` table, filtered by
`secret` with `CoreTokenRecordFilter`. `CoreTokenRecord.expired()` is true
when an expiry date is set and lies in the past.
`delete_expired_core_token_records(connection)` removes every expired record.
Records are deleted by name with `delete_core_token_record`.

### `microcluster.dqlite_member`

`DqliteMember` describes a member as the local database node knows it.
`node_info()` returns a `NodeInfo` whose `NodeRole` comes from the role name
`voter`, `stand-by` or `spare`; any other name raises `ValueError`. `Schema`
is an entry of the schema version table.

### `microcluster.daemon_config`

`DaemonConfig(path)` holds `DaemonSettings` (`name`, `address` and `servers`,
a mapping of names to `ServerConfig`) behind a lock. The `name`, `address`
and `servers` properties read and set them; `servers` returns a copy.
`load()` reads the YAML file, `write()` stores it with mode 0644, and
`dump()` returns the settings object itself. Changes stay in memory until
`write()` is called.

### `microcluster.member_cluster`

`Cluster` is a list of clients. `select_random()` picks one (an empty cluster
raises `IndexError`). `query(query, concurrent=False)` calls `query(client)`
for each client: one after another, stopping at the first error, or all at
once in threads, raising the first error once every call has finished.

### `microcluster.example_database` and `microcluster.example_api`

A sample extension schema (`schema_append_1`, `schema_append_2`,
`apply_schema_extensions`) with helpers for its `extended_table`
(`get_extended_tables`, `get_extended_table`, `get_extended_table_id`,
`extended_table_exists`, `create_extended_table`, `delete_extended_table`,
`update_extended_table`), and `extensions()` / `version()` for the sample
application.

## Example

```python
import sqlite3

from microcluster.example_database import (
    ExtendedTable,
    apply_schema_extensions,
    create_extended_table,
    get_extended_table,
)
from microcluster.statements import REGISTRY

connection = sqlite3.connect(":memory:")
apply_schema_extensions(connection)
REGISTRY.prepare(connection, "microcluster", skip_errors=True)

create_extended_table(connection, ExtendedTable(key="colour", value="blue"))
print(get_extended_table(connection, "colour").value)
```

## What the package does not do

There is no daemon, no network API or HTTP client, no command line tool, and
no database replication or cluster join and recovery logic. The package
creates no core tables itself: `core_cluster_members` and
`core_token_records` must already exist in the connection you pass in. Only
the example schema is created by the package.