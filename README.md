# johandler

Bookkeeping records for a small practice: clients and their partners,
sellers, case processes, orders, payments, postponed payments and fees. The
records live in a SQLite database, and ordered migrations build its schema.
It uses only the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Setting up a database

`johandler.schema` builds the schema with a list of migrations applied in
order. Each applied migration is recorded in a tracking table, so running
`migrate_up` again applies only the ones still missing.

```python
import sqlite3

from johandler.schema import applied_migrations, migrate_down, migrate_up

conn = sqlite3.connect("johandler.db")
migrate_up(conn)                 # returns the names it applied
print(applied_migrations(conn))  # names in the order they were applied

migrate_down(conn, 1)            # roll back the latest migration
migrate_down(conn, None)         # roll back everything
```

`migrate_down` raises `ValueError` when `steps` is negative. It raises
`LookupError` when the database records a migration the package does not
know.

`migrations()` returns every `Migration` in the order it is applied. Each one
has a `name` and a `TableDef`. The `TableDef` holds `ColumnDef` and
`ForeignKeyDef` entries, and its `create_sql()` and `drop_sql()` give the
statements that `Migration.up(conn)` and `Migration.down(conn)` run. Every table
has `created_at` and `updated_at` columns, an autoincrement `id` and a `pid`.
Foreign keys are declared with cascading deletes and updates. SQLite enforces
them only after you run `PRAGMA foreign_keys = ON` on the connection.

## Entities

`johandler.entities` describes each table as a frozen dataclass: `Client`,
`Fee`, `OrderFee`, `Order`, `Partner`, `Payment`, `PostponedPayment`,
`Process`, `ProcessFee`, `Seller` and `User`.

- `Entity.from_row(row)` builds a record from a mapping of column names to
  values. It converts UUIDs, timestamps (naive ones are taken as UTC) and
  dates. It raises `KeyError` for a missing column and `ValueError` for a null
  in a non-nullable column.
- `entity_for_table(table)` returns the class for a table name and raises
  `KeyError` for an unknown name.
- `relations_of(table)` returns the table's `Relation` entries. Each entry has
  a `RelationKind` of `BELONGS_TO` or `HAS_MANY`.

## Working with records

Clients, fees and order fees each have a module, `johandler.clients`,
`johandler.fees` and `johandler.order_fees`, with the same functions:
`find_by_pid`, `find_by_id`, `find_all`, `create`, `update` and `delete`. A
record gets a fresh public id (`pid`) when it is created. Its `updated_at`
stamp is refreshed on every update.

```python
import sqlite3

from johandler import clients, fees
from johandler.schema import migrate_up

conn = sqlite3.connect(":memory:")
migrate_up(conn)

all_fees = fees.create(conn, fees.NewFee(fee="Filing fee", type="fixed"))

client = clients.create(
    conn,
    clients.NewClient(
        name="Acme Ltd",
        contact="Jane Doe",
        phone="front desk",
        email="jane@example.com",
    ),
)
same = clients.find_by_pid(conn, client.pid)
```

- For fees and order fees, `create`, `update` and `delete` return the full
  list of records afterwards.
- The client functions `create` and `update` return the single client, and
  `delete` returns nothing.
- A `NewClient` may name a partner by `partner_pid`. That partner must exist.
- When no record matches a pid or id, the lookups raise
  `johandler.records.EntityNotFoundError`.

The other tables have no module of their own. For them, use the generic
functions in `johandler.records`:

- `fetch_one(conn, entity, column, value)`
- `fetch_all(conn, entity)`
- `insert_record(conn, entity, values)`, which assigns a fresh `pid` and the
  timestamps
- `update_record(conn, entity, record_id, values)`
- `delete_record(conn, entity, record_id)`

Wrap changes in `with transaction(conn):`. It commits when the block finishes
and rolls back when the block raises.

## What it does not do

This package is a library for the data layer only. It has:

- no web or HTTP API;
- no command-line program;
- no user sign-up, login or password handling, although the `users` table and
  the `User` record exist;
- no e-mail sending;
- no background jobs.

Orders, payments, postponed payments, partners, sellers and processes have a
schema and record classes but no dedicated functions beyond the generic ones
in `johandler.records`.