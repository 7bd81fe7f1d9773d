"""Database schema definitions and the ordered list of migrations that build it."""

from __future__ import annotations

import enum
import sqlite3
import time
from dataclasses import dataclass, field

MIGRATIONS_TABLE = "seaql_migrations"


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class ColumnType(str, enum.Enum):
    """Storage types used by the schema."""

    INTEGER = "integer"
    STRING = "varchar"
    UUID = "uuid_text"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date_text"
    TIMESTAMP_TZ = "timestamp_with_timezone_text"


class ForeignKeyAction(str, enum.Enum):
    CASCADE = "CASCADE"
    RESTRICT = "RESTRICT"
    SET_NULL = "SET NULL"
    NO_ACTION = "NO ACTION"


@dataclass(frozen=True)
class ColumnDef:
    """One column of a table."""

    name: str
    type: ColumnType
    nullable: bool = False
    unique: bool = False
    primary_key: bool = False
    default: str | None = None

    def sql(self) -> str:
        parts = [_quote(self.name), self.type.value]
        if self.primary_key:
            parts.append("NOT NULL PRIMARY KEY AUTOINCREMENT")
        elif not self.nullable:
            parts.append("NOT NULL")
        if self.unique:
            parts.append("UNIQUE")
        if self.default is not None:
            parts.append(f"DEFAULT {self.default}")
        return " ".join(parts)


@dataclass(frozen=True)
class ForeignKeyDef:
    """A named foreign key from one column to another table's column."""

    name: str
    column: str
    ref_table: str
    ref_column: str = "id"
    on_delete: ForeignKeyAction = ForeignKeyAction.CASCADE
    on_update: ForeignKeyAction = ForeignKeyAction.CASCADE

    def sql(self) -> str:
        return (
            f"CONSTRAINT {_quote(self.name)} FOREIGN KEY ({_quote(self.column)}) "
            f"REFERENCES {_quote(self.ref_table)} ({_quote(self.ref_column)}) "
            f"ON DELETE {self.on_delete.value} ON UPDATE {self.on_update.value}"
        )


@dataclass(frozen=True)
class TableDef:
    """A table with its columns and foreign keys."""

    name: str
    columns: tuple[ColumnDef, ...]
    foreign_keys: tuple[ForeignKeyDef, ...] = field(default_factory=tuple)

    def create_sql(self) -> str:
        body = [c.sql() for c in self.columns] + [fk.sql() for fk in self.foreign_keys]
        return f"CREATE TABLE {_quote(self.name)} ( " + ", ".join(body) + " )"

    def drop_sql(self) -> str:
        return f"DROP TABLE {_quote(self.name)}"


@dataclass(frozen=True)
class Migration:
    """A named schema step that creates one table and can drop it again."""

    name: str
    table: TableDef

    def up(self, conn: sqlite3.Connection) -> None:
        conn.execute(self.table.create_sql())

    def down(self, conn: sqlite3.Connection) -> None:
        conn.execute(self.table.drop_sql())


# Column helpers ----------------------------------------------------------

def _pk_auto(name: str) -> ColumnDef:
    return ColumnDef(name, ColumnType.INTEGER, primary_key=True)


def _col(name: str, ctype: ColumnType, *, null: bool = False, uniq: bool = False) -> ColumnDef:
    return ColumnDef(name, ctype, nullable=null, unique=uniq)


def _timestamps() -> tuple[ColumnDef, ...]:
    return (
        ColumnDef("created_at", ColumnType.TIMESTAMP_TZ, default="CURRENT_TIMESTAMP"),
        ColumnDef("updated_at", ColumnType.TIMESTAMP_TZ, default="CURRENT_TIMESTAMP"),
    )


def _table(name: str, *columns: ColumnDef, foreign_keys: tuple[ForeignKeyDef, ...] = ()) -> TableDef:
    return TableDef(name, _timestamps() + columns, foreign_keys)


def _fk(name: str, column: str, ref_table: str) -> ForeignKeyDef:
    return ForeignKeyDef(name, column, ref_table)


S, I, U, F, B, D, T = (
    ColumnType.STRING,
    ColumnType.INTEGER,
    ColumnType.UUID,
    ColumnType.FLOAT,
    ColumnType.BOOLEAN,
    ColumnType.DATE,
    ColumnType.TIMESTAMP_TZ,
)

_MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        "m20220101_000001_users",
        _table(
            "users",
            _pk_auto("id"),
            _col("pid", U),
            _col("email", S, uniq=True),
            _col("password", S),
            _col("api_key", S, uniq=True),
            _col("name", S),
            _col("reset_token", S, null=True),
            _col("reset_sent_at", T, null=True),
            _col("email_verification_token", S, null=True),
            _col("email_verification_sent_at", T, null=True),
            _col("email_verified_at", T, null=True),
        ),
    ),
    Migration(
        "m20241216_021800_processes",
        _table("processes", _pk_auto("id"), _col("pid", U, uniq=True), _col("case_type", S)),
    ),
    Migration(
        "m20241216_022307_partners",
        _table(
            "partners",
            _pk_auto("id"),
            _col("pid", U, uniq=True),
            _col("name", S),
            _col("information", S, null=True),
            _col("phone", S, null=True),
            _col("email", S, null=True),
        ),
    ),
    Migration(
        "m20241216_022614_sellers",
        _table("sellers", _pk_auto("id"), _col("pid", U, uniq=True), _col("name", S)),
    ),
    Migration(
        "m20241216_022844_clients",
        _table(
            "clients",
            _pk_auto("id"),
            _col("pid", U, uniq=True),
            _col("name", S),
            _col("contact", S),
            _col("phone", S),
            _col("phone2", S, null=True),
            _col("email", S),
            _col("partner_id", I, null=True),
            foreign_keys=(_fk("fk-clients-partner_ids", "partner_id", "partners"),),
        ),
    ),
    Migration(
        "m20241216_025420_orders",
        _table(
            "orders",
            _pk_auto("id"),
            _col("pid", U, uniq=True),
            _col("client_id", I),
            _col("process_id", I),
            _col("open", B),
            _col("payout", F),
            _col("fee", F),
            _col("partner_fee", F, null=True),
            _col("seller_id", I),
            foreign_keys=(
                _fk("fk-order-seller_ids", "seller_id", "sellers"),
                _fk("fk-orders-client_ids", "client_id", "clients"),
                _fk("fk-orders-process_ids", "process_id", "processes"),
            ),
        ),
    ),
    Migration(
        "m20241217_010835_payments",
        _table(
            "payments",
            _pk_auto("id"),
            _col("pid", U, uniq=True),
            _col("value", F),
            _col("payment_date", D, null=True),
            _col("due_date", D),
            _col("payment_method", S, null=True),
            _col("currency", S, null=True),
            _col("postponed_payment", B, null=True),
            _col("order_id", I),
            _col("open", B),
            foreign_keys=(_fk("fk-payments-order_ids", "order_id", "orders"),),
        ),
    ),
    Migration(
        "m20241217_011107_postponed_payments",
        _table(
            "postponed_payments",
            _pk_auto("id"),
            _col("pid", U, uniq=True),
            _col("payment_id", I),
            _col("postponed_date", D),
            foreign_keys=(_fk("fk-postponed_payments-payment_ids", "payment_id", "payments"),),
        ),
    ),
    Migration(
        "m20241220_012355_fees",
        _table(
            "fees",
            _pk_auto("id"),
            _col("pid", U, uniq=True),
            _col("fee", S),
            _col("type", S, null=True),
        ),
    ),
    Migration(
        "m20241220_012613_order_fees",
        _table(
            "order_fees",
            _pk_auto("id"),
            _col("pid", U, uniq=True),
            _col("fee_id", I),
            _col("order_id", I),
            _col("open", B),
            _col("value", F),
            _col("info", S, null=True),
            foreign_keys=(
                _fk("fk-order_fees-fee_ids", "fee_id", "fees"),
                _fk("fk-order_fees-order_ids", "order_id", "orders"),
            ),
        ),
    ),
    Migration(
        "m20250103_173848_processes_fees",
        _table(
            "processes_fees",
            _pk_auto("id"),
            _col("pid", U, uniq=True),
            _col("process_id", I),
            _col("fee_id", I),
            foreign_keys=(
                _fk("fk-processes_fees-process_ids", "process_id", "processes"),
                _fk("fk-processes_fees-fee_ids", "fee_id", "fees"),
            ),
        ),
    ),
)


def migrations() -> list[Migration]:
    """All migrations, oldest first."""
    return list(_MIGRATIONS)


def _tracking_table_exists(conn: sqlite3.Connection) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (MIGRATIONS_TABLE,)
    ).fetchone()
    return row is not None


def _ensure_tracking_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        f"CREATE TABLE IF NOT EXISTS {_quote(MIGRATIONS_TABLE)} "
        '("version" varchar NOT NULL PRIMARY KEY, "applied_at" integer NOT NULL)'
    )


def applied_migrations(conn: sqlite3.Connection) -> list[str]:
    """Names of the migrations applied to the database, in the order applied."""
    if not _tracking_table_exists(conn):
        return []
    rows = conn.execute(
        f'SELECT "version" FROM {_quote(MIGRATIONS_TABLE)} ORDER BY rowid'
    ).fetchall()
    return [row[0] for row in rows]


def migrate_up(conn: sqlite3.Connection) -> list[str]:
    """Apply every pending migration in order; return the names applied."""
    _ensure_tracking_table(conn)
    conn.commit()
    done = set(applied_migrations(conn))
    applied: list[str] = []
    for migration in _MIGRATIONS:
        if migration.name in done:
            continue
        with conn:
            migration.up(conn)
            conn.execute(
                f"INSERT INTO {_quote(MIGRATIONS_TABLE)} (\"version\", \"applied_at\") VALUES (?, ?)",
                (migration.name, int(time.time())),
            )
        applied.append(migration.name)
    return applied


def migrate_down(conn: sqlite3.Connection, steps: int | None = 1) -> list[str]:
    """Roll back the latest ``steps`` migrations (all when None); return their names."""
    if steps is not None and steps < 0:
        raise ValueError("steps must not be negative")
    by_name = {m.name: m for m in _MIGRATIONS}
    done = applied_migrations(conn)
    targets = list(reversed(done))
    if steps is not None:
        targets = targets[:steps]
    rolled_back: list[str] = []
    for name in targets:
        try:
            migration = by_name[name]
        except KeyError:
            raise LookupError(f"unknown migration in database: {name}") from None
        with conn:
            migration.down(conn)
            conn.execute(f'DELETE FROM {_quote(MIGRATIONS_TABLE)} WHERE "version" = ?', (name,))
        rolled_back.append(name)
    return rolled_back