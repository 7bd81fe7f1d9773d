"""Generic record access on top of the schema: lookups, inserts, updates and deletes."""

from __future__ import annotations

import sqlite3
import uuid
from contextlib import contextmanager
from dataclasses import fields
from datetime import date, datetime, timezone
from typing import Any, Iterator, Mapping, TypeVar

from johandler.entities import Entity

E = TypeVar("E", bound=Entity)


class EntityNotFoundError(LookupError):
    """No record matched the lookup."""


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def _check_columns(entity: type[Entity], names: Any) -> None:
    known = {f.name for f in fields(entity)}
    unknown = sorted(name for name in names if name not in known)
    if unknown:
        raise ValueError(f"unknown column(s) for {entity.TABLE}: {', '.join(unknown)}")


def _adapt(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    return value


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_dicts(cursor: sqlite3.Cursor) -> list[dict[str, Any]]:
    names = [d[0] for d in cursor.description]
    return [dict(zip(names, row)) for row in cursor]


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Commit the work done in the block, or roll it back if the block raises."""
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    else:
        conn.commit()


def fetch_one(conn: sqlite3.Connection, entity: type[E], column: str, value: Any) -> E:
    """The first record whose ``column`` equals ``value``."""
    _check_columns(entity, [column])
    cursor = conn.execute(
        f"SELECT * FROM {_quote(entity.TABLE)} WHERE {_quote(column)} = ? LIMIT 1",
        (_adapt(value),),
    )
    rows = _row_dicts(cursor)
    if not rows:
        raise EntityNotFoundError(f"no {entity.TABLE} record with {column} = {value}")
    return entity.from_row(rows[0])  # type: ignore[return-value]


def fetch_all(conn: sqlite3.Connection, entity: type[E]) -> list[E]:
    """Every record of the entity's table, in id order."""
    cursor = conn.execute(f'SELECT * FROM {_quote(entity.TABLE)} ORDER BY "id"')
    return [entity.from_row(row) for row in _row_dicts(cursor)]  # type: ignore[misc]


def insert_record(conn: sqlite3.Connection, entity: type[E], values: Mapping[str, Any]) -> E:
    """Insert a record with a fresh pid and timestamps; return it as stored."""
    data = dict(values)
    _check_columns(entity, data)
    data["pid"] = uuid.uuid4()
    now = _now()
    data.setdefault("created_at", now)
    data.setdefault("updated_at", now)
    names = list(data)
    cursor = conn.execute(
        f"INSERT INTO {_quote(entity.TABLE)} ({', '.join(_quote(n) for n in names)}) "
        f"VALUES ({', '.join('?' for _ in names)})",
        [_adapt(data[n]) for n in names],
    )
    return fetch_one(conn, entity, "id", cursor.lastrowid)


def update_record(
    conn: sqlite3.Connection, entity: type[E], record_id: int, values: Mapping[str, Any]
) -> E:
    """Change the given columns of one record and stamp ``updated_at``; return it."""
    data = dict(values)
    _check_columns(entity, data)
    data.setdefault("updated_at", _now())
    names = list(data)
    cursor = conn.execute(
        f"UPDATE {_quote(entity.TABLE)} SET {', '.join(f'{_quote(n)} = ?' for n in names)} "
        'WHERE "id" = ?',
        [_adapt(data[n]) for n in names] + [record_id],
    )
    if cursor.rowcount == 0:
        raise EntityNotFoundError(f"no {entity.TABLE} record with id = {record_id}")
    return fetch_one(conn, entity, "id", record_id)


def delete_record(conn: sqlite3.Connection, entity: type[Entity], record_id: int) -> None:
    """Remove one record by id."""
    cursor = conn.execute(f'DELETE FROM {_quote(entity.TABLE)} WHERE "id" = ?', (record_id,))
    if cursor.rowcount == 0:
        raise EntityNotFoundError(f"no {entity.TABLE} record with id = {record_id}")