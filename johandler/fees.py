"""Fee records; every change returns the full list of fees afterwards."""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass

from johandler.entities import Fee
from johandler.records import (
    delete_record,
    fetch_all,
    fetch_one,
    insert_record,
    transaction,
    update_record,
)


@dataclass(frozen=True)
class NewFee:
    """The fields a caller supplies to create or edit a fee."""

    fee: str
    type: str | None = None


def find_by_pid(conn: sqlite3.Connection, pid: uuid.UUID | str) -> Fee:
    """The fee with the given public id."""
    return fetch_one(conn, Fee, "pid", pid)


def find_by_id(conn: sqlite3.Connection, fee_id: int) -> Fee:
    """The fee with the given id."""
    return fetch_one(conn, Fee, "id", fee_id)


def find_all(conn: sqlite3.Connection) -> list[Fee]:
    """Every fee."""
    return fetch_all(conn, Fee)


def create(conn: sqlite3.Connection, fee: NewFee) -> list[Fee]:
    """Store a new fee; return all fees."""
    with transaction(conn):
        insert_record(conn, Fee, {"fee": fee.fee, "type": fee.type})
    return find_all(conn)


def update(conn: sqlite3.Connection, pid: uuid.UUID | str, fee: NewFee) -> list[Fee]:
    """Replace the fields of the fee with the given pid; return all fees."""
    existing = find_by_pid(conn, pid)
    with transaction(conn):
        update_record(conn, Fee, existing.id, {"fee": fee.fee, "type": fee.type})
    return find_all(conn)


def delete(conn: sqlite3.Connection, pid: uuid.UUID | str) -> list[Fee]:
    """Remove the fee with the given pid; return the remaining fees."""
    existing = find_by_pid(conn, pid)
    with transaction(conn):
        delete_record(conn, Fee, existing.id)
    return find_all(conn)