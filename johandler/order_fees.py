"""Fees charged on orders; every change returns the full list afterwards."""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import asdict, dataclass

from johandler.entities import OrderFee
from johandler.records import (
    delete_record,
    fetch_all,
    fetch_one,
    insert_record,
    transaction,
    update_record,
)


@dataclass(frozen=True)
class NewOrderFee:
    """The fields a caller supplies to create or edit an order fee."""

    fee_id: int
    order_id: int
    open: bool
    value: float
    info: str | None = None


def find_by_pid(conn: sqlite3.Connection, pid: uuid.UUID | str) -> OrderFee:
    """The order fee with the given public id."""
    return fetch_one(conn, OrderFee, "pid", pid)


def find_by_id(conn: sqlite3.Connection, order_fee_id: int) -> OrderFee:
    """The order fee with the given id."""
    return fetch_one(conn, OrderFee, "id", order_fee_id)


def find_all(conn: sqlite3.Connection) -> list[OrderFee]:
    """Every order fee."""
    return fetch_all(conn, OrderFee)


def create(conn: sqlite3.Connection, order_fee: NewOrderFee) -> list[OrderFee]:
    """Store a new order fee; return all order fees."""
    with transaction(conn):
        insert_record(conn, OrderFee, asdict(order_fee))
    return find_all(conn)


def update(
    conn: sqlite3.Connection, pid: uuid.UUID | str, order_fee: NewOrderFee
) -> list[OrderFee]:
    """Replace the fields of the order fee with the given pid; return all order fees."""
    existing = find_by_pid(conn, pid)
    with transaction(conn):
        update_record(conn, OrderFee, existing.id, asdict(order_fee))
    return find_all(conn)


def delete(conn: sqlite3.Connection, pid: uuid.UUID | str) -> list[OrderFee]:
    """Remove the order fee with the given pid; return the remaining ones."""
    existing = find_by_pid(conn, pid)
    with transaction(conn):
        delete_record(conn, OrderFee, existing.id)
    return find_all(conn)