"""Client records: lookup, creation, editing and removal."""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass

from johandler.entities import Client, Partner
from johandler.records import (
    delete_record,
    fetch_all,
    fetch_one,
    insert_record,
    transaction,
    update_record,
)


@dataclass(frozen=True, kw_only=True)
class NewClient:
    """The fields a caller supplies to create or edit a client."""

    name: str
    contact: str
    phone: str
    phone2: str | None = None
    email: str
    partner_pid: uuid.UUID | None = None


def _partner_id(conn: sqlite3.Connection, partner_pid: uuid.UUID | None) -> int | None:
    if partner_pid is None:
        return None
    return fetch_one(conn, Partner, "pid", partner_pid).id


def _values(client: NewClient, partner_id: int | None) -> dict:
    return {
        "name": client.name,
        "contact": client.contact,
        "phone": client.phone,
        "phone2": client.phone2,
        "email": client.email,
        "partner_id": partner_id,
    }


def find_by_pid(conn: sqlite3.Connection, pid: uuid.UUID | str) -> Client:
    """The client with the given public id."""
    return fetch_one(conn, Client, "pid", pid)


def find_by_id(conn: sqlite3.Connection, client_id: int) -> Client:
    """The client with the given id."""
    return fetch_one(conn, Client, "id", client_id)


def find_all(conn: sqlite3.Connection) -> list[Client]:
    """Every client."""
    return fetch_all(conn, Client)


def create(conn: sqlite3.Connection, client: NewClient) -> Client:
    """Store a new client, linked to its partner when one is named."""
    partner_id = _partner_id(conn, client.partner_pid)
    with transaction(conn):
        return insert_record(conn, Client, _values(client, partner_id))


def update(conn: sqlite3.Connection, pid: uuid.UUID | str, client: NewClient) -> Client:
    """Replace the editable fields of the client with the given pid."""
    existing = find_by_pid(conn, pid)
    partner_id = _partner_id(conn, client.partner_pid)
    with transaction(conn):
        return update_record(conn, Client, existing.id, _values(client, partner_id))


def delete(conn: sqlite3.Connection, pid: uuid.UUID | str) -> None:
    """Remove the client with the given pid."""
    existing = find_by_pid(conn, pid)
    with transaction(conn):
        delete_record(conn, Client, existing.id)