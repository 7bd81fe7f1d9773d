import sqlite3
import uuid

import pytest

from johandler.entities import Seller
from johandler.records import (
    EntityNotFoundError,
    delete_record,
    fetch_all,
    fetch_one,
    insert_record,
    transaction,
    update_record,
)
from johandler.schema import migrate_up


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    migrate_up(connection)
    yield connection
    connection.close()


def test_insert_then_fetch_by_pid_round_trips(conn):
    seller = insert_record(conn, Seller, {"name": "Ann"})
    assert seller.name == "Ann"
    assert fetch_one(conn, Seller, "pid", seller.pid) == seller


def test_insert_assigns_fresh_pid_even_when_given(conn):
    given = uuid.uuid4()
    seller = insert_record(conn, Seller, {"name": "Ann", "pid": given})
    assert seller.pid != given
    assert isinstance(seller.pid, uuid.UUID)


def test_insert_sets_timestamps(conn):
    seller = insert_record(conn, Seller, {"name": "Ann"})
    assert seller.created_at == seller.updated_at
    assert seller.created_at.tzinfo is not None


def test_fetch_all_in_insert_order(conn):
    first = insert_record(conn, Seller, {"name": "Ann"})
    second = insert_record(conn, Seller, {"name": "Bob"})
    assert fetch_all(conn, Seller) == [first, second]


def test_fetch_one_missing_raises(conn):
    with pytest.raises(EntityNotFoundError):
        fetch_one(conn, Seller, "pid", uuid.uuid4())


def test_unknown_column_rejected(conn):
    with pytest.raises(ValueError):
        fetch_one(conn, Seller, "nickname", "x")
    with pytest.raises(ValueError):
        insert_record(conn, Seller, {"name": "Ann", "nickname": "x"})


def test_update_changes_values_and_stamps(conn):
    seller = insert_record(conn, Seller, {"name": "Ann"})
    updated = update_record(conn, Seller, seller.id, {"name": "Anna"})
    assert updated.name == "Anna"
    assert updated.pid == seller.pid
    assert updated.updated_at >= seller.updated_at
    assert updated.created_at == seller.created_at


def test_update_missing_raises(conn):
    with pytest.raises(EntityNotFoundError):
        update_record(conn, Seller, 999, {"name": "Nobody"})


def test_delete_removes_record(conn):
    seller = insert_record(conn, Seller, {"name": "Ann"})
    delete_record(conn, Seller, seller.id)
    assert fetch_all(conn, Seller) == []
    with pytest.raises(EntityNotFoundError):
        delete_record(conn, Seller, seller.id)


def test_transaction_rolls_back_on_error(conn):
    with pytest.raises(RuntimeError):
        with transaction(conn):
            insert_record(conn, Seller, {"name": "Ann"})
            raise RuntimeError("boom")
    assert fetch_all(conn, Seller) == []


def test_transaction_commits(conn):
    with transaction(conn):
        seller = insert_record(conn, Seller, {"name": "Ann"})
    conn.rollback()
    assert fetch_all(conn, Seller) == [seller]