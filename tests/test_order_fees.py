import sqlite3
import uuid

import pytest

from johandler import order_fees
from johandler.order_fees import NewOrderFee
from johandler.records import EntityNotFoundError
from johandler.schema import migrate_up


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    migrate_up(connection)
    yield connection
    connection.close()


def test_create_returns_all(conn):
    result = order_fees.create(conn, NewOrderFee(fee_id=1, order_id=2, open=True, value=12.5))
    [item] = result
    assert (item.fee_id, item.order_id, item.open, item.value, item.info) == (1, 2, True, 12.5, None)
    result = order_fees.create(
        conn, NewOrderFee(fee_id=3, order_id=2, open=False, value=0.25, info="late")
    )
    assert [(f.fee_id, f.open, f.info) for f in result] == [(1, True, None), (3, False, "late")]


def test_find_by_pid_and_id(conn):
    [item] = order_fees.create(conn, NewOrderFee(1, 1, True, 1.5))
    assert order_fees.find_by_pid(conn, item.pid) == item
    assert order_fees.find_by_id(conn, item.id) == item
    assert order_fees.find_all(conn) == [item]


def test_find_missing_raises(conn):
    with pytest.raises(EntityNotFoundError):
        order_fees.find_by_pid(conn, uuid.uuid4())
    with pytest.raises(EntityNotFoundError):
        order_fees.find_by_id(conn, 7)


def test_update_replaces_every_field(conn):
    [item] = order_fees.create(conn, NewOrderFee(1, 1, True, 1.5, "first"))
    [updated] = order_fees.update(conn, item.pid, NewOrderFee(4, 5, False, 2.5))
    assert (updated.fee_id, updated.order_id, updated.open, updated.value, updated.info) == (
        4,
        5,
        False,
        2.5,
        None,
    )
    assert updated.pid == item.pid
    assert updated.updated_at >= item.updated_at


def test_update_unknown_raises(conn):
    with pytest.raises(EntityNotFoundError):
        order_fees.update(conn, uuid.uuid4(), NewOrderFee(1, 1, True, 1.0))


def test_delete_returns_remaining(conn):
    order_fees.create(conn, NewOrderFee(1, 1, True, 1.5))
    listed = order_fees.create(conn, NewOrderFee(2, 1, True, 2.5))
    assert order_fees.delete(conn, listed[0].pid) == [listed[1]]
    with pytest.raises(EntityNotFoundError):
        order_fees.delete(conn, listed[0].pid)