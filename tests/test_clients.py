import sqlite3
import uuid

import pytest

from johandler import clients
from johandler.clients import NewClient
from johandler.entities import Partner
from johandler.records import EntityNotFoundError, insert_record
from johandler.schema import migrate_up


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    migrate_up(connection)
    yield connection
    connection.close()


@pytest.fixture
def partner(conn):
    return insert_record(conn, Partner, {"name": "Partner Co"})


def _new(**overrides):
    data = dict(
        name="Acme",
        contact="Jane",
        phone="phone-a",
        email="jane@example.com",
    )
    data.update(overrides)
    return NewClient(**data)


def test_create_without_partner(conn):
    client = clients.create(conn, _new())
    assert client.name == "Acme"
    assert client.email == "jane@example.com"
    assert client.partner_id is None
    assert client.phone2 is None


def test_create_with_partner_links_id(conn, partner):
    client = clients.create(conn, _new(partner_pid=partner.pid, phone2="phone-b"))
    assert client.partner_id == partner.id
    assert client.phone2 == "phone-b"


def test_create_with_unknown_partner_raises_and_stores_nothing(conn):
    with pytest.raises(EntityNotFoundError):
        clients.create(conn, _new(partner_pid=uuid.uuid4()))
    assert clients.find_all(conn) == []


def test_find_by_pid_and_id(conn):
    client = clients.create(conn, _new())
    assert clients.find_by_pid(conn, client.pid) == client
    assert clients.find_by_id(conn, client.id) == client
    with pytest.raises(EntityNotFoundError):
        clients.find_by_id(conn, client.id + 100)


def test_find_all(conn):
    a = clients.create(conn, _new(name="A"))
    b = clients.create(conn, _new(name="B"))
    assert clients.find_all(conn) == [a, b]


def test_update_replaces_fields(conn, partner):
    client = clients.create(conn, _new())
    updated = clients.update(
        conn, client.pid, _new(name="Acme Ltd", contact="John", partner_pid=partner.pid)
    )
    assert updated.pid == client.pid
    assert updated.id == client.id
    assert updated.name == "Acme Ltd"
    assert updated.contact == "John"
    assert updated.partner_id == partner.id
    assert clients.find_by_pid(conn, client.pid) == updated


def test_update_clears_partner(conn, partner):
    client = clients.create(conn, _new(partner_pid=partner.pid))
    updated = clients.update(conn, client.pid, _new())
    assert updated.partner_id is None


def test_update_unknown_pid_raises(conn):
    with pytest.raises(EntityNotFoundError):
        clients.update(conn, uuid.uuid4(), _new())


def test_update_unknown_partner_leaves_client(conn):
    client = clients.create(conn, _new())
    with pytest.raises(EntityNotFoundError):
        clients.update(conn, client.pid, _new(name="Other", partner_pid=uuid.uuid4()))
    assert clients.find_by_pid(conn, client.pid) == client


def test_delete_by_uuid_and_by_string(conn):
    a = clients.create(conn, _new(name="A"))
    b = clients.create(conn, _new(name="B"))
    clients.delete(conn, a.pid)
    clients.delete(conn, str(b.pid))
    assert clients.find_all(conn) == []


def test_delete_unknown_raises(conn):
    with pytest.raises(EntityNotFoundError):
        clients.delete(conn, str(uuid.uuid4()))