"""Typed records for every table, with the relations between them."""

import enum
import functools
import types
import typing
import uuid
from dataclasses import dataclass, fields
from datetime import date, datetime, timezone
from typing import Any, Callable, ClassVar, Mapping, Optional, Union

from johandler.schema import ForeignKeyAction


class RelationKind(enum.Enum):
    """Direction of a relation between two tables."""

    BELONGS_TO = "belongs_to"
    HAS_MANY = "has_many"


@dataclass(frozen=True)
class Relation:
    """A link from one table's column to another table's column."""

    name: str
    kind: RelationKind
    table: str
    from_column: str
    to_column: str
    on_update: Optional[ForeignKeyAction] = None
    on_delete: Optional[ForeignKeyAction] = None


def _belongs_to(name: str, table: str, from_column: str) -> Relation:
    return Relation(
        name,
        RelationKind.BELONGS_TO,
        table,
        from_column,
        "id",
        on_update=ForeignKeyAction.CASCADE,
        on_delete=ForeignKeyAction.CASCADE,
    )


def _has_many(name: str, table: str, foreign_column: str) -> Relation:
    return Relation(name, RelationKind.HAS_MANY, table, "id", foreign_column)


def _to_uuid(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, (bytes, bytearray)) and len(value) == 16:
        return uuid.UUID(bytes=bytes(value))
    return uuid.UUID(str(value))


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        moment = value
    else:
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


_CONVERTERS: "dict[Any, Callable[[Any], Any]]" = {
    int: int,
    str: str,
    float: float,
    bool: bool,
    uuid.UUID: _to_uuid,
    datetime: _to_datetime,
    date: _to_date,
}


@functools.lru_cache(maxsize=None)
def _field_plan(cls: type) -> "tuple[tuple[str, bool, Callable[[Any], Any]], ...]":
    plan = []
    for f in fields(cls):
        hint = f.type
        optional = False
        if typing.get_origin(hint) in (Union, types.UnionType):
            all_args = typing.get_args(hint)
            args = [a for a in all_args if a is not type(None)]
            optional = len(args) < len(all_args)
            hint = args[0]
        plan.append((f.name, optional, _CONVERTERS[hint]))
    return tuple(plan)


class Entity:
    """Base of the table records; subclasses are frozen dataclasses."""

    TABLE: ClassVar[str] = ""
    RELATIONS: ClassVar[tuple] = ()

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Entity":
        """Build a record from a database row or mapping of column names to values."""
        data = dict(row)
        values = {}
        for name, optional, convert in _field_plan(cls):
            if name not in data:
                raise KeyError(f"column {name!r} missing from {cls.TABLE} row")
            raw = data[name]
            if raw is None:
                if not optional:
                    raise ValueError(f"column {name!r} of {cls.TABLE} must not be null")
                values[name] = None
            else:
                values[name] = convert(raw)
        return cls(**values)


@dataclass(frozen=True)
class Client(Entity):
    TABLE: ClassVar[str] = "clients"
    RELATIONS: ClassVar[tuple] = (
        _has_many("Orders", "orders", "client_id"),
        _belongs_to("Partners", "partners", "partner_id"),
    )

    created_at: datetime
    updated_at: datetime
    id: int
    pid: uuid.UUID
    name: str
    contact: str
    phone: str
    phone2: Optional[str]
    email: str
    partner_id: Optional[int]


@dataclass(frozen=True)
class Fee(Entity):
    TABLE: ClassVar[str] = "fees"
    RELATIONS: ClassVar[tuple] = (
        _has_many("OrderFees", "order_fees", "fee_id"),
        _has_many("ProcessesFees", "processes_fees", "fee_id"),
    )

    created_at: datetime
    updated_at: datetime
    id: int
    pid: uuid.UUID
    fee: str
    type: Optional[str]


@dataclass(frozen=True)
class OrderFee(Entity):
    TABLE: ClassVar[str] = "order_fees"
    RELATIONS: ClassVar[tuple] = (
        _belongs_to("Fees", "fees", "fee_id"),
        _belongs_to("Orders", "orders", "order_id"),
    )

    created_at: datetime
    updated_at: datetime
    id: int
    pid: uuid.UUID
    fee_id: int
    order_id: int
    open: bool
    value: float
    info: Optional[str]


@dataclass(frozen=True)
class Order(Entity):
    TABLE: ClassVar[str] = "orders"
    RELATIONS: ClassVar[tuple] = (
        _belongs_to("Clients", "clients", "client_id"),
        _has_many("OrderFees", "order_fees", "order_id"),
        _has_many("Payments", "payments", "order_id"),
        _belongs_to("Processes", "processes", "process_id"),
        _belongs_to("Sellers", "sellers", "seller_id"),
    )

    created_at: datetime
    updated_at: datetime
    id: int
    pid: uuid.UUID
    client_id: int
    process_id: int
    open: bool
    payout: float
    fee: float
    partner_fee: Optional[float]
    seller_id: int


@dataclass(frozen=True)
class Partner(Entity):
    TABLE: ClassVar[str] = "partners"
    RELATIONS: ClassVar[tuple] = (
        _has_many("Clients", "clients", "partner_id"),
    )

    created_at: datetime
    updated_at: datetime
    id: int
    pid: uuid.UUID
    name: str
    information: Optional[str]
    phone: Optional[str]
    email: Optional[str]


@dataclass(frozen=True)
class Payment(Entity):
    TABLE: ClassVar[str] = "payments"
    RELATIONS: ClassVar[tuple] = (
        _belongs_to("Orders", "orders", "order_id"),
        _has_many("PostponedPayments", "postponed_payments", "payment_id"),
    )

    created_at: datetime
    updated_at: datetime
    id: int
    pid: uuid.UUID
    value: float
    payment_date: Optional[date]
    due_date: date
    payment_method: Optional[str]
    currency: Optional[str]
    postponed_payment: Optional[bool]
    order_id: int
    open: bool


@dataclass(frozen=True)
class PostponedPayment(Entity):
    TABLE: ClassVar[str] = "postponed_payments"
    RELATIONS: ClassVar[tuple] = (
        _belongs_to("Payments", "payments", "payment_id"),
    )

    created_at: datetime
    updated_at: datetime
    id: int
    pid: uuid.UUID
    payment_id: int
    postponed_date: date


@dataclass(frozen=True)
class Process(Entity):
    TABLE: ClassVar[str] = "processes"
    RELATIONS: ClassVar[tuple] = (
        _has_many("Orders", "orders", "process_id"),
        _has_many("ProcessesFees", "processes_fees", "process_id"),
    )

    created_at: datetime
    updated_at: datetime
    id: int
    pid: uuid.UUID
    case_type: str


@dataclass(frozen=True)
class ProcessFee(Entity):
    TABLE: ClassVar[str] = "processes_fees"
    RELATIONS: ClassVar[tuple] = (
        _belongs_to("Fees", "fees", "fee_id"),
        _belongs_to("Processes", "processes", "process_id"),
    )

    created_at: datetime
    updated_at: datetime
    id: int
    pid: uuid.UUID
    process_id: int
    fee_id: int


@dataclass(frozen=True)
class Seller(Entity):
    TABLE: ClassVar[str] = "sellers"
    RELATIONS: ClassVar[tuple] = (
        _has_many("Orders", "orders", "seller_id"),
    )

    created_at: datetime
    updated_at: datetime
    id: int
    pid: uuid.UUID
    name: str


@dataclass(frozen=True)
class User(Entity):
    TABLE: ClassVar[str] = "users"
    RELATIONS: ClassVar[tuple] = ()

    created_at: datetime
    updated_at: datetime
    id: int
    pid: uuid.UUID
    email: str
    password: str
    api_key: str
    name: str
    reset_token: Optional[str]
    reset_sent_at: Optional[datetime]
    email_verification_token: Optional[str]
    email_verification_sent_at: Optional[datetime]
    email_verified_at: Optional[datetime]


_ENTITIES: "dict[str, type[Entity]]" = {
    cls.TABLE: cls
    for cls in (
        Client,
        Fee,
        OrderFee,
        Order,
        Partner,
        Payment,
        PostponedPayment,
        Process,
        ProcessFee,
        Seller,
        User,
    )
}


def entity_for_table(table: str) -> "type[Entity]":
    """The record class for a table name."""
    try:
        return _ENTITIES[table]
    except KeyError:
        raise KeyError(f"unknown table: {table}") from None


def relations_of(table: str) -> "tuple[Relation, ...]":
    """The relations declared for a table, in declaration order."""
    return entity_for_table(table).RELATIONS