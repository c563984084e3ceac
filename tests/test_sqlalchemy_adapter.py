"""
SQLAlchemy adapter against an in-memory SQLite database.
"""
from typing import List, Optional

import pytest
from sqlalchemy import ForeignKey, String, create_engine, func, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, relationship

from formgraph.adapters import SQLAlchemyAdapter, create_session_factory
from formgraph.config import Settings
from formgraph.errors import (
    RecordNotFoundError,
    UnknownAttributeError,
    UnknownModelError,
    UnsupportedAssociationError,
)
from formgraph.schema import AssociationKind
from formgraph.services import FormService


class Base(DeclarativeBase):
    pass


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(50))


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True)
    total: Mapped[Optional[int]]
    status: Mapped[Optional[str]] = mapped_column(String(20))
    customer_id: Mapped[Optional[int]] = mapped_column(ForeignKey("customers.id"))

    customer: Mapped[Optional[Customer]] = relationship()
    items: Mapped[List["LineItem"]] = relationship(
        back_populates="order", cascade="all, delete-orphan"
    )
    billing_address: Mapped[Optional["Address"]] = relationship(
        back_populates="order", cascade="all, delete-orphan"
    )


class LineItem(Base):
    __tablename__ = "line_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    sku: Mapped[Optional[str]] = mapped_column(String(20))
    quantity: Mapped[Optional[int]]
    order_id: Mapped[Optional[int]] = mapped_column(ForeignKey("orders.id"))

    order: Mapped[Optional[Order]] = relationship(back_populates="items")


class Address(Base):
    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(primary_key=True)
    zip: Mapped[Optional[str]] = mapped_column(String(10))
    order_id: Mapped[Optional[int]] = mapped_column(ForeignKey("orders.id"), unique=True)

    order: Mapped[Optional[Order]] = relationship(back_populates="billing_address")


@pytest.fixture()
def session():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture()
def sql_adapter(session):
    return SQLAlchemyAdapter(session, Base)


@pytest.fixture()
def saved_order(session):
    order = Order(total=5)
    order.items.append(LineItem(sku="A", quantity=1))
    order.billing_address = Address(zip="11111")
    session.add(order)
    session.commit()
    return order


# =============================================================================
# REFLECTION
# =============================================================================


def test_resolve_model(sql_adapter):
    assert sql_adapter.resolve_model("line_item") is LineItem
    assert sql_adapter.resolve_model("Order") is Order
    with pytest.raises(UnknownModelError):
        sql_adapter.resolve_model("coupon")


def test_reflect_association_kinds(sql_adapter):
    items = sql_adapter.reflect_association(Order, "items")
    assert items.kind is AssociationKind.TO_MANY
    assert items.target == "LineItem"

    address = sql_adapter.reflect_association(Order, "billing_address")
    assert address.kind is AssociationKind.TO_ONE
    assert address.target == "Address"

    customer = sql_adapter.reflect_association(Order, "customer")
    assert customer.kind is AssociationKind.BELONGS_TO

    assert sql_adapter.reflect_association(Order, "coupons") is None


# =============================================================================
# RECORDS
# =============================================================================


def test_find_coerces_string_ids(sql_adapter, saved_order):
    assert sql_adapter.find(Order, str(saved_order.id)) is saved_order


@pytest.mark.parametrize("record_id", [404, "abc"])
def test_find_missing_raises(sql_adapter, record_id):
    with pytest.raises(RecordNotFoundError):
        sql_adapter.find(Order, record_id)


def test_is_new_record(sql_adapter, session):
    order = sql_adapter.new_record(Order)
    assert sql_adapter.is_new_record(order)
    session.add(order)
    session.flush()
    assert not sql_adapter.is_new_record(order)


def test_assign_attributes_skips_primary_key(sql_adapter, saved_order):
    original_id = saved_order.id
    sql_adapter.assign_attributes(saved_order, {"id": "999", "status": "open"})
    assert saved_order.id == original_id
    assert saved_order.status == "open"
    assert saved_order.total == 5


def test_assign_unknown_attribute_raises(sql_adapter):
    with pytest.raises(UnknownAttributeError):
        sql_adapter.assign_attributes(Order(), {"colour": "blue"})


def test_assign_relationship_name_as_scalar_raises(sql_adapter):
    with pytest.raises(UnknownAttributeError):
        sql_adapter.assign_attributes(Order(), {"items": "A"})


# =============================================================================
# POPULATE + SUBMIT
# =============================================================================


def test_submit_new_graph(sql_adapter, session):
    service = FormService(sql_adapter, Settings(_env_file=None))
    result = service.submit(
        "order",
        {
            "total": "10",
            "items_attributes": {"0": {"sku": "A"}, "1": {"sku": "B"}},
            "billing_address_attributes": {"zip": "12345"},
        },
    )

    assert result.records_to_save == []
    assert result.root.id is not None
    assert session.scalar(select(func.count()).select_from(LineItem)) == 2
    skus = sorted(item.sku for item in result.root.items)
    assert skus == ["A", "B"]
    assert result.root.billing_address.zip == "12345"


def test_submit_updates_existing_graph(sql_adapter, session, saved_order):
    item = saved_order.items[0]
    address = saved_order.billing_address
    service = FormService(sql_adapter, Settings(_env_file=None))

    result = service.submit(
        "order",
        {
            "id": str(saved_order.id),
            "status": "paid",
            "items_attributes": {
                "0": {"id": str(item.id), "quantity": 3},
                "1": {"sku": "N"},
            },
            "billing_address_attributes": {"id": str(address.id), "zip": "99999"},
        },
    )

    assert result.root is saved_order
    assert len(result.records_to_save) == 2
    assert any(record is item for record in result.records_to_save)
    assert any(record is address for record in result.records_to_save)

    session.expire_all()
    order = session.get(Order, saved_order.id)
    assert order.status == "paid"
    assert len(order.items) == 2
    assert {i.sku for i in order.items} == {"A", "N"}
    assert session.get(LineItem, item.id).quantity == 3
    assert order.billing_address.zip == "99999"
    assert session.scalar(select(func.count()).select_from(Address)) == 1


def test_unknown_collection_member_raises(sql_adapter, saved_order):
    service = FormService(sql_adapter, Settings(_env_file=None))
    with pytest.raises(RecordNotFoundError):
        service.build(
            "order",
            {"id": saved_order.id, "items_attributes": {"0": {"id": 12345, "sku": "X"}}},
        )


def test_belongs_to_raises(sql_adapter):
    service = FormService(sql_adapter, Settings(_env_file=None))
    with pytest.raises(UnsupportedAssociationError):
        service.build("order", {"customer_attributes": {"id": 1}})


def test_create_session_factory():
    factory = create_session_factory(Settings(_env_file=None, database_url="sqlite://"))
    with factory() as session:
        assert session.scalar(select(1)) == 1
