import pytest

from formgraph.adapters import InMemoryAdapter, MemoryRecord
from formgraph.config import Settings
from formgraph.schema import AssociationKind, ModelSchema

TO_ONE = AssociationKind.TO_ONE
TO_MANY = AssociationKind.TO_MANY
BELONGS_TO = AssociationKind.BELONGS_TO


SCHEMAS = [
    ModelSchema.declare("Widget"),
    ModelSchema.declare(
        "Order",
        ["total", "status"],
        items=(TO_MANY, "LineItem"),
        billing_address=(TO_ONE, "Address"),
        customer=(BELONGS_TO, "Customer"),
    ),
    ModelSchema.declare("LineItem", ["sku", "quantity"], note=(TO_ONE, "Note")),
    ModelSchema.declare("Note", ["body"]),
    ModelSchema.declare("Address", ["street", "zip"]),
    ModelSchema.declare("Customer", ["name"]),
]


@pytest.fixture()
def settings():
    # Ignore any FORMGRAPH_* variables or .env of the host
    return Settings(_env_file=None, attributes_suffix="_attributes", id_key="id")


@pytest.fixture()
def schemas():
    return list(SCHEMAS)


@pytest.fixture()
def adapter(schemas):
    return InMemoryAdapter(schemas)


@pytest.fixture()
def make_record(adapter):
    """Persist a record with an explicit id: make_record("order", 1, total=5)"""

    def _make(accessor: str, record_id=None, **attributes) -> MemoryRecord:
        record = MemoryRecord(adapter.resolve_model(accessor), id=record_id, **attributes)
        adapter.store.add(record)
        return record

    return _make
