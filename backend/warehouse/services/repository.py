# Overview: Storage seam for entity services; one repository per model.

from __future__ import annotations

from typing import Generic, TypeVar

from ..extensions import db
from ..models import Customer, CustomerProduct, Driver, Product, StockTransaction
from ..time_utils import utcnow
from ..validation import NotFoundError

ModelT = TypeVar("ModelT")


class Repository(Generic[ModelT]):
    """
    list / get / create / update / delete over one SQLAlchemy model.

    Services and the ledger aggregator only see this interface, so a different
    backing store can be swapped in without touching the aggregation rules.

    Writes flush but never commit: the calling service owns the unit of work.
    """

    def __init__(self, model: type[ModelT], *, label: str | None = None, session=None):
        self.model = model
        self.label = label or model.__name__
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def list(self, **criteria) -> list[ModelT]:
        """All rows matching equality criteria, oldest first."""
        return (
            self.session.query(self.model)
            .filter_by(**criteria)
            .order_by(self.model.created_at.asc())
            .all()
        )

    def get(self, entity_id: str) -> ModelT | None:
        if not entity_id:
            return None
        return self.session.get(self.model, entity_id)

    def require(self, entity_id: str) -> ModelT:
        obj = self.get(entity_id)
        if obj is None:
            raise NotFoundError(f"{self.label} {entity_id} not found")
        return obj

    def create(self, fields: dict) -> ModelT:
        obj = self.model(**fields)
        self.session.add(obj)
        self.session.flush()  # assigns defaults (id, timestamps)
        return obj

    def update(self, entity_id: str, patch: dict) -> ModelT:
        obj = self.require(entity_id)
        for k, v in patch.items():
            setattr(obj, k, v)
        obj.updated_at = utcnow()
        self.session.flush()
        return obj

    def delete(self, entity_id: str) -> None:
        obj = self.require(entity_id)
        self.session.delete(obj)
        self.session.flush()

    def delete_where(self, **criteria) -> int:
        """Bulk delete by equality criteria; returns the number of rows removed."""
        rows = self.list(**criteria)
        for row in rows:
            self.session.delete(row)
        self.session.flush()
        return len(rows)


def customers_repo() -> Repository[Customer]:
    return Repository(Customer)


def products_repo() -> Repository[Product]:
    return Repository(Product)


def customer_products_repo() -> Repository[CustomerProduct]:
    return Repository(CustomerProduct, label="Customer price")


def drivers_repo() -> Repository[Driver]:
    return Repository(Driver)


def transactions_repo() -> Repository[StockTransaction]:
    return Repository(StockTransaction, label="Transaction")
