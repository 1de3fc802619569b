from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .common import generate_id


class Customer(db.Model):
    """
    Customer master data.

    DEBT: There is no stored debt column. Outstanding debt is derived from
    unpaid, non-reversed OUT transactions every time it is read
    (see services.ledger_service).
    """
    __tablename__ = "customers"
    __table_args__ = (
        db.Index("ix_customers_name", "name"),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_id)

    name = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(32), nullable=True)
    address = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self, debt_cents: int | None = None) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if debt_cents is not None:
            data["debt_cents"] = debt_cents
        return data


class CustomerProduct(db.Model):
    """
    Negotiated price of a product for one customer.

    Overrides Product.current_price_cents for that customer. One override per
    (customer, product) pair is expected but not enforced; when several exist
    the most recently updated one wins.
    """
    __tablename__ = "customer_products"
    __table_args__ = (
        db.Index("ix_customer_products_pair", "customer_id", "product_id"),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    customer_id = db.Column(db.String(32), db.ForeignKey("customers.id"), nullable=False, index=True)
    product_id = db.Column(db.String(32), db.ForeignKey("products.id"), nullable=False, index=True)

    price_cents = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "product_id": self.product_id,
            "price_cents": self.price_cents,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
