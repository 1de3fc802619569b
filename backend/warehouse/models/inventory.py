from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .common import generate_id


class Product(db.Model):
    """
    Product master data.

    A product may be scoped to a single customer (customer-specific catalog);
    customer_id is NULL for products offered to everyone. Deleting the owning
    customer deletes the product.

    Authoritative price storage is in cents (frontend may only format for display).
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_customer_name", "customer_id", "name"),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    customer_id = db.Column(db.String(32), db.ForeignKey("customers.id"), nullable=True, index=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    current_price_cents = db.Column(db.Integer, nullable=False, default=0)
    unit = db.Column(db.String(32), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "name": self.name,
            "description": self.description,
            "current_price_cents": self.current_price_cents,
            "unit": self.unit,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class StockTransaction(db.Model):
    """
    Inbound (IN) or outbound (OUT) stock movement.

    LEDGER RULES:
    - total amount is quantity * price_cents, computed on read, never stored
    - OUT + unpaid + not reversed is customer debt
    - reversal ("red reversal") only flags the row; is_reversed never goes back
      to False and quantity/price/date are never touched by it

    References to products, customers and drivers are plain ids without
    foreign keys: deleting a customer or driver leaves its history in place.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.Index("ix_transactions_customer_type", "customer_id", "type"),
        db.Index("ix_transactions_date", "date"),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_id)

    type = db.Column(db.String(8), nullable=False)  # IN, OUT
    product_id = db.Column(db.String(32), nullable=False, index=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    customer_id = db.Column(db.String(32), nullable=True, index=True)
    driver_id = db.Column(db.String(32), nullable=True, index=True)

    quantity = db.Column(db.Integer, nullable=False)
    price_cents = db.Column(db.Integer, nullable=False)

    # Business date, canonical "YYYY-MM-DDTHH:MM:SSZ" so string order is time order
    date = db.Column(db.String(32), nullable=False)
    notes = db.Column(db.Text, nullable=True)

    paid = db.Column(db.Boolean, nullable=False, default=False)

    is_reversed = db.Column(db.Boolean, nullable=False, default=False)
    reversed_by = db.Column(db.String(64), nullable=True)
    reversed_at = db.Column(db.DateTime, nullable=True)
    reversed_reason = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def total_amount_cents(self) -> int:
        return self.quantity * self.price_cents

    @property
    def status(self) -> str:
        if self.is_reversed:
            return "reversed"
        return "paid" if self.paid else "unpaid"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "product_id": self.product_id,
            "user_id": self.user_id,
            "customer_id": self.customer_id,
            "driver_id": self.driver_id,
            "quantity": self.quantity,
            "price_cents": self.price_cents,
            "total_amount_cents": self.total_amount_cents,
            "date": self.date,
            "notes": self.notes,
            "paid": self.paid,
            "is_reversed": self.is_reversed,
            "reversed_by": self.reversed_by,
            "reversed_at": to_utc_z(self.reversed_at) if self.reversed_at else None,
            "reversed_reason": self.reversed_reason,
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
