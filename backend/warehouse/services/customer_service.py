# Overview: Service-layer operations for customers; encapsulates business logic and database work.

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Customer
from .ledger_service import get_all_customer_debts, get_customer_debt
from .repository import customer_products_repo, customers_repo, products_repo


def list_customers() -> list[dict]:
    """All customers, each with its derived debt_cents."""
    debts = get_all_customer_debts()
    return [c.to_dict(debt_cents=debts.get(c.id, 0)) for c in customers_repo().list()]


def get_customer(customer_id: str) -> Customer:
    return customers_repo().require(customer_id)


def get_customer_with_debt(customer_id: str) -> dict:
    customer = get_customer(customer_id)
    return customer.to_dict(debt_cents=get_customer_debt(customer.id))


def create_customer(*, patch: dict) -> Customer:
    customer = customers_repo().create(patch)
    db.session.commit()
    return customer


def update_customer(*, customer_id: str, patch: dict) -> Customer:
    customer = customers_repo().update(customer_id, patch)
    db.session.commit()
    return customer


def delete_customer(*, customer_id: str) -> dict:
    """
    Delete a customer together with its scoped products and price overrides.

    Transactions are left alone: history keeps pointing at the removed ids.
    """
    customers = customers_repo()
    customers.require(customer_id)

    products = products_repo()
    prices = customer_products_repo()

    owned_products = products.list(customer_id=customer_id)
    prices_deleted = prices.delete_where(customer_id=customer_id)
    for product in owned_products:
        # links from other customers to a product that is going away
        prices_deleted += prices.delete_where(product_id=product.id)
        products.delete(product.id)

    customers.delete(customer_id)
    db.session.commit()

    current_app.logger.info(
        "Deleted customer %s (products=%d, customer_prices=%d)",
        customer_id, len(owned_products), prices_deleted,
    )
    return {
        "customer_id": customer_id,
        "products_deleted": len(owned_products),
        "customer_prices_deleted": prices_deleted,
    }
