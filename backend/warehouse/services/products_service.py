# backend/warehouse/services/products_service.py
"""
Products Service

- Products may be scoped to a customer (customer_id) or shared (NULL).
- Deleting a product is a hard delete, refused while any non-reversed
  transaction still references it.
"""
from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Product
from ..validation import ProductInUseError
from .ledger_service import can_delete_product
from .repository import customer_products_repo, customers_repo, products_repo


def list_products(*, customer_id: str | None = None) -> list[Product]:
    """
    All products, or only those scoped to one customer.

    Args:
        customer_id: Restrict to this customer's catalog (optional)
    """
    if customer_id:
        return products_repo().list(customer_id=customer_id)
    return products_repo().list()


def get_products_by_customer(customer_id: str) -> list[Product]:
    customers_repo().require(customer_id)
    return list_products(customer_id=customer_id)


def get_product(product_id: str) -> Product:
    return products_repo().require(product_id)


def create_product(*, patch: dict) -> Product:
    """
    Create product using a validated patch dict.

    Raises:
        NotFoundError: If customer_id names an unknown customer
    """
    if patch.get("customer_id"):
        customers_repo().require(patch["customer_id"])

    product = products_repo().create(patch)
    db.session.commit()
    return product


def update_product(*, product_id: str, patch: dict) -> Product:
    if patch.get("customer_id"):
        customers_repo().require(patch["customer_id"])

    product = products_repo().update(product_id, patch)
    db.session.commit()
    return product


def delete_product(*, product_id: str) -> None:
    """
    Delete a product and the customer price overrides pointing at it.

    Raises:
        NotFoundError: If the product does not exist
        ProductInUseError: If a non-reversed transaction references it
    """
    products = products_repo()
    products.require(product_id)

    if not can_delete_product(product_id):
        current_app.logger.warning("Refused to delete product %s: has transactions", product_id)
        raise ProductInUseError("Product has transactions, cannot delete")

    customer_products_repo().delete_where(product_id=product_id)
    products.delete(product_id)
    db.session.commit()
