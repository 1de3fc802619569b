# Overview: Per-customer negotiated prices (customer product overrides).

from __future__ import annotations

from ..extensions import db
from ..models import CustomerProduct
from .repository import customer_products_repo, customers_repo, products_repo


def list_customer_products(*, customer_id: str | None = None, product_id: str | None = None) -> list[CustomerProduct]:
    criteria = {}
    if customer_id:
        criteria["customer_id"] = customer_id
    if product_id:
        criteria["product_id"] = product_id
    return customer_products_repo().list(**criteria)


def get_customer_products(customer_id: str) -> list[CustomerProduct]:
    customers_repo().require(customer_id)
    return list_customer_products(customer_id=customer_id)


def create_customer_product(*, patch: dict) -> CustomerProduct:
    customers_repo().require(patch["customer_id"])
    products_repo().require(patch["product_id"])
    link = customer_products_repo().create(patch)
    db.session.commit()
    return link


def update_customer_product(*, customer_product_id: str, patch: dict) -> CustomerProduct:
    if "customer_id" in patch:
        customers_repo().require(patch["customer_id"])
    if "product_id" in patch:
        products_repo().require(patch["product_id"])
    link = customer_products_repo().update(customer_product_id, patch)
    db.session.commit()
    return link


def delete_customer_product(*, customer_product_id: str) -> None:
    customer_products_repo().delete(customer_product_id)
    db.session.commit()


def find_price_override(customer_id: str, product_id: str) -> CustomerProduct | None:
    """Most recently updated override for the pair, if any."""
    links = list_customer_products(customer_id=customer_id, product_id=product_id)
    if not links:
        return None
    return max(links, key=lambda link: link.updated_at)


def get_effective_price(customer_id: str | None, product_id: str) -> dict:
    """
    Price a customer pays for a product: the override when one exists,
    otherwise the product's current price.
    """
    product = products_repo().require(product_id)
    override = find_price_override(customer_id, product_id) if customer_id else None
    if override is not None:
        return {
            "customer_id": customer_id,
            "product_id": product_id,
            "price_cents": override.price_cents,
            "source": "customer_price",
        }
    return {
        "customer_id": customer_id,
        "product_id": product_id,
        "price_cents": product.current_price_cents,
        "source": "product",
    }
