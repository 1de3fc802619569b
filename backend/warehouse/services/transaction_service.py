# Overview: Service-layer operations for stock transactions, including red reversal.

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import StockTransaction
from ..time_utils import utcnow
from ..validation import ConflictError, ValidationError
from .ledger_service import TYPE_OUT
from .pricing_service import get_effective_price
from .repository import customers_repo, drivers_repo, products_repo, transactions_repo

DEFAULT_DELETE_REASON = "Deleted"


def _require_references(fields: dict) -> None:
    if fields.get("product_id"):
        products_repo().require(fields["product_id"])
    if fields.get("customer_id"):
        customers_repo().require(fields["customer_id"])
    if fields.get("driver_id"):
        drivers_repo().require(fields["driver_id"])


def list_transactions() -> list[StockTransaction]:
    return transactions_repo().list()


def get_transaction(transaction_id: str) -> StockTransaction:
    return transactions_repo().require(transaction_id)


def add_transaction(*, patch: dict, actor_id: str | None = None) -> StockTransaction:
    """
    Record an IN/OUT stock movement.

    New transactions always start unpaid and not reversed. When price_cents is
    omitted the customer's effective price for the product is used.

    Raises:
        ValidationError: If no user can be attributed
        NotFoundError: If a referenced product/customer/driver is unknown
    """
    fields = dict(patch)
    fields["user_id"] = fields.get("user_id") or actor_id
    if not fields["user_id"]:
        raise ValidationError("user_id is required (body or X-User-Id header)")

    _require_references(fields)

    if fields.get("price_cents") is None:
        price = get_effective_price(fields.get("customer_id"), fields["product_id"])
        fields["price_cents"] = price["price_cents"]

    fields["paid"] = False
    fields["is_reversed"] = False

    tx = transactions_repo().create(fields)
    db.session.commit()

    current_app.logger.info(
        "Recorded %s transaction %s: product=%s qty=%s price_cents=%s",
        tx.type, tx.id, tx.product_id, tx.quantity, tx.price_cents,
    )
    return tx


def update_transaction(*, transaction_id: str, patch: dict) -> StockTransaction:
    """
    Patch a transaction (e.g. mark it paid).

    Raises:
        ConflictError: If the transaction has been reversed
    """
    repo = transactions_repo()
    tx = repo.require(transaction_id)

    if tx.is_reversed:
        raise ConflictError("Reversed transactions cannot be modified")

    _require_references(patch)

    tx_type = patch.get("type", tx.type)
    customer_id = patch["customer_id"] if "customer_id" in patch else tx.customer_id
    if tx_type == TYPE_OUT and not customer_id:
        raise ValidationError("customer_id is required for OUT transactions")

    tx = repo.update(transaction_id, patch)
    db.session.commit()
    return tx


def reverse_transaction(
    *,
    transaction_id: str,
    reason: str,
    actor_id: str | None = None,
) -> StockTransaction:
    """
    Red reversal: flag a transaction as void without deleting it.

    The record keeps its quantity, price and date for the audit trail and
    drops out of debt and product-deletion checks. Reversing an already
    reversed transaction is a no-op; the first reversal stamp is kept.

    Raises:
        NotFoundError: If the transaction does not exist
    """
    repo = transactions_repo()
    tx = repo.require(transaction_id)

    if tx.is_reversed:
        current_app.logger.info("Transaction %s already reversed; leaving as is", transaction_id)
        return tx

    now = utcnow()
    tx = repo.update(transaction_id, {
        "is_reversed": True,
        "reversed_by": actor_id,
        "reversed_at": now,
        "reversed_reason": reason,
    })
    db.session.commit()

    current_app.logger.info(
        "Reversed transaction %s by=%s reason=%r", transaction_id, actor_id, reason,
    )
    return tx


def delete_transaction(
    *,
    transaction_id: str,
    reason: str | None = None,
    actor_id: str | None = None,
) -> StockTransaction:
    """Transactions are never removed from the ledger; deleting one reverses it."""
    return reverse_transaction(
        transaction_id=transaction_id,
        reason=reason or DEFAULT_DELETE_REASON,
        actor_id=actor_id,
    )
