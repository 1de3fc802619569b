# Overview: Flask API routes for stock transactions; history queries and red reversal.

from flask import Blueprint, request, jsonify, g, current_app

from ..models import StockTransaction
from ..services import transaction_service
from ..services.ledger_service import (
    TransactionQuery,
    get_transaction_details,
    get_transactions_by_query,
)
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    validate_payload,
    enforce_rules_transaction,
)
from ..decorators import with_actor, json_errors

"""
Date semantics:
- Stored dates are canonical UTC strings ("YYYY-MM-DDTHH:MM:SSZ").
- start_date / end_date filters compare strings and are inclusive, so a bare
  end_date of "2024-05-31" stops before any time on that day.
"""

TRANSACTION_CREATE_POLICY = ModelValidationPolicy(
    writable_fields={
        "type", "product_id", "user_id", "customer_id", "driver_id",
        "quantity", "price_cents", "date", "notes",
    },
    required_on_create={"type", "product_id", "quantity"},
)

# paid is only settable after creation; reversal fields never are
TRANSACTION_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields={
        "type", "product_id", "customer_id", "driver_id",
        "quantity", "price_cents", "date", "notes", "paid",
    },
)

transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")

MAX_ACTOR_LENGTH = 64


def _json_object() -> dict:
    """Optional JSON body; anything other than an object is rejected."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")
    return data


def _actor_id(data: dict) -> str | None:
    actor = g.actor_id or data.get("user_id")
    if actor is None:
        return None
    if not isinstance(actor, str) or not actor.strip():
        raise ValidationError("user_id must be a non-empty string")
    if len(actor) > MAX_ACTOR_LENGTH:
        raise ValidationError(f"user_id must be at most {MAX_ACTOR_LENGTH} characters")
    return actor.strip()


@transactions_bp.get("")
@json_errors("query transactions")
def list_transactions_route():
    """
    Filtered, paginated transaction history.

    Query params (all optional, AND-ed):
    - start_date, end_date: ISO-8601, inclusive
    - user_id, product_id, driver_id, customer_id: exact match
    - type: IN | OUT
    - page: 1-based (default 1)
    - page_size: default DEFAULT_PAGE_SIZE, capped at MAX_PAGE_SIZE
    """
    query = TransactionQuery.from_args(
        request.args,
        default_page_size=current_app.config["DEFAULT_PAGE_SIZE"],
        max_page_size=current_app.config["MAX_PAGE_SIZE"],
    )
    return jsonify(get_transactions_by_query(query)), 200


@transactions_bp.post("")
@with_actor
@json_errors("create transaction")
def create_transaction_route():
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(
        model=StockTransaction, payload=payload, policy=TRANSACTION_CREATE_POLICY, partial=False,
    )
    enforce_rules_transaction(patch, partial=False)

    tx = transaction_service.add_transaction(patch=patch, actor_id=g.actor_id)
    return jsonify(tx.to_dict()), 201


@transactions_bp.get("/<transaction_id>")
@json_errors("load transaction")
def get_transaction_route(transaction_id: str):
    return jsonify(get_transaction_details(transaction_id)), 200


@transactions_bp.put("/<transaction_id>")
@json_errors("update transaction")
def update_transaction_route(transaction_id: str):
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(
        model=StockTransaction, payload=payload, policy=TRANSACTION_UPDATE_POLICY, partial=True,
    )
    enforce_rules_transaction(patch, partial=True)

    tx = transaction_service.update_transaction(transaction_id=transaction_id, patch=patch)
    return jsonify(tx.to_dict()), 200


@transactions_bp.post("/<transaction_id>/reverse")
@with_actor
@json_errors("reverse transaction")
def reverse_transaction_route(transaction_id: str):
    """
    Red reversal. Body: {"reason": str, "user_id": str (optional, else X-User-Id)}.
    Calling it again on a reversed transaction returns it unchanged.
    """
    data = _json_object()
    reason = data.get("reason")
    if not isinstance(reason, str) or not reason.strip():
        raise ValidationError("reason required")

    tx = transaction_service.reverse_transaction(
        transaction_id=transaction_id,
        reason=reason.strip(),
        actor_id=_actor_id(data),
    )
    return jsonify({"transaction": tx.to_dict()}), 200


@transactions_bp.delete("/<transaction_id>")
@with_actor
@json_errors("delete transaction")
def delete_transaction_route(transaction_id: str):
    """Deleting a transaction reverses it; the record stays in history."""
    data = _json_object()
    reason = data.get("reason") or request.args.get("reason")
    if reason is not None and not isinstance(reason, str):
        raise ValidationError("reason must be a string")

    transaction_service.delete_transaction(
        transaction_id=transaction_id,
        reason=reason,
        actor_id=_actor_id(data),
    )
    return "", 204
