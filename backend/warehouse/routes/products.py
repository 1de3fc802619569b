# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/warehouse/routes/products.py
"""
Product management routes.

Delete is refused with 409 while a non-reversed transaction references the
product; GET /<id>/deletable reports the same check without side effects.
"""
from flask import Blueprint, request, jsonify

from ..models import Product
from ..services import products_service
from ..services.ledger_service import can_delete_product
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_price,
)
from ..decorators import json_errors

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"name", "description", "current_price_cents", "unit", "customer_id"},
    required_on_create={"name", "unit"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@json_errors("list products")
def list_products():
    """
    List products.

    Query params:
    - customer_id: str (optional) - only products scoped to this customer
    """
    customer_id = request.args.get("customer_id")
    products = products_service.list_products(customer_id=customer_id)
    return jsonify({"items": [p.to_dict() for p in products], "count": len(products)}), 200


@products_bp.post("")
@json_errors("create product")
def create_product_route():
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
    enforce_rules_price(patch, "current_price_cents")

    created = products_service.create_product(patch=patch)
    return jsonify(created.to_dict()), 201


@products_bp.get("/<product_id>")
@json_errors("load product")
def get_product_route(product_id: str):
    return jsonify(products_service.get_product(product_id).to_dict()), 200


@products_bp.put("/<product_id>")
@json_errors("update product")
def update_product_route(product_id: str):
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
    enforce_rules_price(patch, "current_price_cents")

    updated = products_service.update_product(product_id=product_id, patch=patch)
    return jsonify(updated.to_dict()), 200


@products_bp.delete("/<product_id>")
@json_errors("delete product")
def delete_product_route(product_id: str):
    products_service.delete_product(product_id=product_id)
    return "", 204


@products_bp.get("/<product_id>/deletable")
@json_errors("check product deletion")
def product_deletable_route(product_id: str):
    product = products_service.get_product(product_id)
    return jsonify({"product_id": product.id, "deletable": can_delete_product(product.id)}), 200
