# Overview: Flask API routes for per-customer negotiated prices.

from flask import Blueprint, request, jsonify

from ..models import CustomerProduct
from ..services import pricing_service
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_price
from ..decorators import json_errors

CUSTOMER_PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"customer_id", "product_id", "price_cents"},
    required_on_create={"customer_id", "product_id", "price_cents"},
)

customer_products_bp = Blueprint("customer_products", __name__, url_prefix="/api/customer-products")


@customer_products_bp.get("")
@json_errors("list customer prices")
def list_customer_products_route():
    links = pricing_service.list_customer_products(
        customer_id=request.args.get("customer_id"),
        product_id=request.args.get("product_id"),
    )
    return jsonify({"items": [cp.to_dict() for cp in links], "count": len(links)}), 200


@customer_products_bp.post("")
@json_errors("create customer price")
def create_customer_product_route():
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(model=CustomerProduct, payload=payload, policy=CUSTOMER_PRODUCT_POLICY, partial=False)
    enforce_rules_price(patch, "price_cents")
    link = pricing_service.create_customer_product(patch=patch)
    return jsonify(link.to_dict()), 201


@customer_products_bp.put("/<customer_product_id>")
@json_errors("update customer price")
def update_customer_product_route(customer_product_id: str):
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(model=CustomerProduct, payload=payload, policy=CUSTOMER_PRODUCT_POLICY, partial=True)
    enforce_rules_price(patch, "price_cents")
    link = pricing_service.update_customer_product(customer_product_id=customer_product_id, patch=patch)
    return jsonify(link.to_dict()), 200


@customer_products_bp.delete("/<customer_product_id>")
@json_errors("delete customer price")
def delete_customer_product_route(customer_product_id: str):
    pricing_service.delete_customer_product(customer_product_id=customer_product_id)
    return "", 204
