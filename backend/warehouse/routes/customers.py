# Overview: Flask API routes for customers, their catalogs, prices and debt.

from flask import Blueprint, request, jsonify

from ..models import Customer
from ..services import customer_service, pricing_service, products_service
from ..services.ledger_service import get_customer_debt
from ..validation import ModelValidationPolicy, validate_payload
from ..decorators import json_errors

CUSTOMER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "phone", "address"},
    required_on_create={"name"},
)

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
@json_errors("list customers")
def list_customers_route():
    """List customers with their derived debt_cents."""
    items = customer_service.list_customers()
    return jsonify({"items": items, "count": len(items)}), 200


@customers_bp.post("")
@json_errors("create customer")
def create_customer_route():
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=False)
    customer = customer_service.create_customer(patch=patch)
    return jsonify(customer.to_dict(debt_cents=0)), 201


@customers_bp.get("/<customer_id>")
@json_errors("load customer")
def get_customer_route(customer_id: str):
    return jsonify(customer_service.get_customer_with_debt(customer_id)), 200


@customers_bp.put("/<customer_id>")
@json_errors("update customer")
def update_customer_route(customer_id: str):
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=True)
    customer = customer_service.update_customer(customer_id=customer_id, patch=patch)
    return jsonify(customer.to_dict(debt_cents=get_customer_debt(customer.id))), 200


@customers_bp.delete("/<customer_id>")
@json_errors("delete customer")
def delete_customer_route(customer_id: str):
    """Delete a customer; its products and price overrides go with it."""
    customer_service.delete_customer(customer_id=customer_id)
    return "", 204


@customers_bp.get("/<customer_id>/debt")
@json_errors("compute customer debt")
def customer_debt_route(customer_id: str):
    customer = customer_service.get_customer(customer_id)
    return jsonify({
        "customer_id": customer.id,
        "debt_cents": get_customer_debt(customer.id),
    }), 200


@customers_bp.get("/<customer_id>/products")
@json_errors("list customer products")
def customer_products_route(customer_id: str):
    products = products_service.get_products_by_customer(customer_id)
    return jsonify({"items": [p.to_dict() for p in products], "count": len(products)}), 200


@customers_bp.get("/<customer_id>/prices")
@json_errors("list customer prices")
def customer_prices_route(customer_id: str):
    links = pricing_service.get_customer_products(customer_id)
    return jsonify({"items": [cp.to_dict() for cp in links], "count": len(links)}), 200


@customers_bp.get("/<customer_id>/prices/<product_id>")
@json_errors("resolve customer price")
def customer_effective_price_route(customer_id: str, product_id: str):
    customer_service.get_customer(customer_id)
    return jsonify(pricing_service.get_effective_price(customer_id, product_id)), 200
