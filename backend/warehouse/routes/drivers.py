# Overview: Flask API routes for delivery drivers.

from flask import Blueprint, request, jsonify

from ..models import Driver
from ..services import driver_service
from ..validation import ModelValidationPolicy, validate_payload
from ..decorators import json_errors

DRIVER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "phone", "vehicle"},
    required_on_create={"name"},
)

drivers_bp = Blueprint("drivers", __name__, url_prefix="/api/drivers")


@drivers_bp.get("")
@json_errors("list drivers")
def list_drivers_route():
    drivers = driver_service.list_drivers()
    return jsonify({"items": [d.to_dict() for d in drivers], "count": len(drivers)}), 200


@drivers_bp.post("")
@json_errors("create driver")
def create_driver_route():
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(model=Driver, payload=payload, policy=DRIVER_POLICY, partial=False)
    driver = driver_service.create_driver(patch=patch)
    return jsonify(driver.to_dict()), 201


@drivers_bp.get("/<driver_id>")
@json_errors("load driver")
def get_driver_route(driver_id: str):
    return jsonify(driver_service.get_driver(driver_id).to_dict()), 200


@drivers_bp.put("/<driver_id>")
@json_errors("update driver")
def update_driver_route(driver_id: str):
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(model=Driver, payload=payload, policy=DRIVER_POLICY, partial=True)
    driver = driver_service.update_driver(driver_id=driver_id, patch=patch)
    return jsonify(driver.to_dict()), 200


@drivers_bp.delete("/<driver_id>")
@json_errors("delete driver")
def delete_driver_route(driver_id: str):
    driver_service.delete_driver(driver_id=driver_id)
    return "", 204
