from flask import Blueprint, jsonify, request

from ..services.ledger_service import get_dashboard_summary
from ..time_utils import parse_iso_datetime
from ..decorators import json_errors
from ..validation import ValidationError


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/dashboard")
@json_errors("build dashboard summary")
def dashboard_report():
    """Totals for ?day=YYYY-MM-DD (default: today, UTC) plus recent transactions."""
    day_raw = request.args.get("day")
    day = None
    if day_raw:
        try:
            parsed = parse_iso_datetime(day_raw)
        except ValueError:
            parsed = None
        if parsed is None:
            raise ValidationError("day must be an ISO-8601 date")
        day = parsed.date()

    return jsonify(get_dashboard_summary(day)), 200
