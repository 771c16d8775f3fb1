from flask import Blueprint, current_app, jsonify, request

from ..services import reporting_service
from ..time_utils import local_today, parse_local_date
from ..validation import ValidationError


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def _date_arg(name: str, *, required: bool):
    raw = request.args.get(name)
    try:
        value = parse_local_date(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a date in YYYY-MM-DD format")
    if value is None and required:
        raise ValidationError(f"{name} is required")
    return value


@reports_bp.get("/daily")
def daily_sales_report():
    try:
        day = _date_arg("date", required=False) or local_today()
        report = reporting_service.daily_sales(day)
        return jsonify(report), 200
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400


@reports_bp.get("/range")
def range_sales_report():
    try:
        start = _date_arg("start", required=True)
        end = _date_arg("end", required=True)
        report = reporting_service.date_range_sales(start, end)
        return jsonify(report), 200
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400


@reports_bp.get("/products")
def product_performance_report():
    try:
        report = reporting_service.product_performance()
        return jsonify(report), 200
    except Exception:
        current_app.logger.exception("Failed to build product performance report")
        return jsonify({"error": "Internal server error"}), 500


@reports_bp.get("/customers")
def customer_report():
    try:
        report = reporting_service.customer_report()
        return jsonify(report), 200
    except Exception:
        current_app.logger.exception("Failed to build customer report")
        return jsonify({"error": "Internal server error"}), 500
