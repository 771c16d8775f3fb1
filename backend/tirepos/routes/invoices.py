# backend/tirepos/routes/invoices.py
"""
Invoice routes.

POST /api/invoices takes the till's cart exactly as priced when each item was
added. Prices are not re-read from the product table.

    {
      "items": [{"product_id": 1, "product_name": "...", "quantity": 2, "unit_price_cents": 1000}],
      "customer_name": "...", "customer_phone": "...", "customer_email": "...",
      "payment_method": "cash",
      "tax_amount_cents": 0,
      "discount_amount_cents": 0
    }

Invoices are append-only: there is no update or delete route.
"""
from flask import Blueprint, current_app, request

from ..schemas import parse_invoice_payload
from ..services import invoice_service
from ..time_utils import parse_local_date
from ..validation import ConflictError, NotFoundError, ValidationError

invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")


@invoices_bp.post("")
def create_invoice_route():
    payload = request.get_json(silent=True)

    try:
        invoice_request = parse_invoice_payload(payload)
        created = invoice_service.create_invoice(invoice_request)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to create invoice")
        return {"error": "Internal server error"}, 500

    return created, 201


@invoices_bp.get("")
def list_invoices_route():
    """
    Query params:
    - start, end: YYYY-MM-DD local dates, inclusive (both or neither)
    - limit: newest N invoices when no dates are given
    """
    start = request.args.get("start")
    end = request.args.get("end")
    limit = request.args.get("limit", type=int)

    try:
        if start or end:
            try:
                start_date = parse_local_date(start)
                end_date = parse_local_date(end)
            except ValueError:
                raise ValidationError("start and end must be dates in YYYY-MM-DD format")
            if start_date is None or end_date is None:
                raise ValidationError("start and end are both required for a date range")
            invoices = invoice_service.get_invoices_by_date_range(start_date, end_date)
        else:
            invoices = invoice_service.list_invoices(limit)
    except ValidationError as e:
        return {"error": str(e)}, 400

    return {"items": [inv.to_dict() for inv in invoices], "count": len(invoices)}


@invoices_bp.get("/<int:invoice_id>")
def get_invoice_route(invoice_id: int):
    try:
        invoice = invoice_service.get_invoice(invoice_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return invoice.to_dict(include_items=True)
