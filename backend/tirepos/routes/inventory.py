# backend/tirepos/routes/inventory.py
"""
Stock adjustment routes.

Sales never come through here; the invoice engine decrements stock itself.

POST /api/inventory/<product_id>/adjust
    {"mode": "add" | "subtract" | "set", "amount": <int>, "notes": "..."}
"""
from flask import Blueprint, current_app, request

from ..services import products_service, stock_service
from ..validation import NotFoundError, ValidationError

inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


@inventory_bp.post("/<int:product_id>/adjust")
def adjust_stock_route(product_id: int):
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return {"error": "Invalid JSON payload"}, 400

    notes = payload.get("notes")
    if notes is not None and not isinstance(notes, str):
        return {"error": "notes must be a string"}, 400

    try:
        product, movement = products_service.adjust_product_stock(
            product_id,
            mode=payload.get("mode"),
            amount=payload.get("amount"),
            notes=notes.strip() if notes else None,
        )
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to adjust stock for product %s", product_id)
        return {"error": "Internal server error"}, 500

    return {"product": product.to_dict(), "movement": movement.to_dict()}


@inventory_bp.get("/<int:product_id>/movements")
def list_movements_route(product_id: int):
    limit = request.args.get("limit", type=int)

    try:
        movements = stock_service.list_movements(product_id, limit=limit)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return {"items": [m.to_dict() for m in movements], "count": len(movements)}
