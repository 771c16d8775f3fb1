# Overview: Flask API routes for the brand and size catalogs that feed the product form.

from flask import Blueprint, current_app, request

from ..schemas import parse_tire_size_payload, parse_wheel_size_payload
from ..services import catalog_service
from ..validation import ConflictError, ValidationError

brands_bp = Blueprint("brands", __name__, url_prefix="/api/brands")
tire_sizes_bp = Blueprint("tire_sizes", __name__, url_prefix="/api/tire-sizes")
wheel_sizes_bp = Blueprint("wheel_sizes", __name__, url_prefix="/api/wheel-sizes")


def _items(rows) -> dict:
    return {"items": [r.to_dict() for r in rows], "count": len(rows)}


# --- Brands ---------------------------------------------------------------

@brands_bp.get("")
def list_brands():
    return _items(catalog_service.list_brands())


@brands_bp.post("")
def create_brand_route():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return {"error": "Invalid JSON payload"}, 400

    try:
        brand = catalog_service.create_brand(payload.get("name"))
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to create brand")
        return {"error": "Internal server error"}, 500

    return brand.to_dict(), 201


@brands_bp.delete("/<int:brand_id>")
def delete_brand_route(brand_id: int):
    return {"deleted": catalog_service.delete_brand(brand_id)}


# --- Tire sizes -----------------------------------------------------------

@tire_sizes_bp.get("")
def list_tire_sizes():
    return _items(catalog_service.list_tire_sizes())


@tire_sizes_bp.post("")
def create_tire_size_route():
    payload = request.get_json(silent=True) or {}

    try:
        attrs, size_display = parse_tire_size_payload(payload)
        size = catalog_service.create_tire_size(attrs, size_display)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to create tire size")
        return {"error": "Internal server error"}, 500

    return size.to_dict(), 201


@tire_sizes_bp.delete("/<int:size_id>")
def delete_tire_size_route(size_id: int):
    return {"deleted": catalog_service.delete_tire_size(size_id)}


# --- Wheel sizes ----------------------------------------------------------

@wheel_sizes_bp.get("")
def list_wheel_sizes():
    return _items(catalog_service.list_wheel_sizes())


@wheel_sizes_bp.post("")
def create_wheel_size_route():
    payload = request.get_json(silent=True) or {}

    try:
        attrs, size_display = parse_wheel_size_payload(payload)
        size = catalog_service.create_wheel_size(attrs, size_display)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to create wheel size")
        return {"error": "Internal server error"}, 500

    return size.to_dict(), 201


@wheel_sizes_bp.delete("/<int:size_id>")
def delete_wheel_size_route(size_id: int):
    return {"deleted": catalog_service.delete_wheel_size(size_id)}
