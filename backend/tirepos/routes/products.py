# Overview: Flask API routes for products; parses input and returns JSON responses.

from flask import Blueprint, current_app, request

from ..schemas import parse_product_payload, parse_product_patch
from ..services import products_service
from ..validation import ConflictError, NotFoundError, ValidationError

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List products ordered by name.

    Query params (at most one):
    - type: tire | alloy_wheel | general
    - size: case-insensitive fragment of the size label, e.g. "r16"
    """
    product_type = request.args.get("type")
    size = request.args.get("size")

    try:
        if product_type:
            products = products_service.get_by_type(product_type)
        elif size is not None:
            products = products_service.get_by_size(size)
        else:
            products = products_service.get_all()
    except ValidationError as e:
        return {"error": str(e)}, 400

    return {"items": [p.to_dict() for p in products], "count": len(products)}


@products_bp.get("/low-stock")
def low_stock():
    products = products_service.get_low_stock()
    return {"items": [p.to_dict() for p in products], "count": len(products)}


@products_bp.get("/<int:product_id>")
def get_product(product_id: int):
    try:
        return products_service.get_by_id(product_id).to_dict()
    except NotFoundError as e:
        return {"error": str(e)}, 404


@products_bp.post("")
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        spec = parse_product_payload(payload)
        product = products_service.create(spec)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    return product.to_dict(), 201


@products_bp.put("/<int:product_id>")
def update_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = parse_product_patch(payload)
        product = products_service.update(product_id, patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to update product %s", product_id)
        return {"error": "Internal server error"}, 500

    return product.to_dict()


@products_bp.delete("/<int:product_id>")
def delete_product_route(product_id: int):
    try:
        products_service.delete(product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to delete product %s", product_id)
        return {"error": "Internal server error"}, 500

    return {"deleted": 1}


@products_bp.delete("")
def delete_products_route():
    """
    Bulk delete.

    - ?name=<fragment>: every product whose name contains the fragment
    - no query: every product
    """
    name = request.args.get("name")

    try:
        if name is not None:
            deleted = products_service.delete_by_name(name)
        else:
            deleted = products_service.delete_all()
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to delete products")
        return {"error": "Internal server error"}, 500

    return {"deleted": deleted}
