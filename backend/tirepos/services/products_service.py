# Overview: Product store; typed product writes, lookups, cascading deletes and low-stock listing.

"""
Products Service

WRITES:
- create/update receive a ProductSpec or a validated patch, never raw JSON.
- size_display is derived from the typed attributes unless the caller sends
  one; general products never carry a size label.
- A direct edit of stock_quantity is recorded as an 'adjustment' movement so
  the stock ledger explains every change to the counter.

DELETES:
- Removing a product removes its stock movements and detaches its invoice
  lines (product_id -> NULL). Invoices keep their product_name and
  unit_price_cents snapshots, so historical invoices read exactly as sold.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy import func
from sqlalchemy import update as sql_update

from ..extensions import db
from ..models import Product, StockMovement, InvoiceItem, PRODUCT_TYPES
from ..schemas import (
    ATTRIBUTE_FIELDS,
    COMMON_PRODUCT_FIELDS,
    ProductSpec,
    product_spec_from_values,
)
from ..time_utils import local_now
from ..validation import (
    DuplicateKeyError,
    NotFoundError,
    ValidationError,
    require_amount_cents,
    require_non_negative,
)
from . import stock_service
from .transactions import atomic

TYPE_SHAPING_FIELDS = ATTRIBUTE_FIELDS | {"product_type", "size_display"}


def _sku_taken(sku: str | None, *, exclude_id: int | None = None) -> bool:
    if sku is None:
        return False
    query = db.session.query(Product.id).filter(Product.sku == sku)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    return query.first() is not None


def _require_product(product_id: int) -> Product:
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"Product {product_id} not found")
    return product


# --- Reads ----------------------------------------------------------------

def get_all() -> list[Product]:
    return db.session.query(Product).order_by(Product.name.asc(), Product.id.asc()).all()


def get_by_id(product_id: int) -> Product:
    return _require_product(product_id)


def get_by_type(product_type: str) -> list[Product]:
    if product_type not in PRODUCT_TYPES:
        raise ValidationError(f"product_type must be one of: {', '.join(PRODUCT_TYPES)}")
    return (
        db.session.query(Product)
        .filter(Product.product_type == product_type)
        .order_by(Product.name.asc(), Product.id.asc())
        .all()
    )


def get_by_size(size: str) -> list[Product]:
    """Case-insensitive substring match on size_display."""
    needle = (size or "").strip().lower()
    return (
        db.session.query(Product)
        .filter(func.lower(Product.size_display).contains(needle, autoescape=True))
        .order_by(Product.name.asc(), Product.id.asc())
        .all()
    )


def get_low_stock() -> list[Product]:
    """Products at or below their threshold, most urgent first."""
    return (
        db.session.query(Product)
        .filter(Product.stock_quantity <= Product.low_stock_threshold)
        .order_by(Product.stock_quantity.asc(), Product.name.asc(), Product.id.asc())
        .all()
    )


# --- Writes ---------------------------------------------------------------

def create(spec: ProductSpec) -> Product:
    columns = spec.to_columns()
    if not columns.get("name"):
        raise ValidationError("name is required")
    if columns.get("stock_quantity") is None:
        raise ValidationError("stock_quantity is required")
    if columns.get("price_cents") is None:
        raise ValidationError("price_cents is required")
    require_amount_cents(columns, "price_cents", allow_zero=False)
    require_amount_cents(columns, "cost_price_cents")
    require_non_negative(columns, "stock_quantity")
    require_non_negative(columns, "low_stock_threshold")
    if columns.get("low_stock_threshold") is None:
        columns["low_stock_threshold"] = current_app.config["DEFAULT_LOW_STOCK_THRESHOLD"]

    sku = columns.get("sku")
    message = f"SKU '{sku}' already exists"
    if _sku_taken(sku):
        raise DuplicateKeyError(message)

    with atomic(duplicate_message=message):
        product = Product(**columns)
        db.session.add(product)

    current_app.logger.info("Product created: id=%s name=%s", product.id, product.name)
    return product


def _reshaped_columns(product: Product, patch: dict) -> dict:
    """Merge a patch into the stored row and rebuild the type-specific columns."""
    values = {k: getattr(product, k) for k in COMMON_PRODUCT_FIELDS}
    values.update({k: getattr(product, k) for k in ATTRIBUTE_FIELDS})
    values["product_type"] = product.product_type
    values.update(patch)
    # A stale label must not survive an attribute change
    values["size_display"] = patch.get("size_display")
    return product_spec_from_values(values).to_columns()


def update(product_id: int, patch: dict) -> Product:
    """Partial update. Any change to the type-specific fields re-derives size_display."""
    product = _require_product(product_id)

    sku = patch.get("sku")
    message = f"SKU '{sku}' already exists"
    if "sku" in patch and _sku_taken(sku, exclude_id=product.id):
        raise DuplicateKeyError(message)

    if TYPE_SHAPING_FIELDS & patch.keys():
        columns = _reshaped_columns(product, patch)
    else:
        columns = dict(patch)

    with atomic(duplicate_message=message):
        previous_stock = product.stock_quantity
        for key, value in columns.items():
            setattr(product, key, value)
        product.updated_at = local_now()

        new_stock = product.stock_quantity
        if new_stock != previous_stock:
            stock_service.record_movement(
                product_id=product.id,
                movement_type="adjustment",
                quantity=new_stock - previous_stock,
                notes=f"product edit (was {previous_stock}, now {new_stock})",
            )

    current_app.logger.info("Product updated: id=%s fields=%s", product.id, ", ".join(sorted(patch)))
    return product


def adjust_product_stock(
    product_id: int,
    *,
    mode: str,
    amount: int,
    notes: str | None = None,
) -> tuple[Product, StockMovement]:
    with atomic():
        product, movement = stock_service.adjust(
            product_id=product_id, mode=mode, amount=amount, notes=notes
        )
        product.updated_at = local_now()

    current_app.logger.info(
        "Stock adjusted: product_id=%s %s %s -> %s", product_id, mode, amount, product.stock_quantity
    )
    return product, movement


def _delete_products(product_ids: list[int]) -> int:
    """Delete products and their movements; detach their invoice lines. Caller owns the transaction."""
    if not product_ids:
        return 0

    db.session.query(StockMovement).filter(
        StockMovement.product_id.in_(product_ids)
    ).delete(synchronize_session=False)

    db.session.execute(
        sql_update(InvoiceItem)
        .where(InvoiceItem.product_id.in_(product_ids))
        .values(product_id=None)
        .execution_options(synchronize_session=False)
    )

    deleted = db.session.query(Product).filter(
        Product.id.in_(product_ids)
    ).delete(synchronize_session=False)
    return deleted


def delete(product_id: int) -> None:
    with atomic():
        deleted = _delete_products([product_id])
        if deleted == 0:
            raise NotFoundError(f"Product {product_id} not found")
    current_app.logger.info("Product deleted: id=%s", product_id)


def delete_all() -> int:
    with atomic():
        ids = [pid for (pid,) in db.session.query(Product.id).all()]
        deleted = _delete_products(ids)
    current_app.logger.info("All products deleted: %d", deleted)
    return deleted


def delete_by_name(name: str) -> int:
    """Delete every product whose name contains the given text (case-insensitive)."""
    needle = (name or "").strip().lower()
    if not needle:
        raise ValidationError("name is required")

    with atomic():
        ids = [
            pid
            for (pid,) in db.session.query(Product.id)
            .filter(func.lower(Product.name).contains(needle, autoescape=True))
            .all()
        ]
        if not ids:
            raise NotFoundError(f"No products matching '{name}'")
        deleted = _delete_products(ids)
    current_app.logger.info("Products deleted by name '%s': %d", name, deleted)
    return deleted
