# Overview: Stock ledger; mutates Product.stock_quantity and appends StockMovement rows.

from __future__ import annotations

from ..extensions import db
from ..models import Product, StockMovement, MOVEMENT_TYPES
from ..time_utils import local_now
from ..validation import NotFoundError, ValidationError
"""
Stock Ledger Invariants (authoritative)

- Every change to Product.stock_quantity appends exactly one StockMovement.
- Movements are append-only: never updated, never deleted (except when their
  product is deleted).
- Manual 'subtract' adjustments floor at zero.
- Sale decrements do NOT floor and do NOT re-check stock: a stale cart can
  drive stock negative. This is deliberate and must stay visible in reports
  rather than being silently clamped.
- Nothing in this module commits. The caller owns the transaction, so a sale's
  decrements commit or roll back together with its invoice.
"""

ADJUST_MODES = ("add", "subtract", "set")


def record_movement(
    *,
    product_id: int,
    movement_type: str,
    quantity: int,
    reference_id: int | None = None,
    notes: str | None = None,
) -> StockMovement:
    if movement_type not in MOVEMENT_TYPES:
        raise ValidationError(f"movement_type must be one of: {', '.join(MOVEMENT_TYPES)}")

    movement = StockMovement(
        product_id=product_id,
        movement_type=movement_type,
        quantity=quantity,
        reference_id=reference_id,
        notes=notes,
        created_at=local_now(),
    )
    db.session.add(movement)
    db.session.flush()
    return movement


def compute_adjusted_stock(current: int, mode: str, amount: int) -> int:
    if mode == "add":
        return current + amount
    if mode == "subtract":
        return max(0, current - amount)
    if mode == "set":
        return amount
    raise ValidationError(f"mode must be one of: {', '.join(ADJUST_MODES)}")


def validate_adjustment(mode: str, amount) -> int:
    if mode not in ADJUST_MODES:
        raise ValidationError(f"mode must be one of: {', '.join(ADJUST_MODES)}")
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError("amount must be an integer")
    if amount < 0:
        raise ValidationError("amount must be >= 0")
    if amount == 0 and mode != "set":
        raise ValidationError("amount must be > 0")
    return amount


def adjust(
    *,
    product_id: int,
    mode: str,
    amount: int,
    notes: str | None = None,
) -> tuple[Product, StockMovement]:
    """
    Apply a manual stock adjustment and record the signed delta.

    The movement always records new - current, so 'subtract 5' on a stock of 3
    records -3, not -5.
    """
    validate_adjustment(mode, amount)

    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"Product {product_id} not found")

    current = product.stock_quantity
    new_stock = compute_adjusted_stock(current, mode, amount)
    product.stock_quantity = new_stock

    movement = record_movement(
        product_id=product.id,
        movement_type="adjustment",
        quantity=new_stock - current,
        notes=notes or f"{mode} {amount} (was {current}, now {new_stock})",
    )
    return product, movement


def decrement_for_sale(*, product_id: int, quantity: int, invoice_id: int) -> StockMovement:
    """Unfloored sale decrement; see module invariants."""
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"Product {product_id} not found")

    # Emitted as "stock_quantity = stock_quantity - :q" at flush
    product.stock_quantity = Product.stock_quantity - quantity
    product.updated_at = local_now()

    return record_movement(
        product_id=product_id,
        movement_type="sale",
        quantity=quantity,
        reference_id=invoice_id,
    )


def list_movements(product_id: int, limit: int | None = None) -> list[StockMovement]:
    if db.session.get(Product, product_id) is None:
        raise NotFoundError(f"Product {product_id} not found")
    query = (
        db.session.query(StockMovement)
        .filter(StockMovement.product_id == product_id)
        .order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
    )
    if limit is not None:
        if limit < 1:
            raise ValidationError("limit must be >= 1")
        query = query.limit(limit)
    return query.all()
