from __future__ import annotations

from ..extensions import db
from ..time_utils import local_now, format_local

PRODUCT_TYPES = ("tire", "alloy_wheel", "general")
MOVEMENT_TYPES = ("sale", "purchase", "adjustment", "return")


class Product(db.Model):
    """
    Product master data for tires, alloy wheels and general goods.

    STOCK DESIGN DECISION:
    stock_quantity is a stored, mutable counter (not ledger-derived). Every change
    to it appends a StockMovement in the same transaction, so the movement table
    explains the counter without being its source of truth.

    TYPE-SPECIFIC COLUMNS:
    tire_* columns are only filled for product_type='tire', wheel_* only for
    'alloy_wheel'. size_display is a denormalized label built from them at write
    time so that size search is a single indexed LIKE.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_name", "name"),
        db.Index("ix_products_type", "product_type"),
        db.Index("ix_products_size_display", "size_display"),
        db.CheckConstraint("price_cents >= 0", name="ck_products_price_non_negative"),
        db.CheckConstraint("cost_price_cents >= 0", name="ck_products_cost_non_negative"),
        db.CheckConstraint(
            "product_type IN ('tire', 'alloy_wheel', 'general')",
            name="ck_products_type",
        ),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Optional; unique when present (SQLite allows many NULLs)
    sku = db.Column(db.String(64), nullable=True, unique=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(120), nullable=True)

    # Authoritative storage in cents (frontend may only format for display)
    price_cents = db.Column(db.Integer, nullable=False, default=0)
    cost_price_cents = db.Column(db.Integer, nullable=False, default=0)

    # Can go negative through over-selling; manual adjustments floor at zero
    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    low_stock_threshold = db.Column(db.Integer, nullable=False, default=10)

    product_type = db.Column(db.String(16), nullable=False, default="general")

    tire_width = db.Column(db.Integer, nullable=True)          # 205
    tire_aspect_ratio = db.Column(db.Integer, nullable=True)   # 55
    tire_diameter = db.Column(db.Integer, nullable=True)       # 16 (R16)
    tire_load_index = db.Column(db.String(8), nullable=True)   # 91
    tire_speed_rating = db.Column(db.String(4), nullable=True) # V, H, W

    wheel_diameter = db.Column(db.Integer, nullable=True)         # 16
    wheel_width = db.Column(db.Float, nullable=True)              # 7.0
    wheel_pcd = db.Column(db.String(32), nullable=True)           # 5x114.3
    wheel_offset = db.Column(db.String(16), nullable=True)        # ET35
    wheel_center_bore = db.Column(db.String(16), nullable=True)   # 67.1
    wheel_stud_count = db.Column(db.Integer, nullable=True)       # 4, 5, 6
    wheel_stud_type = db.Column(db.String(32), nullable=True)     # Long Stud

    size_display = db.Column(db.String(128), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=local_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=local_now, onupdate=local_now)

    def __repr__(self) -> str:
        return f"<Product id={self.id} sku={self.sku!r} name={self.name!r} stock={self.stock_quantity}>"

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.low_stock_threshold

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price_cents": self.price_cents,
            "cost_price_cents": self.cost_price_cents,
            "stock_quantity": self.stock_quantity,
            "low_stock_threshold": self.low_stock_threshold,
            "is_low_stock": self.is_low_stock,
            "product_type": self.product_type,
            "tire_width": self.tire_width,
            "tire_aspect_ratio": self.tire_aspect_ratio,
            "tire_diameter": self.tire_diameter,
            "tire_load_index": self.tire_load_index,
            "tire_speed_rating": self.tire_speed_rating,
            "wheel_diameter": self.wheel_diameter,
            "wheel_width": self.wheel_width,
            "wheel_pcd": self.wheel_pcd,
            "wheel_offset": self.wheel_offset,
            "wheel_center_bore": self.wheel_center_bore,
            "wheel_stud_count": self.wheel_stud_count,
            "wheel_stud_type": self.wheel_stud_type,
            "size_display": self.size_display,
            "created_at": format_local(self.created_at),
            "updated_at": format_local(self.updated_at),
        }


class StockMovement(db.Model):
    """
    Append-only stock audit trail.

    quantity semantics:
    - sale: units sold (positive); reference_id is the invoice id
    - adjustment: signed delta actually applied to stock_quantity
    - purchase / return: units received back into stock (positive)
    """
    __tablename__ = "stock_movements"
    __table_args__ = (
        db.CheckConstraint(
            "movement_type IN ('sale', 'purchase', 'adjustment', 'return')",
            name="ck_stock_movements_type",
        ),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    movement_type = db.Column(db.String(16), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    reference_id = db.Column(db.Integer, nullable=True)
    notes = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=local_now, index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "movement_type": self.movement_type,
            "quantity": self.quantity,
            "reference_id": self.reference_id,
            "notes": self.notes,
            "created_at": format_local(self.created_at),
        }
