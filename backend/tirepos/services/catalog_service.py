# Overview: Catalog store for brands and predefined tire/wheel sizes.

"""
Catalog Service

Brands, tire sizes and wheel sizes are lookup rows for the product form. No
product references them by key, so deletes are unconditional and never
cascade.

UNIQUENESS:
- Brand names are unique and case-sensitive.
- Size tuples are unique on exact values. SQLite treats NULLs in a UNIQUE
  index as distinct, so the size tuples are also checked here with
  NULL-safe comparison before insert.
"""
from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Brand, TireSize, WheelSize
from ..schemas import TireAttributes, WheelAttributes
from ..validation import DuplicateKeyError, ValidationError
from .transactions import atomic

DEFAULT_BRANDS = (
    "MAXTREK",
    "MICHELIN",
    "BRIDGESTONE",
    "GOODYEAR",
    "CONTINENTAL",
    "PIRELLI",
    "DUNLOP",
    "YOKOHAMA",
    "HANKOOK",
    "TOYO",
    "NEXEN",
    "KUMHO",
)

# (width, aspect_ratio, diameter)
DEFAULT_TIRE_SIZES = (
    (175, 70, 13),
    (175, 65, 14),
    (185, 65, 14),
    (185, 60, 15),
    (195, 60, 15),
    (195, 55, 15),
    (195, 55, 16),
    (205, 55, 16),
    (205, 50, 16),
    (215, 55, 16),
    (215, 50, 17),
    (225, 45, 17),
    (225, 50, 17),
    (235, 45, 17),
    (235, 40, 18),
    (245, 40, 18),
)


def _null_safe_match(model, values: dict):
    clauses = []
    for key, value in values.items():
        column = getattr(model, key)
        clauses.append(column.is_(None) if value is None else column == value)
    return db.session.query(model.id).filter(*clauses).first() is not None


# --- Brands ---------------------------------------------------------------

def list_brands() -> list[Brand]:
    return db.session.query(Brand).order_by(Brand.name.asc()).all()


def create_brand(name: str | None) -> Brand:
    name = str(name).strip() if name is not None else ""
    if not name:
        raise ValidationError("Brand name is required")
    if len(name) > Brand.__table__.c.name.type.length:
        raise ValidationError(f"name exceeds max length {Brand.__table__.c.name.type.length}")

    message = f"Brand '{name}' already exists"
    if db.session.query(Brand.id).filter(Brand.name == name).first() is not None:
        raise DuplicateKeyError(message)

    with atomic(duplicate_message=message):
        brand = Brand(name=name)
        db.session.add(brand)

    current_app.logger.info("Brand created: %s", name)
    return brand


def delete_brand(brand_id: int) -> bool:
    with atomic():
        deleted = db.session.query(Brand).filter(Brand.id == brand_id).delete(synchronize_session=False)
    return deleted > 0


# --- Tire sizes -----------------------------------------------------------

def list_tire_sizes() -> list[TireSize]:
    return (
        db.session.query(TireSize)
        .order_by(TireSize.diameter.asc(), TireSize.width.asc(), TireSize.aspect_ratio.asc())
        .all()
    )


def create_tire_size(attrs: TireAttributes, size_display: str | None = None) -> TireSize:
    columns = attrs.catalog_columns()
    label = size_display or attrs.size_display()
    if label is None:
        raise ValidationError("width, aspect_ratio and diameter are required")

    message = f"Tire size {label} already exists"
    if _null_safe_match(TireSize, columns):
        raise DuplicateKeyError(message)

    with atomic(duplicate_message=message):
        size = TireSize(**columns, size_display=label)
        db.session.add(size)
    return size


def delete_tire_size(size_id: int) -> bool:
    with atomic():
        deleted = db.session.query(TireSize).filter(TireSize.id == size_id).delete(synchronize_session=False)
    return deleted > 0


# --- Wheel sizes ----------------------------------------------------------

def list_wheel_sizes() -> list[WheelSize]:
    return (
        db.session.query(WheelSize)
        .order_by(WheelSize.diameter.asc(), WheelSize.width.asc())
        .all()
    )


def create_wheel_size(attrs: WheelAttributes, size_display: str | None = None) -> WheelSize:
    columns = attrs.catalog_columns()
    label = size_display or attrs.size_display()
    if label is None:
        raise ValidationError("diameter and width are required")

    message = f"Wheel size {label} already exists"
    if _null_safe_match(WheelSize, columns):
        raise DuplicateKeyError(message)

    with atomic(duplicate_message=message):
        size = WheelSize(**columns, size_display=label)
        db.session.add(size)
    return size


def delete_wheel_size(size_id: int) -> bool:
    with atomic():
        deleted = db.session.query(WheelSize).filter(WheelSize.id == size_id).delete(synchronize_session=False)
    return deleted > 0


# --- Seeding --------------------------------------------------------------

def seed_default_catalog() -> dict:
    """
    Insert the default brands and tire sizes that are missing.

    Idempotent: rows already present (exact match) are left alone.
    Returns the number of rows inserted per table.
    """
    created = {"brands": 0, "tire_sizes": 0}

    with atomic():
        existing_brands = {name for (name,) in db.session.query(Brand.name).all()}
        for name in DEFAULT_BRANDS:
            if name not in existing_brands:
                db.session.add(Brand(name=name))
                created["brands"] += 1

        for width, aspect_ratio, diameter in DEFAULT_TIRE_SIZES:
            attrs = TireAttributes(width=width, aspect_ratio=aspect_ratio, diameter=diameter)
            if _null_safe_match(TireSize, attrs.catalog_columns()):
                continue
            db.session.add(TireSize(**attrs.catalog_columns(), size_display=attrs.size_display()))
            created["tire_sizes"] += 1

    current_app.logger.info(
        "Default catalog seeded: %d brands, %d tire sizes", created["brands"], created["tire_sizes"]
    )
    return created
