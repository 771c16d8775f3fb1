from __future__ import annotations

from ..extensions import db
from ..time_utils import local_now, format_local


class Brand(db.Model):
    """
    Brand names offered on the product form.

    Products do not reference brands by key; the brand is simply typed as the
    leading word of Product.name, so deleting a brand never touches products.
    """
    __tablename__ = "brands"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    # Case-sensitive: "Michelin" and "MICHELIN" are different rows
    name = db.Column(db.String(120), nullable=False, unique=True)
    created_at = db.Column(db.DateTime, nullable=False, default=local_now)

    def __repr__(self) -> str:
        return f"<Brand id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": format_local(self.created_at),
        }


class TireSize(db.Model):
    """Predefined tire size, e.g. 205/55R16 91V."""
    __tablename__ = "tire_sizes"
    __table_args__ = (
        db.UniqueConstraint(
            "width", "aspect_ratio", "diameter", "load_index", "speed_rating",
            name="uq_tire_sizes_spec",
        ),
        db.Index("ix_tire_sizes_display", "size_display"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    width = db.Column(db.Integer, nullable=False)
    aspect_ratio = db.Column(db.Integer, nullable=False)
    diameter = db.Column(db.Integer, nullable=False)
    load_index = db.Column(db.String(8), nullable=True)
    speed_rating = db.Column(db.String(4), nullable=True)
    size_display = db.Column(db.String(64), nullable=False)

    def __repr__(self) -> str:
        return f"<TireSize id={self.id} size_display={self.size_display!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "width": self.width,
            "aspect_ratio": self.aspect_ratio,
            "diameter": self.diameter,
            "load_index": self.load_index,
            "speed_rating": self.speed_rating,
            "size_display": self.size_display,
        }


class WheelSize(db.Model):
    """
    Predefined alloy wheel size.

    stud_count/stud_type stay nullable in storage; the create path requires them.
    """
    __tablename__ = "wheel_sizes"
    __table_args__ = (
        db.UniqueConstraint(
            "diameter", "width", "pcd", "offset", "center_bore", "stud_count", "stud_type",
            name="uq_wheel_sizes_spec",
        ),
        db.Index("ix_wheel_sizes_display", "size_display"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    diameter = db.Column(db.Integer, nullable=False)
    width = db.Column(db.Float, nullable=False)
    pcd = db.Column(db.String(32), nullable=True)
    offset = db.Column(db.String(16), nullable=True)
    center_bore = db.Column(db.String(16), nullable=True)
    stud_count = db.Column(db.Integer, nullable=True)
    stud_type = db.Column(db.String(32), nullable=True)
    size_display = db.Column(db.String(128), nullable=False)

    def __repr__(self) -> str:
        return f"<WheelSize id={self.id} size_display={self.size_display!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "diameter": self.diameter,
            "width": self.width,
            "pcd": self.pcd,
            "offset": self.offset,
            "center_bore": self.center_bore,
            "stud_count": self.stud_count,
            "stud_type": self.stud_type,
            "size_display": self.size_display,
        }
