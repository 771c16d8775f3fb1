"""Seed default brands and common tire sizes

Revision ID: 0002_seed_catalog
Revises: 0001_initial
Create Date: 2026-10-18

Inserts only rows that are missing, so re-running against a database that was
seeded by `flask catalog seed` is harmless. Downgrade removes exactly these
defaults.
"""
from datetime import datetime

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0002_seed_catalog'
down_revision = '0001_initial'
branch_labels = None
depends_on = None


# Frozen copy of the default catalog as of this revision
BRANDS = (
    "MAXTREK", "MICHELIN", "BRIDGESTONE", "GOODYEAR", "CONTINENTAL", "PIRELLI",
    "DUNLOP", "YOKOHAMA", "HANKOOK", "TOYO", "NEXEN", "KUMHO",
)

TIRE_SIZES = (
    (175, 70, 13), (175, 65, 14), (185, 65, 14), (185, 60, 15),
    (195, 60, 15), (195, 55, 15), (195, 55, 16), (205, 55, 16),
    (205, 50, 16), (215, 55, 16), (215, 50, 17), (225, 45, 17),
    (225, 50, 17), (235, 45, 17), (235, 40, 18), (245, 40, 18),
)


def upgrade():
    conn = op.get_bind()
    now = datetime.now().replace(microsecond=0)

    existing_brands = {row[0] for row in conn.execute(sa.text("SELECT name FROM brands"))}
    for name in BRANDS:
        if name not in existing_brands:
            conn.execute(
                sa.text("INSERT INTO brands (name, created_at) VALUES (:name, :created_at)"),
                {"name": name, "created_at": now},
            )

    for width, aspect_ratio, diameter in TIRE_SIZES:
        found = conn.execute(
            sa.text(
                "SELECT 1 FROM tire_sizes WHERE width = :w AND aspect_ratio = :ar AND diameter = :d "
                "AND load_index IS NULL AND speed_rating IS NULL"
            ),
            {"w": width, "ar": aspect_ratio, "d": diameter},
        ).first()
        if found is None:
            conn.execute(
                sa.text(
                    "INSERT INTO tire_sizes (width, aspect_ratio, diameter, size_display) "
                    "VALUES (:w, :ar, :d, :label)"
                ),
                {"w": width, "ar": aspect_ratio, "d": diameter, "label": f"{width}/{aspect_ratio}R{diameter}"},
            )


def downgrade():
    conn = op.get_bind()
    for width, aspect_ratio, diameter in TIRE_SIZES:
        conn.execute(
            sa.text(
                "DELETE FROM tire_sizes WHERE width = :w AND aspect_ratio = :ar AND diameter = :d "
                "AND load_index IS NULL AND speed_rating IS NULL"
            ),
            {"w": width, "ar": aspect_ratio, "d": diameter},
        )
    for name in BRANDS:
        conn.execute(sa.text("DELETE FROM brands WHERE name = :name"), {"name": name})
