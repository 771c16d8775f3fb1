"""Initial schema: catalog, products, stock movements, invoices

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

Creates:
1. brands, tire_sizes, wheel_sizes (form catalogs, no FKs to products)
2. products (type-specific tire_* / wheel_* columns + size_display)
3. stock_movements (append-only audit of stock_quantity changes)
4. invoices + invoice_items (line snapshots; product FK is SET NULL on delete)
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ==========================================================================
    # 1. CATALOG
    # ==========================================================================
    op.create_table('brands',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
        sqlite_autoincrement=True
    )

    op.create_table('tire_sizes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('width', sa.Integer(), nullable=False),
        sa.Column('aspect_ratio', sa.Integer(), nullable=False),
        sa.Column('diameter', sa.Integer(), nullable=False),
        sa.Column('load_index', sa.String(length=8), nullable=True),
        sa.Column('speed_rating', sa.String(length=4), nullable=True),
        sa.Column('size_display', sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('width', 'aspect_ratio', 'diameter', 'load_index', 'speed_rating', name='uq_tire_sizes_spec'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('tire_sizes', schema=None) as batch_op:
        batch_op.create_index('ix_tire_sizes_display', ['size_display'], unique=False)

    op.create_table('wheel_sizes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('diameter', sa.Integer(), nullable=False),
        sa.Column('width', sa.Float(), nullable=False),
        sa.Column('pcd', sa.String(length=32), nullable=True),
        sa.Column('offset', sa.String(length=16), nullable=True),
        sa.Column('center_bore', sa.String(length=16), nullable=True),
        sa.Column('stud_count', sa.Integer(), nullable=True),
        sa.Column('stud_type', sa.String(length=32), nullable=True),
        sa.Column('size_display', sa.String(length=128), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'diameter', 'width', 'pcd', 'offset', 'center_bore', 'stud_count', 'stud_type',
            name='uq_wheel_sizes_spec',
        ),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('wheel_sizes', schema=None) as batch_op:
        batch_op.create_index('ix_wheel_sizes_display', ['size_display'], unique=False)

    # ==========================================================================
    # 2. PRODUCTS
    # ==========================================================================
    op.create_table('products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('sku', sa.String(length=64), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=120), nullable=True),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('cost_price_cents', sa.Integer(), nullable=False),
        sa.Column('stock_quantity', sa.Integer(), nullable=False),
        sa.Column('low_stock_threshold', sa.Integer(), nullable=False),
        sa.Column('product_type', sa.String(length=16), nullable=False),
        sa.Column('tire_width', sa.Integer(), nullable=True),
        sa.Column('tire_aspect_ratio', sa.Integer(), nullable=True),
        sa.Column('tire_diameter', sa.Integer(), nullable=True),
        sa.Column('tire_load_index', sa.String(length=8), nullable=True),
        sa.Column('tire_speed_rating', sa.String(length=4), nullable=True),
        sa.Column('wheel_diameter', sa.Integer(), nullable=True),
        sa.Column('wheel_width', sa.Float(), nullable=True),
        sa.Column('wheel_pcd', sa.String(length=32), nullable=True),
        sa.Column('wheel_offset', sa.String(length=16), nullable=True),
        sa.Column('wheel_center_bore', sa.String(length=16), nullable=True),
        sa.Column('wheel_stud_count', sa.Integer(), nullable=True),
        sa.Column('wheel_stud_type', sa.String(length=32), nullable=True),
        sa.Column('size_display', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('price_cents >= 0', name='ck_products_price_non_negative'),
        sa.CheckConstraint('cost_price_cents >= 0', name='ck_products_cost_non_negative'),
        sa.CheckConstraint("product_type IN ('tire', 'alloy_wheel', 'general')", name='ck_products_type'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('sku'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('products', schema=None) as batch_op:
        batch_op.create_index('ix_products_name', ['name'], unique=False)
        batch_op.create_index('ix_products_type', ['product_type'], unique=False)
        batch_op.create_index('ix_products_size_display', ['size_display'], unique=False)

    # ==========================================================================
    # 3. STOCK MOVEMENTS
    # ==========================================================================
    op.create_table('stock_movements',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('movement_type', sa.String(length=16), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('reference_id', sa.Integer(), nullable=True),
        sa.Column('notes', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "movement_type IN ('sale', 'purchase', 'adjustment', 'return')",
            name='ck_stock_movements_type',
        ),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('stock_movements', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_stock_movements_product_id'), ['product_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_stock_movements_created_at'), ['created_at'], unique=False)

    # ==========================================================================
    # 4. INVOICES
    # ==========================================================================
    op.create_table('invoices',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('invoice_number', sa.String(length=32), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=True),
        sa.Column('customer_phone', sa.String(length=64), nullable=True),
        sa.Column('customer_email', sa.String(length=255), nullable=True),
        sa.Column('subtotal_cents', sa.Integer(), nullable=False),
        sa.Column('tax_amount_cents', sa.Integer(), nullable=False),
        sa.Column('discount_amount_cents', sa.Integer(), nullable=False),
        sa.Column('total_amount_cents', sa.Integer(), nullable=False),
        sa.Column('payment_method', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invoice_number'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('invoices', schema=None) as batch_op:
        batch_op.create_index('ix_invoices_created_at', ['created_at'], unique=False)

    op.create_table('invoice_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('invoice_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=True),
        sa.Column('product_name', sa.String(length=255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price_cents', sa.Integer(), nullable=False),
        sa.Column('total_price_cents', sa.Integer(), nullable=False),
        sa.CheckConstraint('quantity >= 1', name='ck_invoice_items_quantity_positive'),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('invoice_items', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_invoice_items_invoice_id'), ['invoice_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_invoice_items_product_id'), ['product_id'], unique=False)


def downgrade():
    with op.batch_alter_table('invoice_items', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_invoice_items_product_id'))
        batch_op.drop_index(batch_op.f('ix_invoice_items_invoice_id'))
    op.drop_table('invoice_items')

    with op.batch_alter_table('invoices', schema=None) as batch_op:
        batch_op.drop_index('ix_invoices_created_at')
    op.drop_table('invoices')

    with op.batch_alter_table('stock_movements', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_stock_movements_created_at'))
        batch_op.drop_index(batch_op.f('ix_stock_movements_product_id'))
    op.drop_table('stock_movements')

    with op.batch_alter_table('products', schema=None) as batch_op:
        batch_op.drop_index('ix_products_size_display')
        batch_op.drop_index('ix_products_type')
        batch_op.drop_index('ix_products_name')
    op.drop_table('products')

    with op.batch_alter_table('wheel_sizes', schema=None) as batch_op:
        batch_op.drop_index('ix_wheel_sizes_display')
    op.drop_table('wheel_sizes')

    with op.batch_alter_table('tire_sizes', schema=None) as batch_op:
        batch_op.drop_index('ix_tire_sizes_display')
    op.drop_table('tire_sizes')

    op.drop_table('brands')
