"""
Pytest fixtures for TirePOS backend tests.

Provides the in-memory application, a per-test clean database and product
builders.
"""

import pytest

from tirepos import create_app
from tirepos.extensions import db
from tirepos.schemas import parse_invoice_payload, parse_product_payload
from tirepos.services import invoice_service, products_service


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'LOG_LEVEL': 'WARNING',
    })

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def make_product(db_session):
    """Build products through the same parsing path the API uses."""
    def _make(**overrides):
        payload = {
            "name": "General Item",
            "price_cents": 1000,
            "stock_quantity": 10,
        }
        payload.update(overrides)
        return products_service.create(parse_product_payload(payload))
    return _make


@pytest.fixture(scope='function')
def tire(make_product):
    return make_product(
        name="MICHELIN Primacy 4",
        sku="MIC-P4-2055516",
        product_type="tire",
        price_cents=12500,
        cost_price_cents=9000,
        stock_quantity=10,
        tire_width=205,
        tire_aspect_ratio=55,
        tire_diameter=16,
        tire_load_index="91",
        tire_speed_rating="V",
    )


@pytest.fixture(scope='function')
def wheel(make_product):
    return make_product(
        name="MAXTREK Alloy 16",
        product_type="alloy_wheel",
        price_cents=45000,
        stock_quantity=4,
        wheel_diameter=16,
        wheel_width=7,
        wheel_pcd="5x114.3",
        wheel_stud_count=5,
        wheel_stud_type="Long Stud",
    )


@pytest.fixture(scope='function')
def sell(db_session):
    """Ring up a sale of (product, quantity) pairs at each product's current price."""
    def _sell(*lines, **invoice_fields):
        payload = {
            "items": [
                {
                    "product_id": product.id,
                    "product_name": product.name,
                    "quantity": quantity,
                    "unit_price_cents": product.price_cents,
                }
                for product, quantity in lines
            ],
        }
        payload.update(invoice_fields)
        return invoice_service.create_invoice(parse_invoice_payload(payload))
    return _sell


@pytest.fixture(scope='function')
def backdate(db_session):
    """Move an invoice to a fixed local wall-clock time."""
    def _backdate(invoice_id, when):
        invoice = invoice_service.get_invoice(invoice_id)
        invoice.created_at = when
        invoice.updated_at = when
        db_session.commit()
    return _backdate
