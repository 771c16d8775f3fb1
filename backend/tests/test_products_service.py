import pytest

from tirepos.models import Invoice, InvoiceItem, Product, StockMovement
from tirepos.schemas import parse_product_patch, parse_product_payload, product_spec_from_values
from tirepos.services import invoice_service, products_service
from tirepos.validation import DuplicateKeyError, NotFoundError, ValidationError


def test_tire_product_gets_derived_size_label(tire):
    assert tire.product_type == "tire"
    assert tire.size_display == "205/55R16 91V"
    assert tire.wheel_diameter is None


def test_wheel_product_gets_derived_size_label(wheel):
    assert wheel.size_display == "16x7 PCD:5x114.3 5 Stud (Long Stud)"
    assert wheel.wheel_width == 7.0
    assert wheel.tire_width is None


def test_general_product_has_no_size_label(make_product):
    product = make_product(name="Valve Cap", size_display="ignored", tire_width=205)
    assert product.product_type == "general"
    assert product.size_display is None
    assert product.tire_width is None


def test_explicit_size_label_wins(make_product):
    product = make_product(
        name="BRIDGESTONE Turanza",
        product_type="tire",
        tire_width=215,
        tire_aspect_ratio=55,
        tire_diameter=17,
        size_display="215/55 ZR17",
    )
    assert product.size_display == "215/55 ZR17"


def test_new_product_defaults(make_product, app):
    product = make_product(name="Wheel Weights")
    assert product.low_stock_threshold == app.config["DEFAULT_LOW_STOCK_THRESHOLD"]
    assert product.cost_price_cents == 0
    assert product.created_at is not None
    assert product.created_at.microsecond == 0


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"name": "", "price_cents": 100, "stock_quantity": 1}, "name cannot be blank"),
        ({"name": "X", "price_cents": 0, "stock_quantity": 1}, "price_cents must be > 0"),
        ({"name": "X", "price_cents": -5, "stock_quantity": 1}, "price_cents must be > 0"),
        ({"name": "X", "price_cents": 100}, "Missing required fields: stock_quantity"),
        ({"name": "X", "price_cents": 100, "stock_quantity": -1}, "stock_quantity must be >= 0"),
        ({"name": "X", "price_cents": 100, "stock_quantity": 1, "product_type": "rim"}, "product_type must be one of"),
        ({"name": "X", "price_cents": 100, "stock_quantity": 1, "colour": "red"}, "Field not allowed: colour"),
        ({"name": "X", "price_cents": "12.50", "stock_quantity": 1}, "price_cents must be an integer"),
    ],
)
def test_invalid_product_payloads(db_session, payload, message):
    with pytest.raises(ValidationError, match=message):
        parse_product_payload(payload)


def test_duplicate_sku_is_rejected(make_product):
    make_product(name="A", sku="SKU-1")
    with pytest.raises(DuplicateKeyError):
        make_product(name="B", sku="SKU-1")


def test_products_without_sku_do_not_collide(make_product, db_session):
    make_product(name="A")
    make_product(name="B", sku="")
    assert db_session.query(Product).count() == 2


def test_get_all_is_ordered_by_name(make_product):
    make_product(name="Tyre Shine")
    make_product(name="Air Freshener")
    make_product(name="Nitrogen Fill")
    assert [p.name for p in products_service.get_all()] == ["Air Freshener", "Nitrogen Fill", "Tyre Shine"]


def test_get_by_id_missing(db_session):
    with pytest.raises(NotFoundError):
        products_service.get_by_id(12345)


def test_get_by_type(tire, wheel, make_product):
    make_product(name="Valve Cap")
    assert [p.id for p in products_service.get_by_type("tire")] == [tire.id]
    assert [p.id for p in products_service.get_by_type("alloy_wheel")] == [wheel.id]
    with pytest.raises(ValidationError):
        products_service.get_by_type("rim")


def test_get_by_size_is_case_insensitive_substring(tire, wheel):
    assert [p.id for p in products_service.get_by_size("r16")] == [tire.id]
    assert [p.id for p in products_service.get_by_size("long stud")] == [wheel.id]
    assert products_service.get_by_size("R18") == []


def test_get_by_size_treats_wildcards_literally(tire):
    assert products_service.get_by_size("%") == []
    assert products_service.get_by_size("205_55") == []


def test_low_stock_filter_and_order(make_product):
    make_product(name="Plenty", stock_quantity=50, low_stock_threshold=10)
    make_product(name="Edge", stock_quantity=10, low_stock_threshold=10)
    make_product(name="Empty", stock_quantity=0, low_stock_threshold=5)
    make_product(name="Few", stock_quantity=3, low_stock_threshold=5)

    low = products_service.get_low_stock()
    assert [p.name for p in low] == ["Empty", "Few", "Edge"]
    assert all(p.is_low_stock for p in low)


def test_update_partial_fields(tire):
    updated = products_service.update(tire.id, parse_product_patch({"price_cents": 13000, "description": "Summer"}))
    assert updated.price_cents == 13000
    assert updated.description == "Summer"
    assert updated.size_display == "205/55R16 91V"


def test_update_allows_zero_price_but_not_negative(tire):
    assert products_service.update(tire.id, parse_product_patch({"price_cents": 0})).price_cents == 0
    with pytest.raises(ValidationError):
        parse_product_patch({"price_cents": -1})
    with pytest.raises(ValidationError):
        parse_product_patch({"stock_quantity": -1})


def test_update_rederives_size_label_when_attributes_change(tire):
    updated = products_service.update(tire.id, parse_product_patch({"tire_diameter": 17, "tire_speed_rating": "W"}))
    assert updated.tire_diameter == 17
    assert updated.size_display == "205/55R17 91W"


def test_update_changing_type_clears_other_type_columns(tire):
    updated = products_service.update(
        tire.id,
        parse_product_patch({
            "product_type": "alloy_wheel",
            "wheel_diameter": 17,
            "wheel_width": 7.5,
            "wheel_stud_count": 4,
            "wheel_stud_type": "Short Stud",
        }),
    )
    assert updated.product_type == "alloy_wheel"
    assert updated.tire_width is None
    assert updated.size_display == "17x7.5 4 Stud (Short Stud)"


def test_update_missing_product(db_session):
    with pytest.raises(NotFoundError):
        products_service.update(999, {"name": "Ghost"})


def test_update_sku_collision(make_product):
    make_product(name="A", sku="SKU-A")
    b = make_product(name="B", sku="SKU-B")
    with pytest.raises(DuplicateKeyError):
        products_service.update(b.id, parse_product_patch({"sku": "SKU-A"}))
    # Re-saving its own SKU is fine
    assert products_service.update(b.id, parse_product_patch({"sku": "SKU-B"})).sku == "SKU-B"


def test_editing_stock_records_an_adjustment(tire, db_session):
    products_service.update(tire.id, parse_product_patch({"stock_quantity": 14}))

    movement = db_session.query(StockMovement).filter_by(product_id=tire.id).one()
    assert movement.movement_type == "adjustment"
    assert movement.quantity == 4


def test_delete_keeps_invoice_snapshots(tire, sell, db_session):
    created = sell((tire, 2))
    products_service.update(tire.id, parse_product_patch({"name": "Renamed", "price_cents": 99999}))

    tire_id = tire.id
    products_service.delete(tire_id)

    assert db_session.get(Product, tire_id) is None
    assert db_session.query(StockMovement).count() == 0

    invoice = invoice_service.get_invoice(created["id"])
    assert len(invoice.items) == 1
    line = invoice.items[0]
    assert line.product_id is None
    assert line.product_name == "MICHELIN Primacy 4"
    assert line.unit_price_cents == 12500
    assert line.total_price_cents == 25000


def test_delete_missing_product(db_session):
    with pytest.raises(NotFoundError):
        products_service.delete(404)


def test_delete_by_name(make_product, sell, db_session):
    a = make_product(name="DUNLOP SP Sport")
    make_product(name="Dunlop Enasave")
    make_product(name="TOYO Proxes")
    sell((a, 1))

    assert products_service.delete_by_name("dunlop") == 2
    assert [p.name for p in products_service.get_all()] == ["TOYO Proxes"]
    assert db_session.query(InvoiceItem).count() == 1
    assert db_session.query(Invoice).count() == 1


def test_delete_by_name_without_match(make_product):
    make_product(name="TOYO Proxes")
    with pytest.raises(NotFoundError):
        products_service.delete_by_name("KUMHO")


def test_delete_all(make_product, tire, sell, db_session):
    make_product(name="Valve Cap")
    sell((tire, 1))

    assert products_service.delete_all() == 2
    assert db_session.query(Product).count() == 0
    assert db_session.query(StockMovement).count() == 0
    assert db_session.query(InvoiceItem).one().product_id is None


@pytest.mark.parametrize(
    "values, message",
    [
        ({"name": "Free Tube", "price_cents": 0, "stock_quantity": 5}, "price_cents must be > 0"),
        ({"name": "Tube", "stock_quantity": 5}, "price_cents is required"),
        ({"name": "Tube", "price_cents": 500, "stock_quantity": -5}, "stock_quantity must be >= 0"),
        ({"name": "Tube", "price_cents": 500, "cost_price_cents": -1, "stock_quantity": 5}, "cost_price_cents must be >= 0"),
    ],
)
def test_create_rejects_bad_values_without_the_payload_parser(db_session, values, message):
    with pytest.raises(ValidationError, match=message):
        products_service.create(product_spec_from_values(values))
    assert db_session.query(Product).count() == 0


def test_delete_product_without_history(make_product, db_session):
    product_id = make_product(name="Valve Cap").id

    products_service.delete(product_id)

    assert db_session.get(Product, product_id) is None
    with pytest.raises(NotFoundError):
        products_service.delete(product_id)
