"""HTTP surface: payload parsing and error-to-status mapping."""

from tirepos.services import invoice_service


def _tire_payload(**overrides):
    payload = {
        "name": "HANKOOK Ventus Prime",
        "sku": "HAN-VP-2055516",
        "product_type": "tire",
        "price_cents": 11000,
        "stock_quantity": 8,
        "tire_width": "205",
        "tire_aspect_ratio": "55",
        "tire_diameter": "16",
    }
    payload.update(overrides)
    return payload


def test_health(client, db_session):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["checks"]["database"]["status"] == "healthy"


def test_create_and_fetch_product(client, db_session):
    resp = client.post("/api/products", json=_tire_payload())
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["size_display"] == "205/55R16"
    assert body["tire_width"] == 205
    assert body["is_low_stock"] is True

    resp = client.get(f"/api/products/{body['id']}")
    assert resp.status_code == 200
    assert resp.get_json()["name"] == "HANKOOK Ventus Prime"


def test_product_error_statuses(client, db_session):
    assert client.post("/api/products", json=_tire_payload(price_cents=0)).status_code == 400
    assert client.post("/api/products", json=_tire_payload()).status_code == 201
    resp = client.post("/api/products", json=_tire_payload(name="Other"))
    assert resp.status_code == 409
    assert "SKU" in resp.get_json()["error"]

    assert client.get("/api/products/999").status_code == 404
    assert client.put("/api/products/999", json={"name": "X"}).status_code == 404
    assert client.delete("/api/products/999").status_code == 404
    assert client.get("/api/products?type=rim").status_code == 400


def test_product_filters(client, tire, wheel, make_product):
    make_product(name="Valve Cap", stock_quantity=100)

    tires = client.get("/api/products?type=tire").get_json()
    assert [p["id"] for p in tires["items"]] == [tire.id]

    sized = client.get("/api/products?size=pcd:5x114").get_json()
    assert [p["id"] for p in sized["items"]] == [wheel.id]

    low = client.get("/api/products/low-stock").get_json()
    assert [p["id"] for p in low["items"]] == [wheel.id, tire.id]

    everything = client.get("/api/products").get_json()
    assert everything["count"] == 3


def test_update_product(client, tire):
    resp = client.put(f"/api/products/{tire.id}", json={"tire_load_index": "94", "tire_speed_rating": "W"})
    assert resp.status_code == 200
    assert resp.get_json()["size_display"] == "205/55R16 94W"

    assert client.put(f"/api/products/{tire.id}", json={"stock_quantity": -4}).status_code == 400


def test_bulk_delete_by_name(client, make_product):
    make_product(name="TOYO Proxes")
    make_product(name="TOYO Open Country")

    assert client.delete("/api/products?name=kumho").status_code == 404
    resp = client.delete("/api/products?name=toyo")
    assert resp.status_code == 200
    assert resp.get_json() == {"deleted": 2}


def test_stock_adjust_route(client, tire):
    resp = client.post(f"/api/inventory/{tire.id}/adjust", json={"mode": "subtract", "amount": 4})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["product"]["stock_quantity"] == 6
    assert body["movement"]["quantity"] == -4

    assert client.post(f"/api/inventory/{tire.id}/adjust", json={"mode": "add", "amount": 0}).status_code == 400
    assert client.post(f"/api/inventory/{tire.id}/adjust", data="nope").status_code == 400
    assert client.post("/api/inventory/999/adjust", json={"mode": "add", "amount": 1}).status_code == 404

    movements = client.get(f"/api/inventory/{tire.id}/movements").get_json()
    assert movements["count"] == 1
    assert client.get("/api/inventory/999/movements").status_code == 404
    assert client.get(f"/api/inventory/{tire.id}/movements?limit=0").status_code == 400


def test_catalog_routes(client, db_session):
    assert client.post("/api/brands", json={"name": "KUMHO"}).status_code == 201
    assert client.post("/api/brands", json={"name": "KUMHO"}).status_code == 409
    assert client.post("/api/brands", json={"name": ""}).status_code == 400
    brands = client.get("/api/brands").get_json()
    assert [b["name"] for b in brands["items"]] == ["KUMHO"]

    resp = client.post("/api/tire-sizes", json={"width": 195, "aspect_ratio": 65, "diameter": 15})
    assert resp.status_code == 201
    assert resp.get_json()["size_display"] == "195/65R15"
    assert client.post("/api/tire-sizes", json={"width": 195, "aspect_ratio": 65, "diameter": 15}).status_code == 409

    assert client.post("/api/wheel-sizes", json={"diameter": 15, "width": 6.5}).status_code == 400
    resp = client.post(
        "/api/wheel-sizes",
        json={"diameter": 15, "width": 6.5, "pcd": "4x100", "stud_count": 4, "stud_type": "Short Stud"},
    )
    assert resp.status_code == 201
    size_id = resp.get_json()["id"]

    assert client.delete(f"/api/wheel-sizes/{size_id}").get_json() == {"deleted": True}
    assert client.delete(f"/api/wheel-sizes/{size_id}").get_json() == {"deleted": False}


def test_invoice_routes(client, tire):
    payload = {
        "items": [
            {"product_id": tire.id, "product_name": tire.name, "quantity": 3, "unit_price_cents": 12500},
        ],
        "customer_name": "Chamari",
        "tax_amount_cents": 0,
        "discount_amount_cents": 500,
    }
    resp = client.post("/api/invoices", json=payload)
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["invoice_number"].startswith("INV-")

    detail = client.get(f"/api/invoices/{created['id']}").get_json()
    assert detail["subtotal_cents"] == 37500
    assert detail["total_amount_cents"] == 37000
    assert detail["items"][0]["quantity"] == 3

    listing = client.get("/api/invoices").get_json()
    assert [inv["id"] for inv in listing["items"]] == [created["id"]]
    assert "items" not in listing["items"][0]

    assert client.get("/api/invoices/999").status_code == 404


def test_invoice_error_statuses(client, tire, monkeypatch):
    line = {"product_id": tire.id, "product_name": tire.name, "quantity": 1, "unit_price_cents": 100}

    assert client.post("/api/invoices", json={"items": []}).status_code == 400
    assert client.post("/api/invoices", json={"items": [dict(line, quantity=0)]}).status_code == 400
    assert client.post("/api/invoices", json={"items": [dict(line, product_id=999)]}).status_code == 404

    first = client.post("/api/invoices", json={"items": [line]}).get_json()
    monkeypatch.setattr(invoice_service, "generate_invoice_number", lambda: first["invoice_number"])
    assert client.post("/api/invoices", json={"items": [line]}).status_code == 409


def test_invoice_date_filter_validation(client, db_session):
    assert client.get("/api/invoices?start=2026-01-01").status_code == 400
    assert client.get("/api/invoices?start=2026-01-01&end=31/01/2026").status_code == 400
    resp = client.get("/api/invoices?start=2026-01-01&end=2026-01-31")
    assert resp.status_code == 200
    assert resp.get_json()["count"] == 0


def test_report_routes(client, tire, sell):
    sell((tire, 2), customer_name="Dilan")

    daily = client.get("/api/reports/daily").get_json()
    assert daily["summary"]["total_invoices"] == 1
    assert client.get("/api/reports/daily?date=2026-13-01").status_code == 400

    assert client.get("/api/reports/range?start=2026-01-01").status_code == 400
    assert client.get("/api/reports/range?start=2026-01-01&end=2026-01-31").status_code == 200

    products = client.get("/api/reports/products").get_json()
    assert products["best_sellers"][0]["total_sold"] == 2

    customers = client.get("/api/reports/customers").get_json()
    assert customers["total_customers"] == 1
