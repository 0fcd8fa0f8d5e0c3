# Overview: Pytest coverage for the HTTP API: status codes, payloads and auth.

from shopledger.services.auth_service import issue_token
from shopledger.time_utils import day_key, utcnow

from conftest import auth_headers


class TestAuth:
    def test_health_is_public(self, client, db_session):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json["status"] == "healthy"

    def test_missing_token(self, client, db_session):
        response = client.get("/api/products")
        assert response.status_code == 401
        assert response.json["code"] == "UNAUTHENTICATED"

    def test_bad_token(self, client, db_session):
        response = client.get("/api/products", headers=auth_headers("not-a-token"))
        assert response.status_code == 401

    def test_tampered_token(self, client, shop_a):
        token = issue_token("cashier-a", shop_a.id)
        tampered = token[:-2] + ("AA" if not token.endswith("AA") else "BB")
        response = client.get("/api/products", headers=auth_headers(tampered))
        assert response.status_code == 401


class TestProductRoutes:
    def test_crud(self, client, headers_a):
        response = client.post("/api/products", json={
            "name": "Vacio", "unit": "kg", "sale_price_cents": 650000, "stock_qty": 3, "low_stock_alert_qty": 5,
        }, headers=headers_a)
        assert response.status_code == 201
        product_id = response.json["id"]

        response = client.patch(f"/api/products/{product_id}", json={"stock_qty": 8}, headers=headers_a)
        assert response.status_code == 200
        assert response.json["stock_qty"] == 8.0

        response = client.get("/api/products/low-stock", headers=headers_a)
        assert response.json["count"] == 0

        response = client.put(f"/api/products/{product_id}", json={"stock_qty": 2}, headers=headers_a)
        response = client.get("/api/products/low-stock", headers=headers_a)
        assert [p["id"] for p in response.json["items"]] == [product_id]

        response = client.delete(f"/api/products/{product_id}", headers=headers_a)
        assert response.status_code == 200
        response = client.get(f"/api/products/{product_id}", headers=headers_a)
        assert response.status_code == 404

    def test_validation_error_names_field(self, client, headers_a):
        response = client.post("/api/products", json={
            "name": "Vacio", "unit": "kg", "sale_price_cents": "12.50",
        }, headers=headers_a)
        assert response.status_code == 400
        assert response.json["field"] == "sale_price_cents"

    def test_out_of_range_quantity(self, client, headers_a):
        response = client.post("/api/products", json={
            "name": "Vacio", "unit": "kg", "sale_price_cents": 650000, "stock_qty": 1e30,
        }, headers=headers_a)
        assert response.status_code == 400
        assert response.json["field"] == "stock_qty"

    def test_list_filters(self, client, headers_a, vacio, asado):
        response = client.get("/api/products?name=asa", headers=headers_a)
        assert [p["name"] for p in response.json["items"]] == ["Asado"]

        response = client.get("/api/products?order_by=bogus", headers=headers_a)
        assert response.status_code == 400


class TestSaleRoutes:
    def test_record_sale(self, client, headers_a, vacio):
        response = client.post("/api/sales", json={
            "payment_method": "cash",
            "items": [
                {"product_id": vacio["id"], "mode": "kg", "qty_kg": "1,5"},
                {"product_id": vacio["id"], "mode": "amount", "amount_cents": 500000},
            ],
        }, headers=headers_a)
        assert response.status_code == 201
        body = response.json
        assert body["total_cents"] == 975000 + 500000
        assert body["total_qty_kg"] == 2.269
        assert len(body["items"]) == 2

        response = client.get(f"/api/sales/{body['sale_id']}", headers=headers_a)
        assert response.status_code == 200
        assert response.json["sale"]["created_by"] == "cashier-a"

        response = client.get("/api/sales", headers=headers_a)
        assert response.json["count"] == 1

    def test_insufficient_stock(self, client, headers_a, vacio):
        response = client.post("/api/sales", json={
            "payment_method": "cash",
            "items": [{"product_id": vacio["id"], "mode": "kg", "qty_kg": 11}],
        }, headers=headers_a)
        assert response.status_code == 409
        assert response.json["code"] == "INSUFFICIENT_STOCK"
        assert response.json["details"]["product_id"] == vacio["id"]

    def test_out_of_range_weight(self, client, headers_a, vacio):
        response = client.post("/api/sales", json={
            "payment_method": "cash",
            "items": [{"product_id": vacio["id"], "mode": "kg", "qty_kg": 1e306}],
        }, headers=headers_a)
        assert response.status_code == 400
        assert response.json["code"] == "INVALID_QUANTITY"

    def test_bad_mode(self, client, headers_a, vacio):
        response = client.post("/api/sales", json={
            "payment_method": "cash",
            "items": [{"product_id": vacio["id"], "mode": "grams", "qty_kg": 1}],
        }, headers=headers_a)
        assert response.status_code == 400
        assert response.json["field"] == "mode"

    def test_unknown_product(self, client, headers_a):
        response = client.post("/api/sales", json={
            "payment_method": "cash",
            "items": [{"product_id": 999, "mode": "kg", "qty_kg": 1}],
        }, headers=headers_a)
        assert response.status_code == 404
        assert response.json["code"] == "PRODUCT_NOT_FOUND"

    def test_empty_items(self, client, headers_a):
        response = client.post("/api/sales", json={"payment_method": "cash", "items": []}, headers=headers_a)
        assert response.status_code == 400
        assert response.json["field"] == "items"


class TestCashRoutes:
    def test_movement_and_daily_report(self, client, headers_a):
        response = client.post("/api/cash/movements", json={
            "direction": "out",
            "method": "cash",
            "category": "Proveedor",
            "amount_cents": 250000,
            "occurred_at": "2026-03-01T15:00:00Z",
        }, headers=headers_a)
        assert response.status_code == 201
        assert "movement_id" in response.json

        response = client.get("/api/reports/daily/2026-03-01", headers=headers_a)
        assert response.status_code == 200
        assert response.json["summary"]["cash_by_category"] == {"proveedor": -250000}

        response = client.get("/api/reports/monthly/2026-03", headers=headers_a)
        assert response.json["summary"]["cash_out_cents"] == 250000

        response = client.get("/api/cash/movements?type=manual", headers=headers_a)
        assert response.json["count"] == 1

    def test_movement_validation(self, client, headers_a):
        response = client.post("/api/cash/movements", json={
            "direction": "out", "method": "cash", "category": "", "amount_cents": 100,
        }, headers=headers_a)
        assert response.status_code == 400
        assert response.json["field"] == "category"

    def test_non_text_fields_are_rejected(self, client, headers_a):
        base = {"direction": "out", "method": "cash", "category": "luz", "amount_cents": 100}
        for field in ("category", "note"):
            response = client.post("/api/cash/movements", json={**base, field: 5}, headers=headers_a)
            assert response.status_code == 400
            assert response.json["field"] == field

        response = client.post("/api/cash/shifts", json={
            "cashier_name": 5, "opening_cash_cents": 0,
        }, headers=headers_a)
        assert response.status_code == 400
        assert response.json["field"] == "cashier_name"

    def test_shift_lifecycle(self, client, headers_a):
        response = client.post("/api/cash/shifts", json={
            "cashier_name": "Ana", "opening_cash_cents": 1500000,
        }, headers=headers_a)
        assert response.status_code == 201
        shift_id = response.json["shift_id"]

        response = client.post(f"/api/cash/shifts/{shift_id}/close", json={
            "closing_cash_cents": 1800000,
            # ignored: the difference is always computed server-side
            "difference_cents": 1,
        }, headers=headers_a)
        assert response.status_code == 200
        assert response.json == {"shift_id": shift_id, "difference_cents": 300000}

        response = client.post(f"/api/cash/shifts/{shift_id}/close", json={
            "closing_cash_cents": 1800000,
        }, headers=headers_a)
        assert response.status_code == 409
        assert response.json["code"] == "INVALID_STATE"

        response = client.get("/api/cash/shifts?status=closed", headers=headers_a)
        assert [s["id"] for s in response.json["shifts"]] == [shift_id]

    def test_close_unknown_shift(self, client, headers_a):
        response = client.post("/api/cash/shifts/777/close", json={"closing_cash_cents": 1}, headers=headers_a)
        assert response.status_code == 404


class TestReportRoutes:
    def test_empty_day_is_null(self, client, headers_a):
        response = client.get("/api/reports/daily/2020-01-01", headers=headers_a)
        assert response.status_code == 200
        assert response.json["summary"] is None

    def test_bad_key(self, client, headers_a):
        response = client.get("/api/reports/daily/2026-3-1", headers=headers_a)
        assert response.status_code == 400
        response = client.get("/api/reports/series/March", headers=headers_a)
        assert response.status_code == 400

    def test_today_and_series(self, client, headers_a, shop_a, vacio):
        client.post("/api/sales", json={
            "payment_method": "transfer",
            "items": [{"product_id": vacio["id"], "mode": "kg", "qty_kg": 1}],
        }, headers=headers_a)

        response = client.get("/api/reports/today", headers=headers_a)
        assert response.status_code == 200
        assert response.json["has_data"] is True
        assert response.json["today"]["sales_by_method"] == {"transfer": 650000}

        day = day_key(utcnow(), shop_a.timezone)
        response = client.get(f"/api/reports/series/{day[:7]}", headers=headers_a)
        assert response.status_code == 200
        assert response.json["daily_sales_cents"][int(day[-2:]) - 1] == 650000
