# Overview: Pytest coverage for the product catalogue and stock store.

import pytest

from shopledger.errors import NotFound, ValidationError
from shopledger.models import Sale
from shopledger.services import products_service, sales_service
from shopledger.services.sales_service import KgLine

from conftest import make_product


class TestCreateProduct:
    def test_create_defaults(self, shop_a):
        p = products_service.create_product(
            shop_a.id, {"name": "  Nalga ", "unit": "kg", "sale_price_cents": 720000}
        )
        assert p["name"] == "Nalga"
        assert p["stock_qty"] == 0.0
        assert p["low_stock_alert_qty"] == 0.0
        assert p["shop_id"] == shop_a.id
        assert p["is_low_stock"] is True

    def test_quantities_rounded_to_grams(self, shop_a):
        p = make_product(shop_a, stock_qty="12,3456")
        assert p["stock_qty"] == 12.346

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"name": ""}, "name"),
            ({"name": "   "}, "name"),
            ({"unit": "lb"}, "unit"),
            ({"sale_price_cents": -1}, "sale_price_cents"),
            ({"sale_price_cents": 12.5}, "sale_price_cents"),
            ({"sale_price_cents": "1e5"}, "sale_price_cents"),
            ({"sale_price_cents": 1_000_000_000}, "sale_price_cents"),
            ({"stock_qty": -0.5}, "stock_qty"),
            ({"stock_qty": "lots"}, "stock_qty"),
            ({"low_stock_alert_qty": -1}, "low_stock_alert_qty"),
            ({"stock_qty": 1e30}, "stock_qty"),
            ({"stock_qty": 10 ** 400}, "stock_qty"),
            ({"stock_qty": "1000000,5"}, "stock_qty"),
            ({"low_stock_alert_qty": 1e306}, "low_stock_alert_qty"),
            ({"sku": "X-1"}, "sku"),
        ],
    )
    def test_validation_names_the_field(self, shop_a, overrides, field):
        with pytest.raises(ValidationError) as exc:
            make_product(shop_a, **overrides)
        assert exc.value.field == field

    def test_missing_required(self, shop_a):
        with pytest.raises(ValidationError) as exc:
            products_service.create_product(shop_a.id, {"unit": "kg", "sale_price_cents": 100})
        assert exc.value.field == "name"

    def test_unknown_shop(self, db_session):
        with pytest.raises(NotFound):
            products_service.create_product(999, {"name": "X", "unit": "kg", "sale_price_cents": 1})


class TestUpdateProduct:
    def test_partial_update(self, shop_a, vacio):
        updated = products_service.update_product(shop_a.id, vacio["id"], {"sale_price_cents": 700000})
        assert updated["sale_price_cents"] == 700000
        assert updated["name"] == vacio["name"]
        assert updated["stock_qty"] == vacio["stock_qty"]
        assert updated["version_id"] > vacio["version_id"]

    def test_invalid_patch_leaves_product_unchanged(self, shop_a, vacio):
        with pytest.raises(ValidationError):
            products_service.update_product(shop_a.id, vacio["id"], {"unit": "box"})
        assert products_service.get_product(shop_a.id, vacio["id"])["unit"] == "kg"

    def test_out_of_range_stock(self, shop_a, vacio):
        with pytest.raises(ValidationError) as exc:
            products_service.update_product(shop_a.id, vacio["id"], {"stock_qty": 1e30})
        assert exc.value.field == "stock_qty"
        assert products_service.get_product(shop_a.id, vacio["id"])["stock_qty"] == 10.0

    def test_missing_product(self, shop_a):
        with pytest.raises(NotFound):
            products_service.update_product(shop_a.id, 12345, {"name": "Nope"})


class TestListProducts:
    def test_ordered_by_name(self, shop_a):
        make_product(shop_a, name="Vacio")
        make_product(shop_a, name="Asado")
        make_product(shop_a, name="Matambre")
        names = [p["name"] for p in products_service.list_products(shop_a.id)]
        assert names == ["Asado", "Matambre", "Vacio"]

    def test_filters(self, shop_a):
        make_product(shop_a, name="Chorizo parrillero", unit="unit", sale_price_cents=90000)
        make_product(shop_a, name="Chorizo colorado")
        make_product(shop_a, name="Bondiola")

        assert len(products_service.list_products(shop_a.id, name="chorizo")) == 2
        units = products_service.list_products(shop_a.id, unit="unit")
        assert [p["name"] for p in units] == ["Chorizo parrillero"]

    def test_invalid_ordering(self, shop_a):
        with pytest.raises(ValidationError) as exc:
            products_service.list_products(shop_a.id, order_by="price")
        assert exc.value.field == "order_by"

    def test_low_stock(self, shop_a):
        make_product(shop_a, name="Plenty", stock_qty=5, low_stock_alert_qty=2)
        make_product(shop_a, name="AtLimit", stock_qty=2, low_stock_alert_qty=2)
        make_product(shop_a, name="Empty", stock_qty=0, low_stock_alert_qty=2)
        make_product(shop_a, name="Short", stock_qty=1.5, low_stock_alert_qty=2)

        low = products_service.list_low_stock_products(shop_a.id)
        assert [p["name"] for p in low] == ["Empty", "Short", "AtLimit"]
        assert all(p["is_low_stock"] for p in low)

        not_low = products_service.list_products(shop_a.id, low_stock=False)
        assert [p["name"] for p in not_low] == ["Plenty"]


class TestDeleteProduct:
    def test_delete(self, shop_a, vacio):
        products_service.delete_product(shop_a.id, vacio["id"])
        with pytest.raises(NotFound):
            products_service.get_product(shop_a.id, vacio["id"])

    def test_past_sales_keep_snapshot(self, shop_a, vacio):
        result = sales_service.record_sale(shop_a.id, "cashier-a", "cash", [KgLine(vacio["id"], 1)])
        products_service.delete_product(shop_a.id, vacio["id"])

        sale = sales_service.get_sale(shop_a.id, result["sale_id"])
        assert isinstance(sale, Sale)
        assert sale.lines[0].product_name == "Vacio"
        assert sale.lines[0].price_per_kg_cents == 650000
