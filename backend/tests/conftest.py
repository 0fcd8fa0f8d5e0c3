"""
Pytest fixtures for shopledger backend tests.

Provides test database setup, two-shop tenant fixtures, products and
authenticated test-client headers.
"""

import pytest
from shopledger import create_app
from shopledger.extensions import db
from shopledger.services import products_service, shop_service
from shopledger.services.auth_service import issue_token


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'LEDGER_TX_BACKOFF': 0,
    })

    with app.app_context():
        db.create_all()
        yield app
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
def shop_a(db_session):
    """Shop A (first tenant), Buenos Aires time."""
    return shop_service.create_shop("Carniceria A", "America/Argentina/Buenos_Aires")


@pytest.fixture(scope='function')
def shop_b(db_session):
    """Shop B (second tenant)."""
    return shop_service.create_shop("Carniceria B", "America/Argentina/Cordoba")


def make_product(shop, **overrides) -> dict:
    """Create a kg product priced 6500.00/kg with 10 kg in stock unless overridden."""
    payload = {
        "name": "Vacio",
        "unit": "kg",
        "sale_price_cents": 650000,
        "stock_qty": 10,
        "low_stock_alert_qty": 1,
    }
    payload.update(overrides)
    return products_service.create_product(shop.id, payload)


@pytest.fixture(scope='function')
def vacio(shop_a):
    return make_product(shop_a)


@pytest.fixture(scope='function')
def asado(shop_a):
    return make_product(shop_a, name="Asado", sale_price_cents=580000, stock_qty=5)


@pytest.fixture(scope='function')
def product_b(shop_b):
    return make_product(shop_b, name="Matambre", sale_price_cents=700000)


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def headers_a(shop_a):
    return auth_headers(issue_token("cashier-a", shop_a.id))


@pytest.fixture(scope='function')
def headers_b(shop_b):
    return auth_headers(issue_token("cashier-b", shop_b.id))
