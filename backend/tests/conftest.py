"""
Pytest fixtures for the warehouse ledger backend tests.

Provides a fresh in-memory database per test, a test client, and small
factories that go through the service layer.
"""

import pytest

from warehouse import create_app
from warehouse.config import TestConfig
from warehouse.extensions import db
from warehouse.services import customer_service, driver_service, products_service, transaction_service


@pytest.fixture(scope='function')
def app():
    """Create application with an empty schema for each test."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def customer(app):
    """Customer with a customer-scoped product catalog."""
    return customer_service.create_customer(patch={
        "name": "Zhang Building Supplies",
        "phone": "13800138000",
        "address": "45 Materials Street",
    })


@pytest.fixture(scope='function')
def other_customer(app):
    return customer_service.create_customer(patch={"name": "Li Hardware"})


@pytest.fixture(scope='function')
def cement(customer):
    """Product scoped to `customer`, list price 50.00."""
    return products_service.create_product(patch={
        "name": "Cement",
        "description": "General purpose",
        "current_price_cents": 5000,
        "unit": "bag",
        "customer_id": customer.id,
    })


@pytest.fixture(scope='function')
def rebar(customer):
    return products_service.create_product(patch={
        "name": "Rebar",
        "current_price_cents": 450000,
        "unit": "ton",
        "customer_id": customer.id,
    })


@pytest.fixture(scope='function')
def driver(app):
    return driver_service.create_driver(patch={"name": "Wang", "phone": "13900139000", "vehicle": "Truck A"})


@pytest.fixture(scope='function')
def make_tx(app):
    """Factory: record a transaction through the service layer."""
    def _make(**fields):
        patch = {
            "type": "OUT",
            "quantity": 1,
            "price_cents": 100,
            "date": "2026-10-01T09:00:00Z",
        }
        patch.update(fields)
        paid = patch.pop("paid", False)
        tx = transaction_service.add_transaction(patch=patch, actor_id="1")
        if paid:
            tx = transaction_service.update_transaction(transaction_id=tx.id, patch={"paid": True})
        return tx

    return _make


@pytest.fixture(scope='function')
def actor_headers():
    """Acting-user header for write requests."""
    return {"X-User-Id": "7"}
