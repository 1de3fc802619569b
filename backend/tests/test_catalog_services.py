"""
Customers, products, price overrides and drivers: CRUD plus cascade rules.
"""

import pytest

from warehouse.extensions import db
from warehouse.models import Customer, CustomerProduct, Product, StockTransaction
from warehouse.services import customer_service, driver_service, pricing_service, products_service, transaction_service
from warehouse.validation import NotFoundError, ProductInUseError


class TestProductDeletion:

    def test_product_without_transactions_is_deleted(self, cement):
        products_service.delete_product(product_id=cement.id)
        assert db.session.get(Product, cement.id) is None

    def test_product_with_live_transaction_is_refused(self, customer, cement, make_tx):
        make_tx(customer_id=customer.id, product_id=cement.id)

        with pytest.raises(ProductInUseError):
            products_service.delete_product(product_id=cement.id)
        assert db.session.get(Product, cement.id) is not None

    def test_reversal_then_delete_succeeds(self, customer, cement, make_tx):
        tx = make_tx(customer_id=customer.id, product_id=cement.id)
        transaction_service.reverse_transaction(transaction_id=tx.id, reason="entered twice")

        products_service.delete_product(product_id=cement.id)
        assert db.session.get(Product, cement.id) is None
        # history is kept
        assert db.session.get(StockTransaction, tx.id) is not None

    def test_delete_removes_price_overrides(self, customer, cement):
        pricing_service.create_customer_product(patch={
            "customer_id": customer.id, "product_id": cement.id, "price_cents": 4800,
        })
        products_service.delete_product(product_id=cement.id)
        assert CustomerProduct.query.count() == 0

    def test_missing_product(self, app):
        with pytest.raises(NotFoundError):
            products_service.delete_product(product_id="missing")


class TestCustomerCascade:

    def test_delete_customer_removes_products_and_prices_but_not_history(
        self, customer, other_customer, cement, rebar, make_tx,
    ):
        shared = products_service.create_product(patch={"name": "Bricks", "unit": "piece", "current_price_cents": 80})
        pricing_service.create_customer_product(patch={
            "customer_id": customer.id, "product_id": shared.id, "price_cents": 75,
        })
        pricing_service.create_customer_product(patch={
            "customer_id": other_customer.id, "product_id": cement.id, "price_cents": 5200,
        })
        tx = make_tx(customer_id=customer.id, product_id=cement.id)

        summary = customer_service.delete_customer(customer_id=customer.id)

        assert summary["products_deleted"] == 2
        assert summary["customer_prices_deleted"] == 2
        assert db.session.get(Customer, customer.id) is None
        assert db.session.get(Product, shared.id) is not None
        assert Product.query.filter_by(customer_id=customer.id).count() == 0
        assert CustomerProduct.query.count() == 0
        assert db.session.get(StockTransaction, tx.id).customer_id == customer.id

    def test_delete_missing_customer(self, app):
        with pytest.raises(NotFoundError):
            customer_service.delete_customer(customer_id="missing")


class TestCustomers:

    def test_listing_attaches_derived_debt(self, customer, other_customer, cement, make_tx):
        make_tx(customer_id=customer.id, product_id=cement.id, quantity=2, price_cents=1500)

        by_id = {c["id"]: c for c in customer_service.list_customers()}
        assert by_id[customer.id]["debt_cents"] == 3000
        assert by_id[other_customer.id]["debt_cents"] == 0

    def test_update_bumps_updated_at(self, customer):
        before = customer.updated_at
        updated = customer_service.update_customer(customer_id=customer.id, patch={"phone": "000"})
        assert updated.phone == "000"
        assert updated.updated_at >= before


class TestPricing:

    def test_latest_override_wins(self, customer, cement):
        first = pricing_service.create_customer_product(patch={
            "customer_id": customer.id, "product_id": cement.id, "price_cents": 4800,
        })
        pricing_service.create_customer_product(patch={
            "customer_id": customer.id, "product_id": cement.id, "price_cents": 4700,
        })
        assert pricing_service.get_effective_price(customer.id, cement.id)["price_cents"] == 4700

        pricing_service.update_customer_product(customer_product_id=first.id, patch={"price_cents": 4600})
        price = pricing_service.get_effective_price(customer.id, cement.id)
        assert price == {
            "customer_id": customer.id,
            "product_id": cement.id,
            "price_cents": 4600,
            "source": "customer_price",
        }

    def test_falls_back_to_list_price(self, other_customer, cement):
        price = pricing_service.get_effective_price(other_customer.id, cement.id)
        assert price["price_cents"] == 5000
        assert price["source"] == "product"

    def test_override_requires_known_product(self, customer):
        with pytest.raises(NotFoundError):
            pricing_service.create_customer_product(patch={
                "customer_id": customer.id, "product_id": "missing", "price_cents": 1,
            })


def test_products_by_customer(customer, other_customer, cement, rebar):
    assert {p.id for p in products_service.get_products_by_customer(customer.id)} == {cement.id, rebar.id}
    assert products_service.get_products_by_customer(other_customer.id) == []


def test_driver_crud(app):
    driver = driver_service.create_driver(patch={"name": "Zhao", "vehicle": "Truck B"})
    driver_service.update_driver(driver_id=driver.id, patch={"phone": "138"})
    assert driver_service.get_driver(driver.id).phone == "138"

    driver_service.delete_driver(driver_id=driver.id)
    with pytest.raises(NotFoundError):
        driver_service.get_driver(driver.id)
