"""
Ledger aggregation rules, exercised on plain in-memory records.

Verifies:
- Debt only counts unpaid, non-reversed OUT transactions
- Reversed transactions never block product deletion
- Query filters are an AND of optional predicates with inclusive date bounds
- Pagination: total_pages = ceil(total / page_size), 1-based pages
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.datastructures import MultiDict

from warehouse.services.ledger_service import (
    TransactionQuery,
    customer_debt_cents,
    debts_by_customer,
    filter_transactions,
    newest_first,
    paginate,
    product_in_use,
    summarize_day,
    user_stub,
)
from warehouse.validation import ValidationError


@dataclass
class Tx:
    type: str = "OUT"
    customer_id: Optional[str] = "c1"
    product_id: str = "p1"
    user_id: str = "u1"
    driver_id: Optional[str] = None
    quantity: int = 1
    price_cents: int = 100
    paid: bool = False
    is_reversed: bool = False
    date: str = "2026-10-01T09:00:00Z"
    created_at: datetime = field(default_factory=datetime.now)


# =============================================================================
# DEBT
# =============================================================================


class TestCustomerDebt:

    def test_paid_sale_is_excluded(self):
        txs = [
            Tx(quantity=100, price_cents=4800, paid=False),
            Tx(quantity=2, price_cents=430000, paid=True),
        ]
        assert customer_debt_cents(txs, "c1") == 480000

    def test_inbound_and_reversed_contribute_zero(self):
        txs = [
            Tx(quantity=3, price_cents=1000),
            Tx(type="IN", quantity=50, price_cents=1000),
            Tx(quantity=7, price_cents=1000, is_reversed=True),
        ]
        assert customer_debt_cents(txs, "c1") == 3000

    def test_other_customers_ignored(self):
        txs = [Tx(customer_id="c1", price_cents=500), Tx(customer_id="c2", price_cents=900)]
        assert customer_debt_cents(txs, "c1") == 500
        assert customer_debt_cents(txs, "c3") == 0

    def test_adding_paid_or_reversed_does_not_change_debt(self):
        txs = [Tx(quantity=4, price_cents=250)]
        before = customer_debt_cents(txs, "c1")
        txs.append(Tx(quantity=10, price_cents=999, paid=True))
        txs.append(Tx(quantity=10, price_cents=999, is_reversed=True))
        assert customer_debt_cents(txs, "c1") == before == 1000

    def test_debts_by_customer_matches_single_customer_rule(self):
        txs = [
            Tx(customer_id="c1", quantity=2, price_cents=100),
            Tx(customer_id="c2", quantity=1, price_cents=300),
            Tx(customer_id="c2", quantity=1, price_cents=300, paid=True),
            Tx(customer_id=None, type="IN", quantity=1, price_cents=300),
        ]
        debts = debts_by_customer(txs)
        assert debts == {"c1": 200, "c2": 300}
        for customer_id, cents in debts.items():
            assert customer_debt_cents(txs, customer_id) == cents


# =============================================================================
# PRODUCT DELETION GUARD
# =============================================================================


class TestProductInUse:

    def test_unreferenced_product_is_free(self):
        assert product_in_use([Tx(product_id="p2")], "p1") is False

    def test_reversed_reference_does_not_block(self):
        assert product_in_use([Tx(product_id="p1", is_reversed=True)], "p1") is False

    def test_any_live_reference_blocks(self):
        txs = [Tx(product_id="p1", is_reversed=True), Tx(product_id="p1", type="IN")]
        assert product_in_use(txs, "p1") is True


# =============================================================================
# QUERY + PAGINATION
# =============================================================================


class TestTransactionQuery:

    def test_filters_are_anded(self):
        txs = [
            Tx(type="OUT", driver_id="d1", user_id="u1"),
            Tx(type="OUT", driver_id="d2", user_id="u1"),
            Tx(type="IN", driver_id="d1", user_id="u1"),
            Tx(type="OUT", driver_id="d1", user_id="u2"),
        ]
        result = filter_transactions(txs, TransactionQuery(type="OUT", driver_id="d1", user_id="u1"))
        assert result == [txs[0]]

    def test_date_bounds_are_inclusive_string_comparisons(self):
        txs = [
            Tx(date="2026-09-30T23:59:59Z"),
            Tx(date="2026-10-01T00:00:00Z"),
            Tx(date="2026-10-15T12:00:00Z"),
            Tx(date="2026-10-31T00:00:00Z"),
        ]
        query = TransactionQuery(start_date="2026-10-01T00:00:00Z", end_date="2026-10-31T00:00:00Z")
        assert filter_transactions(txs, query) == txs[1:]

    def test_bare_end_date_stops_before_that_day(self):
        txs = [Tx(date="2026-10-31T08:00:00Z")]
        assert filter_transactions(txs, TransactionQuery(end_date="2026-10-31")) == []

    def test_empty_query_matches_everything(self):
        txs = [Tx(), Tx(type="IN", customer_id=None)]
        assert filter_transactions(txs, TransactionQuery()) == txs

    def test_from_args_defaults(self):
        query = TransactionQuery.from_args(MultiDict(), default_page_size=10)
        assert query.page == 1
        assert query.page_size == 10
        assert query.type is None

    def test_from_args_normalizes_type_and_caps_page_size(self):
        query = TransactionQuery.from_args(
            MultiDict({"type": "out", "page": "2", "page_size": "500"}),
            max_page_size=100,
        )
        assert query.type == "OUT"
        assert query.page == 2
        assert query.page_size == 100

    @pytest.mark.parametrize(
        "args",
        [
            {"page": "0"},
            {"page_size": "0"},
            {"page": "abc"},
            {"type": "SIDEWAYS"},
            {"start_date": "not-a-date"},
        ],
    )
    def test_from_args_rejects_bad_input(self, args):
        with pytest.raises(ValidationError):
            TransactionQuery.from_args(MultiDict(args))


class TestPaginate:

    def test_total_pages_is_ceiling(self):
        items = list(range(23))
        page, total, total_pages = paginate(items, 1, 10)
        assert total == 23
        assert total_pages == 3
        assert page == list(range(10))

    def test_last_page_holds_remainder(self):
        page, _, _ = paginate(list(range(23)), 3, 10)
        assert page == [20, 21, 22]

    def test_exact_multiple(self):
        _, total, total_pages = paginate(list(range(20)), 1, 10)
        assert (total, total_pages) == (20, 2)

    def test_empty_set(self):
        page, total, total_pages = paginate([], 1, 10)
        assert (page, total, total_pages) == ([], 0, 0)

    def test_page_past_end_is_empty(self):
        page, total, _ = paginate(list(range(5)), 4, 2)
        assert page == []
        assert total == 5


def test_newest_first_orders_by_business_date():
    txs = [Tx(date="2026-10-02T00:00:00Z"), Tx(date="2026-10-03T00:00:00Z"), Tx(date="2026-10-01T00:00:00Z")]
    assert [t.date[:10] for t in newest_first(txs)] == ["2026-10-03", "2026-10-02", "2026-10-01"]


def test_user_stub_shape():
    assert user_stub("42") == {"id": "42", "username": "", "name": "User 42", "role": "viewer"}


# =============================================================================
# DASHBOARD
# =============================================================================


def test_summarize_day_excludes_reversed():
    txs = [
        Tx(type="IN", quantity=10, price_cents=100, date="2026-10-19T08:00:00Z"),
        Tx(type="OUT", quantity=2, price_cents=500, date="2026-10-19T09:00:00Z"),
        Tx(type="OUT", quantity=9, price_cents=500, date="2026-10-19T10:00:00Z", is_reversed=True),
        Tx(type="OUT", quantity=1, price_cents=700, date="2026-10-02T10:00:00Z"),
        Tx(type="OUT", quantity=1, price_cents=900, date="2026-09-30T10:00:00Z"),
    ]
    summary = summarize_day(txs, date(2026, 10, 19))
    assert summary == {
        "day": "2026-10-19",
        "today_in_cents": 1000,
        "today_out_cents": 1000,
        "today_transaction_count": 2,
        "monthly_total_cents": 2700,
    }
