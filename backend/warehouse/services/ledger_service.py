# Overview: Ledger aggregation over stock transactions (debt, deletion guard, history, dashboard).

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from datetime import date
from typing import Iterable, Optional

from .repository import (
    Repository,
    customers_repo,
    drivers_repo,
    products_repo,
    transactions_repo,
)
from ..time_utils import day_key, month_key, parse_iso_datetime, utcnow
from ..validation import TRANSACTION_TYPES, ValidationError

"""
Ledger Invariants (authoritative)

- Debt is never stored. It is the sum of quantity * price_cents over a
  customer's OUT transactions that are unpaid and not reversed.
- Reversed transactions are invisible to every total and to the product
  deletion guard, but stay in history with status "reversed".
- Date filters compare the canonical date strings; both bounds are inclusive.
- Everything above the "database-backed queries" marker is pure: it reads
  iterables and never writes.
"""

TYPE_IN = "IN"
TYPE_OUT = "OUT"

RECENT_TRANSACTIONS_LIMIT = 5


def amount_cents(tx) -> int:
    return tx.quantity * tx.price_cents


def counts_as_debt(tx) -> bool:
    return tx.type == TYPE_OUT and not tx.paid and not tx.is_reversed


def customer_debt_cents(transactions: Iterable, customer_id: str) -> int:
    """Outstanding debt of one customer over the given transactions."""
    return sum(
        amount_cents(t)
        for t in transactions
        if t.customer_id == customer_id and counts_as_debt(t)
    )


def debts_by_customer(transactions: Iterable) -> dict[str, int]:
    """Outstanding debt for every customer that has any, in one pass."""
    debts: dict[str, int] = {}
    for t in transactions:
        if t.customer_id and counts_as_debt(t):
            debts[t.customer_id] = debts.get(t.customer_id, 0) + amount_cents(t)
    return debts


def product_in_use(transactions: Iterable, product_id: str) -> bool:
    """True if a non-reversed transaction references the product."""
    return any(t.product_id == product_id and not t.is_reversed for t in transactions)


@dataclass
class TransactionQuery:
    """AND-conjunction of optional history filters plus 1-based paging."""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    user_id: Optional[str] = None
    product_id: Optional[str] = None
    driver_id: Optional[str] = None
    customer_id: Optional[str] = None
    type: Optional[str] = None
    page: int = 1
    page_size: int = 10

    @classmethod
    def from_args(cls, args, *, default_page_size: int = 10, max_page_size: int = 100) -> "TransactionQuery":
        """Build from request query args; raises ValidationError on bad input."""
        def _int(name: str, default: int) -> int:
            raw = args.get(name)
            if raw is None or str(raw).strip() == "":
                return default
            try:
                return int(raw)
            except (TypeError, ValueError):
                raise ValidationError(f"{name} must be an integer")

        page = _int("page", 1)
        page_size = _int("page_size", default_page_size)
        if page < 1:
            raise ValidationError("page must be >= 1")
        if page_size < 1:
            raise ValidationError("page_size must be >= 1")
        page_size = min(page_size, max_page_size)

        for bound in ("start_date", "end_date"):
            raw = args.get(bound)
            if raw:
                try:
                    parse_iso_datetime(raw)
                except ValueError:
                    raise ValidationError(f"{bound} must be an ISO-8601 date or datetime")

        tx_type = args.get("type")
        if tx_type:
            tx_type = tx_type.upper()
            if tx_type not in TRANSACTION_TYPES:
                raise ValidationError(f"type must be one of {', '.join(TRANSACTION_TYPES)}")

        return cls(
            start_date=args.get("start_date") or None,
            end_date=args.get("end_date") or None,
            user_id=args.get("user_id") or None,
            product_id=args.get("product_id") or None,
            driver_id=args.get("driver_id") or None,
            customer_id=args.get("customer_id") or None,
            type=tx_type or None,
            page=page,
            page_size=page_size,
        )

    def matches(self, tx) -> bool:
        if self.start_date and not tx.date >= self.start_date:
            return False
        if self.end_date and not tx.date <= self.end_date:
            return False
        if self.user_id and tx.user_id != self.user_id:
            return False
        if self.product_id and tx.product_id != self.product_id:
            return False
        if self.driver_id and tx.driver_id != self.driver_id:
            return False
        if self.customer_id and tx.customer_id != self.customer_id:
            return False
        if self.type and tx.type != self.type:
            return False
        return True


def filter_transactions(transactions: Iterable, query: TransactionQuery) -> list:
    return [t for t in transactions if query.matches(t)]


def newest_first(transactions: Iterable) -> list:
    """Order by business date, then creation time, most recent first."""
    return sorted(
        transactions,
        key=lambda t: (t.date, t.created_at or utcnow()),
        reverse=True,
    )


def paginate(items: list, page: int, page_size: int) -> tuple[list, int, int]:
    """
    Slice a 1-based page out of items.

    Returns (page_items, total, total_pages) with total_pages = ceil(total / page_size).
    Pages past the end are empty.
    """
    total = len(items)
    total_pages = math.ceil(total / page_size)
    start = (page - 1) * page_size
    return items[start:start + page_size], total, total_pages


def user_stub(user_id: str) -> dict:
    """Users are not stored; history rows carry a synthesized stub."""
    return {
        "id": user_id,
        "username": "",
        "name": f"User {user_id}",
        "role": "viewer",
    }


def enrich_transaction(tx, *, products: dict, customers: dict, drivers: dict) -> dict:
    """Join a transaction with its product, user stub, driver and customer."""
    data = tx.to_dict()
    product = products.get(tx.product_id)
    customer = customers.get(tx.customer_id) if tx.customer_id else None
    driver = drivers.get(tx.driver_id) if tx.driver_id else None
    data["product"] = product.to_dict() if product else None
    data["user"] = user_stub(tx.user_id)
    data["customer"] = customer.to_dict() if customer else None
    data["driver"] = driver.to_dict() if driver else None
    data["total_amount_cents"] = amount_cents(tx)
    return data


def summarize_day(transactions: Iterable, day: date) -> dict:
    """
    Dashboard totals for one UTC day and its month.
    Reversed transactions are left out of every figure.
    """
    today = day_key(day)
    month = month_key(day)

    today_in = 0
    today_out = 0
    monthly_total = 0
    today_count = 0
    for t in transactions:
        if t.is_reversed:
            continue
        if month_key(t.date) == month:
            monthly_total += amount_cents(t)
        if day_key(t.date) != today:
            continue
        today_count += 1
        if t.type == TYPE_IN:
            today_in += amount_cents(t)
        elif t.type == TYPE_OUT:
            today_out += amount_cents(t)

    return {
        "day": today,
        "today_in_cents": today_in,
        "today_out_cents": today_out,
        "today_transaction_count": today_count,
        "monthly_total_cents": monthly_total,
    }


# =============================================================================
# DATABASE-BACKED QUERIES
# =============================================================================

def get_customer_debt(customer_id: str, *, repo: Repository | None = None) -> int:
    """Recomputed on every call from the live transaction set; no caching."""
    repo = repo or transactions_repo()
    return customer_debt_cents(repo.list(customer_id=customer_id), customer_id)


def get_all_customer_debts(*, repo: Repository | None = None) -> dict[str, int]:
    repo = repo or transactions_repo()
    return debts_by_customer(repo.list(type=TYPE_OUT, paid=False, is_reversed=False))


def can_delete_product(product_id: str, *, repo: Repository | None = None) -> bool:
    repo = repo or transactions_repo()
    return not product_in_use(repo.list(product_id=product_id), product_id)


def _lookup_tables() -> dict:
    return {
        "products": {p.id: p for p in products_repo().list()},
        "customers": {c.id: c for c in customers_repo().list()},
        "drivers": {d.id: d for d in drivers_repo().list()},
    }


def get_transactions_by_query(query: TransactionQuery) -> dict:
    """
    Filtered, paginated, enriched transaction history.

    Returns {data, total, page, page_size, total_pages}.
    """
    matching = newest_first(filter_transactions(transactions_repo().list(), query))
    page_items, total, total_pages = paginate(matching, query.page, query.page_size)

    lookups = _lookup_tables() if page_items else {"products": {}, "customers": {}, "drivers": {}}
    return {
        "data": [enrich_transaction(t, **lookups) for t in page_items],
        "total": total,
        "page": query.page,
        "page_size": query.page_size,
        "total_pages": total_pages,
        "filters": {k: v for k, v in asdict(query).items() if k not in ("page", "page_size") and v},
    }


def get_transaction_details(transaction_id: str) -> dict:
    tx = transactions_repo().require(transaction_id)
    return enrich_transaction(tx, **_lookup_tables())


def get_dashboard_summary(day: date | None = None) -> dict:
    day = day or utcnow().date()
    summary = summarize_day(transactions_repo().list(), day)
    recent = get_transactions_by_query(TransactionQuery(page=1, page_size=RECENT_TRANSACTIONS_LIMIT))
    summary["recent_transactions"] = recent["data"]
    return summary
