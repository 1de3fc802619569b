"""
Ledger CLI commands.
"""

from warehouse.services.ledger_service import can_delete_product


def test_debt_prints_formatted_amount(app, customer, cement, make_tx):
    make_tx(customer_id=customer.id, product_id=cement.id, quantity=100, price_cents=4800)

    result = app.test_cli_runner().invoke(args=["ledger", "debt", customer.id])

    assert result.exit_code == 0
    assert "4,800.00" in result.output


def test_debt_unknown_customer_fails(app):
    result = app.test_cli_runner().invoke(args=["ledger", "debt", "missing"])
    assert result.exit_code != 0
    assert "not found" in result.output


def test_debts_without_outstanding(app):
    result = app.test_cli_runner().invoke(args=["ledger", "debts"])
    assert "No outstanding debt" in result.output


def test_reverse_unblocks_product(app, customer, cement, make_tx):
    tx = make_tx(customer_id=customer.id, product_id=cement.id)
    runner = app.test_cli_runner()

    assert "FAIL" in runner.invoke(args=["ledger", "check-product", cement.id]).output

    result = runner.invoke(args=["ledger", "reverse", tx.id, "--reason", "Wrong quantity", "--user-id", "4"])
    assert result.exit_code == 0
    assert "Wrong quantity" in result.output
    assert can_delete_product(cement.id) is True
    assert "PASS" in runner.invoke(args=["ledger", "check-product", cement.id]).output
