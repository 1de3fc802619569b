# Overview: Flask CLI command groups for schema bootstrap and ledger inspection.

# backend/warehouse/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# Schema bootstrap:
# - python -m flask system init-db
#   Create all tables that do not exist yet (use `flask db upgrade` for migrations).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Ledger inspection/repair:
# - python -m flask ledger debt <customer_id>
#   Print the outstanding debt of a customer.
# - python -m flask ledger debts
#   Print outstanding debt for every customer that owes something.
# - python -m flask ledger check-product <product_id>
#   Show whether a product may be deleted.
# - python -m flask ledger reverse <transaction_id> --reason "Wrong quantity" [--user-id 1]
#   Red-reverse a transaction.

import click
from flask.cli import with_appcontext

from .extensions import db
from .services import customer_service, transaction_service
from .services.ledger_service import can_delete_product, get_all_customer_debts, get_customer_debt
from .validation import NotFoundError


def _format_cents(cents: int) -> str:
    return f"{cents / 100:,.2f}"


@click.group('system')
def system_group():
    """Schema bootstrap commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create any missing tables."""
    db.create_all()
    click.echo("PASS Database tables created")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()
    click.echo("BUILD Creating all tables...")
    db.create_all()
    click.echo("PASS Database reset complete")


@click.group('ledger')
def ledger_group():
    """Ledger inspection and repair commands."""


@ledger_group.command('debt')
@click.argument('customer_id')
@with_appcontext
def customer_debt(customer_id):
    """Show the outstanding debt of one customer."""
    try:
        customer = customer_service.get_customer(customer_id)
    except NotFoundError as e:
        raise click.ClickException(str(e))
    debt = get_customer_debt(customer.id)
    click.echo(f"{customer.name} ({customer.id}): {_format_cents(debt)}")


@ledger_group.command('debts')
@with_appcontext
def all_debts():
    """List every customer with outstanding debt."""
    debts = get_all_customer_debts()
    if not debts:
        click.echo("No outstanding debt")
        return
    for customer_id, cents in sorted(debts.items(), key=lambda kv: kv[1], reverse=True):
        click.echo(f"{customer_id}: {_format_cents(cents)}")


@ledger_group.command('check-product')
@click.argument('product_id')
@with_appcontext
def check_product(product_id):
    """Show whether a product can be deleted."""
    if can_delete_product(product_id):
        click.echo(f"PASS Product {product_id} has no active transactions and can be deleted")
    else:
        click.echo(f"FAIL Product {product_id} has transactions, cannot delete")


@ledger_group.command('reverse')
@click.argument('transaction_id')
@click.option('--reason', required=True, help='Why the transaction is reversed')
@click.option('--user-id', default=None, help='Acting user id recorded as reversed_by')
@with_appcontext
def reverse(transaction_id, reason, user_id):
    """Red-reverse a transaction (kept in history, excluded from totals)."""
    try:
        tx = transaction_service.reverse_transaction(
            transaction_id=transaction_id,
            reason=reason,
            actor_id=user_id,
        )
    except NotFoundError as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Transaction {tx.id} reversed at {tx.reversed_at} ({tx.reversed_reason})")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(ledger_group)
