"""Helper utilities for tests."""

import itertools
from datetime import date
from decimal import Decimal
from pathlib import Path
import sqlite3

from cli.migrate import apply_pending_migrations
from models.account import CASH, Account
from models.budget import BudgetMonth, CategoryGroup, CategoryItem
from models.transaction import Transaction


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    apply_pending_migrations(conn, migrations_dir)


def money(value) -> Decimal:
    return Decimal(str(value))


def make_item(name, assigned=0, activity=0, available=0, target=None, id=None):
    """Build a CategoryItem whose id defaults to its name, for readable tests."""
    return CategoryItem(
        name=name,
        assigned=money(assigned),
        activity=money(activity),
        available=money(available),
        target=target,
        id=id or name,
    )


def make_month(month, groups=None, assignable_money=0, ready_to_assign=0):
    """Build a BudgetMonth from ``{group_name: [items]}``."""
    return BudgetMonth(
        month=month,
        groups=[
            CategoryGroup(name=name, items=list(items))
            for name, items in (groups or {}).items()
        ],
        assignable_money=money(assignable_money),
        ready_to_assign=money(ready_to_assign),
    )


_transaction_ids = itertools.count(1)


def tx(when, category, amount, group="", payee="", account_id=None):
    """Build a Transaction dated ``when`` ("YYYY-MM-DD" or None)."""
    return Transaction(
        id=next(_transaction_ids),
        account_id=account_id,
        date=date.fromisoformat(when) if when else None,
        payee=payee,
        category=category,
        category_group=group,
        amount=money(amount),
    )


def make_account(name="Checking", kind=CASH, transactions=None, id=1):
    account = Account(id=id, name=name, kind=kind)
    for transaction in transactions or []:
        transaction.account_id = id
        account.transactions.append(transaction)
    return account
