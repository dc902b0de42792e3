#!/usr/bin/env python3

import sys
from datetime import date
from models.budget import READY_TO_ASSIGN
from models.transaction import Transaction
from money import format_usd, to_money
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List transactions, optionally for a single account."""
    if args.account_name:
        account = services.accounts.find_by_name(args.account_name)
        if not account:
            logger.error(f"Account '{args.account_name}' not found.")
            sys.exit(1)
        transactions = services.transactions.find_by_account(account.id)
    else:
        transactions = services.transactions.find_all()

    if args.month:
        transactions = [t for t in transactions if t.month == args.month]

    if not transactions:
        logger.info("No transactions found.")
        return

    for t in transactions:
        when = t.date.isoformat() if t.date else "(no date)"
        group = f"{t.category_group} / " if t.category_group else ""
        logger.info(
            f"{t.id:>6}  {when:<10}  {t.payee[:30]:<30}  "
            f"{group}{t.category:<24}  {format_usd(t.amount):>12}"
        )

    logger.info(f"\nTotal transactions: {len(transactions)}")


def cmd_add(args, services):
    """Record a transaction and recompute the budget."""
    account = services.accounts.find_by_name(args.account_name)
    if not account:
        logger.error(f"Account '{args.account_name}' not found.")
        logger.info("Use 'python -m cli accounts list' to see available accounts.")
        sys.exit(1)

    try:
        transaction_date = date.fromisoformat(args.date)
    except ValueError:
        logger.error(f"Invalid date '{args.date}'. Use YYYY-MM-DD.")
        sys.exit(1)

    transaction = Transaction(
        id=None,
        account_id=account.id,
        date=transaction_date,
        payee=args.payee,
        category=args.category,
        category_group=args.group or "",
        amount=to_money(args.amount),
    )
    transaction = services.transactions.create(transaction)
    services.budget.refresh()

    logger.info(
        f"✓ Added transaction {transaction.id}: {format_usd(transaction.amount)} "
        f"'{transaction.category}' on {account.name}"
    )


def cmd_delete(args, services):
    """Delete a transaction and recompute the budget."""
    if not services.transactions.delete(args.transaction_id):
        logger.error(f"Transaction {args.transaction_id} not found.")
        sys.exit(1)

    services.budget.refresh()
    logger.info(f"✓ Deleted transaction {args.transaction_id}")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Manage transactions",
        description="Record, list and delete transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    list_parser = transactions_subparsers.add_parser("list", help="List transactions")
    list_parser.add_argument("--account-name", help="Only show this account")
    list_parser.add_argument("--month", help="Only show this month (YYYY-MM)")
    list_parser.set_defaults(func=cmd_list)

    add_parser = transactions_subparsers.add_parser("add", help="Add a transaction")
    add_parser.add_argument("--account-name", required=True, help="Account name")
    add_parser.add_argument("--date", required=True, help="Date (YYYY-MM-DD)")
    add_parser.add_argument("--payee", default="", help="Payee")
    add_parser.add_argument(
        "--category",
        default=READY_TO_ASSIGN,
        help=f"Category item or account name (default: {READY_TO_ASSIGN})",
    )
    add_parser.add_argument("--group", help="Category group")
    add_parser.add_argument(
        "--amount", required=True, help="Signed amount, negative for outflows"
    )
    add_parser.set_defaults(func=cmd_add)

    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction"
    )
    delete_parser.add_argument("transaction_id", type=int, help="Transaction ID")
    delete_parser.set_defaults(func=cmd_delete)
