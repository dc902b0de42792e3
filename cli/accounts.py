#!/usr/bin/env python3

import sys
from models.account import ACCOUNT_KINDS
from money import format_usd
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List all accounts with their derived balances."""
    accounts = services.accounts.load_ledger()

    if not accounts:
        logger.info("No accounts found.")
        return

    logger.info("\nAccounts:")
    logger.info("=" * 80)
    for account in accounts:
        logger.info(f"ID: {account.id}")
        logger.info(f"Name: {account.name}")
        logger.info(f"Kind: {account.kind}")
        if account.description:
            logger.info(f"Description: {account.description}")
        logger.info(f"Balance: {format_usd(account.balance)}")
        logger.info("-" * 80)

    logger.info(f"\nTotal accounts: {len(accounts)}")


def cmd_create(args, services):
    """Interactively create a new account."""
    print("\nCreate New Account")
    print("=" * 80)

    name = input("Account name (e.g., Checking): ").strip()
    if not name:
        logger.error("Account name cannot be empty.")
        sys.exit(1)

    print(f"\nAvailable account kinds: {', '.join(ACCOUNT_KINDS)}")
    kind = input("Account kind: ").strip()

    description = input("Description (optional, press Enter to skip): ").strip()

    try:
        account = services.accounts.create(name, kind, description)
    except Exception as e:
        logger.error(f"Error creating account: {e}")
        sys.exit(1)

    # Credit accounts get a payment category in the budget
    if account.is_credit:
        services.budget.refresh()

    logger.info(f"\n✓ Account created successfully with ID: {account.id}")
    logger.info(f"  Name: {account.name}")
    logger.info(f"  Kind: {account.kind}")


def setup_parser(subparsers):
    """Setup accounts subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "accounts",
        help="Manage accounts",
        description="Create and list cash and credit accounts",
    )

    accounts_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available account commands",
        dest="subcommand",
        required=True,
    )

    list_parser = accounts_subparsers.add_parser("list", help="List all accounts")
    list_parser.set_defaults(func=cmd_list)

    create_parser = accounts_subparsers.add_parser(
        "create", help="Create a new account interactively"
    )
    create_parser.set_defaults(func=cmd_create)
