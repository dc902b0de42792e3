#!/usr/bin/env python3
"""
Envelope CLI - Command-line interface for the envelope budgeting ledger.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    accounts     Manage cash and credit accounts
    transactions Record and manage transactions
    budget       View months, assign money and manage categories
    migrate      Database migrations

Examples:
    python -m cli accounts create
    python -m cli transactions add --account-name Checking --date 2026-10-01 --amount 2500
    python -m cli budget show 2026-10
    python -m cli budget assign 2026-10 Rent 1200
    python -m cli budget target 2026-10 Vacation --type Custom --amount 600 --date 2027-03
    python -m cli migrate apply
"""

import sys
import argparse
from cli import accounts, transactions, budget, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Envelope - Envelope budgeting ledger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    accounts.setup_parser(subparsers)
    transactions.setup_parser(subparsers)
    budget.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # migrate works on the raw database, everything else on services
            if args.command == "migrate":
                args.func(args, DatabaseManager(config))
            else:
                args.func(args, Services(config))
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
