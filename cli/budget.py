#!/usr/bin/env python3

import sys
from ledger.errors import LedgerError
from ledger.months import DIRECTIONS, FORWARD, current_month
from ledger.status import items_to_address, target_status
from ledger.targets import make_target
from models.budget import TARGET_TYPES
from money import format_usd
from logger import get_logger

logger = get_logger()


def _run(action):
    """Run a budget operation, turning ledger errors into a clean exit."""
    try:
        return action()
    except (LedgerError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)


def _print_month(budget_month):
    logger.info(f"\nBudget for {budget_month.month}")
    logger.info("=" * 80)
    logger.info(f"Assignable money: {format_usd(budget_month.assignable_money)}")
    logger.info(f"Ready to Assign:  {format_usd(budget_month.ready_to_assign)}")

    for group in budget_month.groups:
        logger.info(f"\n{group.name}")
        logger.info("-" * 80)
        for item in group.items:
            status = target_status(item)
            line = (
                f"  {item.name:<28} {format_usd(item.assigned):>12} "
                f"{format_usd(item.activity):>12} {format_usd(item.available):>12}"
            )
            if status.message:
                line += f"  {status.message}"
            logger.info(line)

    to_address = items_to_address(budget_month)
    if not to_address.is_empty:
        logger.info("")
        if to_address.overspent:
            logger.info(f"Overspent: {', '.join(to_address.overspent)}")
        if to_address.underfunded:
            logger.info(f"Underfunded: {', '.join(to_address.underfunded)}")


def cmd_show(args, services):
    """Open a month (creating it if needed) and print it."""
    month = args.month or current_month()
    budget_month = _run(lambda: services.budget.open_month(month, args.direction))
    _print_month(budget_month)


def cmd_assign(args, services):
    """Assign money to a category for a month."""
    budget_month = _run(
        lambda: services.budget.assign(args.month, args.category, args.amount)
    )
    logger.info(f"Ready to Assign is now {format_usd(budget_month.ready_to_assign)}")


def cmd_target(args, services):
    """Set or clear a category's target."""
    if args.clear:
        target = None
    else:
        if not args.type or args.amount is None:
            logger.error("--type and --amount are required unless --clear is given.")
            sys.exit(1)
        target = _run(lambda: make_target(args.type, args.amount, args.date))

    budget_month = _run(
        lambda: services.budget.set_target(args.month, args.category, target)
    )
    item = budget_month.find_item_by_name(args.category)
    if item.target is None:
        logger.info(f"✓ Cleared target for '{args.category}'")
    else:
        logger.info(
            f"✓ Target for '{args.category}': {item.target.type}, "
            f"{format_usd(item.target.amount_needed)} needed in {args.month}"
        )


def cmd_add_group(args, services):
    _run(lambda: services.budget.add_group(args.month, args.name))
    logger.info(f"✓ Added group '{args.name}'")


def cmd_add_item(args, services):
    _run(lambda: services.budget.add_item(args.month, args.group, args.name))
    logger.info(f"✓ Added category '{args.name}' to '{args.group}'")


def cmd_rename_item(args, services):
    _run(lambda: services.budget.rename_item(args.old_name, args.new_name))
    logger.info(f"✓ Renamed category '{args.old_name}' to '{args.new_name}'")


def cmd_rename_group(args, services):
    _run(lambda: services.budget.rename_group(args.old_name, args.new_name))
    logger.info(f"✓ Renamed group '{args.old_name}' to '{args.new_name}'")


def cmd_delete_item(args, services):
    _run(
        lambda: services.budget.delete_item(args.group, args.name, args.reassign_to)
    )
    logger.info(f"✓ Deleted category '{args.name}'")


def cmd_delete_group(args, services):
    _run(lambda: services.budget.delete_group(args.name))
    logger.info(f"✓ Deleted group '{args.name}'")


def setup_parser(subparsers):
    """Setup budget subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "budget",
        help="Manage the envelope budget",
        description="View months, assign money and manage categories",
    )

    budget_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available budget commands",
        dest="subcommand",
        required=True,
    )

    show_parser = budget_subparsers.add_parser("show", help="Show a month")
    show_parser.add_argument("month", nargs="?", help="Month (YYYY-MM), default current")
    show_parser.add_argument(
        "--direction",
        choices=DIRECTIONS,
        default=FORWARD,
        help=f"Navigation direction when the month is new (default: {FORWARD})",
    )
    show_parser.set_defaults(func=cmd_show)

    assign_parser = budget_subparsers.add_parser(
        "assign", help="Assign money to a category"
    )
    assign_parser.add_argument("month", help="Month (YYYY-MM)")
    assign_parser.add_argument("category", help="Category name")
    assign_parser.add_argument("amount", help="Amount to assign")
    assign_parser.set_defaults(func=cmd_assign)

    target_parser = budget_subparsers.add_parser(
        "target", help="Set or clear a category target"
    )
    target_parser.add_argument("month", help="First month the target applies to")
    target_parser.add_argument("category", help="Category name")
    target_parser.add_argument(
        "--type", help=f"Target type: {', '.join(TARGET_TYPES)}"
    )
    target_parser.add_argument("--amount", help="Target amount")
    target_parser.add_argument(
        "--date", help="Target date for Custom and Full Payoff targets (YYYY-MM)"
    )
    target_parser.add_argument("--clear", action="store_true", help="Remove the target")
    target_parser.set_defaults(func=cmd_target)

    add_group_parser = budget_subparsers.add_parser(
        "add-group", help="Add a category group"
    )
    add_group_parser.add_argument("month", help="Month (YYYY-MM)")
    add_group_parser.add_argument("name", help="Group name")
    add_group_parser.set_defaults(func=cmd_add_group)

    add_item_parser = budget_subparsers.add_parser(
        "add-item", help="Add a category to a group"
    )
    add_item_parser.add_argument("month", help="Month (YYYY-MM)")
    add_item_parser.add_argument("group", help="Group name")
    add_item_parser.add_argument("name", help="Category name")
    add_item_parser.set_defaults(func=cmd_add_item)

    rename_item_parser = budget_subparsers.add_parser(
        "rename-item", help="Rename a category"
    )
    rename_item_parser.add_argument("old_name", help="Current name")
    rename_item_parser.add_argument("new_name", help="New name")
    rename_item_parser.set_defaults(func=cmd_rename_item)

    rename_group_parser = budget_subparsers.add_parser(
        "rename-group", help="Rename a category group"
    )
    rename_group_parser.add_argument("old_name", help="Current name")
    rename_group_parser.add_argument("new_name", help="New name")
    rename_group_parser.set_defaults(func=cmd_rename_group)

    delete_item_parser = budget_subparsers.add_parser(
        "delete-item", help="Delete a category"
    )
    delete_item_parser.add_argument("group", help="Group name")
    delete_item_parser.add_argument("name", help="Category name")
    delete_item_parser.add_argument(
        "--reassign-to", help="Category that receives the deleted category's money"
    )
    delete_item_parser.set_defaults(func=cmd_delete_item)

    delete_group_parser = budget_subparsers.add_parser(
        "delete-group", help="Delete an empty category group"
    )
    delete_group_parser.add_argument("name", help="Group name")
    delete_group_parser.set_defaults(func=cmd_delete_group)
