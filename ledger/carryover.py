"""Cumulative carryover of category balances across months."""

from decimal import Decimal

from models.budget import MonthMap
from money import ZERO


def cumulative_available(month_map: MonthMap, month: str, item_key: str) -> Decimal:
    """Fold (assigned + activity) of an item over every month strictly before ``month``.

    Every match in a month is counted, whichever group holds it. Months where
    the item did not exist contribute nothing.

    Args:
        month_map: The budget.
        month: "YYYY-MM" token; only earlier months are considered.
        item_key: Stable id of the category item.

    Returns:
        Running total, which may be negative. Callers clamp it at zero.
    """
    total = ZERO
    for token in sorted(month_map):
        if token >= month:
            break
        for _, item in month_map[token].iter_items():
            if item.id == item_key:
                total += item.assigned + item.activity
    return total


def prior_available(month_map: MonthMap, month: str, item_key: str) -> Decimal:
    """``available`` of an item in the nearest earlier month that has it, else zero."""
    for token in sorted((t for t in month_map if t < month), reverse=True):
        item = month_map[token].find_item(item_key)
        if item is not None:
            return item.available
    return ZERO
