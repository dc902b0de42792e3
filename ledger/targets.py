"""Funding targets.

Monthly and Weekly targets ask for a flat amount every month. Custom and Full
Payoff targets spread what is still missing evenly over the months left until
the target date, in whole cents, with the odd cents paid first.
"""

import copy
from decimal import Decimal, ROUND_FLOOR
from typing import List, Optional

from models.budget import (
    MONTHLY,
    WEEKLY,
    MonthMap,
    Target,
    normalize_target_type,
)
from money import CENT, ZERO, round_cents, to_money
from ledger.errors import CategoryNotFoundError
from ledger.months import month_token, months_between
from logger import get_logger

logger = get_logger()

WEEKS_PER_MONTH = 4


def target_schedule(remaining: Decimal, months: int) -> List[Decimal]:
    """Split ``remaining`` into ``months`` per-month amounts that add up exactly.

    Each month gets the penny-floored even share; the leftover cents go one
    each to the earliest months.

    >>> target_schedule(Decimal("100.01"), 3)
    [Decimal('33.34'), Decimal('33.34'), Decimal('33.33')]
    """
    months = max(months, 1)
    remaining = max(round_cents(remaining), ZERO)
    base = (remaining / months).quantize(CENT, rounding=ROUND_FLOOR)
    extra_cents = int(((remaining - base * months) / CENT).to_integral_value())
    return [base + CENT if i < extra_cents else base for i in range(months)]


def _assigned_before(month_map: MonthMap, month: str, item_key: str) -> Decimal:
    total = ZERO
    for token in month_map:
        if token >= month:
            continue
        for _, item in month_map[token].iter_items():
            if item.id == item_key:
                total += item.assigned
    return total


def evaluate_target(
    target: Optional[Target], month_map: MonthMap, month: str, item_key: str
) -> Optional[Target]:
    """Work out how much ``target`` asks for in ``month``.

    Args:
        target: The item's target, or None.
        month_map: The budget, used for what was already assigned to the item.
        month: "YYYY-MM" token being evaluated.
        item_key: Stable id of the item owning the target.

    Returns:
        A new Target with ``amount_needed`` filled in, or None if there is no
        target or its date has passed. A target whose date cannot be parsed is
        returned unchanged.
    """
    if target is None:
        return None

    evaluated = copy.deepcopy(target)

    if target.type == MONTHLY:
        evaluated.amount_needed = target.amount
        return evaluated

    if target.type == WEEKLY:
        evaluated.amount_needed = target.amount * WEEKS_PER_MONTH
        return evaluated

    try:
        target_month = month_token(target.target_date)
    except (TypeError, ValueError):
        logger.warning(
            f"Skipping target evaluation for item {item_key}: "
            f"bad target date {target.target_date!r}"
        )
        return evaluated

    remaining_months = months_between(month, target_month)
    if remaining_months < 0:
        logger.debug(f"Target for item {item_key} expired in {target_month}")
        return None

    # The target month itself is still a month to fund
    months_until_target = max(remaining_months + 1, 1)
    remaining = target.amount - _assigned_before(month_map, month, item_key)
    evaluated.amount_needed = target_schedule(remaining, months_until_target)[0]
    return evaluated


def make_target(
    target_type: str, amount, target_date: Optional[str] = None
) -> Target:
    """Build a Target from loosely-typed input.

    Raises:
        ValueError: If the type is unknown, or a dated target has no valid date.
    """
    target = Target(type=normalize_target_type(target_type), amount=to_money(amount))
    if target.is_dated:
        if not target_date:
            raise ValueError(f"{target.type} targets need a target date")
        month_token(target_date)
        target.target_date = target_date
    return target


def set_target(
    month_map: MonthMap, month: str, item_key: str, target: Optional[Target]
) -> MonthMap:
    """Attach ``target`` to an item in ``month`` and every later month.

    Passing None clears the target over the same range.

    Raises:
        CategoryNotFoundError: If the item does not exist in ``month``.
    """
    if month not in month_map or month_map[month].find_item(item_key) is None:
        raise CategoryNotFoundError(f"Category item {item_key} not found in {month}")

    months = copy.deepcopy(month_map)
    for token in sorted(months):
        if token < month:
            continue
        item = months[token].find_item(item_key)
        if item is not None:
            item.target = evaluate_target(target, months, token, item_key)
    return months
