"""Ready to Assign: the single pool of money not yet given a job.

For month M::

    RTA(M) = inflow(<= M) - assigned(all months) - past cash overspending(< M)

Assignments are summed over every month in the budget, including months after
M, so an assignment made in a later month also lowers RTA for earlier months.
"""

import copy
from decimal import Decimal
from typing import List, Optional

from models.account import Account
from models.budget import MonthMap
from money import ZERO
from ledger.activity import (
    cumulative_inflow,
    first_inflow_month,
    has_cash_spending,
    month_inflow,
)
from logger import get_logger

logger = get_logger()


def total_assigned(month_map: MonthMap, through: Optional[str] = None) -> Decimal:
    """Sum of ``assigned`` over every item of every month (up to ``through`` if given)."""
    return sum(
        (
            month_map[token].total_assigned()
            for token in month_map
            if through is None or token <= through
        ),
        ZERO,
    )


def past_cash_overspending(
    month_map: MonthMap, accounts: List[Account], month: str
) -> Decimal:
    """Deficits in months before ``month`` that were caused by cash spending.

    Credit card payment items are ignored, as are negative balances with no
    cash outflow behind them (card overspending is owed to the card instead).
    """
    total = ZERO
    for token in sorted(month_map):
        if token >= month:
            break
        for group, item in month_map[token].iter_items():
            if group.is_credit_card_payments or item.available >= 0:
                continue
            if has_cash_spending(accounts, token, item.name):
                total += -item.available
    return total


def ready_to_assign(month_map: MonthMap, accounts: List[Account], month: str) -> Decimal:
    """Compute Ready to Assign for ``month``.

    Args:
        month_map: The budget.
        accounts: All accounts with transactions.
        month: "YYYY-MM" token.

    Returns:
        Unallocated money as of ``month``; zero when the month is not budgeted.
        Before the first month with any income, this is minus everything
        assigned up to and including ``month``.
    """
    if month not in month_map:
        return ZERO

    first_inflow = first_inflow_month(accounts)
    if first_inflow is not None and month < first_inflow:
        return ZERO - total_assigned(month_map, through=month)

    return (
        cumulative_inflow(accounts, month)
        - total_assigned(month_map)
        - past_cash_overspending(month_map, accounts, month)
    )


def refresh_ready_to_assign(month_map: MonthMap, accounts: List[Account]) -> MonthMap:
    """Return a copy of the budget with assignable_money and ready_to_assign
    recomputed for every month."""
    months = copy.deepcopy(month_map)
    for token in sorted(months):
        budget_month = months[token]
        budget_month.assignable_money = month_inflow(accounts, token)
        budget_month.ready_to_assign = ready_to_assign(months, accounts, token)
    logger.debug(f"Refreshed Ready to Assign for {len(months)} month(s)")
    return months
