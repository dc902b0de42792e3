"""Credit card payment proration.

A card purchase only becomes money owed back to the card to the extent the
purchase's category was funded this month. Refunds and direct payments always
reduce what is owed.
"""

from decimal import Decimal
from typing import Dict, List

from models.account import Account
from models.budget import (
    CREDIT_CARD_PAYMENTS,
    READY_TO_ASSIGN,
    BudgetMonth,
    CategoryGroup,
    CategoryItem,
    MonthMap,
)
from money import ZERO
from ledger.activity import transaction_month
from logger import get_logger

logger = get_logger()


def _assigned_pool(month_map: MonthMap, month: str) -> Dict[str, Decimal]:
    """Positive assignments this month, by category name, across every group."""
    pool: Dict[str, Decimal] = {}
    budget_month = month_map.get(month)
    if budget_month is None:
        return pool
    for _, item in budget_month.iter_items():
        if item.assigned > 0:
            pool[item.name] = pool.get(item.name, ZERO) + item.assigned
    return pool


def credit_card_activity(
    month_map: MonthMap, accounts: List[Account], month: str, card_name: str
) -> Decimal:
    """Compute this month's activity for a card's Credit Card Payments item.

    Args:
        month_map: The budget; only ``month``'s assignments are used.
        accounts: All accounts.
        month: "YYYY-MM" token.
        card_name: Name of the credit account (and of its payment item).

    Returns:
        Budgeted spending now owed to the card, net of refunds, minus direct
        payments to the card. Zero if the card does not exist.
    """
    account = next((a for a in accounts if a.name == card_name), None)
    if account is None:
        return ZERO

    pool = _assigned_pool(month_map, month)

    # Per spending category: [spending, refunds]
    spending: Dict[str, List[Decimal]] = {}
    payments = ZERO
    for transaction in account.transactions:
        if transaction_month(transaction) != month:
            continue
        if transaction.category == card_name:
            if transaction.amount > 0:
                payments += transaction.amount
            continue
        if transaction.category == READY_TO_ASSIGN:
            continue

        totals = spending.setdefault(transaction.category, [ZERO, ZERO])
        if transaction.amount < 0:
            totals[0] += -transaction.amount
        elif transaction.amount > 0:
            totals[1] += transaction.amount

    activity = ZERO
    for category, (spent, refunded) in spending.items():
        net_spending = spent - refunded
        if net_spending > 0:
            funded = pool.get(category, ZERO)
            owed = min(net_spending, funded)
            pool[category] = max(funded - owed, ZERO)
            activity += owed
        elif net_spending < 0:
            activity += net_spending

    return activity - payments


def sync_credit_card_items(budget_month: BudgetMonth, accounts: List[Account]) -> bool:
    """Make the Credit Card Payments group hold exactly one item per credit account.

    Mutates ``budget_month`` in place. Items for accounts that no longer exist
    are dropped, unless money was assigned to them this month.

    Returns:
        True if the month was changed.
    """
    card_names = [a.name for a in accounts if a.is_credit]
    group = budget_month.find_group(CREDIT_CARD_PAYMENTS)
    if group is None:
        if not card_names:
            return False
        group = CategoryGroup(name=CREDIT_CARD_PAYMENTS)
        budget_month.groups.append(group)

    changed = False
    kept = []
    for item in group.items:
        if item.name in card_names:
            kept.append(item)
        elif item.assigned != 0:
            logger.warning(
                f"Keeping payment item '{item.name}' in {budget_month.month}: "
                f"no matching credit account but {item.assigned} is assigned"
            )
            kept.append(item)
        else:
            logger.debug(f"Dropping payment item '{item.name}' from {budget_month.month}")
            changed = True
    group.items = kept

    existing = {item.name for item in group.items}
    for name in card_names:
        if name not in existing:
            # The account name is a stable key for system-managed items
            group.items.append(CategoryItem(name=name, id=name))
            logger.debug(f"Added payment item '{name}' to {budget_month.month}")
            changed = True

    return changed
