"""Month transitions.

Visiting a month moves it through three states:

- Absent: the month has no record yet.
- Seeded: the month was created from an existing month's category structure.
- Patched: an existing month was given any group or item it was missing.

After the structure is settled every item's activity and available are
recomputed from the live transactions, and Ready to Assign is refreshed for
every month, since the month's figures feed RTA for later months.
"""

import copy
from typing import List, Optional

from models.account import Account
from models.budget import (
    CREDIT_CARD_PAYMENTS,
    BudgetMonth,
    CategoryGroup,
    CategoryItem,
    MonthMap,
)
from money import ZERO, to_money
from ledger.activity import activity_for_category
from ledger.carryover import cumulative_available, prior_available
from ledger.credit import credit_card_activity, sync_credit_card_items
from ledger.errors import CategoryNotFoundError
from ledger.months import FORWARD, month_token, validate_direction
from ledger.ready_to_assign import refresh_ready_to_assign
from ledger.targets import evaluate_target
from logger import get_logger

logger = get_logger()

DEFAULT_CATEGORIES = {
    "Bills": ["Rent", "Electricity", "Water"],
    "Subscriptions": ["Spotify", "Netflix"],
    CREDIT_CARD_PAYMENTS: [],
}


def default_category_groups() -> List[CategoryGroup]:
    """The category tree a brand new budget starts with."""
    return [
        CategoryGroup(name=group, items=[CategoryItem(name=name) for name in items])
        for group, items in DEFAULT_CATEGORIES.items()
    ]


def _clone_groups(groups: List[CategoryGroup], keep_targets: bool) -> List[CategoryGroup]:
    return [
        CategoryGroup(
            name=group.name,
            items=[item.zeroed(keep_target=keep_targets) for item in group.items],
        )
        for group in groups
    ]


def _seed_month(
    months: MonthMap, month: str, direction: str, seed_defaults: bool
) -> BudgetMonth:
    """Create the record for a month that does not exist yet."""
    earlier = [token for token in sorted(months) if token < month]

    if direction == FORWARD and earlier:
        source = months[earlier[-1]]
        logger.debug(f"Seeding {month} forward from {source.month}")
        groups = _clone_groups(source.groups, keep_targets=True)
    elif months:
        source = months[max(months)]
        logger.debug(f"Seeding {month} with empty categories from {source.month}")
        groups = _clone_groups(source.groups, keep_targets=False)
    elif seed_defaults:
        logger.debug(f"Seeding {month} with default categories")
        groups = default_category_groups()
    else:
        groups = []

    return BudgetMonth(month=month, groups=groups)


def _patch_month(months: MonthMap, month: str) -> bool:
    """Add every group and item present in another month but missing from ``month``.

    Existing groups and items keep their values; added items are zeroed.

    Returns:
        True if anything was added.
    """
    target = months[month]
    present = target.item_ids()
    changed = False

    for token in sorted(months):
        if token == month:
            continue
        for group in months[token].groups:
            patched_group = target.find_group(group.name)
            if patched_group is None:
                patched_group = CategoryGroup(name=group.name)
                target.groups.append(patched_group)
                changed = True
            for item in group.items:
                if item.id in present:
                    continue
                patched_group.items.append(item.zeroed())
                present.add(item.id)
                changed = True

    if changed:
        logger.debug(f"Patched missing categories into {month}")
    return changed


def _recompute_month(months: MonthMap, accounts: List[Account], month: str) -> None:
    """Recompute activity, available and targets of every item in ``month`` in place."""
    budget_month = months[month]
    for group, item in budget_month.iter_items():
        item.assigned = to_money(item.assigned)
        if group.is_credit_card_payments:
            item.activity = credit_card_activity(months, accounts, month, item.name)
            item.available = (
                prior_available(months, month, item.id) + item.assigned + item.activity
            )
        else:
            item.activity = activity_for_category(accounts, month, item.name)
            carryover = max(cumulative_available(months, month, item.id), ZERO)
            item.available = item.assigned + item.activity + carryover
        item.target = evaluate_target(item.target, months, month, item.id)


def compute_month(
    month_map: MonthMap,
    accounts: List[Account],
    month: str,
    direction: str = FORWARD,
    seed_defaults: bool = True,
) -> MonthMap:
    """Create or patch ``month`` and recompute its figures.

    Args:
        month_map: The budget. Not modified.
        accounts: All accounts with transactions.
        month: "YYYY-MM" token (dates and ISO strings are accepted).
        direction: "forward" or "backward", the way the user navigated.
        seed_defaults: Whether an empty budget starts with the default categories.

    Returns:
        A new MonthMap. Calling again with the result and the same accounts
        returns an identical map.
    """
    month = month_token(month)
    validate_direction(direction)
    months = copy.deepcopy(month_map)

    if month in months:
        _patch_month(months, month)
    else:
        months[month] = _seed_month(months, month, direction, seed_defaults)

    sync_credit_card_items(months[month], accounts)
    _recompute_month(months, accounts, month)
    return refresh_ready_to_assign(months, accounts)


def refresh_months(
    month_map: MonthMap, accounts: List[Account], start: Optional[str] = None
) -> MonthMap:
    """Recompute every month from ``start`` onwards (all months if None), oldest first.

    Used after anything that can ripple forward: a transaction edit, or an
    assignment change in a past month.
    """
    months = copy.deepcopy(month_map)
    for token in sorted(months):
        if start is not None and token < start:
            continue
        sync_credit_card_items(months[token], accounts)
        _recompute_month(months, accounts, token)
    return refresh_ready_to_assign(months, accounts)


def set_assigned(
    month_map: MonthMap,
    accounts: List[Account],
    month: str,
    item_key: str,
    amount,
) -> MonthMap:
    """Set the amount assigned to an item in ``month``.

    Non-numeric amounts resolve to zero. The month and every later month are
    recomputed so that carryover and Ready to Assign stay consistent.

    Raises:
        CategoryNotFoundError: If the month or item does not exist.
    """
    month = month_token(month)
    if month not in month_map or month_map[month].find_item(item_key) is None:
        raise CategoryNotFoundError(f"Category item {item_key} not found in {month}")

    months = copy.deepcopy(month_map)
    months[month].find_item(item_key).assigned = to_money(amount)
    return refresh_months(months, accounts, start=month)


def changed_months(before: MonthMap, after: MonthMap) -> List[str]:
    """Months in ``after`` whose record differs from ``before`` (or is new)."""
    return [
        token
        for token in sorted(after)
        if token not in before or before[token].to_dict() != after[token].to_dict()
    ]


