"""Category lifecycle: adding, renaming, deleting and merging categories.

Every operation here touches all months at once, and renames and merges also
re-tag the transactions that reference the category by name. Preconditions are
checked before anything is copied or changed, so a rejected call leaves the
budget exactly as it was.
"""

import copy
from dataclasses import dataclass
from typing import List, Optional, Set

from models.account import Account
from models.budget import (
    CREDIT_CARD_PAYMENTS,
    READY_TO_ASSIGN,
    CategoryGroup,
    CategoryItem,
    MonthMap,
)
from ledger.errors import (
    CategoryNotFoundError,
    DuplicateCategoryError,
    ProtectedCategoryError,
    UnsafeDeletionError,
)
from ledger.transitions import refresh_months
from logger import get_logger

logger = get_logger()


@dataclass
class ItemContext:
    """Identifies a category item the way the user sees it."""

    group_name: str
    item_name: str


@dataclass
class LedgerUpdate:
    """Result of an operation that changes both the budget and the transactions."""

    months: MonthMap
    accounts: List[Account]


def _item_ids_named(month_map: MonthMap, name: str) -> Set[str]:
    return {
        item.id
        for budget_month in month_map.values()
        for _, item in budget_month.iter_items()
        if item.name == name
    }


def _group_exists(month_map: MonthMap, name: str) -> bool:
    return any(m.find_group(name) is not None for m in month_map.values())


def _check_name_is_free(accounts: List[Account], name: str) -> None:
    """Reject item names that transactions already use for routing money."""
    if name == READY_TO_ASSIGN:
        raise ProtectedCategoryError(f"'{READY_TO_ASSIGN}' is reserved for income")
    if any(account.name == name for account in accounts):
        raise DuplicateCategoryError(
            f"'{name}' is an account name and would read as a transfer"
        )


def _find_context(month_map: MonthMap, context: ItemContext) -> str:
    """Resolve a (group, item) context to the item's id."""
    for token in sorted(month_map, reverse=True):
        group = month_map[token].find_group(context.group_name)
        item = group.find_item(context.item_name) if group else None
        if item is not None:
            return item.id
    raise CategoryNotFoundError(
        f"Category '{context.item_name}' not found in group '{context.group_name}'"
    )


def add_group(month_map: MonthMap, month: str, group_name: str) -> MonthMap:
    """Add an empty category group to ``month``.

    Other months pick the group up the next time they are visited.

    Raises:
        CategoryNotFoundError: If the month does not exist.
        DuplicateCategoryError: If the group already exists.
    """
    group_name = (group_name or "").strip()
    if not group_name:
        raise ValueError("Group name cannot be empty")
    if month not in month_map:
        raise CategoryNotFoundError(f"Month {month} not found")
    if _group_exists(month_map, group_name):
        raise DuplicateCategoryError(f"Group '{group_name}' already exists")

    months = copy.deepcopy(month_map)
    months[month].groups.append(CategoryGroup(name=group_name))
    logger.debug(f"Added group '{group_name}' to {month}")
    return months


def add_item(
    month_map: MonthMap,
    accounts: List[Account],
    month: str,
    group_name: str,
    item_name: str,
) -> MonthMap:
    """Add a new, empty category item to a group in ``month``.

    Item names must be unique across the whole budget and must not clash with
    an account name or Ready to Assign, because transactions reference
    categories by name.

    Raises:
        CategoryNotFoundError: If the month or group does not exist.
        DuplicateCategoryError: If the name is used by another item or an account.
        ProtectedCategoryError: If the group is Credit Card Payments, or the
            name is Ready to Assign.
    """
    item_name = (item_name or "").strip()
    if not item_name:
        raise ValueError("Category name cannot be empty")
    if group_name == CREDIT_CARD_PAYMENTS:
        raise ProtectedCategoryError("Credit card payment items are managed automatically")
    if month not in month_map or month_map[month].find_group(group_name) is None:
        raise CategoryNotFoundError(f"Group '{group_name}' not found in {month}")
    if _item_ids_named(month_map, item_name):
        raise DuplicateCategoryError(f"Category '{item_name}' already exists")
    _check_name_is_free(accounts, item_name)

    months = copy.deepcopy(month_map)
    months[month].find_group(group_name).items.append(CategoryItem(name=item_name))
    logger.debug(f"Added category '{item_name}' to '{group_name}' in {month}")
    return months


def rename_item(
    month_map: MonthMap, accounts: List[Account], old_name: str, new_name: str
) -> LedgerUpdate:
    """Rename a category item in every month and re-tag its transactions.

    Raises:
        CategoryNotFoundError: If no item is called ``old_name``.
        DuplicateCategoryError: If ``new_name`` is used by another item or an account.
        ProtectedCategoryError: If the item is a credit card payment item, or
            ``new_name`` is Ready to Assign.
    """
    new_name = (new_name or "").strip()
    if not new_name:
        raise ValueError("Category name cannot be empty")
    ids = _item_ids_named(month_map, old_name)
    if not ids:
        raise CategoryNotFoundError(f"Category '{old_name}' not found")
    if new_name != old_name and _item_ids_named(month_map, new_name):
        raise DuplicateCategoryError(f"Category '{new_name}' already exists")
    _check_name_is_free(accounts, new_name)
    for budget_month in month_map.values():
        for group, item in budget_month.iter_items():
            if item.id in ids and group.is_credit_card_payments:
                raise ProtectedCategoryError(
                    "Credit card payment items follow their account's name"
                )

    months = copy.deepcopy(month_map)
    for budget_month in months.values():
        for _, item in budget_month.iter_items():
            if item.id in ids:
                item.name = new_name

    accounts = copy.deepcopy(accounts)
    retagged = 0
    for account in accounts:
        for transaction in account.transactions:
            if transaction.category == old_name:
                transaction.category = new_name
                retagged += 1

    logger.info(
        f"Renamed category '{old_name}' to '{new_name}' ({retagged} transaction(s) re-tagged)"
    )
    return LedgerUpdate(months=months, accounts=accounts)


def rename_group(
    month_map: MonthMap, accounts: List[Account], old_name: str, new_name: str
) -> LedgerUpdate:
    """Rename a category group in every month and on every transaction.

    Raises:
        CategoryNotFoundError: If the group does not exist.
        DuplicateCategoryError: If ``new_name`` is already a group.
        ProtectedCategoryError: If either name is Credit Card Payments.
    """
    new_name = (new_name or "").strip()
    if not new_name:
        raise ValueError("Group name cannot be empty")
    if CREDIT_CARD_PAYMENTS in (old_name, new_name):
        raise ProtectedCategoryError(f"'{CREDIT_CARD_PAYMENTS}' cannot be renamed")
    if not _group_exists(month_map, old_name):
        raise CategoryNotFoundError(f"Group '{old_name}' not found")
    if new_name != old_name and _group_exists(month_map, new_name):
        raise DuplicateCategoryError(f"Group '{new_name}' already exists")

    months = copy.deepcopy(month_map)
    for budget_month in months.values():
        group = budget_month.find_group(old_name)
        if group is not None:
            group.name = new_name

    accounts = copy.deepcopy(accounts)
    for account in accounts:
        for transaction in account.transactions:
            if transaction.category_group == old_name:
                transaction.category_group = new_name

    logger.info(f"Renamed group '{old_name}' to '{new_name}'")
    return LedgerUpdate(months=months, accounts=accounts)


def item_has_balance(
    month_map: MonthMap, accounts: List[Account], item_name: str
) -> bool:
    """True if deleting the item outright would lose money or orphan transactions."""
    ids = _item_ids_named(month_map, item_name)
    for budget_month in month_map.values():
        for _, item in budget_month.iter_items():
            if item.id in ids and (
                item.assigned != 0 or item.activity != 0 or item.available != 0
            ):
                return True
    return any(
        t.category == item_name for account in accounts for t in account.transactions
    )


def delete_item(
    month_map: MonthMap,
    accounts: List[Account],
    context: ItemContext,
    reassign_to: Optional[str] = None,
) -> LedgerUpdate:
    """Delete a category item from every month.

    An item holding money (or referenced by transactions) must be merged into
    ``reassign_to``: its assigned and activity are added to the target item
    month by month and its transactions are re-tagged to the target. Every
    month is then recomputed, credit card payment items included. All of this
    happens on copies, so the caller sees either the whole change or an
    exception.

    Args:
        month_map: The budget.
        accounts: All accounts with transactions.
        context: Group and name of the item to delete.
        reassign_to: Name of the item that receives the deleted item's money.

    Returns:
        LedgerUpdate with the new budget and accounts.

    Raises:
        CategoryNotFoundError: If the item or the reassignment target is missing.
        ProtectedCategoryError: If either item is a credit card payment item.
        UnsafeDeletionError: If the item holds money and no target was given.
    """
    if context.group_name == CREDIT_CARD_PAYMENTS:
        raise ProtectedCategoryError("Credit card payment items are managed automatically")
    source_id = _find_context(month_map, context)

    target_id = None
    target_name = target_group = None
    if reassign_to is not None:
        if reassign_to == context.item_name:
            raise ValueError("Cannot reassign a category to itself")
        for token in sorted(month_map, reverse=True):
            budget_month = month_map[token]
            found = budget_month.find_item_by_name(reassign_to)
            if found is not None:
                target_group = budget_month.group_of(found.id).name
                target_id, target_name = found.id, found.name
                break
        if target_id is None:
            raise CategoryNotFoundError(f"Category '{reassign_to}' not found")
        if target_group == CREDIT_CARD_PAYMENTS:
            raise ProtectedCategoryError("Cannot reassign money to a credit card payment item")
    elif item_has_balance(month_map, accounts, context.item_name):
        raise UnsafeDeletionError(
            f"Category '{context.item_name}' still holds money or has transactions; "
            "choose a category to reassign it to"
        )

    months = copy.deepcopy(month_map)
    for token in sorted(months):
        budget_month = months[token]
        source = budget_month.find_item(source_id)
        if source is None:
            continue
        if target_id is not None and (source.assigned != 0 or source.activity != 0):
            target = budget_month.find_item(target_id)
            if target is None:
                group = budget_month.find_group(target_group)
                if group is None:
                    group = CategoryGroup(name=target_group)
                    budget_month.groups.append(group)
                target = CategoryItem(name=target_name, id=target_id)
                group.items.append(target)
            target.assigned += source.assigned
            target.activity += source.activity
        for group in budget_month.groups:
            group.items = [item for item in group.items if item.id != source_id]

    accounts = copy.deepcopy(accounts)
    retagged = 0
    if target_id is not None:
        for account in accounts:
            for transaction in account.transactions:
                if transaction.category == context.item_name:
                    transaction.category = target_name
                    transaction.category_group = target_group
                    retagged += 1

    if target_id is None:
        logger.info(f"Deleted category '{context.item_name}'")
    else:
        logger.info(
            f"Deleted category '{context.item_name}', merged into '{target_name}' "
            f"({retagged} transaction(s) re-tagged)"
        )
    return LedgerUpdate(months=refresh_months(months, accounts), accounts=accounts)


def delete_group(month_map: MonthMap, group_name: str) -> MonthMap:
    """Delete a category group from every month. Only empty groups can be deleted.

    Raises:
        CategoryNotFoundError: If the group does not exist.
        ProtectedCategoryError: If the group is Credit Card Payments.
        UnsafeDeletionError: If the group still has items in any month.
    """
    if group_name == CREDIT_CARD_PAYMENTS:
        raise ProtectedCategoryError(f"'{CREDIT_CARD_PAYMENTS}' cannot be deleted")
    if not _group_exists(month_map, group_name):
        raise CategoryNotFoundError(f"Group '{group_name}' not found")
    for budget_month in month_map.values():
        group = budget_month.find_group(group_name)
        if group is not None and group.items:
            raise UnsafeDeletionError(
                f"Group '{group_name}' still has categories in {budget_month.month}"
            )

    months = copy.deepcopy(month_map)
    for budget_month in months.values():
        budget_month.groups = [g for g in budget_month.groups if g.name != group_name]
    logger.info(f"Deleted group '{group_name}'")
    return months
