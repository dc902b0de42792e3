"""Envelope budgeting engine.

Pure functions over a snapshot of the ledger: a ``MonthMap`` and the list of
accounts with their transactions. Nothing here reads or writes storage.
"""

from ledger.activity import activity_for_category
from ledger.carryover import cumulative_available
from ledger.categories import (
    ItemContext,
    LedgerUpdate,
    add_group,
    add_item,
    delete_group,
    delete_item,
    rename_group,
    rename_item,
)
from ledger.credit import credit_card_activity
from ledger.ready_to_assign import ready_to_assign
from ledger.targets import evaluate_target, set_target
from ledger.transitions import compute_month, refresh_months, set_assigned

__all__ = [
    "ItemContext",
    "LedgerUpdate",
    "activity_for_category",
    "add_group",
    "add_item",
    "compute_month",
    "credit_card_activity",
    "cumulative_available",
    "delete_group",
    "delete_item",
    "evaluate_target",
    "ready_to_assign",
    "refresh_months",
    "rename_group",
    "rename_item",
    "set_assigned",
    "set_target",
]
