"""Budget service: runs the budgeting engine against the stored ledger.

Every operation loads a fresh snapshot (months plus accounts with their
transactions), hands it to the pure functions in ``ledger``, and writes back
only the months and transactions that changed, in a single commit.
"""

from decimal import Decimal
from typing import List, Optional, Tuple

import ledger
from ledger.categories import ItemContext
from ledger.errors import CategoryNotFoundError
from ledger.months import FORWARD, month_token
from ledger.transitions import changed_months
from models.account import Account
from models.budget import BudgetMonth, MonthMap, Target
from services.accounts import AccountService
from services.budget_months import BudgetMonthService
from services.transactions import TransactionService
from logger import get_logger

logger = get_logger()


def _retagged_transactions(before: List[Account], after: List[Account]):
    """Transactions whose category or group differs between two snapshots."""
    old = {
        t.id: (t.category, t.category_group)
        for account in before
        for t in account.transactions
    }
    return [
        t
        for account in after
        for t in account.transactions
        if old.get(t.id) != (t.category, t.category_group)
    ]


class BudgetService:
    """Service for budget operations."""

    def __init__(self, db_manager, seed_default_categories: bool = True):
        """Initialize the budget service.

        Args:
            db_manager: Database manager instance for database operations.
            seed_default_categories: Whether a brand new budget starts with the
                default category groups.
        """
        self.db_manager = db_manager
        self.seed_default_categories = seed_default_categories
        self.accounts = AccountService(db_manager)
        self.transactions = TransactionService(db_manager)
        self.months = BudgetMonthService(db_manager)

    def snapshot(self) -> Tuple[MonthMap, List[Account]]:
        """Load the current months and accounts."""
        return self.months.find_all(), self.accounts.load_ledger()

    def open_month(self, month: str, direction: str = FORWARD) -> BudgetMonth:
        """Navigate to a month, creating or patching it as needed.

        Args:
            month: "YYYY-MM" token.
            direction: "forward" or "backward".

        Returns:
            The recomputed month.
        """
        month = month_token(month)
        months, accounts = self.snapshot()
        updated = ledger.compute_month(
            months,
            accounts,
            month,
            direction,
            seed_defaults=self.seed_default_categories,
        )
        self._persist(months, updated)
        return updated[month]

    def refresh(self) -> MonthMap:
        """Recompute every month, e.g. after transactions were added or edited."""
        months, accounts = self.snapshot()
        updated = ledger.refresh_months(months, accounts)
        self._persist(months, updated)
        return updated

    def ready_to_assign(self, month: str) -> Decimal:
        months, accounts = self.snapshot()
        return ledger.ready_to_assign(months, accounts, month_token(month))

    def assign(self, month: str, item_name: str, amount) -> BudgetMonth:
        """Set the amount assigned to a category in a month.

        Raises:
            CategoryNotFoundError: If the month or category does not exist.
        """
        month = month_token(month)
        months, accounts = self.snapshot()
        item_id = self._resolve_item(months, month, item_name)
        updated = ledger.set_assigned(months, accounts, month, item_id, amount)
        self._persist(months, updated)
        assigned = updated[month].find_item(item_id).assigned
        logger.info(f"Assigned {assigned} to '{item_name}' in {month}")
        return updated[month]

    def set_target(
        self, month: str, item_name: str, target: Optional[Target]
    ) -> BudgetMonth:
        """Set (or clear, with None) a category's target from ``month`` onwards."""
        month = month_token(month)
        months, _ = self.snapshot()
        item_id = self._resolve_item(months, month, item_name)
        updated = ledger.set_target(months, month, item_id, target)
        self._persist(months, updated)
        return updated[month]

    def add_group(self, month: str, group_name: str) -> BudgetMonth:
        month = month_token(month)
        months, _ = self.snapshot()
        updated = ledger.add_group(months, month, group_name)
        self._persist(months, updated)
        return updated[month]

    def add_item(self, month: str, group_name: str, item_name: str) -> BudgetMonth:
        month = month_token(month)
        months, accounts = self.snapshot()
        updated = ledger.add_item(months, accounts, month, group_name, item_name)
        self._persist(months, updated)
        return updated[month]

    def rename_item(self, old_name: str, new_name: str) -> MonthMap:
        months, accounts = self.snapshot()
        result = ledger.rename_item(months, accounts, old_name, new_name)
        self._persist(months, result.months, accounts, result.accounts)
        return result.months

    def rename_group(self, old_name: str, new_name: str) -> MonthMap:
        months, accounts = self.snapshot()
        result = ledger.rename_group(months, accounts, old_name, new_name)
        self._persist(months, result.months, accounts, result.accounts)
        return result.months

    def delete_item(
        self, group_name: str, item_name: str, reassign_to: Optional[str] = None
    ) -> MonthMap:
        """Delete a category everywhere, merging its money into ``reassign_to``.

        Raises:
            UnsafeDeletionError: If the category holds money and no target is given.
        """
        months, accounts = self.snapshot()
        result = ledger.delete_item(
            months, accounts, ItemContext(group_name, item_name), reassign_to
        )
        self._persist(months, result.months, accounts, result.accounts)
        return result.months

    def delete_group(self, group_name: str) -> MonthMap:
        months, _ = self.snapshot()
        updated = ledger.delete_group(months, group_name)
        self._persist(months, updated)
        return updated

    def _resolve_item(self, months: MonthMap, month: str, item_name: str) -> str:
        budget_month = months.get(month)
        item = budget_month.find_item_by_name(item_name) if budget_month else None
        if item is None:
            raise CategoryNotFoundError(f"Category '{item_name}' not found in {month}")
        return item.id

    def _persist(
        self,
        before: MonthMap,
        after: MonthMap,
        accounts_before: Optional[List[Account]] = None,
        accounts_after: Optional[List[Account]] = None,
    ) -> None:
        """Write changed months (and re-tagged transactions) in one commit.

        Months present in ``before`` but missing from ``after`` never happen:
        the engine only ever adds months.
        """
        months = [after[token] for token in changed_months(before, after)]
        transactions = []
        if accounts_before is not None and accounts_after is not None:
            transactions = _retagged_transactions(accounts_before, accounts_after)

        if not months and not transactions:
            return

        with self.db_manager.transaction() as conn:
            self.transactions.batch_update(
                transactions, ["category", "category_group"], conn=conn
            )
            self.months.save_all(months, conn=conn)

        logger.debug(
            f"Saved {len(months)} month(s) and {len(transactions)} transaction(s)"
        )
