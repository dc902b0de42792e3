"""Budget month service for database operations.

Each month is stored as one row keyed by its "YYYY-MM" token, with the
category tree serialised as JSON.
"""

import json
from typing import Iterable, Optional
from models.budget import BudgetMonth, MonthMap


def _row_to_month(row) -> BudgetMonth:
    data = json.loads(row[1])
    data["month"] = row[0]
    return BudgetMonth.from_dict(data)


class BudgetMonthService:
    """Service for loading and saving budget months."""

    def __init__(self, db_manager):
        """Initialize the budget month service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> MonthMap:
        """Get every stored month.

        Returns:
            Dict of month token to BudgetMonth.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("SELECT month, data FROM budget_months ORDER BY month")
            return {row[0]: _row_to_month(row) for row in cursor.fetchall()}

    def find(self, month: str) -> Optional[BudgetMonth]:
        """Get a single month by token.

        Returns:
            BudgetMonth if stored, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT month, data FROM budget_months WHERE month = ?", (month,)
            )
            row = cursor.fetchone()
            return _row_to_month(row) if row else None

    def save(self, budget_month: BudgetMonth) -> BudgetMonth:
        """Insert or replace a month."""
        self.save_all([budget_month])
        return budget_month

    def save_all(self, budget_months: Iterable[BudgetMonth], conn=None) -> int:
        """Insert or replace several months.

        Args:
            budget_months: Months to write.
            conn: Optional open connection; when given the caller commits.

        Returns:
            Number of months written.
        """
        data = [
            (
                m.month,
                json.dumps(m.to_dict()),
                float(m.assignable_money),
                float(m.ready_to_assign),
            )
            for m in budget_months
        ]
        if not data:
            return 0

        sql = """
            INSERT INTO budget_months (month, data, assignable_money, ready_to_assign)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(month) DO UPDATE SET
                data = excluded.data,
                assignable_money = excluded.assignable_money,
                ready_to_assign = excluded.ready_to_assign,
                updated_at = CURRENT_TIMESTAMP
        """

        if conn is not None:
            conn.executemany(sql, data)
            return len(data)

        with self.db_manager.connect() as conn:
            conn.executemany(sql, data)
            conn.commit()
            return len(data)
