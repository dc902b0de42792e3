"""Transaction service for database operations."""

from typing import List, Optional
from datetime import date
from decimal import Decimal
from models.transaction import Transaction
from logger import get_logger

logger = get_logger()

# SQL Query Constants
_TRANSACTION_SELECT_FIELDS = (
    "id, account_id, transaction_date, payee, category, category_group, amount"
)

_UPDATABLE_FIELDS = {
    "transaction_date": lambda t: t.date.isoformat() if t.date else None,
    "payee": lambda t: t.payee,
    "category": lambda t: t.category,
    "category_group": lambda t: t.category_group,
    "amount": lambda t: float(t.amount),
}


def _parse_date(value: Optional[str], transaction_id) -> Optional[date]:
    """Parse a stored ISO date, returning None (with a warning) if it is unusable."""
    if not value:
        logger.warning(f"Transaction {transaction_id} has no date")
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        logger.warning(f"Transaction {transaction_id} has an invalid date: {value!r}")
        return None


def _row_to_transaction(row) -> Transaction:
    return Transaction(
        id=row[0],
        account_id=row[1],
        date=_parse_date(row[2], row[0]),
        payee=row[3],
        category=row[4],
        category_group=row[5],
        amount=Decimal(str(row[6])),
    )


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db_manager):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(self, transaction: Transaction) -> Transaction:
        """Create a single transaction in the database.

        Args:
            transaction: Transaction object to insert; its id is ignored.

        Returns:
            The Transaction with its id populated.

        Raises:
            sqlite3.IntegrityError: If the account does not exist.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO transactions
                    (account_id, transaction_date, payee, category, category_group, amount)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    transaction.account_id,
                    transaction.date.isoformat() if transaction.date else None,
                    transaction.payee,
                    transaction.category,
                    transaction.category_group,
                    float(transaction.amount),
                ),
            )
            conn.commit()
            transaction.id = cursor.lastrowid

        return transaction

    def update(self, transaction: Transaction) -> bool:
        """Update every editable field of a transaction.

        Args:
            transaction: Transaction with id set.

        Returns:
            True if a row was updated, False if the id was not found.
        """
        return self.batch_update([transaction], list(_UPDATABLE_FIELDS)) > 0

    def batch_update(
        self, transactions: List[Transaction], field_names: List[str], conn=None
    ) -> int:
        """Update specified fields for multiple transactions.

        Args:
            transactions: List of Transaction objects to update.
            field_names: Fields to write. Supported fields: 'transaction_date',
                        'payee', 'category', 'category_group', 'amount'.
            conn: Optional open connection; when given the caller commits.

        Returns:
            Number of transactions updated.

        Raises:
            ValueError: If an unsupported field name is given.
        """
        if not transactions:
            return 0

        unknown = [name for name in field_names if name not in _UPDATABLE_FIELDS]
        if unknown:
            raise ValueError(f"Unsupported field(s): {', '.join(unknown)}")

        assignments = ", ".join(f"{name} = ?" for name in field_names)
        data = [
            tuple(_UPDATABLE_FIELDS[name](t) for name in field_names) + (t.id,)
            for t in transactions
        ]
        sql = f"UPDATE transactions SET {assignments} WHERE id = ?"

        if conn is not None:
            cursor = conn.executemany(sql, data)
            return cursor.rowcount

        with self.db_manager.connect() as conn:
            cursor = conn.executemany(sql, data)
            conn.commit()
            return cursor.rowcount

    def delete(self, transaction_id: int) -> bool:
        """Delete a transaction by ID.

        Returns:
            True if the transaction was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ?", (transaction_id,)
            )
            conn.commit()
            return cursor.rowcount > 0

    def find(self, transaction_id: int) -> Optional[Transaction]:
        """Get a single transaction by ID.

        Returns:
            Transaction object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_TRANSACTION_SELECT_FIELDS} FROM transactions WHERE id = ?",
                (transaction_id,),
            )
            row = cursor.fetchone()

            return _row_to_transaction(row) if row else None

    def find_by_account(self, account_id: int) -> List[Transaction]:
        """Get all transactions for an account, oldest first.

        Args:
            account_id: The account ID.

        Returns:
            List of Transaction objects.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRANSACTION_SELECT_FIELDS} FROM transactions
                WHERE account_id = ?
                ORDER BY transaction_date, id
                """,
                (account_id,),
            )
            return [_row_to_transaction(row) for row in cursor.fetchall()]

    def find_all(self) -> List[Transaction]:
        """Get every transaction, oldest first."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRANSACTION_SELECT_FIELDS} FROM transactions
                ORDER BY transaction_date, id
                """
            )
            return [_row_to_transaction(row) for row in cursor.fetchall()]
