"""Account service for database operations."""

from typing import List, Optional
from models.account import Account, normalize_kind
from services.transactions import TransactionService


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db_manager):
        """Initialize the account service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Account]:
        """Get all accounts from the database, without transactions.

        Returns:
            List of Account objects, ordered by id.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, kind, description FROM accounts ORDER BY id"
            )
            rows = cursor.fetchall()

            return [
                Account(id=row[0], name=row[1], kind=row[2], description=row[3])
                for row in rows
            ]

    def find(self, account_id: int) -> Optional[Account]:
        """Get a single account by ID.

        Args:
            account_id: The account ID to find.

        Returns:
            Account object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, kind, description FROM accounts WHERE id = ?",
                (account_id,),
            )
            row = cursor.fetchone()

            if row:
                return Account(id=row[0], name=row[1], kind=row[2], description=row[3])
            return None

    def find_by_name(self, name: str) -> Optional[Account]:
        """Get a single account by name.

        Args:
            name: The account name to find.

        Returns:
            Account object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, kind, description FROM accounts WHERE name = ?",
                (name,),
            )
            row = cursor.fetchone()

            if row:
                return Account(id=row[0], name=row[1], kind=row[2], description=row[3])
            return None

    def create(self, name: str, kind: str, description: str = "") -> Account:
        """Create a new account.

        Args:
            name: Account name (unique). Also used as the category of transfers
                and card payments into this account.
            kind: "cash" or "credit" ("debit" is accepted for cash).
            description: Optional human readable description.

        Returns:
            The created Account object with id populated.

        Raises:
            ValueError: If the kind is not recognised.
            sqlite3.IntegrityError: If the name is already taken.
        """
        kind = normalize_kind(kind)
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO accounts (name, kind, description) VALUES (?, ?, ?)",
                (name, kind, description or ""),
            )
            conn.commit()

            return Account(
                id=cursor.lastrowid,
                name=name,
                kind=kind,
                description=description or "",
            )

    def delete(self, account_id: int) -> bool:
        """Delete an account and its transactions.

        Args:
            account_id: The account ID to delete.

        Returns:
            True if the account was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            conn.execute("DELETE FROM transactions WHERE account_id = ?", (account_id,))
            cursor = conn.execute("DELETE FROM accounts WHERE id = ?", (account_id,))
            conn.commit()
            return cursor.rowcount > 0

    def load_ledger(self) -> List[Account]:
        """Get every account with its transactions attached.

        This is the read-only snapshot the budgeting engine works from.

        Returns:
            List of Account objects ordered by id, transactions ordered by date.
        """
        accounts = self.find_all()
        transactions = TransactionService(self.db_manager).find_all()

        by_account = {account.id: account for account in accounts}
        for transaction in transactions:
            account = by_account.get(transaction.account_id)
            if account is not None:
                account.transactions.append(transaction)

        return accounts
