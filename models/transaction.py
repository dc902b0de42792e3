from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass
class Transaction:
    id: Optional[int]
    account_id: Optional[int]
    date: Optional[date]  # None when the stored row had no usable date
    payee: str
    category: str  # category item name, an account name, or "Ready to Assign"
    category_group: str
    amount: Decimal  # signed, negative = outflow

    @property
    def month(self) -> Optional[str]:
        """The YYYY-MM token of the transaction date, or None if undated."""
        if self.date is None:
            return None
        return self.date.strftime("%Y-%m")

    @property
    def is_outflow(self) -> bool:
        return self.amount < 0

    def to_dict(self) -> dict:
        """Convert transaction to dictionary for database storage."""
        return {
            "id": self.id,
            "account_id": self.account_id,
            "transaction_date": self.date.isoformat() if self.date else None,
            "payee": self.payee,
            "category": self.category,
            "category_group": self.category_group,
            "amount": float(self.amount),
        }
