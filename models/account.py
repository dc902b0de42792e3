from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from models.transaction import Transaction

CASH = "cash"
CREDIT = "credit"
ACCOUNT_KINDS = (CASH, CREDIT)

# Older records call cash accounts "debit"
_KIND_ALIASES = {"debit": CASH}


def normalize_kind(kind: str) -> str:
    """Map a stored account kind to one of ACCOUNT_KINDS.

    Raises:
        ValueError: If the kind is not recognised.
    """
    value = (kind or "").strip().lower()
    value = _KIND_ALIASES.get(value, value)
    if value not in ACCOUNT_KINDS:
        raise ValueError(
            f"Invalid account kind '{kind}'. Must be one of: {', '.join(ACCOUNT_KINDS)}"
        )
    return value


@dataclass
class Account:
    id: int
    name: str  # also the category name used for transfers and card payments
    kind: str  # "cash" or "credit"
    description: str = ""
    transactions: List[Transaction] = field(default_factory=list)

    @property
    def is_credit(self) -> bool:
        return self.kind == CREDIT

    @property
    def is_cash(self) -> bool:
        return self.kind == CASH

    @property
    def balance(self) -> Decimal:
        """Derived balance: sum of the signed transaction amounts."""
        return sum((t.amount for t in self.transactions), Decimal("0"))

    def to_dict(self) -> dict:
        """Convert account to dictionary for database storage."""
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind,
            "description": self.description,
        }
