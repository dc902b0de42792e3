"""Budget models: months, category groups, category items and targets.

A budget is a ``MonthMap``: a dict of ``YYYY-MM`` tokens to ``BudgetMonth``.
Tokens sort lexicographically in calendar order, so ``sorted(month_map)`` is
the chronological order of the ledger.
"""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterator, List, Optional, Tuple

from money import ZERO, to_money

READY_TO_ASSIGN = "Ready to Assign"
CREDIT_CARD_PAYMENTS = "Credit Card Payments"

MONTHLY = "Monthly"
WEEKLY = "Weekly"
CUSTOM = "Custom"
FULL_PAYOFF = "Full Payoff"
TARGET_TYPES = (MONTHLY, WEEKLY, CUSTOM, FULL_PAYOFF)
DATED_TARGET_TYPES = (CUSTOM, FULL_PAYOFF)

_TARGET_TYPE_LOOKUP = {t.lower().replace(" ", ""): t for t in TARGET_TYPES}


def normalize_target_type(value: str) -> str:
    """Map stored spellings ("monthly", "FullPayoff", ...) to a TARGET_TYPES value.

    Raises:
        ValueError: If the value is not a known target type.
    """
    key = (value or "").strip().lower().replace(" ", "").replace("_", "")
    if key not in _TARGET_TYPE_LOOKUP:
        raise ValueError(f"Unknown target type: {value}")
    return _TARGET_TYPE_LOOKUP[key]


def new_item_id() -> str:
    """Generate a stable identifier for a new category item."""
    return uuid.uuid4().hex


@dataclass
class Target:
    """A funding goal attached to a category item.

    Attributes:
        type: One of TARGET_TYPES.
        amount: Goal principal (per month, per week, or total by target_date).
        target_date: "YYYY-MM" or "YYYY-MM-DD" for Custom and Full Payoff targets.
        amount_needed: Derived amount to assign this month to stay on pace.
    """

    type: str
    amount: Decimal
    target_date: Optional[str] = None
    amount_needed: Decimal = ZERO

    @property
    def is_dated(self) -> bool:
        return self.type in DATED_TARGET_TYPES

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "amount": str(self.amount),
            "targetDate": self.target_date,
            "amountNeeded": str(self.amount_needed),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["Target"]:
        if not data:
            return None
        return cls(
            type=normalize_target_type(data.get("type")),
            amount=to_money(data.get("amount")),
            target_date=data.get("targetDate") or data.get("target_date"),
            amount_needed=to_money(
                data.get("amountNeeded", data.get("amount_needed"))
            ),
        )


@dataclass
class CategoryItem:
    """A single budget category ("envelope") within a month.

    ``id`` is stable across months and survives renames; ``name`` is what
    transactions are tagged with.
    """

    name: str
    assigned: Decimal = ZERO
    activity: Decimal = ZERO
    available: Decimal = ZERO
    target: Optional[Target] = None
    id: str = field(default_factory=new_item_id)

    def zeroed(self, keep_target: bool = False) -> "CategoryItem":
        """Copy of this item with every figure reset to zero."""
        return CategoryItem(
            name=self.name,
            id=self.id,
            target=_copy_target(self.target) if keep_target else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "assigned": str(self.assigned),
            "activity": str(self.activity),
            "available": str(self.available),
            "target": self.target.to_dict() if self.target else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CategoryItem":
        return cls(
            name=data["name"],
            # Records written before ids existed correlate by name
            id=data.get("id") or data["name"],
            assigned=to_money(data.get("assigned")),
            activity=to_money(data.get("activity")),
            available=to_money(data.get("available")),
            target=Target.from_dict(data.get("target")),
        )


@dataclass
class CategoryGroup:
    name: str
    items: List[CategoryItem] = field(default_factory=list)

    @property
    def is_credit_card_payments(self) -> bool:
        return self.name == CREDIT_CARD_PAYMENTS

    def find_item(self, name: str) -> Optional[CategoryItem]:
        return next((item for item in self.items if item.name == name), None)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "categoryItems": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CategoryGroup":
        items = data.get("categoryItems", data.get("items")) or []
        return cls(
            name=data["name"],
            items=[CategoryItem.from_dict(item) for item in items],
        )


@dataclass
class BudgetMonth:
    """One month of the budget.

    Attributes:
        month: "YYYY-MM" token.
        groups: Ordered category groups.
        assignable_money: Cached qualifying inflow received in this month.
        ready_to_assign: Cached global unallocated money as of this month.
    """

    month: str
    groups: List[CategoryGroup] = field(default_factory=list)
    assignable_money: Decimal = ZERO
    ready_to_assign: Decimal = ZERO

    def iter_items(self) -> Iterator[Tuple[CategoryGroup, CategoryItem]]:
        """Yield (group, item) pairs in display order."""
        for group in self.groups:
            for item in group.items:
                yield group, item

    def find_group(self, name: str) -> Optional[CategoryGroup]:
        return next((g for g in self.groups if g.name == name), None)

    def find_item(self, item_id: str) -> Optional[CategoryItem]:
        return next((i for _, i in self.iter_items() if i.id == item_id), None)

    def find_item_by_name(self, name: str) -> Optional[CategoryItem]:
        return next((i for _, i in self.iter_items() if i.name == name), None)

    def group_of(self, item_id: str) -> Optional[CategoryGroup]:
        return next((g for g, i in self.iter_items() if i.id == item_id), None)

    def item_ids(self) -> set:
        return {item.id for _, item in self.iter_items()}

    def total_assigned(self) -> Decimal:
        return sum((item.assigned for _, item in self.iter_items()), ZERO)

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "categories": [group.to_dict() for group in self.groups],
            "assignable_money": str(self.assignable_money),
            "ready_to_assign": str(self.ready_to_assign),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BudgetMonth":
        groups = data.get("categories", data.get("groups")) or []
        return cls(
            month=data["month"],
            groups=[CategoryGroup.from_dict(group) for group in groups],
            assignable_money=to_money(data.get("assignable_money")),
            ready_to_assign=to_money(data.get("ready_to_assign")),
        )


MonthMap = Dict[str, BudgetMonth]


def _copy_target(target: Optional[Target]) -> Optional[Target]:
    if target is None:
        return None
    return Target(
        type=target.type,
        amount=target.amount,
        target_date=target.target_date,
        amount_needed=target.amount_needed,
    )
