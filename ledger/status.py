"""Funding status of category items, for the "items to address" summary."""

from dataclasses import dataclass, field
from typing import List, Optional

from models.budget import BudgetMonth, CategoryItem
from money import format_usd

OVERSPENT = "overspent"
FUNDED = "funded"
OVERFUNDED = "overfunded"
UNDERFUNDED = "underfunded"
PARTIAL = "partial"


@dataclass
class TargetStatus:
    kind: Optional[str]
    message: str = ""


@dataclass
class ItemsToAddress:
    overspent: List[str] = field(default_factory=list)
    underfunded: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.overspent and not self.underfunded


def target_status(item: CategoryItem) -> TargetStatus:
    """Describe how well an item is funded against its target.

    Overspending is reported even for items without a target.
    """
    assigned = item.assigned
    spent = abs(item.activity)
    available = item.available

    if available < 0 and assigned < spent:
        return TargetStatus(
            OVERSPENT, f"Overspent {format_usd(-available)} of {format_usd(assigned)}"
        )

    if item.target is None:
        return TargetStatus(None)

    needed = item.target.amount_needed
    if (assigned >= needed and available == 0) or (assigned == needed and available > 0):
        return TargetStatus(FUNDED, "Fully Funded")
    if assigned > needed:
        return TargetStatus(
            OVERFUNDED, f"Funded {format_usd(needed)} of {format_usd(assigned)}"
        )
    if spent <= assigned < needed:
        return TargetStatus(
            UNDERFUNDED, f"{format_usd(needed - assigned)} more needed to fulfill target"
        )
    return TargetStatus(PARTIAL, f"{format_usd(assigned)} / {format_usd(needed)}")


def items_to_address(budget_month: BudgetMonth) -> ItemsToAddress:
    """Names of the month's overspent and underfunded items."""
    result = ItemsToAddress()
    for _, item in budget_month.iter_items():
        kind = target_status(item).kind
        if kind == OVERSPENT:
            result.overspent.append(item.name)
        elif kind == UNDERFUNDED:
            result.underfunded.append(item.name)
    return result
