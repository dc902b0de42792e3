"""Activity aggregation over the transaction ledger.

Activity is the net signed flow of transactions tagged with a category in a
given month. Undated transactions are skipped with a warning so that one bad
row never blanks out a month.
"""

from decimal import Decimal
from typing import Iterable, Iterator, List, Optional, Tuple

from models.account import Account
from models.budget import READY_TO_ASSIGN
from models.transaction import Transaction
from money import ZERO
from logger import get_logger

logger = get_logger()


def transaction_month(transaction: Transaction) -> Optional[str]:
    """Return the YYYY-MM token of a transaction, or None if it has no date."""
    month = transaction.month
    if month is None:
        logger.warning(
            f"Skipping transaction {transaction.id} ({transaction.payee!r}): no date"
        )
    return month


def iter_month_transactions(
    accounts: Iterable[Account], month: str
) -> Iterator[Tuple[Account, Transaction]]:
    """Yield (account, transaction) pairs dated in the given month."""
    for account in accounts:
        for transaction in account.transactions:
            if transaction_month(transaction) == month:
                yield account, transaction


def activity_for_category(
    accounts: Iterable[Account], month: str, category_name: str
) -> Decimal:
    """Sum the signed amounts of every transaction in ``month`` tagged ``category_name``.

    Args:
        accounts: Accounts with their transactions.
        month: "YYYY-MM" token.
        category_name: Category item name to match.

    Returns:
        Net activity (negative when money was spent).
    """
    return sum(
        (
            t.amount
            for _, t in iter_month_transactions(accounts, month)
            if t.category == category_name
        ),
        ZERO,
    )


def _inflows(accounts: Iterable[Account]) -> Iterator[Tuple[str, Transaction]]:
    """Yield (month, transaction) for income that feeds Ready to Assign."""
    for account in accounts:
        if not account.is_cash:
            continue
        for transaction in account.transactions:
            if transaction.category != READY_TO_ASSIGN or transaction.amount <= 0:
                continue
            month = transaction_month(transaction)
            if month is not None:
                yield month, transaction


def month_inflow(accounts: Iterable[Account], month: str) -> Decimal:
    """Income received into cash accounts during ``month``."""
    return sum((t.amount for m, t in _inflows(accounts) if m == month), ZERO)


def cumulative_inflow(accounts: Iterable[Account], month: str) -> Decimal:
    """Income received into cash accounts in ``month`` or any earlier month."""
    return sum((t.amount for m, t in _inflows(accounts) if m <= month), ZERO)


def first_inflow_month(accounts: Iterable[Account]) -> Optional[str]:
    """The earliest month in which any income arrived, or None."""
    months: List[str] = sorted(m for m, _ in _inflows(accounts))
    return months[0] if months else None


def has_cash_spending(
    accounts: Iterable[Account], month: str, category_name: str
) -> bool:
    """True if a cash account spent money on ``category_name`` during ``month``."""
    return any(
        account.is_cash and t.category == category_name and t.is_outflow
        for account, t in iter_month_transactions(accounts, month)
    )
