"""Month token helpers.

Months are identified by "YYYY-MM" tokens. String comparison of tokens is
calendar comparison, which the rest of the ledger relies on.
"""

from datetime import date, datetime
from typing import Union

from dateutil.relativedelta import relativedelta

MONTH_FORMAT = "%Y-%m"

FORWARD = "forward"
BACKWARD = "backward"
DIRECTIONS = (FORWARD, BACKWARD)


def parse_month(token: str) -> date:
    """Parse a "YYYY-MM" (or longer ISO date) string to the first day of that month.

    Raises:
        ValueError: If the string does not start with a valid year and month.
    """
    if not isinstance(token, str) or len(token) < 7:
        raise ValueError(f"Invalid month: {token!r}")
    return datetime.strptime(token[:7], MONTH_FORMAT).date()


def month_token(value: Union[str, date, datetime]) -> str:
    """Normalize a date, datetime or date-like string to a "YYYY-MM" token."""
    if isinstance(value, (date, datetime)):
        return value.strftime(MONTH_FORMAT)
    return parse_month(value).strftime(MONTH_FORMAT)


def current_month() -> str:
    return date.today().strftime(MONTH_FORMAT)


def previous_month(token: str) -> str:
    return (parse_month(token) - relativedelta(months=1)).strftime(MONTH_FORMAT)


def next_month(token: str) -> str:
    return (parse_month(token) + relativedelta(months=1)).strftime(MONTH_FORMAT)


def months_between(start: str, end: str) -> int:
    """Whole calendar months from start to end (negative if end is earlier)."""
    delta = relativedelta(parse_month(end), parse_month(start))
    return delta.years * 12 + delta.months


def validate_direction(direction: str) -> str:
    if direction not in DIRECTIONS:
        raise ValueError(
            f"Invalid direction '{direction}'. Must be one of: {', '.join(DIRECTIONS)}"
        )
    return direction
