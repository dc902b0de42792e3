"""Money helpers.

All amounts in Envelope are ``Decimal``. Values coming from user input or
storage go through ``to_money`` so that a bad value becomes zero instead of
poisoning every month that depends on it.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from logger import get_logger

logger = get_logger()

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Convert a number-ish value to a Decimal.

    Args:
        value: int, float, str, Decimal or None.

    Returns:
        Decimal value. None, blank strings, non-numeric input, NaN and
        infinities all resolve to zero.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    else:
        text = str(value).strip().replace(",", "").replace("$", "")
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            logger.warning(f"Non-numeric amount {value!r} treated as 0")
            return ZERO

    if not result.is_finite():
        logger.warning(f"Non-finite amount {value!r} treated as 0")
        return ZERO

    return result


def round_cents(value: Decimal) -> Decimal:
    """Round a Decimal to whole cents (half up)."""
    return to_money(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_usd(value) -> str:
    """Format an amount as US dollars, e.g. ``$1,234.50`` or ``-$40.00``."""
    amount = round_cents(value)
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"
