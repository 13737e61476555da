"""Money parsing and conversion utilities.

Amounts are handled as two-decimal ``Decimal`` values (rupees) or as integer
minor units (paise). Floats are rejected.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
import re

TWO_PLACES = Decimal("0.01")
PAISE_PER_RUPEE = 100


def quantize_money(amount: Decimal | int | str) -> Decimal:
    """Round an amount to two decimal places (half up).

    Raises:
        TypeError: If a float is passed
    """
    if isinstance(amount, float):
        raise TypeError("Monetary amounts must not be floats; use Decimal or str")
    return Decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_paise(amount: Decimal | int | str) -> int:
    """Convert a rupee amount to integer paise."""
    return int(quantize_money(amount) * PAISE_PER_RUPEE)


def from_paise(paise: int) -> Decimal:
    """Convert integer paise to a two-decimal rupee amount."""
    return (Decimal(paise) / PAISE_PER_RUPEE).quantize(TWO_PLACES)


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-entered amount string into a two-decimal Decimal.

    Handles "1234.50", "₹1,234.50", "Rs. 500", "-250" and "(250)" (negative).

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"(₹|INR|Rs\.?)", "", amount_str, flags=re.IGNORECASE)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = quantize_money(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount
