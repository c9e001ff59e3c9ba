"""
Decimal helpers for money and volume values.

Every public engine operation converts its inputs here and rounds
only once, at the end, with quantize_money.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext

from compensation.exceptions import InvalidAmountError


MONEY_QUANT = Decimal("0.01")

Numeric = Decimal | int | float | str


def parse_amount(
    value: Numeric,
    min_val: Decimal = Decimal("0"),
) -> tuple[bool, Decimal | None, str | None]:
    """
    Parse a money or volume value into Decimal.

    Floats go through str() so 0.07 becomes Decimal('0.07') instead of
    its binary expansion.

    Args:
        value: Amount to parse
        min_val: Minimum allowed value

    Returns:
        Tuple of (is_valid, parsed_value, error_message)

    Examples:
        >>> parse_amount("100.50")
        (True, Decimal('100.50'), None)
        >>> parse_amount(-10)
        (False, None, 'Amount must be >= 0')
    """
    if isinstance(value, bool) or value is None:
        return False, None, "Amount must be a number"

    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", ".")
        if not text:
            return False, None, "Amount is empty"
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return False, None, "Invalid amount format"
    else:
        return False, None, "Amount must be a number"

    if not parsed.is_finite():
        return False, None, "Amount must be a finite number"

    if parsed < min_val:
        return False, None, f"Amount must be >= {min_val}"

    # Integer digits plus 2 decimal places must fit the context precision
    if parsed and parsed.adjusted() + 3 > getcontext().prec:
        return False, None, "Amount is too large"

    return True, parsed, None


def to_decimal(field: str, value: Numeric) -> Decimal:
    """
    Convert a non-negative amount to Decimal.

    Raises:
        InvalidAmountError: If the value is negative, non-finite, too large or unparsable
    """
    is_valid, parsed, error = parse_amount(value)
    if not is_valid:
        raise InvalidAmountError(field, value, error)
    return parsed


def quantize_money(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, half up."""
    return amount.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)
