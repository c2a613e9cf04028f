"""Amount and currency handling for provider requests."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from app.gateways.errors import InvalidPaymentError

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")
_CENTS = Decimal("0.01")


def format_amount(total) -> str:
    """
    Format a total as the provider's amount string, e.g. ``"12.99"``.

    Always two decimals with a ``.`` separator and no grouping, whatever the
    locale. Halves round away from zero: 19.995 -> "20.00".
    """
    try:
        value = total if isinstance(total, Decimal) else Decimal(str(total))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidPaymentError(f"Invalid payment total: {total!r}")

    if not value.is_finite():
        raise InvalidPaymentError(f"Invalid payment total: {total!r}")
    if value < 0:
        raise InvalidPaymentError(f"Payment total cannot be negative: {value}")
    if value == 0:
        value = Decimal(0)  # drop the sign of -0

    return format(value.quantize(_CENTS, rounding=ROUND_HALF_UP), "f")


def validate_currency(currency) -> str:
    """Return the ISO 4217 code, or raise InvalidPaymentError."""
    if not isinstance(currency, str) or not _CURRENCY_RE.match(currency):
        raise InvalidPaymentError(f"Invalid currency code: {currency!r}")
    return currency
