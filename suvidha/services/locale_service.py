"""Locale helpers for money, numbers and server-local calendar boundaries.

Money is formatted with babel in the request language (en -> en_IN, hi -> hi_IN)
and always in INR. Money is accumulated in integer minor units (paise) so sums
never drift.

Calendar boundaries ("today", "this month") are computed in the server's local
timezone as auto-detected by babel.

Example:
    >>> format_amount(Decimal("1234.5"), "en")
    '₹1,234.50'
    >>> to_minor_units(Decimal("10.10"))
    1010
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

from babel.dates import LOCALTZ
from babel.numbers import format_currency as babel_format_currency
from babel.numbers import format_decimal as babel_format_decimal

logger = logging.getLogger(__name__)

CURRENCY = "INR"

# Request language -> babel locale
BABEL_LOCALES = {
    "en": "en_IN",
    "hi": "hi_IN",
}

_CENT = Decimal("0.01")


def babel_locale(language: str) -> str:
    """Babel locale for a request language, defaulting to en_IN."""
    return BABEL_LOCALES.get(language, BABEL_LOCALES["en"])


def format_amount(amount: int | float | Decimal, language: str = "en") -> str:
    """Format a rupee amount for display.

    Args:
        amount: Amount in rupees
        language: Request language (en, hi)

    Returns:
        Formatted currency string (e.g., '₹1,234.50')
    """
    return babel_format_currency(Decimal(str(amount)), CURRENCY, locale=babel_locale(language))


def format_number(value: int | float | Decimal, language: str = "en") -> str:
    """Format a plain number (meter units) for display."""
    return babel_format_decimal(Decimal(str(value)), locale=babel_locale(language))


def to_minor_units(amount: int | float | Decimal | None) -> int:
    """Convert a rupee amount to integer paise, rounding half up."""
    if amount is None:
        return 0
    return int((Decimal(str(amount)) / _CENT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(minor: int) -> Decimal:
    """Convert integer paise back to a two-decimal rupee amount."""
    return (Decimal(minor) * _CENT).quantize(_CENT)


def local_now() -> datetime:
    """Current time as an aware datetime in the server timezone."""
    return datetime.now(timezone.utc).astimezone(LOCALTZ)


def ensure_aware(dt: datetime) -> datetime:
    """Treat naive datetimes (SQLite drops tzinfo) as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def start_of_day(now: datetime) -> datetime:
    """Local midnight of the day containing `now`."""
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_month(now: datetime) -> datetime:
    """Local midnight of the first day of the month containing `now`."""
    return start_of_day(now).replace(day=1)


def day_bounds(now: datetime) -> tuple[datetime, datetime]:
    """[midnight, next midnight) of the local day containing `now`."""
    start = start_of_day(now)
    return start, start + timedelta(days=1)


def to_utc(dt: datetime) -> datetime:
    """Convert an aware datetime to UTC for use as a query bound."""
    return ensure_aware(dt).astimezone(timezone.utc)


__all__ = [
    "CURRENCY",
    "babel_locale",
    "day_bounds",
    "ensure_aware",
    "format_amount",
    "format_number",
    "from_minor_units",
    "local_now",
    "start_of_day",
    "start_of_month",
    "to_minor_units",
    "to_utc",
]
