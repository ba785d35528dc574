"""
Core Utilities.

Time and money helpers shared by models, schemas and services.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def utc_now() -> datetime:
    """Current UTC time without tzinfo; every stored datetime is naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def round_currency(value: float) -> float:
    """
    Round a money amount to cents, half-up.

    Goes through ``str`` so binary float noise does not decide the
    rounding: ``round_currency(2.675) == 2.68`` where ``round`` gives 2.67.
    """
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))
