"""Money helpers: Decimal coercion, half-up rounding to cents and euro formatting."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce numbers coming from the ORM or JSON into Decimal; garbage becomes zero."""
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal(0)
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal(0)
    return result if result.is_finite() else Decimal(0)


def round2(value: Any) -> Decimal:
    """Round half-up to cents."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_euro(value: Any) -> str:
    """Format an amount the German way: ``1234.5`` -> ``1234,50 €``."""
    return f"{round2(value):.2f}".replace(".", ",") + " €"
