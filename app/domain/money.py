from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .session import DomainValidationError

CENTS = Decimal("0.01")
DEFAULT_SYMBOL = "₪"


def to_minor_units(amount: Decimal | float | int | str) -> int:
    """Convert a major-unit amount into whole cents, rounding half up."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation as exc:
        raise DomainValidationError(f"invalid amount: {amount!r}") from exc
    if not value.is_finite():
        raise DomainValidationError(f"invalid amount: {amount!r}")
    return int((value.quantize(CENTS, rounding=ROUND_HALF_UP) * 100).to_integral_value())


def from_minor_units(cents: int) -> Decimal:
    return (Decimal(cents) / Decimal(100)).quantize(CENTS)


def format_money(cents: int, symbol: str = DEFAULT_SYMBOL) -> str:
    """Render whole currency units with thousands separators, e.g. ``₪1,250``.

    Display only; never feed the result back into a calculation.
    """
    units = from_minor_units(cents).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if units < 0 else ""
    return f"{sign}{symbol}{abs(units):,}"
