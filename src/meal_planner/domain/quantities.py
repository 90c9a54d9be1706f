"""Decimal helpers for quantities and prices."""

from decimal import Decimal, InvalidOperation

from meal_planner.domain.errors import ValidationError

ZERO = Decimal("0")


def to_decimal(value: object, default: Decimal = ZERO) -> Decimal:
    """Convert a stored or submitted number to a Decimal."""
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"Invalid number: {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid number: {value!r}") from exc


def to_number(value: Decimal) -> float | int:
    """Render a Decimal as a JSON-friendly number."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)
