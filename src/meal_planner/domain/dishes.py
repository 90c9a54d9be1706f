"""Domain models for dishes and the weekly calendar."""

import unicodedata
from dataclasses import dataclass
from decimal import Decimal

from meal_planner.domain.errors import ValidationError

DAYS_OF_WEEK = (
    "lunes",
    "martes",
    "miercoles",
    "jueves",
    "viernes",
    "sabado",
    "domingo",
)

# Meal slots in the order they happen during the day.
MEAL_CATEGORIES = ("desayuno", "merienda", "almuerzo", "cafe", "cena")


@dataclass(frozen=True)
class DishIngredient:
    """Quantity of an ingredient used by one preparation of a dish."""

    ingredient_id: str
    quantity: Decimal


@dataclass(frozen=True)
class Dish:
    """Recipe with its meal category and ingredient list."""

    id: str
    name: str
    category: str
    servings: int
    ingredients: list[DishIngredient]


def _fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_day(day: str) -> str:
    """Return the canonical day name, ignoring case and accents."""
    cleaned = _fold(day)
    if cleaned not in DAYS_OF_WEEK:
        raise ValidationError(f"Unknown day: {day!r}")
    return cleaned


def validate_meal(meal: str) -> str:
    """Return the meal category if it is known."""
    normalized = _fold(meal)
    if normalized not in MEAL_CATEGORIES:
        raise ValidationError(f"Unknown meal category: {meal!r}")
    return normalized
