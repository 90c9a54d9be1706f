"""Domain models for the ingredient inventory."""

from dataclasses import dataclass
from decimal import Decimal

DEFAULT_CATEGORY = "otros"
DEFAULT_NEW_NAME = "Nuevo producto"
DEFAULT_NEW_UNIT = "unidades"


@dataclass(frozen=True)
class Ingredient:
    """Stock-keeping unit held in the inventory."""

    id: str
    name: str
    quantity: Decimal
    unit: str
    price_per_unit: Decimal
    category: str = DEFAULT_CATEGORY
    is_package: bool = False
    price_total: Decimal | None = None


@dataclass(frozen=True)
class StockRequest:
    """Quantity of one ingredient to take from or return to stock."""

    ingredient_id: str
    quantity: Decimal
    name: str | None = None
    unit: str | None = None
    price_per_unit: Decimal | None = None


@dataclass(frozen=True)
class IngredientDraft:
    """Ingredient submitted without an id, used for batch creation."""

    name: str
    unit: str
    quantity: Decimal
    price_per_unit: Decimal | None = None
    category: str | None = None
    is_package: bool = False
    price_total: Decimal | None = None
