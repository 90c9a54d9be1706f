"""Domain models for shopping lists and purchases."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from meal_planner.domain.inventory import Ingredient
from meal_planner.domain.menus import WeeklyMenu
from meal_planner.domain.quantities import ZERO

UNKNOWN_INGREDIENT_NAME = "Unknown ingredient"
UNKNOWN_INGREDIENT_UNIT = "unit"


@dataclass(frozen=True)
class ShoppingItem:
    """Line of a shopping list."""

    ingredient_id: str
    name: str
    quantity: Decimal
    unit: str
    price_per_unit: Decimal
    purchased: bool = False


@dataclass
class ShoppingList:
    """Deficit between a week's menu and current stock."""

    id: str
    week_id: str
    items: list[ShoppingItem]
    total_cost: Decimal
    completed: bool
    created_at: datetime

    def refresh_totals(self) -> None:
        """Recompute total cost and completion from the items."""
        self.total_cost = sum(
            (item.quantity * item.price_per_unit for item in self.items), ZERO
        )
        self.completed = bool(self.items) and all(
            item.purchased for item in self.items
        )


@dataclass(frozen=True)
class PurchaseItem:
    """Item bought as part of a purchase."""

    ingredient_id: str
    name: str
    quantity: Decimal
    unit: str
    price_per_unit: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class Purchase:
    """Finalized purchase appended to the ledger."""

    id: str
    week_id: str
    items: list[PurchaseItem]
    total_cost: Decimal
    date: datetime


@dataclass(frozen=True)
class PurchaseSummary:
    """Aggregated spending over a set of purchases."""

    purchase_count: int
    total_spent: Decimal
    average_spent: Decimal
    total_items: int


@dataclass(frozen=True)
class WeeklySnapshot:
    """Everything exported for one week."""

    week: str
    menu: WeeklyMenu
    inventory: list[Ingredient]
    shopping_list: ShoppingList
    purchases: list[Purchase]


def shopping_list_id_for(week: str) -> str:
    """Return the storage key of a week's shopping list."""
    return f"shopping-{week}"
