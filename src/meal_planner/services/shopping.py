"""Shopping list generation and the purchase ledger."""

import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Protocol
from uuid import uuid4

from meal_planner.domain.errors import NotFoundError, ValidationError
from meal_planner.domain.inventory import StockRequest
from meal_planner.domain.menus import week_start
from meal_planner.domain.quantities import ZERO
from meal_planner.domain.shopping import (
    UNKNOWN_INGREDIENT_NAME,
    UNKNOWN_INGREDIENT_UNIT,
    Purchase,
    PurchaseItem,
    ShoppingItem,
    ShoppingList,
    shopping_list_id_for,
)
from meal_planner.services.inventory import InventoryService
from meal_planner.services.menus import MenuService
from meal_planner.services.unit_of_work import PassThroughUnitOfWork, UnitOfWork

logger = logging.getLogger(__name__)


class ShoppingListRepository(Protocol):
    """Persistence interface for shopping lists."""

    def load_shopping_list(self, week: str) -> ShoppingList | None:
        """Return the list stored for a week, if any."""

    def save_shopping_list(self, shopping_list: ShoppingList) -> None:
        """Insert or replace a shopping list with its items."""

    def delete_shopping_list(self, shopping_list_id: str) -> None:
        """Delete a shopping list by id."""


class PurchaseRepository(Protocol):
    """Persistence interface for the append-only purchase ledger."""

    def append_purchase(self, purchase: Purchase) -> None:
        """Store a new purchase."""

    def load_purchases(self) -> list[Purchase]:
        """Return every stored purchase."""


@dataclass
class ShoppingService:
    """Derives shopping lists from menus and records finished purchases."""

    lists: ShoppingListRepository
    purchases: PurchaseRepository
    menus: MenuService
    inventory: InventoryService
    unit_of_work: UnitOfWork = field(default_factory=PassThroughUnitOfWork)

    def generate(self, week: date | str) -> ShoppingList:
        """Build the list of ingredients the week's menu needs beyond stock."""
        with self.unit_of_work.atomic():
            menu = self.menus.load_week_menu(week)
            required: dict[str, Decimal] = {}
            for dish in menu.all_dishes():
                for ingredient in dish.ingredients:
                    key = ingredient.ingredient_id
                    required[key] = required.get(key, ZERO) + ingredient.quantity

            stock = {item.id: item for item in self.inventory.get()}
            items: list[ShoppingItem] = []
            for ingredient_id, quantity in required.items():
                record = stock.get(ingredient_id)
                available = record.quantity if record else ZERO
                needed = max(ZERO, quantity - available)
                if needed <= 0:
                    continue
                items.append(
                    ShoppingItem(
                        ingredient_id=ingredient_id,
                        name=record.name if record else UNKNOWN_INGREDIENT_NAME,
                        quantity=needed,
                        unit=record.unit if record else UNKNOWN_INGREDIENT_UNIT,
                        price_per_unit=record.price_per_unit if record else ZERO,
                    )
                )

            shopping_list = ShoppingList(
                id=shopping_list_id_for(menu.week),
                week_id=menu.week,
                items=items,
                total_cost=ZERO,
                completed=False,
                created_at=datetime.now(tz=UTC),
            )
            shopping_list.refresh_totals()
            self.lists.save_shopping_list(shopping_list)
        return shopping_list

    def get_shopping_list(self, week: date | str) -> ShoppingList | None:
        """Return the stored list for a week, if any."""
        return self.lists.load_shopping_list(week_start(week))

    def add_manual_item(self, week: date | str, item: ShoppingItem) -> ShoppingList:
        """Append an item that is not derived from the menu."""
        if item.quantity <= 0:
            raise ValidationError(f"Quantity must be positive: {item.quantity}")
        if item.price_per_unit < 0:
            raise ValidationError(f"Price cannot be negative: {item.price_per_unit}")
        shopping_list = self._require(week)
        shopping_list.items.append(item)
        return self._store(shopping_list)

    def remove_item(self, week: date | str, index: int) -> ShoppingList:
        """Drop one item from the list."""
        shopping_list = self._require(week)
        _check_index(shopping_list, index)
        del shopping_list.items[index]
        return self._store(shopping_list)

    def toggle_item_purchased(self, week: date | str, index: int) -> ShoppingList:
        """Flip the purchased flag of one item."""
        shopping_list = self._require(week)
        _check_index(shopping_list, index)
        item = shopping_list.items[index]
        shopping_list.items[index] = replace(item, purchased=not item.purchased)
        return self._store(shopping_list)

    def mark_all_purchased(self, week: date | str) -> ShoppingList:
        """Mark every item as purchased."""
        shopping_list = self._require(week)
        shopping_list.items = [
            replace(item, purchased=True) for item in shopping_list.items
        ]
        return self._store(shopping_list)

    def complete_purchase(self, week: date | str) -> Purchase | None:
        """Record the purchase of a completed list and restock its items.

        Returns None when the week has no list or it is not fully purchased.
        """
        shopping_list = self.get_shopping_list(week)
        if shopping_list is None or not shopping_list.completed:
            return None

        items = [
            PurchaseItem(
                ingredient_id=item.ingredient_id,
                name=item.name,
                quantity=item.quantity,
                unit=item.unit,
                price_per_unit=item.price_per_unit,
                total_price=item.quantity * item.price_per_unit,
            )
            for item in shopping_list.items
            if item.purchased
        ]
        purchase = Purchase(
            id=f"purchase-{uuid4()}",
            week_id=shopping_list.week_id,
            items=items,
            total_cost=sum((item.total_price for item in items), ZERO),
            date=datetime.now(tz=UTC),
        )
        with self.unit_of_work.atomic():
            self.inventory.restore(
                [
                    StockRequest(
                        ingredient_id=item.ingredient_id,
                        quantity=item.quantity,
                        name=item.name,
                        unit=item.unit,
                        price_per_unit=item.price_per_unit,
                    )
                    for item in items
                ]
            )
            self.purchases.append_purchase(purchase)
            self.lists.delete_shopping_list(shopping_list.id)
        logger.info(
            "Completed purchase",
            extra={"purchase_id": purchase.id, "week": purchase.week_id},
        )
        return purchase

    def list_purchases(self, week: date | str | None = None) -> list[Purchase]:
        """Return the ledger newest first, optionally for one week."""
        purchases = self.purchases.load_purchases()
        if week is not None:
            normalized = week_start(week)
            purchases = [p for p in purchases if p.week_id == normalized]
        return sorted(purchases, key=lambda purchase: purchase.date, reverse=True)

    def _require(self, week: date | str) -> ShoppingList:
        shopping_list = self.get_shopping_list(week)
        if shopping_list is None:
            raise NotFoundError(f"No shopping list for week {week_start(week)}")
        return shopping_list

    def _store(self, shopping_list: ShoppingList) -> ShoppingList:
        shopping_list.refresh_totals()
        self.lists.save_shopping_list(shopping_list)
        return shopping_list


def _check_index(shopping_list: ShoppingList, index: int) -> None:
    if not 0 <= index < len(shopping_list.items):
        raise ValidationError(f"No shopping item at position {index}")
