"""Export and import of a full weekly snapshot."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime

from meal_planner.domain.menus import week_start
from meal_planner.domain.quantities import ZERO
from meal_planner.domain.shopping import ShoppingList, WeeklySnapshot
from meal_planner.services.inventory import InventoryRepository
from meal_planner.services.menus import MenuRepository
from meal_planner.services.shopping import PurchaseRepository, ShoppingListRepository
from meal_planner.services.unit_of_work import PassThroughUnitOfWork, UnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class TransferService:
    """Moves one week of data in and out of the store."""

    menus: MenuRepository
    inventory: InventoryRepository
    lists: ShoppingListRepository
    purchases: PurchaseRepository
    unit_of_work: UnitOfWork = field(default_factory=PassThroughUnitOfWork)

    def export_week(self, week: date | str) -> WeeklySnapshot | None:
        """Return the week's snapshot, or None when no menu is stored."""
        normalized = week_start(week)
        menu = self.menus.load_menu(normalized)
        if menu is None:
            return None
        shopping_list = self.lists.load_shopping_list(normalized) or ShoppingList(
            id="",
            week_id=normalized,
            items=[],
            total_cost=ZERO,
            completed=False,
            created_at=datetime.now(tz=UTC),
        )
        return WeeklySnapshot(
            week=normalized,
            menu=menu,
            inventory=self.inventory.load_ingredients(),
            shopping_list=shopping_list,
            purchases=[
                purchase
                for purchase in self.purchases.load_purchases()
                if purchase.week_id == normalized
            ],
        )

    def import_week(self, snapshot: WeeklySnapshot) -> None:
        """Merge a snapshot into the store.

        The week's menu is overwritten, unknown ingredients are added without
        touching existing ones and purchases are merged by id.
        """
        with self.unit_of_work.atomic():
            self.menus.save_menu(snapshot.menu)
            known_ingredients = {
                item.id for item in self.inventory.load_ingredients()
            }
            added = 0
            for ingredient in snapshot.inventory:
                if ingredient.id not in known_ingredients:
                    self.inventory.save_ingredient(ingredient)
                    known_ingredients.add(ingredient.id)
                    added += 1
            if snapshot.shopping_list.id:
                self.lists.save_shopping_list(snapshot.shopping_list)
            known_purchases = {p.id for p in self.purchases.load_purchases()}
            for purchase in snapshot.purchases:
                if purchase.id not in known_purchases:
                    self.purchases.append_purchase(purchase)
                    known_purchases.add(purchase.id)
        logger.info(
            "Imported weekly snapshot",
            extra={"week": snapshot.week, "new_ingredients": added},
        )
