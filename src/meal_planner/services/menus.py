"""Weekly menu operations that keep inventory in step with planned dishes."""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Protocol

from meal_planner.domain.dishes import Dish, normalize_day, validate_meal
from meal_planner.domain.menus import (
    AddDishResult,
    WeeklyMenu,
    empty_days,
    empty_menu,
    menu_id_for,
    week_start,
)
from meal_planner.services.dishes import DishCatalog
from meal_planner.services.inventory import InventoryService, requests_from_recipe
from meal_planner.services.unit_of_work import PassThroughUnitOfWork, UnitOfWork

logger = logging.getLogger(__name__)


class MenuRepository(Protocol):
    """Persistence interface for weekly menus."""

    def load_menu(self, week: str) -> WeeklyMenu | None:
        """Return the menu stored for a week start date, if any."""

    def save_menu(self, menu: WeeklyMenu) -> None:
        """Insert or replace a weekly menu."""


@dataclass
class MenuService:
    """Places and removes dishes on weekly menus, reconciling stock."""

    repository: MenuRepository
    inventory: InventoryService
    catalog: DishCatalog
    unit_of_work: UnitOfWork = field(default_factory=PassThroughUnitOfWork)

    def current_week(self) -> str:
        """Return the Monday of the current week."""
        return week_start(date.today())

    def get_menu_for_week(self, week: date | str) -> WeeklyMenu:
        """Return the week's menu, creating an empty one when missing."""
        return self.load_week_menu(week)

    def load_week_menu(self, week: date | str) -> WeeklyMenu:
        """Return the week's menu, creating and storing an empty one if needed."""
        normalized = week_start(week)
        menu = self.repository.load_menu(normalized)
        if menu is not None:
            return menu
        menu = empty_menu(normalized)
        self.repository.save_menu(menu)
        logger.info("Created empty weekly menu", extra={"menu_id": menu.id})
        return menu

    def add_dish_to_menu(
        self, week: date | str, day: str, meal: str, dish_id: str
    ) -> AddDishResult:
        """Place a dish on the menu, consuming its ingredients.

        Shortages never prevent the placement; they are returned as a
        warning and stored on the menu. Placing a dish that is already on
        that day changes nothing.
        """
        day = normalize_day(day)
        meal = validate_meal(meal)
        dish = self.catalog.require(dish_id)
        with self.unit_of_work.atomic():
            menu = self.load_week_menu(week)
            existing = menu.find_entry(day, dish_id)
            if existing is not None:
                missing = (
                    menu.warnings.get(day, {})
                    .get(existing.category, {})
                    .get(dish_id)
                )
                return AddDishResult(
                    warning=bool(missing),
                    missing_ingredients=list(missing or []),
                    added=False,
                )
            result = self._place(menu, day, meal, dish)
            self.repository.save_menu(menu)
        return result

    def remove_dish_from_menu(
        self, week: date | str, day: str, meal: str, dish_id: str
    ) -> WeeklyMenu:
        """Remove a placed dish and return its ingredients to stock."""
        day = normalize_day(day)
        meal = validate_meal(meal)
        with self.unit_of_work.atomic():
            menu = self.load_week_menu(week)
            entries = menu.days.setdefault(day, [])
            index = next(
                (
                    position
                    for position, dish in enumerate(entries)
                    if dish.id == dish_id and dish.category == meal
                ),
                None,
            )
            if index is None:
                return menu
            dish = entries.pop(index)
            if dish.ingredients:
                self.inventory.restore(requests_from_recipe(dish.ingredients))
            menu.warnings.get(day, {}).get(meal, {}).pop(dish_id, None)
            self.repository.save_menu(menu)
        return menu

    def replace_week_menu(
        self, week: date | str, new_days: dict[str, list[Dish]]
    ) -> WeeklyMenu:
        """Replace a week's dishes with a template.

        Every dish currently on the menu is removed with its ingredients
        restored, then every template dish is placed as if added one by one.
        """
        placements: list[tuple[str, str, Dish]] = []
        for raw_day, dishes in new_days.items():
            day = normalize_day(raw_day)
            for template in dishes:
                meal = validate_meal(template.category)
                placements.append((day, meal, self.catalog.require(template.id)))

        with self.unit_of_work.atomic():
            menu = self.load_week_menu(week)
            for dish in menu.all_dishes():
                if dish.ingredients:
                    self.inventory.restore(requests_from_recipe(dish.ingredients))
            menu.days = empty_days()
            menu.warnings = {}
            for day, meal, dish in placements:
                if menu.find_entry(day, dish.id) is None:
                    self._place(menu, day, meal, dish)
            self.repository.save_menu(menu)
        logger.info(
            "Replaced weekly menu",
            extra={"menu_id": menu_id_for(menu.week), "dishes": len(placements)},
        )
        return menu

    def _place(
        self, menu: WeeklyMenu, day: str, meal: str, dish: Dish
    ) -> AddDishResult:
        missing_ids = (
            self.inventory.consume(requests_from_recipe(dish.ingredients))
            if dish.ingredients
            else []
        )
        missing_names = self.inventory.names_for(missing_ids)
        menu.days.setdefault(day, []).append(replace(dish, category=meal))
        menu.warnings.setdefault(day, {}).setdefault(meal, {})[dish.id] = (
            missing_names or None
        )
        return AddDishResult(
            warning=bool(missing_names), missing_ingredients=missing_names
        )
