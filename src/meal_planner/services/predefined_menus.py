"""Named weekly templates that can be copied onto a week."""

from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import uuid4

from meal_planner.domain.dishes import Dish, normalize_day, validate_meal
from meal_planner.domain.errors import NotFoundError, ValidationError
from meal_planner.domain.menus import PredefinedMenu, WeeklyMenu, empty_days
from meal_planner.services.dishes import DishCatalog
from meal_planner.services.menus import MenuService


class PredefinedMenuRepository(Protocol):
    """Persistence interface for predefined menus."""

    def list_predefined_menus(self) -> list[PredefinedMenu]:
        """Return every stored template."""

    def load_predefined_menu(self, menu_id: str) -> PredefinedMenu | None:
        """Return a template by id, if present."""

    def save_predefined_menu(self, menu: PredefinedMenu) -> None:
        """Insert or replace a template."""

    def delete_predefined_menu(self, menu_id: str) -> None:
        """Delete a template by id."""


@dataclass
class PredefinedMenuService:
    """Application service for weekly templates."""

    repository: PredefinedMenuRepository
    catalog: DishCatalog
    menus: MenuService

    def create(self, name: str, slots: dict[str, dict[str, str]]) -> PredefinedMenu:
        """Create a template from ``{day: {meal: dish_id}}`` selections."""
        if not name.strip():
            raise ValidationError("Template name is required")
        days = empty_days()
        for raw_day, meals in slots.items():
            day = normalize_day(raw_day)
            for raw_meal, dish_id in meals.items():
                if not dish_id:
                    continue
                meal = validate_meal(raw_meal)
                dish = self.catalog.require(dish_id)
                days[day].append(replace(dish, category=meal))
        menu = PredefinedMenu(
            id=f"predefined-{uuid4()}", name=name.strip(), days=days
        )
        self.repository.save_predefined_menu(menu)
        return menu

    def list_all(self) -> list[PredefinedMenu]:
        """Return templates sorted by name."""
        return sorted(
            self.repository.list_predefined_menus(), key=lambda menu: menu.name
        )

    def get(self, menu_id: str) -> PredefinedMenu:
        """Return a template or raise when it is unknown."""
        menu = self.repository.load_predefined_menu(menu_id)
        if menu is None:
            raise NotFoundError(f"Unknown predefined menu: {menu_id}")
        return menu

    def remove(self, menu_id: str) -> None:
        """Delete a template."""
        self.get(menu_id)
        self.repository.delete_predefined_menu(menu_id)

    def apply(self, menu_id: str, week: date | str) -> WeeklyMenu:
        """Replace a week's menu with the template's dishes."""
        template = self.get(menu_id)
        days: dict[str, list[Dish]] = {
            day: list(dishes) for day, dishes in template.days.items()
        }
        return self.menus.replace_week_menu(week, days)
