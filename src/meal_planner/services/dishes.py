"""Dish catalog lookups and maintenance."""

from dataclasses import dataclass
from typing import Protocol

from meal_planner.domain.dishes import Dish, validate_meal
from meal_planner.domain.errors import NotFoundError, ValidationError


class DishRepository(Protocol):
    """Persistence interface for the dish catalog."""

    def load_dish(self, dish_id: str) -> Dish | None:
        """Return a dish by id, if present."""

    def load_dishes_by_category(self, category: str) -> list[Dish]:
        """Return dishes of one meal category."""

    def list_dishes(self) -> list[Dish]:
        """Return every dish."""

    def save_dish(self, dish: Dish) -> None:
        """Insert or replace a dish with its ingredients."""

    def delete_dish(self, dish_id: str) -> None:
        """Delete a dish by id."""


@dataclass
class DishCatalog:
    """Read access to recipes, plus catalog editing."""

    repository: DishRepository

    def by_id(self, dish_id: str) -> Dish | None:
        """Return a dish by id, if present."""
        return self.repository.load_dish(dish_id)

    def require(self, dish_id: str) -> Dish:
        """Return a dish by id or raise when it is unknown."""
        dish = self.repository.load_dish(dish_id)
        if dish is None:
            raise NotFoundError(f"Unknown dish: {dish_id}")
        return dish

    def by_category(self, category: str) -> list[Dish]:
        """Return dishes of a meal category."""
        return self.repository.load_dishes_by_category(validate_meal(category))

    def list_all(self) -> list[Dish]:
        """Return the full catalog sorted by name."""
        return sorted(self.repository.list_dishes(), key=lambda dish: dish.name)

    def save(self, dish: Dish) -> Dish:
        """Validate and store a dish."""
        if not dish.id or not dish.name.strip():
            raise ValidationError("Dish id and name are required")
        validate_meal(dish.category)
        if dish.servings < 1:
            raise ValidationError(f"Servings must be at least 1: {dish.servings}")
        for item in dish.ingredients:
            if item.quantity <= 0:
                raise ValidationError(
                    f"Quantity must be positive for {item.ingredient_id}"
                )
        self.repository.save_dish(dish)
        return dish

    def remove(self, dish_id: str) -> None:
        """Delete a dish from the catalog."""
        self.require(dish_id)
        self.repository.delete_dish(dish_id)
