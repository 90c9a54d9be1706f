"""Shared test fixtures."""

import copy
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from decimal import Decimal

import pytest

from meal_planner.config import Settings
from meal_planner.containers import AppContainer, Repositories, build_services
from meal_planner.domain.dishes import Dish, DishIngredient
from meal_planner.domain.inventory import Ingredient
from meal_planner.domain.menus import PredefinedMenu, WeeklyMenu
from meal_planner.domain.shopping import Purchase, ShoppingList
from meal_planner.services.dishes import DishRepository
from meal_planner.services.inventory import InventoryRepository
from meal_planner.services.menus import MenuRepository
from meal_planner.services.predefined_menus import PredefinedMenuRepository
from meal_planner.services.shopping import PurchaseRepository, ShoppingListRepository
from meal_planner.services.unit_of_work import UnitOfWork


@dataclass
class InMemoryInventoryRepository(InventoryRepository):
    """In-memory ingredient repository for tests."""

    ingredients: dict[str, Ingredient] = field(default_factory=dict)

    def load_ingredients(self) -> list[Ingredient]:
        return list(self.ingredients.values())

    def save_ingredient(self, ingredient: Ingredient) -> None:
        self.ingredients[ingredient.id] = ingredient

    def delete_ingredient(self, ingredient_id: str) -> None:
        self.ingredients.pop(ingredient_id, None)


@dataclass
class InMemoryDishRepository(DishRepository):
    """In-memory dish catalog for tests."""

    dishes: dict[str, Dish] = field(default_factory=dict)

    def load_dish(self, dish_id: str) -> Dish | None:
        return self.dishes.get(dish_id)

    def load_dishes_by_category(self, category: str) -> list[Dish]:
        return [dish for dish in self.dishes.values() if dish.category == category]

    def list_dishes(self) -> list[Dish]:
        return list(self.dishes.values())

    def save_dish(self, dish: Dish) -> None:
        self.dishes[dish.id] = dish

    def delete_dish(self, dish_id: str) -> None:
        self.dishes.pop(dish_id, None)


@dataclass
class InMemoryMenuRepository(MenuRepository):
    """In-memory menu repository that stores copies, like a real backend."""

    menus: dict[str, WeeklyMenu] = field(default_factory=dict)
    saves: int = 0

    def load_menu(self, week: str) -> WeeklyMenu | None:
        menu = self.menus.get(week)
        return copy.deepcopy(menu) if menu else None

    def save_menu(self, menu: WeeklyMenu) -> None:
        self.saves += 1
        self.menus[menu.week] = copy.deepcopy(menu)


@dataclass
class InMemoryShoppingListRepository(ShoppingListRepository):
    """In-memory shopping list repository for tests."""

    lists: dict[str, ShoppingList] = field(default_factory=dict)

    def load_shopping_list(self, week: str) -> ShoppingList | None:
        shopping_list = self.lists.get(week)
        return copy.deepcopy(shopping_list) if shopping_list else None

    def save_shopping_list(self, shopping_list: ShoppingList) -> None:
        self.lists[shopping_list.week_id] = copy.deepcopy(shopping_list)

    def delete_shopping_list(self, shopping_list_id: str) -> None:
        for week, shopping_list in list(self.lists.items()):
            if shopping_list.id == shopping_list_id:
                del self.lists[week]


@dataclass
class InMemoryPurchaseRepository(PurchaseRepository):
    """In-memory purchase ledger for tests."""

    purchases: list[Purchase] = field(default_factory=list)

    def append_purchase(self, purchase: Purchase) -> None:
        self.purchases.append(purchase)

    def load_purchases(self) -> list[Purchase]:
        return list(self.purchases)


@dataclass
class InMemoryPredefinedMenuRepository(PredefinedMenuRepository):
    """In-memory template repository for tests."""

    menus: dict[str, PredefinedMenu] = field(default_factory=dict)

    def list_predefined_menus(self) -> list[PredefinedMenu]:
        return list(self.menus.values())

    def load_predefined_menu(self, menu_id: str) -> PredefinedMenu | None:
        return self.menus.get(menu_id)

    def save_predefined_menu(self, menu: PredefinedMenu) -> None:
        self.menus[menu.id] = menu

    def delete_predefined_menu(self, menu_id: str) -> None:
        self.menus.pop(menu_id, None)


@dataclass
class RecordingUnitOfWork(UnitOfWork):
    """Unit of work that counts the atomic blocks it opened."""

    entered: int = 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        self.entered += 1
        yield


def make_ingredient(
    ingredient_id: str,
    quantity: str,
    unit: str = "kg",
    price: str = "0",
    name: str | None = None,
) -> Ingredient:
    return Ingredient(
        id=ingredient_id,
        name=name or ingredient_id.capitalize(),
        quantity=Decimal(quantity),
        unit=unit,
        price_per_unit=Decimal(price),
    )


def make_dish(
    dish_id: str, category: str, ingredients: dict[str, str], name: str | None = None
) -> Dish:
    return Dish(
        id=dish_id,
        name=name or dish_id.replace("-", " ").capitalize(),
        category=category,
        servings=2,
        ingredients=[
            DishIngredient(ingredient_id=ingredient_id, quantity=Decimal(quantity))
            for ingredient_id, quantity in ingredients.items()
        ],
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(storage_backend="json", data_dir="unused", api_token=None)


@pytest.fixture
def repositories() -> Repositories:
    return Repositories(
        inventory=InMemoryInventoryRepository(),
        dishes=InMemoryDishRepository(),
        menus=InMemoryMenuRepository(),
        shopping_lists=InMemoryShoppingListRepository(),
        purchases=InMemoryPurchaseRepository(),
        predefined_menus=InMemoryPredefinedMenuRepository(),
        unit_of_work=RecordingUnitOfWork(),
    )


@pytest.fixture
def container(settings: Settings, repositories: Repositories) -> AppContainer:
    return build_services(settings, repositories)


@pytest.fixture
def inventory_repository(repositories: Repositories) -> InMemoryInventoryRepository:
    assert isinstance(repositories.inventory, InMemoryInventoryRepository)
    return repositories.inventory


@pytest.fixture
def dish_repository(repositories: Repositories) -> InMemoryDishRepository:
    assert isinstance(repositories.dishes, InMemoryDishRepository)
    return repositories.dishes
