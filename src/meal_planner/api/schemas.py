"""Pydantic models for API request payloads."""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from meal_planner.domain.dishes import (
    Dish,
    DishIngredient,
    normalize_day,
    validate_meal,
)
from meal_planner.domain.inventory import Ingredient, IngredientDraft
from meal_planner.domain.menus import (
    MenuWarnings,
    WeeklyMenu,
    empty_days,
    menu_id_for,
    week_start,
)
from meal_planner.domain.shopping import (
    Purchase,
    PurchaseItem,
    ShoppingItem,
    ShoppingList,
    WeeklySnapshot,
)
from meal_planner.serializers import parse_timestamp


class CamelModel(BaseModel):
    """Accepts camelCase keys as well as field names."""

    model_config = ConfigDict(populate_by_name=True)


class IngredientPayload(CamelModel):
    """Full ingredient record submitted for insert or replace."""

    name: str
    quantity: Decimal = Field(ge=0)
    unit: str
    price_per_unit: Decimal = Field(default=Decimal("0"), ge=0, alias="pricePerUnit")
    category: str | None = None
    is_package: bool = Field(default=False, alias="isPackage")
    price_total: Decimal | None = Field(default=None, ge=0, alias="priceTotal")

    def to_domain(self, ingredient_id: str, default_category: str) -> Ingredient:
        return Ingredient(
            id=ingredient_id,
            name=self.name,
            quantity=self.quantity,
            unit=self.unit,
            price_per_unit=self.price_per_unit,
            category=self.category or default_category,
            is_package=self.is_package,
            price_total=self.price_total,
        )


class IngredientDraftPayload(CamelModel):
    """Ingredient without an id, for batch creation."""

    name: str
    unit: str
    quantity: Decimal = Field(ge=0)
    price_per_unit: Decimal | None = Field(default=None, alias="pricePerUnit")
    category: str | None = None
    is_package: bool = Field(default=False, alias="isPackage")
    price_total: Decimal | None = Field(default=None, alias="priceTotal")

    def to_domain(self) -> IngredientDraft:
        return IngredientDraft(
            name=self.name,
            unit=self.unit,
            quantity=self.quantity,
            price_per_unit=self.price_per_unit,
            category=self.category,
            is_package=self.is_package,
            price_total=self.price_total,
        )


class DishIngredientPayload(CamelModel):
    ingredient_id: str = Field(alias="ingredientId")
    quantity: Decimal = Field(gt=0)


class DishPayload(CamelModel):
    """Recipe submitted for insert or replace."""

    name: str
    category: str
    servings: int = Field(default=1, ge=1)
    ingredients: list[DishIngredientPayload] = Field(default_factory=list)

    def to_domain(self, dish_id: str) -> Dish:
        return Dish(
            id=dish_id,
            name=self.name,
            category=self.category,
            servings=self.servings,
            ingredients=[
                DishIngredient(ingredient_id=item.ingredient_id, quantity=item.quantity)
                for item in self.ingredients
            ],
        )


class MenuDishPayload(CamelModel):
    """Placement of one dish on a day and meal."""

    day: str
    meal: str
    dish_id: str = Field(alias="dishId")


class MenuSlotPayload(CamelModel):
    meal: str
    dish_id: str = Field(alias="dishId")


class MenuReplacementPayload(CamelModel):
    """Dishes to place on each day, replacing the current menu."""

    days: dict[str, list[MenuSlotPayload]]


class ShoppingItemPayload(CamelModel):
    """Manually added shopping list line."""

    ingredient_id: str = Field(alias="ingredientId")
    name: str
    quantity: Decimal = Field(gt=0)
    unit: str
    price_per_unit: Decimal = Field(default=Decimal("0"), ge=0, alias="pricePerUnit")

    def to_domain(self) -> ShoppingItem:
        return ShoppingItem(
            ingredient_id=self.ingredient_id,
            name=self.name,
            quantity=self.quantity,
            unit=self.unit,
            price_per_unit=self.price_per_unit,
        )


class PredefinedMenuPayload(CamelModel):
    """Template name and ``{day: {meal: dish_id}}`` selections."""

    name: str
    slots: dict[str, dict[str, str]]


class SnapshotIngredientPayload(IngredientPayload):
    id: str = Field(min_length=1)


class SnapshotDishPayload(DishPayload):
    id: str = Field(min_length=1)


class SnapshotMenuPayload(CamelModel):
    """Exported menu; its week is taken from the enclosing snapshot."""

    days: dict[str, list[SnapshotDishPayload]] = Field(default_factory=dict)
    warnings: MenuWarnings = Field(default_factory=dict)

    def to_domain(self, week: str) -> WeeklyMenu:
        days = empty_days()
        for day, dishes in self.days.items():
            days[normalize_day(day)] = [
                replace(dish.to_domain(dish.id), category=validate_meal(dish.category))
                for dish in dishes
            ]
        return WeeklyMenu(
            id=menu_id_for(week),
            week=week,
            days=days,
            warnings=self.warnings,
        )


class SnapshotShoppingItemPayload(ShoppingItemPayload):
    purchased: bool = False

    def to_domain(self) -> ShoppingItem:
        return replace(super().to_domain(), purchased=self.purchased)


class SnapshotShoppingListPayload(CamelModel):
    id: str = ""
    week_id: str | None = Field(default=None, alias="weekId")
    items: list[SnapshotShoppingItemPayload] = Field(default_factory=list)
    created_at: datetime | None = Field(default=None, alias="createdAt")

    def to_domain(self, week: str) -> ShoppingList:
        shopping_list = ShoppingList(
            id=self.id,
            week_id=week_start(self.week_id or week),
            items=[item.to_domain() for item in self.items],
            total_cost=Decimal("0"),
            completed=False,
            created_at=parse_timestamp(self.created_at),
        )
        shopping_list.refresh_totals()
        return shopping_list


class SnapshotPurchaseItemPayload(CamelModel):
    ingredient_id: str = Field(alias="ingredientId")
    name: str = ""
    quantity: Decimal = Field(gt=0)
    unit: str = ""
    price_per_unit: Decimal = Field(default=Decimal("0"), ge=0, alias="pricePerUnit")
    total_price: Decimal = Field(default=Decimal("0"), ge=0, alias="totalPrice")

    def to_domain(self) -> PurchaseItem:
        return PurchaseItem(
            ingredient_id=self.ingredient_id,
            name=self.name,
            quantity=self.quantity,
            unit=self.unit,
            price_per_unit=self.price_per_unit,
            total_price=self.total_price,
        )


class SnapshotPurchasePayload(CamelModel):
    id: str = Field(min_length=1)
    week_id: str = Field(alias="weekId")
    items: list[SnapshotPurchaseItemPayload] = Field(default_factory=list)
    total_cost: Decimal = Field(default=Decimal("0"), ge=0, alias="totalCost")
    date: datetime | None = None

    def to_domain(self) -> Purchase:
        return Purchase(
            id=self.id,
            week_id=week_start(self.week_id),
            items=[item.to_domain() for item in self.items],
            total_cost=self.total_cost,
            date=parse_timestamp(self.date),
        )


class WeeklySnapshotPayload(CamelModel):
    """Exported week: ``{week, menu, inventory, shoppingList, purchases}``.

    Stock and prices must be non-negative and recipe quantities positive.
    A missing shopping list imports as an empty one with no id, which the
    merge skips.
    """

    week: str
    menu: SnapshotMenuPayload
    inventory: list[SnapshotIngredientPayload] = Field(default_factory=list)
    shopping_list: SnapshotShoppingListPayload | None = Field(
        default=None, alias="shoppingList"
    )
    purchases: list[SnapshotPurchasePayload] = Field(default_factory=list)

    def to_domain(self, default_category: str) -> WeeklySnapshot:
        week = week_start(self.week)
        shopping_list = self.shopping_list or SnapshotShoppingListPayload()
        return WeeklySnapshot(
            week=week,
            menu=self.menu.to_domain(week),
            inventory=[
                item.to_domain(item.id, default_category) for item in self.inventory
            ],
            shopping_list=shopping_list.to_domain(week),
            purchases=[purchase.to_domain() for purchase in self.purchases],
        )
