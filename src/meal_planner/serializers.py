"""JSON wire format for meal planner records.

Keys are camelCase so exported weeks stay compatible with files written by
the browser version of the planner: ``{week, menu, inventory, shoppingList,
purchases}``.
"""

from datetime import UTC, datetime

from meal_planner.domain.dishes import DAYS_OF_WEEK, Dish, DishIngredient
from meal_planner.domain.errors import ValidationError
from meal_planner.domain.inventory import DEFAULT_CATEGORY, Ingredient
from meal_planner.domain.menus import (
    AddDishResult,
    MenuWarnings,
    PredefinedMenu,
    WeeklyMenu,
    menu_id_for,
    week_start,
)
from meal_planner.domain.quantities import to_decimal, to_number
from meal_planner.domain.shopping import (
    Purchase,
    PurchaseItem,
    PurchaseSummary,
    ShoppingItem,
    ShoppingList,
    WeeklySnapshot,
)


def serialize_ingredient(ingredient: Ingredient) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": ingredient.id,
        "name": ingredient.name,
        "quantity": to_number(ingredient.quantity),
        "unit": ingredient.unit,
        "pricePerUnit": to_number(ingredient.price_per_unit),
        "category": ingredient.category,
        "isPackage": ingredient.is_package,
    }
    if ingredient.price_total is not None:
        payload["priceTotal"] = to_number(ingredient.price_total)
    return payload


def parse_ingredient(data: dict[str, object]) -> Ingredient:
    price_total = data.get("priceTotal")
    return Ingredient(
        id=_required_str(data, "id"),
        name=_required_str(data, "name"),
        quantity=to_decimal(data.get("quantity")),
        unit=str(data.get("unit") or ""),
        price_per_unit=to_decimal(data.get("pricePerUnit")),
        category=str(data.get("category") or DEFAULT_CATEGORY),
        is_package=bool(data.get("isPackage", False)),
        price_total=to_decimal(price_total) if price_total is not None else None,
    )


def serialize_dish(dish: Dish) -> dict[str, object]:
    return {
        "id": dish.id,
        "name": dish.name,
        "category": dish.category,
        "servings": dish.servings,
        "ingredients": [
            {
                "ingredientId": item.ingredient_id,
                "quantity": to_number(item.quantity),
            }
            for item in dish.ingredients
        ],
    }


def parse_dish(data: dict[str, object]) -> Dish:
    raw_ingredients = data.get("ingredients") or []
    if not isinstance(raw_ingredients, list):
        raise ValidationError("Dish ingredients must be a list")
    return Dish(
        id=_required_str(data, "id"),
        name=_required_str(data, "name"),
        category=_required_str(data, "category"),
        servings=int(data.get("servings") or 1),
        ingredients=[
            DishIngredient(
                ingredient_id=_required_str(item, "ingredientId"),
                quantity=to_decimal(item.get("quantity")),
            )
            for item in raw_ingredients
        ],
    )


def serialize_menu(menu: WeeklyMenu) -> dict[str, object]:
    return {
        "id": menu.id,
        "week": menu.week,
        "days": {
            day: [serialize_dish(dish) for dish in menu.days.get(day, [])]
            for day in DAYS_OF_WEEK
        },
        "warnings": menu.warnings,
    }


def parse_menu(data: dict[str, object]) -> WeeklyMenu:
    normalized = week_start(_required_str(data, "week"))
    raw_days = data.get("days") or {}
    if not isinstance(raw_days, dict):
        raise ValidationError("Menu days must be an object")
    days: dict[str, list[Dish]] = {day: [] for day in DAYS_OF_WEEK}
    for day, dishes in raw_days.items():
        if day in days:
            days[day] = [parse_dish(dish) for dish in dishes or []]
    return WeeklyMenu(
        id=menu_id_for(normalized),
        week=normalized,
        days=days,
        warnings=_parse_warnings(data.get("warnings")),
    )


def serialize_add_result(result: AddDishResult) -> dict[str, object]:
    return {
        "warning": result.warning,
        "missingIngredients": result.missing_ingredients,
        "added": result.added,
    }


def serialize_shopping_item(item: ShoppingItem) -> dict[str, object]:
    return {
        "ingredientId": item.ingredient_id,
        "name": item.name,
        "quantity": to_number(item.quantity),
        "unit": item.unit,
        "pricePerUnit": to_number(item.price_per_unit),
        "purchased": item.purchased,
    }


def parse_shopping_item(data: dict[str, object]) -> ShoppingItem:
    return ShoppingItem(
        ingredient_id=_required_str(data, "ingredientId"),
        name=_required_str(data, "name"),
        quantity=to_decimal(data.get("quantity")),
        unit=str(data.get("unit") or ""),
        price_per_unit=to_decimal(data.get("pricePerUnit")),
        purchased=bool(data.get("purchased", False)),
    )


def serialize_shopping_list(shopping_list: ShoppingList) -> dict[str, object]:
    return {
        "id": shopping_list.id,
        "weekId": shopping_list.week_id,
        "items": [serialize_shopping_item(item) for item in shopping_list.items],
        "totalCost": to_number(shopping_list.total_cost),
        "completed": shopping_list.completed,
        "createdAt": shopping_list.created_at.isoformat(),
    }


def parse_shopping_list(data: dict[str, object]) -> ShoppingList:
    shopping_list = ShoppingList(
        id=str(data.get("id") or ""),
        week_id=week_start(_required_str(data, "weekId")),
        items=[parse_shopping_item(item) for item in data.get("items") or []],
        total_cost=to_decimal(data.get("totalCost")),
        completed=bool(data.get("completed", False)),
        created_at=parse_timestamp(data.get("createdAt")),
    )
    shopping_list.refresh_totals()
    return shopping_list


def serialize_purchase(purchase: Purchase) -> dict[str, object]:
    return {
        "id": purchase.id,
        "weekId": purchase.week_id,
        "items": [
            {
                "ingredientId": item.ingredient_id,
                "name": item.name,
                "quantity": to_number(item.quantity),
                "unit": item.unit,
                "pricePerUnit": to_number(item.price_per_unit),
                "totalPrice": to_number(item.total_price),
            }
            for item in purchase.items
        ],
        "totalCost": to_number(purchase.total_cost),
        "date": purchase.date.isoformat(),
    }


def parse_purchase(data: dict[str, object]) -> Purchase:
    items = [
        PurchaseItem(
            ingredient_id=_required_str(item, "ingredientId"),
            name=str(item.get("name") or ""),
            quantity=to_decimal(item.get("quantity")),
            unit=str(item.get("unit") or ""),
            price_per_unit=to_decimal(item.get("pricePerUnit")),
            total_price=to_decimal(item.get("totalPrice")),
        )
        for item in data.get("items") or []
    ]
    return Purchase(
        id=_required_str(data, "id"),
        week_id=week_start(_required_str(data, "weekId")),
        items=items,
        total_cost=to_decimal(data.get("totalCost")),
        date=parse_timestamp(data.get("date")),
    )


def serialize_summary(summary: PurchaseSummary) -> dict[str, object]:
    return {
        "purchaseCount": summary.purchase_count,
        "totalSpent": to_number(summary.total_spent),
        "averageSpent": to_number(summary.average_spent),
        "totalItems": summary.total_items,
    }


def serialize_predefined_menu(menu: PredefinedMenu) -> dict[str, object]:
    return {
        "id": menu.id,
        "name": menu.name,
        "days": {
            day: [serialize_dish(dish) for dish in dishes]
            for day, dishes in menu.days.items()
        },
    }


def parse_predefined_menu(data: dict[str, object]) -> PredefinedMenu:
    raw_days = data.get("days") or {}
    return PredefinedMenu(
        id=_required_str(data, "id"),
        name=_required_str(data, "name"),
        days={
            day: [parse_dish(dish) for dish in dishes or []]
            for day, dishes in raw_days.items()
        },
    )


def serialize_snapshot(snapshot: WeeklySnapshot) -> dict[str, object]:
    return {
        "week": snapshot.week,
        "menu": serialize_menu(snapshot.menu),
        "inventory": [serialize_ingredient(item) for item in snapshot.inventory],
        "shoppingList": serialize_shopping_list(snapshot.shopping_list),
        "purchases": [serialize_purchase(p) for p in snapshot.purchases],
    }


def parse_timestamp(value: object) -> datetime:
    """Parse an ISO timestamp, treating naive values as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise ValidationError(f"Invalid timestamp: {value!r}") from exc
    else:
        return datetime.now(tz=UTC)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_warnings(value: object) -> MenuWarnings:
    if not isinstance(value, dict):
        return {}
    warnings: MenuWarnings = {}
    for day, meals in value.items():
        if not isinstance(meals, dict):
            continue
        for meal, dishes in meals.items():
            if not isinstance(dishes, dict):
                continue
            warnings.setdefault(day, {})[meal] = {
                dish_id: [str(name) for name in missing] if missing else None
                for dish_id, missing in dishes.items()
            }
    return warnings


def _required_str(data: dict[str, object], key: str) -> str:
    value = data.get(key)
    if value is None or str(value).strip() == "":
        raise ValidationError(f"Missing field: {key}")
    return str(value)
