"""Meal planner API endpoints with optional token auth."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from meal_planner.api.schemas import (
    DishPayload,
    IngredientDraftPayload,
    IngredientPayload,
    MenuDishPayload,
    MenuReplacementPayload,
    PredefinedMenuPayload,
    ShoppingItemPayload,
    WeeklySnapshotPayload,
)
from meal_planner.config import parse_api_token
from meal_planner.domain.errors import NotFoundError
from meal_planner.serializers import (
    serialize_add_result,
    serialize_dish,
    serialize_ingredient,
    serialize_menu,
    serialize_predefined_menu,
    serialize_purchase,
    serialize_shopping_list,
    serialize_snapshot,
    serialize_summary,
)

if TYPE_CHECKING:
    from meal_planner.containers import AppContainer
    from meal_planner.domain.dishes import Dish


def _get_api_token(request: Request) -> str | None:
    container: AppContainer = request.app.state.container
    return parse_api_token(container.settings.api_token)


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str | None = Depends(_get_api_token),
) -> None:
    """Ensure requests carry the API token when one is configured."""
    if api_token is None:
        return
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(prefix="/api", dependencies=[Depends(require_token)])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


# Inventory


@router.get("/ingredients")
async def list_ingredients(request: Request) -> list[dict[str, object]]:
    """Return the current inventory."""
    ingredients = _container(request).inventory_service.get()
    return [serialize_ingredient(item) for item in ingredients]


@router.put("/ingredients/{ingredient_id}")
async def upsert_ingredient(
    ingredient_id: str, payload: IngredientPayload, request: Request
) -> dict[str, object]:
    """Insert or replace an ingredient."""
    container = _container(request)
    ingredient = payload.to_domain(
        ingredient_id, container.settings.default_category
    )
    return serialize_ingredient(container.inventory_service.upsert(ingredient))


@router.delete("/ingredients/{ingredient_id}", status_code=204)
async def delete_ingredient(ingredient_id: str, request: Request) -> None:
    _container(request).inventory_service.remove(ingredient_id)


@router.post("/ingredients/batch", status_code=201)
async def batch_add_ingredients(
    payload: list[IngredientDraftPayload], request: Request
) -> list[dict[str, object]]:
    """Create several ingredients at once."""
    created = _container(request).inventory_service.batch_add(
        [draft.to_domain() for draft in payload]
    )
    return [serialize_ingredient(item) for item in created]


# Dishes


@router.get("/dishes")
async def list_dishes(
    request: Request, category: str | None = None
) -> list[dict[str, object]]:
    """Return the catalog, optionally for one meal category."""
    catalog = _container(request).dish_catalog
    dishes = catalog.by_category(category) if category else catalog.list_all()
    return [serialize_dish(dish) for dish in dishes]


@router.get("/dishes/{dish_id}")
async def get_dish(dish_id: str, request: Request) -> dict[str, object]:
    return serialize_dish(_container(request).dish_catalog.require(dish_id))


@router.put("/dishes/{dish_id}")
async def upsert_dish(
    dish_id: str, payload: DishPayload, request: Request
) -> dict[str, object]:
    """Insert or replace a dish."""
    dish = _container(request).dish_catalog.save(payload.to_domain(dish_id))
    return serialize_dish(dish)


@router.delete("/dishes/{dish_id}", status_code=204)
async def delete_dish(dish_id: str, request: Request) -> None:
    _container(request).dish_catalog.remove(dish_id)


# Weekly menus


@router.get("/menus/current")
async def current_menu(request: Request) -> dict[str, object]:
    """Return the menu of the current week."""
    menus = _container(request).menu_service
    return serialize_menu(menus.get_menu_for_week(menus.current_week()))


@router.get("/menus/{week}")
async def get_menu(week: str, request: Request) -> dict[str, object]:
    """Return a week's menu, creating it when missing."""
    return serialize_menu(_container(request).menu_service.get_menu_for_week(week))


@router.post("/menus/{week}/dishes")
async def add_menu_dish(
    week: str, payload: MenuDishPayload, request: Request
) -> dict[str, object]:
    """Place a dish on the menu and report any shortage."""
    menus = _container(request).menu_service
    result = menus.add_dish_to_menu(week, payload.day, payload.meal, payload.dish_id)
    return {
        **serialize_add_result(result),
        "menu": serialize_menu(menus.get_menu_for_week(week)),
    }


@router.delete("/menus/{week}/dishes/{day}/{meal}/{dish_id}")
async def remove_menu_dish(
    week: str, day: str, meal: str, dish_id: str, request: Request
) -> dict[str, object]:
    """Remove a dish from the menu and restock its ingredients."""
    menu = _container(request).menu_service.remove_dish_from_menu(
        week, day, meal, dish_id
    )
    return serialize_menu(menu)


@router.put("/menus/{week}")
async def replace_menu(
    week: str, payload: MenuReplacementPayload, request: Request
) -> dict[str, object]:
    """Replace every dish of a week."""
    container = _container(request)
    days: dict[str, list[Dish]] = {
        day: [
            replace(container.dish_catalog.require(slot.dish_id), category=slot.meal)
            for slot in slots
        ]
        for day, slots in payload.days.items()
    }
    return serialize_menu(container.menu_service.replace_week_menu(week, days))


# Shopping lists


@router.post("/shopping/{week}/generate")
async def generate_shopping_list(week: str, request: Request) -> dict[str, object]:
    """Rebuild the week's shopping list from its menu."""
    shopping_list = _container(request).shopping_service.generate(week)
    return serialize_shopping_list(shopping_list)


@router.get("/shopping/{week}")
async def get_shopping_list(week: str, request: Request) -> dict[str, object]:
    shopping_list = _container(request).shopping_service.get_shopping_list(week)
    if shopping_list is None:
        raise NotFoundError(f"No shopping list for week {week}")
    return serialize_shopping_list(shopping_list)


@router.post("/shopping/{week}/items", status_code=201)
async def add_shopping_item(
    week: str, payload: ShoppingItemPayload, request: Request
) -> dict[str, object]:
    """Append a manual item to the list."""
    shopping_list = _container(request).shopping_service.add_manual_item(
        week, payload.to_domain()
    )
    return serialize_shopping_list(shopping_list)


@router.delete("/shopping/{week}/items/{index}")
async def remove_shopping_item(
    week: str, index: int, request: Request
) -> dict[str, object]:
    shopping_list = _container(request).shopping_service.remove_item(week, index)
    return serialize_shopping_list(shopping_list)


@router.post("/shopping/{week}/items/{index}/toggle")
async def toggle_shopping_item(
    week: str, index: int, request: Request
) -> dict[str, object]:
    shopping_list = _container(request).shopping_service.toggle_item_purchased(
        week, index
    )
    return serialize_shopping_list(shopping_list)


@router.post("/shopping/{week}/purchase-all")
async def mark_all_purchased(week: str, request: Request) -> dict[str, object]:
    shopping_list = _container(request).shopping_service.mark_all_purchased(week)
    return serialize_shopping_list(shopping_list)


@router.post("/shopping/{week}/complete")
async def complete_purchase(week: str, request: Request) -> dict[str, object]:
    """Record the purchase once every item is bought."""
    purchase = _container(request).shopping_service.complete_purchase(week)
    return {"purchase": serialize_purchase(purchase) if purchase else None}


# Purchases


@router.get("/purchases")
async def list_purchases(
    request: Request, week: str | None = None
) -> list[dict[str, object]]:
    """Return past purchases, newest first."""
    purchases = _container(request).shopping_service.list_purchases(week)
    return [serialize_purchase(purchase) for purchase in purchases]


@router.get("/purchases/stats")
async def purchase_stats(
    request: Request, week: str | None = None
) -> dict[str, object]:
    """Return spending totals."""
    return serialize_summary(_container(request).stats_service.summarize(week))


# Predefined menus


@router.get("/predefined-menus")
async def list_predefined_menus(request: Request) -> list[dict[str, object]]:
    menus = _container(request).predefined_menu_service.list_all()
    return [serialize_predefined_menu(menu) for menu in menus]


@router.post("/predefined-menus", status_code=201)
async def create_predefined_menu(
    payload: PredefinedMenuPayload, request: Request
) -> dict[str, object]:
    """Save a named template."""
    menu = _container(request).predefined_menu_service.create(
        payload.name, payload.slots
    )
    return serialize_predefined_menu(menu)


@router.delete("/predefined-menus/{menu_id}", status_code=204)
async def delete_predefined_menu(menu_id: str, request: Request) -> None:
    _container(request).predefined_menu_service.remove(menu_id)


@router.post("/predefined-menus/{menu_id}/apply/{week}")
async def apply_predefined_menu(
    menu_id: str, week: str, request: Request
) -> dict[str, object]:
    """Replace a week's menu with a template."""
    menu = _container(request).predefined_menu_service.apply(menu_id, week)
    return serialize_menu(menu)


# Week transfer


@router.get("/weeks/{week}/export")
async def export_week(week: str, request: Request) -> dict[str, object]:
    """Return everything stored for one week."""
    snapshot = _container(request).transfer_service.export_week(week)
    if snapshot is None:
        raise NotFoundError(f"No menu for week {week}")
    return serialize_snapshot(snapshot)


@router.post("/weeks/import")
async def import_week(
    payload: WeeklySnapshotPayload, request: Request
) -> dict[str, str]:
    """Merge an exported week into the store."""
    container = _container(request)
    snapshot = payload.to_domain(container.settings.default_category)
    container.transfer_service.import_week(snapshot)
    return {"status": "ok", "week": snapshot.week}
