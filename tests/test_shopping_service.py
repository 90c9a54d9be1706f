"""Tests for shopping list generation and purchases."""

from decimal import Decimal

import pytest

from meal_planner.containers import AppContainer
from meal_planner.domain.errors import NotFoundError, ValidationError
from meal_planner.domain.shopping import ShoppingItem
from tests.conftest import (
    InMemoryDishRepository,
    InMemoryInventoryRepository,
    make_dish,
    make_ingredient,
)

WEEK = "2024-03-04"


@pytest.fixture
def pollo_week(
    container: AppContainer,
    inventory_repository: InMemoryInventoryRepository,
    dish_repository: InMemoryDishRepository,
) -> AppContainer:
    inventory_repository.save_ingredient(
        make_ingredient("pollo", "0.1", price="8", name="Pollo")
    )
    inventory_repository.save_ingredient(
        make_ingredient("arroz", "1", price="2", name="Arroz")
    )
    dish_repository.save_dish(
        make_dish("arroz-con-pollo", "almuerzo", {"pollo": "0.4", "arroz": "0.25"})
    )
    container.menu_service.add_dish_to_menu(
        WEEK, "lunes", "almuerzo", "arroz-con-pollo"
    )
    return container


def test_generate_lists_only_shortfall(pollo_week: AppContainer) -> None:
    shopping_list = pollo_week.shopping_service.generate(WEEK)

    assert shopping_list.id == "shopping-2024-03-04"
    assert shopping_list.week_id == WEEK
    assert len(shopping_list.items) == 1
    item = shopping_list.items[0]
    assert item.ingredient_id == "pollo"
    assert item.name == "Pollo"
    assert item.quantity == Decimal("0.3")
    assert item.unit == "kg"
    assert item.purchased is False
    assert shopping_list.total_cost == Decimal("2.4")
    assert shopping_list.completed is False


def test_generate_uses_placeholders_for_unknown_ingredients(
    container: AppContainer, dish_repository: InMemoryDishRepository
) -> None:
    dish_repository.save_dish(make_dish("ensalada", "cena", {"lechuga": "1"}))
    container.menu_service.add_dish_to_menu(WEEK, "lunes", "cena", "ensalada")

    shopping_list = container.shopping_service.generate(WEEK)

    item = shopping_list.items[0]
    assert item.name == "Unknown ingredient"
    assert item.unit == "unit"
    assert item.price_per_unit == Decimal("0")
    assert item.quantity == Decimal("1")


def test_generate_for_empty_menu_is_empty(container: AppContainer) -> None:
    shopping_list = container.shopping_service.generate(WEEK)

    assert shopping_list.items == []
    assert shopping_list.total_cost == Decimal("0")
    assert shopping_list.completed is False


def test_generate_runs_in_one_atomic_block(
    container: AppContainer, repositories
) -> None:
    before = repositories.unit_of_work.entered

    container.shopping_service.generate("2024-03-11")

    assert repositories.unit_of_work.entered == before + 1
    assert container.shopping_service.get_shopping_list("2024-03-11") is not None


def test_manual_items_and_toggling(pollo_week: AppContainer) -> None:
    service = pollo_week.shopping_service
    service.generate(WEEK)

    shopping_list = service.add_manual_item(
        WEEK,
        ShoppingItem(
            ingredient_id="cafe",
            name="Café",
            quantity=Decimal("1"),
            unit="paquete",
            price_per_unit=Decimal("3.5"),
        ),
    )
    assert shopping_list.total_cost == Decimal("5.9")

    shopping_list = service.toggle_item_purchased(WEEK, 0)
    assert shopping_list.items[0].purchased is True
    assert shopping_list.completed is False

    shopping_list = service.toggle_item_purchased(WEEK, 1)
    assert shopping_list.completed is True

    shopping_list = service.remove_item(WEEK, 1)
    assert [item.ingredient_id for item in shopping_list.items] == ["pollo"]
    assert shopping_list.total_cost == Decimal("2.4")


def test_invalid_index_and_missing_list(pollo_week: AppContainer) -> None:
    service = pollo_week.shopping_service

    with pytest.raises(NotFoundError):
        service.toggle_item_purchased(WEEK, 0)

    service.generate(WEEK)
    with pytest.raises(ValidationError):
        service.remove_item(WEEK, 5)
    with pytest.raises(ValidationError):
        service.add_manual_item(
            WEEK,
            ShoppingItem("sal", "Sal", Decimal("0"), "kg", Decimal("1")),
        )


def test_complete_purchase_requires_all_items_bought(pollo_week: AppContainer) -> None:
    service = pollo_week.shopping_service
    service.generate(WEEK)

    assert service.complete_purchase(WEEK) is None
    assert service.list_purchases() == []


def test_complete_purchase_restocks_and_clears_list(
    pollo_week: AppContainer,
    inventory_repository: InMemoryInventoryRepository,
    repositories,
) -> None:
    service = pollo_week.shopping_service
    service.generate(WEEK)
    service.add_manual_item(
        WEEK,
        ShoppingItem("aceite", "Aceite", Decimal("1"), "l", Decimal("6")),
    )
    service.mark_all_purchased(WEEK)

    purchase = service.complete_purchase(WEEK)

    assert purchase is not None
    assert purchase.id.startswith("purchase-")
    assert purchase.week_id == WEEK
    assert purchase.total_cost == Decimal("8.4")
    assert [item.total_price for item in purchase.items] == [
        Decimal("2.4"),
        Decimal("6"),
    ]
    assert inventory_repository.ingredients["pollo"].quantity == Decimal("0.4")
    aceite = inventory_repository.ingredients["aceite"]
    assert aceite.name == "Aceite"
    assert aceite.unit == "l"
    assert aceite.quantity == Decimal("1")
    assert service.get_shopping_list(WEEK) is None
    assert service.list_purchases(WEEK) == [purchase]
    assert repositories.unit_of_work.entered >= 1

    regenerated = service.generate(WEEK)
    assert regenerated.items == []


def test_list_purchases_filters_by_week(pollo_week: AppContainer) -> None:
    service = pollo_week.shopping_service
    service.generate(WEEK)
    service.mark_all_purchased(WEEK)
    purchase = service.complete_purchase(WEEK)

    assert service.list_purchases("2024-03-06") == [purchase]
    assert service.list_purchases("2024-03-11") == []
