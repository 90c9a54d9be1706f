"""Tests for weekly menu reconciliation."""

from datetime import date
from decimal import Decimal

import pytest

from meal_planner.containers import AppContainer
from meal_planner.domain.errors import NotFoundError, ValidationError
from tests.conftest import (
    InMemoryDishRepository,
    InMemoryInventoryRepository,
    make_dish,
    make_ingredient,
)

WEEK = "2024-03-04"


def _stock(inventory: InMemoryInventoryRepository, ingredient_id: str) -> Decimal:
    return inventory.ingredients[ingredient_id].quantity


def test_shortage_is_reported_and_stock_kept(
    container: AppContainer,
    inventory_repository: InMemoryInventoryRepository,
    dish_repository: InMemoryDishRepository,
) -> None:
    inventory_repository.save_ingredient(
        make_ingredient("huevos", "2", unit="unidades", name="Huevos")
    )
    dish_repository.save_dish(
        make_dish("dish-001", "desayuno", {"huevos": "3"}, name="Huevos Revueltos")
    )

    result = container.menu_service.add_dish_to_menu(
        WEEK, "lunes", "desayuno", "dish-001"
    )

    assert result.warning is True
    assert result.missing_ingredients == ["Huevos"]
    assert result.added is True
    assert _stock(inventory_repository, "huevos") == Decimal("2")
    menu = container.menu_service.get_menu_for_week(WEEK)
    assert [dish.id for dish in menu.days["lunes"]] == ["dish-001"]
    assert menu.warnings["lunes"]["desayuno"]["dish-001"] == ["Huevos"]


def test_add_then_remove_restores_stock(
    container: AppContainer,
    inventory_repository: InMemoryInventoryRepository,
    dish_repository: InMemoryDishRepository,
) -> None:
    inventory_repository.save_ingredient(make_ingredient("arroz", "1"))
    dish_repository.save_dish(make_dish("arroz-blanco", "almuerzo", {"arroz": "0.25"}))
    menus = container.menu_service

    result = menus.add_dish_to_menu(WEEK, "martes", "almuerzo", "arroz-blanco")

    assert result.warning is False
    assert result.missing_ingredients == []
    assert _stock(inventory_repository, "arroz") == Decimal("0.75")

    menu = menus.remove_dish_from_menu(WEEK, "martes", "almuerzo", "arroz-blanco")

    assert menu.days["martes"] == []
    assert _stock(inventory_repository, "arroz") == Decimal("1")
    assert "arroz-blanco" not in menu.warnings.get("martes", {}).get("almuerzo", {})


def test_conservation_over_repeated_add_and_remove(
    container: AppContainer,
    inventory_repository: InMemoryInventoryRepository,
    dish_repository: InMemoryDishRepository,
) -> None:
    inventory_repository.save_ingredient(make_ingredient("pasta", "1"))
    inventory_repository.save_ingredient(make_ingredient("tomate", "0.3"))
    dish_repository.save_dish(
        make_dish("macarrones", "cena", {"pasta": "0.2", "tomate": "0.1"})
    )
    menus = container.menu_service

    for _ in range(3):
        menus.add_dish_to_menu(WEEK, "viernes", "cena", "macarrones")
        menus.remove_dish_from_menu(WEEK, "viernes", "cena", "macarrones")

    assert _stock(inventory_repository, "pasta") == Decimal("1")
    assert _stock(inventory_repository, "tomate") == Decimal("0.3")


def test_readding_present_dish_is_a_no_op(
    container: AppContainer,
    inventory_repository: InMemoryInventoryRepository,
    dish_repository: InMemoryDishRepository,
) -> None:
    inventory_repository.save_ingredient(make_ingredient("arroz", "1"))
    dish_repository.save_dish(make_dish("arroz-blanco", "almuerzo", {"arroz": "0.25"}))
    menus = container.menu_service
    menus.add_dish_to_menu(WEEK, "lunes", "almuerzo", "arroz-blanco")

    again = menus.add_dish_to_menu(WEEK, "lunes", "almuerzo", "arroz-blanco")

    assert again.added is False
    assert again.warning is False
    assert _stock(inventory_repository, "arroz") == Decimal("0.75")
    assert len(menus.get_menu_for_week(WEEK).days["lunes"]) == 1


def test_same_dish_on_different_days_consumes_twice(
    container: AppContainer,
    inventory_repository: InMemoryInventoryRepository,
    dish_repository: InMemoryDishRepository,
) -> None:
    inventory_repository.save_ingredient(make_ingredient("arroz", "1"))
    dish_repository.save_dish(make_dish("arroz-blanco", "almuerzo", {"arroz": "0.25"}))
    menus = container.menu_service

    menus.add_dish_to_menu(WEEK, "lunes", "almuerzo", "arroz-blanco")
    menus.add_dish_to_menu(WEEK, "jueves", "cena", "arroz-blanco")

    assert _stock(inventory_repository, "arroz") == Decimal("0.5")
    menu = menus.get_menu_for_week(WEEK)
    assert menu.days["jueves"][0].category == "cena"


def test_unknown_dish_raises_without_side_effects(
    container: AppContainer,
    inventory_repository: InMemoryInventoryRepository,
) -> None:
    inventory_repository.save_ingredient(make_ingredient("arroz", "1"))

    with pytest.raises(NotFoundError):
        container.menu_service.add_dish_to_menu(WEEK, "lunes", "cena", "dish-404")

    assert _stock(inventory_repository, "arroz") == Decimal("1")


def test_invalid_day_or_meal_is_rejected(container: AppContainer) -> None:
    with pytest.raises(ValidationError):
        container.menu_service.add_dish_to_menu(WEEK, "someday", "cena", "x")
    with pytest.raises(ValidationError):
        container.menu_service.add_dish_to_menu(WEEK, "lunes", "brunch", "x")


def test_remove_absent_dish_returns_menu_unchanged(
    container: AppContainer,
    inventory_repository: InMemoryInventoryRepository,
) -> None:
    inventory_repository.save_ingredient(make_ingredient("arroz", "1"))

    menu = container.menu_service.remove_dish_from_menu(
        WEEK, "lunes", "cena", "arroz-blanco"
    )

    assert all(dishes == [] for dishes in menu.days.values())
    assert _stock(inventory_repository, "arroz") == Decimal("1")


def test_remove_only_matches_the_given_meal(
    container: AppContainer,
    inventory_repository: InMemoryInventoryRepository,
    dish_repository: InMemoryDishRepository,
) -> None:
    inventory_repository.save_ingredient(make_ingredient("arroz", "1"))
    dish_repository.save_dish(make_dish("arroz-blanco", "almuerzo", {"arroz": "0.25"}))
    menus = container.menu_service
    menus.add_dish_to_menu(WEEK, "lunes", "almuerzo", "arroz-blanco")

    menu = menus.remove_dish_from_menu(WEEK, "lunes", "cena", "arroz-blanco")

    assert len(menu.days["lunes"]) == 1
    assert _stock(inventory_repository, "arroz") == Decimal("0.75")


def test_load_week_menu_is_idempotent(container: AppContainer, repositories) -> None:
    menus = container.menu_service

    first = menus.load_week_menu(WEEK)
    second = menus.load_week_menu(WEEK)

    assert first == second
    assert repositories.menus.saves == 1


def test_week_is_normalized_to_monday(container: AppContainer) -> None:
    menu = container.menu_service.get_menu_for_week(date(2024, 3, 7))

    assert menu.week == "2024-03-04"
    assert menu.id == "menu-2024-03-04"
    assert set(menu.days) == {
        "lunes",
        "martes",
        "miercoles",
        "jueves",
        "viernes",
        "sabado",
        "domingo",
    }


def test_week_strings_must_be_whole_dates(container: AppContainer) -> None:
    menus = container.menu_service

    assert menus.get_menu_for_week(" 2024-03-07 ").week == "2024-03-04"
    assert menus.get_menu_for_week("2024-03-07T18:30:00Z").week == "2024-03-04"
    for bad in ("2024-03-04xyz", "2024-03-0", "next monday"):
        with pytest.raises(ValidationError):
            menus.get_menu_for_week(bad)


def test_replace_week_menu_restores_then_consumes(
    container: AppContainer,
    inventory_repository: InMemoryInventoryRepository,
    dish_repository: InMemoryDishRepository,
) -> None:
    inventory_repository.save_ingredient(make_ingredient("arroz", "1"))
    inventory_repository.save_ingredient(make_ingredient("huevos", "4"))
    arroz = make_dish("arroz-blanco", "almuerzo", {"arroz": "0.5"})
    tortilla = make_dish("tortilla", "cena", {"huevos": "3"})
    dish_repository.save_dish(arroz)
    dish_repository.save_dish(tortilla)
    menus = container.menu_service
    menus.add_dish_to_menu(WEEK, "lunes", "almuerzo", "arroz-blanco")

    menu = menus.replace_week_menu(
        WEEK, {"martes": [tortilla], "Miércoles": [tortilla]}
    )

    assert menu.days["lunes"] == []
    assert [dish.id for dish in menu.days["martes"]] == ["tortilla"]
    assert [dish.id for dish in menu.days["miercoles"]] == ["tortilla"]
    assert _stock(inventory_repository, "arroz") == Decimal("1")
    assert _stock(inventory_repository, "huevos") == Decimal("1")
    assert menu.warnings["miercoles"]["cena"]["tortilla"] == ["Huevos"]


def test_replace_week_menu_with_unknown_dish_changes_nothing(
    container: AppContainer,
    inventory_repository: InMemoryInventoryRepository,
    dish_repository: InMemoryDishRepository,
) -> None:
    inventory_repository.save_ingredient(make_ingredient("arroz", "1"))
    dish_repository.save_dish(make_dish("arroz-blanco", "almuerzo", {"arroz": "0.5"}))
    menus = container.menu_service
    menus.add_dish_to_menu(WEEK, "lunes", "almuerzo", "arroz-blanco")

    with pytest.raises(NotFoundError):
        menus.replace_week_menu(
            WEEK, {"martes": [make_dish("ghost", "cena", {"arroz": "0.1"})]}
        )

    assert _stock(inventory_repository, "arroz") == Decimal("0.5")
    assert len(menus.get_menu_for_week(WEEK).days["lunes"]) == 1
