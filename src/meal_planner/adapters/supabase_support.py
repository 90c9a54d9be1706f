"""Shared helpers for Supabase-backed repositories."""

from dataclasses import replace
from typing import Any

import httpx
from postgrest.exceptions import APIError

from meal_planner.domain.dishes import DAYS_OF_WEEK, Dish
from meal_planner.domain.errors import PersistenceError
from meal_planner.domain.menus import empty_days
from meal_planner.serializers import parse_dish, serialize_dish


def execute(query: Any, action: str) -> Any:
    """Run a query builder, converting backend errors into PersistenceError."""
    try:
        return query.execute()
    except APIError as exc:
        raise PersistenceError(f"Failed to {action}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise PersistenceError(f"Failed to {action}: {exc}") from exc


def dish_rows(
    owner_column: str, owner_id: str, days: dict[str, list[Dish]]
) -> list[dict[str, object]]:
    """Flatten a day-to-dishes mapping into ordered dish rows."""
    rows: list[dict[str, object]] = []
    for day, dishes in days.items():
        for index, dish in enumerate(dishes):
            rows.append(
                {
                    owner_column: owner_id,
                    "day_of_week": day,
                    "meal": dish.category,
                    "meal_order": index + 1,
                    "dish_id": dish.id,
                    "dish_snapshot": serialize_dish(dish),
                }
            )
    return rows


def group_days(rows: list[dict[str, object]]) -> dict[str, list[Dish]]:
    """Rebuild the day-to-dishes mapping, skipping unknown days."""
    days = empty_days()
    for row in rows:
        day = str(row.get("day_of_week", ""))
        if day not in DAYS_OF_WEEK:
            continue
        dish = parse_dish(row.get("dish_snapshot") or {})
        days[day].append(replace(dish, category=str(row.get("meal") or dish.category)))
    return days
