"""Supabase repository for the dish catalog."""

from dataclasses import dataclass

from supabase import Client

from meal_planner.adapters.supabase_support import execute
from meal_planner.domain.dishes import Dish, DishIngredient
from meal_planner.domain.quantities import to_decimal, to_number
from meal_planner.services.dishes import DishRepository


@dataclass
class SupabaseDishRepository(DishRepository):
    """Supabase-backed dish repository with normalized ingredient rows."""

    client: Client

    def load_dish(self, dish_id: str) -> Dish | None:
        """Return a dish with its ingredients."""
        response = execute(
            self.client.table("dishes").select("*").eq("id", dish_id).limit(1),
            "load dish",
        )
        if not response.data:
            return None
        return self._attach_ingredients(response.data)[0]

    def load_dishes_by_category(self, category: str) -> list[Dish]:
        """Return dishes of one meal category."""
        response = execute(
            self.client.table("dishes")
            .select("*")
            .eq("category", category)
            .order("name"),
            "load dishes",
        )
        return self._attach_ingredients(response.data or [])

    def list_dishes(self) -> list[Dish]:
        """Return every dish."""
        response = execute(
            self.client.table("dishes").select("*").order("name"), "load dishes"
        )
        return self._attach_ingredients(response.data or [])

    def save_dish(self, dish: Dish) -> None:
        """Upsert the dish row and replace its ingredient rows."""
        execute(
            self.client.table("dishes").upsert(
                {
                    "id": dish.id,
                    "name": dish.name,
                    "category": dish.category,
                    "servings": dish.servings,
                }
            ),
            "save dish",
        )
        execute(
            self.client.table("dish_ingredients").delete().eq("dish_id", dish.id),
            "clear dish ingredients",
        )
        if dish.ingredients:
            execute(
                self.client.table("dish_ingredients").insert(
                    [
                        {
                            "dish_id": dish.id,
                            "ingredient_id": item.ingredient_id,
                            "quantity": to_number(item.quantity),
                        }
                        for item in dish.ingredients
                    ]
                ),
                "save dish ingredients",
            )

    def delete_dish(self, dish_id: str) -> None:
        """Delete a dish and its ingredient rows."""
        execute(
            self.client.table("dish_ingredients").delete().eq("dish_id", dish_id),
            "delete dish ingredients",
        )
        execute(
            self.client.table("dishes").delete().eq("id", dish_id), "delete dish"
        )

    def _attach_ingredients(self, rows: list[dict[str, object]]) -> list[Dish]:
        if not rows:
            return []
        dish_ids = [str(row["id"]) for row in rows]
        response = execute(
            self.client.table("dish_ingredients")
            .select("dish_id, ingredient_id, quantity")
            .in_("dish_id", dish_ids),
            "load dish ingredients",
        )
        grouped: dict[str, list[DishIngredient]] = {dish_id: [] for dish_id in dish_ids}
        for item in response.data or []:
            grouped.setdefault(str(item["dish_id"]), []).append(
                DishIngredient(
                    ingredient_id=str(item["ingredient_id"]),
                    quantity=to_decimal(item.get("quantity")),
                )
            )
        return [
            Dish(
                id=str(row["id"]),
                name=str(row.get("name", "")),
                category=str(row.get("category", "")),
                servings=int(row.get("servings") or 1),
                ingredients=grouped[str(row["id"])],
            )
            for row in rows
        ]
