"""Supabase repository for the ingredient inventory."""

from dataclasses import dataclass

from supabase import Client

from meal_planner.adapters.supabase_support import execute
from meal_planner.domain.inventory import DEFAULT_CATEGORY, Ingredient
from meal_planner.domain.quantities import to_decimal, to_number
from meal_planner.services.inventory import InventoryRepository


@dataclass
class SupabaseIngredientRepository(InventoryRepository):
    """Supabase-backed ingredient repository."""

    client: Client

    def load_ingredients(self) -> list[Ingredient]:
        """Return every ingredient ordered by name."""
        response = execute(
            self.client.table("ingredients").select("*").order("name"),
            "load ingredients",
        )
        return [_parse_ingredient(row) for row in response.data or []]

    def save_ingredient(self, ingredient: Ingredient) -> None:
        """Insert or replace an ingredient row."""
        execute(
            self.client.table("ingredients").upsert(
                {
                    "id": ingredient.id,
                    "name": ingredient.name,
                    "quantity": to_number(ingredient.quantity),
                    "unit": ingredient.unit,
                    "price_per_unit": to_number(ingredient.price_per_unit),
                    "category": ingredient.category,
                    "is_package": ingredient.is_package,
                    "price_total": to_number(ingredient.price_total)
                    if ingredient.price_total is not None
                    else None,
                }
            ),
            "save ingredient",
        )

    def delete_ingredient(self, ingredient_id: str) -> None:
        """Delete an ingredient row."""
        execute(
            self.client.table("ingredients").delete().eq("id", ingredient_id),
            "delete ingredient",
        )


def _parse_ingredient(row: dict[str, object]) -> Ingredient:
    price_total = row.get("price_total")
    return Ingredient(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        quantity=to_decimal(row.get("quantity")),
        unit=str(row.get("unit") or ""),
        price_per_unit=to_decimal(row.get("price_per_unit")),
        category=str(row.get("category") or DEFAULT_CATEGORY),
        is_package=bool(row.get("is_package")),
        price_total=to_decimal(price_total) if price_total is not None else None,
    )
