"""Supabase repositories for shopping lists and the purchase ledger."""

from dataclasses import dataclass

from supabase import Client

from meal_planner.adapters.supabase_support import execute
from meal_planner.domain.quantities import to_decimal, to_number
from meal_planner.domain.shopping import (
    Purchase,
    PurchaseItem,
    ShoppingItem,
    ShoppingList,
)
from meal_planner.serializers import parse_timestamp
from meal_planner.services.shopping import PurchaseRepository, ShoppingListRepository


@dataclass
class SupabaseShoppingListRepository(ShoppingListRepository):
    """Stores one shopping list per week with positioned item rows."""

    client: Client

    def load_shopping_list(self, week: str) -> ShoppingList | None:
        """Return the week's list with items in position order."""
        response = execute(
            self.client.table("shopping_lists")
            .select("*, shopping_items(*)")
            .eq("week_id", week)
            .limit(1),
            "load shopping list",
        )
        if not response.data:
            return None
        row = response.data[0]
        item_rows = sorted(
            row.get("shopping_items") or [],
            key=lambda item: int(item.get("position") or 0),
        )
        shopping_list = ShoppingList(
            id=str(row["id"]),
            week_id=str(row["week_id"]),
            items=[_parse_shopping_item(item) for item in item_rows],
            total_cost=to_decimal(row.get("total_cost")),
            completed=bool(row.get("completed")),
            created_at=parse_timestamp(row.get("created_at")),
        )
        shopping_list.refresh_totals()
        return shopping_list

    def save_shopping_list(self, shopping_list: ShoppingList) -> None:
        """Upsert the list row and replace its items."""
        execute(
            self.client.table("shopping_lists").upsert(
                {
                    "id": shopping_list.id,
                    "week_id": shopping_list.week_id,
                    "total_cost": to_number(shopping_list.total_cost),
                    "completed": shopping_list.completed,
                    "created_at": shopping_list.created_at.isoformat(),
                }
            ),
            "save shopping list",
        )
        execute(
            self.client.table("shopping_items")
            .delete()
            .eq("shopping_list_id", shopping_list.id),
            "clear shopping items",
        )
        if not shopping_list.items:
            return
        execute(
            self.client.table("shopping_items").insert(
                [
                    {
                        "shopping_list_id": shopping_list.id,
                        "position": position,
                        "ingredient_id": item.ingredient_id,
                        "name": item.name,
                        "quantity": to_number(item.quantity),
                        "unit": item.unit,
                        "price_per_unit": to_number(item.price_per_unit),
                        "purchased": item.purchased,
                    }
                    for position, item in enumerate(shopping_list.items)
                ]
            ),
            "save shopping items",
        )

    def delete_shopping_list(self, shopping_list_id: str) -> None:
        """Delete a list and its items."""
        execute(
            self.client.table("shopping_items")
            .delete()
            .eq("shopping_list_id", shopping_list_id),
            "delete shopping items",
        )
        execute(
            self.client.table("shopping_lists").delete().eq("id", shopping_list_id),
            "delete shopping list",
        )


@dataclass
class SupabasePurchaseRepository(PurchaseRepository):
    """Append-only purchase ledger."""

    client: Client

    def append_purchase(self, purchase: Purchase) -> None:
        execute(
            self.client.table("purchases").insert(
                {
                    "id": purchase.id,
                    "week_id": purchase.week_id,
                    "total_cost": to_number(purchase.total_cost),
                    "date": purchase.date.isoformat(),
                }
            ),
            "save purchase",
        )
        if not purchase.items:
            return
        execute(
            self.client.table("purchase_items").insert(
                [
                    {
                        "purchase_id": purchase.id,
                        "ingredient_id": item.ingredient_id,
                        "name": item.name,
                        "quantity": to_number(item.quantity),
                        "unit": item.unit,
                        "price_per_unit": to_number(item.price_per_unit),
                        "total_price": to_number(item.total_price),
                    }
                    for item in purchase.items
                ]
            ),
            "save purchase items",
        )

    def load_purchases(self) -> list[Purchase]:
        response = execute(
            self.client.table("purchases")
            .select("*, purchase_items(*)")
            .order("date", desc=True),
            "load purchases",
        )
        return [_parse_purchase(row) for row in response.data or []]


def _parse_shopping_item(row: dict[str, object]) -> ShoppingItem:
    return ShoppingItem(
        ingredient_id=str(row["ingredient_id"]),
        name=str(row.get("name", "")),
        quantity=to_decimal(row.get("quantity")),
        unit=str(row.get("unit") or ""),
        price_per_unit=to_decimal(row.get("price_per_unit")),
        purchased=bool(row.get("purchased")),
    )


def _parse_purchase(row: dict[str, object]) -> Purchase:
    return Purchase(
        id=str(row["id"]),
        week_id=str(row["week_id"]),
        items=[
            PurchaseItem(
                ingredient_id=str(item["ingredient_id"]),
                name=str(item.get("name", "")),
                quantity=to_decimal(item.get("quantity")),
                unit=str(item.get("unit") or ""),
                price_per_unit=to_decimal(item.get("price_per_unit")),
                total_price=to_decimal(item.get("total_price")),
            )
            for item in row.get("purchase_items") or []
        ],
        total_cost=to_decimal(row.get("total_cost")),
        date=parse_timestamp(row.get("date")),
    )
