"""Supabase repository for weekly menus."""

from dataclasses import dataclass

from supabase import Client

from meal_planner.adapters.supabase_support import dish_rows, execute, group_days
from meal_planner.domain.menus import WeeklyMenu
from meal_planner.services.menus import MenuRepository


@dataclass
class SupabaseMenuRepository(MenuRepository):
    """Stores menus in ``weekly_menus`` with one row per placed dish."""

    client: Client

    def load_menu(self, week: str) -> WeeklyMenu | None:
        """Return the menu for a week start date."""
        response = execute(
            self.client.table("weekly_menus")
            .select("id, week, warnings")
            .eq("week", week)
            .limit(1),
            "load weekly menu",
        )
        if not response.data:
            return None
        row = response.data[0]
        dishes_response = execute(
            self.client.table("weekly_menu_dishes")
            .select("day_of_week, meal, meal_order, dish_snapshot")
            .eq("weekly_menu_id", row["id"])
            .order("meal_order", desc=False),
            "load weekly menu dishes",
        )
        return WeeklyMenu(
            id=str(row["id"]),
            week=str(row["week"]),
            days=group_days(dishes_response.data or []),
            warnings=row.get("warnings") or {},
        )

    def save_menu(self, menu: WeeklyMenu) -> None:
        """Upsert the menu row and replace its dish rows."""
        execute(
            self.client.table("weekly_menus").upsert(
                {"id": menu.id, "week": menu.week, "warnings": menu.warnings}
            ),
            "save weekly menu",
        )
        execute(
            self.client.table("weekly_menu_dishes")
            .delete()
            .eq("weekly_menu_id", menu.id),
            "clear weekly menu dishes",
        )
        rows = dish_rows("weekly_menu_id", menu.id, menu.days)
        if rows:
            execute(
                self.client.table("weekly_menu_dishes").insert(rows),
                "save weekly menu dishes",
            )
