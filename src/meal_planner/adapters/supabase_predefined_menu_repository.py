"""Supabase repository for predefined weekly menus."""

from dataclasses import dataclass

from supabase import Client

from meal_planner.adapters.supabase_support import dish_rows, execute, group_days
from meal_planner.domain.menus import PredefinedMenu
from meal_planner.services.predefined_menus import PredefinedMenuRepository


@dataclass
class SupabasePredefinedMenuRepository(PredefinedMenuRepository):
    """Supabase-backed template repository."""

    client: Client

    def list_predefined_menus(self) -> list[PredefinedMenu]:
        """Return every template with its dishes."""
        response = execute(
            self.client.table("predefined_menus")
            .select("id, name, predefined_menu_dishes(*)")
            .order("name"),
            "load predefined menus",
        )
        return [_parse_template(row) for row in response.data or []]

    def load_predefined_menu(self, menu_id: str) -> PredefinedMenu | None:
        """Return a template by id."""
        response = execute(
            self.client.table("predefined_menus")
            .select("id, name, predefined_menu_dishes(*)")
            .eq("id", menu_id)
            .limit(1),
            "load predefined menu",
        )
        if not response.data:
            return None
        return _parse_template(response.data[0])

    def save_predefined_menu(self, menu: PredefinedMenu) -> None:
        """Upsert the template row and replace its dish rows."""
        execute(
            self.client.table("predefined_menus").upsert(
                {"id": menu.id, "name": menu.name}
            ),
            "save predefined menu",
        )
        execute(
            self.client.table("predefined_menu_dishes")
            .delete()
            .eq("predefined_menu_id", menu.id),
            "clear predefined menu dishes",
        )
        rows = dish_rows("predefined_menu_id", menu.id, menu.days)
        if rows:
            execute(
                self.client.table("predefined_menu_dishes").insert(rows),
                "save predefined menu dishes",
            )

    def delete_predefined_menu(self, menu_id: str) -> None:
        """Delete a template and its dish rows."""
        execute(
            self.client.table("predefined_menu_dishes")
            .delete()
            .eq("predefined_menu_id", menu_id),
            "delete predefined menu dishes",
        )
        execute(
            self.client.table("predefined_menus").delete().eq("id", menu_id),
            "delete predefined menu",
        )


def _parse_template(row: dict[str, object]) -> PredefinedMenu:
    ordered = sorted(
        row.get("predefined_menu_dishes") or [],
        key=lambda item: int(item.get("meal_order") or 0),
    )
    return PredefinedMenu(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        days=group_days(ordered),
    )
