"""Single-file JSON document store implementing every repository."""

import copy
import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from meal_planner.domain.dishes import Dish
from meal_planner.domain.errors import PersistenceError
from meal_planner.domain.inventory import Ingredient
from meal_planner.domain.menus import PredefinedMenu, WeeklyMenu
from meal_planner.domain.shopping import Purchase, ShoppingList
from meal_planner.serializers import (
    parse_dish,
    parse_ingredient,
    parse_menu,
    parse_predefined_menu,
    parse_purchase,
    parse_shopping_list,
    serialize_dish,
    serialize_ingredient,
    serialize_menu,
    serialize_predefined_menu,
    serialize_purchase,
    serialize_shopping_list,
)
from meal_planner.services.dishes import DishRepository
from meal_planner.services.inventory import InventoryRepository
from meal_planner.services.menus import MenuRepository
from meal_planner.services.predefined_menus import PredefinedMenuRepository
from meal_planner.services.shopping import PurchaseRepository, ShoppingListRepository
from meal_planner.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

DOCUMENT_FILE = "meal_planner.json"
COLLECTIONS = (
    "ingredients",
    "dishes",
    "menus",
    "shopping_lists",
    "purchases",
    "predefined_menus",
)


@dataclass
class JsonDocumentStore(  # noqa: PLR0904
    InventoryRepository,
    DishRepository,
    MenuRepository,
    ShoppingListRepository,
    PurchaseRepository,
    PredefinedMenuRepository,
    UnitOfWork,
):
    """Keeps all collections in one JSON file under ``data_dir``.

    Writes made inside ``atomic()`` are buffered and flushed once when the
    outermost block exits; an exception discards them.
    """

    data_dir: Path
    _document: dict[str, dict[str, object]] | None = field(default=None, init=False)
    _depth: int = field(default=0, init=False)
    _backup: dict[str, dict[str, object]] | None = field(default=None, init=False)

    @property
    def path(self) -> Path:
        return self.data_dir / DOCUMENT_FILE

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Buffer writes until the outermost block completes."""
        document = self._load()
        outermost = self._depth == 0
        if outermost:
            self._backup = copy.deepcopy(document)
        self._depth += 1
        try:
            yield
            if outermost:
                self._flush()
        except BaseException:
            if outermost:
                self._document = self._backup
                logger.warning("Rolled back document store changes")
            raise
        finally:
            self._depth -= 1
            if outermost:
                self._backup = None

    # Ingredients

    def load_ingredients(self) -> list[Ingredient]:
        return [
            parse_ingredient(row) for row in self._collection("ingredients").values()
        ]

    def save_ingredient(self, ingredient: Ingredient) -> None:
        self._put("ingredients", ingredient.id, serialize_ingredient(ingredient))

    def delete_ingredient(self, ingredient_id: str) -> None:
        self._delete("ingredients", ingredient_id)

    # Dishes

    def load_dish(self, dish_id: str) -> Dish | None:
        row = self._collection("dishes").get(dish_id)
        return parse_dish(row) if row else None

    def load_dishes_by_category(self, category: str) -> list[Dish]:
        return [dish for dish in self.list_dishes() if dish.category == category]

    def list_dishes(self) -> list[Dish]:
        return [parse_dish(row) for row in self._collection("dishes").values()]

    def save_dish(self, dish: Dish) -> None:
        self._put("dishes", dish.id, serialize_dish(dish))

    def delete_dish(self, dish_id: str) -> None:
        self._delete("dishes", dish_id)

    # Weekly menus

    def load_menu(self, week: str) -> WeeklyMenu | None:
        row = self._collection("menus").get(week)
        return parse_menu(row) if row else None

    def save_menu(self, menu: WeeklyMenu) -> None:
        self._put("menus", menu.week, serialize_menu(menu))

    # Shopping lists

    def load_shopping_list(self, week: str) -> ShoppingList | None:
        row = self._collection("shopping_lists").get(week)
        return parse_shopping_list(row) if row else None

    def save_shopping_list(self, shopping_list: ShoppingList) -> None:
        self._put(
            "shopping_lists",
            shopping_list.week_id,
            serialize_shopping_list(shopping_list),
        )

    def delete_shopping_list(self, shopping_list_id: str) -> None:
        lists = self._collection("shopping_lists")
        for week, row in list(lists.items()):
            if row.get("id") == shopping_list_id:
                self._delete("shopping_lists", week)

    # Purchases

    def append_purchase(self, purchase: Purchase) -> None:
        self._put("purchases", purchase.id, serialize_purchase(purchase))

    def load_purchases(self) -> list[Purchase]:
        return [
            parse_purchase(row) for row in self._collection("purchases").values()
        ]

    # Predefined menus

    def list_predefined_menus(self) -> list[PredefinedMenu]:
        return [
            parse_predefined_menu(row)
            for row in self._collection("predefined_menus").values()
        ]

    def load_predefined_menu(self, menu_id: str) -> PredefinedMenu | None:
        row = self._collection("predefined_menus").get(menu_id)
        return parse_predefined_menu(row) if row else None

    def save_predefined_menu(self, menu: PredefinedMenu) -> None:
        self._put("predefined_menus", menu.id, serialize_predefined_menu(menu))

    def delete_predefined_menu(self, menu_id: str) -> None:
        self._delete("predefined_menus", menu_id)

    # Storage

    def _collection(self, name: str) -> dict[str, dict[str, object]]:
        return self._load().setdefault(name, {})

    def _put(self, collection: str, key: str, row: dict[str, object]) -> None:
        rows = self._collection(collection)
        previous = rows.get(key)
        rows[key] = row
        if self._depth == 0:
            self._flush_or_restore(rows, key, previous)

    def _delete(self, collection: str, key: str) -> None:
        rows = self._collection(collection)
        previous = rows.pop(key, None)
        if self._depth == 0:
            self._flush_or_restore(rows, key, previous)

    def _flush_or_restore(
        self,
        rows: dict[str, object],
        key: str,
        previous: object | None,
    ) -> None:
        try:
            self._flush()
        except PersistenceError:
            if previous is None:
                rows.pop(key, None)
            else:
                rows[key] = previous
            raise

    def _load(self) -> dict[str, dict[str, object]]:
        if self._document is not None:
            return self._document
        if not self.path.exists():
            self._document = {name: {} for name in COLLECTIONS}
            return self._document
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                document = json.load(handle) or {}
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Failed to read {self.path}") from exc
        for name in COLLECTIONS:
            document.setdefault(name, {})
        self._document = document
        return document

    def _flush(self) -> None:
        document = self._load()
        temp_path = self.path.with_suffix(".tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2, ensure_ascii=False)
            temp_path.replace(self.path)
        except OSError as exc:
            raise PersistenceError(f"Failed to write {self.path}") from exc
