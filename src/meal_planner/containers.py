"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from meal_planner.adapters.json_document_store import JsonDocumentStore
from meal_planner.adapters.supabase_dish_repository import SupabaseDishRepository
from meal_planner.adapters.supabase_ingredient_repository import (
    SupabaseIngredientRepository,
)
from meal_planner.adapters.supabase_menu_repository import SupabaseMenuRepository
from meal_planner.adapters.supabase_predefined_menu_repository import (
    SupabasePredefinedMenuRepository,
)
from meal_planner.adapters.supabase_shopping_repository import (
    SupabasePurchaseRepository,
    SupabaseShoppingListRepository,
)
from meal_planner.config import Settings
from meal_planner.services.dishes import DishCatalog, DishRepository
from meal_planner.services.inventory import InventoryRepository, InventoryService
from meal_planner.services.menus import MenuRepository, MenuService
from meal_planner.services.predefined_menus import (
    PredefinedMenuRepository,
    PredefinedMenuService,
)
from meal_planner.services.shopping import (
    PurchaseRepository,
    ShoppingListRepository,
    ShoppingService,
)
from meal_planner.services.stats import PurchaseStatsService
from meal_planner.services.transfer import TransferService
from meal_planner.services.unit_of_work import PassThroughUnitOfWork, UnitOfWork


@dataclass
class Repositories:
    """Storage backend bound to each repository interface."""

    inventory: InventoryRepository
    dishes: DishRepository
    menus: MenuRepository
    shopping_lists: ShoppingListRepository
    purchases: PurchaseRepository
    predefined_menus: PredefinedMenuRepository
    unit_of_work: UnitOfWork


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    inventory_service: InventoryService
    dish_catalog: DishCatalog
    menu_service: MenuService
    shopping_service: ShoppingService
    predefined_menu_service: PredefinedMenuService
    stats_service: PurchaseStatsService
    transfer_service: TransferService
    close_resources: Callable[[], Awaitable[None]]


def build_repositories(settings: Settings) -> Repositories:
    """Create the repositories for the configured storage backend."""
    if settings.storage_backend == "json":
        store = JsonDocumentStore(Path(settings.data_dir))
        return Repositories(
            inventory=store,
            dishes=store,
            menus=store,
            shopping_lists=store,
            purchases=store,
            predefined_menus=store,
            unit_of_work=store,
        )
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError(
            "Supabase storage requires SUPABASE_URL and SUPABASE_SERVICE_KEY"
        )
    supabase_client = create_client(
        settings.supabase_url, settings.supabase_service_key
    )
    return Repositories(
        inventory=SupabaseIngredientRepository(supabase_client),
        dishes=SupabaseDishRepository(supabase_client),
        menus=SupabaseMenuRepository(supabase_client),
        shopping_lists=SupabaseShoppingListRepository(supabase_client),
        purchases=SupabasePurchaseRepository(supabase_client),
        predefined_menus=SupabasePredefinedMenuRepository(supabase_client),
        unit_of_work=PassThroughUnitOfWork(),
    )


def build_services(settings: Settings, repositories: Repositories) -> AppContainer:
    """Wire the application services on top of a set of repositories."""
    inventory_service = InventoryService(
        repositories.inventory, default_category=settings.default_category
    )
    dish_catalog = DishCatalog(repositories.dishes)
    menu_service = MenuService(
        repository=repositories.menus,
        inventory=inventory_service,
        catalog=dish_catalog,
        unit_of_work=repositories.unit_of_work,
    )
    shopping_service = ShoppingService(
        lists=repositories.shopping_lists,
        purchases=repositories.purchases,
        menus=menu_service,
        inventory=inventory_service,
        unit_of_work=repositories.unit_of_work,
    )
    predefined_menu_service = PredefinedMenuService(
        repository=repositories.predefined_menus,
        catalog=dish_catalog,
        menus=menu_service,
    )
    transfer_service = TransferService(
        menus=repositories.menus,
        inventory=repositories.inventory,
        lists=repositories.shopping_lists,
        purchases=repositories.purchases,
        unit_of_work=repositories.unit_of_work,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        inventory_service=inventory_service,
        dish_catalog=dish_catalog,
        menu_service=menu_service,
        shopping_service=shopping_service,
        predefined_menu_service=predefined_menu_service,
        stats_service=PurchaseStatsService(shopping_service),
        transfer_service=transfer_service,
        close_resources=close_resources,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    return build_services(resolved_settings, build_repositories(resolved_settings))
