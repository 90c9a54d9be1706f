"""Ingredient store: inventory reads, edits and stock reconciliation."""

import logging
import re
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import uuid4

from meal_planner.domain.dishes import DishIngredient
from meal_planner.domain.errors import NotFoundError, ValidationError
from meal_planner.domain.inventory import (
    DEFAULT_CATEGORY,
    DEFAULT_NEW_NAME,
    DEFAULT_NEW_UNIT,
    Ingredient,
    IngredientDraft,
    StockRequest,
)
from meal_planner.domain.quantities import ZERO

logger = logging.getLogger(__name__)


class InventoryRepository(Protocol):
    """Persistence interface for ingredients."""

    def load_ingredients(self) -> list[Ingredient]:
        """Return every stored ingredient."""

    def save_ingredient(self, ingredient: Ingredient) -> None:
        """Insert or replace an ingredient by id."""

    def delete_ingredient(self, ingredient_id: str) -> None:
        """Delete an ingredient by id."""


@dataclass
class InventoryService:
    """Application service for the ingredient inventory."""

    repository: InventoryRepository
    default_category: str = DEFAULT_CATEGORY

    def get(self) -> list[Ingredient]:
        """Return a snapshot of the inventory."""
        return self.repository.load_ingredients()

    def get_by_id(self, ingredient_id: str) -> Ingredient | None:
        """Return one ingredient, if stocked."""
        return self._index().get(ingredient_id)

    def upsert(self, ingredient: Ingredient) -> Ingredient:
        """Insert or replace an ingredient after validating it."""
        _validate_ingredient(ingredient)
        self.repository.save_ingredient(ingredient)
        return ingredient

    def remove(self, ingredient_id: str) -> None:
        """Delete an ingredient from the inventory."""
        if ingredient_id not in self._index():
            raise NotFoundError(f"Unknown ingredient: {ingredient_id}")
        self.repository.delete_ingredient(ingredient_id)

    def batch_add(self, drafts: list[IngredientDraft]) -> list[Ingredient]:
        """Create several ingredients, generating their ids from the names."""
        created: list[Ingredient] = []
        for draft in drafts:
            ingredient = Ingredient(
                id=_generate_id(draft.name),
                name=draft.name.strip(),
                quantity=draft.quantity,
                unit=draft.unit,
                price_per_unit=ZERO
                if draft.is_package
                else (draft.price_per_unit or ZERO),
                category=draft.category or self.default_category,
                is_package=draft.is_package,
                price_total=(draft.price_total or ZERO) if draft.is_package else None,
            )
            created.append(self.upsert(ingredient))
        return created

    def consume(self, requests: list[StockRequest]) -> list[str]:
        """Deduct stock for each request and return the ids that were short.

        Requests are independent: a shortage leaves that ingredient untouched
        and does not prevent the others from being deducted.
        """
        _validate_requests(requests)
        stock = self._index()
        missing: list[str] = []
        for request in requests:
            current = stock.get(request.ingredient_id)
            if current is None or current.quantity < request.quantity:
                missing.append(request.ingredient_id)
                continue
            updated = replace(current, quantity=current.quantity - request.quantity)
            stock[updated.id] = updated
            self.repository.save_ingredient(updated)
        if missing:
            logger.info("Stock shortage", extra={"ingredient_ids": missing})
        return missing

    def restore(self, requests: list[StockRequest]) -> None:
        """Return quantities to stock, creating unknown ingredients."""
        _validate_requests(requests)
        stock = self._index()
        for request in requests:
            current = stock.get(request.ingredient_id)
            if current is None:
                updated = Ingredient(
                    id=request.ingredient_id,
                    name=request.name or DEFAULT_NEW_NAME,
                    quantity=request.quantity,
                    unit=request.unit or DEFAULT_NEW_UNIT,
                    price_per_unit=request.price_per_unit or ZERO,
                    category=self.default_category,
                )
            else:
                updated = replace(
                    current, quantity=current.quantity + request.quantity
                )
            stock[updated.id] = updated
            self.repository.save_ingredient(updated)

    def names_for(self, ingredient_ids: list[str]) -> list[str]:
        """Map ingredient ids to display names, falling back to the id."""
        stock = self._index()
        return [
            stock[ingredient_id].name if ingredient_id in stock else ingredient_id
            for ingredient_id in ingredient_ids
        ]

    def _index(self) -> dict[str, Ingredient]:
        return {item.id: item for item in self.repository.load_ingredients()}


def requests_from_recipe(ingredients: list[DishIngredient]) -> list[StockRequest]:
    """Turn a dish recipe into stock requests."""
    return [
        StockRequest(ingredient_id=item.ingredient_id, quantity=item.quantity)
        for item in ingredients
    ]


def _validate_requests(requests: list[StockRequest]) -> None:
    for request in requests:
        if request.quantity <= 0:
            raise ValidationError(
                f"Quantity must be positive for {request.ingredient_id}"
            )


def _validate_ingredient(ingredient: Ingredient) -> None:
    if not ingredient.id or not ingredient.name.strip():
        raise ValidationError("Ingredient id and name are required")
    if ingredient.quantity < 0:
        raise ValidationError(f"Quantity cannot be negative: {ingredient.quantity}")
    if ingredient.price_per_unit < 0:
        raise ValidationError(f"Price cannot be negative: {ingredient.price_per_unit}")
    if ingredient.price_total is not None and ingredient.price_total < 0:
        raise ValidationError(f"Price cannot be negative: {ingredient.price_total}")


def _generate_id(name: str) -> str:
    slug = re.sub(r"\s+", "-", name.strip().lower()) or "ingrediente"
    return f"{slug}-{uuid4().hex[:6]}"
