"""Spending statistics over the purchase ledger."""

from dataclasses import dataclass
from datetime import date

from meal_planner.domain.quantities import ZERO
from meal_planner.domain.shopping import PurchaseSummary
from meal_planner.services.shopping import ShoppingService


@dataclass
class PurchaseStatsService:
    """Computes totals and averages of past purchases."""

    shopping_service: ShoppingService

    def summarize(self, week: date | str | None = None) -> PurchaseSummary:
        """Return spending totals, optionally for a single week."""
        purchases = self.shopping_service.list_purchases(week)
        total_spent = sum((purchase.total_cost for purchase in purchases), ZERO)
        average = total_spent / len(purchases) if purchases else ZERO
        return PurchaseSummary(
            purchase_count=len(purchases),
            total_spent=total_spent,
            average_spent=average,
            total_items=sum(len(purchase.items) for purchase in purchases),
        )
