"""Error kinds raised by meal planner services."""


class MealPlannerError(Exception):
    """Base class for meal planner failures."""


class NotFoundError(MealPlannerError):
    """Raised when a dish, ingredient, list or template id cannot be resolved."""


class ValidationError(MealPlannerError):
    """Raised when an operation receives an invalid value."""


class PersistenceError(MealPlannerError):
    """Raised when the backing store fails to load or save data."""
