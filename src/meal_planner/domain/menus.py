"""Domain models for weekly menus."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from meal_planner.domain.dishes import DAYS_OF_WEEK, Dish
from meal_planner.domain.errors import ValidationError

# day -> meal -> dish id -> missing ingredient names (None when fully stocked)
MenuWarnings = dict[str, dict[str, dict[str, list[str] | None]]]


@dataclass
class WeeklyMenu:
    """Dishes assigned to each day of one calendar week."""

    id: str
    week: str
    days: dict[str, list[Dish]]
    warnings: MenuWarnings = field(default_factory=dict)

    def find_entry(self, day: str, dish_id: str) -> Dish | None:
        """Return the dish placed on a day, if any."""
        for dish in self.days.get(day, []):
            if dish.id == dish_id:
                return dish
        return None

    def all_dishes(self) -> list[Dish]:
        """Return every placed dish across the week in day order."""
        return [dish for day in DAYS_OF_WEEK for dish in self.days.get(day, [])]


@dataclass(frozen=True)
class AddDishResult:
    """Outcome of placing a dish on the menu."""

    warning: bool
    missing_ingredients: list[str]
    added: bool = True


@dataclass(frozen=True)
class PredefinedMenu:
    """Named weekly template that can be copied onto any week."""

    id: str
    name: str
    days: dict[str, list[Dish]]


def week_start(value: date | datetime | str) -> str:
    """Return the ISO date of the Monday starting the week of ``value``."""
    if isinstance(value, str):
        value = _parse_week_date(value)
    if isinstance(value, datetime):
        value = value.date()
    monday = value - timedelta(days=value.weekday())
    return monday.isoformat()


def _parse_week_date(raw: str) -> date:
    text = raw.strip()
    if len(text) == 10:
        parse = date.fromisoformat
    else:
        parse = datetime.fromisoformat
    try:
        return parse(text)
    except ValueError as exc:
        raise ValidationError(f"Invalid week date: {raw!r}") from exc


def menu_id_for(week: str) -> str:
    """Return the storage key of a week's menu."""
    return f"menu-{week}"


def empty_days() -> dict[str, list[Dish]]:
    """Return a day map with all seven days and no dishes."""
    return {day: [] for day in DAYS_OF_WEEK}


def empty_menu(week: str) -> WeeklyMenu:
    """Build an empty menu for a normalized week."""
    return WeeklyMenu(id=menu_id_for(week), week=week, days=empty_days(), warnings={})
