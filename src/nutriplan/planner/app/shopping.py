"""Shopping list aggregation across day plans."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from nutriplan.models.plan import DayPlan
from nutriplan.models.shopping import ShoppingItem

from .utils import round_half_up

CATEGORY_ORDER: tuple[str, ...] = (
    "Obst",
    "Gemüse",
    "Fleisch",
    "Fisch",
    "Milchprodukte",
    "Eier",
    "Getreide",
    "Hülsenfrüchte",
    "Nüsse",
    "Samen",
    "Fette",
    "Gewürze",
    "Kräuter",
    "Saucen",
    "Aufstriche",
    "Süßungsmittel",
    "Nahrungsergänzung",
    "Backzutaten",
    "Soja",
    "Süßes",
    "Sonstiges",
)
_CATEGORY_RANK: Dict[str, int] = {name: index for index, name in enumerate(CATEGORY_ORDER)}
_UNKNOWN_CATEGORY_RANK = len(CATEGORY_ORDER)


@dataclass
class AggregatedIngredient:
    """Running total for one lowercased ingredient name."""

    amount: float
    unit: str
    category: str


def aggregate_ingredients(day_plans: Iterable[DayPlan]) -> Dict[str, AggregatedIngredient]:
    """Sum ingredient amounts by lowercased name across every meal of every plan.

    Unit and category come from the first occurrence; amounts are added without
    any unit conversion.
    """

    items: Dict[str, AggregatedIngredient] = {}
    for plan in day_plans:
        for meal in plan.meals:
            for ingredient in meal.recipe.ingredients:
                key = ingredient.name.lower()
                existing = items.get(key)
                if existing is None:
                    items[key] = AggregatedIngredient(
                        amount=ingredient.amount,
                        unit=ingredient.unit,
                        category=ingredient.category,
                    )
                else:
                    existing.amount += ingredient.amount
    return items


def display_name(key: str) -> str:
    return key[:1].upper() + key[1:]


def collation_key(name: str) -> str:
    """Case- and accent-insensitive key, so "Öl" sorts next to "Olivenöl"."""

    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(char for char in decomposed if not unicodedata.combining(char)).casefold()


def _sort_key(item: ShoppingItem) -> tuple[int, str, str]:
    rank = _CATEGORY_RANK.get(item.category, _UNKNOWN_CATEGORY_RANK)
    return rank, collation_key(item.name), item.name


def build_shopping_list(
    day_plans: Sequence[DayPlan],
    checked_names: Iterable[str] = (),
) -> List[ShoppingItem]:
    """Aggregated, category-sorted shopping list with persisted checked flags applied."""

    checked = set(checked_names)
    items = [
        ShoppingItem(
            name=display_name(key),
            amount=round_half_up(entry.amount, 1),
            unit=entry.unit,
            category=entry.category,
            checked=display_name(key) in checked,
        )
        for key, entry in aggregate_ingredients(day_plans).items()
    ]
    items.sort(key=_sort_key)
    return items


__all__ = [
    "AggregatedIngredient",
    "CATEGORY_ORDER",
    "aggregate_ingredients",
    "build_shopping_list",
    "collation_key",
    "display_name",
]
