"""Recipe selection for a single meal slot."""

from __future__ import annotations

import random
from typing import Collection, List, Optional, Sequence

from nutriplan.models.recipe import Recipe

SHORTLIST_SIZE = 3
DEFAULT_ALTERNATIVES = 2


def _calorie_distance(recipe: Recipe, calories: float) -> float:
    return abs(recipe.nutrition.calories - calories)


def select_for_target(
    candidates: Sequence[Recipe],
    used_ids: Collection[str],
    target_calories: float,
    rng: random.Random,
) -> Optional[Recipe]:
    """Pick one of the three unused candidates closest to ``target_calories``.

    When every candidate is already used the first candidate is returned anyway,
    so a day repeats a recipe rather than losing the slot. An empty pool yields
    None.
    """

    available = [recipe for recipe in candidates if recipe.id not in used_ids]
    if not available:
        return candidates[0] if candidates else None

    available.sort(key=lambda recipe: _calorie_distance(recipe, target_calories))
    shortlist = available[:SHORTLIST_SIZE]
    return rng.choice(shortlist)


def alternatives_for(
    recipe: Recipe,
    recipes: Sequence[Recipe],
    count: int = DEFAULT_ALTERNATIVES,
) -> List[Recipe]:
    """Same-category recipes closest in calories to ``recipe``, excluding itself."""

    same_category = [
        other for other in recipes if other.category == recipe.category and other.id != recipe.id
    ]
    same_category.sort(key=lambda other: _calorie_distance(other, recipe.nutrition.calories))
    return same_category[:count]


__all__ = ["alternatives_for", "select_for_target"]
