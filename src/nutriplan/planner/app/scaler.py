"""Portion scaling of recipes towards a calorie target."""

from __future__ import annotations

from nutriplan.models.recipe import Ingredient, Nutrition, Recipe

from .utils import round_half_up, round_int

MIN_SCALE_FACTOR = 0.3
MAX_SCALE_FACTOR = 3.0


def scale_factor(recipe: Recipe, target_calories: float) -> float:
    """Clamped factor that would be applied to reach ``target_calories``."""

    if target_calories <= 0 or recipe.nutrition.calories <= 0:
        return 1.0
    raw = target_calories / recipe.nutrition.calories
    return max(MIN_SCALE_FACTOR, min(MAX_SCALE_FACTOR, raw))


def scale_recipe(recipe: Recipe, target_calories: float) -> Recipe:
    """Return a copy of ``recipe`` scaled towards ``target_calories``.

    The factor is clamped to [0.3, 3.0] so tiny or huge slots still get sensible
    portions; the result then only approximates the target. Without a positive
    target or positive recipe calories the recipe is returned as is.
    """

    if target_calories <= 0 or recipe.nutrition.calories <= 0:
        return recipe

    factor = scale_factor(recipe, target_calories)
    nutrition = recipe.nutrition
    return recipe.model_copy(
        update={
            "servings": round_half_up(recipe.servings * factor, 1),
            "ingredients": [
                Ingredient(
                    name=ingredient.name,
                    amount=round_half_up(ingredient.amount * factor, 1),
                    unit=ingredient.unit,
                    category=ingredient.category,
                )
                for ingredient in recipe.ingredients
            ],
            "nutrition": Nutrition(
                calories=round_int(nutrition.calories * factor),
                protein=round_int(nutrition.protein * factor),
                carbs=round_int(nutrition.carbs * factor),
                fat=round_int(nutrition.fat * factor),
                fiber=round_int(nutrition.fiber * factor),
            ),
        }
    )


__all__ = ["MAX_SCALE_FACTOR", "MIN_SCALE_FACTOR", "scale_factor", "scale_recipe"]
