"""Pydantic models defining shared data contracts."""

from nutriplan.models.intake import ConsumedSummary, DayExtra, Streak
from nutriplan.models.plan import DayPlan, MealPlan, MealType
from nutriplan.models.profile import (
    MacroTargets,
    MealToggles,
    NutritionTargets,
    UserProfile,
)
from nutriplan.models.recipe import Ingredient, Nutrition, Recipe, RecipeCategory
from nutriplan.models.shopping import ShoppingItem

__all__ = [
    "ConsumedSummary",
    "DayExtra",
    "Streak",
    "DayPlan",
    "MealPlan",
    "MealType",
    "MacroTargets",
    "MealToggles",
    "NutritionTargets",
    "UserProfile",
    "Ingredient",
    "Nutrition",
    "Recipe",
    "RecipeCategory",
    "ShoppingItem",
]
