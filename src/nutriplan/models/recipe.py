"""Recipe catalog models."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

RecipeCategory = Literal["breakfast", "lunch", "dinner", "snack"]
Difficulty = Literal["easy", "medium", "hard"]

RECIPE_CATEGORIES: tuple[RecipeCategory, ...] = ("breakfast", "lunch", "dinner", "snack")


class Nutrition(BaseModel):
    """Nutrition values for a recipe's stated serving count."""

    calories: float = Field(default=0, ge=0)
    protein: float = Field(default=0, ge=0)
    carbs: float = Field(default=0, ge=0)
    fat: float = Field(default=0, ge=0)
    fiber: float = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class Ingredient(BaseModel):
    """Ingredient line belonging to exactly one recipe."""

    name: str = Field(min_length=1)
    amount: float = Field(default=0, ge=0)
    unit: str = Field(default="")
    category: str = Field(default="Sonstiges")

    model_config = ConfigDict(frozen=True)


class Recipe(BaseModel):
    """Immutable catalog recipe; scaling produces a new value."""

    id: str = Field(min_length=1)
    name: str
    category: RecipeCategory
    tags: list[str] = Field(default_factory=list)
    prep_time_min: int = Field(default=0, ge=0)
    cook_time_min: int = Field(default=0, ge=0)
    total_time_min: int = Field(default=0, ge=0)
    difficulty: Difficulty = "easy"
    servings: float = Field(default=1, ge=0)
    image: Optional[str] = Field(default=None)
    ingredients: list[Ingredient] = Field(default_factory=list)
    nutrition: Nutrition = Field(default_factory=Nutrition)
    instructions: list[str] = Field(default_factory=list)
    allergens: list[str] = Field(default_factory=list)
    dietary_flags: list[str] = Field(default_factory=list)
    meal_prepable: bool = Field(default=False)
    storage_days: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


__all__ = [
    "Difficulty",
    "Ingredient",
    "Nutrition",
    "RECIPE_CATEGORIES",
    "Recipe",
    "RecipeCategory",
]
