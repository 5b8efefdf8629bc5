"""Day plan output models."""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from nutriplan.models.recipe import Nutrition, Recipe

MealType = Literal["breakfast", "morningSnack", "lunch", "afternoonSnack", "dinner", "lateSnack"]


class MealPlan(BaseModel):
    """A single meal slot within a day plan."""

    type: MealType
    time: str = Field(pattern=r"^\d{2}:\d{2}$")
    recipe: Recipe
    eaten: bool = False
    favorite: bool = False
    alternatives: list[Recipe] = Field(default_factory=list, max_length=2)

    model_config = ConfigDict(frozen=True)


def sum_nutrition(values: list[Nutrition]) -> Nutrition:
    """Add nutrition records field by field."""

    return Nutrition(
        calories=sum(value.calories for value in values),
        protein=sum(value.protein for value in values),
        carbs=sum(value.carbs for value in values),
        fat=sum(value.fat for value in values),
        fiber=sum(value.fiber for value in values),
    )


class DayPlan(BaseModel):
    """Meals planned for one calendar date.

    Totals are derived from the current meals on every access, so a plan never
    carries totals that disagree with its slots.
    """

    date: date
    meals: list[MealPlan] = Field(default_factory=list)
    water_intake: float = Field(default=0, ge=0)
    water_goal: float = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_macros(self) -> Nutrition:
        return sum_nutrition([meal.recipe.nutrition for meal in self.meals])

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_calories(self) -> float:
        return self.total_macros.calories


__all__ = ["DayPlan", "MealPlan", "MealType", "sum_nutrition"]
