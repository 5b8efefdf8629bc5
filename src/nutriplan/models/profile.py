"""User profile models captured during onboarding."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Gender = Literal["male", "female", "other"]
Goal = Literal["lose", "gain", "maintain", "define", "performance"]
Occupation = Literal["sedentary", "standing", "active", "heavy"]
DailyActivity = Literal["low", "moderate", "high"]
DietType = Literal[
    "mixed",
    "vegetarian",
    "vegan",
    "pescatarian",
    "lowcarb",
    "highprotein",
    "keto",
    "paleo",
    "if16-8",
    "if5-2",
    "omad",
]
CookingEffort = Literal["minimal", "normal", "elaborate"]
Budget = Literal["cheap", "normal", "any"]


class MealToggles(BaseModel):
    """Which of the six daily meal slots the user wants planned."""

    breakfast: bool = True
    morning_snack: bool = False
    lunch: bool = True
    afternoon_snack: bool = True
    dinner: bool = True
    late_snack: bool = False

    model_config = ConfigDict(frozen=True)


class MacroTargets(BaseModel):
    """Daily macronutrient targets in grams."""

    protein: int
    carbs: int
    fat: int

    model_config = ConfigDict(frozen=True)


class UserProfile(BaseModel):
    """Onboarding answers plus the derived energy targets."""

    gender: Gender
    age: int = Field(ge=0, le=130)
    height_cm: float = Field(gt=0)
    weight_kg: float = Field(gt=0)
    target_weight_kg: Optional[float] = Field(default=None, gt=0)
    body_fat: Optional[float] = Field(default=None, ge=0, le=100)

    goal: Goal = "maintain"

    occupation: Occupation = "sedentary"
    sports_frequency: int = Field(default=0, ge=0, le=14)
    sports_types: list[str] = Field(default_factory=list)
    daily_activity: DailyActivity = "low"

    diet_type: DietType = "mixed"
    allergies: list[str] = Field(default_factory=list)
    excluded_foods: list[str] = Field(default_factory=list)
    preferred_foods: list[str] = Field(default_factory=list)

    cooking_effort: CookingEffort = "elaborate"
    meal_prep: bool = False

    meals: MealToggles = Field(default_factory=MealToggles)

    household_size: int = Field(default=1, ge=1)
    has_children: bool = False
    budget: Budget = "normal"

    tdee: Optional[int] = Field(default=None)
    target_calories: Optional[int] = Field(default=None)
    macros: Optional[MacroTargets] = Field(default=None)

    model_config = ConfigDict(frozen=True)


class NutritionTargets(BaseModel):
    """Calculator output presented to API and CLI consumers."""

    bmr: float
    activity_multiplier: float
    tdee: int
    target_calories: int
    macros: MacroTargets
    water_goal: float

    model_config = ConfigDict(frozen=True)


__all__ = [
    "Budget",
    "CookingEffort",
    "DailyActivity",
    "DietType",
    "Gender",
    "Goal",
    "MacroTargets",
    "MealToggles",
    "NutritionTargets",
    "Occupation",
    "UserProfile",
]
