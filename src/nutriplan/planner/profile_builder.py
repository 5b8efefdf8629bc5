"""Helpers for completing a profile with its calculated energy targets."""

from __future__ import annotations

from nutriplan.models.profile import NutritionTargets, UserProfile
from nutriplan.planner.app.calculator import (
    activity_multiplier,
    basal_metabolic_rate,
    macro_split,
    target_calories,
    total_daily_energy_expenditure,
    water_goal,
)


def nutrition_targets(profile: UserProfile) -> NutritionTargets:
    """Run the calculator over the profile's onboarding answers."""

    tdee = total_daily_energy_expenditure(profile)
    calories = target_calories(tdee, profile.goal)
    return NutritionTargets(
        bmr=basal_metabolic_rate(profile.gender, profile.weight_kg, profile.height_cm, profile.age),
        activity_multiplier=activity_multiplier(
            profile.occupation,
            profile.daily_activity,
            profile.sports_frequency,
        ),
        tdee=tdee,
        target_calories=calories,
        macros=macro_split(calories, profile.goal, profile.weight_kg),
        water_goal=water_goal(profile.weight_kg, profile.sports_frequency),
    )


def complete_profile(profile: UserProfile) -> UserProfile:
    """Return the profile with tdee, target calories and macros recomputed."""

    targets = nutrition_targets(profile)
    return profile.model_copy(
        update={
            "tdee": targets.tdee,
            "target_calories": targets.target_calories,
            "macros": targets.macros,
        }
    )
