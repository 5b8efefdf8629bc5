"""Energy expenditure and macro target calculations.

All functions are pure: identical inputs give identical outputs and nothing here
touches I/O. Rounding uses half-up semantics (``round_half_up``), so 0.5 always
rounds towards the larger number.
"""

from __future__ import annotations

from typing import Mapping

from nutriplan.models.profile import MacroTargets, UserProfile

from .utils import round_half_up, round_int

OCCUPATION_FACTORS: Mapping[str, float] = {
    "sedentary": 1.2,
    "standing": 1.3,
    "active": 1.5,
    "heavy": 1.7,
}
DAILY_ACTIVITY_BONUS: Mapping[str, float] = {
    "moderate": 0.1,
    "high": 0.2,
}
TRAINING_SESSION_BONUS = 0.05
MAX_ACTIVITY_MULTIPLIER = 2.2

GOAL_CALORIE_OFFSETS: Mapping[str, int] = {
    "lose": -500,
    "gain": 300,
    "define": -300,
    "performance": 200,
    "maintain": 0,
}

# (protein, carbs, fat) share of calories per goal; each row sums to 1.0.
GOAL_MACRO_RATIOS: Mapping[str, tuple[float, float, float]] = {
    "lose": (0.35, 0.35, 0.30),
    "gain": (0.25, 0.50, 0.25),
    "define": (0.40, 0.30, 0.30),
    "performance": (0.25, 0.55, 0.20),
    "maintain": (0.25, 0.45, 0.30),
}
MIN_PROTEIN_G_PER_KG = 1.6
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

WATER_L_PER_KG = 0.033
WATER_L_PER_TRAINING = 0.15


def basal_metabolic_rate(gender: str, weight_kg: float, height_cm: float, age: float) -> float:
    """Mifflin-St Jeor resting energy expenditure in kcal.

    Only ``male`` takes the +5 branch; ``female`` and ``other`` both use -161.
    """

    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if gender == "male":
        return base + 5
    return base - 161


def activity_multiplier(occupation: str, daily_activity: str, training_count: int) -> float:
    """Return the TDEE multiplier for a lifestyle, capped at 2.2."""

    factor = OCCUPATION_FACTORS.get(occupation, OCCUPATION_FACTORS["sedentary"])
    factor += DAILY_ACTIVITY_BONUS.get(daily_activity, 0.0)
    factor += training_count * TRAINING_SESSION_BONUS
    return min(factor, MAX_ACTIVITY_MULTIPLIER)


def total_daily_energy_expenditure(profile: UserProfile) -> int:
    """BMR times activity multiplier, rounded to whole kcal."""

    bmr = basal_metabolic_rate(profile.gender, profile.weight_kg, profile.height_cm, profile.age)
    multiplier = activity_multiplier(
        profile.occupation,
        profile.daily_activity,
        profile.sports_frequency,
    )
    return round_int(bmr * multiplier)


def target_calories(tdee: int, goal: str) -> int:
    """Apply the fixed per-goal calorie offset."""

    return tdee + GOAL_CALORIE_OFFSETS.get(goal, 0)


def macro_split(calories: float, goal: str, weight_kg: float) -> MacroTargets:
    """Split calories into protein/carbs/fat grams.

    Protein never drops below 1.6 g per kg body weight; when the floor applies the
    remaining calories are shared by carbs and fat in their configured ratio.
    """

    protein_ratio, carbs_ratio, fat_ratio = GOAL_MACRO_RATIOS.get(goal, GOAL_MACRO_RATIOS["maintain"])

    min_protein = weight_kg * MIN_PROTEIN_G_PER_KG
    ratio_protein = calories * protein_ratio / KCAL_PER_G_PROTEIN
    protein = max(min_protein, ratio_protein)

    remaining = calories - protein * KCAL_PER_G_PROTEIN
    other_ratio = carbs_ratio + fat_ratio
    carbs = remaining * (carbs_ratio / other_ratio) / KCAL_PER_G_CARBS
    fat = remaining * (fat_ratio / other_ratio) / KCAL_PER_G_FAT

    return MacroTargets(protein=round_int(protein), carbs=round_int(carbs), fat=round_int(fat))


def water_goal(weight_kg: float, training_count: int) -> float:
    """Daily water target in liters, one decimal."""

    return round_half_up(weight_kg * WATER_L_PER_KG + training_count * WATER_L_PER_TRAINING, 1)


__all__ = [
    "activity_multiplier",
    "basal_metabolic_rate",
    "macro_split",
    "target_calories",
    "total_daily_energy_expenditure",
    "water_goal",
]
