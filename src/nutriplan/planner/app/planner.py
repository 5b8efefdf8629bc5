"""Day plan generation and slot-level plan edits."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from nutriplan import metrics
from nutriplan.models.plan import DayPlan, MealPlan, MealType, sum_nutrition
from nutriplan.models.profile import UserProfile
from nutriplan.models.recipe import Nutrition, Recipe, RecipeCategory

from .calculator import water_goal
from .catalog import RecipeCatalog
from .scaler import scale_recipe
from .selector import DEFAULT_ALTERNATIVES, alternatives_for, select_for_target

logger = logging.getLogger(__name__)

DEFAULT_TARGET_CALORIES = 2000
MAIN_MEAL_SHARE = 0.3
SNACK_SHARE = 0.1


@dataclass(frozen=True)
class SlotDefinition:
    """Fixed position of a meal slot in the day."""

    meal_type: MealType
    toggle: str
    time: str
    category: RecipeCategory

    @property
    def is_main(self) -> bool:
        return self.category != "snack"


SLOT_SCHEDULE: tuple[SlotDefinition, ...] = (
    SlotDefinition("breakfast", "breakfast", "07:30", "breakfast"),
    SlotDefinition("morningSnack", "morning_snack", "10:00", "snack"),
    SlotDefinition("lunch", "lunch", "12:30", "lunch"),
    SlotDefinition("afternoonSnack", "afternoon_snack", "15:30", "snack"),
    SlotDefinition("dinner", "dinner", "19:00", "dinner"),
    SlotDefinition("lateSnack", "late_snack", "21:00", "snack"),
)


@dataclass(frozen=True)
class SlotTargets:
    main: float
    snack: float

    def for_slot(self, slot: SlotDefinition) -> float:
        return self.main if slot.is_main else self.snack


def resolve_target_calories(profile: UserProfile) -> int:
    """Profile target, else TDEE, else the 2000 kcal default."""

    return profile.target_calories or profile.tdee or DEFAULT_TARGET_CALORIES


def active_slots(profile: UserProfile) -> List[SlotDefinition]:
    """Slots toggled on in the profile, in time-of-day order."""

    return [slot for slot in SLOT_SCHEDULE if getattr(profile.meals, slot.toggle) is True]


def slot_calorie_targets(profile: UserProfile, target: float) -> SlotTargets:
    """Per-slot calorie targets: mains weigh 0.3, snacks 0.1, normalized to the day."""

    slots = active_slots(profile)
    main_count = sum(1 for slot in slots if slot.is_main)
    snack_count = len(slots) - main_count
    total_ratio = main_count * MAIN_MEAL_SHARE + snack_count * SNACK_SHARE
    divisor = total_ratio or 1
    return SlotTargets(
        main=target * MAIN_MEAL_SHARE / divisor,
        snack=target * SNACK_SHARE / divisor,
    )


def rng_for_date(seed: Optional[int], plan_date: date) -> random.Random:
    """Generator for one plan date; a fixed seed still yields a different plan per day."""

    if seed is None:
        return random.Random()
    return random.Random(f"{seed}:{plan_date.isoformat()}")


def generate_day_plan(
    plan_date: date,
    profile: UserProfile,
    catalog: RecipeCatalog,
    rng: Optional[random.Random] = None,
) -> DayPlan:
    """Assemble a scaled meal for every toggled slot.

    Slots whose filtered candidate pool is empty are left out of the plan without
    raising; the caller gets a plan with fewer meals than toggled.
    """

    rng = rng or random.Random()
    target = resolve_target_calories(profile)
    targets = slot_calorie_targets(profile, target)

    used_ids: List[str] = []
    meals: List[MealPlan] = []
    for slot in active_slots(profile):
        candidates = catalog.candidates_for(slot.category, profile)
        slot_target = targets.for_slot(slot)
        chosen = select_for_target(candidates, used_ids, slot_target, rng)
        if chosen is None:
            logger.warning(
                "No recipe qualifies for %s on %s; slot omitted",
                slot.meal_type,
                plan_date,
                extra={"plan_date": plan_date.isoformat(), "slot": slot.meal_type},
            )
            metrics.MEAL_SLOTS_OMITTED.labels(slot=slot.meal_type).inc()
            continue

        used_ids.append(chosen.id)
        meals.append(
            MealPlan(
                type=slot.meal_type,
                time=slot.time,
                recipe=scale_recipe(chosen, slot_target),
                alternatives=alternatives_for(chosen, candidates),
            )
        )

    plan = DayPlan(
        date=plan_date,
        meals=meals,
        water_intake=0,
        water_goal=water_goal(profile.weight_kg, profile.sports_frequency),
    )
    logger.info(
        "Generated plan for %s: %s meal(s), %.0f/%s kcal",
        plan_date,
        len(meals),
        plan.total_calories,
        target,
        extra={"plan_date": plan_date.isoformat()},
    )
    return plan


def _replace_meal(plan: DayPlan, index: int, meal: MealPlan) -> DayPlan:
    meals = list(plan.meals)
    meals[index] = meal
    return plan.model_copy(update={"meals": meals})


def _meal_at(plan: DayPlan, index: int) -> MealPlan:
    if index < 0 or index >= len(plan.meals):
        raise IndexError(f"Plan for {plan.date} has no meal at index {index}")
    return plan.meals[index]


def toggle_eaten(plan: DayPlan, index: int) -> DayPlan:
    meal = _meal_at(plan, index)
    return _replace_meal(plan, index, meal.model_copy(update={"eaten": not meal.eaten}))


def toggle_favorite(plan: DayPlan, index: int) -> DayPlan:
    meal = _meal_at(plan, index)
    return _replace_meal(plan, index, meal.model_copy(update={"favorite": not meal.favorite}))


def swap_meal(plan: DayPlan, index: int, recipe: Recipe) -> DayPlan:
    """Put ``recipe`` into the slot; the previous recipe becomes the first alternative."""

    meal = _meal_at(plan, index)
    alternatives = [meal.recipe] + [alt for alt in meal.alternatives if alt.id != recipe.id]
    deduped: List[Recipe] = []
    for alternative in alternatives:
        if alternative.id == recipe.id or any(seen.id == alternative.id for seen in deduped):
            continue
        deduped.append(alternative)
    updated = meal.model_copy(
        update={"recipe": recipe, "alternatives": deduped[:DEFAULT_ALTERNATIVES]}
    )
    return _replace_meal(plan, index, updated)


def set_water_intake(plan: DayPlan, liters: float) -> DayPlan:
    return plan.model_copy(update={"water_intake": max(0.0, liters)})


def eaten_totals(plan: DayPlan) -> Nutrition:
    """Nutrition of the meals already marked as eaten."""

    return sum_nutrition([meal.recipe.nutrition for meal in plan.meals if meal.eaten])


__all__ = [
    "DEFAULT_TARGET_CALORIES",
    "SLOT_SCHEDULE",
    "SlotDefinition",
    "SlotTargets",
    "active_slots",
    "eaten_totals",
    "generate_day_plan",
    "resolve_target_calories",
    "rng_for_date",
    "set_water_intake",
    "slot_calorie_targets",
    "swap_meal",
    "toggle_eaten",
    "toggle_favorite",
]
