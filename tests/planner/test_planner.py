"""Day plan assembly and plan edit tests."""

from __future__ import annotations

import random
from datetime import date

import pytest
from prometheus_client import REGISTRY

from nutriplan.models.profile import MealToggles
from nutriplan.planner.app.catalog import RecipeCatalog
from nutriplan.planner.app.planner import (
    DEFAULT_TARGET_CALORIES,
    active_slots,
    eaten_totals,
    generate_day_plan,
    resolve_target_calories,
    rng_for_date,
    set_water_intake,
    slot_calorie_targets,
    swap_meal,
    toggle_eaten,
    toggle_favorite,
)

PLAN_DATE = date(2025, 3, 1)


@pytest.fixture()
def catalog(recipe_factory) -> RecipeCatalog:
    recipes = []
    for category, calories in (
        ("breakfast", (400, 550, 700)),
        ("lunch", (500, 600, 750)),
        ("dinner", (450, 600, 800)),
        ("snack", (150, 200, 260)),
    ):
        recipes.extend(
            recipe_factory(f"{category}-{value}", category, calories=value) for value in calories
        )
    return RecipeCatalog(recipes)


def _omitted(slot: str) -> float:
    return REGISTRY.get_sample_value("nutriplan_meal_slots_omitted_total", {"slot": slot}) or 0.0


def test_target_resolution_falls_back_to_default(sample_profile):
    assert resolve_target_calories(sample_profile) == DEFAULT_TARGET_CALORIES
    assert resolve_target_calories(sample_profile.model_copy(update={"tdee": 2400})) == 2400
    assert (
        resolve_target_calories(sample_profile.model_copy(update={"tdee": 2400, "target_calories": 1900}))
        == 1900
    )


def test_slot_targets_weight_mains_and_snacks(sample_profile):
    targets = slot_calorie_targets(sample_profile, 2000)
    assert targets.main == pytest.approx(600)
    assert targets.snack == pytest.approx(200)


def test_slot_targets_with_no_active_slots(sample_profile):
    profile = sample_profile.model_copy(
        update={
            "meals": MealToggles(
                breakfast=False, lunch=False, afternoon_snack=False, dinner=False
            )
        }
    )
    assert active_slots(profile) == []
    targets = slot_calorie_targets(profile, 2000)
    assert targets.main == pytest.approx(600)


def test_plan_follows_slot_schedule(sample_profile, catalog):
    plan = generate_day_plan(PLAN_DATE, sample_profile, catalog, random.Random(3))

    assert plan.date == PLAN_DATE
    assert [(meal.type, meal.time) for meal in plan.meals] == [
        ("breakfast", "07:30"),
        ("lunch", "12:30"),
        ("afternoonSnack", "15:30"),
        ("dinner", "19:00"),
    ]
    assert plan.water_intake == 0
    assert plan.water_goal == pytest.approx(3.1)


def test_meals_are_scaled_to_slot_targets(sample_profile, catalog):
    plan = generate_day_plan(PLAN_DATE, sample_profile, catalog, random.Random(3))

    for meal in plan.meals:
        expected = 200 if meal.type == "afternoonSnack" else 600
        assert meal.recipe.nutrition.calories == pytest.approx(expected, abs=1)
    assert plan.total_calories == sum(meal.recipe.nutrition.calories for meal in plan.meals)
    assert plan.total_macros.protein == sum(meal.recipe.nutrition.protein for meal in plan.meals)


def test_same_seed_reproduces_plan(sample_profile, catalog):
    first = generate_day_plan(PLAN_DATE, sample_profile, catalog, random.Random(11))
    second = generate_day_plan(PLAN_DATE, sample_profile, catalog, random.Random(11))
    assert first == second


def test_rng_for_date_varies_by_day_but_not_by_call():
    first = rng_for_date(5, date(2025, 3, 1)).random()

    assert rng_for_date(5, date(2025, 3, 1)).random() == first
    assert rng_for_date(5, date(2025, 3, 2)).random() != first
    assert rng_for_date(6, date(2025, 3, 1)).random() != first


def test_recipes_are_not_repeated_within_a_day(sample_profile, catalog):
    profile = sample_profile.model_copy(
        update={"meals": MealToggles(morning_snack=True, afternoon_snack=True, late_snack=True)}
    )
    plan = generate_day_plan(PLAN_DATE, profile, catalog, random.Random(5))

    ids = [meal.recipe.id for meal in plan.meals]
    assert len(plan.meals) == 6
    assert len(ids) == len(set(ids))


def test_alternatives_exclude_the_chosen_recipe(sample_profile, catalog):
    plan = generate_day_plan(PLAN_DATE, sample_profile, catalog, random.Random(5))

    for meal in plan.meals:
        assert len(meal.alternatives) == 2
        assert meal.recipe.id not in {alt.id for alt in meal.alternatives}
        assert {alt.category for alt in meal.alternatives} == {meal.recipe.category}


def test_empty_candidate_pool_omits_slot(sample_profile, recipe_factory):
    catalog = RecipeCatalog(
        [
            recipe_factory("breakfast-1", "breakfast"),
            recipe_factory("lunch-1", "lunch"),
            recipe_factory("dinner-1", "dinner"),
        ]
    )
    before = _omitted("afternoonSnack")

    plan = generate_day_plan(PLAN_DATE, sample_profile, catalog, random.Random(1))

    assert len(plan.meals) == len(active_slots(sample_profile)) - 1
    assert "afternoonSnack" not in [meal.type for meal in plan.meals]
    assert _omitted("afternoonSnack") == before + 1


def test_filtered_out_recipes_are_never_planned(sample_profile, recipe_factory):
    catalog = RecipeCatalog(
        [
            recipe_factory("dinner-nuts", "dinner", allergens=["nuesse"]),
            recipe_factory("dinner-safe", "dinner"),
        ]
    )
    profile = sample_profile.model_copy(update={"allergies": ["nuesse"]})

    plan = generate_day_plan(PLAN_DATE, profile, catalog, random.Random(1))

    assert [meal.recipe.id for meal in plan.meals] == ["dinner-safe"]
    assert plan.meals[0].alternatives == []


@pytest.fixture()
def plan(sample_profile, catalog):
    return generate_day_plan(PLAN_DATE, sample_profile, catalog, random.Random(9))


def test_toggle_eaten_and_eaten_totals(plan):
    assert eaten_totals(plan).calories == 0

    updated = toggle_eaten(plan, 0)

    assert updated.meals[0].eaten is True
    assert plan.meals[0].eaten is False
    assert eaten_totals(updated).calories == updated.meals[0].recipe.nutrition.calories
    assert toggle_eaten(updated, 0).meals[0].eaten is False


def test_toggle_favorite(plan):
    assert toggle_favorite(plan, 1).meals[1].favorite is True


def test_swap_moves_previous_recipe_to_alternatives(plan):
    meal = plan.meals[2]
    replacement = meal.alternatives[1]

    updated = swap_meal(plan, 2, replacement)
    swapped = updated.meals[2]

    assert swapped.recipe == replacement
    assert [alt.id for alt in swapped.alternatives] == [meal.recipe.id, meal.alternatives[0].id]
    assert updated.total_calories == pytest.approx(
        plan.total_calories - meal.recipe.nutrition.calories + replacement.nutrition.calories
    )


@pytest.mark.parametrize("index", [-1, 4, 99])
def test_bad_index_raises_index_error(plan, index):
    with pytest.raises(IndexError):
        toggle_eaten(plan, index)
    with pytest.raises(IndexError):
        swap_meal(plan, index, plan.meals[0].recipe)


def test_water_intake_never_negative(plan):
    assert set_water_intake(plan, 1.5).water_intake == pytest.approx(1.5)
    assert set_water_intake(plan, -2).water_intake == 0
