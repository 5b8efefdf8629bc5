"""Portion scaling tests."""

from __future__ import annotations

import pytest

from nutriplan.models.recipe import Ingredient
from nutriplan.planner.app.scaler import (
    MAX_SCALE_FACTOR,
    MIN_SCALE_FACTOR,
    scale_factor,
    scale_recipe,
)


def test_small_target_is_clamped_to_minimum_factor(recipe_factory):
    recipe = recipe_factory("big", calories=800)

    scaled = scale_recipe(recipe, 200)

    assert scale_factor(recipe, 200) == MIN_SCALE_FACTOR
    assert scaled.nutrition.calories == 240


def test_large_target_is_clamped_to_maximum_factor(recipe_factory):
    recipe = recipe_factory("small", calories=100)
    assert scale_factor(recipe, 5000) == MAX_SCALE_FACTOR
    assert scale_recipe(recipe, 5000).nutrition.calories == 300


def test_scaling_to_own_calories_is_identity(recipe_factory):
    recipe = recipe_factory("same", calories=550)
    scaled = scale_recipe(recipe, 550)

    assert scaled.nutrition == recipe.nutrition
    assert scaled.ingredients == recipe.ingredients
    assert scaled.servings == recipe.servings


def test_ingredients_and_servings_round_to_one_decimal(recipe_factory):
    recipe = recipe_factory(
        "soup",
        calories=600,
        servings=2,
        ingredients=[Ingredient(name="Linsen", amount=125, unit="g", category="Hülsenfrüchte")],
    )

    scaled = scale_recipe(recipe, 500)

    assert scaled.servings == pytest.approx(1.7)
    assert scaled.ingredients[0].amount == pytest.approx(104.2)
    assert scaled.nutrition.calories == 500
    assert scaled.id == recipe.id


@pytest.mark.parametrize("target", [0, -50])
def test_non_positive_target_leaves_recipe_unchanged(recipe_factory, target):
    recipe = recipe_factory("any", calories=400)
    assert scale_recipe(recipe, target) is recipe
    assert scale_factor(recipe, target) == 1.0


def test_zero_calorie_recipe_is_not_scaled(recipe_factory):
    recipe = recipe_factory("water", calories=0)
    assert scale_recipe(recipe, 300) is recipe
