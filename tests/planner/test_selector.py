"""Recipe selection tests."""

from __future__ import annotations

import random

from nutriplan.planner.app.selector import alternatives_for, select_for_target


def _pool(recipe_factory):
    return [
        recipe_factory(f"dish-{calories}", "lunch", calories=calories)
        for calories in (100, 300, 500, 700, 900)
    ]


def test_choice_comes_from_three_closest(recipe_factory):
    pool = _pool(recipe_factory)
    for seed in range(25):
        chosen = select_for_target(pool, [], 480, random.Random(seed))
        assert chosen.id in {"dish-300", "dish-500", "dish-700"}


def test_same_seed_gives_same_choice(recipe_factory):
    pool = _pool(recipe_factory)
    first = select_for_target(pool, [], 480, random.Random(42))
    second = select_for_target(pool, [], 480, random.Random(42))
    assert first == second


def test_used_recipes_are_skipped(recipe_factory):
    pool = _pool(recipe_factory)
    used = ["dish-300", "dish-500", "dish-700", "dish-100"]
    assert select_for_target(pool, used, 480, random.Random(1)).id == "dish-900"


def test_falls_back_to_first_candidate_when_all_used(recipe_factory):
    pool = _pool(recipe_factory)
    used = [recipe.id for recipe in pool]
    assert select_for_target(pool, used, 480, random.Random(1)).id == "dish-100"


def test_empty_pool_yields_none():
    assert select_for_target([], [], 500, random.Random(1)) is None


def test_alternatives_are_closest_same_category_recipes(recipe_factory):
    pool = _pool(recipe_factory) + [recipe_factory("breakfast-510", "breakfast", calories=510)]
    chosen = pool[2]

    alternatives = alternatives_for(chosen, pool)

    assert [recipe.id for recipe in alternatives] == ["dish-300", "dish-700"]
