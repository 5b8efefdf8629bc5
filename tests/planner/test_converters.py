"""External recipe conversion tests."""

from __future__ import annotations

import json

import pytest

from nutriplan.planner.app.catalog import load_catalog
from nutriplan.planner.app.converters import (
    convert_spoonacular_recipe,
    extract_nutrition,
    load_spoonacular_recipes,
    map_to_category,
    translate_unit,
)


@pytest.fixture()
def pancake_payload():
    return {
        "id": 123,
        "title": "Banana Pancakes",
        "readyInMinutes": 50,
        "servings": 4,
        "vegetarian": True,
        "vegan": False,
        "dishTypes": ["breakfast"],
        "extendedIngredients": [
            {"name": "flour", "amount": 2, "unit": "cups", "aisle": "Backzutaten"},
            {"name": "egg", "amount": 1, "unit": ""},
        ],
        "nutrition": {
            "nutrients": [
                {"name": "Calories", "amount": 350.6},
                {"name": "Protein", "amount": 12.4},
                {"name": "Carbohydrates", "amount": 50},
                {"name": "Fat", "amount": 9.5},
            ]
        },
        "analyzedInstructions": [{"steps": [{"step": "Mix."}, {"step": "Fry."}]}],
    }


def test_convert_payload(pancake_payload):
    recipe = convert_spoonacular_recipe(pancake_payload)

    assert recipe.id == "spoon-123"
    assert recipe.category == "breakfast"
    assert (recipe.prep_time_min, recipe.total_time_min) == (15, 50)
    assert recipe.difficulty == "medium"
    assert recipe.meal_prepable is False
    assert recipe.storage_days == 3
    assert recipe.dietary_flags == ["vegetarian"]
    assert "vegetarisch" in recipe.tags
    assert [(i.name, i.unit, i.category) for i in recipe.ingredients] == [
        ("flour", "Tassen", "Backzutaten"),
        ("egg", "Stück", "Sonstiges"),
    ]
    assert recipe.nutrition.calories == 351
    assert recipe.nutrition.fat == 10
    assert recipe.nutrition.fiber == 0
    assert recipe.instructions == ["Mix.", "Fry."]
    assert recipe.image.endswith("123-636x393.jpg")


def test_convert_applies_defaults_and_forced_category():
    recipe = convert_spoonacular_recipe({"id": 7, "title": "Mystery"}, force_category="snack")

    assert recipe.category == "snack"
    assert recipe.total_time_min == 30
    assert recipe.servings == 2
    assert recipe.difficulty == "easy"
    assert recipe.meal_prepable is True
    assert recipe.instructions == ["Siehe Originalrezept"]


@pytest.mark.parametrize(
    "dish_types, title, expected",
    [
        (["breakfast", "snack"], "", "breakfast"),
        ([], "Fluffy Pancake Stack", "breakfast"),
        (["appetizer"], "", "snack"),
        ([], "Protein Bar", "snack"),
        (["soup"], "", "lunch"),
        (["main course"], "Pasta", "dinner"),
        (None, "", "dinner"),
    ],
)
def test_map_to_category(dish_types, title, expected):
    assert map_to_category(dish_types, title) == expected


@pytest.mark.parametrize(
    "unit, expected",
    [("Tbsp", "EL"), ("teaspoons", "TL"), ("", "Stück"), (None, "Stück"), ("scoop", "scoop")],
)
def test_translate_unit(unit, expected):
    assert translate_unit(unit) == expected


def test_extract_nutrition_ignores_missing_entries():
    nutrition = extract_nutrition([{"name": "Calories", "amount": 99.5}])
    assert nutrition.calories == 100
    assert nutrition.protein == 0


def test_unknown_durations_fall_back_to_ready_time():
    recipe = convert_spoonacular_recipe(
        {"id": 9, "title": "Stew", "readyInMinutes": 60, "preparationMinutes": -1, "cookingMinutes": -1}
    )
    assert recipe.prep_time_min == 18
    assert recipe.total_time_min == 60


@pytest.fixture()
def search_response_file(tmp_path, pancake_payload):
    path = tmp_path / "spoonacular.json"
    broken = {"title": "Missing id"}
    path.write_text(json.dumps({"results": [pancake_payload, broken]}), encoding="utf-8")
    return path


def test_load_recipes_from_search_response(search_response_file):
    recipes = load_spoonacular_recipes(search_response_file)

    assert [recipe.id for recipe in recipes] == ["spoon-123"]


def test_load_recipes_from_plain_list(tmp_path, pancake_payload):
    path = tmp_path / "recipes.json"
    path.write_text(json.dumps([pancake_payload]), encoding="utf-8")

    assert [recipe.name for recipe in load_spoonacular_recipes(path)] == ["Banana Pancakes"]


def test_catalog_adds_imported_recipes(search_response_file):
    bundled = load_catalog()
    catalog = load_catalog(import_path=search_response_file)

    assert len(catalog) == len(bundled) + 1
    assert catalog.get("spoon-123") is not None
    assert "spoon-123" in [recipe.id for recipe in catalog.by_category("breakfast")]
