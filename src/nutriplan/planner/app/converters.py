"""Conversion of third-party recipe payloads into catalog recipes.

Only the Spoonacular response shape is understood. Nothing here performs network
access; callers fetch payloads themselves and hand the decoded JSON over.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional

from nutriplan.models.recipe import Ingredient, Nutrition, Recipe, RecipeCategory

from .utils import round_int

logger = logging.getLogger(__name__)

DEFAULT_READY_MINUTES = 30
DEFAULT_SERVINGS = 2
DEFAULT_STORAGE_DAYS = 3
MEAL_PREP_MAX_MINUTES = 45
FALLBACK_INGREDIENT_CATEGORY = "Sonstiges"
FALLBACK_INSTRUCTIONS = ["Siehe Originalrezept"]

UNIT_TRANSLATIONS: Mapping[str, str] = {
    "tablespoon": "EL",
    "tablespoons": "EL",
    "tbsp": "EL",
    "tbsps": "EL",
    "teaspoon": "TL",
    "teaspoons": "TL",
    "tsp": "TL",
    "cup": "Tasse",
    "cups": "Tassen",
    "ounce": "oz",
    "ounces": "oz",
    "oz": "oz",
    "pound": "Pfund",
    "pounds": "Pfund",
    "lb": "Pfund",
    "lbs": "Pfund",
    "gram": "g",
    "grams": "g",
    "g": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "kg": "kg",
    "milliliter": "ml",
    "milliliters": "ml",
    "ml": "ml",
    "liter": "l",
    "liters": "l",
    "l": "l",
    "pinch": "Prise",
    "pinches": "Prisen",
    "clove": "Zehe",
    "cloves": "Zehen",
    "slice": "Scheibe",
    "slices": "Scheiben",
    "piece": "Stück",
    "pieces": "Stück",
    "serving": "Portion",
    "servings": "Portionen",
    "small": "klein",
    "medium": "mittel",
    "large": "groß",
    "bunch": "Bund",
    "can": "Dose",
    "cans": "Dosen",
    "package": "Packung",
    "packages": "Packungen",
    "bag": "Beutel",
    "bags": "Beutel",
    "head": "Kopf",
    "heads": "Köpfe",
    "stalk": "Stange",
    "stalks": "Stangen",
    "sprig": "Zweig",
    "sprigs": "Zweige",
    "handful": "Handvoll",
    "handfuls": "Handvoll",
    "dash": "Spritzer",
    "dashes": "Spritzer",
    "drop": "Tropfen",
    "drops": "Tropfen",
}

_BREAKFAST_TITLE_WORDS = ("breakfast", "pancake", "oatmeal", "eggs", "smoothie")
_SNACK_TITLE_WORDS = ("snack", "bar")


def translate_unit(unit: Optional[str]) -> str:
    """Map an English unit to the German short form; unknown units pass through."""

    if not unit or not unit.strip():
        return "Stück"
    return UNIT_TRANSLATIONS.get(unit.strip().lower(), unit)


def map_to_category(dish_types: Optional[list[str]], title: str = "") -> RecipeCategory:
    """Guess the meal category from dish types and title keywords."""

    types = {value.lower() for value in dish_types or []}
    lowered = title.lower()

    if "breakfast" in types or any(word in lowered for word in _BREAKFAST_TITLE_WORDS):
        return "breakfast"
    if types & {"snack", "appetizer"} or any(word in lowered for word in _SNACK_TITLE_WORDS):
        return "snack"
    if types & {"lunch", "salad", "soup", "sandwich"}:
        return "lunch"
    return "dinner"


def extract_nutrition(nutrients: Optional[list[Mapping[str, Any]]]) -> Nutrition:
    """Pick calories and macros out of a nutrient list by (case-insensitive) name."""

    amounts = {
        str(entry.get("name", "")).lower(): float(entry.get("amount") or 0)
        for entry in nutrients or []
    }

    def _find(name: str) -> int:
        return round_int(max(amounts.get(name, 0.0), 0.0))

    return Nutrition(
        calories=_find("calories"),
        protein=_find("protein"),
        carbs=_find("carbohydrates"),
        fat=_find("fat"),
        fiber=_find("fiber"),
    )


def _positive_minutes(value: Any) -> int:
    # The API reports unknown durations as -1.
    return int(value) if isinstance(value, (int, float)) and value > 0 else 0


def _instructions(payload: Mapping[str, Any]) -> list[str]:
    analyzed = payload.get("analyzedInstructions") or []
    if analyzed:
        steps = [step.get("step", "") for step in analyzed[0].get("steps") or []]
        steps = [step for step in steps if step]
        if steps:
            return steps
    if payload.get("instructions"):
        return [payload["instructions"]]
    return list(FALLBACK_INSTRUCTIONS)


def convert_spoonacular_recipe(
    payload: Mapping[str, Any],
    force_category: Optional[RecipeCategory] = None,
) -> Recipe:
    """Build a catalog :class:`Recipe` from a Spoonacular recipe payload."""

    recipe_id = payload["id"]
    title = payload.get("title") or ""
    ready = payload.get("readyInMinutes") or DEFAULT_READY_MINUTES

    dietary_flags: list[str] = []
    tags: list[str] = list(payload.get("dishTypes") or [])
    if payload.get("vegetarian"):
        dietary_flags.append("vegetarian")
        tags.append("vegetarisch")
    if payload.get("vegan"):
        dietary_flags.append("vegan")
        tags.append("vegan")
    if payload.get("glutenFree"):
        dietary_flags.append("gluten-free")
    if payload.get("dairyFree"):
        dietary_flags.append("dairy-free")

    ingredients = [
        Ingredient(
            name=entry.get("name") or "unbekannt",
            amount=max(float(entry.get("amount") or 0), 0.0),
            unit=translate_unit(entry.get("unit")),
            category=entry.get("aisle") or FALLBACK_INGREDIENT_CATEGORY,
        )
        for entry in payload.get("extendedIngredients") or []
    ]

    recipe = Recipe(
        id=f"spoon-{recipe_id}",
        name=title,
        category=force_category or map_to_category(payload.get("dishTypes"), title),
        tags=tags,
        prep_time_min=_positive_minutes(payload.get("preparationMinutes")) or int(ready * 0.3),
        cook_time_min=_positive_minutes(payload.get("cookingMinutes")) or int(ready * 0.7),
        total_time_min=ready,
        difficulty="medium" if ready > MEAL_PREP_MAX_MINUTES else "easy",
        servings=payload.get("servings") or DEFAULT_SERVINGS,
        image=payload.get("image") or f"https://img.spoonacular.com/recipes/{recipe_id}-636x393.jpg",
        ingredients=ingredients,
        nutrition=extract_nutrition((payload.get("nutrition") or {}).get("nutrients")),
        instructions=_instructions(payload),
        allergens=[],
        dietary_flags=dietary_flags,
        meal_prepable=ready <= MEAL_PREP_MAX_MINUTES,
        storage_days=DEFAULT_STORAGE_DAYS,
    )
    logger.debug("Converted external recipe %s into category %s", recipe.id, recipe.category)
    return recipe


def _payload_entries(document: Any) -> List[Mapping[str, Any]]:
    # Search responses wrap recipes in "results", random picks in "recipes".
    if isinstance(document, Mapping):
        for key in ("recipes", "results"):
            if isinstance(document.get(key), list):
                return document[key]
        return [document]
    if isinstance(document, list):
        return document
    raise ValueError(f"Unsupported recipe payload of type {type(document).__name__}")


def load_spoonacular_recipes(path: Path) -> List[Recipe]:
    """Convert every recipe in a saved Spoonacular response file.

    Entries that cannot be converted are logged and skipped.
    """

    document = json.loads(path.read_text(encoding="utf-8"))
    recipes: List[Recipe] = []
    for entry in _payload_entries(document):
        try:
            recipes.append(convert_spoonacular_recipe(entry))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping unconvertible recipe payload from %s: %s", path, exc)
    logger.info("Converted %s external recipe(s) from %s", len(recipes), path)
    return recipes


__all__ = [
    "convert_spoonacular_recipe",
    "extract_nutrition",
    "load_spoonacular_recipes",
    "map_to_category",
    "translate_unit",
]
