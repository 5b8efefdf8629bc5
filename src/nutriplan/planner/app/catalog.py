"""Recipe catalog access and per-category caching."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import TypeAdapter

from nutriplan.models.profile import UserProfile
from nutriplan.models.recipe import RECIPE_CATEGORIES, Recipe, RecipeCategory

from .constraint_engine import ConstraintEngine, build_constraint_engine
from .converters import load_spoonacular_recipes

logger = logging.getLogger(__name__)

BUNDLED_CATALOG = "recipes.json"

_RECIPE_LIST = TypeAdapter(list[Recipe])


class RecipeCatalog:
    """Read-only recipe collection with an owned category cache.

    The cache only partitions recipes by category. It is filled lazily and can be
    dropped with :meth:`invalidate`, e.g. after :meth:`extend` adds converted
    recipes from an external source.
    """

    def __init__(
        self,
        recipes: Iterable[Recipe],
        engine: Optional[ConstraintEngine] = None,
    ) -> None:
        self._recipes: Tuple[Recipe, ...] = tuple(recipes)
        self._engine = engine or build_constraint_engine()
        self._by_id: Dict[str, Recipe] = {recipe.id: recipe for recipe in self._recipes}
        self._category_cache: Dict[str, Tuple[Recipe, ...]] = {}

    def __len__(self) -> int:
        return len(self._recipes)

    def __iter__(self):
        return iter(self._recipes)

    @property
    def recipes(self) -> Tuple[Recipe, ...]:
        return self._recipes

    def get(self, recipe_id: str) -> Optional[Recipe]:
        return self._by_id.get(recipe_id)

    def by_category(self, category: RecipeCategory) -> Tuple[Recipe, ...]:
        cached = self._category_cache.get(category)
        if cached is None:
            cached = tuple(recipe for recipe in self._recipes if recipe.category == category)
            self._category_cache[category] = cached
        return cached

    def candidates_for(self, category: RecipeCategory, profile: UserProfile) -> List[Recipe]:
        """Recipes of ``category`` the profile is allowed to eat; may be empty."""
        return self._engine.filter_recipes(profile, self.by_category(category))

    def extend(self, recipes: Iterable[Recipe]) -> None:
        """Add recipes (new ids only) and drop the category cache."""
        added = 0
        merged = list(self._recipes)
        for recipe in recipes:
            if recipe.id in self._by_id:
                continue
            merged.append(recipe)
            self._by_id[recipe.id] = recipe
            added += 1
        self._recipes = tuple(merged)
        self.invalidate()
        logger.debug("Catalog extended by %s recipe(s); total=%s", added, len(self._recipes))

    def invalidate(self) -> None:
        self._category_cache.clear()


def _read_catalog_text(path: Optional[Path]) -> str:
    if path is not None:
        return path.read_text(encoding="utf-8")
    return resources.files("nutriplan.data").joinpath(BUNDLED_CATALOG).read_text(encoding="utf-8")


def load_catalog(path: Optional[Path] = None, import_path: Optional[Path] = None) -> RecipeCatalog:
    """Load the bundled recipe dataset, or the JSON file at ``path`` when given.

    ``import_path`` names a saved Spoonacular response; its recipes are converted
    and added on top of the catalog.
    """

    payload = json.loads(_read_catalog_text(path))
    recipes = _RECIPE_LIST.validate_python(payload)
    counts = {
        category: sum(1 for recipe in recipes if recipe.category == category)
        for category in RECIPE_CATEGORIES
    }
    logger.info(
        "Loaded %s recipes from %s (%s)",
        len(recipes),
        path or BUNDLED_CATALOG,
        ", ".join(f"{key}={value}" for key, value in counts.items()),
    )
    catalog = RecipeCatalog(recipes)
    if import_path is not None:
        catalog.extend(load_spoonacular_recipes(import_path))
    return catalog


__all__ = ["BUNDLED_CATALOG", "RecipeCatalog", "load_catalog"]
