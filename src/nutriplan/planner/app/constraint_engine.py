"""Rule engine deciding which catalog recipes a profile may be served."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from nutriplan.models.profile import UserProfile
from nutriplan.models.recipe import Recipe

from .utils import normalize_name

logger = logging.getLogger(__name__)

# Diet types that require a matching dietary flag on the recipe.
FLAGGED_DIETS = frozenset({"vegetarian", "vegan"})

COOKING_EFFORT_TIME_LIMITS: Mapping[str, Optional[int]] = {
    "minimal": 15,
    "normal": 30,
    "elaborate": None,
}


@dataclass(frozen=True)
class RuleResult:
    """Outcome of applying an individual rule to a recipe."""

    name: str
    passed: bool
    details: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ConstraintEvaluation:
    """Rule results for a single recipe."""

    recipe: Recipe
    rule_results: Tuple[RuleResult, ...]

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.rule_results)


@dataclass(frozen=True)
class ProfileSnapshot:
    """Profile values normalized once and shared across rule evaluations."""

    profile: UserProfile
    allergies: FrozenSet[str]
    excluded_foods: Tuple[str, ...]

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "ProfileSnapshot":
        return cls(
            profile=profile,
            allergies=frozenset(profile.allergies),
            excluded_foods=tuple(
                food.lower() for food in profile.excluded_foods if food.strip()
            ),
        )


class ConstraintRule:
    """Base class contract for all filtering rules."""

    name: str

    def evaluate(self, recipe: Recipe, snapshot: ProfileSnapshot) -> RuleResult:
        raise NotImplementedError


class AllergenExclusionRule(ConstraintRule):
    name = "allergen_exclusion"

    def evaluate(self, recipe: Recipe, snapshot: ProfileSnapshot) -> RuleResult:
        if not snapshot.allergies:
            return RuleResult(self.name, True)
        conflicts = sorted(snapshot.allergies.intersection(recipe.allergens))
        if conflicts:
            return RuleResult(
                self.name,
                False,
                details=(f"recipe contains allergens {', '.join(conflicts)}",),
            )
        return RuleResult(self.name, True)


class ExcludedFoodRule(ConstraintRule):
    name = "excluded_food"

    def evaluate(self, recipe: Recipe, snapshot: ProfileSnapshot) -> RuleResult:
        for food in snapshot.excluded_foods:
            for ingredient in recipe.ingredients:
                if food in ingredient.name.lower():
                    return RuleResult(
                        self.name,
                        False,
                        details=(f"ingredient '{ingredient.name}' matches excluded food '{food}'",),
                    )
        return RuleResult(self.name, True)


class DietCompatibilityRule(ConstraintRule):
    name = "diet_compatibility"

    def evaluate(self, recipe: Recipe, snapshot: ProfileSnapshot) -> RuleResult:
        diet = snapshot.profile.diet_type
        if diet not in FLAGGED_DIETS:
            return RuleResult(self.name, True)
        flags = {normalize_name(flag) for flag in recipe.dietary_flags}
        if diet in flags:
            return RuleResult(self.name, True)
        return RuleResult(
            self.name,
            False,
            details=(f"recipe missing dietary flag '{diet}'",),
        )


class CookingEffortRule(ConstraintRule):
    name = "cooking_effort"

    def evaluate(self, recipe: Recipe, snapshot: ProfileSnapshot) -> RuleResult:
        limit = COOKING_EFFORT_TIME_LIMITS.get(snapshot.profile.cooking_effort)
        if limit is None or recipe.total_time_min <= limit:
            return RuleResult(self.name, True)
        return RuleResult(
            self.name,
            False,
            details=(
                f"recipe requires {recipe.total_time_min} min, "
                f"exceeding limit of {limit} min",
            ),
        )


class ConstraintEngine:
    """Evaluate recipes against declarative hard rules."""

    def __init__(self, rules: Sequence[ConstraintRule]) -> None:
        self._rules = tuple(rules)

    def evaluate_recipe(self, recipe: Recipe, snapshot: ProfileSnapshot) -> ConstraintEvaluation:
        """Evaluate a recipe, stopping at the first failing rule."""
        results: List[RuleResult] = []
        for rule in self._rules:
            result = rule.evaluate(recipe, snapshot)
            results.append(result)
            if not result.passed:
                break
        return ConstraintEvaluation(recipe=recipe, rule_results=tuple(results))

    def filter_recipes(self, profile: UserProfile, recipes: Iterable[Recipe]) -> List[Recipe]:
        """Return the recipes that satisfy every rule, preserving catalog order."""
        snapshot = ProfileSnapshot.from_profile(profile)
        accepted: List[Recipe] = []
        for recipe in recipes:
            evaluation = self.evaluate_recipe(recipe, snapshot)
            if evaluation.passed:
                accepted.append(recipe)
                continue
            failed = evaluation.rule_results[-1]
            logger.debug("Recipe %s rejected by %s: %s", recipe.id, failed.name, "; ".join(failed.details))
        return accepted


def build_constraint_engine() -> ConstraintEngine:
    """Create a constraint engine instance with the default rule set."""
    return ConstraintEngine(
        rules=[
            AllergenExclusionRule(),
            ExcludedFoodRule(),
            DietCompatibilityRule(),
            CookingEffortRule(),
        ]
    )
