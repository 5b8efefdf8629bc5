"""Shared pytest fixtures for the NutriPlan test suite."""

from __future__ import annotations

from typing import Any, Callable, Dict, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from nutriplan.config import get_settings
from nutriplan.db.repository import reset_repository_state
from nutriplan.models.profile import UserProfile
from nutriplan.models.recipe import Ingredient, Nutrition, Recipe
from nutriplan.planner.app.planner import rng_for_date
from nutriplan.server import deps
from nutriplan.server.app import create_app

RecipeFactory = Callable[..., Recipe]


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    application.dependency_overrides[deps.get_rng_factory] = lambda: (
        lambda plan_date: rng_for_date(7, plan_date)
    )
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def sample_profile_payload() -> Dict[str, Any]:
    """Onboarding answers for a 30 year old man trying to lose weight."""

    return {
        "gender": "male",
        "age": 30,
        "height_cm": 175,
        "weight_kg": 80,
        "goal": "lose",
        "occupation": "sedentary",
        "daily_activity": "moderate",
        "sports_frequency": 3,
    }


@pytest.fixture()
def sample_profile(sample_profile_payload) -> UserProfile:
    return UserProfile.model_validate(sample_profile_payload)


@pytest.fixture()
def recipe_factory() -> RecipeFactory:
    """Build catalog recipes with sensible defaults for planner tests."""

    def _make(
        recipe_id: str,
        category: str = "dinner",
        calories: float = 600,
        ingredients: list[Ingredient] | None = None,
        **overrides: Any,
    ) -> Recipe:
        payload: Dict[str, Any] = {
            "id": recipe_id,
            "name": recipe_id.replace("-", " ").title(),
            "category": category,
            "prep_time_min": 5,
            "cook_time_min": 10,
            "total_time_min": 15,
            "servings": 1,
            "ingredients": ingredients
            if ingredients is not None
            else [Ingredient(name="Reis", amount=100, unit="g", category="Getreide")],
            "nutrition": Nutrition(calories=calories, protein=30, carbs=60, fat=20, fiber=5),
            "instructions": ["Kochen."],
        }
        payload.update(overrides)
        return Recipe.model_validate(payload)

    return _make


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated SQLite database location."""

    db_path = tmp_path / "test_nutriplan.db"
    monkeypatch.setenv("NUTRIPLAN_DATABASE_PATH", str(db_path))
    get_settings.cache_clear()
    reset_repository_state()
    deps.reset_catalog_cache()
    yield
    reset_repository_state()
    deps.reset_catalog_cache()
    monkeypatch.delenv("NUTRIPLAN_DATABASE_PATH", raising=False)
    get_settings.cache_clear()
