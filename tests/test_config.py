"""Settings loading tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from nutriplan.config import get_settings


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("NUTRIPLAN_API_TOKEN", "abc")
    monkeypatch.setenv("NUTRIPLAN_LOG_REQUESTS", "off")
    monkeypatch.setenv("NUTRIPLAN_PLANNER_SEED", "42")
    monkeypatch.setenv("NUTRIPLAN_SHOPPING_HORIZON_DAYS", "3")
    monkeypatch.setenv("NUTRIPLAN_RECIPE_CATALOG_PATH", "/tmp/recipes.json")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.api_token == "abc"
    assert settings.log_requests is False
    assert settings.planner_random_seed == 42
    assert settings.shopping_horizon_days == 3
    assert settings.recipe_catalog_path == Path("/tmp/recipes.json")


def test_malformed_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("NUTRIPLAN_PLANNER_SEED", "not-a-number")
    monkeypatch.setenv("NUTRIPLAN_SHOPPING_HORIZON_DAYS", "week")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.planner_random_seed is None
    assert settings.shopping_horizon_days == 7


@pytest.mark.parametrize("horizon", ["0", "50", "-3"])
def test_out_of_range_horizon_is_ignored(monkeypatch, horizon):
    monkeypatch.setenv("NUTRIPLAN_SHOPPING_HORIZON_DAYS", horizon)
    get_settings.cache_clear()

    assert get_settings().shopping_horizon_days == 7


def test_recipe_import_path_from_env(monkeypatch):
    monkeypatch.setenv("NUTRIPLAN_RECIPE_IMPORT_PATH", "/tmp/spoonacular.json")
    get_settings.cache_clear()

    assert get_settings().recipe_import_path == Path("/tmp/spoonacular.json")


def test_settings_are_cached():
    assert get_settings() is get_settings()
    assert get_settings().database_path.name == "test_nutriplan.db"
