"""CLI command tests."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from nutriplan.cli import app
from nutriplan.config import get_settings
from nutriplan.planner.app.catalog import load_catalog

runner = CliRunner()


@pytest.fixture()
def profile_file(tmp_path, sample_profile_payload, monkeypatch):
    monkeypatch.setenv("NUTRIPLAN_LOG_LEVEL", "ERROR")
    get_settings.cache_clear()
    path = tmp_path / "profile.json"
    path.write_text(json.dumps(sample_profile_payload), encoding="utf-8")
    return path


def test_targets_command(profile_file):
    result = runner.invoke(app, ["targets", str(profile_file)])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["tdee"] == 2536
    assert payload["target_calories"] == 2036
    assert payload["macros"] == {"protein": 178, "carbs": 178, "fat": 68}


def test_plan_command_is_reproducible_with_seed(profile_file):
    args = ["plan", str(profile_file), "--date", "2025-07-01", "--seed", "3"]
    first = runner.invoke(app, args)
    second = runner.invoke(app, args + ["--pretty"])

    assert first.exit_code == 0, first.output
    plan = json.loads(first.stdout)
    assert plan["date"] == "2025-07-01"
    assert len(plan["meals"]) == 4
    assert json.loads(second.stdout) == plan


def test_plan_command_rejects_bad_date(profile_file):
    result = runner.invoke(app, ["plan", str(profile_file), "--date", "01.07.2025"])
    assert result.exit_code != 0


def test_shopping_list_command_groups_by_category(profile_file):
    result = runner.invoke(
        app,
        ["shopping-list", str(profile_file), "--start", "2025-07-01", "--days", "2", "--seed", "1"],
    )

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines
    assert not lines[0].startswith(" ")
    assert any(line.startswith("  ") for line in lines)


def test_convert_recipes_command(tmp_path, monkeypatch):
    monkeypatch.setenv("NUTRIPLAN_LOG_LEVEL", "ERROR")
    get_settings.cache_clear()
    source = tmp_path / "spoonacular.json"
    source.write_text(
        json.dumps([{"id": 5, "title": "Protein Bar", "readyInMinutes": 10, "servings": 8}]),
        encoding="utf-8",
    )
    target = tmp_path / "catalog.json"

    result = runner.invoke(app, ["convert-recipes", str(source), "--output", str(target)])

    assert result.exit_code == 0, result.output
    recipes = json.loads(target.read_text(encoding="utf-8"))
    assert [(recipe["id"], recipe["category"]) for recipe in recipes] == [("spoon-5", "snack")]
    assert load_catalog(target).get("spoon-5") is not None
