"""Command-line interface for NutriPlan."""

from __future__ import annotations

import json
import random
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Optional

import typer

from nutriplan.config import get_settings
from nutriplan.logging_utils import configure_logging
from nutriplan.models.profile import UserProfile
from nutriplan.planner.app.catalog import load_catalog
from nutriplan.planner.app.converters import load_spoonacular_recipes
from nutriplan.planner.app.planner import generate_day_plan, rng_for_date
from nutriplan.planner.app.shopping import build_shopping_list
from nutriplan.planner.profile_builder import complete_profile, nutrition_targets

app = typer.Typer(help="NutriPlan meal planning commands.")


def _load_profile(profile_path: str) -> UserProfile:
    with open(profile_path, "r", encoding="utf-8") as fh:
        payload = json.load(fh)
    profile = UserProfile.model_validate(payload)
    if profile.target_calories is None:
        profile = complete_profile(profile)
    return profile


def _parse_date(value: Optional[str]) -> date:
    if not value:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got '{value}'") from exc


def _rng(seed: Optional[int], plan_date: date) -> random.Random:
    return rng_for_date(seed if seed is not None else get_settings().planner_random_seed, plan_date)


def _echo_json(payload: Any, pretty: bool) -> None:
    if pretty:
        typer.echo(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False))
    else:
        typer.echo(json.dumps(payload, ensure_ascii=False))


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format, [settings.api_token or ""])


@app.command()
def targets(
    profile_path: str,
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """Print BMR, activity multiplier, TDEE, target calories, macros and water goal."""
    profile = _load_profile(profile_path)
    _echo_json(nutrition_targets(profile).model_dump(mode="json"), pretty)


@app.command()
def plan(
    profile_path: str,
    plan_date: Optional[str] = typer.Option(None, "--date", help="Plan date (YYYY-MM-DD)."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for recipe selection."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """
    Generate a day plan for the profile stored in the provided JSON file.
    """
    profile = _load_profile(profile_path)
    settings = get_settings()
    catalog = load_catalog(settings.recipe_catalog_path, settings.recipe_import_path)
    day = _parse_date(plan_date)
    day_plan = generate_day_plan(day, profile, catalog, _rng(seed, day))
    _echo_json(day_plan.model_dump(mode="json"), pretty)


@app.command("shopping-list")
def shopping_list(
    profile_path: str,
    start: Optional[str] = typer.Option(None, "--start", help="First day (YYYY-MM-DD)."),
    days: Optional[int] = typer.Option(None, "--days", min=1, max=31, help="Number of days."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for recipe selection."),
) -> None:
    """Generate plans for a range of days and print the aggregated shopping list."""

    settings = get_settings()
    profile = _load_profile(profile_path)
    catalog = load_catalog(settings.recipe_catalog_path, settings.recipe_import_path)
    first_day = _parse_date(start)
    plan_dates = [
        first_day + timedelta(days=offset) for offset in range(days or settings.shopping_horizon_days)
    ]
    plans = [generate_day_plan(day, profile, catalog, _rng(seed, day)) for day in plan_dates]

    current_category = None
    for item in build_shopping_list(plans):
        if item.category != current_category:
            current_category = item.category
            typer.secho(current_category, bold=True)
        typer.echo(f"  {item.display_amount} {item.unit} {item.name}".rstrip())


@app.command("convert-recipes")
def convert_recipes(
    payload_path: Path,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write catalog JSON here."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """Convert a saved Spoonacular response into catalog recipe JSON."""

    recipes = load_spoonacular_recipes(payload_path)
    payload = [recipe.model_dump(mode="json") for recipe in recipes]
    if output is None:
        _echo_json(payload, pretty)
        return
    output.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    typer.echo(f"Wrote {len(payload)} recipe(s) to {output}")


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for `python -m nutriplan`."""
    app(prog_name="nutriplan", args=argv)


if __name__ == "__main__":
    main()
