"""Dependency definitions for the NutriPlan API server."""

from __future__ import annotations

import random
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Callable, List, Optional, Set

from fastapi import Depends, HTTPException, Request, status

from nutriplan.config import Settings, get_settings
from nutriplan.db.day_plans import clear_day_plans, get_day_plan, list_day_plans, save_day_plan
from nutriplan.db.extras import add_extra, list_extras, remove_extra
from nutriplan.db.favorites import add_favorite, list_favorites, remove_favorite
from nutriplan.db.profile import delete_profile, load_profile, save_profile
from nutriplan.db.shopping_list import list_checked_names, reset_checked_items, toggle_item_checked
from nutriplan.db.streaks import load_streak, record_activity
from nutriplan.models.intake import DayExtra, Streak
from nutriplan.models.plan import DayPlan
from nutriplan.models.profile import UserProfile
from nutriplan.planner.app.catalog import RecipeCatalog, load_catalog
from nutriplan.planner.app.planner import generate_day_plan, rng_for_date

DayPlanGenerator = Callable[[date, UserProfile, RecipeCatalog, random.Random], DayPlan]
RngFactory = Callable[[date], random.Random]
ProfileProvider = Callable[[], Optional[UserProfile]]
ProfileSaver = Callable[[UserProfile], UserProfile]
ProfileDeleter = Callable[[], None]
PlanFetcher = Callable[[date], Optional[DayPlan]]
PlanSaver = Callable[[DayPlan], DayPlan]
PlanRangeProvider = Callable[[date, date], List[DayPlan]]
PlanClearer = Callable[[], int]
CheckedNamesProvider = Callable[[], Set[str]]
CheckedToggler = Callable[[str], bool]
CheckedResetter = Callable[[], None]
FavoritesProvider = Callable[[], List[str]]
FavoriteAdder = Callable[[str], None]
FavoriteRemover = Callable[[str], None]
ExtrasProvider = Callable[[date], List[DayExtra]]
ExtraAdder = Callable[[DayExtra], DayExtra]
ExtraRemover = Callable[[date, str], None]
StreakProvider = Callable[[], Streak]
ActivityRecorder = Callable[[date], Streak]


@lru_cache(maxsize=4)
def _cached_catalog(path: Optional[Path], import_path: Optional[Path]) -> RecipeCatalog:
    return load_catalog(path, import_path)


def get_catalog(settings: Settings = Depends(get_settings)) -> RecipeCatalog:
    """Recipe catalog from the configured paths, loaded once per path pair."""

    return _cached_catalog(settings.recipe_catalog_path, settings.recipe_import_path)


def reset_catalog_cache() -> None:
    _cached_catalog.cache_clear()


def get_rng_factory(settings: Settings = Depends(get_settings)) -> RngFactory:
    """Generator per plan date; derived from ``NUTRIPLAN_PLANNER_SEED`` when set."""

    seed = settings.planner_random_seed
    return lambda plan_date: rng_for_date(seed, plan_date)


def get_day_plan_generator() -> DayPlanGenerator:
    return generate_day_plan


def get_profile_provider() -> ProfileProvider:
    return load_profile


def get_profile_saver() -> ProfileSaver:
    return save_profile


def get_profile_deleter() -> ProfileDeleter:
    return delete_profile


def get_plan_fetcher() -> PlanFetcher:
    return get_day_plan


def get_plan_saver() -> PlanSaver:
    return save_day_plan


def get_plan_range_provider() -> PlanRangeProvider:
    return lambda start, end: list_day_plans(start, end)


def get_plan_clearer() -> PlanClearer:
    return clear_day_plans


def get_checked_names_provider() -> CheckedNamesProvider:
    return list_checked_names


def get_checked_toggler() -> CheckedToggler:
    return toggle_item_checked


def get_checked_resetter() -> CheckedResetter:
    return reset_checked_items


def get_favorites_provider() -> FavoritesProvider:
    return list_favorites


def get_favorite_adder() -> FavoriteAdder:
    return add_favorite


def get_favorite_remover() -> FavoriteRemover:
    return remove_favorite


def get_extras_provider() -> ExtrasProvider:
    return list_extras


def get_extra_adder() -> ExtraAdder:
    return add_extra


def get_extra_remover() -> ExtraRemover:
    return remove_extra


def get_streak_provider() -> StreakProvider:
    return load_streak


def get_activity_recorder() -> ActivityRecorder:
    return record_activity


def require_profile(provider: ProfileProvider = Depends(get_profile_provider)) -> UserProfile:
    """Stored profile, or 409 while onboarding is incomplete."""

    profile = provider()
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No profile stored; complete onboarding first",
        )
    return profile


def require_api_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Ensure requests carry the configured API token when required."""

    token = settings.api_token
    if not token:
        return

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.split("Bearer ")[-1].strip() == token:
        return

    if request.headers.get("X-API-Key") == token:
        return

    if request.query_params.get("api_token") == token:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
