"""ASGI application for NutriPlan."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from time import perf_counter
from typing import Any, Optional
from uuid import uuid4

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field, ValidationError

from nutriplan import __version__, metrics
from nutriplan.config import Settings, get_settings
from nutriplan.logging_utils import configure_logging as configure_app_logging
from nutriplan.models.intake import ConsumedSummary, DayExtra, Streak
from nutriplan.models.plan import DayPlan
from nutriplan.models.profile import NutritionTargets, UserProfile
from nutriplan.models.recipe import RECIPE_CATEGORIES, Nutrition, Recipe, RecipeCategory
from nutriplan.models.shopping import ShoppingItem
from nutriplan.planner.app import planner
from nutriplan.planner.app.catalog import RecipeCatalog
from nutriplan.planner.app.intake import consumed_summary
from nutriplan.planner.app.shopping import build_shopping_list
from nutriplan.planner.profile_builder import complete_profile, nutrition_targets
from nutriplan.server import deps

logger = logging.getLogger(__name__)

LIST_FIELDS = ("allergies", "excluded_foods", "preferred_foods", "sports_types")
DERIVED_FIELDS = ("tdee", "target_calories", "macros")


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.hex()
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    return repr(value)


def _normalize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{key: _json_safe(value) for key, value in error.items()} for error in errors]


def _configure_logging(settings: Settings) -> None:
    configure_app_logging(settings.log_level, settings.log_format, [settings.api_token or ""])


def _coerce_list_fields(payload: dict[str, Any]) -> dict[str, Any]:
    """Accept comma separated strings for the free-text list fields."""

    data = dict(payload)
    for key in LIST_FIELDS:
        value = data.get(key)
        if isinstance(value, str):
            data[key] = [entry.strip() for entry in value.split(",") if entry.strip()]
        elif value is None and key in data:
            data[key] = []
    return data


def _stored_plan_or_404(fetcher: deps.PlanFetcher, plan_date: date) -> DayPlan:
    plan = fetcher(plan_date)
    if plan is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No plan stored for {plan_date.isoformat()}",
        )
    return plan


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="NutriPlan", version=__version__)
    logger.debug("Application created with log level %s", settings.log_level)

    if settings.log_requests:
        access_logger = logging.getLogger("nutriplan.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details without leaking sensitive data."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            path = request.url.path
            method = request.method
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(
                    duration_ms / 1000.0
                )
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
            metrics.REQUEST_COUNT.labels(
                method=method,
                path=path,
                status=str(response.status_code),
            ).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        body_preview: str | None = None
        raw_body = await request.body()
        if raw_body:
            decoded = raw_body.decode("utf-8", errors="replace")
            if len(decoded) > 2048:
                decoded = decoded[:2048] + "...(truncated)"
            body_preview = decoded

        log_kwargs: dict[str, Any] = {}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            log_kwargs["extra"] = {"request_id": request_id}

        logger.warning(
            "Validation error on %s %s: %s | body=%s",
            request.method,
            request.url.path,
            exc.errors(),
            body_preview,
            **log_kwargs,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": _normalize_validation_errors(exc.errors())},
        )

    # Profile -----------------------------------------------------------------

    @application.get("/profile", response_model=UserProfile, summary="Get the stored profile")
    def profile_get(
        provider: deps.ProfileProvider = Depends(deps.get_profile_provider),
    ) -> UserProfile:
        profile = provider()
        if profile is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No profile stored")
        return profile

    @application.put(
        "/profile",
        response_model=UserProfile,
        summary="Create or update the profile",
    )
    def profile_update(
        payload: dict[str, Any] = Body(...),
        auth: None = Depends(deps.require_api_token),
        provider: deps.ProfileProvider = Depends(deps.get_profile_provider),
        saver: deps.ProfileSaver = Depends(deps.get_profile_saver),
    ) -> UserProfile:
        current = provider()
        update_data = _coerce_list_fields(payload)
        for key in DERIVED_FIELDS:
            update_data.pop(key, None)
        merged = current.model_dump() if current is not None else {}
        merged.update(update_data)
        try:
            profile = UserProfile.model_validate(merged)
        except ValidationError as exc:
            logger.warning("Invalid profile payload=%s errors=%s", payload, exc.errors())
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=_normalize_validation_errors(exc.errors()),
            ) from exc

        completed = complete_profile(profile)
        logger.info(
            "Profile saved: goal=%s target_calories=%s",
            completed.goal,
            completed.target_calories,
        )
        return saver(completed)

    @application.delete(
        "/profile",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete the stored profile",
    )
    def profile_delete(
        auth: None = Depends(deps.require_api_token),
        deleter: deps.ProfileDeleter = Depends(deps.get_profile_deleter),
    ) -> None:
        deleter()

    @application.get(
        "/targets",
        response_model=NutritionTargets,
        summary="Calculated energy, macro and water targets",
    )
    def targets_get(profile: UserProfile = Depends(deps.require_profile)) -> NutritionTargets:
        return nutrition_targets(profile)

    # Recipes -----------------------------------------------------------------

    @application.get("/recipes", response_model=list[Recipe], summary="List catalog recipes")
    def recipes_list(
        category: Optional[RecipeCategory] = Query(default=None),
        filtered: bool = Query(default=False),
        catalog: RecipeCatalog = Depends(deps.get_catalog),
        provider: deps.ProfileProvider = Depends(deps.get_profile_provider),
    ) -> list[Recipe]:
        categories = [category] if category else list(RECIPE_CATEGORIES)
        if not filtered:
            return [recipe for name in categories for recipe in catalog.by_category(name)]

        profile = provider()
        if profile is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="No profile stored; complete onboarding first",
            )
        return [recipe for name in categories for recipe in catalog.candidates_for(name, profile)]

    @application.get("/recipes/{recipe_id}", response_model=Recipe, summary="Get a recipe")
    def recipe_get(
        recipe_id: str,
        catalog: RecipeCatalog = Depends(deps.get_catalog),
    ) -> Recipe:
        recipe = catalog.get(recipe_id)
        if recipe is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Recipe {recipe_id} not found",
            )
        return recipe

    # Day plans ---------------------------------------------------------------

    def _generate(
        plan_date: date,
        profile: UserProfile,
        catalog: RecipeCatalog,
        generator: deps.DayPlanGenerator,
        rng_factory: deps.RngFactory,
        trigger: str,
    ) -> DayPlan:
        plan = generator(plan_date, profile, catalog, rng_factory(plan_date))
        metrics.DAY_PLANS_GENERATED.labels(trigger=trigger).inc()
        return plan

    @application.get("/plans/{plan_date}", response_model=DayPlan, summary="Get or create a day plan")
    def plan_get(
        plan_date: date,
        fetcher: deps.PlanFetcher = Depends(deps.get_plan_fetcher),
        saver: deps.PlanSaver = Depends(deps.get_plan_saver),
        provider: deps.ProfileProvider = Depends(deps.get_profile_provider),
        catalog: RecipeCatalog = Depends(deps.get_catalog),
        generator: deps.DayPlanGenerator = Depends(deps.get_day_plan_generator),
        rng_factory: deps.RngFactory = Depends(deps.get_rng_factory),
    ) -> DayPlan:
        """Return the stored plan, generating and storing one on first visit."""

        existing = fetcher(plan_date)
        if existing is not None:
            return existing
        profile = deps.require_profile(provider)
        plan = _generate(plan_date, profile, catalog, generator, rng_factory, "first_visit")
        return saver(plan)

    @application.post(
        "/plans/{plan_date}/regenerate",
        response_model=DayPlan,
        summary="Replace the day plan with a freshly generated one",
    )
    def plan_regenerate(
        plan_date: date,
        auth: None = Depends(deps.require_api_token),
        saver: deps.PlanSaver = Depends(deps.get_plan_saver),
        profile: UserProfile = Depends(deps.require_profile),
        catalog: RecipeCatalog = Depends(deps.get_catalog),
        generator: deps.DayPlanGenerator = Depends(deps.get_day_plan_generator),
        rng_factory: deps.RngFactory = Depends(deps.get_rng_factory),
    ) -> DayPlan:
        plan = _generate(plan_date, profile, catalog, generator, rng_factory, "regenerate")
        return saver(plan)

    @application.post(
        "/plans/{plan_date}/meals/{index}/eaten",
        response_model=DayPlan,
        summary="Toggle the eaten flag of a meal",
    )
    def plan_toggle_eaten(
        plan_date: date,
        index: int,
        auth: None = Depends(deps.require_api_token),
        fetcher: deps.PlanFetcher = Depends(deps.get_plan_fetcher),
        saver: deps.PlanSaver = Depends(deps.get_plan_saver),
        recorder: deps.ActivityRecorder = Depends(deps.get_activity_recorder),
    ) -> DayPlan:
        plan = _stored_plan_or_404(fetcher, plan_date)
        try:
            updated = planner.toggle_eaten(plan, index)
        except IndexError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        if updated.meals[index].eaten:
            recorder(plan_date)
        return saver(updated)

    @application.post(
        "/plans/{plan_date}/meals/{index}/swap",
        response_model=DayPlan,
        summary="Swap a meal for another recipe",
    )
    def plan_swap_meal(
        plan_date: date,
        index: int,
        payload: SwapRequest,
        auth: None = Depends(deps.require_api_token),
        fetcher: deps.PlanFetcher = Depends(deps.get_plan_fetcher),
        saver: deps.PlanSaver = Depends(deps.get_plan_saver),
        catalog: RecipeCatalog = Depends(deps.get_catalog),
    ) -> DayPlan:
        plan = _stored_plan_or_404(fetcher, plan_date)
        if not 0 <= index < len(plan.meals):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Plan for {plan_date} has no meal at index {index}",
            )
        alternatives = {recipe.id: recipe for recipe in plan.meals[index].alternatives}
        replacement = alternatives.get(payload.recipe_id) or catalog.get(payload.recipe_id)
        if replacement is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Recipe {payload.recipe_id} not found",
            )
        logger.info(
            "Swapping meal %s on %s for %s",
            index,
            plan_date,
            replacement.id,
            extra={"plan_date": plan_date.isoformat(), "slot": plan.meals[index].type},
        )
        return saver(planner.swap_meal(plan, index, replacement))

    @application.post(
        "/plans/{plan_date}/meals/{index}/favorite",
        response_model=DayPlan,
        summary="Toggle the favorite flag of a meal",
    )
    def plan_toggle_favorite(
        plan_date: date,
        index: int,
        auth: None = Depends(deps.require_api_token),
        fetcher: deps.PlanFetcher = Depends(deps.get_plan_fetcher),
        saver: deps.PlanSaver = Depends(deps.get_plan_saver),
        favorites: deps.FavoritesProvider = Depends(deps.get_favorites_provider),
        adder: deps.FavoriteAdder = Depends(deps.get_favorite_adder),
        remover: deps.FavoriteRemover = Depends(deps.get_favorite_remover),
    ) -> DayPlan:
        plan = _stored_plan_or_404(fetcher, plan_date)
        try:
            updated = planner.toggle_favorite(plan, index)
        except IndexError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

        meal = updated.meals[index]
        if meal.favorite:
            adder(meal.recipe.id)
        elif meal.recipe.id in favorites():
            remover(meal.recipe.id)
        return saver(updated)

    @application.put(
        "/plans/{plan_date}/water",
        response_model=DayPlan,
        summary="Record water intake in liters",
    )
    def plan_set_water(
        plan_date: date,
        payload: WaterRequest,
        auth: None = Depends(deps.require_api_token),
        fetcher: deps.PlanFetcher = Depends(deps.get_plan_fetcher),
        saver: deps.PlanSaver = Depends(deps.get_plan_saver),
    ) -> DayPlan:
        plan = _stored_plan_or_404(fetcher, plan_date)
        return saver(planner.set_water_intake(plan, payload.liters))

    @application.delete(
        "/plans",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete every stored day plan",
    )
    def plans_clear(
        auth: None = Depends(deps.require_api_token),
        clearer: deps.PlanClearer = Depends(deps.get_plan_clearer),
    ) -> None:
        clearer()

    # Extras, consumed summary and streak --------------------------------------

    @application.get(
        "/plans/{plan_date}/extras",
        response_model=list[DayExtra],
        summary="List extras logged for a date",
    )
    def extras_list(
        plan_date: date,
        provider: deps.ExtrasProvider = Depends(deps.get_extras_provider),
    ) -> list[DayExtra]:
        return provider(plan_date)

    @application.post(
        "/plans/{plan_date}/extras",
        response_model=DayExtra,
        status_code=status.HTTP_201_CREATED,
        summary="Log a product eaten on top of the plan",
    )
    def extras_add(
        plan_date: date,
        payload: ExtraRequest,
        auth: None = Depends(deps.require_api_token),
        adder: deps.ExtraAdder = Depends(deps.get_extra_adder),
        recorder: deps.ActivityRecorder = Depends(deps.get_activity_recorder),
    ) -> DayExtra:
        logged = adder(DayExtra(date=plan_date, **payload.model_dump()))
        metrics.EXTRAS_LOGGED.labels(source="barcode" if logged.barcode else "manual").inc()
        logger.info(
            "Logged extra %s (x%s) on %s",
            logged.name,
            logged.quantity,
            plan_date,
            extra={"plan_date": plan_date.isoformat()},
        )
        recorder(plan_date)
        return logged

    @application.delete(
        "/plans/{plan_date}/extras/{extra_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Remove a logged extra",
    )
    def extras_delete(
        plan_date: date,
        extra_id: str,
        auth: None = Depends(deps.require_api_token),
        remover: deps.ExtraRemover = Depends(deps.get_extra_remover),
    ) -> None:
        try:
            remover(plan_date, extra_id)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.get(
        "/plans/{plan_date}/consumed",
        response_model=ConsumedSummary,
        summary="Nutrition eaten so far from plan meals and extras",
    )
    def consumed_get(
        plan_date: date,
        fetcher: deps.PlanFetcher = Depends(deps.get_plan_fetcher),
        extras_provider: deps.ExtrasProvider = Depends(deps.get_extras_provider),
        profile_provider: deps.ProfileProvider = Depends(deps.get_profile_provider),
    ) -> ConsumedSummary:
        profile = profile_provider()
        target = planner.resolve_target_calories(profile) if profile is not None else None
        return consumed_summary(plan_date, fetcher(plan_date), extras_provider(plan_date), target)

    @application.get("/streak", response_model=Streak, summary="Current activity streak")
    def streak_get(provider: deps.StreakProvider = Depends(deps.get_streak_provider)) -> Streak:
        return provider()

    # Shopping list -----------------------------------------------------------

    @application.get(
        "/shopping-list",
        response_model=list[ShoppingItem],
        summary="Aggregated shopping list for upcoming days",
    )
    def shopping_list_get(
        start: Optional[date] = Query(default=None),
        days: Optional[int] = Query(default=None, ge=1, le=31),
        settings: Settings = Depends(get_settings),
        range_provider: deps.PlanRangeProvider = Depends(deps.get_plan_range_provider),
        profile_provider: deps.ProfileProvider = Depends(deps.get_profile_provider),
        checked_provider: deps.CheckedNamesProvider = Depends(deps.get_checked_names_provider),
        catalog: RecipeCatalog = Depends(deps.get_catalog),
        generator: deps.DayPlanGenerator = Depends(deps.get_day_plan_generator),
        rng_factory: deps.RngFactory = Depends(deps.get_rng_factory),
    ) -> list[ShoppingItem]:
        """Stored plans are used as-is; missing days are generated but not stored."""

        first_day = start or date.today()
        horizon = days or settings.shopping_horizon_days
        last_day = first_day + timedelta(days=horizon - 1)

        stored = {plan.date: plan for plan in range_provider(first_day, last_day)}
        profile = profile_provider()
        plans: list[DayPlan] = []
        for offset in range(horizon):
            current = first_day + timedelta(days=offset)
            plan = stored.get(current)
            if plan is None and profile is not None:
                plan = _generate(current, profile, catalog, generator, rng_factory, "shopping_list")
            if plan is not None:
                plans.append(plan)

        logger.debug(
            "Building shopping list from %s plan(s) (%s stored) starting %s",
            len(plans),
            len(stored),
            first_day,
        )
        return build_shopping_list(plans, checked_provider())

    @application.post(
        "/shopping-list/toggle",
        response_model=ShoppingToggleResponse,
        summary="Toggle the checked state of a shopping list entry",
    )
    def shopping_list_toggle(
        payload: ShoppingToggleRequest,
        auth: None = Depends(deps.require_api_token),
        toggler: deps.CheckedToggler = Depends(deps.get_checked_toggler),
    ) -> ShoppingToggleResponse:
        return ShoppingToggleResponse(name=payload.name, checked=toggler(payload.name))

    @application.post(
        "/shopping-list/reset",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Uncheck every shopping list entry",
    )
    def shopping_list_reset(
        auth: None = Depends(deps.require_api_token),
        resetter: deps.CheckedResetter = Depends(deps.get_checked_resetter),
    ) -> None:
        resetter()

    # Favorites ---------------------------------------------------------------

    @application.get("/favorites", response_model=list[Recipe], summary="List favorite recipes")
    def favorites_list(
        provider: deps.FavoritesProvider = Depends(deps.get_favorites_provider),
        catalog: RecipeCatalog = Depends(deps.get_catalog),
    ) -> list[Recipe]:
        recipes: list[Recipe] = []
        for recipe_id in provider():
            recipe = catalog.get(recipe_id)
            if recipe is None:
                logger.debug("Favorite %s is not in the current catalog", recipe_id)
                continue
            recipes.append(recipe)
        return recipes

    @application.delete(
        "/favorites/{recipe_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Remove a favorite recipe",
    )
    def favorites_delete(
        recipe_id: str,
        auth: None = Depends(deps.require_api_token),
        remover: deps.FavoriteRemover = Depends(deps.get_favorite_remover),
    ) -> None:
        try:
            remover(recipe_id)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        payload = generate_latest()
        return Response(content=payload, media_type=CONTENT_TYPE_LATEST)

    return application


class SwapRequest(BaseModel):
    recipe_id: str = Field(min_length=1, max_length=255)


class WaterRequest(BaseModel):
    liters: float = Field(ge=0, le=20)


class ExtraRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    brand: str = Field(default="", max_length=255)
    barcode: str = Field(default="", max_length=64)
    quantity: float = Field(default=1, gt=0, le=100)
    nutrition: Nutrition = Field(default_factory=Nutrition)


class ShoppingToggleRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class ShoppingToggleResponse(BaseModel):
    name: str
    checked: bool


app = create_app()

__all__ = ["app", "create_app"]
