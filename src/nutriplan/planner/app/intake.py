"""Consumed-nutrition summaries and activity streaks."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from nutriplan.models.intake import ConsumedSummary, DayExtra, Streak
from nutriplan.models.plan import DayPlan, sum_nutrition
from nutriplan.models.recipe import Nutrition

from .planner import eaten_totals
from .utils import round_int

logger = logging.getLogger(__name__)

EXTRAS_RETENTION_DAYS = 30


def extra_nutrition(extra: DayExtra) -> Nutrition:
    """Nutrition of one logged extra, each value rounded after applying the quantity."""

    per_unit = extra.nutrition
    return Nutrition(
        calories=round_int(per_unit.calories * extra.quantity),
        protein=round_int(per_unit.protein * extra.quantity),
        carbs=round_int(per_unit.carbs * extra.quantity),
        fat=round_int(per_unit.fat * extra.quantity),
        fiber=round_int(per_unit.fiber * extra.quantity),
    )


def extras_totals(extras: Iterable[DayExtra]) -> Nutrition:
    return sum_nutrition([extra_nutrition(extra) for extra in extras])


def consumed_summary(
    plan_date: date,
    plan: Optional[DayPlan],
    extras: Iterable[DayExtra],
    target_calories: Optional[float] = None,
) -> ConsumedSummary:
    """Combine eaten plan meals with logged extras for one date.

    A missing plan counts as no meals; extras are still included.
    """

    meals = eaten_totals(plan) if plan is not None else Nutrition()
    extra_values = extras_totals(extras)
    total = sum_nutrition([meals, extra_values])
    remaining = None if target_calories is None else target_calories - total.calories
    return ConsumedSummary(
        date=plan_date,
        meals=meals,
        extras=extra_values,
        total=total,
        meals_eaten=sum(1 for meal in plan.meals if meal.eaten) if plan else 0,
        meals_planned=len(plan.meals) if plan else 0,
        target_calories=target_calories,
        remaining_calories=remaining,
        water_intake=plan.water_intake if plan else 0,
        water_goal=plan.water_goal if plan else 0,
    )


def advance_streak(streak: Streak, active_day: date) -> Streak:
    """Count ``active_day`` towards the streak.

    Repeat activity on the last active day changes nothing, the following day
    extends the streak and any longer gap starts over at one. Days before the
    last active day are ignored.
    """

    last = streak.last_active_date
    if last is not None and active_day <= last:
        return streak

    if last is not None and (active_day - last).days == 1:
        current = streak.current + 1
    else:
        current = 1
        if last is not None:
            logger.info("Streak of %s day(s) ended; last active %s", streak.current, last)

    return Streak(
        current=current,
        longest=max(streak.longest, current),
        total_days=streak.total_days + 1,
        last_active_date=active_day,
    )


__all__ = [
    "EXTRAS_RETENTION_DAYS",
    "advance_streak",
    "consumed_summary",
    "extra_nutrition",
    "extras_totals",
]
