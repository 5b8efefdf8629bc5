"""Persistence helpers for generated day plans."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import delete, select

from nutriplan.models.plan import DayPlan

from .models import DayPlanORM
from .repository import session_scope

logger = logging.getLogger(__name__)


def _to_model(row: DayPlanORM) -> DayPlan:
    return DayPlan.model_validate_json(row.payload)


def _encode(plan: DayPlan) -> str:
    # Totals are derived on load; only the source fields are stored.
    return plan.model_dump_json(exclude={"total_macros", "total_calories"})


def get_day_plan(plan_date: date) -> Optional[DayPlan]:
    with session_scope() as session:
        row = session.get(DayPlanORM, plan_date)
        if row is None:
            return None
        return _to_model(row)


def save_day_plan(plan: DayPlan) -> DayPlan:
    """Insert or replace the plan stored for ``plan.date``."""

    with session_scope() as session:
        session.merge(DayPlanORM(plan_date=plan.date, payload=_encode(plan)))
    logger.debug("Stored plan for %s", plan.date, extra={"plan_date": plan.date.isoformat()})
    return plan


def list_day_plans(start: date, end: date) -> List[DayPlan]:
    """Stored plans with ``start <= date <= end``, oldest first."""

    with session_scope() as session:
        rows = (
            session.execute(
                select(DayPlanORM)
                .where(DayPlanORM.plan_date >= start, DayPlanORM.plan_date <= end)
                .order_by(DayPlanORM.plan_date.asc())
            )
            .scalars()
            .all()
        )
        return [_to_model(row) for row in rows]


def clear_day_plans() -> int:
    """Delete every stored plan; returns the number removed."""

    with session_scope() as session:
        result = session.execute(delete(DayPlanORM))
        removed = result.rowcount or 0
    logger.info("Cleared %s stored day plan(s)", removed)
    return removed


__all__ = ["clear_day_plans", "get_day_plan", "list_day_plans", "save_day_plan"]
