"""Persistence helpers for extras logged on top of day plans."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import List

from sqlalchemy import delete, select

from nutriplan.models.intake import DayExtra
from nutriplan.models.recipe import Nutrition
from nutriplan.planner.app.intake import EXTRAS_RETENTION_DAYS

from .models import DayExtraORM
from .repository import session_scope

logger = logging.getLogger(__name__)


def _to_model(row: DayExtraORM) -> DayExtra:
    return DayExtra(
        id=row.id,
        date=row.extra_date,
        name=row.name,
        brand=row.brand,
        barcode=row.barcode,
        quantity=row.quantity,
        nutrition=Nutrition(
            calories=row.calories,
            protein=row.protein,
            carbs=row.carbs,
            fat=row.fat,
            fiber=row.fiber,
        ),
        added_at=row.added_at,
    )


def list_extras(extra_date: date) -> List[DayExtra]:
    """Extras logged for ``extra_date``, in the order they were added."""

    with session_scope() as session:
        rows = session.execute(
            select(DayExtraORM)
            .where(DayExtraORM.extra_date == extra_date)
            .order_by(DayExtraORM.added_at.asc(), DayExtraORM.id)
        )
        return [_to_model(row) for row in rows.scalars().all()]


def add_extra(extra: DayExtra) -> DayExtra:
    """Store ``extra`` and drop entries older than the retention window.

    The window is measured back from the date being logged.
    """

    cutoff = extra.date - timedelta(days=EXTRAS_RETENTION_DAYS)
    with session_scope() as session:
        session.add(
            DayExtraORM(
                id=extra.id,
                extra_date=extra.date,
                name=extra.name,
                brand=extra.brand,
                barcode=extra.barcode,
                quantity=extra.quantity,
                calories=extra.nutrition.calories,
                protein=extra.nutrition.protein,
                carbs=extra.nutrition.carbs,
                fat=extra.nutrition.fat,
                fiber=extra.nutrition.fiber,
                added_at=extra.added_at,
            )
        )
        result = session.execute(delete(DayExtraORM).where(DayExtraORM.extra_date < cutoff))
        if result.rowcount:
            logger.info("Pruned %s extra(s) logged before %s", result.rowcount, cutoff)
    return extra


def remove_extra(extra_date: date, extra_id: str) -> None:
    with session_scope() as session:
        row = session.get(DayExtraORM, extra_id)
        if row is None or row.extra_date != extra_date:
            raise ValueError(f"Extra {extra_id} not logged on {extra_date.isoformat()}")
        session.delete(row)


__all__ = ["add_extra", "list_extras", "remove_extra"]
