"""Activity streak persistence."""

from __future__ import annotations

from datetime import date

from nutriplan.models.intake import Streak
from nutriplan.planner.app.intake import advance_streak

from .models import StreakORM
from .repository import session_scope

STREAK_ROW_ID = 1


def _to_model(row: StreakORM | None) -> Streak:
    if row is None:
        return Streak()
    return Streak(
        current=row.current_streak,
        longest=row.longest_streak,
        total_days=row.total_days,
        last_active_date=row.last_active_date,
    )


def load_streak() -> Streak:
    with session_scope() as session:
        return _to_model(session.get(StreakORM, STREAK_ROW_ID))


def record_activity(active_day: date) -> Streak:
    """Count ``active_day`` towards the streak and return the updated counters."""

    with session_scope() as session:
        row = session.get(StreakORM, STREAK_ROW_ID)
        current = _to_model(row)
        updated = advance_streak(current, active_day)
        if updated == current:
            return current
        if row is None:
            row = StreakORM(id=STREAK_ROW_ID)
            session.add(row)
        row.current_streak = updated.current
        row.longest_streak = updated.longest
        row.total_days = updated.total_days
        row.last_active_date = updated.last_active_date
    return updated


__all__ = ["load_streak", "record_activity"]
