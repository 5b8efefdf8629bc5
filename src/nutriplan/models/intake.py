"""Logged intake outside the plan: extras, consumed summaries and streaks."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from nutriplan.models.recipe import Nutrition


def _new_extra_id() -> str:
    return uuid4().hex


class DayExtra(BaseModel):
    """Product eaten on top of the plan, entered manually or from a barcode lookup.

    ``nutrition`` holds the values for one unit; ``quantity`` multiplies them.
    """

    id: str = Field(default_factory=_new_extra_id, min_length=1, max_length=64)
    date: date
    name: str = Field(min_length=1, max_length=255)
    brand: str = Field(default="", max_length=255)
    barcode: str = Field(default="", max_length=64)
    quantity: float = Field(default=1, gt=0, le=100)
    nutrition: Nutrition = Field(default_factory=Nutrition)
    added_at: datetime = Field(default_factory=datetime.now)

    model_config = ConfigDict(frozen=True)


class ConsumedSummary(BaseModel):
    """What has been eaten on one date, split by source."""

    date: date
    meals: Nutrition
    extras: Nutrition
    total: Nutrition
    meals_eaten: int = Field(ge=0)
    meals_planned: int = Field(ge=0)
    target_calories: Optional[float] = None
    remaining_calories: Optional[float] = None
    water_intake: float = Field(default=0, ge=0)
    water_goal: float = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class Streak(BaseModel):
    current: int = Field(default=0, ge=0)
    longest: int = Field(default=0, ge=0)
    total_days: int = Field(default=0, ge=0)
    last_active_date: Optional[date] = None

    model_config = ConfigDict(frozen=True)


__all__ = ["ConsumedSummary", "DayExtra", "Streak"]
