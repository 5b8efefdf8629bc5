"""SQLAlchemy models representing NutriPlan persistence tables."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base class for NutriPlan ORM models."""


class ProfileFieldORM(Base):
    """Key/value storage for the single user profile (one row per field)."""

    __tablename__ = "profile_fields"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class DayPlanORM(Base):
    """Generated day plan stored as its JSON document."""

    __tablename__ = "day_plans"

    plan_date: Mapped[date] = mapped_column(Date, primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class ShoppingCheckORM(Base):
    """Shopping list entry ticked off by the user, keyed by display name."""

    __tablename__ = "shopping_checks"

    name: Mapped[str] = mapped_column(String(255), primary_key=True)
    checked_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )


class FavoriteORM(Base):
    __tablename__ = "favorites"

    recipe_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )


class DayExtraORM(Base):
    """Product logged on top of a day plan; nutrition values are per unit."""

    __tablename__ = "day_extras"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    extra_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    brand: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    barcode: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    quantity: Mapped[float] = mapped_column(Float, default=1, nullable=False)
    calories: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    protein: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    carbs: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    fat: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    fiber: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    added_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class StreakORM(Base):
    """Single-row activity streak counters."""

    __tablename__ = "streaks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    current_streak: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    longest_streak: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_days: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_active_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


__all__ = [
    "Base",
    "DayExtraORM",
    "DayPlanORM",
    "FavoriteORM",
    "ProfileFieldORM",
    "ShoppingCheckORM",
    "StreakORM",
]
