"""Favorite recipe persistence helpers."""

from __future__ import annotations

from typing import List

from sqlalchemy import select

from .models import FavoriteORM
from .repository import session_scope


def list_favorites() -> List[str]:
    """Favorite recipe ids, oldest first."""

    with session_scope() as session:
        rows = session.execute(
            select(FavoriteORM.recipe_id).order_by(FavoriteORM.created_at.asc(), FavoriteORM.recipe_id)
        )
        return list(rows.scalars().all())


def add_favorite(recipe_id: str) -> None:
    with session_scope() as session:
        if session.get(FavoriteORM, recipe_id) is None:
            session.add(FavoriteORM(recipe_id=recipe_id))


def remove_favorite(recipe_id: str) -> None:
    with session_scope() as session:
        row = session.get(FavoriteORM, recipe_id)
        if row is None:
            raise ValueError(f"Recipe {recipe_id} is not a favorite")
        session.delete(row)


__all__ = ["add_favorite", "list_favorites", "remove_favorite"]
