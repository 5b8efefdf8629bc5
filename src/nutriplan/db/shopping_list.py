"""Shopping list checked-state persistence."""

from __future__ import annotations

from typing import Set

from sqlalchemy import delete, select

from .models import ShoppingCheckORM
from .repository import session_scope


def list_checked_names() -> Set[str]:
    with session_scope() as session:
        return set(session.execute(select(ShoppingCheckORM.name)).scalars().all())


def set_item_checked(name: str, checked: bool) -> bool:
    with session_scope() as session:
        row = session.get(ShoppingCheckORM, name)
        if checked and row is None:
            session.add(ShoppingCheckORM(name=name))
        elif not checked and row is not None:
            session.delete(row)
    return checked


def toggle_item_checked(name: str) -> bool:
    """Flip the checked flag for ``name`` and return the new state."""

    with session_scope() as session:
        row = session.get(ShoppingCheckORM, name)
        if row is None:
            session.add(ShoppingCheckORM(name=name))
            return True
        session.delete(row)
        return False


def reset_checked_items() -> None:
    """Uncheck every item."""

    with session_scope() as session:
        session.execute(delete(ShoppingCheckORM))


__all__ = ["list_checked_names", "reset_checked_items", "set_item_checked", "toggle_item_checked"]
