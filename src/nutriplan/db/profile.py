"""Data access helpers for the user profile."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError
from sqlalchemy import delete, select

from nutriplan.models.profile import UserProfile

from .models import ProfileFieldORM
from .repository import session_scope

logger = logging.getLogger(__name__)

PROFILE_KEYS = frozenset(UserProfile.model_fields)


def _decode_value(value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def load_profile() -> Optional[UserProfile]:
    """Return the stored profile, or None when onboarding has not happened yet."""

    with session_scope() as session:
        rows = session.execute(select(ProfileFieldORM)).scalars().all()
        data: Dict[str, Any] = {row.key: _decode_value(row.value) for row in rows}

    if not data:
        return None
    try:
        return UserProfile.model_validate(data)
    except ValidationError:
        logger.warning("Stored profile is incomplete or invalid; treating as missing", exc_info=True)
        return None


def save_profile(profile: UserProfile) -> UserProfile:
    """Persist every profile field, replacing previous values."""

    payload = profile.model_dump(mode="json")
    logger.debug("Persisting profile fields=%s", sorted(payload))

    with session_scope() as session:
        for key, value in payload.items():
            if key not in PROFILE_KEYS:
                continue
            session.merge(ProfileFieldORM(key=key, value=json.dumps(value)))

    stored = load_profile()
    if stored is None:
        raise RuntimeError("Profile could not be read back after saving")
    return stored


def delete_profile() -> None:
    """Forget the stored profile."""

    with session_scope() as session:
        session.execute(delete(ProfileFieldORM))


__all__ = ["delete_profile", "load_profile", "save_profile"]
