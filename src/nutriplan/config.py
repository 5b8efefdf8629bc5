"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))
MAX_SHOPPING_HORIZON_DAYS = 31


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    database_path: Path = Field(
        default=Path("./data/nutriplan.db"),
        description="SQLite database location.",
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token required for mutating endpoints.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )
    recipe_catalog_path: Optional[Path] = Field(
        default=None,
        description="JSON recipe catalog overriding the bundled dataset.",
    )
    recipe_import_path: Optional[Path] = Field(
        default=None,
        description="Saved Spoonacular recipe payloads converted and added to the catalog.",
    )
    planner_random_seed: Optional[int] = Field(
        default=None,
        description="Seed for meal selection; unset means a fresh plan on every regeneration.",
    )
    shopping_horizon_days: int = Field(
        default=7,
        ge=1,
        le=MAX_SHOPPING_HORIZON_DAYS,
        description="Number of days covered by the shopping list by default.",
    )

    model_config = ConfigDict(frozen=True)


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip()
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    if (db_path := _env("NUTRIPLAN_DATABASE_PATH")):
        payload["database_path"] = Path(db_path)
    if (api_token := _env("NUTRIPLAN_API_TOKEN")):
        payload["api_token"] = api_token
    if (log_level := _env("NUTRIPLAN_LOG_LEVEL")):
        payload["log_level"] = log_level
    if (log_format := _env("NUTRIPLAN_LOG_FORMAT")):
        payload["log_format"] = log_format
    if (log_requests := _env("NUTRIPLAN_LOG_REQUESTS")):
        payload["log_requests"] = _coerce_bool(log_requests)
    if (catalog_path := _env("NUTRIPLAN_RECIPE_CATALOG_PATH")):
        payload["recipe_catalog_path"] = Path(catalog_path)
    if (import_path := _env("NUTRIPLAN_RECIPE_IMPORT_PATH")):
        payload["recipe_import_path"] = Path(import_path)
    if (seed := _env("NUTRIPLAN_PLANNER_SEED")):
        try:
            payload["planner_random_seed"] = int(seed)
        except ValueError:
            pass
    if (horizon := _env("NUTRIPLAN_SHOPPING_HORIZON_DAYS")):
        try:
            days = int(horizon)
        except ValueError:
            days = 0
        if 1 <= days <= MAX_SHOPPING_HORIZON_DAYS:
            payload["shopping_horizon_days"] = days
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
