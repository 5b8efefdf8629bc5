from __future__ import annotations

import logging

from sqlalchemy import inspect

from nutriplan.config import get_settings
from nutriplan.db.favorites import add_favorite, list_favorites
from nutriplan.db.repository import get_engine, reset_repository_state


def test_missing_database_directory_is_created(tmp_path, monkeypatch, caplog):
    db_path = tmp_path / "nested" / "state" / "nutriplan.db"
    monkeypatch.setenv("NUTRIPLAN_DATABASE_PATH", str(db_path))
    get_settings.cache_clear()
    reset_repository_state()

    with caplog.at_level(logging.INFO, logger="nutriplan.db.repository"):
        engine = get_engine()

    assert db_path.parent.is_dir()
    assert "day_plans" in inspect(engine).get_table_names()
    assert any(str(db_path.parent) in record.getMessage() for record in caplog.records)


def test_in_memory_database(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("NUTRIPLAN_DATABASE_PATH", ":memory:")
    get_settings.cache_clear()
    reset_repository_state()

    add_favorite("b-skyr-bowl")

    assert list_favorites() == ["b-skyr-bowl"]
    assert list(tmp_path.iterdir()) == []


def test_engine_is_shared():
    assert get_engine() is get_engine()
