"""Shared helpers for integration tests."""

from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient

from nutriplan.config import get_settings


def auth_headers() -> dict[str, str]:
    token = get_settings().api_token
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def onboard(client: TestClient, payload: dict[str, Any]) -> dict[str, Any]:
    response = client.put("/profile", json=payload, headers=auth_headers())
    assert response.status_code == 200, response.text
    return response.json()
