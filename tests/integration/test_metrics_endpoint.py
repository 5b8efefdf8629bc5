"""Integration tests for metrics endpoint."""

from __future__ import annotations


def test_metrics_endpoint_available(client):
    client.get("/recipes")
    response = client.get("/metrics")
    assert response.status_code == 200
    body = response.content.decode()
    assert "nutriplan_http_requests_total" in body
    assert 'path="/recipes"' in body
