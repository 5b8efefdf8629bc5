"""Prometheus metrics definitions for Nutriplan."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "nutriplan_http_requests_total",
    "Total number of HTTP requests processed by the Nutriplan API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "nutriplan_http_request_duration_seconds",
    "Latency of HTTP requests processed by the Nutriplan API",
    ["method", "path"],
)

DAY_PLANS_GENERATED = Counter(
    "nutriplan_day_plans_generated_total",
    "Number of day plans generated by trigger",
    ["trigger"],
)

MEAL_SLOTS_OMITTED = Counter(
    "nutriplan_meal_slots_omitted_total",
    "Toggled meal slots left out of a plan because no recipe qualified",
    ["slot"],
)

EXTRAS_LOGGED = Counter(
    "nutriplan_extras_logged_total",
    "Extras logged on top of day plans by entry source",
    ["source"],
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "DAY_PLANS_GENERATED",
    "MEAL_SLOTS_OMITTED",
    "EXTRAS_LOGGED",
]
