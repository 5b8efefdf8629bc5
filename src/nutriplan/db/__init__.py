"""Persistence helpers for NutriPlan."""
