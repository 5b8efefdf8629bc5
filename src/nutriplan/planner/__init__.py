"""Meal planning engine and profile helpers."""
