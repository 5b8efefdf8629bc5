"""Calculation and selection pipeline behind day plan generation."""
