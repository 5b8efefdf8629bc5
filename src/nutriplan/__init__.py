"""
Nutriplan nutrition-planning package.

The package exposes the calorie/macro calculator, the day-plan generator and shopping
list aggregation, together with persistence helpers and the HTTP/CLI surfaces.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
