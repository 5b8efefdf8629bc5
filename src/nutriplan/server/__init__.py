"""HTTP server package for NutriPlan."""
