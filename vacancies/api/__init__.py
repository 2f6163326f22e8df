"""
API routers for the Vacancies application.
"""
from vacancies.api import categories, grants, health

__all__ = ["categories", "grants", "health"]
