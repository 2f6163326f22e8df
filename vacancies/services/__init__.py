"""
Business logic for the Vacancies API.

- query: filter/sort composition
- guards: integrity checks and guarded commits
- pagination: page clamping and page envelopes
- validation: field-level payload checks
- categories / grants: per-resource services used by the routers
"""
from vacancies.services.categories import CategoryService
from vacancies.services.grants import GrantService

__all__ = ["CategoryService", "GrantService"]
