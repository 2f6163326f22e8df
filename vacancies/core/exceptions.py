"""
Custom Exception Classes for the Vacancies API.

Provides standardized HTTP exceptions with consistent error messages
across all API endpoints. Services raise these directly; the handlers in
`vacancies.main` render them into the common error body.
"""
from typing import Any, Iterable, Optional
from uuid import UUID

from fastapi import HTTPException, status

GENERIC_SERVER_ERROR = "An error occurred while processing your request"


class ApiError(HTTPException):
    """Base class for errors carrying a machine-readable code."""

    code: str = "error"

    def __init__(self, status_code: int, message: str, headers: Optional[dict[str, str]] = None):
        super().__init__(status_code=status_code, detail=message, headers=headers)

    def extra(self) -> dict[str, Any]:
        """Additional fields merged into the error response body."""
        return {}


class InvalidArgumentError(ApiError):
    """Exception raised when request validation fails."""

    code = "invalid_argument"

    def __init__(self, message: str = "Validation failed", errors: Optional[list[dict[str, str]]] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, message)
        self.errors = errors or []

    def extra(self) -> dict[str, Any]:
        return {"errors": self.errors}


class DuplicateNameError(ApiError):
    """Exception raised when a category name is already taken."""

    code = "duplicate_name"

    def __init__(self, name: str):
        super().__init__(status.HTTP_400_BAD_REQUEST, "A category with this name already exists")
        self.name = name


class UnknownCategoryReferenceError(ApiError):
    """Exception raised when a grant references categories that do not exist."""

    code = "unknown_category_reference"

    def __init__(self, missing_ids: Iterable[UUID]):
        super().__init__(status.HTTP_400_BAD_REQUEST, "One or more category IDs do not exist")
        self.missing_ids = sorted(str(i) for i in missing_ids)

    def extra(self) -> dict[str, Any]:
        return {"missing_ids": self.missing_ids}


class HasDependentsError(ApiError):
    """Exception raised when deleting a category that still has grants."""

    code = "has_dependents"

    def __init__(self, category_id: UUID, count: int):
        super().__init__(status.HTTP_400_BAD_REQUEST, "Cannot delete category that has associated grants")
        self.category_id = category_id
        self.count = count


class NotFoundError(ApiError):
    """Exception raised when a requested resource is not found."""

    code = "not_found"

    def __init__(self, resource: str, id: Optional[UUID] = None):
        detail = f"{resource} not found" + (f": {id}" if id else "")
        super().__init__(status.HTTP_404_NOT_FOUND, detail)


class ConflictError(ApiError):
    """Exception raised when a concurrent modification is detected."""

    code = "conflict"

    def __init__(self, resource: str):
        super().__init__(
            status.HTTP_409_CONFLICT,
            f"The {resource.lower()} was modified by another user. Please reload and try again.",
        )


class AuthenticationError(ApiError):
    """Exception raised when credentials are missing or invalid."""

    code = "unauthenticated"

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(ApiError):
    """Exception raised when a user is not authorized to access a resource."""

    code = "forbidden"

    def __init__(self, message: str = "Not authorized to access this resource"):
        super().__init__(status.HTTP_403_FORBIDDEN, message)


class UnavailableError(ApiError):
    """Exception raised when the store is unreachable or failed internally."""

    code = "unavailable"

    def __init__(self, message: str = GENERIC_SERVER_ERROR):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, message)
