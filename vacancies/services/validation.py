"""
Field validation for category and grant payloads.

Each validator returns a list of field-level errors (empty when the payload
is acceptable) and is applied before any store access.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from vacancies.core.exceptions import InvalidArgumentError
from vacancies.models import (
    CATEGORY_DESCRIPTION_MAX_LENGTH,
    CATEGORY_NAME_MAX_LENGTH,
    GRANT_COUNTRY_MAX_LENGTH,
    GRANT_DESCRIPTION_MAX_LENGTH,
    GRANT_FUNDING_AMOUNT_MAX_LENGTH,
    GRANT_REQUIREMENTS_MAX_LENGTH,
    GRANT_TITLE_MAX_LENGTH,
    as_utc,
)
from vacancies.schemas.categories import CategoryCreate
from vacancies.schemas.grants import GrantBase


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


def _required_text(field: str, value: Optional[str], max_length: int) -> list[FieldError]:
    if value is None or not value.strip():
        return [FieldError(field, f"{field} is required")]
    if len(value.strip()) > max_length:
        return [FieldError(field, f"{field} must be at most {max_length} characters")]
    return []


def _optional_text(field: str, value: Optional[str], max_length: int) -> list[FieldError]:
    if value is not None and len(value) > max_length:
        return [FieldError(field, f"{field} must be at most {max_length} characters")]
    return []


def validate_category(payload: CategoryCreate) -> list[FieldError]:
    """Check a category create/update payload."""
    errors = _required_text("name", payload.name, CATEGORY_NAME_MAX_LENGTH)
    errors += _optional_text("description", payload.description, CATEGORY_DESCRIPTION_MAX_LENGTH)
    return errors


def validate_grant(payload: GrantBase, now: datetime, creating: bool) -> list[FieldError]:
    """
    Check a grant create/update payload.

    The deadline must lie in the future only when creating; an existing grant
    whose deadline has passed can still be edited.
    """
    errors = _required_text("title", payload.title, GRANT_TITLE_MAX_LENGTH)
    errors += _required_text("description", payload.description, GRANT_DESCRIPTION_MAX_LENGTH)
    errors += _required_text("country", payload.country, GRANT_COUNTRY_MAX_LENGTH)
    errors += _optional_text("requirements", payload.requirements, GRANT_REQUIREMENTS_MAX_LENGTH)
    errors += _optional_text("fundingAmount", payload.funding_amount, GRANT_FUNDING_AMOUNT_MAX_LENGTH)

    if creating and as_utc(payload.deadline) <= as_utc(now):
        errors.append(FieldError("deadline", "deadline must be in the future"))

    return errors


def raise_for_errors(errors: list[FieldError]) -> None:
    """Raise `InvalidArgumentError` carrying every field error, if any."""
    if errors:
        raise InvalidArgumentError(
            "Validation failed: " + "; ".join(e.message for e in errors),
            errors=[e.as_dict() for e in errors],
        )
