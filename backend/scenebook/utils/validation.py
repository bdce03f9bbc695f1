"""
Field checks shared by the entity services.

Every check runs before the first write of an operation and raises
ValidationError with a message naming the field.
"""
from typing import Any, Optional, Tuple, Type

from scenebook.core.config import settings
from scenebook.models.enums import CodeEnum
from scenebook.services.exceptions import ValidationError

MIN_AGE = 0
MAX_AGE = 125


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim a free-text value; None stays None."""
    if value is None:
        return None
    return str(value).strip()


def require_text(value: Optional[str], field: str) -> str:
    text = clean_text(value)
    if not text:
        raise ValidationError(f"{field} is required.")
    return text


def check_code(
    value: Optional[str],
    enum_cls: Type[CodeEnum],
    field: str,
    required: bool = False
) -> Optional[str]:
    """
    Validate a short code against its enumeration.

    Blank optional codes normalize to None.
    """
    code = clean_text(value)
    if not code:
        if required:
            raise ValidationError(f"{field} is required.")
        return None
    if code not in enum_cls.codes():
        allowed = ", ".join(f"'{c}'" for c in enum_cls.codes_in_order())
        raise ValidationError(f"Invalid {field}. Allowed values: {allowed}.")
    return code


def check_position(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field} must be a positive integer.")
    return value


def check_non_negative(value: Optional[int], field: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{field} must be a non-negative integer.")
    return value


def check_age_range(lower: Optional[int], upper: Optional[int]) -> Tuple[Optional[int], Optional[int]]:
    for age in (lower, upper):
        if age is None:
            continue
        if isinstance(age, bool) or not isinstance(age, int) or age < MIN_AGE or age > MAX_AGE:
            raise ValidationError(f"Age must be between {MIN_AGE} and {MAX_AGE}.")
    if lower is not None and upper is not None and lower > upper:
        raise ValidationError("Lower age cannot be greater than upper age.")
    return lower, upper


def page_offset(page: int, limit: int) -> int:
    """Validate pagination arguments and return the row offset."""
    if page < 1:
        raise ValidationError("page must be at least 1.")
    if limit < 1 or limit > settings.MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {settings.MAX_PAGE_SIZE}.")
    return (page - 1) * limit
