"""
Report validation.

Checks every rule and collects one human-readable message per violation,
in a fixed order. Has no side effects.
"""

from typing import Any, Dict, List

from civic_triage.core.errors import InvalidInput
from civic_triage.utils.geo import is_number

TITLE_MIN_LENGTH = 3
DESCRIPTION_MIN_LENGTH = 10

TITLE_TOO_SHORT = "Title must be at least 3 characters long"
DESCRIPTION_TOO_SHORT = "Description must be at least 10 characters long"
CATEGORY_REQUIRED = "Category is required"
LOCATION_REQUIRED = "Valid location coordinates are required"
LOCATION_OUT_OF_RANGE = "Invalid location coordinates"


class ValidationResult:
    def __init__(self, errors: List[str]):
        self.errors = errors

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise InvalidInput(self.errors)

    def __repr__(self) -> str:
        return f"ValidationResult(is_valid={self.is_valid}, errors={self.errors})"


def _trimmed_length(value: Any) -> int:
    return len(value.strip()) if isinstance(value, str) else 0


def validate_report(report_data: Dict[str, Any]) -> ValidationResult:
    """
    Validate raw submitted report fields.

    The range check runs independently of the presence check, so a
    present but out-of-range location yields its own distinct error.
    """
    errors = []

    if _trimmed_length(report_data.get("title")) < TITLE_MIN_LENGTH:
        errors.append(TITLE_TOO_SHORT)

    if _trimmed_length(report_data.get("description")) < DESCRIPTION_MIN_LENGTH:
        errors.append(DESCRIPTION_TOO_SHORT)

    category = report_data.get("category")
    if not category or (isinstance(category, str) and not category.strip()):
        errors.append(CATEGORY_REQUIRED)

    location = report_data.get("location")
    if not isinstance(location, dict):
        location = None

    latitude = location.get("latitude") if location else None
    longitude = location.get("longitude") if location else None
    has_coordinates = is_number(latitude) and is_number(longitude)

    if not has_coordinates:
        errors.append(LOCATION_REQUIRED)

    if has_coordinates and not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        errors.append(LOCATION_OUT_OF_RANGE)

    return ValidationResult(errors)
