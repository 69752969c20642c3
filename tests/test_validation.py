"""Tests for report validation rules."""

import pytest

from civic_triage.core.errors import InvalidInput
from civic_triage.services.validation import (
    CATEGORY_REQUIRED,
    DESCRIPTION_TOO_SHORT,
    LOCATION_OUT_OF_RANGE,
    LOCATION_REQUIRED,
    TITLE_TOO_SHORT,
    validate_report,
)


def test_valid_report_has_no_errors(report_data):
    result = validate_report(report_data)
    assert result.is_valid
    assert result.errors == []
    result.raise_for_errors()


def test_title_is_trimmed_before_length_check(report_data):
    report_data["title"] = "  ab  "
    assert validate_report(report_data).errors == [TITLE_TOO_SHORT]


def test_exact_minimum_lengths_pass(report_data):
    report_data["title"] = "abc"
    report_data["description"] = "0123456789"
    assert validate_report(report_data).is_valid


def test_all_errors_reported_in_fixed_order():
    result = validate_report({"title": "", "description": "short", "category": "", "location": None})
    assert result.errors == [TITLE_TOO_SHORT, DESCRIPTION_TOO_SHORT, CATEGORY_REQUIRED, LOCATION_REQUIRED]


def test_missing_fields_are_errors_not_exceptions():
    assert len(validate_report({}).errors) == 4


@pytest.mark.parametrize("location", [
    {"latitude": "28.6", "longitude": 77.2},
    {"latitude": 28.6},
    {"latitude": True, "longitude": 77.2},
    {"latitude": float("nan"), "longitude": 77.2},
    "28.6,77.2",
])
def test_non_numeric_coordinates_are_required_error(report_data, location):
    report_data["location"] = location
    assert validate_report(report_data).errors == [LOCATION_REQUIRED]


@pytest.mark.parametrize("latitude,longitude", [(91, 0), (-90.5, 0), (0, 180.1), (0, -181)])
def test_out_of_range_coordinates(report_data, latitude, longitude):
    report_data["location"] = {"latitude": latitude, "longitude": longitude}
    assert validate_report(report_data).errors == [LOCATION_OUT_OF_RANGE]


def test_boundary_coordinates_are_valid(report_data):
    report_data["location"] = {"latitude": -90, "longitude": 180}
    assert validate_report(report_data).is_valid


def test_raise_for_errors_carries_every_message():
    with pytest.raises(InvalidInput) as exc_info:
        validate_report({"title": "ok title", "description": "too short"}).raise_for_errors()

    error = exc_info.value
    assert error.code == "invalid_input"
    assert error.errors == [DESCRIPTION_TOO_SHORT, CATEGORY_REQUIRED, LOCATION_REQUIRED]
    assert error.message.startswith("Invalid report data: ")
