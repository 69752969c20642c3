"""Tests for priority scoring, resolution estimates and geo helpers."""

from datetime import datetime

import pytest

from civic_triage.models.report import Priority
from civic_triage.services.priority_scoring import PriorityScorer
from civic_triage.utils.geo import geo_bucket_topic, haversine_km

NIGHT = datetime(2026, 3, 14, 2, 0)
AFTERNOON = datetime(2026, 3, 14, 14, 0)


@pytest.fixture
def scorer(clock) -> PriorityScorer:
    return PriorityScorer(clock=clock)


def test_safety_with_urgent_language_at_night_scores_six(scorer):
    assert scorer.score("Safety", "Exposed wire, dangerous for children", NIGHT) == 6
    assert scorer.priority_for(6) == Priority.HIGH


def test_other_with_urgent_language_in_afternoon_scores_two(scorer):
    assert scorer.score("Other", "Urgent: abandoned car blocking the lane", AFTERNOON) == 2
    assert scorer.priority_for(2) == Priority.MEDIUM


def test_unknown_category_weighs_zero(scorer):
    assert scorer.score("Parks", "Bench needs painting", AFTERNOON) == 0
    assert scorer.score(None, "Bench needs painting", AFTERNOON) == 0


def test_urgent_keywords_are_case_insensitive(scorer):
    assert scorer.has_urgent_language("This is an EMERGENCY")
    assert not scorer.has_urgent_language("Routine maintenance")


@pytest.mark.parametrize("hour,night", [(0, True), (5, True), (6, False), (22, False), (23, True)])
def test_night_window(scorer, hour, night):
    assert scorer.is_night(AFTERNOON.replace(hour=hour)) is night


@pytest.mark.parametrize("score,priority", [
    (0, Priority.LOW), (1, Priority.LOW), (2, Priority.MEDIUM), (3, Priority.MEDIUM), (4, Priority.HIGH), (6, Priority.HIGH),
])
def test_priority_thresholds(scorer, score, priority):
    assert scorer.priority_for(score) == priority


def test_score_is_monotonic_in_category_weight(scorer):
    categories = sorted(PriorityScorer.CATEGORY_WEIGHTS, key=PriorityScorer.CATEGORY_WEIGHTS.get)
    for description in ("Routine report text", "Critical failure of the system"):
        for now in (NIGHT, AFTERNOON):
            scores = [scorer.score(c, description, now) for c in categories]
            assert scores == sorted(scores)


def test_score_uses_injected_clock(scorer, clock):
    clock.at_hour(3)
    assert scorer.score("Traffic", "Signal not working") == 2
    clock.at_hour(15)
    assert scorer.score("Traffic", "Signal not working") == 1


def test_assess_explains_the_score(scorer):
    assessment = scorer.assess("Safety", "Dangerous crossing", NIGHT)
    assert assessment["priority_score"] == 6
    assert assessment["priority"] == Priority.HIGH
    assert "Category: Safety (+3)" in assessment["priority_reason"]
    assert "Urgent language (+2)" in assessment["priority_reason"]
    assert "Night-time" in assessment["priority_reason"]


@pytest.mark.parametrize("priority,category,hours", [
    (Priority.HIGH, "Safety", 12),
    (Priority.MEDIUM, "Infrastructure", 168),
    (Priority.LOW, "Utilities", 96),
    ("high", "Unknown", 60),
    ("not-a-priority", "Traffic", 72),
])
def test_estimated_resolution_hours(scorer, priority, category, hours):
    assert scorer.estimated_resolution_hours(priority, category) == hours


def test_haversine_identity_and_symmetry():
    a = (28.6139, 77.2090)
    b = (19.0760, 72.8777)
    assert haversine_km(*a, *a) == 0
    assert haversine_km(*a, *b) == pytest.approx(haversine_km(*b, *a))
    assert haversine_km(*a, *b) == pytest.approx(1148, rel=0.01)


def test_haversine_antipodal_points_do_not_fail():
    assert haversine_km(0, 0, 0, 180) == pytest.approx(20015, rel=0.001)


def test_geo_bucket_topic_floors_coordinates():
    assert geo_bucket_topic(28.6139, 77.2090) == "location_2861_7720"
    assert geo_bucket_topic(-33.8688, 151.2093) == "location_-3387_15120"
