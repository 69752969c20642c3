"""
Priority Scoring - system-derived priority for citizen reports.

DESIGN PRINCIPLES:
- Priority is SYSTEM-DERIVED, never accepted from the submitter
- Score is a small integer, mapped to low / medium / high
- Deterministic for a given text, category and local hour
"""

from datetime import datetime
from typing import Callable, Dict, Optional
import logging

from civic_triage.models.report import Priority

logger = logging.getLogger(__name__)


class PriorityScorer:
    """
    Calculates an integer priority score and maps it to a Priority.

    Factors:
    1. Category weight (safety-critical categories weigh more)
    2. Urgency language in the description
    3. Night-time submission (before 06:00 or after 22:59 local time)
    """

    # Configuration: Category weights (unknown categories weigh 0)
    CATEGORY_WEIGHTS = {
        "Safety": 3,
        "Infrastructure": 2,
        "Utilities": 2,
        "Traffic": 1,
        "Sanitation": 1,
        "Other": 0,
    }

    URGENT_KEYWORDS = ("emergency", "urgent", "critical", "dangerous")
    URGENT_KEYWORD_BONUS = 2

    NIGHT_START_HOUR = 22  # hours strictly after this count as night
    NIGHT_END_HOUR = 6     # hours strictly before this count as night
    NIGHT_BONUS = 1

    HIGH_THRESHOLD = 4
    MEDIUM_THRESHOLD = 2

    # Configuration: Estimated resolution (hours) per category, scaled by priority
    BASE_RESOLUTION_HOURS = {
        "Safety": 24,
        "Utilities": 48,
        "Infrastructure": 168,
        "Traffic": 72,
        "Sanitation": 48,
        "Other": 120,
    }
    DEFAULT_RESOLUTION_HOURS = 120
    PRIORITY_MULTIPLIERS = {
        Priority.HIGH: 0.5,
        Priority.MEDIUM: 1,
        Priority.LOW: 2,
    }

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        # Local wall-clock time; injectable so tests can pin the hour
        self.clock = clock or datetime.now

    def category_weight(self, category: Optional[str]) -> int:
        return self.CATEGORY_WEIGHTS.get(category or "", 0)

    def has_urgent_language(self, description: str) -> bool:
        text = (description or "").lower()
        return any(keyword in text for keyword in self.URGENT_KEYWORDS)

    def is_night(self, now: datetime) -> bool:
        return now.hour < self.NIGHT_END_HOUR or now.hour > self.NIGHT_START_HOUR

    def score(self, category: Optional[str], description: str, now: Optional[datetime] = None) -> int:
        now = now or self.clock()
        total = self.category_weight(category)
        if self.has_urgent_language(description):
            total += self.URGENT_KEYWORD_BONUS
        if self.is_night(now):
            total += self.NIGHT_BONUS
        return total

    def priority_for(self, score: int) -> Priority:
        if score >= self.HIGH_THRESHOLD:
            return Priority.HIGH
        if score >= self.MEDIUM_THRESHOLD:
            return Priority.MEDIUM
        return Priority.LOW

    def assess(self, category: Optional[str], description: str, now: Optional[datetime] = None) -> Dict:
        """
        Score a report and explain the result.

        Returns:
            Dict with priority_score, priority and priority_reason
        """
        now = now or self.clock()
        reasons = [f"Category: {category or 'unknown'} (+{self.category_weight(category)})"]
        if self.has_urgent_language(description):
            reasons.append(f"Urgent language (+{self.URGENT_KEYWORD_BONUS})")
        if self.is_night(now):
            reasons.append(f"Night-time report at {now.hour:02d}:00 (+{self.NIGHT_BONUS})")

        score = self.score(category, description, now)
        priority = self.priority_for(score)
        logger.debug(f"Priority score {score} ({priority.value}): {' | '.join(reasons)}")

        return {
            "priority_score": score,
            "priority": priority,
            "priority_reason": " | ".join(reasons),
        }

    def estimated_resolution_hours(self, priority, category: Optional[str]) -> int:
        base_hours = self.BASE_RESOLUTION_HOURS.get(category or "", self.DEFAULT_RESOLUTION_HOURS)
        try:
            priority = Priority(priority)
        except ValueError:
            priority = Priority.MEDIUM
        return round(base_hours * self.PRIORITY_MULTIPLIERS[priority])
