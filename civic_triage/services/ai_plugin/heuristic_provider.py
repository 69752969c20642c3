"""
Heuristic AI Provider - default and fallback analysis provider.

Keyword matching over the report text. No network calls, no randomness:
the same input always produces the same analysis.
"""

from collections import OrderedDict
from typing import Dict, List, Optional
import logging
import re

from civic_triage.models.report import AnalysisResult, MediaAnalysis, Sentiment, Severity
from civic_triage.services.ai_plugin.base import AIProvider

logger = logging.getLogger(__name__)


# Checked in this order; first match wins
SENTIMENT_KEYWORDS = OrderedDict([
    (Sentiment.URGENT, ("urgent", "emergency", "critical", "dangerous", "severe")),
    (Sentiment.NEGATIVE, ("broken", "damaged", "problem", "issue", "failure")),
    (Sentiment.POSITIVE, ("fixed", "improved", "working", "good", "excellent")),
])

TAG_KEYWORDS = OrderedDict([
    ("road", ("road", "street", "highway", "path")),
    ("water", ("water", "leak", "pipe", "drainage")),
    ("electricity", ("electricity", "power", "light", "cable")),
    ("waste", ("garbage", "trash", "waste", "litter")),
    ("traffic", ("traffic", "signal", "jam", "congestion")),
    ("safety", ("safety", "crime", "accident", "danger")),
])

CATEGORY_KEYWORDS = OrderedDict([
    ("Infrastructure", ("road", "bridge", "building", "construction")),
    ("Utilities", ("water", "electricity", "power", "gas")),
    ("Sanitation", ("garbage", "waste", "cleaning", "drainage")),
    ("Traffic", ("traffic", "signal", "parking", "vehicle")),
    ("Safety", ("crime", "accident", "danger", "emergency")),
])

SEVERE_KEYWORDS = ("emergency", "critical", "dangerous")
MODERATE_KEYWORDS = ("urgent", "major", "significant")


def _contains_any(text: str, keywords) -> bool:
    return any(keyword in text for keyword in keywords)


class HeuristicAIProvider(AIProvider):
    """
    Rule-based analysis provider.

    This is the provider used when:
    - AI is disabled in config
    - No real provider is configured
    - A real provider fails

    Always enabled.
    """

    MODEL_NAME = "keyword-heuristic"
    MODEL_VERSION = "1.0.0"

    supports_media = True

    def is_enabled(self) -> bool:
        return True

    def get_model_info(self) -> Dict[str, str]:
        return {
            "name": self.MODEL_NAME,
            "version": self.MODEL_VERSION,
        }

    def analyze_text(self, title: str, description: str, category: Optional[str]) -> AnalysisResult:
        description_lower = (description or "").lower()
        full_text = f"{title or ''} {description or ''}".lower()

        sentiment = self.analyze_sentiment(description_lower)
        tags = self.extract_tags(full_text)
        assessment = self.scorer.assess(category, description or "")

        return AnalysisResult(
            sentiment=sentiment,
            priority=assessment["priority"],
            priority_score=assessment["priority_score"],
            priority_reason=assessment["priority_reason"],
            tags=tags,
            confidence=self.confidence_for(sentiment, tags),
            suggested_category=self.suggest_category(full_text, category),
            estimated_severity=self.estimate_severity(full_text),
            model_name=self.MODEL_NAME,
        )

    @staticmethod
    def analyze_sentiment(text: str) -> Sentiment:
        text = text.lower()
        for sentiment, keywords in SENTIMENT_KEYWORDS.items():
            if _contains_any(text, keywords):
                return sentiment
        return Sentiment.NEUTRAL

    @staticmethod
    def extract_tags(text: str) -> List[str]:
        text = text.lower()
        return [tag for tag, keywords in TAG_KEYWORDS.items() if _contains_any(text, keywords)]

    @staticmethod
    def suggest_category(text: str, category: Optional[str]) -> Optional[str]:
        text = text.lower()
        for suggested, keywords in CATEGORY_KEYWORDS.items():
            if _contains_any(text, keywords):
                return suggested
        return category

    @staticmethod
    def estimate_severity(text: str) -> Severity:
        text = text.lower()
        if _contains_any(text, SEVERE_KEYWORDS):
            return Severity.SEVERE
        if _contains_any(text, MODERATE_KEYWORDS):
            return Severity.MODERATE
        return Severity.MINOR

    @staticmethod
    def confidence_for(sentiment: Sentiment, tags: List[str]) -> float:
        """More matched signals means more confidence, capped below certainty."""
        confidence = 0.6 + 0.05 * len(tags)
        if sentiment != Sentiment.NEUTRAL:
            confidence += 0.1
        return round(min(0.95, confidence), 2)

    def analyze_media(self, media_refs: List[str]) -> MediaAnalysis:
        """
        Label media from the words in their file names.

        There is no vision backend here; a reference such as
        ".../pothole_on_road.jpg" yields the "road" label.
        """
        words = " ".join(re.split(r"[^a-z0-9]+", " ".join(media_refs).lower()))
        labels = self.extract_tags(words)

        if labels:
            description = f"Detected {', '.join(labels)}-related content in {len(media_refs)} file(s)"
        else:
            description = f"No recognizable content in {len(media_refs)} file(s)"

        return MediaAnalysis(
            has_images=len(media_refs) > 0,
            image_count=len(media_refs),
            detected_objects=labels,
            object_count=len(labels),
            confidence=0.5 if labels else 0.0,
            description=description,
        )
