"""
Gemini AI Provider - LLM-backed text analysis.

Uses the Gemini REST API for sentiment, tags, category and severity.
Raises on any API or parsing fault so the registry can fall back to the
heuristic provider.
"""

from typing import Dict, Optional
import json
import logging

import requests

from civic_triage.models.report import AnalysisResult, Category, Sentiment, Severity
from civic_triage.services.ai_plugin.base import AIProvider
from civic_triage.services.ai_plugin.heuristic_provider import TAG_KEYWORDS
from civic_triage.services.priority_scoring import PriorityScorer

logger = logging.getLogger(__name__)


class GeminiAIProvider(AIProvider):
    """
    Google Gemini provider for report analysis.

    Requires GEMINI_API_KEY. Disabled (and skipped by the registry) without it.
    """

    MODEL_VERSION = "v1beta"
    API_URL_TEMPLATE = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

    def __init__(
        self,
        scorer: PriorityScorer,
        api_key: Optional[str],
        model: str = "gemini-1.5-flash",
        timeout_seconds: float = 10.0,
    ):
        super().__init__(scorer)
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.enabled = bool(api_key and api_key.strip())

        if self.enabled:
            logger.info(f"✅ Gemini AI Provider initialized: {self.model}")
        else:
            logger.info("⚠️ Gemini AI Provider disabled: No API key configured")

    def is_enabled(self) -> bool:
        return self.enabled

    def get_model_info(self) -> Dict[str, str]:
        return {
            "name": self.model,
            "version": self.MODEL_VERSION,
        }

    def analyze_text(self, title: str, description: str, category: Optional[str]) -> AnalysisResult:
        prompt = self._build_prompt(title, description, category)
        parsed = self._parse_response(self._call_gemini_api(prompt))
        assessment = self.scorer.assess(category, description or "")

        allowed_tags = list(TAG_KEYWORDS.keys())
        tags = [tag for tag in allowed_tags if tag in set(parsed.get("tags") or [])]

        suggested = parsed.get("suggested_category")
        if suggested not in {c.value for c in Category}:
            suggested = category

        return AnalysisResult(
            sentiment=Sentiment(parsed.get("sentiment", "neutral")),
            priority=assessment["priority"],
            priority_score=assessment["priority_score"],
            priority_reason=assessment["priority_reason"],
            tags=tags,
            confidence=min(1.0, max(0.0, float(parsed.get("confidence", 0.5)))),
            suggested_category=suggested,
            estimated_severity=Severity(parsed.get("estimated_severity", "moderate")),
            model_name=self.model,
        )

    def _build_prompt(self, title: str, description: str, category: Optional[str]) -> str:
        categories = ", ".join(c.value for c in Category)
        tags = ", ".join(TAG_KEYWORDS.keys())
        return f"""You classify civic-issue reports submitted by citizens.

REPORT:
Title: {title}
Description: {description}
Category selected by the citizen: {category}

Answer with JSON only, using exactly this structure:
{{
  "sentiment": "<one of: urgent, negative, positive, neutral>",
  "tags": ["<zero or more of: {tags}>"],
  "suggested_category": "<one of: {categories}>",
  "estimated_severity": "<one of: minor, moderate, severe>",
  "confidence": <float 0.0-1.0>
}}"""

    def _call_gemini_api(self, prompt: str) -> str:
        """Call generateContent and return the text of the first candidate."""
        resp = requests.post(
            self.API_URL_TEMPLATE.format(model=self.model),
            params={"key": self.api_key},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"responseMimeType": "application/json", "temperature": 0},
            },
            timeout=self.timeout_seconds,
        )
        resp.raise_for_status()
        data = resp.json()
        return data["candidates"][0]["content"]["parts"][0]["text"]

    @staticmethod
    def _parse_response(text: str) -> Dict:
        cleaned = text.strip()
        if cleaned.startswith("```"):
            cleaned = cleaned.strip("`")
            if cleaned.lower().startswith("json"):
                cleaned = cleaned[4:]
        parsed = json.loads(cleaned)
        if not isinstance(parsed, dict):
            raise ValueError(f"Unexpected Gemini response shape: {type(parsed).__name__}")
        return parsed
