"""Tests for report analysis and provider fallback."""

from types import SimpleNamespace

import pytest

from civic_triage.models.report import AnalysisResult, Priority, Sentiment, Severity
from civic_triage.services.ai_plugin import (
    AIProviderRegistry,
    GeminiAIProvider,
    HeuristicAIProvider,
    build_ai_registry,
)
from civic_triage.services.analyzer import ReportAnalyzer
from civic_triage.services.priority_scoring import PriorityScorer


class BrokenProvider(HeuristicAIProvider):
    MODEL_NAME = "broken"
    supports_media = True

    def analyze_text(self, title, description, category):
        raise RuntimeError("model unavailable")

    def analyze_media(self, media_refs):
        raise RuntimeError("vision unavailable")


@pytest.fixture
def scorer(clock):
    return PriorityScorer(clock=clock)


@pytest.fixture
def analyzer(scorer):
    return ReportAnalyzer(AIProviderRegistry([HeuristicAIProvider(scorer)]))


def test_heuristic_analysis_of_urgent_safety_report(analyzer):
    result = analyzer.analyze(
        "Accident at the crossing",
        "Dangerous road crossing, street light is out",
        "Safety",
    )
    assert result.sentiment == Sentiment.URGENT
    assert result.tags == ["road", "electricity", "safety"]
    assert result.suggested_category == "Infrastructure"
    assert result.estimated_severity == Severity.SEVERE
    assert result.confidence == 0.85
    assert result.model_name == "keyword-heuristic"
    # Safety (+3) + urgent language (+2) in the afternoon
    assert result.priority == Priority.HIGH


def test_neutral_text_keeps_citizen_category(analyzer):
    result = analyzer.analyze("Bench", "The bench in the park needs paint", "Other")
    assert result.sentiment == Sentiment.NEUTRAL
    assert result.tags == []
    assert result.suggested_category == "Other"
    assert result.estimated_severity == Severity.MINOR
    assert result.confidence == 0.6


def test_confidence_is_capped():
    tags = ["road", "water", "electricity", "waste", "traffic", "safety"]
    assert HeuristicAIProvider.confidence_for(Sentiment.URGENT, tags) == 0.95


def test_media_labels_come_from_file_names(analyzer):
    result = analyzer.analyze(
        "Overflowing bins",
        "Garbage has not been collected for a week",
        "Sanitation",
        ["https://cdn.example.com/uploads/garbage_pile.jpg", "https://cdn.example.com/IMG_0042.jpg"],
    )
    media = result.media_analysis
    assert media.has_images is True
    assert media.image_count == 2
    assert media.detected_objects == ["waste"]
    assert media.object_count == 1
    assert media.confidence == 0.5


def test_text_fault_yields_documented_default(scorer):
    analyzer = ReportAnalyzer(AIProviderRegistry([BrokenProvider(scorer)]))
    result = analyzer.analyze("Title", "Some description here", "Traffic")
    assert result == AnalysisResult.default_for("Traffic")
    assert result.sentiment == Sentiment.NEUTRAL
    assert result.priority == Priority.MEDIUM
    assert result.confidence == 0.5


def test_media_fault_only_drops_media_part(monkeypatch, scorer):
    registry = AIProviderRegistry([HeuristicAIProvider(scorer)])

    def broken_media(media_refs):
        raise RuntimeError("vision unavailable")

    monkeypatch.setattr(registry, "analyze_media", broken_media)
    result = ReportAnalyzer(registry).analyze("Leak", "Water pipe leak on the corner", "Utilities", ["a.jpg"])
    assert result.media_analysis is None
    assert result.tags == ["water"]


def test_registry_falls_back_to_next_provider(scorer):
    registry = AIProviderRegistry([BrokenProvider(scorer), HeuristicAIProvider(scorer)])
    result = registry.analyze_text("Leak", "Water pipe leak", "Utilities")
    assert result.model_name == "keyword-heuristic"


def test_registry_raises_when_every_provider_fails(scorer):
    registry = AIProviderRegistry([BrokenProvider(scorer)])
    with pytest.raises(RuntimeError):
        registry.analyze_text("Leak", "Water pipe leak", "Utilities")


def test_analyze_media_never_raises(scorer):
    analyzer = ReportAnalyzer(AIProviderRegistry([BrokenProvider(scorer)]))
    media = analyzer.analyze_media(["a.jpg", "b.jpg"])
    assert media.image_count == 2
    assert media.detected_objects == []


def test_build_registry_without_gemini_key_uses_heuristic_only(test_settings, scorer):
    test_settings.AI_PROVIDER = "gemini"
    test_settings.GEMINI_API_KEY = None
    registry = build_ai_registry(test_settings, scorer)
    assert [type(p) for p in registry.providers] == [HeuristicAIProvider]


def test_build_registry_with_gemini_key(test_settings, scorer):
    test_settings.AI_PROVIDER = "gemini"
    test_settings.GEMINI_API_KEY = "test-key"
    registry = build_ai_registry(test_settings, scorer)
    assert [type(p) for p in registry.providers] == [GeminiAIProvider, HeuristicAIProvider]


def test_gemini_response_is_normalized(monkeypatch, scorer):
    captured = {}

    def fake_post(url, params, json, timeout):
        captured.update({"url": url, "params": params, "timeout": timeout})
        text = '```json\n{"sentiment": "negative", "tags": ["water", "unicorns"], ' \
               '"suggested_category": "Utilities", "estimated_severity": "moderate", "confidence": 1.7}\n```'
        return SimpleNamespace(
            raise_for_status=lambda: None,
            json=lambda: {"candidates": [{"content": {"parts": [{"text": text}]}}]},
        )

    monkeypatch.setattr("civic_triage.services.ai_plugin.gemini_provider.requests.post", fake_post)

    provider = GeminiAIProvider(scorer, api_key="test-key", model="gemini-1.5-flash", timeout_seconds=5)
    result = provider.analyze_text("Leak", "Water pipe leak near the market", "Utilities")

    assert captured["params"] == {"key": "test-key"}
    assert captured["timeout"] == 5
    assert result.sentiment == Sentiment.NEGATIVE
    assert result.tags == ["water"]
    assert result.confidence == 1.0
    assert result.suggested_category == "Utilities"
    # Utilities (+2) in the afternoon; never taken from the model
    assert result.priority == Priority.MEDIUM
