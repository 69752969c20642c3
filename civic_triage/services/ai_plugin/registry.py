"""
AI Provider Registry.

Manages provider selection and fallback logic.
"""

from typing import List, Optional
import logging

from civic_triage.core.settings import Settings
from civic_triage.models.report import AnalysisResult, MediaAnalysis
from civic_triage.services.ai_plugin.base import AIProvider
from civic_triage.services.ai_plugin.gemini_provider import GeminiAIProvider
from civic_triage.services.ai_plugin.heuristic_provider import HeuristicAIProvider
from civic_triage.services.priority_scoring import PriorityScorer

logger = logging.getLogger(__name__)


class AIProviderRegistry:
    """
    Ordered list of analysis providers.

    Tries providers in priority order; a provider that is disabled or
    raises is skipped. Raises only when every provider failed.
    """

    def __init__(self, providers: List[AIProvider]):
        if not providers:
            raise ValueError("AIProviderRegistry needs at least one provider")
        self.providers = providers

    def get_provider(self) -> Optional[AIProvider]:
        """First enabled provider, or None."""
        for provider in self.providers:
            if provider.is_enabled():
                return provider
        return None

    def analyze_text(self, title: str, description: str, category: Optional[str]) -> AnalysisResult:
        last_error: Optional[Exception] = None
        for provider in self.providers:
            if not provider.is_enabled():
                continue
            name = provider.get_model_info()["name"]
            try:
                result = provider.analyze_text(title, description, category)
                logger.info(f"✅ Text analysis completed using {name}")
                return result
            except Exception as e:
                logger.warning(f"Provider {name} failed text analysis: {e}")
                last_error = e
        raise RuntimeError(f"All AI providers failed text analysis: {last_error}")

    def analyze_media(self, media_refs: List[str]) -> MediaAnalysis:
        last_error: Optional[Exception] = None
        for provider in self.providers:
            if not (provider.is_enabled() and provider.supports_media):
                continue
            name = provider.get_model_info()["name"]
            try:
                return provider.analyze_media(media_refs)
            except Exception as e:
                logger.warning(f"Provider {name} failed media analysis: {e}")
                last_error = e
        raise RuntimeError(f"No AI provider could analyze media: {last_error}")


def build_ai_registry(config: Settings, scorer: PriorityScorer) -> AIProviderRegistry:
    """
    Build the registry from settings.

    The heuristic provider is always registered last as the fallback.
    """
    providers: List[AIProvider] = []

    if not config.AI_ENABLED:
        logger.info("⚠️ AI is disabled globally (AI_ENABLED=false), using keyword heuristic only")
    elif config.AI_PROVIDER.lower() == "gemini":
        gemini = GeminiAIProvider(
            scorer,
            api_key=config.GEMINI_API_KEY,
            model=config.GEMINI_MODEL,
            timeout_seconds=config.AI_TIMEOUT_SECONDS,
        )
        if gemini.is_enabled():
            providers.append(gemini)
            logger.info("✅ Gemini AI Provider registered")

    providers.append(HeuristicAIProvider(scorer))
    logger.info("✅ Heuristic AI Provider registered (fallback)")
    return AIProviderRegistry(providers)
