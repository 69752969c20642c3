"""
AI plug-in architecture for report analysis.

Providers are pluggable; the keyword heuristic is always available as the
default and fallback, so analysis never blocks report triage.
"""

from civic_triage.services.ai_plugin.base import AIProvider
from civic_triage.services.ai_plugin.gemini_provider import GeminiAIProvider
from civic_triage.services.ai_plugin.heuristic_provider import HeuristicAIProvider
from civic_triage.services.ai_plugin.registry import AIProviderRegistry, build_ai_registry

__all__ = [
    "AIProvider",
    "AIProviderRegistry",
    "GeminiAIProvider",
    "HeuristicAIProvider",
    "build_ai_registry",
]
