"""
Report Analyzer - text and media analysis for the triage pipeline.

DESIGN PRINCIPLES:
- Analysis is best-effort and NEVER fails the pipeline
- On any fault the documented default result is substituted
- Priority inside the result is always system-derived
"""

from typing import List, Optional
import logging

from civic_triage.core.errors import CapabilityDegraded
from civic_triage.models.report import AnalysisResult, MediaAnalysis
from civic_triage.services.ai_plugin.registry import AIProviderRegistry

logger = logging.getLogger(__name__)


class ReportAnalyzer:
    """
    Runs the configured AI providers over a report.

    Text analysis faults yield AnalysisResult.default_for(category).
    Media analysis faults only drop the media part of the result.
    """

    def __init__(self, registry: AIProviderRegistry):
        self.registry = registry

    def analyze(
        self,
        title: str,
        description: str,
        category: Optional[str],
        media_refs: Optional[List[str]] = None,
    ) -> AnalysisResult:
        try:
            result = self.registry.analyze_text(title, description, category)
        except Exception as e:
            degraded = CapabilityDegraded(f"Text analysis failed: {e}")
            logger.warning(f"⚠️ {degraded.message}; using default analysis")
            return AnalysisResult.default_for(category)

        if media_refs:
            try:
                result.media_analysis = self.registry.analyze_media(media_refs)
            except Exception as e:
                degraded = CapabilityDegraded(f"Media analysis failed: {e}")
                logger.warning(f"⚠️ {degraded.message}; continuing without media analysis")

        return result

    def analyze_media(self, media_refs: List[str]) -> MediaAnalysis:
        """Media-only analysis; an empty result on any fault."""
        try:
            return self.registry.analyze_media(media_refs)
        except Exception as e:
            degraded = CapabilityDegraded(f"Media analysis failed: {e}")
            logger.warning(f"⚠️ {degraded.message}; returning empty media analysis")
            return MediaAnalysis(image_count=len(media_refs), has_images=bool(media_refs))
