"""
AI Provider Base Interface.

Defines the contract for report analysis providers.
All providers must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import logging

from civic_triage.models.report import AnalysisResult, MediaAnalysis
from civic_triage.services.priority_scoring import PriorityScorer

logger = logging.getLogger(__name__)


class AIProvider(ABC):
    """
    Abstract base class for analysis providers.

    Providers classify the text of a report. Priority is never taken from a
    model: every provider derives it from the shared PriorityScorer.
    Unlike the analyzer that wraps them, providers MAY raise; the registry
    falls through to the next provider when they do.
    """

    # Whether analyze_media is backed by a real capability
    supports_media = False

    def __init__(self, scorer: PriorityScorer):
        self.scorer = scorer

    @abstractmethod
    def is_enabled(self) -> bool:
        """
        Check if this provider is enabled and ready.
        """

    @abstractmethod
    def get_model_info(self) -> Dict[str, str]:
        """
        Get model information.

        Returns:
            Dict with 'name' and 'version' keys
        """

    @abstractmethod
    def analyze_text(self, title: str, description: str, category: Optional[str]) -> AnalysisResult:
        """
        Analyze the title and description of a report.

        Args:
            title: Report title
            description: Report description
            category: Category selected by the citizen

        Returns:
            AnalysisResult without media analysis
        """

    def analyze_media(self, media_refs: List[str]) -> MediaAnalysis:
        """
        Analyze attached media.

        Only called on providers with supports_media set.
        """
        raise NotImplementedError(f"{self.get_model_info()['name']} does not analyze media")
