from .confidence import ConfidenceBreakdown, calculate_confidence, weighted_average
from .config import ScoringWeights
from .report import (
    ChapterConfidence,
    ConfidenceReport,
    RiskLevel,
    generate_confidence_report,
)

__all__ = [
    "ChapterConfidence",
    "ConfidenceBreakdown",
    "ConfidenceReport",
    "RiskLevel",
    "ScoringWeights",
    "calculate_confidence",
    "generate_confidence_report",
    "weighted_average",
]
