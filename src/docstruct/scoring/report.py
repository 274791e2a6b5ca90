import logging
from dataclasses import dataclass, field
from enum import Enum

from docstruct.parsers.models import Chapter, DocumentStructure

from .config import ScoringWeights
from .confidence import ConfidenceBreakdown, calculate_confidence, weighted_average

logger = logging.getLogger(__name__)

# Chapter factor weights
_TITLE_FACTOR_WEIGHT = 0.3
_CONTENT_FACTOR_WEIGHT = 0.3
_PARAGRAPH_FACTOR_WEIGHT = 0.2
_POSITION_FACTOR_WEIGHT = 0.2

TARGET_CHAPTER_WORDS = 500
TARGET_CHAPTER_PARAGRAPHS = 3

DISTRIBUTION_BUCKETS = ("0.0-0.2", "0.2-0.4", "0.4-0.6", "0.6-0.8", "0.8-1.0")
LOOKS_GOOD = "Document structure looks good!"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ChapterConfidence:
    position: int
    title: str
    confidence: float
    factors: dict[str, float]


@dataclass(frozen=True)
class ConfidenceReport:
    overall: float
    breakdown: ConfidenceBreakdown
    chapters: list[ChapterConfidence]
    average_paragraph_confidence: float
    paragraph_distribution: dict[str, int]
    risk_level: RiskLevel
    recommendations: list[str] = field(default_factory=list)


def chapter_factors(chapter: Chapter, index: int) -> dict[str, float]:
    return {
        "title": 1.0 if chapter.title.strip() else 0.0,
        "content": min(1.0, chapter.word_count / TARGET_CHAPTER_WORDS),
        "paragraphs": min(1.0, len(chapter.paragraphs) / TARGET_CHAPTER_PARAGRAPHS),
        "position": 1.0 if chapter.position == index else 0.5,
    }


def chapter_confidence(chapter: Chapter, index: int) -> ChapterConfidence:
    factors = chapter_factors(chapter, index)
    score = weighted_average(
        [
            (factors["title"], _TITLE_FACTOR_WEIGHT),
            (factors["content"], _CONTENT_FACTOR_WEIGHT),
            (factors["paragraphs"], _PARAGRAPH_FACTOR_WEIGHT),
            (factors["position"], _POSITION_FACTOR_WEIGHT),
        ]
    )
    return ChapterConfidence(
        position=chapter.position, title=chapter.title, confidence=score, factors=factors
    )


def paragraph_distribution(confidences: list[float]) -> dict[str, int]:
    """Count paragraph confidences into five equal-width buckets."""
    distribution = dict.fromkeys(DISTRIBUTION_BUCKETS, 0)
    for value in confidences:
        bucket = min(int(value * 5), 4)
        distribution[DISTRIBUTION_BUCKETS[bucket]] += 1
    return distribution


def risk_level(overall: float, target: float) -> RiskLevel:
    if overall >= target:
        return RiskLevel.LOW
    if overall >= target * 0.75:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def recommendations_for(
    structure: DocumentStructure, breakdown: ConfidenceBreakdown, weights: ScoringWeights
) -> list[str]:
    recommendations = []
    if not structure.chapters:
        recommendations.append("Add chapter headings to structure the document")
    else:
        if breakdown.title_ratio < 1.0:
            recommendations.append("Add titles to untitled chapters")
        if len(structure.chapters) > 1 and breakdown.balance_reward == 0:
            recommendations.append(
                "Chapter lengths vary widely; consider rebalancing chapters"
            )
    if structure.total_sentences and breakdown.reasonable_sentence_ratio < 0.5:
        recommendations.append(
            "Many sentences are very short or very long; review sentence breaks"
        )
    if (
        structure.total_paragraphs
        and breakdown.sentence_distribution_reward < weights.sentence_distribution_reward
    ):
        recommendations.append(
            "Paragraphs are unusually short or long; review paragraph breaks"
        )
    return recommendations or [LOOKS_GOOD]


def generate_confidence_report(
    structure: DocumentStructure,
    weights: ScoringWeights | None = None,
    *,
    target_confidence: float = 0.8,
) -> ConfidenceReport:
    """Explain a structure's confidence score.

    Args:
        structure: Built document structure.
        weights: Scoring constants, defaults to ScoringWeights().
        target_confidence: Score at or above which the risk is low; 75% of
            it marks the medium band.
    """
    if not 0.0 <= target_confidence <= 1.0:
        raise ValueError("target_confidence must be within [0, 1]")

    weights = weights or ScoringWeights()
    breakdown = calculate_confidence(structure, weights)

    paragraph_confidences = [p.confidence for p in structure.all_paragraphs()]
    average = (
        sum(paragraph_confidences) / len(paragraph_confidences)
        if paragraph_confidences
        else 0.0
    )

    report = ConfidenceReport(
        overall=breakdown.overall,
        breakdown=breakdown,
        chapters=[chapter_confidence(c, i) for i, c in enumerate(structure.chapters)],
        average_paragraph_confidence=average,
        paragraph_distribution=paragraph_distribution(paragraph_confidences),
        risk_level=risk_level(breakdown.overall, target_confidence),
        recommendations=recommendations_for(structure, breakdown, weights),
    )
    logger.debug(
        "Confidence report: overall=%.3f, risk=%s, recommendations=%d",
        report.overall,
        report.risk_level.value,
        len(report.recommendations),
    )
    return report
