# src/docstruct/scoring/confidence.py

"""Weighted confidence model for an extracted document structure.

The score blends three signals:

- a structural score, the clamped sum of bounded sub-rewards (chapter
  count, titles, chapter balance, sentences per paragraph, content types,
  custom metadata),
- the share of sentences with a reasonable word count,
- the share of chapters that carry a title.

Every sub-reward is a pure function of the tree and a ScoringWeights.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from docstruct.parsers.models import Chapter, DocumentMetadata, DocumentStructure

from .config import ScoringWeights


@dataclass(frozen=True)
class ConfidenceBreakdown:
    chapter_count_reward: float
    title_reward: float
    balance_reward: float
    sentence_distribution_reward: float
    content_type_reward: float
    custom_metadata_reward: float
    structural_score: float
    reasonable_sentence_ratio: float
    title_ratio: float
    overall: float
    coefficient_of_variation: float | None = None


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def weighted_average(factors: Sequence[tuple[float, float]]) -> float:
    """Sum of score * weight over the sum of weights; 0.0 without weight."""
    total_weight = sum(weight for _, weight in factors)
    if total_weight <= 0:
        return 0.0
    return sum(score * weight for score, weight in factors) / total_weight


def chapter_count_reward(chapter_count: int, weights: ScoringWeights) -> float:
    if chapter_count < 1:
        return 0.0
    reward = weights.chapter_reward
    if weights.optimal_min_chapters <= chapter_count <= weights.optimal_max_chapters:
        reward += weights.chapter_count_reward
    elif chapter_count > 1:
        reward += weights.chapter_count_partial_reward
    return reward


def title_ratio(chapters: Sequence[Chapter]) -> float:
    if not chapters:
        return 0.0
    return sum(1 for c in chapters if c.title.strip()) / len(chapters)


def coefficient_of_variation(word_counts: Sequence[int]) -> float | None:
    """Population standard deviation over mean; None when undefined."""
    if len(word_counts) <= 1:
        return None
    counts = np.asarray(word_counts, dtype=float)
    mean = counts.mean()
    if mean == 0:
        return None
    return float(counts.std() / mean)


def balance_reward(cv: float | None, weights: ScoringWeights) -> float:
    if cv is None:
        return 0.0
    if cv < weights.balance_low_cv:
        return weights.balance_high_reward
    if cv < weights.balance_medium_cv:
        return weights.balance_medium_reward
    return 0.0


def sentence_distribution_reward(
    sentences_per_paragraph: Sequence[int], weights: ScoringWeights
) -> float:
    if not sentences_per_paragraph or sum(sentences_per_paragraph) == 0:
        return 0.0
    average = sum(sentences_per_paragraph) / len(sentences_per_paragraph)
    if (
        weights.optimal_min_sentences_per_paragraph
        <= average
        <= weights.optimal_max_sentences_per_paragraph
    ):
        return weights.sentence_distribution_reward
    return weights.sentence_distribution_partial_reward


def content_type_reward(chapters: Sequence[Chapter], weights: ScoringWeights) -> float:
    reward = 0.0
    for chapter in chapters:
        if chapter.code_block_count:
            reward += weights.code_block_reward
        if chapter.list_count:
            reward += weights.list_reward
        if chapter.table_count:
            reward += weights.table_reward
    return min(weights.content_type_reward_cap, reward)


def custom_metadata_reward(
    metadata: DocumentMetadata, weights: ScoringWeights
) -> float:
    return min(
        weights.custom_metadata_cap,
        len(metadata.custom_metadata) * weights.custom_metadata_factor,
    )


def reasonable_sentence_ratio(
    sentence_word_counts: Sequence[int], weights: ScoringWeights
) -> float:
    if not sentence_word_counts:
        return 0.0
    reasonable = sum(
        1
        for count in sentence_word_counts
        if weights.reasonable_sentence_min_words
        <= count
        <= weights.reasonable_sentence_max_words
    )
    return reasonable / len(sentence_word_counts)


def calculate_confidence(
    structure: DocumentStructure, weights: ScoringWeights | None = None
) -> ConfidenceBreakdown:
    """Score a built structure.

    Args:
        structure: Tree produced by the StructureBuilder; its own
            ``confidence`` field is ignored.
        weights: Scoring constants, defaults to ScoringWeights().

    Returns:
        ConfidenceBreakdown with every sub-reward and the overall score
        in [0, 1].
    """
    weights = weights or ScoringWeights()
    chapters = structure.chapters

    cv = coefficient_of_variation([c.word_count for c in chapters])
    rewards = {
        "chapter_count_reward": chapter_count_reward(len(chapters), weights),
        "title_reward": title_ratio(chapters) * weights.title_ratio_reward,
        "balance_reward": balance_reward(cv, weights),
        "sentence_distribution_reward": sentence_distribution_reward(
            [len(p.sentences) for p in structure.all_paragraphs()], weights
        ),
        "content_type_reward": content_type_reward(chapters, weights),
        "custom_metadata_reward": custom_metadata_reward(structure.metadata, weights),
    }
    structural = clamp(sum(rewards.values()))
    sentence_ratio = reasonable_sentence_ratio(
        [s.word_count for s in structure.all_sentences()], weights
    )
    titles = title_ratio(chapters)

    overall = weighted_average(
        [
            (structural, weights.structural_weight),
            (sentence_ratio, weights.sentence_quality_weight),
            (titles, weights.title_weight),
        ]
    )

    return ConfidenceBreakdown(
        **rewards,
        structural_score=structural,
        reasonable_sentence_ratio=sentence_ratio,
        title_ratio=titles,
        overall=clamp(overall),
        coefficient_of_variation=cv,
    )
