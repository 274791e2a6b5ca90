from collections.abc import Callable

import pytest
from pydantic import ValidationError

from docstruct.parsers.models import Chapter, ContentType, DocumentStructure
from docstruct.scoring.confidence import (
    balance_reward,
    calculate_confidence,
    chapter_count_reward,
    clamp,
    coefficient_of_variation,
    content_type_reward,
    reasonable_sentence_ratio,
    sentence_distribution_reward,
    title_ratio,
    weighted_average,
)
from docstruct.scoring.config import ScoringWeights

WEIGHTS = ScoringWeights()


class TestHelpers:
    def test_clamp(self) -> None:
        assert clamp(-0.5) == 0.0
        assert clamp(1.5) == 1.0
        assert clamp(0.3) == 0.3

    def test_weighted_average(self) -> None:
        assert weighted_average([(1.0, 0.5), (0.0, 0.5)]) == pytest.approx(0.5)
        assert weighted_average([(1.0, 3.0), (0.0, 1.0)]) == pytest.approx(0.75)

    def test_weighted_average_without_weight(self) -> None:
        assert weighted_average([(1.0, 0.0)]) == 0.0
        assert weighted_average([]) == 0.0


class TestChapterCountReward:
    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, 0.0), (1, 0.1), (2, 0.2), (3, 0.3), (20, 0.3), (21, 0.2)],
    )
    def test_bands(self, count: int, expected: float) -> None:
        assert chapter_count_reward(count, WEIGHTS) == pytest.approx(expected)


class TestCoefficientOfVariation:
    def test_equal_counts(self) -> None:
        assert coefficient_of_variation([100, 100, 100]) == 0.0

    def test_population_deviation(self) -> None:
        # mean 100, population std 50
        assert coefficient_of_variation([50, 150]) == pytest.approx(0.5)

    def test_undefined(self) -> None:
        assert coefficient_of_variation([]) is None
        assert coefficient_of_variation([42]) is None
        assert coefficient_of_variation([0, 0]) is None


class TestBalanceReward:
    @pytest.mark.parametrize(
        ("cv", "expected"),
        [(None, 0.0), (0.0, 0.2), (0.29, 0.2), (0.3, 0.1), (0.59, 0.1), (0.6, 0.0)],
    )
    def test_bands(self, cv: float | None, expected: float) -> None:
        assert balance_reward(cv, WEIGHTS) == pytest.approx(expected)


class TestSentenceDistributionReward:
    def test_optimal_average(self) -> None:
        assert sentence_distribution_reward([2, 3, 5], WEIGHTS) == pytest.approx(0.15)

    def test_outside_optimal_range(self) -> None:
        assert sentence_distribution_reward([1, 1], WEIGHTS) == pytest.approx(0.075)
        assert sentence_distribution_reward([8], WEIGHTS) == pytest.approx(0.075)

    def test_no_sentences(self) -> None:
        assert sentence_distribution_reward([], WEIGHTS) == 0.0
        assert sentence_distribution_reward([0, 0], WEIGHTS) == 0.0


class TestContentTypeReward:
    def test_counts_each_kind_once_per_chapter(
        self, make_chapter: Callable[..., Chapter]
    ) -> None:
        chapter = make_chapter(
            0,
            [[5], [5], [5], [5]],
            content_types=[
                ContentType.CODE,
                ContentType.CODE,
                ContentType.LIST,
                ContentType.TEXT,
            ],
        )

        assert content_type_reward([chapter], WEIGHTS) == pytest.approx(0.04)

    def test_capped(self, make_chapter: Callable[..., Chapter]) -> None:
        types = [ContentType.CODE, ContentType.LIST, ContentType.TABLE]
        chapters = [
            make_chapter(i, [[5], [5], [5]], content_types=types) for i in range(4)
        ]

        assert content_type_reward(chapters, WEIGHTS) == pytest.approx(0.10)


class TestRatios:
    def test_title_ratio(self, make_chapter: Callable[..., Chapter]) -> None:
        chapters = [make_chapter(0, [[5]]), make_chapter(1, [[5]], title="  ")]

        assert title_ratio(chapters) == 0.5
        assert title_ratio([]) == 0.0

    def test_reasonable_sentence_ratio(self) -> None:
        assert reasonable_sentence_ratio([4, 5, 30, 31], WEIGHTS) == 0.5
        assert reasonable_sentence_ratio([], WEIGHTS) == 0.0


class TestCalculateConfidence:
    def test_single_short_chapter(
        self,
        make_chapter: Callable[..., Chapter],
        make_structure: Callable[..., DocumentStructure],
    ) -> None:
        structure = make_structure([make_chapter(0, [[2]], title="Ch1")])

        breakdown = calculate_confidence(structure)

        assert breakdown.chapter_count_reward == pytest.approx(0.1)
        assert breakdown.title_reward == pytest.approx(0.2)
        assert breakdown.balance_reward == 0.0
        assert breakdown.coefficient_of_variation is None
        assert breakdown.sentence_distribution_reward == pytest.approx(0.075)
        assert breakdown.structural_score == pytest.approx(0.375)
        assert breakdown.reasonable_sentence_ratio == 0.0
        assert breakdown.title_ratio == 1.0
        assert breakdown.overall == pytest.approx(0.3875)

    def test_balanced_document(
        self,
        make_chapters: Callable[..., list[Chapter]],
        make_structure: Callable[..., DocumentStructure],
    ) -> None:
        structure = make_structure(make_chapters([[[9, 6]]] * 10))

        breakdown = calculate_confidence(structure)

        assert breakdown.coefficient_of_variation == 0.0
        assert breakdown.balance_reward == pytest.approx(0.2)
        assert breakdown.chapter_count_reward == pytest.approx(0.3)
        assert breakdown.sentence_distribution_reward == pytest.approx(0.15)
        assert breakdown.structural_score == pytest.approx(0.85)
        assert breakdown.reasonable_sentence_ratio == 1.0
        assert breakdown.overall == pytest.approx(0.925)

    def test_empty_document(
        self, make_structure: Callable[..., DocumentStructure]
    ) -> None:
        breakdown = calculate_confidence(make_structure([]))

        assert breakdown.overall == 0.0
        assert breakdown.structural_score == 0.0

    def test_custom_metadata_is_rewarded_and_capped(
        self,
        make_chapter: Callable[..., Chapter],
        make_structure: Callable[..., DocumentStructure],
    ) -> None:
        chapters = [make_chapter(0, [[2]], title="Ch1")]
        two = make_structure(chapters, custom_metadata={"a": 1, "b": 2})
        many = make_structure(chapters, custom_metadata={str(i): i for i in range(9)})

        assert calculate_confidence(two).custom_metadata_reward == pytest.approx(0.02)
        assert calculate_confidence(many).custom_metadata_reward == pytest.approx(0.05)

    def test_ignores_stored_confidence(
        self,
        make_chapter: Callable[..., Chapter],
        make_structure: Callable[..., DocumentStructure],
    ) -> None:
        chapters = [make_chapter(0, [[8, 8]])]

        low = calculate_confidence(make_structure(chapters, confidence=0.0))
        high = calculate_confidence(make_structure(chapters, confidence=1.0))

        assert low == high

    def test_custom_weights(
        self,
        make_chapter: Callable[..., Chapter],
        make_structure: Callable[..., DocumentStructure],
    ) -> None:
        structure = make_structure([make_chapter(0, [[2]], title="Ch1")])
        weights = ScoringWeights(
            structural_weight=0.0, sentence_quality_weight=0.0, title_weight=1.0
        )

        assert calculate_confidence(structure, weights).overall == pytest.approx(1.0)


class TestScoringWeights:
    def test_rejects_unknown_field(self) -> None:
        with pytest.raises(ValidationError):
            ScoringWeights(unknown=1.0)  # type: ignore[call-arg]

    def test_rejects_inverted_chapter_range(self) -> None:
        with pytest.raises(ValidationError, match="optimal_max_chapters"):
            ScoringWeights(optimal_min_chapters=10, optimal_max_chapters=5)

    def test_rejects_zero_blend(self) -> None:
        with pytest.raises(ValidationError, match="blend weight"):
            ScoringWeights(
                structural_weight=0.0, sentence_quality_weight=0.0, title_weight=0.0
            )
