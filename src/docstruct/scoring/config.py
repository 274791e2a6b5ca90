# src/docstruct/scoring/config.py

from pydantic import BaseModel, Field, model_validator


class ScoringWeights(BaseModel):
    """Rewards, cut-offs and blend weights of the confidence model.

    Immutable. Every value the scoring engine uses lives here.
    """

    # Chapter count
    chapter_reward: float = Field(default=0.10, ge=0)
    chapter_count_reward: float = Field(default=0.20, ge=0)
    chapter_count_partial_reward: float = Field(default=0.10, ge=0)
    optimal_min_chapters: int = Field(default=3, ge=1)
    optimal_max_chapters: int = Field(default=20, ge=1)

    # Titles
    title_ratio_reward: float = Field(default=0.20, ge=0)

    # Balance (coefficient of variation of chapter word counts)
    balance_high_reward: float = Field(default=0.20, ge=0)
    balance_medium_reward: float = Field(default=0.10, ge=0)
    balance_low_cv: float = Field(default=0.3, gt=0)
    balance_medium_cv: float = Field(default=0.6, gt=0)

    # Sentences per paragraph
    sentence_distribution_reward: float = Field(default=0.15, ge=0)
    sentence_distribution_partial_reward: float = Field(default=0.075, ge=0)
    optimal_min_sentences_per_paragraph: float = Field(default=2, ge=0)
    optimal_max_sentences_per_paragraph: float = Field(default=5, ge=0)

    # Content types, per chapter
    code_block_reward: float = Field(default=0.02, ge=0)
    list_reward: float = Field(default=0.02, ge=0)
    table_reward: float = Field(default=0.02, ge=0)
    content_type_reward_cap: float = Field(default=0.10, ge=0)

    # Custom metadata
    custom_metadata_factor: float = Field(default=0.01, ge=0)
    custom_metadata_cap: float = Field(default=0.05, ge=0)

    # Reasonable sentence word counts, inclusive
    reasonable_sentence_min_words: int = Field(default=5, ge=0)
    reasonable_sentence_max_words: int = Field(default=30, ge=1)

    # Blend of the overall score
    structural_weight: float = Field(default=0.5, ge=0)
    sentence_quality_weight: float = Field(default=0.3, ge=0)
    title_weight: float = Field(default=0.2, ge=0)

    class Config:
        extra = "forbid"
        frozen = True

    @model_validator(mode="after")
    def _check_ranges(self) -> "ScoringWeights":
        if self.optimal_max_chapters < self.optimal_min_chapters:
            raise ValueError("optimal_max_chapters must be >= optimal_min_chapters")
        if self.balance_medium_cv < self.balance_low_cv:
            raise ValueError("balance_medium_cv must be >= balance_low_cv")
        if self.reasonable_sentence_max_words < self.reasonable_sentence_min_words:
            raise ValueError(
                "reasonable_sentence_max_words must be >= reasonable_sentence_min_words"
            )
        blend = self.structural_weight + self.sentence_quality_weight + self.title_weight
        if blend <= 0:
            raise ValueError("At least one blend weight must be > 0")
        return self
