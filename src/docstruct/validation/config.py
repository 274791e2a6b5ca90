# src/docstruct/validation/config.py

from pydantic import BaseModel, Field, model_validator


class ValidationThresholds(BaseModel):
    """Limits the StructureValidator checks against.

    Immutable. Explicit.
    """

    min_chapter_words: int = Field(default=50, ge=0)
    chapter_confidence_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    min_sentence_words: int = Field(default=3, ge=0)
    max_sentence_words: int = Field(default=50, ge=1)
    low_confidence_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    medium_confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    # Outliers: chapters below mean * low or above mean * high
    chapter_length_low_multiplier: float = Field(default=0.2, ge=0.0)
    chapter_length_high_multiplier: float = Field(default=3.0, ge=1.0)
    error_weight: float = Field(default=0.2, ge=0.0)
    warning_weight: float = Field(default=0.05, ge=0.0)
    min_score: float = Field(default=0.0, ge=0.0, le=1.0)
    manual_review_below: float = Field(default=0.7, ge=0.0, le=1.0)
    max_warnings: int = Field(default=10, ge=0)
    single_chapter_word_threshold: int = Field(default=5000, ge=0)

    class Config:
        extra = "forbid"
        frozen = True

    @model_validator(mode="after")
    def _check_ordering(self) -> "ValidationThresholds":
        if self.medium_confidence_threshold < self.low_confidence_threshold:
            raise ValueError(
                "medium_confidence_threshold must be >= low_confidence_threshold"
            )
        if self.max_sentence_words < self.min_sentence_words:
            raise ValueError("max_sentence_words must be >= min_sentence_words")
        return self
