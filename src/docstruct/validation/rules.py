# src/docstruct/validation/rules.py

"""Individual structure checks.

Each check is a pure function ``(structure, thresholds) -> CheckResult``;
the validator adds their results together.
"""

from collections.abc import Callable

from docstruct.parsers.models import ContentType, DocumentStructure

from .config import ValidationThresholds
from .models import (
    CheckResult,
    IssueLocation,
    Severity,
    ValidationCode,
    error,
    warning,
)

Check = Callable[[DocumentStructure, ValidationThresholds], CheckResult]

# Sentence length checks only apply to running prose
_PROSE_TYPES = (ContentType.TEXT, ContentType.BLOCKQUOTE)


def check_basic_structure(
    structure: DocumentStructure, thresholds: ValidationThresholds
) -> CheckResult:
    errors = []
    if not structure.metadata.title.strip():
        errors.append(
            error(
                ValidationCode.MISSING_TITLE,
                "Document has no title",
                suggestion="Add a level-1 heading or a title in the front matter",
            )
        )
    if not structure.chapters:
        errors.append(
            error(
                ValidationCode.NO_CHAPTERS,
                "Document has no chapters",
                suggestion="Add chapter headings or choose other chapter header levels",
            )
        )
    return CheckResult(errors=errors)


def check_chapters(
    structure: DocumentStructure, thresholds: ValidationThresholds
) -> CheckResult:
    warnings = []
    for index, chapter in enumerate(structure.chapters):
        location = IssueLocation(chapter=index)
        label = chapter.title.strip() or f"#{index + 1}"

        if not chapter.paragraphs:
            warnings.append(
                warning(
                    ValidationCode.EMPTY_CHAPTER,
                    f"Chapter {label} has no content",
                    location=location,
                    suggestion="Remove the heading or add content below it",
                )
            )
        elif chapter.word_count < thresholds.min_chapter_words:
            warnings.append(
                warning(
                    ValidationCode.SHORT_CHAPTER,
                    f"Chapter {label} has only {chapter.word_count} words",
                    location=location,
                    suggestion="Consider merging it with a neighbouring chapter",
                )
            )

        if (
            chapter.paragraphs
            and chapter.confidence < thresholds.chapter_confidence_threshold
        ):
            warnings.append(
                warning(
                    ValidationCode.LOW_CHAPTER_CONFIDENCE,
                    f"Chapter {label} has low confidence ({chapter.confidence:.2f})",
                    Severity.HIGH,
                    location=location,
                    suggestion="Review the chapter's paragraph and sentence breaks",
                )
            )

        if not chapter.title.strip():
            warnings.append(
                warning(
                    ValidationCode.EMPTY_CHAPTER_TITLE,
                    f"Chapter #{index + 1} has an empty title",
                    Severity.LOW,
                    location=location,
                    suggestion="Give the chapter heading some text",
                )
            )
    return CheckResult(warnings=warnings)


def check_chapter_lengths(
    structure: DocumentStructure, thresholds: ValidationThresholds
) -> CheckResult:
    chapters = structure.chapters
    if len(chapters) <= 1:
        return CheckResult()

    mean = sum(c.word_count for c in chapters) / len(chapters)
    if mean == 0:
        return CheckResult()

    low = mean * thresholds.chapter_length_low_multiplier
    high = mean * thresholds.chapter_length_high_multiplier
    outliers = [c for c in chapters if c.word_count < low or c.word_count > high]
    if not outliers:
        return CheckResult()

    return CheckResult(
        warnings=[
            warning(
                ValidationCode.INCONSISTENT_CHAPTER_LENGTHS,
                f"{len(outliers)} chapter(s) differ strongly from the average "
                f"length of {mean:.0f} words",
                Severity.LOW,
                suggestion="Split long chapters or merge short ones",
            )
        ]
    )


def check_sentences(
    structure: DocumentStructure, thresholds: ValidationThresholds
) -> CheckResult:
    warnings = []
    for chapter_index, chapter in enumerate(structure.chapters):
        for paragraph in chapter.paragraphs:
            if paragraph.content_type not in _PROSE_TYPES:
                continue
            for sentence in paragraph.sentences:
                location = IssueLocation(
                    chapter=chapter_index,
                    paragraph=paragraph.position,
                    sentence=sentence.position,
                )
                if sentence.word_count < thresholds.min_sentence_words:
                    warnings.append(
                        warning(
                            ValidationCode.VERY_SHORT_SENTENCE,
                            f"Sentence has only {sentence.word_count} word(s): "
                            f"{sentence.text!r}",
                            Severity.LOW,
                            location=location,
                        )
                    )
                elif sentence.word_count > thresholds.max_sentence_words:
                    warnings.append(
                        warning(
                            ValidationCode.VERY_LONG_SENTENCE,
                            f"Sentence has {sentence.word_count} words",
                            Severity.LOW,
                            location=location,
                            suggestion="Check for a missing sentence break",
                        )
                    )
    return CheckResult(warnings=warnings)


def check_confidence(
    structure: DocumentStructure, thresholds: ValidationThresholds
) -> CheckResult:
    confidence = structure.confidence
    if confidence < thresholds.low_confidence_threshold:
        return CheckResult(
            errors=[
                error(
                    ValidationCode.LOW_OVERALL_CONFIDENCE,
                    f"Overall confidence {confidence:.2f} is below "
                    f"{thresholds.low_confidence_threshold:.2f}",
                    suggestion="Review the document manually before synthesis",
                )
            ]
        )
    if confidence < thresholds.medium_confidence_threshold:
        return CheckResult(
            warnings=[
                warning(
                    ValidationCode.MEDIUM_OVERALL_CONFIDENCE,
                    f"Overall confidence {confidence:.2f} is below "
                    f"{thresholds.medium_confidence_threshold:.2f}",
                )
            ]
        )
    return CheckResult()


DEFAULT_CHECKS: list[Check] = [
    check_basic_structure,
    check_chapters,
    check_chapter_lengths,
    check_sentences,
    check_confidence,
]
