from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IssueKind(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class ValidationCode(str, Enum):
    MISSING_TITLE = "MISSING_TITLE"
    NO_CHAPTERS = "NO_CHAPTERS"
    EMPTY_CHAPTER = "EMPTY_CHAPTER"
    SHORT_CHAPTER = "SHORT_CHAPTER"
    LOW_CHAPTER_CONFIDENCE = "LOW_CHAPTER_CONFIDENCE"
    EMPTY_CHAPTER_TITLE = "EMPTY_CHAPTER_TITLE"
    INCONSISTENT_CHAPTER_LENGTHS = "INCONSISTENT_CHAPTER_LENGTHS"
    VERY_SHORT_SENTENCE = "VERY_SHORT_SENTENCE"
    VERY_LONG_SENTENCE = "VERY_LONG_SENTENCE"
    LOW_OVERALL_CONFIDENCE = "LOW_OVERALL_CONFIDENCE"
    MEDIUM_OVERALL_CONFIDENCE = "MEDIUM_OVERALL_CONFIDENCE"


@dataclass(frozen=True)
class IssueLocation:
    chapter: int | None = None
    paragraph: int | None = None
    sentence: int | None = None


@dataclass(frozen=True)
class ValidationIssue:
    code: ValidationCode
    kind: IssueKind
    message: str
    severity: Severity
    location: IssueLocation | None = None
    suggestion: str | None = None


def error(
    code: ValidationCode,
    message: str,
    severity: Severity = Severity.CRITICAL,
    *,
    location: IssueLocation | None = None,
    suggestion: str | None = None,
) -> ValidationIssue:
    return ValidationIssue(
        code=code,
        kind=IssueKind.ERROR,
        message=message,
        severity=severity,
        location=location,
        suggestion=suggestion,
    )


def warning(
    code: ValidationCode,
    message: str,
    severity: Severity = Severity.MEDIUM,
    *,
    location: IssueLocation | None = None,
    suggestion: str | None = None,
) -> ValidationIssue:
    return ValidationIssue(
        code=code,
        kind=IssueKind.WARNING,
        message=message,
        severity=severity,
        location=location,
        suggestion=suggestion,
    )


@dataclass(frozen=True)
class CheckResult:
    """Issues found by one check. Combined with ``+``, never mutated."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def __add__(self, other: "CheckResult") -> "CheckResult":
        return CheckResult(
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
        )


@dataclass(frozen=True)
class ValidationReport:
    is_valid: bool
    errors: list[ValidationIssue]
    warnings: list[ValidationIssue]
    score: float
    recommendations: list[str]
    needs_manual_review: bool

    def codes(self) -> set[ValidationCode]:
        return {issue.code for issue in self.errors + self.warnings}
