import logging
from functools import reduce
from operator import add
from time import monotonic

from docstruct.observability import names
from docstruct.observability.base import MetricsHook, NoOpMetricsHook
from docstruct.parsers.models import DocumentStructure

from .config import ValidationThresholds
from .models import CheckResult, ValidationReport
from .rules import DEFAULT_CHECKS, Check

logger = logging.getLogger(__name__)

# Recommendations fire this many warnings before the manual review limit
_REVIEW_WARNING_MARGIN = 5


class StructureValidator:
    def __init__(
        self,
        thresholds: ValidationThresholds | None = None,
        *,
        checks: list[Check] | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.thresholds = thresholds or ValidationThresholds()
        self.checks = list(checks) if checks is not None else list(DEFAULT_CHECKS)
        self.metrics_hook = metrics_hook

    def validate(self, structure: DocumentStructure) -> ValidationReport:
        """Run every check and summarize the findings.

        The score starts at 1.0 and loses ``error_weight`` per error and
        ``warning_weight`` per warning, clamped to ``[min_score, 1.0]``.
        """
        start = monotonic()
        t = self.thresholds
        result = reduce(
            add, (check(structure, t) for check in self.checks), CheckResult()
        )

        penalty = (
            len(result.errors) * t.error_weight
            + len(result.warnings) * t.warning_weight
        )
        score = max(t.min_score, min(1.0, 1.0 - penalty))
        report = ValidationReport(
            is_valid=not result.errors,
            errors=result.errors,
            warnings=result.warnings,
            score=score,
            recommendations=self._recommendations(structure, result),
            needs_manual_review=(
                score < t.manual_review_below or len(result.warnings) > t.max_warnings
            ),
        )

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.VALIDATION_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.VALIDATIONS_TOTAL)
        self.metrics_hook.increment(names.VALIDATION_ERRORS_TOTAL, len(report.errors))
        self.metrics_hook.increment(names.VALIDATION_WARNINGS_TOTAL, len(report.warnings))
        self.metrics_hook.record_gauge(names.VALIDATION_SCORE, report.score)

        logger.info(
            "Validated %r: valid=%s, errors=%d, warnings=%d, score=%.2f",
            structure.metadata.title,
            report.is_valid,
            len(report.errors),
            len(report.warnings),
            report.score,
        )
        return report

    def _recommendations(
        self, structure: DocumentStructure, result: CheckResult
    ) -> list[str]:
        recommendations = []
        if result.errors:
            recommendations.append("Fix structural errors before processing")
        if len(result.warnings) > self.thresholds.max_warnings - _REVIEW_WARNING_MARGIN:
            recommendations.append("Consider reviewing chapter structure and content")
        limit = self.thresholds.single_chapter_word_threshold
        if len(structure.chapters) == 1 and structure.total_word_count > limit:
            recommendations.append(
                "Consider splitting large document into multiple chapters"
            )
        return recommendations
