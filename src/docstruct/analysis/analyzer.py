import logging
from dataclasses import dataclass, field

from docstruct.observability.base import MetricsHook, NoOpMetricsHook
from docstruct.parsers.config import ParserConfig
from docstruct.parsers.errors import ParseError, ParseErrorCode, ParseResult
from docstruct.parsers.markdown_parser import MarkdownParser
from docstruct.parsers.models import DocumentStructure
from docstruct.scoring.config import ScoringWeights
from docstruct.scoring.report import ConfidenceReport, generate_confidence_report
from docstruct.validation.config import ValidationThresholds
from docstruct.validation.models import ValidationReport
from docstruct.validation.validator import StructureValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeNode:
    kind: str
    label: str
    confidence: float | None = None
    children: list["TreeNode"] = field(default_factory=list)


@dataclass(frozen=True)
class AnalysisResult:
    parse_result: ParseResult
    report: ValidationReport | None = None
    confidence_report: ConfidenceReport | None = None
    # Parse failure, or VALIDATION_FAILED when the report has errors
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def structure(self) -> DocumentStructure | None:
        return self.parse_result.structure


def meets_quality_threshold(structure: DocumentStructure, threshold: float) -> bool:
    if not 0.0 <= threshold <= 1.0:
        raise ValueError("threshold must be within [0, 1]")
    return structure.confidence >= threshold


def generate_tree(structure: DocumentStructure) -> TreeNode:
    """Document -> chapters -> paragraphs -> sentences, for display."""
    return TreeNode(
        kind="document",
        label=structure.metadata.title,
        confidence=structure.confidence,
        children=[
            TreeNode(
                kind="chapter",
                label=chapter.title,
                confidence=chapter.confidence,
                children=[
                    TreeNode(
                        kind=paragraph.content_type.value,
                        label=paragraph.id,
                        confidence=paragraph.confidence,
                        children=[
                            TreeNode(kind="sentence", label=sentence.text)
                            for sentence in paragraph.sentences
                        ],
                    )
                    for paragraph in chapter.paragraphs
                ],
            )
            for chapter in structure.chapters
        ],
    )


class StructureAnalyzer:
    """Parse, score and validate a document in one call."""

    def __init__(
        self,
        config: ParserConfig | None = None,
        thresholds: ValidationThresholds | None = None,
        *,
        weights: ScoringWeights | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.weights = weights or ScoringWeights()
        self.parser = MarkdownParser(
            config, weights=self.weights, metrics_hook=metrics_hook
        )
        self.validator = StructureValidator(thresholds, metrics_hook=metrics_hook)

    def analyze(self, source: str | bytes) -> AnalysisResult:
        parse_result = self.parser.parse(source)
        if parse_result.structure is None:
            logger.info("Skipping validation, parse failed: %s", parse_result.error)
            return AnalysisResult(parse_result=parse_result, error=parse_result.error)

        structure = parse_result.structure
        report = self.validator.validate(structure)
        return AnalysisResult(
            parse_result=parse_result,
            report=report,
            confidence_report=generate_confidence_report(structure, self.weights),
            error=_validation_error(report),
        )


def _validation_error(report: ValidationReport) -> ParseError | None:
    if report.is_valid:
        return None
    codes = ", ".join(issue.code.value for issue in report.errors)
    logger.warning("Structure failed validation: %s", codes)
    return ParseError(
        ParseErrorCode.VALIDATION_FAILED,
        f"Structure failed validation: {codes}",
    )
