# Observability
from .observability import LoggingMetricsHook, MetricsHook, NoOpMetricsHook

# Parsers
from .parsers import (
    Chapter,
    CharRange,
    ContentType,
    DocumentMetadata,
    DocumentStructure,
    Paragraph,
    ParseError,
    ParseErrorCode,
    ParseResult,
    ParserConfig,
    Sentence,
    get_preset,
    load_config,
    tokenize,
)

# Scoring
from .scoring import (
    ConfidenceReport,
    ScoringWeights,
    calculate_confidence,
    generate_confidence_report,
)

# Validation
from .validation import StructureValidator, ValidationReport, ValidationThresholds

# Entry points
from .analysis import StructureAnalyzer, generate_tree
from .parsers.markdown_parser import MarkdownParser
from .parsers.pdf_parser import PdfParser

__all__ = [
    # Observability
    "LoggingMetricsHook",
    "MetricsHook",
    "NoOpMetricsHook",
    # Parsers
    "Chapter",
    "CharRange",
    "ContentType",
    "DocumentMetadata",
    "DocumentStructure",
    "Paragraph",
    "ParseError",
    "ParseErrorCode",
    "ParseResult",
    "ParserConfig",
    "Sentence",
    "get_preset",
    "load_config",
    "tokenize",
    # Scoring
    "ConfidenceReport",
    "ScoringWeights",
    "calculate_confidence",
    "generate_confidence_report",
    # Validation
    "StructureValidator",
    "ValidationReport",
    "ValidationThresholds",
    # Entry points
    "MarkdownParser",
    "PdfParser",
    "StructureAnalyzer",
    "generate_tree",
]
