# parsers/markdown_parser.py

import dataclasses
import logging
from time import monotonic, time

from docstruct.observability import names
from docstruct.observability.base import MetricsHook, NoOpMetricsHook
from docstruct.scoring.confidence import calculate_confidence
from docstruct.scoring.config import ScoringWeights

from .base import DocumentParser
from .builder import StructureBuilder
from .config import ParserConfig
from .errors import ParseError, ParseErrorCode, ParseResult
from .metadata import extract_front_matter
from .models import DocumentStructure, ProcessingMetrics
from .strategies import StrategyRegistry, default_registry
from .tokenizer import TokenizerMode, tokenize

logger = logging.getLogger(__name__)

MIN_INPUT_LENGTH = 2


class MarkdownParser(DocumentParser):
    """
    Markdown-flavoured text to DocumentStructure.

    - Validates size and content before tokenizing
    - Tokenizes in strict or recover mode per config
    - Builds and scores the tree, then applies the confidence threshold
    """

    def __init__(
        self,
        config: ParserConfig | None = None,
        *,
        weights: ScoringWeights | None = None,
        strategies: StrategyRegistry | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.config = config or ParserConfig()
        self.weights = weights or ScoringWeights()
        self.strategies = strategies or default_registry()
        self.metrics_hook = metrics_hook
        self._builder = StructureBuilder(
            self.config, self.strategies.get(self.config.chapter_strategy)
        )

    def parse(self, source: str | bytes) -> ParseResult:
        started_at = time()
        start = monotonic()
        logger.info(
            "Parsing document: %d %s, strategy=%s",
            len(source),
            "bytes" if isinstance(source, bytes) else "chars",
            self.config.error_handling_strategy,
        )
        self.metrics_hook.increment(names.PARSES_TOTAL)

        try:
            text = self._decode(source)
            self._check_input(text)
            structure = self._parse_text(text, started_at, start)
        except ParseError as exc:
            logger.error("Parse failed: %s", exc)
            self.metrics_hook.increment(
                names.PARSE_ERRORS_TOTAL, labels={"code": exc.code.value}
            )
            return ParseResult.failure(exc)

        self.metrics_hook.record_latency(
            names.PARSE_DURATION, 1000 * (monotonic() - start)
        )
        self.metrics_hook.record_gauge(names.DOCUMENT_CONFIDENCE, structure.confidence)
        self.metrics_hook.record_gauge(names.DOCUMENT_CHAPTERS, structure.total_chapters)
        logger.info(
            "Parsed %r: chapters=%d, sentences=%d, confidence=%.3f",
            structure.metadata.title,
            structure.total_chapters,
            structure.total_sentences,
            structure.confidence,
        )
        return ParseResult.success(structure)

    def _decode(self, source: str | bytes) -> str:
        if isinstance(source, str):
            return source
        self._check_size(len(source))
        try:
            # utf-8-sig drops a leading byte order mark
            return source.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError(
                ParseErrorCode.ENCODING_ERROR,
                "Input is not valid UTF-8",
                offset=exc.start,
                cause=exc,
            )

    def _check_size(self, size_bytes: int) -> None:
        limit = self.config.max_file_size_bytes
        if size_bytes > limit:
            raise ParseError(
                ParseErrorCode.FILE_TOO_LARGE,
                f"Input is {size_bytes} bytes, limit is {limit} bytes",
            )

    def _check_input(self, text: str) -> None:
        try:
            encoded = text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ParseError(
                ParseErrorCode.ENCODING_ERROR,
                "Input contains characters that cannot be encoded as UTF-8",
                offset=exc.start,
                cause=exc,
            )
        self._check_size(len(encoded))
        if len(text.strip()) < MIN_INPUT_LENGTH:
            raise ParseError(
                ParseErrorCode.INVALID_INPUT,
                f"Input must contain at least {MIN_INPUT_LENGTH} non-whitespace "
                "characters",
            )

    def _parse_text(
        self, text: str, started_at: float, start: float
    ) -> DocumentStructure:
        mode = TokenizerMode.STRICT if self.config.strict else TokenizerMode.RECOVER
        front_matter = extract_front_matter(text, strict=self.config.strict)
        tokenization = tokenize(
            text,
            mode=mode,
            start_offset=front_matter.end if front_matter else 0,
            metrics_hook=self.metrics_hook,
        )

        processing_errors = [str(issue) for issue in tokenization.issues]
        if front_matter is not None and front_matter.error is not None:
            code = ParseErrorCode.INVALID_SYNTAX.value
            processing_errors.insert(0, f"{code}: {front_matter.error}")
        if processing_errors:
            self.metrics_hook.increment(
                names.PARSE_RECOVERED_ISSUES_TOTAL, len(processing_errors)
            )

        structure = self._builder.build(
            text, tokenization.tokens, front_matter=front_matter
        )
        confidence = calculate_confidence(structure, self.weights).overall

        if confidence < self.config.confidence_threshold:
            raise ParseError(
                ParseErrorCode.LOW_CONFIDENCE,
                f"Document confidence {confidence:.3f} is below the threshold "
                f"{self.config.confidence_threshold:.3f}",
            )

        metrics = ProcessingMetrics(
            parse_start_time=started_at,
            parse_end_time=time(),
            parse_duration_ms=1000 * (monotonic() - start),
            source_length=len(text),
            processing_errors=processing_errors,
        )
        return dataclasses.replace(
            structure, confidence=confidence, processing_metrics=metrics
        )
