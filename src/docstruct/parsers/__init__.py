# MarkdownParser and PdfParser depend on docstruct.scoring; import them from docstruct.
from .builder import StructureBuilder, paragraph_confidence
from .config import PRESETS, ParserConfig, get_preset, load_config
from .errors import ParseError, ParseErrorCode, ParseErrorKind, ParseResult
from .models import (
    UNTITLED_DOCUMENT,
    Chapter,
    CharRange,
    ContentType,
    DocumentMetadata,
    DocumentPosition,
    DocumentStructure,
    Paragraph,
    ProcessingMetrics,
    Sentence,
)
from .segmenter import count_words, estimate_duration, has_formatting, split_sentences
from .strategies import StrategyRegistry, default_registry
from .tokenizer import Token, TokenKind, TokenizerMode, tokenize

__all__ = [
    "PRESETS",
    "UNTITLED_DOCUMENT",
    "Chapter",
    "CharRange",
    "ContentType",
    "DocumentMetadata",
    "DocumentPosition",
    "DocumentStructure",
    "Paragraph",
    "ParseError",
    "ParseErrorCode",
    "ParseErrorKind",
    "ParseResult",
    "ParserConfig",
    "ProcessingMetrics",
    "Sentence",
    "StrategyRegistry",
    "StructureBuilder",
    "Token",
    "TokenKind",
    "TokenizerMode",
    "count_words",
    "default_registry",
    "estimate_duration",
    "get_preset",
    "has_formatting",
    "load_config",
    "paragraph_confidence",
    "split_sentences",
    "tokenize",
]
