# parsers/models.py

from dataclasses import dataclass, field
from enum import Enum

UNTITLED_DOCUMENT = "Untitled Document"


class ContentType(str, Enum):
    TEXT = "text"
    HEADING = "heading"
    CODE = "code"
    BLOCKQUOTE = "blockquote"
    LIST = "list"
    TABLE = "table"


@dataclass(frozen=True)
class CharRange:
    """Half-open ``[start, end)`` offsets into the source text."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("start must be >= 0")
        if self.end < self.start:
            raise ValueError("end must be >= start")

    @property
    def length(self) -> int:
        return self.end - self.start

    def contains(self, other: "CharRange") -> bool:
        return self.start <= other.start and other.end <= self.end


@dataclass(frozen=True)
class DocumentPosition:
    chapter_index: int
    paragraph_index: int
    start: int
    end: int
    sentence_index: int | None = None


@dataclass(frozen=True)
class Sentence:
    id: str
    text: str
    word_count: int
    estimated_duration: float
    has_formatting: bool
    char_range: CharRange
    position: int
    document_position: DocumentPosition


@dataclass(frozen=True)
class Paragraph:
    id: str
    content_type: ContentType
    text: str
    char_range: CharRange
    confidence: float
    include_in_audio: bool
    sentences: list[Sentence]
    word_count: int
    position: int
    document_position: DocumentPosition


@dataclass(frozen=True)
class Chapter:
    id: str
    title: str
    level: int
    position: int
    depth: int
    char_range: CharRange
    paragraphs: list[Paragraph]
    word_count: int
    estimated_duration: float
    confidence: float
    code_block_count: int = 0
    list_count: int = 0
    table_count: int = 0

    @property
    def sentence_count(self) -> int:
        return sum(len(p.sentences) for p in self.paragraphs)


@dataclass(frozen=True)
class DocumentMetadata:
    title: str
    word_count: int
    character_count: int
    author: str | None = None
    language: str | None = None
    custom_metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ProcessingMetrics:
    parse_start_time: float
    parse_end_time: float
    parse_duration_ms: float
    source_length: int
    processing_errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentStructure:
    metadata: DocumentMetadata
    chapters: list[Chapter]
    total_word_count: int
    total_chapters: int
    total_paragraphs: int
    total_sentences: int
    estimated_total_duration: float
    confidence: float = 0.0
    processing_metrics: ProcessingMetrics | None = None

    def all_paragraphs(self) -> list[Paragraph]:
        return [p for c in self.chapters for p in c.paragraphs]

    def all_sentences(self) -> list[Sentence]:
        return [s for c in self.chapters for p in c.paragraphs for s in p.sentences]
