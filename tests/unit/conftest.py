from collections.abc import Callable

import pytest

from docstruct.parsers.models import (
    Chapter,
    CharRange,
    ContentType,
    DocumentMetadata,
    DocumentPosition,
    DocumentStructure,
    Paragraph,
    Sentence,
)
from docstruct.parsers.segmenter import estimate_duration


def _sentence(words: int, start: int, ci: int, pi: int, si: int) -> Sentence:
    text = " ".join(["word"] * words) + "."
    end = start + len(text)
    return Sentence(
        id=f"chapter-{ci}-p{pi}-s{si}",
        text=text,
        word_count=words,
        estimated_duration=estimate_duration(words),
        has_formatting=False,
        char_range=CharRange(start, end),
        position=si,
        document_position=DocumentPosition(ci, pi, start, end, sentence_index=si),
    )


def _chapter(
    position: int,
    paragraphs: list[list[int]],
    *,
    title: str | None = None,
    start: int = 0,
    confidence: float = 0.9,
    content_types: list[ContentType] | None = None,
) -> Chapter:
    """Chapter whose paragraphs hold sentences with the given word counts."""
    title = f"Chapter {position + 1}" if title is None else title
    cursor = start + len(title) + 5
    built = []
    for pi, sentence_words in enumerate(paragraphs):
        content_type = content_types[pi] if content_types else ContentType.TEXT
        p_start = cursor
        sentences = []
        for si, words in enumerate(sentence_words):
            sentence = _sentence(words, cursor, position, pi, si)
            sentences.append(sentence)
            cursor = sentence.char_range.end + 1
        p_end = max(cursor - 1, p_start + 1)
        built.append(
            Paragraph(
                id=f"chapter-{position}-p{pi}",
                content_type=content_type,
                text=" ".join(s.text for s in sentences),
                char_range=CharRange(p_start, p_end),
                confidence=confidence,
                include_in_audio=True,
                sentences=sentences,
                word_count=sum(s.word_count for s in sentences),
                position=pi,
                document_position=DocumentPosition(position, pi, p_start, p_end),
            )
        )
        cursor = p_end + 2

    end = built[-1].char_range.end if built else start + len(title) + 3
    return Chapter(
        id=f"chapter-{position}",
        title=title,
        level=2,
        position=position,
        depth=0,
        char_range=CharRange(start, end),
        paragraphs=built,
        word_count=sum(p.word_count for p in built),
        estimated_duration=sum(s.estimated_duration for p in built for s in p.sentences),
        confidence=confidence if built else 0.0,
        code_block_count=sum(1 for p in built if p.content_type is ContentType.CODE),
        list_count=sum(1 for p in built if p.content_type is ContentType.LIST),
        table_count=sum(1 for p in built if p.content_type is ContentType.TABLE),
    )


def _structure(
    chapters: list[Chapter],
    *,
    title: str = "Test Document",
    confidence: float = 0.9,
    custom_metadata: dict | None = None,
) -> DocumentStructure:
    words = sum(c.word_count for c in chapters)
    return DocumentStructure(
        metadata=DocumentMetadata(
            title=title,
            word_count=words,
            character_count=chapters[-1].char_range.end if chapters else 0,
            custom_metadata=custom_metadata or {},
        ),
        chapters=chapters,
        total_word_count=words,
        total_chapters=len(chapters),
        total_paragraphs=sum(len(c.paragraphs) for c in chapters),
        total_sentences=sum(c.sentence_count for c in chapters),
        estimated_total_duration=sum(c.estimated_duration for c in chapters),
        confidence=confidence,
    )


@pytest.fixture
def make_chapter() -> Callable[..., Chapter]:
    """Factory for chapters, placed one after another by ``start``."""
    return _chapter


@pytest.fixture
def make_structure() -> Callable[..., DocumentStructure]:
    """Factory for document structures from prebuilt chapters."""
    return _structure


@pytest.fixture
def make_chapters() -> Callable[..., list[Chapter]]:
    """Factory for consecutive chapters, one paragraph layout per chapter."""

    def build(layouts: list[list[list[int]]], **kwargs: object) -> list[Chapter]:
        chapters: list[Chapter] = []
        start = 0
        for position, paragraphs in enumerate(layouts):
            chapter = _chapter(position, paragraphs, start=start, **kwargs)  # type: ignore[arg-type]
            chapters.append(chapter)
            start = chapter.char_range.end + 2
        return chapters

    return build
