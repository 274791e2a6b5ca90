# parsers/builder.py

import logging

from .config import ParserConfig
from .errors import ParseError, ParseErrorCode
from .metadata import FrontMatter, build_metadata
from .models import (
    Chapter,
    CharRange,
    ContentType,
    DocumentPosition,
    DocumentStructure,
    Paragraph,
    Sentence,
)
from .segmenter import SentenceSpan, estimate_duration, has_formatting, split_sentences
from .strategies import ChapterStrategy, heading_level_strategy
from .tokenizer import Token, TokenKind

logger = logging.getLogger(__name__)

_CONTENT_TYPES = {
    TokenKind.PARAGRAPH: ContentType.TEXT,
    TokenKind.HEADING: ContentType.HEADING,
    TokenKind.CODE: ContentType.CODE,
    TokenKind.BLOCKQUOTE: ContentType.BLOCKQUOTE,
    TokenKind.LIST: ContentType.LIST,
    TokenKind.TABLE: ContentType.TABLE,
}

PARAGRAPH_BASE_CONFIDENCE = 0.5
_TERMINAL_PUNCTUATION = (".", "!", "?", '."', '!"', '?"', ".'", "!'", "?'")


def paragraph_confidence(sentences: list[SentenceSpan]) -> float:
    """Heuristic confidence that a text block was segmented correctly.

    Starts at 0.5; +0.2 when the average sentence length is between 10 and
    200 characters, +0.2 when any sentence ends in terminal punctuation,
    +0.1 for more than one sentence. Capped at 1.0.
    """
    confidence = PARAGRAPH_BASE_CONFIDENCE
    if not sentences:
        return confidence

    average_length = sum(len(s.text) for s in sentences) / len(sentences)
    if 10 <= average_length <= 200:
        confidence += 0.2
    if any(s.text.endswith(_TERMINAL_PUNCTUATION) for s in sentences):
        confidence += 0.2
    if len(sentences) > 1:
        confidence += 0.1
    return min(1.0, round(confidence, 6))


class StructureBuilder:
    """Assembles the chapter/paragraph/sentence tree from block tokens.

    The builder does not score the document as a whole: the returned
    structure has ``confidence`` 0.0 and no processing metrics, both are
    filled in by the caller once scoring has run.
    """

    def __init__(
        self,
        config: ParserConfig | None = None,
        strategy: ChapterStrategy = heading_level_strategy,
    ) -> None:
        self.config = config or ParserConfig()
        self.strategy = strategy

    def build(
        self,
        source: str,
        tokens: list[Token],
        *,
        front_matter: FrontMatter | None = None,
    ) -> DocumentStructure:
        chapter_starts = self.strategy(tokens, self.config)
        self._check_chapter_starts(tokens, chapter_starts)

        preamble_end = chapter_starts[0] if chapter_starts else len(tokens)
        metadata = build_metadata(
            source, tokens, preamble_end=preamble_end, front_matter=front_matter
        )

        chapters: list[Chapter] = []
        if chapter_starts:
            min_level = min(tokens[i].depth for i in chapter_starts)
            bounds = chapter_starts + [len(tokens)]
            for position, (first, stop) in enumerate(zip(bounds, bounds[1:])):
                chapters.append(
                    self._build_chapter(source, tokens[first:stop], position, min_level)
                )

        structure = DocumentStructure(
            metadata=metadata,
            chapters=chapters,
            total_word_count=sum(c.word_count for c in chapters),
            total_chapters=len(chapters),
            total_paragraphs=sum(len(c.paragraphs) for c in chapters),
            total_sentences=sum(c.sentence_count for c in chapters),
            estimated_total_duration=sum(c.estimated_duration for c in chapters),
        )
        logger.debug(
            "Built structure: title=%r, chapters=%d, paragraphs=%d, sentences=%d",
            metadata.title,
            structure.total_chapters,
            structure.total_paragraphs,
            structure.total_sentences,
        )
        return structure

    def _check_chapter_starts(self, tokens: list[Token], starts: list[int]) -> None:
        if starts != sorted(set(starts)):
            raise ParseError(
                ParseErrorCode.PARSE_FAILED,
                "Chapter strategy must return unique, ascending token indices",
            )
        for index in starts:
            in_range = 0 <= index < len(tokens)
            if not in_range or tokens[index].kind is not TokenKind.HEADING:
                raise ParseError(
                    ParseErrorCode.PARSE_FAILED,
                    f"Chapter strategy selected token {index}, which is not a heading",
                )

    def _build_chapter(
        self, source: str, tokens: list[Token], position: int, min_level: int
    ) -> Chapter:
        heading = tokens[0]
        body = [t for t in tokens[1:] if t.kind is not TokenKind.BLANK]
        paragraphs = [
            self._build_paragraph(source, token, position, index)
            for index, token in enumerate(body)
        ]

        end = body[-1].end if body else heading.end
        confidence = 0.0
        if paragraphs:
            confidence = sum(p.confidence for p in paragraphs) / len(paragraphs)
        duration = sum(
            s.estimated_duration
            for p in paragraphs
            if p.include_in_audio
            for s in p.sentences
        )

        return Chapter(
            id=f"chapter-{position}",
            title=heading.text,
            level=heading.depth,
            position=position,
            depth=heading.depth - min_level,
            char_range=CharRange(heading.start, end),
            paragraphs=paragraphs,
            word_count=sum(p.word_count for p in paragraphs),
            estimated_duration=duration,
            confidence=confidence,
            code_block_count=_count(paragraphs, ContentType.CODE),
            list_count=_count(paragraphs, ContentType.LIST),
            table_count=_count(paragraphs, ContentType.TABLE),
        )

    def _build_paragraph(
        self, source: str, token: Token, chapter_index: int, position: int
    ) -> Paragraph:
        content_type = _CONTENT_TYPES[token.kind]
        paragraph_id = f"chapter-{chapter_index}-p{position}"
        document_position = DocumentPosition(
            chapter_index=chapter_index,
            paragraph_index=position,
            start=token.start,
            end=token.end,
        )

        if content_type in (ContentType.CODE, ContentType.TABLE):
            spans: list[SentenceSpan] = []
            confidence = 1.0
        else:
            spans = [
                span
                for start, end in token.segments
                for span in split_sentences(source[start:end], start, self.config)
            ]
            confidence = paragraph_confidence(spans)

        sentences = [
            Sentence(
                id=f"{paragraph_id}-s{index}",
                text=span.text,
                word_count=span.word_count,
                estimated_duration=estimate_duration(span.word_count),
                has_formatting=has_formatting(span.text),
                char_range=CharRange(span.start, span.end),
                position=index,
                document_position=DocumentPosition(
                    chapter_index=chapter_index,
                    paragraph_index=position,
                    sentence_index=index,
                    start=span.start,
                    end=span.end,
                ),
            )
            for index, span in enumerate(spans)
        ]

        return Paragraph(
            id=paragraph_id,
            content_type=content_type,
            text=token.text,
            char_range=CharRange(token.start, token.end),
            confidence=confidence,
            include_in_audio=self._include_in_audio(content_type),
            sentences=sentences,
            word_count=sum(s.word_count for s in sentences),
            position=position,
            document_position=document_position,
        )

    def _include_in_audio(self, content_type: ContentType) -> bool:
        if content_type is ContentType.CODE:
            return self.config.include_code_blocks
        if content_type is ContentType.TABLE:
            return self.config.include_tables
        if content_type is ContentType.BLOCKQUOTE:
            return self.config.include_blockquotes
        if content_type is ContentType.LIST:
            return self.config.include_lists
        return True


def _count(paragraphs: list[Paragraph], content_type: ContentType) -> int:
    return sum(1 for p in paragraphs if p.content_type is content_type)
