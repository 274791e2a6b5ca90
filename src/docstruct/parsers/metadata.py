# parsers/metadata.py

import logging
import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from .errors import ParseError, ParseErrorCode
from .models import UNTITLED_DOCUMENT, DocumentMetadata
from .segmenter import count_words
from .tokenizer import Token, TokenKind

logger = logging.getLogger(__name__)

_FRONT_MATTER_OPEN = "---"
_FRONT_MATTER_CLOSE = ("---", "...")
_KEY_LINE_RE = re.compile(r"^[A-Za-z_][\w-]*[ \t]*:(?:[ \t]|$)")
_HEADER_LINE_RE = re.compile(r"^([A-Za-z][A-Za-z _-]{0,30}):[ \t]+(\S.*?)\s*$")
HEADER_KEYS = frozenset(
    {
        "author",
        "authors",
        "date",
        "description",
        "isbn",
        "keywords",
        "lang",
        "language",
        "publisher",
        "source",
        "subject",
        "subtitle",
        "tags",
        "title",
        "version",
    }
)


@dataclass(frozen=True)
class FrontMatter:
    data: dict[str, Any]
    end: int
    error: str | None = None


@dataclass(frozen=True)
class _Fields:
    title: str | None = None
    author: str | None = None
    language: str | None = None
    custom: dict[str, Any] = field(default_factory=dict)


def extract_front_matter(text: str, *, strict: bool = False) -> FrontMatter | None:
    """Read a YAML front matter block fenced by ``---`` at the top of text.

    Returns None when the text has no front matter. A fenced block whose
    YAML loads to something other than a mapping, or that fails to load and
    does not open with a ``key:`` line, is a thematic break followed by
    prose and is left to the tokenizer. ``end`` is the offset just past the
    closing fence line's content.

    Raises:
        ParseError: In strict mode, when a ``key:`` block is not valid YAML.
    """
    first_newline = text.find("\n")
    if first_newline == -1 or text[:first_newline].rstrip() != _FRONT_MATTER_OPEN:
        return None

    pos = first_newline + 1
    while pos <= len(text):
        newline = text.find("\n", pos)
        line_end = len(text) if newline == -1 else newline
        line = text[pos:line_end].rstrip()
        if line in _FRONT_MATTER_CLOSE:
            block = text[first_newline + 1 : pos]
            return _load_front_matter(block, pos + len(line), strict)
        if newline == -1:
            break
        pos = newline + 1

    return None


def _load_front_matter(block: str, end: int, strict: bool) -> FrontMatter | None:
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        if not _KEY_LINE_RE.match(block.lstrip()):
            logger.debug("Fenced block is not YAML, treating it as content")
            return None
        message = f"Front matter is not valid YAML: {exc}"
        return _invalid_front_matter(message, end, strict, exc)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        logger.debug(
            "Fenced block loads to %s, treating it as content", type(data).__name__
        )
        return None

    logger.debug("Loaded front matter keys: %s", sorted(str(k) for k in data))
    return FrontMatter(data={str(k): v for k, v in data.items()}, end=end)


def _invalid_front_matter(
    message: str, end: int, strict: bool, cause: BaseException | None
) -> FrontMatter:
    if strict:
        raise ParseError(ParseErrorCode.INVALID_SYNTAX, message, offset=0, cause=cause)
    logger.warning("Ignoring front matter: %s", message)
    return FrontMatter(data={}, end=end, error=message)


def parse_header_lines(text: str) -> dict[str, str] | None:
    """Parse a block made only of known ``Key: Value`` lines.

    Returns None as soon as one line is not such a header, so ordinary
    prose is never mistaken for metadata.

    Example:
        >>> parse_header_lines("Author: Jane Doe\\nDate: 2024-01-01")
        {'author': 'Jane Doe', 'date': '2024-01-01'}
    """
    headers: dict[str, str] = {}
    for line in text.splitlines():
        match = _HEADER_LINE_RE.match(line.strip())
        if match is None:
            return None
        key = _normalize_key(match.group(1))
        if key not in HEADER_KEYS:
            return None
        headers[key] = match.group(2)
    return headers or None


def _normalize_key(key: str) -> str:
    return re.sub(r"[ \t-]+", "_", key.strip().lower())


def build_metadata(
    source: str,
    tokens: list[Token],
    *,
    preamble_end: int,
    front_matter: FrontMatter | None = None,
) -> DocumentMetadata:
    """Assemble document metadata.

    Args:
        source: Full source text.
        tokens: All tokens of the source.
        preamble_end: Index of the first chapter-opening token; paragraphs
            before it are scanned for ``Key: Value`` header lines.
        front_matter: Parsed front matter, if any. Its values win over
            header lines.
    """
    values: dict[str, Any] = {}
    for token in tokens[:preamble_end]:
        if token.kind is TokenKind.PARAGRAPH:
            headers = parse_header_lines(token.text)
            if headers:
                values.update(headers)
    if front_matter is not None:
        values.update({_normalize_key(k): v for k, v in front_matter.data.items()})

    fields = _split_fields(values)
    title = _first_level_one_heading(tokens) or fields.title or UNTITLED_DOCUMENT

    word_count = sum(
        count_words(t.text)
        for t in tokens
        if t.kind not in (TokenKind.BLANK, TokenKind.CODE, TokenKind.TABLE)
    )

    return DocumentMetadata(
        title=title,
        word_count=word_count,
        character_count=len(source),
        author=fields.author,
        language=fields.language,
        custom_metadata=fields.custom,
    )


def _split_fields(values: dict[str, Any]) -> _Fields:
    custom = dict(values)
    title = custom.pop("title", None)
    author = custom.pop("author", None) or custom.pop("authors", None)
    language = custom.pop("language", None) or custom.pop("lang", None)

    if isinstance(author, list):
        author = ", ".join(str(a) for a in author)

    return _Fields(
        title=str(title).strip() if title else None,
        author=str(author) if author else None,
        language=str(language) if language else None,
        custom=custom,
    )


def _first_level_one_heading(tokens: list[Token]) -> str | None:
    for token in tokens:
        if token.kind is TokenKind.HEADING and token.depth == 1 and token.text:
            return token.text
    return None
