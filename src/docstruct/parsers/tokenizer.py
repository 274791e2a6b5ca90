# parsers/tokenizer.py

"""Block-level tokenizer for Markdown-flavoured text.

Tokens are emitted in source order and, together with the ``blank``
tokens that cover blank lines and line breaks, tile the input exactly:
``tokens[0].start == 0``, ``tokens[i].end == tokens[i + 1].start`` and
``tokens[-1].end == len(text)``.

Content tokens never include a trailing line break or trailing
whitespace, so two content tokens are always separated by at least one
character of ``blank`` token.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from time import monotonic

from docstruct.observability import names
from docstruct.observability.base import MetricsHook, NoOpMetricsHook

from .errors import ParseError, ParseErrorCode

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
_CLOSING_HASHES_RE = re.compile(r"(?:^|[ \t]+)#+$")
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})[ \t]*([^\s`]*)")
_RULE_RE = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
_QUOTE_RE = re.compile(r"^ {0,3}(?:>[ \t]?)+")
_LIST_ITEM_RE = re.compile(r"^([ \t]*)([-*+]|\d{1,9}[.)])(?:[ \t]+(.*))?$")
_TABLE_SEP_RE = re.compile(
    r"^[ \t]*\|?[ \t]*:?-+:?[ \t]*(?:\|[ \t]*:?-+:?[ \t]*)*\|?[ \t]*$"
)
_TABLE_ROW_START_RE = re.compile(r"^[ \t]*\|")
_SETEXT_UNDERLINE_RE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")

# Nested list items may indent at most this much deeper than their predecessor
_MAX_LIST_INDENT_STEP = 4


class TokenKind(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CODE = "code"
    LIST = "list"
    BLOCKQUOTE = "blockquote"
    TABLE = "table"
    BLANK = "blank"


class TokenizerMode(str, Enum):
    STRICT = "strict"
    RECOVER = "recover"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    start: int
    end: int
    text: str
    raw: str
    depth: int = 0
    lang: str | None = None
    # Absolute [start, end) spans of readable content, markup excluded
    segments: list[tuple[int, int]] = field(default_factory=list)


@dataclass(frozen=True)
class TokenizerIssue:
    code: ParseErrorCode
    offset: int
    message: str

    def __str__(self) -> str:
        return f"{self.code.value} at offset {self.offset}: {self.message}"


@dataclass(frozen=True)
class Tokenization:
    tokens: list[Token]
    issues: list[TokenizerIssue]

    @property
    def content_tokens(self) -> list[Token]:
        return [t for t in self.tokens if t.kind is not TokenKind.BLANK]


@dataclass(frozen=True)
class _Line:
    number: int
    start: int
    content: str

    @property
    def is_blank(self) -> bool:
        return not self.content.strip()

    @property
    def indent(self) -> int:
        expanded = self.content.expandtabs(4)
        return len(expanded) - len(expanded.lstrip())

    @property
    def content_start(self) -> int:
        return self.start + len(self.content) - len(self.content.lstrip())

    @property
    def trimmed_end(self) -> int:
        return self.start + len(self.content.rstrip())


def tokenize(
    text: str,
    *,
    mode: TokenizerMode = TokenizerMode.RECOVER,
    start_offset: int = 0,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> Tokenization:
    """Split ``text`` into block tokens.

    Args:
        text: Source text.
        mode: ``STRICT`` raises on the first malformed block, ``RECOVER``
            degrades it and reports a TokenizerIssue instead.
        start_offset: Characters before this offset (e.g. front matter)
            are covered by a single blank token and not tokenized.
        metrics_hook: Optional metrics hook for observability.

    Raises:
        ParseError: In strict mode, on an unclosed code fence, a malformed
            table or inconsistent list indentation.
        ValueError: If start_offset is outside the text.
    """
    started = monotonic()
    if not 0 <= start_offset <= len(text):
        raise ValueError("start_offset must be within text")

    state = _TokenizerState(text, mode, start_offset)
    state.run()
    tokens = _fill_blanks(text, state.tokens)

    elapsed_ms = 1000 * (monotonic() - started)
    metrics_hook.record_latency(names.TOKENIZE_DURATION, elapsed_ms)
    metrics_hook.increment(names.TOKENS_CREATED, len(state.tokens))
    logger.debug(
        "Tokenized %d chars into %d content tokens (%d issues)",
        len(text),
        len(state.tokens),
        len(state.issues),
    )
    return Tokenization(tokens=tokens, issues=state.issues)


def _split_lines(text: str, start_offset: int) -> list[_Line]:
    lines: list[_Line] = []
    pos = start_offset
    while pos < len(text):
        newline = text.find("\n", pos)
        content_end = len(text) if newline == -1 else newline
        next_pos = len(text) if newline == -1 else newline + 1
        if content_end > pos and text[content_end - 1] == "\r":
            content_end -= 1
        lines.append(_Line(number=len(lines), start=pos, content=text[pos:content_end]))
        pos = next_pos
    return lines


def _fill_blanks(text: str, content_tokens: list[Token]) -> list[Token]:
    tokens: list[Token] = []
    cursor = 0
    for token in content_tokens:
        if token.start > cursor:
            tokens.append(_blank(text, cursor, token.start))
        tokens.append(token)
        cursor = token.end
    if cursor < len(text):
        tokens.append(_blank(text, cursor, len(text)))
    return tokens


def _blank(text: str, start: int, end: int) -> Token:
    return Token(
        kind=TokenKind.BLANK, start=start, end=end, text="", raw=text[start:end]
    )


def _table_cells(row: str) -> list[str]:
    stripped = row.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|"):
        stripped = stripped[:-1]
    return [cell.strip() for cell in stripped.split("|")]


class _TokenizerState:
    def __init__(self, text: str, mode: TokenizerMode, start_offset: int) -> None:
        self.text = text
        self.mode = mode
        self.lines = _split_lines(text, start_offset)
        self.tokens: list[Token] = []
        self.issues: list[TokenizerIssue] = []

    def run(self) -> None:
        i = 0
        while i < len(self.lines):
            line = self.lines[i]
            if line.is_blank or _RULE_RE.match(line.content):
                i += 1
            elif _FENCE_RE.match(line.content):
                i = self._read_code(i)
            elif _HEADING_RE.match(line.content):
                i = self._read_heading(i)
            elif self._is_table_start(i):
                i = self._read_table(i)
            elif _QUOTE_RE.match(line.content):
                i = self._read_blockquote(i)
            elif _LIST_ITEM_RE.match(line.content):
                i = self._read_list(i)
            else:
                i = self._read_paragraph(i)

    def _report(self, code: ParseErrorCode, offset: int, message: str) -> None:
        if self.mode is TokenizerMode.STRICT:
            raise ParseError(code, message, offset=offset)
        issue = TokenizerIssue(code=code, offset=offset, message=message)
        logger.warning("Recovered from malformed markdown: %s", issue)
        self.issues.append(issue)

    def _emit(
        self,
        kind: TokenKind,
        first: _Line,
        last: _Line,
        text: str,
        *,
        depth: int = 0,
        lang: str | None = None,
        segments: list[tuple[int, int]] | None = None,
    ) -> None:
        start = first.content_start
        end = last.trimmed_end
        self.tokens.append(
            Token(
                kind=kind,
                start=start,
                end=end,
                text=text,
                raw=self.text[start:end],
                depth=depth,
                lang=lang,
                segments=segments or [],
            )
        )

    def _starts_block(self, index: int) -> bool:
        content = self.lines[index].content
        return bool(
            _HEADING_RE.match(content)
            or _FENCE_RE.match(content)
            or _RULE_RE.match(content)
            or _QUOTE_RE.match(content)
            or _LIST_ITEM_RE.match(content)
            or _TABLE_ROW_START_RE.match(content)
            or self._is_table_start(index)
        )

    def _is_table_start(self, index: int) -> bool:
        content = self.lines[index].content
        if _TABLE_ROW_START_RE.match(content):
            return True
        if "|" not in content or index + 1 >= len(self.lines):
            return False
        following = self.lines[index + 1].content
        return "|" in following and bool(_TABLE_SEP_RE.match(following))

    def _segment(self, line: _Line, offset_in_line: int) -> tuple[int, int] | None:
        start = line.start + offset_in_line
        body = line.content[offset_in_line:]
        start += len(body) - len(body.lstrip())
        end = line.trimmed_end
        if end <= start:
            return None
        return (start, end)

    def _read_heading(self, i: int) -> int:
        line = self.lines[i]
        match = _HEADING_RE.match(line.content)
        assert match is not None
        depth = len(match.group(1))
        title = match.group(2) or ""
        title = _CLOSING_HASHES_RE.sub("", title).strip()

        segments: list[tuple[int, int]] = []
        if title:
            title_start = line.start + line.content.index(title, match.end(1))
            segments.append((title_start, title_start + len(title)))

        self._emit(TokenKind.HEADING, line, line, title, depth=depth, segments=segments)
        return i + 1

    def _read_setext_heading(self, i: int, underline_index: int) -> int:
        """Lines i..underline_index-1 underlined with ``=`` (depth 1) or ``-``."""
        underline = self.lines[underline_index]
        depth = 1 if underline.content.strip().startswith("=") else 2
        lines = self.lines[i:underline_index]

        segments: list[tuple[int, int]] = []
        for line in lines:
            segment = self._segment(line, 0)
            if segment is not None:
                segments.append(segment)

        title = " ".join(line.content.strip() for line in lines)
        self._emit(
            TokenKind.HEADING,
            lines[0],
            underline,
            title,
            depth=depth,
            segments=segments,
        )
        return underline_index + 1

    def _read_code(self, i: int) -> int:
        opening = self.lines[i]
        match = _FENCE_RE.match(opening.content)
        assert match is not None
        fence = match.group(1)
        lang = match.group(2) or None
        closing_re = re.compile(
            rf"^ {{0,3}}{re.escape(fence[0])}{{{len(fence)},}}[ \t]*$"
        )

        for j in range(i + 1, len(self.lines)):
            if closing_re.match(self.lines[j].content):
                body = "\n".join(line.content for line in self.lines[i + 1 : j])
                self._emit(TokenKind.CODE, opening, self.lines[j], body, lang=lang)
                return j + 1

        self._report(
            ParseErrorCode.UNCLOSED_CODE_BLOCK,
            opening.start,
            f"Code fence opened on line {opening.number + 1} is never closed",
        )
        last = opening
        for line in self.lines[i + 1 :]:
            if not line.is_blank:
                last = line
        body = "\n".join(line.content for line in self.lines[i + 1 : last.number + 1])
        self._emit(TokenKind.CODE, opening, last, body, lang=lang)
        return len(self.lines)

    def _read_table(self, i: int) -> int:
        header = self.lines[i]
        has_separator = i + 1 < len(self.lines) and bool(
            _TABLE_SEP_RE.match(self.lines[i + 1].content)
        )
        if not has_separator:
            self._report(
                ParseErrorCode.INVALID_TABLE,
                header.start,
                f"Table row on line {header.number + 1} has no separator row",
            )
            return self._read_paragraph(i, absorb_table_rows=True)

        separator = self.lines[i + 1]
        header_cells = _table_cells(header.content)
        separator_cells = _table_cells(separator.content)
        if len(header_cells) != len(separator_cells):
            self._report(
                ParseErrorCode.INVALID_TABLE,
                separator.start,
                f"Table on line {header.number + 1} has {len(header_cells)} header "
                f"cells but {len(separator_cells)} separator cells",
            )
            return self._read_paragraph(i, absorb_table_rows=True)

        j = i + 2
        while j < len(self.lines):
            line = self.lines[j]
            if line.is_blank or "|" not in line.content:
                break
            j += 1

        rows = [header] + self.lines[i + 2 : j]
        body = "\n".join(" | ".join(_table_cells(row.content)) for row in rows)
        self._emit(TokenKind.TABLE, header, self.lines[j - 1], body)
        return j

    def _read_blockquote(self, i: int) -> int:
        segments: list[tuple[int, int]] = []
        j = i
        while j < len(self.lines):
            line = self.lines[j]
            match = _QUOTE_RE.match(line.content)
            if match is None or line.is_blank:
                break
            segment = self._segment(line, match.end())
            if segment is not None:
                segments.append(segment)
            j += 1

        body = "\n".join(self.text[s:e] for s, e in segments)
        first, last = self.lines[i], self.lines[j - 1]
        self._emit(TokenKind.BLOCKQUOTE, first, last, body, segments=segments)
        return j

    def _read_list(self, i: int) -> int:
        base_indent = self.lines[i].indent
        previous_indent = base_indent
        segments: list[tuple[int, int]] = []
        last = self.lines[i]
        j = i

        while j < len(self.lines):
            line = self.lines[j]

            if line.is_blank:
                k = j + 1
                while k < len(self.lines) and self.lines[k].is_blank:
                    k += 1
                if k >= len(self.lines):
                    break
                upcoming = self.lines[k]
                is_item = bool(_LIST_ITEM_RE.match(upcoming.content))
                if _RULE_RE.match(upcoming.content):
                    break
                if not is_item and upcoming.indent <= base_indent:
                    break
                j = k
                continue

            if _RULE_RE.match(line.content):
                break

            item = _LIST_ITEM_RE.match(line.content)
            if item is not None:
                indent = line.indent
                if indent > previous_indent + _MAX_LIST_INDENT_STEP:
                    self._report(
                        ParseErrorCode.MALFORMED_LIST,
                        line.start,
                        f"List item on line {line.number + 1} is indented "
                        f"{indent - previous_indent} columns past its parent",
                    )
                previous_indent = indent
                if item.group(3) is not None:
                    segment = self._segment(line, item.start(3))
                    if segment is not None:
                        segments.append(segment)
            elif j > i and self._starts_block(j):
                break
            else:
                segment = self._segment(line, 0)
                if segment is not None:
                    segments.append(segment)

            last = line
            j += 1

        body = "\n".join(self.text[s:e] for s, e in segments)
        self._emit(TokenKind.LIST, self.lines[i], last, body, segments=segments)
        return last.number + 1

    def _read_paragraph(self, i: int, *, absorb_table_rows: bool = False) -> int:
        j = i + 1
        while j < len(self.lines):
            line = self.lines[j]
            if line.is_blank:
                break
            if _SETEXT_UNDERLINE_RE.match(line.content):
                return self._read_setext_heading(i, j)
            is_row = bool(_TABLE_ROW_START_RE.match(line.content))
            if absorb_table_rows and is_row:
                j += 1
                continue
            if self._starts_block(j):
                break
            j += 1

        first, last = self.lines[i], self.lines[j - 1]
        body = "\n".join(line.content.strip() for line in self.lines[i:j])
        self._emit(
            TokenKind.PARAGRAPH,
            first,
            last,
            body,
            segments=[(first.content_start, last.trimmed_end)],
        )
        return j
