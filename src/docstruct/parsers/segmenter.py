# parsers/segmenter.py

import re
from collections.abc import Iterable
from dataclasses import dataclass

from .config import ParserConfig

WORD_DURATION_SECONDS = 0.4

# Terminal punctuation, optional closing quote/bracket, then whitespace and a capital
_TERMINAL_RE = re.compile(r"[.!?;]+[\"'”’)\]]*(?=\s+[\"'“‘(\[]?[A-Z])")
_WORD_BEFORE_RE = re.compile(r"([A-Za-z][A-Za-z.]*)$")
_FORMATTING_RES = [
    re.compile(r"\*\*[^*\s][^*]*\*\*"),
    re.compile(r"__[^_\s][^_]*__"),
    re.compile(r"(?<![*\w])\*[^*\s][^*]*\*(?![*\w])"),
    re.compile(r"(?<![_\w])_[^_\s][^_]*_(?![_\w])"),
    re.compile(r"`[^`]+`"),
    re.compile(r"\[[^\]]+\]\([^)]+\)"),
]


@dataclass(frozen=True)
class SentenceSpan:
    text: str
    start: int
    end: int
    word_count: int


def count_words(text: str) -> int:
    """Whitespace word count; URLs and email addresses count as one word."""
    return len(text.split())


def estimate_duration(word_count: int) -> float:
    if word_count < 0:
        raise ValueError("word_count must be >= 0")
    return word_count * WORD_DURATION_SECONDS


def has_formatting(text: str) -> bool:
    """True when text carries bold, italic, inline code or link markup."""
    return any(pattern.search(text) for pattern in _FORMATTING_RES)


def split_sentences(
    text: str,
    base_offset: int = 0,
    config: ParserConfig | None = None,
) -> list[SentenceSpan]:
    """Split ``text`` into sentences with absolute source offsets.

    Breaks after ``.``, ``!``, ``?`` or ``;`` followed by whitespace and a
    capital letter, and at every line break. A period ending a known
    abbreviation does not break. Extra ``sentence_boundary_patterns`` from
    the config break at the end of each match.

    Fragments shorter than ``min_sentence_length`` characters are merged
    into the preceding sentence on the same line; sentences longer than
    ``max_sentence_length`` are cut at the last whitespace within the limit.
    Spans with no words are dropped.
    """
    config = config or ParserConfig()
    abbreviations = _normalize_abbreviations(config.abbreviations)

    cuts = {len(text)}
    cuts.update(i + 1 for i, char in enumerate(text) if char == "\n")
    for match in _TERMINAL_RE.finditer(text):
        if match.group().startswith(".") and _ends_with_abbreviation(
            text[: match.start()], abbreviations
        ):
            continue
        cuts.add(match.end())
    for pattern in config.sentence_boundary_patterns:
        for match in re.finditer(pattern, text):
            if match.end() > 0:
                cuts.add(match.end())

    pieces: list[tuple[int, int]] = []
    previous = 0
    for cut in sorted(cuts):
        trimmed = _trim(text, previous, cut)
        previous = cut
        if trimmed is not None:
            pieces.append(trimmed)

    pieces = _merge_short(text, pieces, config.min_sentence_length)
    pieces = _split_long(text, pieces, config.max_sentence_length)

    spans = []
    for start, end in pieces:
        sentence = text[start:end]
        words = count_words(sentence)
        if words == 0:
            continue
        spans.append(
            SentenceSpan(
                text=sentence,
                start=base_offset + start,
                end=base_offset + end,
                word_count=words,
            )
        )
    return spans


def _normalize_abbreviations(abbreviations: Iterable[str]) -> frozenset[str]:
    return frozenset(a.lower().rstrip(".") for a in abbreviations)


def _ends_with_abbreviation(prefix: str, abbreviations: frozenset[str]) -> bool:
    match = _WORD_BEFORE_RE.search(prefix)
    if match is None:
        return False
    return match.group(1).lower().rstrip(".") in abbreviations


def _trim(text: str, start: int, end: int) -> tuple[int, int] | None:
    piece = text[start:end]
    stripped_end = start + len(piece.rstrip())
    stripped_start = start + len(piece) - len(piece.lstrip())
    if stripped_end <= stripped_start:
        return None
    return (stripped_start, stripped_end)


def _merge_short(
    text: str, pieces: list[tuple[int, int]], min_length: int
) -> list[tuple[int, int]]:
    merged: list[tuple[int, int]] = []
    for start, end in pieces:
        if merged and end - start < min_length:
            prev_start, prev_end = merged[-1]
            if "\n" not in text[prev_end:start]:
                merged[-1] = (prev_start, end)
                continue
        merged.append((start, end))
    return merged


def _split_long(
    text: str, pieces: list[tuple[int, int]], max_length: int
) -> list[tuple[int, int]]:
    result: list[tuple[int, int]] = []
    for start, end in pieces:
        while end - start > max_length:
            window = text[start : start + max_length]
            cut = max(window.rfind(" "), window.rfind("\t"))
            if cut <= 0:
                cut = max_length
            trimmed = _trim(text, start, start + cut)
            if trimmed is not None:
                result.append(trimmed)
            rest = _trim(text, start + cut, end)
            if rest is None:
                break
            start, end = rest
        else:
            result.append((start, end))
    return result
