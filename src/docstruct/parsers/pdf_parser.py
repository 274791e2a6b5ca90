# parsers/pdf_parser.py

import logging
import re
from pathlib import Path
from typing import Any, BinaryIO, cast

import pdfplumber
import yaml
from pdfplumber.utils.exceptions import PdfminerException

from docstruct.observability import names
from docstruct.observability.base import MetricsHook, NoOpMetricsHook

from .base import DocumentParser
from .config import ParserConfig
from .errors import ParseError, ParseErrorCode, ParseResult
from .markdown_parser import MarkdownParser
from .models import UNTITLED_DOCUMENT

logger = logging.getLogger(__name__)

# Leading text the markdown tokenizer would read as block markup
_BLOCK_MARKER_RE = re.compile(
    r"^(?:[#>|]|`{3}|~{3}|[-*+](?:\s|$)|([-*_])[ \t]*\1[ \t]*\1)"
)
_ORDERED_MARKER_RE = re.compile(r"^(\d{1,9})([.)])(?:\s|$)")


def escape_block_marker(line: str) -> str:
    """Backslash-escape a leading markdown block marker so the line stays text."""
    ordered = _ORDERED_MARKER_RE.match(line)
    if ordered is not None:
        return f"{ordered.group(1)}\\{line[ordered.end(1):]}"
    if _BLOCK_MARKER_RE.match(line):
        return "\\" + line
    return line


class PdfParser(DocumentParser):
    """
    Deterministic PDF parser.
    - Uses page order
    - Uses simple heading heuristics
    - Renders the text as markdown and hands it to MarkdownParser

    Character ranges in the result point into the rendered text, which is
    available via ``render``.
    """

    def __init__(
        self,
        config: ParserConfig | None = None,
        *,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.metrics_hook = metrics_hook
        self._markdown = MarkdownParser(config, metrics_hook=metrics_hook)

    def parse(self, source: str | Path | BinaryIO) -> ParseResult:
        try:
            rendered = self.render(source)
        except (PdfminerException, OSError) as exc:
            error = ParseError(
                ParseErrorCode.INVALID_INPUT,
                f"Source is not a readable PDF: {exc}",
                cause=exc,
            )
            logger.error("PDF parse failed: %s", error)
            self.metrics_hook.increment(
                names.PARSE_ERRORS_TOTAL, labels={"code": error.code.value}
            )
            return ParseResult.failure(error)
        return self._markdown.parse(rendered)

    def render(self, source: str | Path | BinaryIO) -> str:
        """
        Render the PDF as markdown with YAML front matter.

        Raises:
            PdfminerException: If pdfplumber cannot read the source.
            OSError: If a source path cannot be opened.
        """
        blocks: list[str] = []

        # pdfplumber.open accepts path-like or buffer objects; cast to Any
        with pdfplumber.open(cast(Any, source)) as pdf:
            page_count = len(pdf.pages)
            title = self._extract_title(pdf)
            title_pending = title != UNTITLED_DOCUMENT

            for page in pdf.pages:
                text = page.extract_text() or ""
                paragraph: list[str] = []

                for line in text.splitlines():
                    clean = line.strip()
                    if not clean:
                        continue

                    if title_pending and clean == title:
                        title_pending = False
                        blocks.append(f"# {clean}")
                        continue

                    # Heading heuristic
                    if self._is_heading(clean):
                        if paragraph:
                            blocks.append(escape_block_marker(" ".join(paragraph)))
                            paragraph = []
                        blocks.append(f"## {clean}")
                        continue

                    paragraph.append(clean)

                if paragraph:
                    blocks.append(escape_block_marker(" ".join(paragraph)))

        logger.debug("Rendered %d pages into %d blocks", page_count, len(blocks))
        front_matter = yaml.safe_dump(
            {"source_type": "pdf", "page_count": page_count}, sort_keys=True
        )
        return f"---\n{front_matter}---\n\n" + "\n\n".join(blocks) + "\n"

    def _extract_title(self, pdf: Any) -> str:
        """
        Simple heuristic:
        - First non-empty line of first page
        """
        if not pdf.pages:
            return UNTITLED_DOCUMENT
        first_page = pdf.pages[0]
        text = first_page.extract_text() or ""
        for line in text.splitlines():
            if line.strip():
                return line.strip()
        return UNTITLED_DOCUMENT

    def _is_heading(self, line: str) -> bool:
        """
        Very conservative heading heuristic.
        """
        if len(line) > 120:
            return False
        if line.isupper():
            return True
        return line.endswith(":")
