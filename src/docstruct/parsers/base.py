# parsers/base.py

from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from .errors import ParseResult

# Raw text or bytes for Markdown, paths or open binary files for PDFs
DocumentSource = str | bytes | Path | BinaryIO


class DocumentParser(ABC):
    """Common interface for turning a source document into a structure tree."""

    @abstractmethod
    def parse(self, source: DocumentSource) -> ParseResult:
        """
        Parse a document into chapters, paragraphs and sentences.

        Implementations keep these guarantees:
        - Same input and config give equal structures
        - Character ranges are half-open and relative to the whole text
        - Problems are reported through ParseResult.failure, never raised
        """
        raise NotImplementedError
