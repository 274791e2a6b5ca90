# parsers/errors.py

from dataclasses import dataclass
from enum import Enum

from .models import DocumentStructure


class ParseErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    TOKENIZATION_FAILURE = "tokenization_failure"
    LOW_CONFIDENCE = "low_confidence"
    VALIDATION_FAILURE = "validation_failure"


class ParseErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    ENCODING_ERROR = "ENCODING_ERROR"
    INVALID_SYNTAX = "INVALID_SYNTAX"
    UNCLOSED_CODE_BLOCK = "UNCLOSED_CODE_BLOCK"
    INVALID_TABLE = "INVALID_TABLE"
    MALFORMED_LIST = "MALFORMED_LIST"
    PARSE_FAILED = "PARSE_FAILED"
    LOW_CONFIDENCE = "LOW_CONFIDENCE"
    VALIDATION_FAILED = "VALIDATION_FAILED"


_KIND_BY_CODE = {
    ParseErrorCode.INVALID_INPUT: ParseErrorKind.INVALID_INPUT,
    ParseErrorCode.FILE_TOO_LARGE: ParseErrorKind.INVALID_INPUT,
    ParseErrorCode.ENCODING_ERROR: ParseErrorKind.INVALID_INPUT,
    ParseErrorCode.INVALID_SYNTAX: ParseErrorKind.TOKENIZATION_FAILURE,
    ParseErrorCode.UNCLOSED_CODE_BLOCK: ParseErrorKind.TOKENIZATION_FAILURE,
    ParseErrorCode.INVALID_TABLE: ParseErrorKind.TOKENIZATION_FAILURE,
    ParseErrorCode.MALFORMED_LIST: ParseErrorKind.TOKENIZATION_FAILURE,
    ParseErrorCode.PARSE_FAILED: ParseErrorKind.TOKENIZATION_FAILURE,
    ParseErrorCode.LOW_CONFIDENCE: ParseErrorKind.LOW_CONFIDENCE,
    ParseErrorCode.VALIDATION_FAILED: ParseErrorKind.VALIDATION_FAILURE,
}


class ParseError(Exception):
    """Typed failure raised inside the parsing pipeline.

    ``code`` is machine-readable, ``kind`` groups codes into the four
    failure families, ``offset`` points into the source when known.
    """

    def __init__(
        self,
        code: ParseErrorCode,
        message: str,
        *,
        offset: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.kind = _KIND_BY_CODE[code]
        self.message = message
        self.offset = offset
        self.cause = cause

    def __str__(self) -> str:
        if self.offset is None:
            return f"[{self.code.value}] {self.message}"
        return f"[{self.code.value}] {self.message} (offset {self.offset})"


@dataclass(frozen=True)
class ParseResult:
    """Outcome of a parse call: a structure or an error, never both."""

    structure: DocumentStructure | None = None
    error: ParseError | None = None

    def __post_init__(self) -> None:
        if (self.structure is None) == (self.error is None):
            raise ValueError("ParseResult needs exactly one of structure or error")

    @classmethod
    def success(cls, structure: DocumentStructure) -> "ParseResult":
        return cls(structure=structure)

    @classmethod
    def failure(cls, error: ParseError) -> "ParseResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.structure is not None

    def unwrap(self) -> DocumentStructure:
        """Return the structure or raise the stored error."""
        if self.structure is None:
            assert self.error is not None
            raise self.error
        return self.structure
