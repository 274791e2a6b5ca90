import pytest

from docstruct.parsers.errors import (
    ParseError,
    ParseErrorCode,
    ParseErrorKind,
    ParseResult,
)
from docstruct.parsers.models import DocumentMetadata, DocumentStructure


def _empty_structure() -> DocumentStructure:
    return DocumentStructure(
        metadata=DocumentMetadata(title="T", word_count=0, character_count=0),
        chapters=[],
        total_word_count=0,
        total_chapters=0,
        total_paragraphs=0,
        total_sentences=0,
        estimated_total_duration=0.0,
    )


class TestParseError:
    def test_str_without_offset(self) -> None:
        error = ParseError(ParseErrorCode.INVALID_INPUT, "too short")

        assert str(error) == "[INVALID_INPUT] too short"

    def test_str_with_offset(self) -> None:
        error = ParseError(ParseErrorCode.INVALID_TABLE, "bad row", offset=12)

        assert str(error) == "[INVALID_TABLE] bad row (offset 12)"

    @pytest.mark.parametrize(
        ("code", "kind"),
        [
            (ParseErrorCode.FILE_TOO_LARGE, ParseErrorKind.INVALID_INPUT),
            (ParseErrorCode.ENCODING_ERROR, ParseErrorKind.INVALID_INPUT),
            (ParseErrorCode.MALFORMED_LIST, ParseErrorKind.TOKENIZATION_FAILURE),
            (ParseErrorCode.LOW_CONFIDENCE, ParseErrorKind.LOW_CONFIDENCE),
            (ParseErrorCode.VALIDATION_FAILED, ParseErrorKind.VALIDATION_FAILURE),
        ],
    )
    def test_kind_follows_code(
        self, code: ParseErrorCode, kind: ParseErrorKind
    ) -> None:
        assert ParseError(code, "x").kind is kind

    def test_every_code_has_a_kind(self) -> None:
        for code in ParseErrorCode:
            assert isinstance(ParseError(code, "x").kind, ParseErrorKind)


class TestParseResult:
    def test_success(self) -> None:
        structure = _empty_structure()
        result = ParseResult.success(structure)

        assert result.ok
        assert result.error is None
        assert result.unwrap() is structure

    def test_failure(self) -> None:
        error = ParseError(ParseErrorCode.PARSE_FAILED, "boom")
        result = ParseResult.failure(error)

        assert not result.ok
        assert result.structure is None
        with pytest.raises(ParseError, match="boom"):
            result.unwrap()

    def test_requires_exactly_one(self) -> None:
        with pytest.raises(ValueError, match="exactly one"):
            ParseResult()
        with pytest.raises(ValueError, match="exactly one"):
            ParseResult(
                structure=_empty_structure(),
                error=ParseError(ParseErrorCode.PARSE_FAILED, "boom"),
            )
