import pytest

from docstruct.parsers.pdf_parser import escape_block_marker
from docstruct.parsers.tokenizer import TokenKind, tokenize


class TestEscapeBlockMarker:
    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("# not a heading", "\\# not a heading"),
            ("> not a quote", "\\> not a quote"),
            ("| a | b |", "\\| a | b |"),
            ("- not a list", "\\- not a list"),
            ("* not a list", "\\* not a list"),
            ("```python", "\\```python"),
            ("~~~", "\\~~~"),
            ("***", "\\***"),
            ("_ _ _", "\\_ _ _"),
            ("12. not ordered", "12\\. not ordered"),
            ("3) not ordered", "3\\) not ordered"),
        ],
    )
    def test_escapes_leading_marker(self, line: str, expected: str) -> None:
        assert escape_block_marker(line) == expected

    @pytest.mark.parametrize(
        "line",
        ["Plain text.", "-dash without space", "2024 was a year.", "*emphasis* first"],
    )
    def test_leaves_plain_text(self, line: str) -> None:
        assert escape_block_marker(line) == line

    @pytest.mark.parametrize(
        "line",
        ["# heading", "> quote", "| a | b |", "- item", "1. item", "```", "---"],
    )
    def test_escaped_line_tokenizes_as_paragraph(self, line: str) -> None:
        result = tokenize(escape_block_marker(line))

        assert [t.kind for t in result.content_tokens] == [TokenKind.PARAGRAPH]
