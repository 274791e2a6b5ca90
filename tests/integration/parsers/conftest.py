from pathlib import Path

import pytest
from reportlab.lib.pagesizes import LETTER
from reportlab.pdfgen import canvas

from docstruct import DocumentStructure, PdfParser

SAMPLE_PAGES = [
    [
        "SAMPLE DOCUMENT TITLE",
        "",
        "INTRODUCTION:",
        "This is the first paragraph of the introduction.",
        "This is the second paragraph of the introduction.",
        "",
        "DETAILS:",
        "Here we describe details.",
        "Some identifiers like user_id and order_id appear here.",
        "",
        "CONCLUSION:",
        "This is the final section.",
    ]
]

MULTIPAGE_PAGES = [
    [
        "MULTIPAGE DOCUMENT",
        "",
        "PAGE ONE CONTENT:",
        "This content is on page one.",
    ],
    [
        "PAGE TWO CONTENT:",
        "This content is on page two.",
    ],
]

# Long line (>120 chars) is body text; all caps and trailing colon are headings
EDGE_CASE_PAGES = [
    [
        "EDGE CASE DOCUMENT",
        "",
        "ALL CAPS HEADING",
        "Normal paragraph text here.",
        "",
        "HEADING WITH COLON:",
        "More normal text.",
        "",
        "A" * 130,
        "Text after long line.",
    ]
]


# Body lines that open with markdown block markup
MARKUP_PAGES = [
    [
        "MARKUP DOCUMENT",
        "",
        "TABLE LIKE:",
        "| cell one | cell two |",
        "QUOTE LIKE:",
        "> Quoted words stay text.",
        "LIST LIKE:",
        "- Dashed words stay text.",
        "FENCE LIKE:",
        "~~~ Tilde words stay text.",
    ]
]


def _write_pdf(path: Path, pages: list[list[str]]) -> None:
    """Writes a deterministic PDF, one list of text lines per page."""
    c = canvas.Canvas(str(path), pagesize=LETTER)
    _, height = LETTER

    for lines in pages:
        text = c.beginText(40, height - 50)
        for line in lines:
            text.textLine(line)
        c.drawText(text)
        c.showPage()

    c.save()


@pytest.fixture(scope="module")
def pdf_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Create all test PDFs once per module."""
    dir_path: Path = tmp_path_factory.mktemp("pdfs")

    _write_pdf(dir_path / "sample.pdf", SAMPLE_PAGES)
    _write_pdf(dir_path / "multipage.pdf", MULTIPAGE_PAGES)
    _write_pdf(dir_path / "edge_case.pdf", EDGE_CASE_PAGES)
    _write_pdf(dir_path / "markup.pdf", MARKUP_PAGES)
    (dir_path / "not_a.pdf").write_bytes(b"this is not a pdf at all")

    return dir_path


@pytest.fixture(scope="module")
def parsed_sample(pdf_dir: Path) -> DocumentStructure:
    """Parse sample PDF from an open file once, reuse across tests."""
    with open(pdf_dir / "sample.pdf", "rb") as f:
        return PdfParser().parse(f).unwrap()


@pytest.fixture(scope="module")
def parsed_multipage(pdf_dir: Path) -> DocumentStructure:
    """Parse multipage PDF from a path once, reuse across tests."""
    return PdfParser().parse(pdf_dir / "multipage.pdf").unwrap()


@pytest.fixture(scope="module")
def parsed_edge_case(pdf_dir: Path) -> DocumentStructure:
    """Parse edge case PDF from a string path once, reuse across tests."""
    return PdfParser().parse(str(pdf_dir / "edge_case.pdf")).unwrap()
