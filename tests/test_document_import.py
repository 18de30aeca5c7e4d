"""
Tests for PDF text extraction and the page limit.
"""

import io

import pytest
from pypdf import PdfWriter

from src.signage.document_import import MAX_PAGES, extract_text
from src.signage.exceptions import DocumentExtractionError, OversizedDocumentError


def make_pdf(pages):
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestExtractText:
    """Tests for extract_text()."""

    def test_blank_pages_are_separated(self):
        assert extract_text(make_pdf(2)) == "\n\n\n\n"

    def test_accepts_file_object(self):
        assert extract_text(io.BytesIO(make_pdf(1))) == "\n\n"

    def test_accepts_path(self, tmp_path):
        path = tmp_path / "newsletter.pdf"
        path.write_bytes(make_pdf(3))
        assert extract_text(path).count("\n\n") == 3

    def test_limit_is_inclusive(self):
        extract_text(make_pdf(MAX_PAGES))

    def test_oversized_document_rejected(self):
        with pytest.raises(OversizedDocumentError) as exc_info:
            extract_text(make_pdf(MAX_PAGES + 1))

        error = exc_info.value
        assert error.page_count == 16
        assert error.max_pages == 15
        assert str(error) == (
            "PDF is too large (16 pages). Please upload a document with 15 pages or fewer."
        )

    def test_custom_limit(self):
        with pytest.raises(OversizedDocumentError):
            extract_text(make_pdf(3), max_pages=2)

    def test_garbage_bytes(self):
        with pytest.raises(DocumentExtractionError):
            extract_text(b"this is not a pdf at all")

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentExtractionError):
            extract_text(tmp_path / "missing.pdf")
