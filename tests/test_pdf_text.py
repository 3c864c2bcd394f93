"""
Tests for PDF text extraction.
"""

import fitz
import pytest

from ramblin.core.pdf_text import PAGE_SEPARATOR, PdfExtractionError, extract_pdf_text


def build_pdf(*pages: str) -> bytes:
    """Create an in-memory PDF with one line of text per page."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def test_pages_joined_in_order():
    data = build_pdf("05/02 STARBUCKS -6.45", "05/15 PAYROLL +1600.00")
    text = extract_pdf_text(data)
    assert text == "05/02 STARBUCKS -6.45" + PAGE_SEPARATOR + "05/15 PAYROLL +1600.00"


def test_blank_pages_skipped():
    doc = fitz.open()
    doc.new_page()
    doc.new_page().insert_text((72, 72), "Only page with text")
    data = doc.tobytes()
    doc.close()
    assert extract_pdf_text(data) == "Only page with text"


def test_corrupt_bytes_raise():
    with pytest.raises(PdfExtractionError) as exc_info:
        extract_pdf_text(b"this is definitely not a pdf file")
    assert exc_info.value.original_error is not None


def test_empty_bytes_raise():
    with pytest.raises(PdfExtractionError, match="empty"):
        extract_pdf_text(b"")
