"""
PDF Text Extraction
====================
Pulls selectable text out of an uploaded PDF with PyMuPDF. Pages are
read in order and joined with a blank line. Scanned PDFs without a
text layer come back as an empty string.
"""

import logging

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


class PdfExtractionError(Exception):
    """Raised when the uploaded bytes cannot be read as a PDF."""

    def __init__(self, message: str = "Could not read the PDF file", original_error: Exception | None = None):
        self.original_error = original_error
        super().__init__(message)


def extract_pdf_text(data: bytes) -> str:
    """
    Extract the text of every page.

    Args:
        data: Raw PDF bytes

    Returns:
        Page texts in page order, joined by PAGE_SEPARATOR

    Raises:
        PdfExtractionError: If the bytes are empty, not a PDF, or corrupt
    """
    if not data:
        raise PdfExtractionError("The uploaded file is empty")

    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            pages = [page.get_text("text").strip() for page in doc]
    except Exception as e:
        logger.warning(f"PDF extraction failed: {e}")
        raise PdfExtractionError(original_error=e) from e

    text = PAGE_SEPARATOR.join(p for p in pages if p)
    logger.info(f"Extracted {len(text)} chars from {len(pages)} page(s)")
    return text
