"""
Text extraction for uploaded newsletters.

Unlike the rest of the core this path raises: an oversized or unreadable
document aborts the import and the operator is told why.
"""

import io
from pathlib import Path
from typing import BinaryIO, Union

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from src.common.logger import setup_logger
from .exceptions import DocumentExtractionError, OversizedDocumentError

logger = setup_logger(__name__)

MAX_PAGES = 15

DocumentSource = Union[str, Path, bytes, BinaryIO]


def _open_reader(source: DocumentSource) -> PdfReader:
    if isinstance(source, (bytes, bytearray)):
        return PdfReader(io.BytesIO(source))
    if isinstance(source, (str, Path)):
        return PdfReader(str(source))
    return PdfReader(source)


def extract_text(source: DocumentSource, max_pages: int = MAX_PAGES) -> str:
    """
    Extract plain text from a PDF.

    Args:
        source: File path, raw bytes, or a binary file object
        max_pages: Largest page count accepted

    Returns:
        Text of every page, pages separated by a blank line

    Raises:
        OversizedDocumentError: If the document has more than max_pages pages
        DocumentExtractionError: If the document cannot be read
    """
    try:
        reader = _open_reader(source)
        page_count = len(reader.pages)
    except (PdfReadError, OSError, ValueError) as e:
        raise DocumentExtractionError(f"Failed to read PDF file: {e}") from e

    if page_count > max_pages:
        raise OversizedDocumentError(page_count, max_pages)

    parts = []
    try:
        for page in reader.pages:
            parts.append(page.extract_text() or "")
    except (PdfReadError, ValueError, KeyError) as e:
        raise DocumentExtractionError(f"Failed to read PDF file: {e}") from e

    logger.info("Extracted %d pages of text", page_count)
    return "".join(part + "\n\n" for part in parts)
