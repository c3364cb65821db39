"""PDF decoding for transcript uploads: per-page text and page rasters."""

import base64
import logging
from typing import List

import fitz  # PyMuPDF

from planner.services.errors import DocumentDecodeError

logger = logging.getLogger(__name__)

PDF_EXTENSION = '.pdf'
PDF_MIME_TYPE = 'application/pdf'


def is_supported_transcript(filename: str, content_type: str) -> bool:
    """Only PDF transcripts are accepted."""
    if filename and filename.lower().endswith(PDF_EXTENSION):
        return True
    return content_type == PDF_MIME_TYPE


def open_pdf(file_content: bytes) -> fitz.Document:
    """
    Open a PDF byte stream.

    Raises:
        DocumentDecodeError: if the bytes are not a PDF or the document has no pages
    """
    if not file_content:
        raise DocumentDecodeError("Document is empty")

    try:
        document = fitz.open(stream=file_content, filetype="pdf")
    except Exception as e:
        logger.error(f"Failed to open PDF: {e}")
        raise DocumentDecodeError(f"Could not read PDF: {str(e)}") from e

    if document.page_count == 0:
        document.close()
        raise DocumentDecodeError("Document has no pages")

    return document


def extract_page_texts(document: fitz.Document) -> List[str]:
    """Return the plain text of each page, in page order."""
    page_texts = []
    for page in document:
        page_texts.append(page.get_text())
    logger.info(f"Extracted text from {len(page_texts)} pages")
    return page_texts


def join_pages(page_texts: List[str]) -> str:
    return "\n".join(page_texts)


def extract_text_from_pdf(file_content: bytes) -> str:
    """Decode a PDF and return its pages' text joined by newlines."""
    with open_pdf(file_content) as document:
        return join_pages(extract_page_texts(document))


def render_page_images(document: fitz.Document, scale: float = 2.0) -> List[str]:
    """
    Render every page to PNG.

    Pages are rendered one at a time in page order.

    Returns:
        Base64-encoded PNG bytes (no data-URL prefix), one per page
    """
    matrix = fitz.Matrix(scale, scale)
    images = []
    for index, page in enumerate(document, start=1):
        pixmap = page.get_pixmap(matrix=matrix)
        images.append(base64.b64encode(pixmap.tobytes("png")).decode("ascii"))
        logger.debug(f"Rendered page {index}/{document.page_count}")
    return images
