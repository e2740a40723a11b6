"""PDF text extraction for uploaded freight documents."""

import io
import logging

from pypdf import PdfReader

logger = logging.getLogger(__name__)


def extract_text_from_pdf(file_bytes: bytes) -> str:
    """Extract the text layer of a PDF (bill of lading, rate confirmation, ...).

    Args:
        file_bytes: Raw PDF file bytes.

    Returns:
        Text from all pages, pages separated by blank lines.

    Raises:
        ValueError: If the PDF has no extractable text (e.g. a scan).
    """
    reader = PdfReader(io.BytesIO(file_bytes))
    pages = []
    for page in reader.pages:
        text = page.extract_text()
        if text:
            pages.append(text.strip())

    content = "\n\n".join(pages)
    if not content.strip():
        raise ValueError("PDF contains no extractable text.")

    logger.debug("Extracted %d characters from %d PDF pages", len(content), len(reader.pages))
    return content
