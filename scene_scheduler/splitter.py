"""Split a screenplay PDF into fragments small enough for the extractor."""

import logging
from typing import List

import fitz  # PyMuPDF

from .config import DEFAULT_PAGES_PER_CHUNK
from .exceptions import ConfigurationError, DocumentError

logger = logging.getLogger(__name__)


def split_pdf(data: bytes, pages_per_chunk: int = DEFAULT_PAGES_PER_CHUNK) -> List[bytes]:
    """
    Split PDF bytes into consecutive fragments of at most `pages_per_chunk` pages.

    Args:
        data: Raw PDF bytes
        pages_per_chunk: Maximum pages per fragment

    Returns:
        List of PDF documents as bytes, in page order (empty for a zero-page PDF)

    Raises:
        ConfigurationError: If pages_per_chunk is below 1
        DocumentError: If the bytes cannot be opened as a PDF
    """
    if pages_per_chunk < 1:
        raise ConfigurationError(f"pages_per_chunk must be at least 1, got {pages_per_chunk}")

    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise DocumentError(f"Could not read PDF: {e}") from e

    try:
        total_pages = len(doc)
        chunks = []
        for start_page in range(0, total_pages, pages_per_chunk):
            end_page = min(start_page + pages_per_chunk, total_pages) - 1
            chunk = fitz.open()
            chunk.insert_pdf(doc, from_page=start_page, to_page=end_page)
            chunks.append(chunk.tobytes())
            chunk.close()
            logger.debug(f"Created fragment for pages {start_page + 1}-{end_page + 1}")
    finally:
        doc.close()

    logger.info(f"Split {total_pages} pages into {len(chunks)} fragments of up to {pages_per_chunk} pages")
    return chunks
