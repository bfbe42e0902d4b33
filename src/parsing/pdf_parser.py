"""PDF text extraction for file attachments, using pypdf.

Only text is kept; attachments reach the model as plain text.
"""

import io
import logging
from collections.abc import Iterator

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import FileNotDecryptedError, PdfReadError

from src.parsing.errors import ExtractionError

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB, shared by every attachment path
PDF_MAGIC_BYTES = b"%PDF"


class PDFContent(BaseModel):
    """Text pulled out of a PDF attachment.

    Attributes:
        text: Page texts joined by blank lines.
        pages: Page count of the document.
        skipped_pages: Pages whose text could not be extracted.
    """

    text: str
    pages: int = Field(ge=0)
    skipped_pages: int = Field(default=0, ge=0)


class PDFParseError(ExtractionError):
    """Raised when a PDF attachment cannot be read."""

    pass


def is_pdf(file_content: bytes) -> bool:
    """Check for the PDF header near the start of the file."""
    return file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES)


def _open(file_content: bytes) -> PdfReader:
    if not file_content:
        raise PDFParseError("Empty file provided")
    if len(file_content) > MAX_FILE_SIZE:
        size_mb = len(file_content) / (1024 * 1024)
        raise PDFParseError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")
    if not is_pdf(file_content):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")

    try:
        reader = PdfReader(io.BytesIO(file_content))
        # Owner-password-only files open with an empty user password
        if reader.is_encrypted and not reader.decrypt(""):
            raise PDFParseError("PDF is password protected")
        # Touch the page tree so structural damage surfaces here
        len(reader.pages)
    except PDFParseError:
        raise
    except FileNotDecryptedError as e:
        raise PDFParseError("PDF is password protected") from e
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e
    return reader


def _page_texts(reader: PdfReader, skipped: list[int]) -> Iterator[str]:
    for number, page in enumerate(reader.pages, start=1):
        try:
            text = page.extract_text()
        except Exception as e:
            logger.warning(f"Failed to extract text from page {number}: {e}")
            skipped.append(number)
            continue
        if text and text.strip():
            yield text


def parse_pdf(file_content: bytes) -> PDFContent:
    """Extract the text of every page of a PDF.

    Pages that fail to extract are skipped and counted rather than failing
    the whole document. An image-only PDF yields empty text; callers decide
    whether that is an error.

    Raises:
        PDFParseError: If the file is empty, too large, not a PDF, encrypted,
            corrupt, or has no pages.
    """
    reader = _open(file_content)
    pages = len(reader.pages)
    if pages == 0:
        raise PDFParseError("PDF contains no pages")

    skipped: list[int] = []
    text = "\n\n".join(_page_texts(reader, skipped))

    if not text.strip():
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")

    return PDFContent(text=text, pages=pages, skipped_pages=len(skipped))
