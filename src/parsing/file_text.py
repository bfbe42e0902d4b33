"""Text extraction for uploaded file attachments.

PDFs go through pypdf; text-like files are decoded as UTF-8. Anything else
is rejected since attachments must be plain text by the time they reach the
chat.
"""

import logging
from pathlib import PurePath

from src.parsing.errors import ExtractionError
from src.parsing.pdf_parser import MAX_FILE_SIZE, is_pdf, parse_pdf

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = frozenset(
    {
        ".txt", ".md", ".markdown", ".rst", ".csv", ".tsv", ".json", ".xml",
        ".yaml", ".yml", ".toml", ".ini", ".log", ".html", ".htm",
        ".py", ".js", ".ts", ".tsx", ".jsx", ".java", ".c", ".h", ".cpp",
        ".go", ".rs", ".rb", ".sh", ".sql", ".css",
    }
)


class FileTooLargeError(ExtractionError):
    """Raised when an upload exceeds MAX_FILE_SIZE."""

    pass


class UnsupportedFileError(ExtractionError):
    """Raised when a file is neither a PDF nor decodable text."""

    pass


def _decode_text(data: bytes, filename: str) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise UnsupportedFileError(f"Unsupported file type: {filename}") from e


def extract_file_text(filename: str, data: bytes) -> str:
    """Extract plain text from an uploaded file.

    Args:
        filename: Original filename, used to pick the extractor.
        data: Raw file bytes.

    Returns:
        The extracted text, never empty.

    Raises:
        FileTooLargeError: If the file exceeds 10MB.
        UnsupportedFileError: If the file is binary and not a PDF.
        ExtractionError: If the file is empty or yields no text.
    """
    if len(data) > MAX_FILE_SIZE:
        size_mb = len(data) / (1024 * 1024)
        raise FileTooLargeError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")

    if not data:
        raise ExtractionError("Empty file provided")

    suffix = PurePath(filename).suffix.lower()

    if suffix == ".pdf" or is_pdf(data):
        text = parse_pdf(data).text
    elif suffix in TEXT_EXTENSIONS or b"\x00" not in data[:1024]:
        text = _decode_text(data, filename)
    else:
        raise UnsupportedFileError(f"Unsupported file type: {filename}")

    if not text.strip():
        raise ExtractionError(f"No extractable text found in {filename}")

    logger.info(f"Extracted {len(text)} characters from {filename}")
    return text
