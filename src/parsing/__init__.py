"""Attachment text extraction.

Turns uploaded files and fetched web pages into the plain text that gets
attached to chat messages.

Responsibilities:
    - PDF text extraction with pypdf
    - UTF-8 decoding of text-like uploads
    - URL fetching with httpx and HTML-to-text reduction
"""

from src.parsing.errors import ExtractionError
from src.parsing.file_text import FileTooLargeError, UnsupportedFileError, extract_file_text
from src.parsing.html_text import html_to_text
from src.parsing.pdf_parser import MAX_FILE_SIZE, PDFContent, PDFParseError, parse_pdf
from src.parsing.url_fetcher import (
    FetchError,
    InvalidUrlError,
    UnsupportedContentError,
    UrlFetcher,
    is_http_url,
)

__all__ = [
    "MAX_FILE_SIZE",
    "ExtractionError",
    "FetchError",
    "FileTooLargeError",
    "InvalidUrlError",
    "PDFContent",
    "PDFParseError",
    "UnsupportedContentError",
    "UnsupportedFileError",
    "UrlFetcher",
    "extract_file_text",
    "html_to_text",
    "is_http_url",
    "parse_pdf",
]
