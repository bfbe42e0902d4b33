"""Attachment endpoints: file upload and URL fetch.

Both return pre-extracted text for the client to attach to its next message.
Failures are rendered as `{error}` bodies by the AttachmentError handler.
"""

import logging

from fastapi import APIRouter, Request, UploadFile, status
from fastapi.responses import JSONResponse

from src.models.schemas import ErrorResponse, ExtractedContent, FetchUrlRequest
from src.parsing import (
    MAX_FILE_SIZE,
    ExtractionError,
    FetchError,
    FileTooLargeError,
    InvalidUrlError,
    UnsupportedContentError,
    UrlFetcher,
    extract_file_text,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["attachments"])

# 10MB limit matches pdf_parser constant
MAX_UPLOAD_SIZE = MAX_FILE_SIZE


class AttachmentError(Exception):
    """Upload or fetch failure carrying its HTTP status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


async def attachment_error_handler(request: Request, exc: AttachmentError) -> JSONResponse:
    """Render AttachmentError as `{error}`."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(mode="json", exclude_none=True),
    )


def _validate_filename(filename: str | None) -> str:
    """Validate that the upload carries a filename.

    Raises:
        AttachmentError: 400 if the filename is missing.
    """
    if not filename:
        raise AttachmentError(status.HTTP_400_BAD_REQUEST, "Filename is required")
    return filename


async def _read_and_validate_size(file: UploadFile) -> bytes:
    """Read file content and validate size.

    Raises:
        AttachmentError: 413 if file exceeds size limit.
    """
    content = await file.read()

    if len(content) > MAX_UPLOAD_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise AttachmentError(
            status.HTTP_413_CONTENT_TOO_LARGE,
            f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)",
        )

    return content


@router.post(
    "/upload",
    response_model=ExtractedContent,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
async def upload_file(file: UploadFile) -> ExtractedContent:
    """Extract text from an uploaded file.

    Args:
        file: The uploaded file (multipart/form-data field `file`).

    Returns:
        ExtractedContent with the file's text.

    Raises:
        400: Missing filename, unsupported or empty file, corrupt PDF.
        413: File exceeds 10MB limit.
    """
    filename = _validate_filename(file.filename)
    content = await _read_and_validate_size(file)

    try:
        text = extract_file_text(filename, content)
    except FileTooLargeError as e:
        raise AttachmentError(status.HTTP_413_CONTENT_TOO_LARGE, str(e)) from e
    except ExtractionError as e:
        logger.warning(f"Could not extract text from {filename}: {e}")
        raise AttachmentError(status.HTTP_400_BAD_REQUEST, str(e)) from e

    return ExtractedContent(content=text)


def get_url_fetcher(request: Request) -> UrlFetcher:
    """Return the fetcher built by the app factory."""
    return request.app.state.url_fetcher


@router.post(
    "/fetch-url",
    response_model=ExtractedContent,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def fetch_url(payload: FetchUrlRequest, request: Request) -> ExtractedContent:
    """Fetch a web page and return its readable text.

    Raises:
        400: URL is not http(s) or page has no text.
        415: Response is not a text document.
        502: Remote server unreachable or answered with an error.
    """
    fetcher = get_url_fetcher(request)

    try:
        text = await fetcher.fetch_text(payload.url)
    except InvalidUrlError as e:
        raise AttachmentError(status.HTTP_400_BAD_REQUEST, str(e)) from e
    except FetchError as e:
        logger.warning(f"Fetching {payload.url} failed: {e}")
        raise AttachmentError(status.HTTP_502_BAD_GATEWAY, str(e)) from e
    except UnsupportedContentError as e:
        raise AttachmentError(status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, str(e)) from e
    except ExtractionError as e:
        raise AttachmentError(status.HTTP_400_BAD_REQUEST, str(e)) from e

    logger.info(f"Fetched {len(text)} characters from {payload.url}")
    return ExtractedContent(content=text)
