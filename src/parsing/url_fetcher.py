"""URL fetching for link attachments.

Downloads a page with httpx and reduces it to plain text.
"""

import logging

import httpx

from src.parsing.errors import ExtractionError
from src.parsing.html_text import html_to_text

logger = logging.getLogger(__name__)

# Constants
MAX_CONTENT_CHARS = 100_000
FETCH_TIMEOUT = 30.0
USER_AGENT = "chat-relay/0.1 (+url-attachment)"

_PASSTHROUGH_TYPES = ("application/json", "application/xml")


class InvalidUrlError(ExtractionError):
    """Raised when the URL does not use http or https."""

    pass


class FetchError(ExtractionError):
    """Raised when the remote server cannot be reached or answers with an error."""

    pass


class UnsupportedContentError(ExtractionError):
    """Raised when the response is not text."""

    pass


def is_http_url(url: str) -> bool:
    """Check that a URL starts with http:// or https://."""
    return url.startswith(("http://", "https://"))


def _extract(response: httpx.Response) -> str:
    content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type in ("text/html", "application/xhtml+xml"):
        return html_to_text(response.text)
    if content_type.startswith("text/") or content_type in _PASSTHROUGH_TYPES or not content_type:
        return response.text

    raise UnsupportedContentError(f"Unsupported content type: {content_type}")


class UrlFetcher:
    """Fetches URLs and returns their text content."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize the fetcher.

        Args:
            transport: Optional httpx transport (used to stub the network).
        """
        self._transport = transport

    async def fetch_text(self, url: str) -> str:
        """Fetch a URL and return its readable text.

        Args:
            url: An http(s) URL.

        Returns:
            Page text, truncated to MAX_CONTENT_CHARS.

        Raises:
            InvalidUrlError: Scheme is not http or https.
            FetchError: Network failure or non-2xx status.
            UnsupportedContentError: Response is not text.
            ExtractionError: Page contains no text.
        """
        if not is_http_url(url):
            raise InvalidUrlError("URL must start with http:// or https://")

        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=FETCH_TIMEOUT,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise FetchError(f"Failed to fetch URL: HTTP {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise FetchError(f"Failed to fetch URL: {e}") from e

        text = _extract(response).strip()
        if not text:
            raise ExtractionError("No readable content found at URL")

        if len(text) > MAX_CONTENT_CHARS:
            logger.info(f"Truncating content from {url} ({len(text)} chars)")
            text = text[:MAX_CONTENT_CHARS]

        return text
