"""Chat client session: transcript state and the send/attach cycle.

No NiceGUI imports here; the page in chat_page.py renders whatever this
session holds and drives it through its public methods.
"""

import itertools
import logging
import os
from collections.abc import Callable
from enum import Enum
from typing import Any

import httpx

from src.gateway.model_map import ADVERTISED_MODELS
from src.models.schemas import Attachment, FileAttachment, Message, UrlAttachment
from src.parsing.pdf_parser import MAX_FILE_SIZE
from src.parsing.url_fetcher import is_http_url

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "120"))

DEFAULT_SELECTED_MODEL = "gemini-2.5-pro"

FILE_TOO_LARGE_ALERT = "File size must be less than 10MB"
INVALID_URL_ALERT = "Please enter a valid URL starting with http:// or https://"
SEND_FAILED_MESSAGE = "Failed to get response from API"


class SessionState(str, Enum):
    """States of the send cycle."""

    IDLE = "idle"
    SENDING = "sending"
    ERROR_DISPLAYED = "error_displayed"


class ChatApiError(Exception):
    """Raised when a gateway or collaborator call fails."""

    pass


class ChatApiClient:
    """Thin async client for the relay's HTTP endpoints."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = API_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def _post(self, path: str, fallback_error: str, **kwargs: Any) -> dict[str, Any]:
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(path, **kwargs)
            except httpx.RequestError as e:
                raise ChatApiError(f"Connection failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.is_success:
            raise ChatApiError(data.get("error") or fallback_error)
        return data

    async def send_chat(self, messages: list[dict[str, Any]], model: str) -> str:
        """POST the conversation to /chat and return the assistant reply."""
        data = await self._post(
            "/chat",
            SEND_FAILED_MESSAGE,
            json={"messages": messages, "model": model},
        )
        message = data.get("message")
        if not isinstance(message, str):
            raise ChatApiError(SEND_FAILED_MESSAGE)
        return message

    async def upload_file(self, name: str, data: bytes) -> str:
        """POST a file to /upload and return its extracted text."""
        result = await self._post(
            "/upload", "Failed to process file", files={"file": (name, data)}
        )
        return result.get("content", "")

    async def fetch_url(self, url: str) -> str:
        """POST a URL to /fetch-url and return the page text."""
        result = await self._post(
            "/fetch-url", "Failed to fetch URL content", json={"url": url}
        )
        return result.get("content", "")


class ChatSession:
    """Manages chat state for one browser session.

    Holds the transcript, pending attachments and selected model, and runs
    the send cycle IDLE -> SENDING -> IDLE. Failures of a send are appended
    as assistant messages; failures of attachment ingestion go to `on_alert`.
    """

    def __init__(
        self,
        api: ChatApiClient | None = None,
        on_alert: Callable[[str], None] | None = None,
        on_change: Callable[[SessionState], None] | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            api: Client for the relay endpoints.
            on_alert: Called with a blocking, user-facing alert message.
            on_change: Called with the new state on every state transition.
        """
        self.api = api or ChatApiClient()
        self.on_alert = on_alert
        self.on_change = on_change

        self.messages: list[Message] = []
        self.pending_attachments: list[Attachment] = []
        self.selected_model: str = DEFAULT_SELECTED_MODEL
        self.draft: str = ""
        self.state: SessionState = SessionState.IDLE
        self.is_fetching_url: bool = False

        self._ids = itertools.count(1)
        self._epoch = 0

    @property
    def is_loading(self) -> bool:
        return self.state is SessionState.SENDING

    def _set_state(self, state: SessionState) -> None:
        self.state = state
        if self.on_change:
            self.on_change(state)

    def _alert(self, text: str) -> None:
        logger.info(f"Alert: {text}")
        if self.on_alert:
            self.on_alert(text)

    def _append(self, role: str, content: str, attachments: list[Attachment] | None = None) -> Message:
        message = Message(
            id=str(next(self._ids)),
            role=role,
            content=content,
            attachments=tuple(attachments) if attachments else None,
        )
        self.messages.append(message)
        return message

    def can_submit(self, text: str | None = None) -> bool:
        text = self.draft if text is None else text
        return (bool(text.strip()) or bool(self.pending_attachments)) and not self.is_loading

    async def submit(self, text: str | None = None) -> bool:
        """Send a user message and wait for the reply.

        Args:
            text: Message text. Uses the current draft when omitted.

        Returns:
            True if a message was sent, False if the submit was a no-op.
        """
        if not self.can_submit(text):
            return False

        content = (self.draft if text is None else text).strip()
        attachments = list(self.pending_attachments)

        self._append("user", content, attachments)
        self.pending_attachments = []
        self.draft = ""
        epoch = self._epoch
        reply = ""
        error: str | None = None
        try:
            self._set_state(SessionState.SENDING)
            history = [msg.to_wire() for msg in self.messages]
            reply = await self.api.send_chat(history, self.selected_model)
        except Exception as e:
            logger.error(f"Error sending message: {e}")
            error = str(e) or SEND_FAILED_MESSAGE

        if epoch != self._epoch:
            logger.debug("Discarding response for a reset conversation")
            return True

        # Every send ends in IDLE, even if a state callback raises
        try:
            if error is not None:
                self._set_state(SessionState.ERROR_DISPLAYED)
                self._append("assistant", error)
            else:
                self._append("assistant", reply)
        finally:
            self._set_state(SessionState.IDLE)
        return True

    async def add_file_attachment(self, name: str, data: bytes) -> bool:
        """Upload a file and queue its text as a pending attachment.

        Returns:
            True if the attachment was added.
        """
        if len(data) > MAX_FILE_SIZE:
            self._alert(FILE_TOO_LARGE_ALERT)
            return False

        epoch = self._epoch
        try:
            content = await self.api.upload_file(name, data)
        except ChatApiError as e:
            self._alert(f"Error processing file: {e}")
            return False

        if epoch != self._epoch:
            return False
        self.pending_attachments.append(FileAttachment(name=name, content=content))
        return True

    async def add_url_attachment(self, url: str) -> bool:
        """Fetch a URL and queue its text as a pending attachment.

        Returns:
            True if the attachment was added.
        """
        url = (url or "").strip()
        if not is_http_url(url):
            self._alert(INVALID_URL_ALERT)
            return False

        epoch = self._epoch
        self.is_fetching_url = True
        try:
            content = await self.api.fetch_url(url)
        except ChatApiError as e:
            self._alert(f"Error fetching URL: {e}")
            return False
        finally:
            self.is_fetching_url = False

        if epoch != self._epoch:
            return False
        self.pending_attachments.append(UrlAttachment(url=url, content=content))
        return True

    def remove_attachment(self, index: int) -> None:
        """Drop a pending attachment by position."""
        del self.pending_attachments[index]

    def select_model(self, model: str) -> None:
        """Change the model used for the next send. Ignored while sending.

        Raises:
            ValueError: If the model is not one of the advertised identifiers.
        """
        if model not in ADVERTISED_MODELS:
            raise ValueError(f"Unknown model: {model}")
        if self.is_loading:
            return
        self.selected_model = model

    def reset(self) -> None:
        """Start a new conversation; responses still in flight are discarded."""
        self._epoch += 1
        self.messages = []
        self.pending_attachments = []
        self.draft = ""
        self.is_fetching_url = False
        self._set_state(SessionState.IDLE)
