from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FileAttachment(BaseModel):
    """Text extracted from an uploaded file.

    Attributes:
        type: Discriminator, always "file".
        name: Original filename.
        content: Pre-extracted text content.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["file"] = "file"
    name: str
    content: str


class UrlAttachment(BaseModel):
    """Text extracted from a fetched web page.

    Attributes:
        type: Discriminator, always "url".
        url: The fetched URL.
        content: Pre-extracted page text.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["url"] = "url"
    url: str
    content: str


Attachment = Annotated[FileAttachment | UrlAttachment, Field(discriminator="type")]


class Message(BaseModel):
    """A single entry in the client transcript. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    role: Literal["user", "assistant"]
    timestamp: datetime = Field(default_factory=datetime.now)
    attachments: tuple[Attachment, ...] | None = None

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the `{role, content, attachments?}` shape sent to /chat."""
        return self.model_dump(
            mode="json",
            include={"role", "content", "attachments"},
            exclude_none=True,
        )


class IncomingMessage(BaseModel):
    """A message as received by the gateway.

    Role is left as a free-form string; normalization happens in the gateway.
    """

    role: str
    content: str
    attachments: list[Attachment] | None = None


class ChatRequest(BaseModel):
    """Request payload for the chat endpoint.

    Attributes:
        messages: Full conversation history, oldest first.
        model: Public model identifier; the gateway default is used when omitted.
    """

    messages: list[IncomingMessage]
    model: str | None = None


class ChatResponse(BaseModel):
    """Successful chat reply."""

    message: str


class ErrorResponse(BaseModel):
    """Failure body shared by all endpoints.

    Attributes:
        error: Human readable error message.
        details: Provider-supplied detail, if any.
    """

    error: str
    details: Any | None = None


class ExtractedContent(BaseModel):
    """Text extracted by the upload or fetch-url collaborators."""

    content: str


class FetchUrlRequest(BaseModel):
    """Request payload for the fetch-url endpoint."""

    url: str

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v: str) -> str:
        """Strip whitespace from URL before validation."""
        if isinstance(v, str):
            return v.strip()
        return v
