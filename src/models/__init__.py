"""Pydantic models for API requests and responses.

Shared by the gateway and the chat client so both sides agree on the wire
format.

Models:
    - FileAttachment / UrlAttachment: Pre-extracted attachment text
    - Message: Immutable transcript entry held by the client
    - ChatRequest: Incoming chat request payload
    - ChatResponse / ErrorResponse: Outgoing chat reply or failure
    - ExtractedContent: Upload and fetch-url results
"""

from src.models.schemas import (
    Attachment,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    ExtractedContent,
    FetchUrlRequest,
    FileAttachment,
    IncomingMessage,
    Message,
    UrlAttachment,
)

__all__ = [
    "Attachment",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "ExtractedContent",
    "FetchUrlRequest",
    "FileAttachment",
    "IncomingMessage",
    "Message",
    "UrlAttachment",
]
