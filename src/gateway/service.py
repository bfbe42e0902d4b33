"""Chat gateway: one validated request in, one provider completion out.

The gateway is stateless across requests. Configuration and the provider are
injected at construction; nothing is read from module globals.
"""

import logging
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.gateway.config import GatewayConfig
from src.gateway.errors import (
    ConfigurationError,
    EmptyResponseError,
    GatewayError,
    ProviderError,
    ValidationError,
)
from src.gateway.model_map import resolve_model
from src.gateway.provider import CompletionProvider, OpenAICompletionProvider
from src.models.schemas import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    FileAttachment,
    IncomingMessage,
)

logger = logging.getLogger(__name__)


class ChatResult(BaseModel):
    """Outcome of a chat request: HTTP status plus JSON body."""

    status_code: int
    payload: ChatResponse | ErrorResponse

    @property
    def ok(self) -> bool:
        return self.status_code == 200


def normalize_role(role: str) -> str:
    """Collapse any role other than "assistant" to "user"."""
    return "assistant" if role == "assistant" else "user"


def render_content(message: IncomingMessage) -> str:
    """Append attachment text to the message body as labelled blocks."""
    if not message.attachments:
        return message.content

    parts = [message.content] if message.content else []
    for attachment in message.attachments:
        if isinstance(attachment, FileAttachment):
            label = f"[Attached file: {attachment.name}]"
        else:
            label = f"[Attached URL: {attachment.url}]"
        parts.append(f"{label}\n{attachment.content}")
    return "\n\n".join(parts)


def format_messages(messages: list[IncomingMessage]) -> list[dict[str, str]]:
    """Convert incoming messages to the provider's message format."""
    return [
        {"role": normalize_role(msg.role), "content": render_content(msg)}
        for msg in messages
    ]


def _parse_request(body: Any) -> ChatRequest:
    """Validate the raw JSON body.

    Raises:
        ValidationError: If `messages` is missing, not a list, or holds
            malformed entries.
    """
    if not isinstance(body, dict) or not isinstance(body.get("messages"), list):
        raise ValidationError("Messages array is required")

    try:
        return ChatRequest.model_validate(body)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"Invalid request field '{location}': {first['msg']}") from e


def _provider_details(exc: Exception) -> Any | None:
    """Pull the provider-supplied error body off an SDK exception, if any."""
    return getattr(exc, "body", None)


class ChatGateway:
    """Translates a chat-history request into one provider completion call."""

    def __init__(
        self,
        config: GatewayConfig,
        provider: CompletionProvider | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            config: Gateway configuration, built once at startup.
            provider: Completion provider. Built from `config` on first use
                when not supplied.
        """
        self._config = config
        self._provider = provider

    @property
    def config(self) -> GatewayConfig:
        return self._config

    def _get_provider(self) -> CompletionProvider:
        if self._provider is None:
            self._provider = OpenAICompletionProvider(
                api_key=self._config.api_key,
                base_url=self._config.base_url,
            )
        return self._provider

    async def complete(self, body: Any) -> str:
        """Run one chat request and return the assistant's reply text.

        Args:
            body: Decoded JSON request body (None when the body was not JSON).

        Returns:
            The first choice's text content.

        Raises:
            ConfigurationError: API key not configured.
            ValidationError: Malformed request body.
            ProviderError: The completion call failed.
            EmptyResponseError: The provider returned no text.
        """
        if not self._config.has_credentials:
            raise ConfigurationError("OpenAI API key is not configured")

        request = _parse_request(body)
        provider_model = resolve_model(request.model, self._config.default_model)
        logger.debug(f"Resolved model {request.model!r} -> {provider_model}")

        try:
            reply = await self._get_provider().complete(
                messages=format_messages(request.messages),
                model=provider_model,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise ProviderError(
                str(e) or "Failed to get response from OpenAI",
                details=_provider_details(e),
            ) from e

        if not reply:
            raise EmptyResponseError("No response from OpenAI")

        return reply

    async def handle_chat_request(self, body: Any) -> ChatResult:
        """Run one chat request and package the outcome for HTTP.

        Returns:
            ChatResult with status 200 and `{message}`, or the error's status
            and `{error, details}`.
        """
        try:
            reply = await self.complete(body)
        except GatewayError as e:
            if not isinstance(e, ProviderError):
                logger.warning(f"Chat request rejected ({e.status_code}): {e.message}")
            return ChatResult(
                status_code=e.status_code,
                payload=ErrorResponse(error=e.message, details=e.details),
            )

        return ChatResult(status_code=200, payload=ChatResponse(message=reply))
