"""Completion provider adapter for the OpenAI Chat Completions API."""

from typing import Any, Protocol

from openai import AsyncOpenAI


class CompletionProvider(Protocol):
    """Anything that can turn a message list into one completion."""

    async def complete(
        self,
        messages: list[dict[str, str]],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> str | None: ...


class OpenAICompletionProvider:
    """Single-turn, non-streaming chat completions via the OpenAI SDK."""

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        **client_kwargs: Any,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: OpenAI API key.
            base_url: Optional custom API base URL.
            **client_kwargs: Additional kwargs for the AsyncOpenAI client.
        """
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, **client_kwargs)

    async def complete(
        self,
        messages: list[dict[str, str]],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> str | None:
        """Request one completion and return the first choice's text.

        Returns:
            The reply text, or None when the provider returned no choices or
            no text content.
        """
        completion = await self._client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )

        if not completion.choices:
            return None
        return completion.choices[0].message.content
