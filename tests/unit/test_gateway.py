"""Unit tests for ChatGateway request handling."""

from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest
import pytest_check as check

from src.gateway.config import GatewayConfig
from src.gateway.errors import (
    ConfigurationError,
    EmptyResponseError,
    ProviderError,
    ValidationError,
)
from src.gateway.service import ChatGateway, format_messages, normalize_role
from src.models.schemas import IncomingMessage
from tests.fakes import FakeProvider


def _rate_limit_error() -> openai.RateLimitError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return openai.RateLimitError(
        "Rate limit reached for gpt-4",
        response=httpx.Response(429, request=request),
        body={"code": "rate_limit_exceeded"},
    )


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def gateway(provider: FakeProvider) -> ChatGateway:
    return ChatGateway(GatewayConfig(api_key="sk-test"), provider=provider)


class TestHandleChatRequest:
    """Tests for the success path and result packaging."""

    async def test_end_to_end_default_model(
        self, gateway: ChatGateway, provider: FakeProvider
    ) -> None:
        """Single user message with no model goes out with defaults and comes back as message."""
        result = await gateway.handle_chat_request(
            {"messages": [{"role": "user", "content": "hi"}]}
        )

        check.equal(result.status_code, 200)
        check.equal(result.payload.model_dump(), {"message": "hello!"})
        check.equal(len(provider.calls), 1)
        call = provider.calls[0]
        check.equal(call["model"], "gpt-4")
        check.equal(call["messages"], [{"role": "user", "content": "hi"}])
        check.equal(call["temperature"], 0.7)
        check.equal(call["max_tokens"], 2000)

    async def test_history_is_forwarded_in_order(
        self, gateway: ChatGateway, provider: FakeProvider
    ) -> None:
        messages = [
            {"role": "user", "content": "A"},
            {"role": "assistant", "content": "B"},
            {"role": "user", "content": "C"},
        ]

        await gateway.handle_chat_request({"messages": messages, "model": "gpt-4"})

        assert provider.calls[0]["messages"] == messages

    @pytest.mark.parametrize("role", ["system", "tool", "USER", "Assistant", ""])
    async def test_non_assistant_roles_become_user(
        self, gateway: ChatGateway, provider: FakeProvider, role: str
    ) -> None:
        await gateway.handle_chat_request({"messages": [{"role": role, "content": "x"}]})

        assert provider.calls[0]["messages"][0]["role"] == "user"

    async def test_assistant_role_is_kept(
        self, gateway: ChatGateway, provider: FakeProvider
    ) -> None:
        await gateway.handle_chat_request(
            {"messages": [{"role": "assistant", "content": "earlier reply"}]}
        )

        assert provider.calls[0]["messages"][0]["role"] == "assistant"

    @pytest.mark.parametrize(
        "model,expected",
        [("gpt-4", "gpt-4"), ("gemini-2.5-pro", "gpt-4"), ("claude-3", "gpt-4"), ("foo", "gpt-4")],
    )
    async def test_model_resolution(
        self, gateway: ChatGateway, provider: FakeProvider, model: str, expected: str
    ) -> None:
        await gateway.handle_chat_request(
            {"messages": [{"role": "user", "content": "hi"}], "model": model}
        )

        assert provider.calls[0]["model"] == expected

    async def test_null_model_uses_default(
        self, gateway: ChatGateway, provider: FakeProvider
    ) -> None:
        await gateway.handle_chat_request(
            {"messages": [{"role": "user", "content": "hi"}], "model": None}
        )

        assert provider.calls[0]["model"] == "gpt-4"

    async def test_configured_sampling_settings_are_used(self, provider: FakeProvider) -> None:
        gateway = ChatGateway(
            GatewayConfig(api_key="sk-test", temperature=0.2, max_tokens=300),
            provider=provider,
        )

        await gateway.handle_chat_request({"messages": [{"role": "user", "content": "hi"}]})

        check.equal(provider.calls[0]["temperature"], 0.2)
        check.equal(provider.calls[0]["max_tokens"], 300)


class TestConfigurationCheck:
    """Credential is checked before anything else."""

    @pytest.mark.parametrize(
        "body",
        [{"messages": [{"role": "user", "content": "hi"}]}, {}, None, {"messages": "nope"}],
    )
    async def test_missing_key_returns_500_without_provider_call(
        self, provider: FakeProvider, body: object
    ) -> None:
        gateway = ChatGateway(GatewayConfig(api_key=None), provider=provider)

        result = await gateway.handle_chat_request(body)

        check.equal(result.status_code, 500)
        check.equal(result.payload.error, "OpenAI API key is not configured")
        check.equal(provider.calls, [])

    async def test_complete_raises_configuration_error(self, provider: FakeProvider) -> None:
        gateway = ChatGateway(GatewayConfig(api_key=""), provider=provider)

        with pytest.raises(ConfigurationError):
            await gateway.complete({"messages": []})


class TestRequestValidation:
    """Malformed bodies are rejected with 400 and never reach the provider."""

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"model": "gpt-4"},
            {"messages": None},
            {"messages": "hi"},
            {"messages": {"role": "user", "content": "hi"}},
            None,
            ["not", "an", "object"],
        ],
    )
    async def test_missing_or_non_list_messages(
        self, gateway: ChatGateway, provider: FakeProvider, body: object
    ) -> None:
        result = await gateway.handle_chat_request(body)

        check.equal(result.status_code, 400)
        check.equal(result.payload.error, "Messages array is required")
        check.equal(provider.calls, [])

    @pytest.mark.parametrize(
        "message",
        [{"content": "no role"}, {"role": "user"}, {"role": "user", "content": None}, "hi"],
    )
    async def test_malformed_message_entries(
        self, gateway: ChatGateway, provider: FakeProvider, message: object
    ) -> None:
        result = await gateway.handle_chat_request({"messages": [message]})

        check.equal(result.status_code, 400)
        check.is_in("messages.0", result.payload.error)
        check.equal(provider.calls, [])

    async def test_complete_raises_validation_error(self, gateway: ChatGateway) -> None:
        with pytest.raises(ValidationError, match="Messages array is required"):
            await gateway.complete({"messages": "x"})


class TestProviderFailures:
    async def test_provider_exception_returns_500_with_message(
        self, gateway: ChatGateway, provider: FakeProvider
    ) -> None:
        provider.error = RuntimeError("connection reset")

        result = await gateway.handle_chat_request({"messages": [{"role": "user", "content": "hi"}]})

        check.equal(result.status_code, 500)
        check.equal(result.payload.error, "connection reset")
        check.is_none(result.payload.details)

    async def test_provider_details_are_passed_through(
        self, gateway: ChatGateway, provider: FakeProvider
    ) -> None:
        provider.error = _rate_limit_error()

        result = await gateway.handle_chat_request({"messages": [{"role": "user", "content": "hi"}]})

        check.equal(result.status_code, 500)
        check.equal(result.payload.error, "Rate limit reached for gpt-4")
        check.equal(result.payload.details, {"code": "rate_limit_exceeded"})

    async def test_exception_without_message_uses_fallback(
        self, gateway: ChatGateway, provider: FakeProvider
    ) -> None:
        provider.error = RuntimeError()

        result = await gateway.handle_chat_request({"messages": [{"role": "user", "content": "hi"}]})

        assert result.payload.error == "Failed to get response from OpenAI"

    async def test_provider_is_called_once_without_retry(
        self, gateway: ChatGateway, provider: FakeProvider
    ) -> None:
        provider.error = TimeoutError("timed out")

        await gateway.handle_chat_request({"messages": [{"role": "user", "content": "hi"}]})

        assert len(provider.calls) == 1

    async def test_complete_raises_provider_error(
        self, gateway: ChatGateway, provider: FakeProvider
    ) -> None:
        provider.error = RuntimeError("boom")

        with pytest.raises(ProviderError) as exc_info:
            await gateway.complete({"messages": [{"role": "user", "content": "hi"}]})

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.parametrize("reply", [None, ""])
    async def test_empty_reply_returns_500(
        self, gateway: ChatGateway, provider: FakeProvider, reply: str | None
    ) -> None:
        provider.reply = reply

        result = await gateway.handle_chat_request({"messages": [{"role": "user", "content": "hi"}]})

        check.equal(result.status_code, 500)
        check.equal(result.payload.error, "No response from OpenAI")

    async def test_complete_raises_empty_response_error(
        self, gateway: ChatGateway, provider: FakeProvider
    ) -> None:
        provider.reply = None

        with pytest.raises(EmptyResponseError):
            await gateway.complete({"messages": [{"role": "user", "content": "hi"}]})


class TestProviderConstruction:
    @patch("src.gateway.service.OpenAICompletionProvider")
    async def test_provider_built_lazily_from_config(self, mock_provider_class: MagicMock) -> None:
        gateway = ChatGateway(
            GatewayConfig(api_key="sk-lazy", base_url="http://proxy.local/v1")
        )
        mock_provider_class.assert_not_called()

        mock_provider_class.return_value = FakeProvider(reply="ok")
        await gateway.handle_chat_request({"messages": [{"role": "user", "content": "hi"}]})
        await gateway.handle_chat_request({"messages": [{"role": "user", "content": "again"}]})

        mock_provider_class.assert_called_once_with(
            api_key="sk-lazy", base_url="http://proxy.local/v1"
        )

    @patch("src.gateway.service.OpenAICompletionProvider")
    async def test_no_provider_built_without_key(self, mock_provider_class: MagicMock) -> None:
        gateway = ChatGateway(GatewayConfig(api_key=None))

        await gateway.handle_chat_request({"messages": [{"role": "user", "content": "hi"}]})

        mock_provider_class.assert_not_called()


class TestFormatMessages:
    def test_normalize_role(self) -> None:
        check.equal(normalize_role("assistant"), "assistant")
        check.equal(normalize_role("system"), "user")
        check.equal(normalize_role("user"), "user")

    def test_attachments_are_appended_to_content(self) -> None:
        message = IncomingMessage.model_validate(
            {
                "role": "user",
                "content": "Summarize these",
                "attachments": [
                    {"type": "file", "name": "notes.txt", "content": "file body"},
                    {"type": "url", "url": "https://example.com", "content": "page body"},
                ],
            }
        )

        [formatted] = format_messages([message])

        assert formatted["content"] == (
            "Summarize these\n\n"
            "[Attached file: notes.txt]\nfile body\n\n"
            "[Attached URL: https://example.com]\npage body"
        )

    def test_attachment_only_message(self) -> None:
        message = IncomingMessage.model_validate(
            {
                "role": "user",
                "content": "",
                "attachments": [{"type": "file", "name": "a.md", "content": "# A"}],
            }
        )

        [formatted] = format_messages([message])

        assert formatted == {"role": "user", "content": "[Attached file: a.md]\n# A"}
