"""Chat gateway: the stateless bridge between the chat UI and the LLM provider.

Responsibilities:
    - Request shape validation and role normalization
    - Public model identifier -> provider model resolution
    - One non-streaming completion call per request
    - Mapping every failure to a JSON error body and status code

Holds no data across requests. Configuration is injected, not global.
"""

from src.gateway.config import GatewayConfig, get_gateway_config
from src.gateway.errors import (
    ConfigurationError,
    EmptyResponseError,
    GatewayError,
    ProviderError,
    ValidationError,
)
from src.gateway.service import ChatGateway, ChatResult

__all__ = [
    "ChatGateway",
    "ChatResult",
    "ConfigurationError",
    "EmptyResponseError",
    "GatewayConfig",
    "GatewayError",
    "ProviderError",
    "ValidationError",
    "get_gateway_config",
]
