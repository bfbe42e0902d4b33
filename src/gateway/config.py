"""Gateway configuration with environment variable loading.

Pydantic-based configuration for the chat gateway. Built once at process
start and passed into the app factory; a missing API key is reported per
request instead of failing construction.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from src.gateway.model_map import DEFAULT_MODEL

# Load environment variables from .env file
load_dotenv()


class GatewayConfig(BaseModel):
    """Configuration for the chat gateway.

    Supports OpenAI and any OpenAI-compatible API via LLM_BASE_URL.

    Attributes:
        api_key: API key for the completion provider (None when unset).
        base_url: API base URL (None for OpenAI default).
        default_model: Public model identifier used when a request names none.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
    """

    api_key: str | None = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", os.getenv("LLM_API_KEY")),
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    default_model: str = Field(
        default=DEFAULT_MODEL,
        description="Model used when the request does not name one",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=2000,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )

    @field_validator("api_key")
    @classmethod
    def normalize_api_key(cls, v: str | None) -> str | None:
        """Strip the API key; blank values count as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def has_credentials(self) -> bool:
        return self.api_key is not None


def get_gateway_config() -> GatewayConfig:
    """Create gateway configuration from environment.

    Returns:
        Configured GatewayConfig instance.
    """
    return GatewayConfig()
