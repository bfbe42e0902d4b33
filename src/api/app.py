"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
exception handlers and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.chat import router as chat_router
from src.api.routes import AttachmentError, attachment_error_handler
from src.api.routes import router as attachments_router
from src.gateway.config import GatewayConfig, get_gateway_config
from src.gateway.model_map import ADVERTISED_MODELS, MODEL_MAP, validate_model_map
from src.gateway.provider import CompletionProvider
from src.gateway.service import ChatGateway
from src.parsing.url_fetcher import UrlFetcher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting Chat Relay API...")
    validate_model_map(MODEL_MAP, ADVERTISED_MODELS)
    if not app.state.gateway.config.has_credentials:
        logger.warning("OPENAI_API_KEY is not set; /chat will answer with 500 until it is")
    yield
    # Shutdown
    logger.info("Shutting down Chat Relay API...")


def create_app(
    config: GatewayConfig | None = None,
    provider: CompletionProvider | None = None,
    fetch_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Gateway configuration. Loads from environment if not provided.
        provider: Completion provider override (the OpenAI provider otherwise).
        fetch_transport: httpx transport override for the URL fetcher.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Chat Relay API",
        description=(
            "Stateless gateway between the chat UI and a hosted LLM. "
            "Forwards the conversation to the completion provider and returns "
            "the reply; extracts text from uploaded files and fetched URLs "
            "for use as message attachments."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.state.gateway = ChatGateway(config or get_gateway_config(), provider=provider)
    application.state.url_fetcher = UrlFetcher(transport=fetch_transport)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(AttachmentError, attachment_error_handler)

    application.include_router(chat_router)
    application.include_router(attachments_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "chat-relay"}

    return application


app = create_app()
