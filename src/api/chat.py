"""Chat endpoint: forwards the conversation to the completion provider."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.gateway.service import ChatGateway
from src.models.schemas import ChatResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


def get_gateway(request: Request) -> ChatGateway:
    """Return the gateway built by the app factory."""
    return request.app.state.gateway


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(request: Request) -> JSONResponse:
    """Send the conversation to the LLM and return the assistant reply.

    The body is read as raw JSON so the credential check runs before any
    shape validation and malformed bodies map to 400 rather than 422.

    Returns:
        `{message}` with 200, or `{error, details}` with 400/500.
    """
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Chat request body is not valid JSON")
        body = None

    result = await get_gateway(request).handle_chat_request(body)
    return JSONResponse(
        status_code=result.status_code,
        content=result.payload.model_dump(mode="json"),
    )
