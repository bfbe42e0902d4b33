"""FastAPI endpoints for the chat relay.

Endpoints:
    - GET /health: Service health status
    - POST /chat: Forward conversation history, return the assistant reply
    - POST /upload: Extract text from an uploaded file
    - POST /fetch-url: Extract text from a web page
"""

from src.api.app import app, create_app

__all__ = ["app", "create_app"]
