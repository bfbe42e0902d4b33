"""Integration tests for components working together as a system.

Coverage:
    - /chat, /upload, /fetch-url and /health through the FastAPI app
    - ChatSession driving the real app over ASGITransport

The completion provider and remote web pages are stubbed.
"""
