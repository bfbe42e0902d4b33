"""Test package for Chat Relay.

Structure:
    - unit/: Gateway, parsing and client session logic in isolation
    - integration/: HTTP endpoints and the client session against the real app
    - fakes.py: Provider and web-page doubles

The LLM provider is always faked; no test needs an API key or network access.
Leverages pytest with pytest-check for soft assertions.
"""
