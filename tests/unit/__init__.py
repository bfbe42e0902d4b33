"""Unit tests for individual components in isolation.

Coverage:
    - gateway/: Config, model map, request handling, OpenAI adapter
    - parsing/: PDF, text file, HTML and URL extraction
    - ui/: ChatSession state machine, API client, markdown rendering

Uses mocks for external services. Leverages pytest-check for multiple
assertions per test.
"""
