"""Chat Relay - browser chat UI in front of a hosted LLM.

Combines FastAPI for the gateway endpoints, the OpenAI SDK for completions,
NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - gateway: Request validation, model mapping, provider call
    - api: HTTP endpoints (chat, upload, fetch-url)
    - parsing: Text extraction for file and URL attachments
    - ui: Chat session state machine and web page
    - models: Wire schemas shared by client and server
"""

__version__ = "0.1.0"
