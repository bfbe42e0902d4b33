"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Transcript display with markdown rendering for replies
    - File and URL attachments queued for the next message
    - Model selection and new-chat reset

All state lives in ChatSession (session.py); the page only renders it.
"""
