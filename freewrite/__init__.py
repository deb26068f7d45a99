"""
Freewrite application package.

This package contains the editor window, the AI chat panel, conversation
persistence, and the OpenAI chat-completion adapter behind the assistant.
"""

from .config import AppConfig
