"""Static help assistant for the dashboard."""

from src.assistant.responses import DEFAULT_RESPONSE, GREETING, respond

__all__ = ["DEFAULT_RESPONSE", "GREETING", "respond"]
