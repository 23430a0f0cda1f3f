"""API routes."""

from . import messaging, observability, slack, websocket

__all__ = ["messaging", "observability", "slack", "websocket"]
