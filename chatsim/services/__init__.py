"""Service layer for the conversation core."""

from __future__ import annotations

from chatsim.services.base import KeyValueService
from chatsim.services.chat import ChatService
from chatsim.services.messages import MessageLog
from chatsim.services.responder import Responder, ResponderState
from chatsim.services.store import MessageStore
from chatsim.services.theme import ThemeService
from chatsim.services.view import project, render_message

__all__ = (
    "ChatService",
    "KeyValueService",
    "MessageLog",
    "MessageStore",
    "Responder",
    "ResponderState",
    "ThemeService",
    "project",
    "render_message",
)
