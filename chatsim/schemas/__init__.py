"""Data schemas using msgspec for high-performance serialization."""

from chatsim.schemas.base import BaseStruct, CamelizedBaseStruct
from chatsim.schemas.chat import (
    RECEIVE_CUE,
    SEND_CUE,
    AudioCue,
    ChatMessage,
    ChatView,
    MessageDraft,
    MessageKind,
    Persona,
    PersonaCard,
    PersonaSelection,
    ReactionRequest,
    RenderInstruction,
    Sender,
    SessionState,
    Side,
    TextMessageRequest,
    Theme,
    ThemePreference,
)

__all__ = (
    "RECEIVE_CUE",
    "SEND_CUE",
    "AudioCue",
    "BaseStruct",
    "CamelizedBaseStruct",
    "ChatMessage",
    "ChatView",
    "MessageDraft",
    "MessageKind",
    "Persona",
    "PersonaCard",
    "PersonaSelection",
    "ReactionRequest",
    "RenderInstruction",
    "Sender",
    "SessionState",
    "Side",
    "TextMessageRequest",
    "Theme",
    "ThemePreference",
)
