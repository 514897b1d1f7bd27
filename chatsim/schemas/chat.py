"""Conversation data model, render instructions and request payloads."""

from __future__ import annotations

from enum import Enum

import msgspec

from chatsim.schemas.base import CamelizedBaseStruct

__all__ = (
    "AudioCue",
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


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


class MessageKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class ChatMessage(CamelizedBaseStruct, frozen=True, omit_defaults=True, kw_only=True):
    """A stored conversation message.

    Fields are fixed at creation; only the ``reactions`` list grows.
    """

    id: str
    sender: Sender
    kind: MessageKind
    created_at: str
    avatar_ref: str
    text: str | None = None
    image_data: str | None = None
    reactions: list[str] = msgspec.field(default_factory=list)


class MessageDraft(CamelizedBaseStruct, omit_defaults=True, kw_only=True):
    """Unvalidated input for appending a message.

    ``sender`` and ``kind`` are plain strings so malformed drafts reach the
    log API and are rejected there.
    """

    sender: str
    kind: str = MessageKind.TEXT.value
    text: str | None = None
    image_data: str | None = None


class Persona(CamelizedBaseStruct, frozen=True, kw_only=True):
    """Scripted bot identity."""

    id: str
    display_name: str
    avatar_ref: str
    description: str
    reply_pool: tuple[str, ...]


class PersonaCard(CamelizedBaseStruct, frozen=True, kw_only=True):
    """Persona header shown above the conversation."""

    id: str
    display_name: str
    avatar_ref: str
    description: str

    @classmethod
    def from_persona(cls, persona: Persona) -> PersonaCard:
        return cls(
            id=persona.id,
            display_name=persona.display_name,
            avatar_ref=persona.avatar_ref,
            description=persona.description,
        )


class SessionState(msgspec.Struct, kw_only=True):
    """Transient per-process session state, never persisted."""

    active_persona_id: str


class RenderInstruction(CamelizedBaseStruct, frozen=True, kw_only=True):
    """How one message should be displayed, independent of any UI toolkit."""

    index: int
    message_id: str
    side: Side
    avatar_ref: str
    kind: MessageKind
    timestamp: str
    reactions: tuple[str, ...] = ()
    text: str | None = None
    image_ref: str | None = None


class AudioCue(CamelizedBaseStruct, frozen=True):
    """Tone the presentation layer may play for an event."""

    frequency_hz: int
    duration_ms: int


SEND_CUE = AudioCue(frequency_hz=900, duration_ms=60)
RECEIVE_CUE = AudioCue(frequency_hz=600, duration_ms=70)


class ChatView(CamelizedBaseStruct, kw_only=True):
    """Everything the presentation layer needs to paint the chat."""

    persona: PersonaCard
    messages: list[RenderInstruction]
    typing: str | None = None
    warning: str | None = None
    cue: AudioCue | None = None


class TextMessageRequest(CamelizedBaseStruct):
    """Text submitted from the composer."""

    text: str


class ReactionRequest(CamelizedBaseStruct):
    """Reaction token added to the last message."""

    token: str


class PersonaSelection(CamelizedBaseStruct):
    """Persona chosen in the bot picker."""

    persona_id: str


class ThemePreference(CamelizedBaseStruct):
    theme: Theme
