"""Domain errors raised by the chat core."""

from __future__ import annotations

__all__ = (
    "ChatSimError",
    "InvalidDraft",
    "OversizedPayload",
    "PersistenceFailure",
    "UnknownPersona",
)


class ChatSimError(Exception):
    """Base class for chat simulator errors."""

    detail: str = "Chat error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.detail
        super().__init__(self.detail)


class PersistenceFailure(ChatSimError):
    """The durable store could not be read or written.

    Never raised through a command; the store records it and keeps going
    with in-memory state.
    """

    detail = "Conversation could not be saved; changes are kept in memory only."


class InvalidDraft(ChatSimError):
    """A message draft does not have a valid shape."""

    detail = "Invalid message draft"


class OversizedPayload(ChatSimError):
    """An uploaded image exceeds the size limit."""

    detail = "Image is too large"

    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(f"Please choose an image smaller than {limit_bytes // (1024 * 1024)}MB ({size_bytes} bytes given).")


class UnknownPersona(ChatSimError):
    """No persona is registered under the requested id."""

    detail = "Unknown persona"

    def __init__(self, persona_id: str) -> None:
        self.persona_id = persona_id
        super().__init__(f"Unknown persona: {persona_id}")
