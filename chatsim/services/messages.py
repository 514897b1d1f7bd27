"""Mutation operations on the in-memory conversation log."""

from __future__ import annotations

import random
import time
from datetime import datetime
from typing import TYPE_CHECKING

import structlog

from chatsim.lib.exceptions import InvalidDraft
from chatsim.lib.personas import get_persona
from chatsim.schemas import ChatMessage, MessageDraft, MessageKind, Sender

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from chatsim.schemas import SessionState
    from chatsim.services.store import MessageStore

logger = structlog.get_logger()


def _validate(draft: MessageDraft) -> tuple[Sender, MessageKind]:
    try:
        sender = Sender(draft.sender)
        kind = MessageKind(draft.kind)
    except ValueError as e:
        msg = f"Unsupported sender or kind: {draft.sender!r}/{draft.kind!r}"
        raise InvalidDraft(msg) from e
    if kind is MessageKind.TEXT and draft.text is None:
        msg = "Text drafts need text"
        raise InvalidDraft(msg)
    if kind is MessageKind.IMAGE and not draft.image_data:
        msg = "Image drafts need image data"
        raise InvalidDraft(msg)
    return sender, kind


class MessageLog:
    """Owns the ordered message list and persists it after every change.

    Mutations are applied to memory first and then written through the
    store; a failed write leaves the in-memory change in place.
    """

    def __init__(
        self,
        store: MessageStore,
        session: SessionState,
        *,
        user_avatar: str,
        messages: list[ChatMessage] | None = None,
        clock: Callable[[], datetime] = datetime.now,
        time_format: str = "%H:%M",
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.session = session
        self.user_avatar = user_avatar
        self._messages: list[ChatMessage] = list(messages or [])
        self._clock = clock
        self._time_format = time_format
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self._messages)

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """Snapshot of the log in order."""
        return tuple(self._messages)

    def _new_id(self) -> str:
        return f"m_{time.time_ns() // 1_000_000}_{self._rng.randrange(9999)}"

    def _avatar_for(self, sender: Sender) -> str:
        if sender is Sender.USER:
            return self.user_avatar
        persona = get_persona(self.session.active_persona_id)
        return persona.avatar_ref if persona else ""

    async def append(self, draft: MessageDraft) -> ChatMessage:
        """Create a message from ``draft`` and add it to the end of the log.

        Args:
            draft: Sender, kind and payload of the new message.

        Raises:
            InvalidDraft: If sender or kind is not recognised, or the payload
                for the kind is missing. The log is left untouched.

        Returns:
            The stored message.
        """
        sender, kind = _validate(draft)
        message = ChatMessage(
            id=self._new_id(),
            sender=sender,
            kind=kind,
            text=draft.text if kind is MessageKind.TEXT else None,
            image_data=draft.image_data if kind is MessageKind.IMAGE else None,
            created_at=self._clock().strftime(self._time_format),
            avatar_ref=self._avatar_for(sender),
        )
        self._messages.append(message)
        logger.debug("Message appended", message_id=message.id, sender=sender.value, kind=kind.value)
        await self.store.persist(self._messages)
        return message

    async def delete_at(self, index: int) -> ChatMessage | None:
        """Remove the message at ``index``.

        Returns:
            The removed message, or ``None`` when the index is out of range.
        """
        if not 0 <= index < len(self._messages):
            return None
        message = self._messages.pop(index)
        logger.debug("Message deleted", message_id=message.id, index=index)
        await self.store.persist(self._messages)
        return message

    async def add_reaction(self, token: str) -> ChatMessage | None:
        """Append ``token`` to the reactions of the last message."""
        if not self._messages:
            return None
        last = self._messages[-1]
        last.reactions.append(token)
        await self.store.persist(self._messages)
        return last

    async def clear(self) -> None:
        self._messages.clear()
        logger.info("Conversation cleared")
        await self.store.persist(self._messages)
