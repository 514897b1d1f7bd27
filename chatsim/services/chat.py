"""Chat service exposing the user-facing commands."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

import structlog

from chatsim.lib.exceptions import OversizedPayload
from chatsim.lib.personas import PERSONAS, get_persona
from chatsim.schemas import (
    RECEIVE_CUE,
    ChatView,
    MessageDraft,
    MessageKind,
    PersonaCard,
    Sender,
    SessionState,
)
from chatsim.services.messages import MessageLog
from chatsim.services.responder import Responder
from chatsim.services.store import MessageStore
from chatsim.services.view import project

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from litestar.stores.base import Store

    from chatsim.lib.settings import Settings
    from chatsim.schemas import AudioCue, ChatMessage, Persona

logger = structlog.get_logger()


class ChatService:
    """Handles the commands a chat front end can issue.

    Every command mutates the log through ``MessageLog`` (which persists) and
    callers re-render with ``snapshot``.
    """

    def __init__(
        self,
        log: MessageLog,
        responder: Responder,
        *,
        max_image_bytes: int = 2 * 1024 * 1024,
        text_lead_in: tuple[float, float] = (0.25, 0.55),
        image_lead_in: tuple[float, float] = (0.8, 1.3),
        cancel_on_clear: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self.log = log
        self.responder = responder
        self.max_image_bytes = max_image_bytes
        self.text_lead_in = text_lead_in
        self.image_lead_in = image_lead_in
        self.cancel_on_clear = cancel_on_clear
        self._rng = rng or random.Random()

    @property
    def session(self) -> SessionState:
        return self.log.session

    @property
    def store(self) -> MessageStore:
        return self.log.store

    @property
    def active_persona(self) -> Persona:
        persona = get_persona(self.session.active_persona_id)
        if persona is None:  # pragma: no cover
            msg = f"Active persona {self.session.active_persona_id!r} is not registered"
            raise LookupError(msg)
        return persona

    @classmethod
    async def start(
        cls,
        settings: Settings,
        storage: Store,
        *,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        durable: bool = True,
    ) -> ChatService:
        """Load the persisted log and build a ready service.

        An empty log is seeded with the welcome message.

        Args:
            settings: Application settings.
            storage: Key-value store holding the conversation.
            rng: Random source shared by ids, delays and reply selection.
            sleep: Replacement for ``asyncio.sleep`` in the responder.
            durable: ``False`` when ``storage`` is an in-memory fallback; the
                view then keeps showing the persistence warning.

        Returns:
            The started service.
        """
        rng = rng or random.Random()
        persona_id = settings.chat.DEFAULT_PERSONA if settings.chat.DEFAULT_PERSONA in PERSONAS else "helper"
        store = MessageStore(storage, key=settings.storage.CONVERSATION_KEY, durable=durable)
        log = MessageLog(
            store,
            SessionState(active_persona_id=persona_id),
            user_avatar=settings.chat.USER_AVATAR,
            messages=await store.load(),
            time_format=settings.chat.TIME_FORMAT,
            rng=rng,
        )
        responder_kwargs = {"sleep": sleep} if sleep is not None else {}
        responder = Responder(
            log,
            min_delay=settings.responder.MIN_DELAY_MS / 1000,
            max_delay=settings.responder.MAX_DELAY_MS / 1000,
            rng=rng,
            **responder_kwargs,
        )
        service = cls(
            log,
            responder,
            max_image_bytes=settings.chat.MAX_IMAGE_BYTES,
            text_lead_in=(settings.responder.TEXT_LEAD_IN_MIN_MS / 1000, settings.responder.TEXT_LEAD_IN_MAX_MS / 1000),
            image_lead_in=(
                settings.responder.IMAGE_LEAD_IN_MIN_MS / 1000,
                settings.responder.IMAGE_LEAD_IN_MAX_MS / 1000,
            ),
            cancel_on_clear=settings.responder.CANCEL_ON_CLEAR,
            rng=rng,
        )
        if len(log) == 0:
            await log.append(MessageDraft(sender=Sender.BOT.value, text=settings.chat.WELCOME_TEXT))
        logger.info("Chat service started", messages=len(log), persona_id=persona_id)
        return service

    def snapshot(self, cue: AudioCue | None = None) -> ChatView:
        """Render the current state."""
        persona = self.active_persona
        failure = self.store.last_failure
        return ChatView(
            persona=PersonaCard.from_persona(persona),
            messages=project(self.log, persona, self.log.user_avatar),
            typing=self.responder.typing,
            warning=failure.detail if failure else None,
            cue=cue,
        )

    def receive_cue(self, seen: int | None) -> AudioCue | None:
        """Cue for a poll from a client that has rendered ``seen`` messages.

        Returns ``RECEIVE_CUE`` when the log grew past ``seen`` and ends with a
        bot message.
        """
        if seen is None or len(self.log) <= seen:
            return None
        last = self.log.messages[-1]
        return RECEIVE_CUE if last.sender is Sender.BOT else None

    async def submit_text(self, raw: str) -> ChatMessage | None:
        """Send text typed by the user.

        Blank input is ignored. Otherwise the message is appended and a bot
        reply is scheduled.

        Returns:
            The appended message, or ``None`` for blank input.
        """
        text = raw.strip()
        if not text:
            return None
        message = await self.log.append(MessageDraft(sender=Sender.USER.value, kind=MessageKind.TEXT.value, text=text))
        self.responder.trigger(self.session.active_persona_id, lead_in=self._rng.uniform(*self.text_lead_in))
        return message

    async def upload_image(self, encoded_payload: str, size_bytes: int) -> ChatMessage:
        """Send an image chosen by the user.

        Raises:
            OversizedPayload: If ``size_bytes`` exceeds the configured limit.
            InvalidDraft: If the payload is empty.

        Returns:
            The appended message.
        """
        if size_bytes > self.max_image_bytes:
            logger.info("Rejected oversized image", size_bytes=size_bytes, limit=self.max_image_bytes)
            raise OversizedPayload(size_bytes, self.max_image_bytes)
        message = await self.log.append(
            MessageDraft(sender=Sender.USER.value, kind=MessageKind.IMAGE.value, image_data=encoded_payload),
        )
        self.responder.trigger(self.session.active_persona_id, lead_in=self._rng.uniform(*self.image_lead_in))
        return message

    def select_persona(self, persona_id: str) -> bool:
        """Switch the active persona; unknown ids are ignored."""
        if get_persona(persona_id) is None:
            logger.debug("Ignoring unknown persona", persona_id=persona_id)
            return False
        self.session.active_persona_id = persona_id
        return True

    async def add_reaction_to_last(self, token: str) -> ChatMessage | None:
        return await self.log.add_reaction(token)

    async def delete_message(self, index: int) -> ChatMessage | None:
        return await self.log.delete_at(index)

    async def clear_all(self) -> None:
        if self.cancel_on_clear:
            self.responder.cancel()
        await self.log.clear()
