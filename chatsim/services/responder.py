"""Simulated bot that answers with a canned reply after a random delay."""

from __future__ import annotations

import asyncio
import random
from enum import Enum
from typing import TYPE_CHECKING

import structlog

from chatsim.lib.personas import get_persona
from chatsim.schemas import MessageDraft, MessageKind, Persona, Sender

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from chatsim.schemas import ChatMessage
    from chatsim.services.messages import MessageLog

logger = structlog.get_logger()


def _log_reply_failure(task: asyncio.Task[ChatMessage | None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Bot reply failed", error=str(exc), exc_info=exc)


class ResponderState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


class Responder:
    """Two-state reply scheduler.

    ``trigger`` moves to ``PENDING`` and schedules one reply. A second
    trigger while pending schedules another reply without cancelling the
    first; only the most recent timer is tracked for ``cancel``. When a timer
    fires the reply is appended through the message log.
    """

    def __init__(
        self,
        log: MessageLog,
        *,
        min_delay: float = 0.7,
        max_delay: float = 2.2,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.log = log
        self.min_delay = min_delay
        self.max_delay = max_delay
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._timer: asyncio.Task[ChatMessage | None] | None = None
        self._in_flight: set[asyncio.Task[ChatMessage | None]] = set()
        self._tasks: set[asyncio.Task[ChatMessage | None]] = set()
        self._typing_persona: Persona | None = None

    @property
    def state(self) -> ResponderState:
        return ResponderState.PENDING if self._in_flight else ResponderState.IDLE

    @property
    def typing(self) -> str | None:
        """Typing indicator line while a reply is pending."""
        if self.state is ResponderState.IDLE or self._typing_persona is None:
            return None
        return f"{self._typing_persona.display_name} is typing..."

    def trigger(self, persona_id: str, lead_in: float = 0.0) -> bool:
        """Schedule a reply from ``persona_id``.

        Args:
            persona_id: Persona whose reply pool is used.
            lead_in: Extra seconds to wait before the typing delay.

        Returns:
            ``False`` when the persona is unknown and nothing was scheduled.
        """
        persona = get_persona(persona_id)
        if persona is None:
            logger.debug("Ignoring reply trigger for unknown persona", persona_id=persona_id)
            return False

        delay = lead_in + self._rng.uniform(self.min_delay, self.max_delay)
        task = asyncio.get_running_loop().create_task(self._reply_after(persona, delay))
        self._in_flight.add(task)
        self._tasks.add(task)
        task.add_done_callback(self._in_flight.discard)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(_log_reply_failure)
        self._timer = task
        self._typing_persona = persona
        logger.debug("Reply scheduled", persona_id=persona.id, delay=round(delay, 3))
        return True

    def cancel(self) -> bool:
        """Cancel the tracked pending reply, if any."""
        timer, self._timer = self._timer, None
        if timer is None or timer.done():
            return False
        timer.cancel()
        self._in_flight.discard(timer)
        return True

    async def wait_idle(self) -> None:
        """Wait until every scheduled reply has landed or been cancelled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel every scheduled reply."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._timer = None

    async def _reply_after(self, persona: Persona, delay: float) -> ChatMessage | None:
        await self._sleep(delay)
        current = asyncio.current_task()
        self._in_flight.discard(current)  # type: ignore[arg-type]
        if self._timer is current:
            self._timer = None
        reply = self._rng.choice(persona.reply_pool)
        message = await self.log.append(
            MessageDraft(sender=Sender.BOT.value, kind=MessageKind.TEXT.value, text=reply),
        )
        logger.info("Bot replied", persona_id=persona.id, message_id=message.id)
        return message
