"""Durable storage for the conversation log."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import msgspec
import structlog

from chatsim.schemas import ChatMessage
from chatsim.services.base import KeyValueService

if TYPE_CHECKING:
    from collections.abc import Sequence

    from litestar.stores.base import Store

logger = structlog.get_logger()

_decoder = msgspec.json.Decoder(list[ChatMessage])
_encoder = msgspec.json.Encoder()


class MessageStore(KeyValueService):
    """Encodes the whole conversation log as one JSON array under a single key.

    Writes are serialized so the stored log always reflects the latest
    in-memory state, even when a bot reply lands during another command.
    """

    __slots__ = ("_write_lock", "key")

    def __init__(self, storage: Store, key: str = "conversation-log", *, durable: bool = True) -> None:
        super().__init__(storage, durable=durable)
        self.key = key
        self._write_lock = asyncio.Lock()

    async def load(self) -> list[ChatMessage]:
        """Load the persisted conversation log.

        Missing, unreadable or corrupt data yields an empty log.

        Returns:
            The stored messages in order.
        """
        raw = await self.read(self.key)
        if not raw:
            return []
        try:
            return _decoder.decode(raw)
        except (msgspec.DecodeError, msgspec.ValidationError) as e:
            logger.warning("Discarding corrupt conversation log", key=self.key, error=str(e))
            return []

    async def persist(self, messages: Sequence[ChatMessage]) -> bool:
        """Write the full conversation log.

        Args:
            messages: Log to store, in order. It is encoded once earlier
                writes have finished, so passing the live list persists its
                latest state.

        Returns:
            ``True`` when the write succeeded. Failures are logged and
            recorded in ``last_failure`` instead of raised.
        """
        async with self._write_lock:
            return await self.write(self.key, _encoder.encode(list(messages)))
