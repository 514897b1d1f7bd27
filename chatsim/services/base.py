"""Base class for services backed by a Litestar key-value store."""

from __future__ import annotations

from typing import TYPE_CHECKING

import msgspec
import structlog

from chatsim.lib.exceptions import PersistenceFailure

if TYPE_CHECKING:
    from litestar.stores.base import Store

logger = structlog.get_logger()


class KeyValueService:
    """Reads and writes single records in a durable key-value slot.

    Storage errors never propagate: they are logged, remembered in
    ``last_failure`` and reported to the caller as a miss or a failed write.
    A service built with ``durable=False`` sits on a fallback store and keeps
    reporting the failure even after writes succeed.
    """

    __slots__ = ("durable", "last_failure", "storage")

    def __init__(self, storage: Store, *, durable: bool = True) -> None:
        self.storage = storage
        self.durable = durable
        self.last_failure: PersistenceFailure | None = None if durable else PersistenceFailure()

    async def read(self, key: str) -> bytes | None:
        """Fetch the raw value stored under ``key``.

        Unreadable entries, including ones the store cannot decode, are
        reported as missing.
        """
        try:
            return await self.storage.get(key)
        except (OSError, msgspec.MsgspecError) as e:
            self.last_failure = PersistenceFailure()
            logger.warning("Storage read failed", key=key, error=str(e))
            return None

    async def write(self, key: str, value: bytes | str) -> bool:
        """Store ``value`` under ``key``.

        Returns:
            ``True`` when the write reached the store.
        """
        try:
            await self.storage.set(key, value)
        except (OSError, msgspec.MsgspecError) as e:
            self.last_failure = PersistenceFailure()
            logger.warning("Storage write failed", key=key, error=str(e))
            return False
        if self.durable:
            self.last_failure = None
        return True
