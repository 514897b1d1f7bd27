from __future__ import annotations

import asyncio
import os
import random
import tempfile
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

import pytest
from litestar.stores.memory import MemoryStore

# Settings are cached on first use, so the test environment is fixed before
# anything from chatsim is imported.
os.environ["CHAT_DATA_DIR"] = tempfile.mkdtemp(prefix="chatsim-tests-")
os.environ["RESPONDER_MIN_DELAY_MS"] = "0"
os.environ["RESPONDER_MAX_DELAY_MS"] = "5"
os.environ["RESPONDER_TEXT_LEAD_IN_MIN_MS"] = "0"
os.environ["RESPONDER_TEXT_LEAD_IN_MAX_MS"] = "5"
os.environ["RESPONDER_IMAGE_LEAD_IN_MIN_MS"] = "0"
os.environ["RESPONDER_IMAGE_LEAD_IN_MAX_MS"] = "5"

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from chatsim.lib.settings import Settings
    from chatsim.services.chat import ChatService


class SleepRecorder:
    """Stand-in for ``asyncio.sleep`` that records delays and only yields once."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


class FailingStore(MemoryStore):
    """Memory store whose reads and writes can be switched to fail."""

    def __init__(self, *, fail_reads: bool = False, fail_writes: bool = True) -> None:
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    async def get(self, key: str, renew_for: int | timedelta | None = None) -> bytes | None:
        if self.fail_reads:
            msg = "storage unavailable"
            raise OSError(msg)
        return await super().get(key, renew_for)

    async def set(self, key: str, value: str | bytes, expires_in: int | timedelta | None = None) -> None:
        if self.fail_writes:
            msg = "quota exceeded"
            raise OSError(msg)
        await super().set(key, value, expires_in)


@pytest.fixture
def settings() -> Settings:
    from chatsim.lib.settings import get_settings

    return get_settings()


@pytest.fixture
def storage() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def fixed_clock() -> datetime:
    return datetime(2024, 5, 17, 9, 5, 30)


@pytest.fixture
async def chat_service(
    settings: Settings,
    storage: MemoryStore,
    rng: random.Random,
    sleeper: SleepRecorder,
) -> AsyncGenerator[ChatService, None]:
    from chatsim.services.chat import ChatService

    service = await ChatService.start(settings, storage, rng=rng, sleep=sleeper)
    yield service
    await service.responder.aclose()
