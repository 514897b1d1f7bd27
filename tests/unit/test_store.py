from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from litestar.stores.memory import MemoryStore

from chatsim.lib.exceptions import PersistenceFailure
from chatsim.schemas import MessageDraft, SessionState
from chatsim.server.deps import create_storage
from chatsim.services.messages import MessageLog
from chatsim.services.store import MessageStore
from tests.conftest import FailingStore

if TYPE_CHECKING:
    from datetime import timedelta
    from pathlib import Path


async def test_load_missing_log_is_empty(storage: MemoryStore) -> None:
    assert await MessageStore(storage).load() == []


async def test_load_corrupt_log_is_empty(storage: MemoryStore) -> None:
    await storage.set("conversation-log", b"{not json")

    assert await MessageStore(storage).load() == []


async def test_load_log_with_wrong_shape_is_empty(storage: MemoryStore) -> None:
    await storage.set("conversation-log", b'[{"id": 1, "sender": "alien"}]')

    assert await MessageStore(storage).load() == []


async def test_round_trip_preserves_every_field(storage: MemoryStore) -> None:
    store = MessageStore(storage)
    log = MessageLog(store, SessionState(active_persona_id="funny"), user_avatar="me.png")
    await log.append(MessageDraft(sender="user", kind="text", text="hello"))
    await log.append(MessageDraft(sender="bot", kind="text", text="hi there"))
    await log.append(MessageDraft(sender="user", kind="image", image_data="data:image/png;base64,AAAA"))
    await log.add_reaction("👍")
    await log.add_reaction("👍")
    await log.delete_at(1)

    assert await store.persist(log.messages)
    reloaded = await MessageStore(storage).load()

    assert reloaded == list(log.messages)
    assert reloaded[-1].reactions == ["👍", "👍"]
    assert reloaded[-1].text is None


async def test_encoded_log_uses_camel_case_keys(storage: MemoryStore) -> None:
    store = MessageStore(storage)
    log = MessageLog(store, SessionState(active_persona_id="helper"), user_avatar="me.png")
    await log.append(MessageDraft(sender="user", kind="image", image_data="data:image/png;base64,AAAA"))

    raw = await storage.get("conversation-log")

    assert raw is not None
    assert b'"imageData"' in raw
    assert b'"createdAt"' in raw
    assert b'"avatarRef"' in raw


async def test_write_failure_is_recorded_not_raised() -> None:
    store = MessageStore(FailingStore())

    assert await store.persist([]) is False
    assert isinstance(store.last_failure, PersistenceFailure)


async def test_successful_write_clears_failure() -> None:
    storage = FailingStore()
    store = MessageStore(storage)
    await store.persist([])

    storage.fail_writes = False

    assert await store.persist([]) is True
    assert store.last_failure is None


async def test_read_failure_yields_empty_log() -> None:
    store = MessageStore(FailingStore(fail_reads=True))

    assert await store.load() == []
    assert isinstance(store.last_failure, PersistenceFailure)


async def test_corrupt_file_store_entry_yields_empty_log(tmp_path: Path) -> None:
    data_dir = tmp_path / "store"
    storage = create_storage(data_dir)
    await storage.set("conversation-log", b"[]")
    for entry in data_dir.iterdir():
        entry.write_bytes(b"\xff\x00garbage")

    store = MessageStore(storage)

    assert await store.load() == []
    assert isinstance(store.last_failure, PersistenceFailure)


class SlowFirstWriteStore(MemoryStore):
    """Memory store whose first write finishes after any later one."""

    def __init__(self) -> None:
        super().__init__()
        self.writes = 0

    async def set(self, key: str, value: str | bytes, expires_in: int | timedelta | None = None) -> None:
        self.writes += 1
        if self.writes == 1:
            await asyncio.sleep(0.05)
        await super().set(key, value, expires_in)


async def test_overlapping_mutations_persist_latest_log() -> None:
    storage = SlowFirstWriteStore()
    log = MessageLog(MessageStore(storage), SessionState(active_persona_id="helper"), user_avatar="me.png")

    await asyncio.gather(
        log.append(MessageDraft(sender="user", text="first")),
        log.append(MessageDraft(sender="bot", text="second")),
    )

    persisted = await MessageStore(storage).load()
    assert [m.text for m in persisted] == ["first", "second"]
    assert persisted == list(log.messages)
