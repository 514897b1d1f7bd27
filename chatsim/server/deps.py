"""Dependency providers for the chat services."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from litestar.stores.file import FileStore
from litestar.stores.memory import MemoryStore

from chatsim.lib.settings import get_settings
from chatsim.services.chat import ChatService
from chatsim.services.theme import ThemeService

if TYPE_CHECKING:
    from pathlib import Path

    from litestar.datastructures import State
    from litestar.stores.base import Store

logger = structlog.get_logger()


def create_storage(data_dir: Path | None = None) -> Store:
    """Create the file-backed key-value store holding the conversation.

    Falls back to an in-memory store when the data directory cannot be
    created, so the chat stays usable without durability.
    """
    path = data_dir or get_settings().storage.DATA_DIR
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning("Data directory unavailable, keeping the conversation in memory", path=str(path), error=str(e))
        return MemoryStore()
    return FileStore(path=path)


async def build_chat_service(storage: Store | None = None, data_dir: Path | None = None) -> ChatService:
    """Start a chat service outside the request cycle (lifespan, CLI).

    Args:
        storage: Store to use as is. When omitted, a file store under
            ``data_dir`` (or the configured data directory) is created.
        data_dir: Directory for the file store.

    Returns:
        The started service.
    """
    durable = True
    if storage is None:
        storage = create_storage(data_dir)
        durable = isinstance(storage, FileStore)
    return await ChatService.start(get_settings(), storage, durable=durable)


async def provide_chat_service(state: State) -> ChatService:
    """Provide the process-wide chat service started by the lifespan."""
    return state.chat_service


async def provide_theme_service(state: State) -> ThemeService:
    """Provide a theme service sharing the conversation's store."""
    return ThemeService(state.chat_storage, key=get_settings().storage.THEME_KEY)
