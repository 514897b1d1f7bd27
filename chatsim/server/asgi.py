from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from litestar import Litestar
    from litestar.stores.base import Store


def create_app(storage: Store | None = None) -> Litestar:
    """Create ASGI application."""

    from litestar import Litestar

    from chatsim.server.core import ApplicationCore

    return Litestar(plugins=[ApplicationCore(storage=storage)])
