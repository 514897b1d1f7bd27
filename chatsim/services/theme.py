"""Theme preference storage."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chatsim.schemas import Theme
from chatsim.services.base import KeyValueService

if TYPE_CHECKING:
    from litestar.stores.base import Store


class ThemeService(KeyValueService):
    """Persists the light/dark preference next to the conversation log."""

    __slots__ = ("key",)

    def __init__(self, storage: Store, key: str = "theme") -> None:
        super().__init__(storage)
        self.key = key

    async def get_theme(self) -> Theme:
        raw = await self.read(self.key)
        if raw is None:
            return Theme.LIGHT
        try:
            return Theme(raw.decode())
        except (UnicodeDecodeError, ValueError):
            return Theme.LIGHT

    async def set_theme(self, theme: Theme) -> Theme:
        await self.write(self.key, theme.value)
        return theme
