from chatsim.lib import exceptions, log, media, personas, settings

__all__ = ("exceptions", "log", "media", "personas", "settings")
