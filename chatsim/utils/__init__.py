from chatsim.utils import env, sync_tools

__all__ = ("env", "sync_tools")
