from chatsim.cli.commands import chat_group

__all__ = ("chat_group",)
